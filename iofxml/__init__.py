"""iofxml - IOF XML split time tools.

Downloads class results from WinSplits and merges partial IOF XML 3.0
result exports into a single per-class result file.
"""

__version__ = "0.1.0"
