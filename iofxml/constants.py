import os

# WinSplits endpoint serving event listings, class listings and IOF XML
# result files depending on the query parameters.
WINSPLITS_URL = os.environ.get(
    "IOFXML_WINSPLITS_URL", "https://obasen.orientering.se/winsplits/api/events"
)

# The listing endpoints only answer requests coming from the 2DRerun viewer.
LISTING_HEADERS = {"Referer": "http://loggator2.worldofo.com"}

DATE_FORMAT = "%Y-%m-%d"

# Whitespace-separated tokens dropped when building filenames.
DROPPED_NAME_TOKENS = frozenset({"-", "_", '"', "'"})

# IOF XML element names used by the merge.
CLASS_RESULT = "ClassResult"
PERSON_RESULT = "PersonResult"
