from iofxml.constants import DROPPED_NAME_TOKENS


def clean_name(name: str) -> str:
    """Turns an event or class name into a filename-safe token.

    Splits on whitespace, drops tokens that are only a separator character,
    joins with underscores and lower-cases. Separators inside a word are kept:
    "U-16 - Girls" becomes "u-16_girls".

    Args:
        name: Human-readable name from the WinSplits listing.

    Returns:
        The cleaned token (may be empty for an empty name).
    """
    tokens = [t for t in name.split() if t not in DROPPED_NAME_TOKENS]
    return "_".join(tokens).lower()


def result_filename(event_name: str, class_name: str) -> str:
    """Builds the download filename `<event>_<class>.xml`."""
    return f"{clean_name(event_name)}_{clean_name(class_name)}.xml"
