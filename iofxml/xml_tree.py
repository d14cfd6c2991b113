"""Thin lxml layer shared by the result model and the WinSplits listings.

IOF XML 3.0 exports declare a default namespace while WinSplits listings
and older exports use none, so every lookup here matches on local name only.
"""

from collections.abc import Iterator
from io import BytesIO
from pathlib import Path

from lxml import etree

from iofxml.exceptions import ParseError


def _new_parser(encoding: str | None = None) -> etree.XMLParser:
    """Builds a parser for a single document."""
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def parse(data: bytes | str, source: str) -> etree._ElementTree:
    """Parses XML text into a mutable element tree.

    Args:
        data: Raw bytes as read from disk or network, or decoded text.
        source: Label (file path or URL) used in error messages.

    Returns:
        The parsed element tree.

    Raises:
        ParseError: If the text is not well-formed XML.
    """
    encoding = None
    if isinstance(data, str):
        # A decoded string may still carry a non UTF-8 encoding declaration.
        data = data.encode("utf-8")
        encoding = "utf-8"

    try:
        return etree.parse(BytesIO(data), _new_parser(encoding))
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        raise ParseError(
            f"Invalid XML in {source}: {e.msg}",
            source=source,
            line=line,
            column=column,
        ) from e


def parse_file(path: str | Path) -> etree._ElementTree:
    """Parses an XML file from disk. See :func:`parse`."""
    return parse(Path(path).read_bytes(), str(path))


def _wildcard(name: str) -> str:
    return f"{{*}}{name}"


def iter_local(node: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yields elements named `name` in document order, `node` included."""
    return node.iter(_wildcard(name))


def find_local(node: etree._Element, name: str) -> etree._Element | None:
    """Returns the first descendant named `name`, or None."""
    return next(node.iterdescendants(_wildcard(name)), None)


def text_of(node: etree._Element) -> str:
    """Returns the stripped text content of an element and its descendants."""
    return "".join(node.itertext()).strip()


def serialize(tree: etree._ElementTree) -> bytes:
    """Serializes a tree to UTF-8 with an XML declaration."""
    return etree.tostring(tree, xml_declaration=True, encoding="UTF-8")
