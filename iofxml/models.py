from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog
from lxml import etree

from iofxml import xml_tree
from iofxml.constants import CLASS_RESULT, PERSON_RESULT
from iofxml.exceptions import StructureError
from iofxml.utils.files import atomic_output

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """An event or class offered by a WinSplits listing.

    Both fields are non-empty; listings with incomplete entries are rejected
    as a whole by the parser instead of producing partial entries.
    """

    id: str
    name: str


class ResultDocument:
    """Domain view over a parsed IOF XML result file.

    The document owns its element tree. Records appended from another
    document are detached from that document first, so an element never
    belongs to two trees.
    """

    def __init__(self, tree: etree._ElementTree, source: str):
        self.tree = tree
        self.source = source

    @classmethod
    def parse(cls, data: bytes | str, source: str) -> "ResultDocument":
        """Parses a result document from raw XML.

        Raises:
            ParseError: If the text is not well-formed XML.
        """
        return cls(xml_tree.parse(data, source), source)

    @classmethod
    def load(cls, path: str | Path) -> "ResultDocument":
        """Parses a result document from a file."""
        return cls(xml_tree.parse_file(path), str(path))

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()

    def find_class_result_container(self) -> etree._Element:
        """Returns the first ClassResult element in document order.

        Raises:
            StructureError: If the document has no ClassResult element.
        """
        container = next(xml_tree.iter_local(self.root, CLASS_RESULT), None)
        if container is None:
            raise StructureError(
                f"No {CLASS_RESULT} tag in {self.source} file.",
                source=self.source,
                element=CLASS_RESULT,
            )
        return container

    def find_person_result_records(self) -> list[etree._Element]:
        """Returns all PersonResult elements in document order (may be empty)."""
        return list(xml_tree.iter_local(self.root, PERSON_RESULT))

    def append_records(
        self, container: etree._Element, records: Iterable[etree._Element]
    ) -> None:
        """Moves `records` to the end of `container`, keeping their order.

        Each record is removed from its current parent before it is appended.
        """
        for record in records:
            parent = record.getparent()
            if parent is not None:
                parent.remove(record)
            container.append(record)

    def serialize_bytes(self) -> bytes:
        return xml_tree.serialize(self.tree)

    def serialize(self) -> str:
        """Returns the current tree, mutations included, as XML text."""
        return self.serialize_bytes().decode("utf-8")

    def write(self, path: str | Path) -> None:
        """Writes the document to `path` in one step."""
        with atomic_output(path) as f:
            f.write(self.serialize_bytes())
        logger.info("document_written", path=str(path), source=self.source)
