from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import structlog
from lxml import etree

from iofxml import xml_tree
from iofxml.constants import DATE_FORMAT, LISTING_HEADERS, WINSPLITS_URL
from iofxml.exceptions import StructureError
from iofxml.models import CatalogEntry
from iofxml.scraper import Scraper
from iofxml.sources.base import BaseCatalog
from iofxml.utils.files import atomic_output

logger = structlog.get_logger(__name__)


def parse_catalog(data: bytes | str, entry_tag: str, source: str) -> list[CatalogEntry]:
    """Parses an Event or Class listing.

    Every `entry_tag` element must have non-empty Id and Name children. The
    first incomplete entry fails the whole listing.

    Args:
        data: Listing XML.
        entry_tag: "Event" or "Class".
        source: URL the listing came from, for error messages.

    Returns:
        Entries in document order.

    Raises:
        ParseError: If the listing is not well-formed XML.
        StructureError: On the first entry missing Id or Name.
    """
    root = xml_tree.parse(data, source).getroot()
    return [
        CatalogEntry(
            id=_required_text(element, "Id", entry_tag),
            name=_required_text(element, "Name", entry_tag),
        )
        for element in xml_tree.iter_local(root, entry_tag)
    ]


def _required_text(element: etree._Element, field: str, entry_tag: str) -> str:
    child = xml_tree.find_local(element, field)
    if child is None:
        raise StructureError(
            f"No {field} tag in {entry_tag}.", source=entry_tag, element=field
        )

    value = xml_tree.text_of(child)
    if not value:
        raise StructureError(
            f"No {field} in {entry_tag}.",
            source=entry_tag,
            element=field,
            suggestion=f"The {entry_tag} listing has an empty <{field}> element.",
        )
    return value


class WinsplitsCatalog(BaseCatalog):
    """Event and class listings of the WinSplits results service."""

    def __init__(self, base_url: str = WINSPLITS_URL, scraper: Scraper | None = None):
        """Initializes the catalog.

        Args:
            base_url: WinSplits endpoint.
            scraper: An optional shared Scraper instance.
        """
        self.base_url = base_url
        self.scraper = scraper or Scraper()

    def list_events(self, day: date) -> list[CatalogEntry]:
        params = {"date": day.strftime(DATE_FORMAT)}
        response = self.scraper.get(
            self.base_url, params=params, headers=LISTING_HEADERS
        )
        events = parse_catalog(response.content, "Event", self.base_url)
        logger.info("events_found", count=len(events), date=params["date"])
        return events

    def list_classes(self, event_id: str) -> list[CatalogEntry]:
        params = {"id": event_id}
        response = self.scraper.get(
            self.base_url, params=params, headers=LISTING_HEADERS
        )
        classes = parse_catalog(response.content, "Class", self.base_url)
        logger.info("classes_found", count=len(classes), event_id=event_id)
        return classes


class ResultFetcher:
    """Downloads the IOF XML result file of one class."""

    def __init__(self, base_url: str = WINSPLITS_URL, scraper: Scraper | None = None):
        self.base_url = base_url
        self.scraper = scraper or Scraper()

    @contextmanager
    def fetch(self, event_id: str, class_id: str) -> Iterator[Iterator[bytes]]:
        """Opens the result file as a stream of byte chunks.

        Raises:
            NetworkError: If the request fails or returns a non-success status.
        """
        params = {"id": event_id, "classid": class_id}
        with self.scraper.stream(self.base_url, params=params) as chunks:
            yield chunks

    def download(self, event_id: str, class_id: str, destination: str | Path) -> int:
        """Streams the result file into `destination`.

        The file only appears once the whole body has been received; a
        failure mid-stream leaves no file behind.

        Returns:
            Number of bytes written.
        """
        written = 0
        with self.fetch(event_id, class_id) as chunks, atomic_output(destination) as f:
            for chunk in chunks:
                f.write(chunk)
                written += len(chunk)

        logger.info(
            "result_downloaded",
            event_id=event_id,
            class_id=class_id,
            path=str(destination),
            bytes=written,
        )
        return written
