from abc import ABC, abstractmethod
from datetime import date

from iofxml.models import CatalogEntry


class BaseCatalog(ABC):
    """Abstract base class for remote result catalogs."""

    @abstractmethod
    def list_events(self, day: date) -> list[CatalogEntry]:
        """Fetches the events held on the given day.

        Args:
            day: Calendar date to list events for.

        Returns:
            Events in listing order.
        """

    @abstractmethod
    def list_classes(self, event_id: str) -> list[CatalogEntry]:
        """Fetches the classes of one event.

        Args:
            event_id: Id of an event returned by list_events.

        Returns:
            Classes in listing order.
        """
