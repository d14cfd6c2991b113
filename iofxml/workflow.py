"""Interactive download of one class result from WinSplits.

The workflow is a linear state machine:

    SELECTING_EVENT -> SELECTING_CLASS -> DOWNLOADING -> DONE

Declining a selection moves to CANCELLED from either selection state
without any further request or file write. Any error moves to FAILED and is
re-raised to the caller.
"""

from collections.abc import Callable, Sequence
from datetime import date
from enum import Enum
from pathlib import Path

import structlog

from iofxml.exceptions import StructureError, UserCancellation
from iofxml.models import CatalogEntry
from iofxml.sources.base import BaseCatalog
from iofxml.sources.winsplits import ResultFetcher
from iofxml.utils.names import result_filename

logger = structlog.get_logger(__name__)

# Shows `entries` under `message` and returns the picked one, or None when
# the operator cancels.
Selector = Callable[[str, Sequence[CatalogEntry]], CatalogEntry | None]


class WorkflowState(Enum):
    SELECTING_EVENT = "selecting_event"
    SELECTING_CLASS = "selecting_class"
    DOWNLOADING = "downloading"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


class DownloadWorkflow:
    """Resolves an event and a class, then downloads their result file."""

    def __init__(
        self,
        catalog: BaseCatalog,
        fetcher: ResultFetcher,
        select: Selector,
        output_dir: str | Path = ".",
    ):
        self.catalog = catalog
        self.fetcher = fetcher
        self.select = select
        self.output_dir = Path(output_dir)
        self.state = WorkflowState.SELECTING_EVENT
        self.event: CatalogEntry | None = None
        self.class_: CatalogEntry | None = None

    def _transition(self, state: WorkflowState) -> None:
        logger.debug("workflow_transition", source=self.state.value, target=state.value)
        self.state = state

    def _choose(
        self, message: str, entries: list[CatalogEntry], context: str
    ) -> CatalogEntry:
        if not entries:
            raise StructureError(
                f"No {context} found to pick from.",
                source=context,
                element=context,
                suggestion="Try another date or event.",
            )

        choice = self.select(message, entries)
        if choice is None:
            self._transition(WorkflowState.CANCELLED)
            raise UserCancellation(stage=context)
        return choice

    def run(self, day: date) -> Path:
        """Runs the workflow for events held on `day`.

        Returns:
            Path of the downloaded result file.

        Raises:
            UserCancellation: If the operator declines a selection.
            NetworkError, ParseError, StructureError: On any failed step.
        """
        self.state = WorkflowState.SELECTING_EVENT
        try:
            self.event = self._choose(
                "Pick an event", self.catalog.list_events(day), "Event"
            )

            self._transition(WorkflowState.SELECTING_CLASS)
            self.class_ = self._choose(
                "Pick a class", self.catalog.list_classes(self.event.id), "Class"
            )

            self._transition(WorkflowState.DOWNLOADING)
            destination = self.output_dir / result_filename(
                self.event.name, self.class_.name
            )
            self.fetcher.download(self.event.id, self.class_.id, destination)
        except UserCancellation:
            raise
        except Exception:
            self._transition(WorkflowState.FAILED)
            raise

        self._transition(WorkflowState.DONE)
        return destination
