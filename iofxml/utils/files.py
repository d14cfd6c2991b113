import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import structlog

logger = structlog.get_logger(__name__)


def _default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@contextmanager
def atomic_output(path: str | Path) -> Iterator[BinaryIO]:
    """Opens a temporary file next to `path` and renames it into place on exit.

    If the block raises, the temporary file is removed and `path` is left
    untouched, so readers never see a partially written result file.

    Args:
        path: Final destination of the file.

    Yields:
        A binary file handle to write to.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".part", dir=destination.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            yield f
        # mkstemp creates the file owner-only.
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        logger.debug("partial_output_removed", path=str(destination))
        raise
    logger.debug("output_written", path=str(destination))
