"""Merging of partial IOF XML result exports into one class result.

The first file is the base: its ClassResult receives, in order, the
PersonResult records of every supplement file. Records are moved as opaque
subtrees; nothing is deduplicated, so a competitor present in two
supplements appears twice in the output.
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

from iofxml.constants import PERSON_RESULT
from iofxml.exceptions import ArgumentError, StructureError
from iofxml.models import ResultDocument

logger = structlog.get_logger(__name__)


class ClassResultMerger:
    """Appends PersonResult records from supplement files to a base file."""

    def merge(
        self, base_path: str | Path, supplement_paths: Sequence[str | Path]
    ) -> ResultDocument:
        """Merges the supplements into the base document.

        Args:
            base_path: File providing the ClassResult container.
            supplement_paths: Files whose PersonResult records are appended,
                in this order.

        Returns:
            The mutated base document, not yet written anywhere.

        Raises:
            ArgumentError: If no supplement is given.
            ParseError: If any file is not well-formed XML.
            StructureError: If the base has no ClassResult or a supplement
                has no PersonResult.
        """
        if not supplement_paths:
            raise ArgumentError(
                "At least one file to merge into the base file is required.",
                parameter="inputs",
            )

        base = ResultDocument.load(base_path)
        container = base.find_class_result_container()
        base_count = len(base.find_person_result_records())
        logger.info("merge_base_loaded", path=str(base_path), records=base_count)

        total = base_count
        for path in supplement_paths:
            supplement = ResultDocument.load(path)
            records = supplement.find_person_result_records()
            if not records:
                raise StructureError(
                    f"No {PERSON_RESULT} tag in {path} file.",
                    source=str(path),
                    element=PERSON_RESULT,
                )

            base.append_records(container, records)
            total += len(records)
            logger.info("merge_file_appended", path=str(path), records=len(records))

        logger.info(
            "merge_completed", files=len(supplement_paths) + 1, records=total
        )
        return base


def merge_files(inputs: Sequence[str | Path], output: str | Path) -> ResultDocument:
    """Merges `inputs` (base first) and writes the result to `output`.

    The output file is only created once every input merged successfully.
    """
    if len(inputs) < 2:
        raise ArgumentError(
            "merge requires at least 2 input files and 1 output file",
            parameter="inputs",
            expected_format="<input1> <input2> [input3...] <output>",
            example="iofxml merge file1.xml file2.xml output.xml",
        )

    merged = ClassResultMerger().merge(inputs[0], inputs[1:])
    merged.write(output)
    return merged
