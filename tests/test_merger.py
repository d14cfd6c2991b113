from pathlib import Path
from unittest.mock import patch

import pytest

from iofxml import xml_tree
from iofxml.exceptions import ArgumentError, ParseError, StructureError
from iofxml.merger import ClassResultMerger, merge_files
from iofxml.models import ResultDocument


def family_names(doc: ResultDocument) -> list[str]:
    return [
        xml_tree.text_of(xml_tree.find_local(record, "Family"))
        for record in doc.find_person_result_records()
    ]


@pytest.fixture
def merger() -> ClassResultMerger:
    return ClassResultMerger()


def test_merge_appends_supplement_after_base(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    """base.xml has 3 results and extra.xml 2: output has 5, base first."""
    merged = merger.merge(test_data_dir / "base.xml", [test_data_dir / "extra.xml"])

    assert family_names(merged) == ["Andersson", "Berg", "Carlsson", "Dahl", "Ek"]


def test_merge_keeps_supplement_order(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    merged = merger.merge(
        test_data_dir / "base.xml",
        [test_data_dir / "single.xml", test_data_dir / "extra.xml"],
    )

    assert family_names(merged) == [
        "Andersson",
        "Berg",
        "Carlsson",
        "Fors",
        "Dahl",
        "Ek",
    ]


def test_merge_records_land_in_class_result(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    merged = merger.merge(test_data_dir / "base.xml", [test_data_dir / "extra.xml"])
    container = merged.find_class_result_container()

    for record in merged.find_person_result_records():
        assert record.getparent() is container


def test_merge_does_not_deduplicate(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    extra = test_data_dir / "extra.xml"
    merged = merger.merge(test_data_dir / "base.xml", [extra, extra])

    assert family_names(merged)[3:] == ["Dahl", "Ek", "Dahl", "Ek"]


def test_merge_leaves_record_content_unchanged(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    extra = ResultDocument.load(test_data_dir / "extra.xml")
    expected = [
        xml_tree.text_of(r) for r in extra.find_person_result_records()
    ]

    merged = merger.merge(test_data_dir / "base.xml", [test_data_dir / "extra.xml"])
    actual = [xml_tree.text_of(r) for r in merged.find_person_result_records()[3:]]

    assert actual == expected


def test_merge_into_base_without_records(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    merged = merger.merge(
        test_data_dir / "no_person_result.xml", [test_data_dir / "extra.xml"]
    )
    assert family_names(merged) == ["Dahl", "Ek"]


def test_base_without_class_result_fails_before_reading_supplements(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    with patch.object(ResultDocument, "load", wraps=ResultDocument.load) as load:
        with pytest.raises(StructureError) as exc_info:
            merger.merge(
                test_data_dir / "no_class_result.xml",
                [test_data_dir / "extra.xml"],
            )

    assert exc_info.value.element == "ClassResult"
    assert load.call_count == 1


def test_supplement_without_person_result_names_the_file(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    bad = test_data_dir / "no_person_result.xml"

    with pytest.raises(StructureError) as exc_info:
        merger.merge(test_data_dir / "base.xml", [test_data_dir / "extra.xml", bad])

    assert exc_info.value.source == str(bad)
    assert str(bad) in str(exc_info.value)
    assert exc_info.value.element == "PersonResult"


def test_malformed_supplement_is_a_parse_error(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    with pytest.raises(ParseError):
        merger.merge(test_data_dir / "base.xml", [test_data_dir / "truncated.xml"])


def test_merge_requires_a_supplement(
    merger: ClassResultMerger, test_data_dir: Path
) -> None:
    with pytest.raises(ArgumentError):
        merger.merge(test_data_dir / "base.xml", [])


def test_merge_files_writes_output(test_data_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "merged.xml"

    merge_files([test_data_dir / "base.xml", test_data_dir / "extra.xml"], output)

    assert len(ResultDocument.load(output).find_person_result_records()) == 5


def test_merge_files_writes_nothing_on_failure(
    test_data_dir: Path, tmp_path: Path
) -> None:
    output = tmp_path / "merged.xml"

    with pytest.raises(StructureError):
        merge_files(
            [test_data_dir / "base.xml", test_data_dir / "no_person_result.xml"],
            output,
        )

    assert list(tmp_path.iterdir()) == []


def test_merge_files_needs_two_inputs(test_data_dir: Path, tmp_path: Path) -> None:
    with pytest.raises(ArgumentError):
        merge_files([test_data_dir / "base.xml"], tmp_path / "merged.xml")
