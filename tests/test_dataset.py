from pathlib import Path

import pytest

from deltapack.records import DatasetFormatError, parse_dataset, read_dataset
from deltapack.records.dataset import detect_delimiter, normalize_field, split_line


def test_parse_tsv_with_header_selects_columns_by_name() -> None:
    text = (
        "entity_type\tentity_reference_id\tentity_representation\n"
        'Person\t42\t{"name": "Ann", "report_id": "r-1"}\n'
    )

    dataset = parse_dataset(text, label="ETL")

    record = dataset.records["42"]
    assert dataset.order == ["42"]
    assert record.entity_type == "Person"
    assert record.parsed == {"name": "Ann"}
    assert record.pretty == '{\n  "name": "Ann"\n}'
    assert dataset.errors == []


def test_parse_csv_without_header_uses_positions() -> None:
    text = '7,Order,"{""total"": 10, ""at"": ""2024-01-01T00:00:00.000Z""}"\r\n'

    dataset = parse_dataset(text, label="Mule")

    assert dataset.records["7"].parsed == {"total": 10, "at": "2024-01-01T00:00:00"}


def test_parse_collects_row_problems() -> None:
    text = "\n".join(
        [
            "entity_reference_id,entity_type,entity_representation",
            "1,Person",
            ',Person,"{}"',
            '2,Person,"{""a"": 1}"',
            '2,Person,"{""a"": 2}"',
        ]
    )

    dataset = parse_dataset(text, label="ETL")

    assert dataset.errors == [
        "ETL: Line 2 has fewer than 3 columns.",
        "ETL: Line 3 is missing an entity_reference_id.",
        "ETL: Duplicate entity_reference_id '2' detected; keeping the latest entry.",
    ]
    assert dataset.records["2"].parsed == {"a": 2}
    assert dataset.order == ["2"]


def test_parse_records_invalid_json_as_parse_error() -> None:
    dataset = parse_dataset("1\tPerson\t{not json}\n", label="ETL")

    record = dataset.records["1"]
    assert record.is_valid is False
    assert record.parse_error
    assert record.pretty == "{not json}"


def test_blank_input_yields_empty_dataset() -> None:
    dataset = parse_dataset("  \n\n", label="ETL")

    assert dataset.records == {}
    assert dataset.errors == []


def test_missing_entity_type_uses_placeholder() -> None:
    dataset = parse_dataset('1\t\t{"a": 1}\n', label="ETL")

    assert dataset.records["1"].entity_type == "—"


def test_delimiter_detection_prefers_tabs_on_ties() -> None:
    assert detect_delimiter(["a\tb,c"]) == "\t"
    assert detect_delimiter(["a,b,c\td"]) == ","
    assert detect_delimiter(["", "a b"]) == "\t"


def test_split_and_normalize_fields() -> None:
    assert split_line('a,"b,""c""",d', ",") == ["a", 'b,"c"', "d"]
    assert split_line("a\t\"b\"\tc", "\t") == ["a", '"b"', "c"]
    assert normalize_field('  "say ""hi"""  ') == 'say "hi"'
    assert normalize_field(" plain ") == "plain"


def test_read_dataset_uses_file_name_as_label(tmp_path: Path) -> None:
    path = tmp_path / "etl.tsv"
    path.write_text("1\tPerson\n", encoding="utf-8")

    dataset = read_dataset(path)

    assert dataset.label == "etl.tsv"
    assert dataset.errors == ["etl.tsv: Line 1 has fewer than 3 columns."]


def test_read_dataset_rejects_binary(tmp_path: Path) -> None:
    path = tmp_path / "etl.tsv"
    path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(DatasetFormatError, match="not UTF-8"):
        read_dataset(path)
