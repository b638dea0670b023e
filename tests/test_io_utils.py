from __future__ import annotations

import io

import pytest

from json_schema_relations.io_utils import JsonInputError, coerce_records, parse_json_text, read_json_content


def test_read_from_path_and_file_like(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('[{"id": 1}]', encoding="utf-8")

    assert read_json_content(str(path)) == [{"id": 1}]
    assert read_json_content(io.BytesIO(b'{"id": 2}')) == {"id": 2}


def test_object_with_name_attribute(tmp_path):
    path = tmp_path / "upload.json"
    path.write_text('{"a": null}', encoding="utf-8")

    class Upload:
        name = str(path)

    assert read_json_content(Upload()) == {"a": None}


@pytest.mark.parametrize("reader, arg", [(read_json_content, None), (parse_json_text, "  "), (parse_json_text, "{oops")])
def test_bad_input_raises_json_input_error(reader, arg):
    with pytest.raises(JsonInputError):
        reader(arg)


def test_missing_file_raises_json_input_error(tmp_path):
    with pytest.raises(JsonInputError):
        read_json_content(str(tmp_path / "missing.json"))


def test_coerce_records():
    assert coerce_records([1, 2]) == [1, 2]
    assert coerce_records({"id": 1}) == [{"id": 1}]
    assert coerce_records(None) == [None]


def test_deeply_nested_text_is_rejected():
    with pytest.raises(JsonInputError, match="nested too deeply"):
        parse_json_text("[" * 100000 + "]" * 100000)
