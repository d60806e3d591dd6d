"""Tests for CSV / JSON / TXT to Mermaid conversion."""

import pytest

from mermaid_mcp.converter import convert_csv, convert_file, convert_json, convert_txt
from mermaid_mcp.errors import ParseError
from mermaid_mcp.models import FileType


# ===================================================================
# CSV
# ===================================================================


class TestCsv:
    def test_records_and_chain(self) -> None:
        result = convert_csv("name,age\nJohn,30\nJane,25")
        assert result.structured == [
            {"name": "John", "age": "30"},
            {"name": "Jane", "age": "25"},
        ]
        assert result.source_text == (
            "flowchart TD\n"
            '    Node0["John, 30"]\n'
            "    Node0 --> Node1\n"
            '    Node1["Jane, 25"]'
        )
        assert result.source_text.count("-->") == 1

    def test_blank_lines_skipped(self) -> None:
        result = convert_csv("name,age\n\nJohn,30\n\n")
        assert result.structured == [{"name": "John", "age": "30"}]

    def test_values_stay_strings(self) -> None:
        result = convert_csv("id,flag\n007,NA\n")
        assert result.structured == [{"id": "007", "flag": "NA"}]

    def test_quoted_fields(self) -> None:
        result = convert_csv('name,quote\nAnn,"hello, world"\n')
        assert result.structured == [{"name": "Ann", "quote": "hello, world"}]
        assert 'Node0["Ann, hello, world"]' in result.source_text

    def test_header_only_has_no_nodes(self) -> None:
        result = convert_csv("name,age\n")
        assert result.structured == []
        assert result.source_text == "flowchart TD"

    def test_no_columns(self) -> None:
        with pytest.raises(ParseError, match="Failed to parse csv file"):
            convert_csv("\n\n")

    def test_label_escaped(self) -> None:
        result = convert_csv('item\n"say ""hi"""\n')
        assert 'Node0["say #34;hi#34;"]' in result.source_text

    def test_row_wider_than_header(self) -> None:
        with pytest.raises(ParseError, match="more fields than the header"):
            convert_csv("a,b\n1,2,3\n")


# ===================================================================
# JSON
# ===================================================================


class TestJson:
    def test_array_chain(self) -> None:
        result = convert_json('[1, "two", null, true]')
        assert result.structured == [1, "two", None, True]
        assert '    Node0["1"]' in result.source_text
        assert '    Node1["two"]' in result.source_text
        assert '    Node2["null"]' in result.source_text
        assert '    Node3["true"]' in result.source_text
        assert result.source_text.count("-->") == 3

    def test_object_elements_compact_and_escaped(self) -> None:
        result = convert_json('[{"a": 1}]')
        assert result.source_text == 'flowchart TD\n    Node0["#123;#34;a#34;:1#125;"]'

    def test_object_label_truncated(self) -> None:
        result = convert_json('[{"key": "' + "x" * 100 + '"}]')
        label_line = result.source_text.splitlines()[1]
        assert "x" * 42 in label_line
        assert "x" * 43 not in label_line

    def test_object_to_class_diagram(self) -> None:
        result = convert_json('{"name": "x", "user id": 1}')
        assert result.structured == {"name": "x", "user id": 1}
        assert result.source_text == (
            "classDiagram\n"
            "    class name {\n"
            "        +name\n"
            "    }\n"
            "    class userid {\n"
            "        +userid\n"
            "    }"
        )

    def test_scalar_is_empty_diagram(self) -> None:
        result = convert_json("42")
        assert result.structured == 42
        assert result.source_text == "flowchart TD"

    def test_empty_array(self) -> None:
        assert convert_json("[]").source_text == "flowchart TD"

    @pytest.mark.parametrize("content", ["[NaN]", "[1, Infinity]", '{"x": -Infinity}'])
    def test_non_finite_constants_rejected(self, content: str) -> None:
        with pytest.raises(ParseError) as excinfo:
            convert_json(content)
        assert "is not valid JSON" in excinfo.value.message

    def test_malformed(self) -> None:
        with pytest.raises(ParseError) as excinfo:
            convert_json("{not json")
        assert excinfo.value.file_type == "json"
        assert excinfo.value.message.startswith("Failed to parse json file:")


# ===================================================================
# TXT
# ===================================================================


class TestTxt:
    def test_lines_chain(self) -> None:
        result = convert_txt("first\n\nsecond\nthird\n")
        assert result.structured == {"lines": ["first", "second", "third"]}
        assert result.source_text == (
            "flowchart TD\n"
            '    A0["first"]\n'
            "    A0 --> A1\n"
            '    A1["second"]\n'
            "    A1 --> A2\n"
            '    A2["third"]'
        )

    def test_arrow_line(self) -> None:
        result = convert_txt("Steps:\nStart -> Middle -> End\nA -> B")
        assert result.source_text == (
            "flowchart TD\n"
            '    A0["Start"]\n'
            "    A0 --> A1\n"
            '    A1["Middle"]\n'
            "    A1 --> A2\n"
            '    A2["End"]'
        )
        assert result.structured["lines"][0] == "Steps:"


# ===================================================================
# Dispatch
# ===================================================================


def test_convert_file_accepts_enum_and_string() -> None:
    assert convert_file("a\nb", FileType.TXT) == convert_file("a\nb", "txt")


def test_convert_file_case_insensitive() -> None:
    assert convert_file("[1]", "JSON").structured == [1]


def test_convert_file_unsupported_type() -> None:
    with pytest.raises(ParseError, match="Unsupported file type: xml"):
        convert_file("<a/>", "xml")
