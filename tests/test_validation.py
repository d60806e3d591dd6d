"""Tests for tool-argument validation."""

import pytest

from mermaid_mcp.errors import INVALID_PARAMS, SchemaError
from mermaid_mcp.registry import GENERATE_DIAGRAM, PARSE_FILE
from mermaid_mcp.validation import (
    ValidationError,
    validate_arguments,
    validate_dict,
    validate_enum,
    validate_non_empty_string,
    validate_string,
)


# ===================================================================
# Unit tests for primitive validators
# ===================================================================


class TestValidateNonEmptyString:
    def test_valid(self) -> None:
        assert validate_non_empty_string("hello", "f") == "hello"

    def test_strips_whitespace(self) -> None:
        assert validate_non_empty_string("  hi  ", "f") == "hi"

    def test_empty_string(self) -> None:
        with pytest.raises(ValidationError, match="non-empty"):
            validate_non_empty_string("", "field")

    def test_whitespace_only(self) -> None:
        with pytest.raises(ValidationError, match="non-empty"):
            validate_non_empty_string(" \n\t ", "field")

    def test_not_a_string(self) -> None:
        with pytest.raises(ValidationError, match="non-empty"):
            validate_non_empty_string(123, "field")


class TestValidateString:
    def test_valid(self) -> None:
        assert validate_string("", "f") == ""

    def test_disallow_empty(self) -> None:
        with pytest.raises(ValidationError, match="must not be empty"):
            validate_string("  ", "f", allow_empty=False)

    def test_wrong_type(self) -> None:
        with pytest.raises(ValidationError, match="got list"):
            validate_string([], "f")


class TestValidateEnum:
    def test_valid(self) -> None:
        assert validate_enum("csv", "file_type", ["csv", "json"]) == "csv"

    def test_case_sensitive(self) -> None:
        with pytest.raises(ValidationError, match="must be one of"):
            validate_enum("CSV", "file_type", ["csv", "json"])

    def test_lists_choices(self) -> None:
        with pytest.raises(ValidationError, match=r"\[csv, json\]"):
            validate_enum("xml", "file_type", ["csv", "json"])

    def test_not_a_string(self) -> None:
        with pytest.raises(ValidationError, match="must be a string"):
            validate_enum(1, "file_type", ["csv"])


class TestValidateDict:
    def test_valid(self) -> None:
        assert validate_dict({"a": 1}, "d") == {"a": 1}

    def test_invalid(self) -> None:
        with pytest.raises(ValidationError, match="dict/object"):
            validate_dict("nope", "d")


# ===================================================================
# Schema validation
# ===================================================================


class TestValidateArguments:
    def test_generate_diagram_minimal(self) -> None:
        args = validate_arguments({"text": "hello"}, GENERATE_DIAGRAM.input_schema)
        assert args == {"text": "hello"}

    def test_generate_diagram_with_type(self) -> None:
        args = validate_arguments(
            {"text": "hello", "diagramType": "pie"}, GENERATE_DIAGRAM.input_schema
        )
        assert args["diagramType"] == "pie"

    def test_unknown_keys_dropped(self) -> None:
        args = validate_arguments({"text": "x", "extra": 1}, GENERATE_DIAGRAM.input_schema)
        assert "extra" not in args

    def test_null_optional_treated_as_absent(self) -> None:
        args = validate_arguments(
            {"text": "x", "diagramType": None}, GENERATE_DIAGRAM.input_schema
        )
        assert args == {"text": "x"}

    def test_empty_text(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments({"text": ""}, GENERATE_DIAGRAM.input_schema)
        assert excinfo.value.violations == [
            {"path": "text", "message": "'text' must be a non-empty string."}
        ]
        assert excinfo.value.code == INVALID_PARAMS

    def test_missing_required(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments({}, GENERATE_DIAGRAM.input_schema)
        assert excinfo.value.violations[0]["path"] == "text"
        assert "required" in excinfo.value.violations[0]["message"]

    def test_bad_enum(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments(
                {"text": "x", "diagramType": "mindmap"}, GENERATE_DIAGRAM.input_schema
            )
        assert excinfo.value.violations[0]["path"] == "diagramType"

    def test_collects_all_violations(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments({"file_type": "xml"}, PARSE_FILE.input_schema)
        paths = sorted(v["path"] for v in excinfo.value.violations)
        assert paths == ["file_content", "file_type"]

    def test_none_arguments_means_empty(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments(None, PARSE_FILE.input_schema)
        assert len(excinfo.value.violations) == 2

    def test_required_string_not_stripped(self) -> None:
        args = validate_arguments(
            {"file_content": "a,b\n1,2  \n", "file_type": "csv"}, PARSE_FILE.input_schema
        )
        assert args["file_content"] == "a,b\n1,2  \n"

    def test_non_object_arguments(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments(["text"], GENERATE_DIAGRAM.input_schema)
        assert excinfo.value.violations[0]["path"] == "arguments"

    def test_error_data_is_violation_list(self) -> None:
        with pytest.raises(SchemaError) as excinfo:
            validate_arguments({"text": 5}, GENERATE_DIAGRAM.input_schema)
        error = excinfo.value.to_error()
        assert error["code"] == INVALID_PARAMS
        assert error["data"] == excinfo.value.violations
