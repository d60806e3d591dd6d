"""
File-to-diagram conversion.

Turns uploaded CSV, JSON or plain-text content into Mermaid source plus a
structured representation of what was parsed.  CSV goes through pandas,
JSON through the standard ``json`` module.
"""

from __future__ import annotations

import io
import json
import warnings
from typing import Any, Union

import pandas as pd

from mermaid_mcp.errors import ParseError
from mermaid_mcp.generator import (
    INDENT,
    chain_flowchart,
    has_arrow,
    non_blank_lines,
    split_arrows,
    to_identifier,
)
from mermaid_mcp.models import FileType, ParsedFileResult

# Max characters of a serialized JSON element used as a node label.
JSON_LABEL_LIMIT = 50


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def _parse_csv(content: str) -> list[dict[str, str]]:
    try:
        with warnings.catch_warnings():
            # Rows wider than the header would otherwise be truncated silently.
            warnings.simplefilter("error", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.StringIO(content),
                dtype=str,
                keep_default_na=False,
                index_col=False,
                skip_blank_lines=True,
            )
    except pd.errors.EmptyDataError as exc:
        raise ParseError("csv", "no columns to parse") from exc
    except pd.errors.ParserWarning as exc:
        raise ParseError("csv", "row has more fields than the header") from exc
    except (pd.errors.ParserError, ValueError, UnicodeError) as exc:
        raise ParseError("csv", str(exc)) from exc
    return frame.to_dict(orient="records")


def convert_csv(content: str) -> ParsedFileResult:
    records = _parse_csv(content)
    labels = [", ".join(str(v) for v in row.values()) for row in records]
    return ParsedFileResult(source_text=chain_flowchart(labels, "Node"), structured=records)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _json_label(item: Any) -> str:
    """Label for one array element: raw strings, compact JSON otherwise."""
    if isinstance(item, str):
        return item
    if isinstance(item, (dict, list)):
        return json.dumps(item, separators=(",", ":"), ensure_ascii=False)[:JSON_LABEL_LIMIT]
    return json.dumps(item)


def _object_class_diagram(data: dict[str, Any]) -> str:
    lines = ["classDiagram"]
    for index, key in enumerate(data):
        member = to_identifier(key, f"field{index}")
        lines.append(f"{INDENT}class {to_identifier(key, f'Class{index}')} {{")
        lines.append(f"{INDENT}{INDENT}+{member}")
        lines.append(f"{INDENT}}}")
    return "\n".join(lines)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def convert_json(content: str) -> ParsedFileResult:
    try:
        data = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ParseError("json", str(exc)) from exc
    if isinstance(data, list):
        source = chain_flowchart([_json_label(item) for item in data], "Node")
    elif isinstance(data, dict):
        source = _object_class_diagram(data)
    else:
        source = chain_flowchart([], "Node")
    return ParsedFileResult(source_text=source, structured=data)


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------

def convert_txt(content: str) -> ParsedFileResult:
    lines = non_blank_lines(content)
    arrow_line = next((line for line in lines if has_arrow(line)), None)
    if arrow_line is not None:
        steps = [step.strip() for step in split_arrows(arrow_line)]
    else:
        steps = [line.strip() for line in lines]
    return ParsedFileResult(source_text=chain_flowchart(steps, "A"), structured={"lines": lines})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_CONVERTERS = {
    FileType.CSV: convert_csv,
    FileType.JSON: convert_json,
    FileType.TXT: convert_txt,
}


def convert_file(content: str, file_type: Union[FileType, str]) -> ParsedFileResult:
    """Convert file *content* of the declared *file_type* to a Mermaid diagram.

    Raises:
        ParseError: the content is malformed, or the type is unsupported.
    """
    if isinstance(file_type, str):
        try:
            file_type = FileType(file_type.lower())
        except ValueError:
            raise ParseError(file_type, f"Unsupported file type: {file_type}") from None
    return _CONVERTERS[file_type](content)
