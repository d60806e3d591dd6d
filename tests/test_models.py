"""Tests for the data model and the static tool/resource catalogs."""

from mermaid_mcp.models import (
    DiagramKind,
    FileType,
    ResourceDescriptor,
    ToolResult,
    error_response,
    is_error_response,
    result_response,
)
from mermaid_mcp.registry import (
    GENERATE_DIAGRAM,
    MERMAID_VIEWER,
    PARSE_FILE,
    VIEWER_URI,
    get_resource,
    get_tool,
    list_resources,
    list_tools,
)


def test_diagram_kind_values() -> None:
    assert DiagramKind.values() == [
        "flowchart", "sequence", "class", "er", "gantt", "pie", "git",
    ]


def test_file_type_values() -> None:
    assert FileType.values() == ["csv", "json", "txt"]


def test_tool_descriptor_to_dict() -> None:
    d = GENERATE_DIAGRAM.to_dict()
    assert d["name"] == "generate_diagram"
    assert d["description"] == "Convert text or data into Mermaid diagram code"
    assert d["inputSchema"]["type"] == "object"
    assert d["_meta"] == {"openai/outputTemplate": VIEWER_URI}


def test_parse_file_descriptor() -> None:
    d = PARSE_FILE.to_dict()
    assert d["description"] == "Parse uploaded CSV/JSON/TXT and convert to Mermaid"
    assert set(d["inputSchema"]["properties"]) == {"file_content", "file_type"}


def test_resource_descriptor_to_dict() -> None:
    r = ResourceDescriptor(uri="x://y", name="Y", description="why", mime_type="text/plain")
    assert r.to_dict() == {
        "uri": "x://y",
        "name": "Y",
        "description": "why",
        "mimeType": "text/plain",
    }


def test_tool_result_to_dict() -> None:
    result = ToolResult(summary="done", structured_content={"a": 1})
    assert result.to_dict() == {
        "content": [{"type": "text", "text": "done"}],
        "structuredContent": {"a": 1},
        "_meta": {},
        "isError": False,
    }


def test_lookup() -> None:
    assert get_tool("parse_file") is PARSE_FILE
    assert get_tool("nope") is None
    assert get_resource(VIEWER_URI) is MERMAID_VIEWER
    assert get_resource("template://other") is None


def test_catalogs_are_stable() -> None:
    assert list_tools() == list_tools()
    assert [t["name"] for t in list_tools()] == ["generate_diagram", "parse_file"]
    assert [r["uri"] for r in list_resources()] == [VIEWER_URI]


def test_envelopes() -> None:
    ok = result_response(1, {"x": 1})
    err = error_response("a", {"code": -32601, "message": "Method not found: x"})
    assert ok == {"jsonrpc": "2.0", "result": {"x": 1}, "id": 1}
    assert err["id"] == "a"
    assert not is_error_response(ok)
    assert is_error_response(err)
