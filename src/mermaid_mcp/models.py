"""
Core data model for the Mermaid MCP server.

Typed, immutable records for the protocol catalog (tools, resources), the
results produced by the diagram generator and file converter, and the
JSON-RPC envelope helpers shared by the dispatcher and the transports.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

JSONRPC_VERSION = "2.0"

RequestId = Union[str, int, float, None]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DiagramKind(Enum):
    """The seven supported Mermaid diagram categories."""
    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    ER = "er"
    GANTT = "gantt"
    PIE = "pie"
    GIT = "git"

    @classmethod
    def values(cls) -> list[str]:
        return [k.value for k in cls]


class FileType(Enum):
    CSV = "csv"
    JSON = "json"
    TXT = "txt"

    @classmethod
    def values(cls) -> list[str]:
        return [t.value for t in cls]


class Method(Enum):
    """JSON-RPC methods understood by the dispatcher."""
    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"


class ToolName(Enum):
    GENERATE_DIAGRAM = "generate_diagram"
    PARSE_FILE = "parse_file"


# ---------------------------------------------------------------------------
# Catalog entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolDescriptor:
    """A callable tool as advertised by ``tools/list``."""
    name: str
    description: str
    input_schema: dict[str, Any]
    output_metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
            "_meta": dict(self.output_metadata),
        }


@dataclass(frozen=True)
class ResourceDescriptor:
    """A URI-addressed static payload as advertised by ``resources/list``."""
    uri: str
    name: str
    description: str
    mime_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeneratedDiagram:
    """Mermaid source text plus the diagram kind it was generated as."""
    source_text: str
    kind: DiagramKind


@dataclass(frozen=True)
class ParsedFileResult:
    """Mermaid source text plus the structured form of the parsed file."""
    source_text: str
    structured: Any


@dataclass(frozen=True)
class ToolResult:
    """Envelope returned by a tool call.

    ``summary`` is the human-readable text shown to the user,
    ``structured_content`` is the machine-readable payload.  Both are built
    from the same generation result by the executor.
    """
    summary: str
    structured_content: dict[str, Any]
    output_metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.summary}],
            "structuredContent": self.structured_content,
            "_meta": dict(self.output_metadata),
            "isError": False,
        }


# ---------------------------------------------------------------------------
# JSON-RPC envelopes
# ---------------------------------------------------------------------------

def result_response(request_id: RequestId, result: Any) -> dict[str, Any]:
    """Build a JSON-RPC success response."""
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def error_response(request_id: RequestId, error: dict[str, Any]) -> dict[str, Any]:
    """Build a JSON-RPC error response from an ``error`` member."""
    return {"jsonrpc": JSONRPC_VERSION, "error": error, "id": request_id}


def is_error_response(response: dict[str, Any]) -> bool:
    return "error" in response
