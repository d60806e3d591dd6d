"""
Static tool and resource catalogs.

Built once at import time and never mutated; ``tools/list`` and
``resources/list`` return these verbatim.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from mermaid_mcp.models import (
    DiagramKind,
    FileType,
    ResourceDescriptor,
    ToolDescriptor,
    ToolName,
)

VIEWER_URI = "template://mermaid-viewer"
VIEWER_TEMPLATE_FILE = "mermaid-viewer.html"

OUTPUT_METADATA = MappingProxyType({"openai/outputTemplate": VIEWER_URI})


GENERATE_DIAGRAM = ToolDescriptor(
    name=ToolName.GENERATE_DIAGRAM.value,
    description="Convert text or data into Mermaid diagram code",
    input_schema={
        "type": "object",
        "properties": {
            "text": {
                "type": "string",
                "minLength": 1,
                "description": "Text or data to convert into a Mermaid diagram",
            },
            "diagramType": {
                "type": "string",
                "enum": DiagramKind.values(),
                "description": (
                    "Type of diagram to generate (optional, defaults to flowchart)"
                ),
            },
        },
        "required": ["text"],
    },
    output_metadata=OUTPUT_METADATA,
)

PARSE_FILE = ToolDescriptor(
    name=ToolName.PARSE_FILE.value,
    description="Parse uploaded CSV/JSON/TXT and convert to Mermaid",
    input_schema={
        "type": "object",
        "properties": {
            "file_content": {
                "type": "string",
                "minLength": 1,
                "description": "Content of the uploaded file",
            },
            "file_type": {
                "type": "string",
                "enum": FileType.values(),
                "description": "Type of the file (csv, json, or txt)",
            },
        },
        "required": ["file_content", "file_type"],
    },
    output_metadata=OUTPUT_METADATA,
)

TOOLS: tuple[ToolDescriptor, ...] = (GENERATE_DIAGRAM, PARSE_FILE)

MERMAID_VIEWER = ResourceDescriptor(
    uri=VIEWER_URI,
    name="Mermaid Diagram Viewer",
    description="Interactive UI component for viewing and editing Mermaid diagrams",
    mime_type="text/html",
)

RESOURCES: tuple[ResourceDescriptor, ...] = (MERMAID_VIEWER,)

_TOOLS_BY_NAME: Mapping[str, ToolDescriptor] = MappingProxyType({t.name: t for t in TOOLS})
_RESOURCES_BY_URI: Mapping[str, ResourceDescriptor] = MappingProxyType(
    {r.uri: r for r in RESOURCES}
)


def get_tool(name: str) -> Optional[ToolDescriptor]:
    return _TOOLS_BY_NAME.get(name)


def get_resource(uri: str) -> Optional[ResourceDescriptor]:
    return _RESOURCES_BY_URI.get(uri)


def list_tools() -> list[dict]:
    return [t.to_dict() for t in TOOLS]


def list_resources() -> list[dict]:
    return [r.to_dict() for r in RESOURCES]
