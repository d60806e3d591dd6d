"""
Mermaid MCP Server — turn text and data files into Mermaid diagrams via
Model Context Protocol.

Exposes 2 tools and 1 resource:

  1. generate_diagram — free text → Mermaid source (flowchart, sequence,
                        class, er, gantt, pie, git)
  2. parse_file       — CSV / JSON / TXT content → Mermaid source + parsed data
  template://mermaid-viewer — HTML viewer for the generated diagrams

Two transports share the same tool pipeline:
  stdio — FastMCP server defined in this module (default)
  http  — JSON-RPC over HTTP, see :mod:`mermaid_mcp.app`
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from mermaid_mcp.config import configure_logging, load_config
from mermaid_mcp.errors import MermaidMCPError, SchemaError
from mermaid_mcp.executor import ToolExecutor
from mermaid_mcp.models import ToolName
from mermaid_mcp.registry import GENERATE_DIAGRAM, MERMAID_VIEWER, PARSE_FILE
from mermaid_mcp.resources import TemplateStore

logger = logging.getLogger("mermaid-mcp")

# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------
config = load_config()
executor = ToolExecutor(config)
store = TemplateStore(config.template_dir)

mcp = FastMCP(
    config.server_name,
    instructions=(
        "MCP server that converts text and data files into Mermaid diagrams.\n\n"
        "1. generate_diagram(text, diagramType?) — diagramType is one of\n"
        "   flowchart, sequence, class, er, gantt, pie, git (default flowchart).\n"
        "   Sequence diagrams: write one 'From -> To: message' per line.\n"
        "   Pie charts: write one 'label: value' per line.\n"
        "2. parse_file(file_content, file_type) — file_type is csv, json or txt.\n"
        "   CSV rows and JSON arrays become chained flowchart nodes, JSON objects\n"
        "   become class diagrams, TXT lines (or 'A -> B -> C') become flowcharts.\n\n"
        "Both return JSON with a 'mermaid_code' field. Render it with the\n"
        "template://mermaid-viewer resource.\n"
    ),
)


def _format_error(exc: MermaidMCPError) -> str:
    if isinstance(exc, SchemaError):
        details = "; ".join(v["message"] for v in exc.violations)
        return f"Error: {details}"
    return f"Error: {exc.message}"


def _run_tool(name: ToolName, arguments: dict[str, Any]) -> str:
    try:
        result = executor.execute(name.value, arguments)
    except MermaidMCPError as exc:
        return _format_error(exc)
    return json.dumps(result.structured_content, indent=2, ensure_ascii=False)


# ===================================================================
# RESOURCES
# ===================================================================

@mcp.resource(
    MERMAID_VIEWER.uri,
    name=MERMAID_VIEWER.name,
    description=MERMAID_VIEWER.description,
    mime_type=MERMAID_VIEWER.mime_type,
)
def mermaid_viewer() -> str:
    """Return the HTML viewer template."""
    return store.read_text_sync(MERMAID_VIEWER.uri)


# ===================================================================
# TOOLS
# ===================================================================

@mcp.tool(name=GENERATE_DIAGRAM.name, description=GENERATE_DIAGRAM.description)
def generate_diagram(text: str, diagramType: Optional[str] = None) -> str:  # noqa: N803
    """Convert text into Mermaid diagram code.

    Args:
        text: Text or data to convert into a Mermaid diagram.
        diagramType: flowchart, sequence, class, er, gantt, pie or git.

    Returns:
        JSON with mermaid_code, diagram_type and input_text, or an error string.
    """
    arguments: dict[str, Any] = {"text": text}
    if diagramType is not None:
        arguments["diagramType"] = diagramType
    return _run_tool(ToolName.GENERATE_DIAGRAM, arguments)


@mcp.tool(name=PARSE_FILE.name, description=PARSE_FILE.description)
def parse_file(file_content: str, file_type: str) -> str:
    """Parse CSV/JSON/TXT content and convert it to Mermaid.

    Args:
        file_content: Content of the uploaded file.
        file_type: csv, json or txt.

    Returns:
        JSON with mermaid_code, parsed_data and file_type, or an error string.
    """
    return _run_tool(
        ToolName.PARSE_FILE,
        {"file_content": file_content, "file_type": file_type},
    )


# ===================================================================
# Entry point
# ===================================================================

def main(argv: Optional[list[str]] = None) -> None:
    """Run the MCP server."""
    parser = argparse.ArgumentParser(
        prog="mermaid-mcp",
        description="MCP server that converts text and data into Mermaid diagrams",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument("--host", default=config.host, help=f"HTTP bind host (default: {config.host})")
    parser.add_argument("--port", type=int, default=config.port, help=f"HTTP port (default: {config.port})")
    args = parser.parse_args(argv)

    configure_logging(config)

    if args.transport == "stdio":
        mcp.run()
        return

    import uvicorn

    from mermaid_mcp.app import create_app

    http_config = dataclasses.replace(config, host=args.host, port=args.port)
    logger.info("Starting HTTP server on %s:%d", http_config.host, http_config.port)
    uvicorn.run(create_app(http_config), host=http_config.host, port=http_config.port)


if __name__ == "__main__":
    main()
