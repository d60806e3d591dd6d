"""
Tool execution pipeline: lookup → argument validation → invocation → envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from mermaid_mcp.config import ServerConfig
from mermaid_mcp.converter import convert_file
from mermaid_mcp.errors import (
    ExecutionError,
    InvalidDiagramTypeError,
    ParseError,
    UnknownToolError,
)
from mermaid_mcp.generator import generate_diagram
from mermaid_mcp.models import DiagramKind, ToolDescriptor, ToolName, ToolResult
from mermaid_mcp.registry import get_tool
from mermaid_mcp.validation import validate_arguments

logger = logging.getLogger("mermaid-mcp.executor")


class ToolExecutor:
    """Runs registry tools against validated arguments."""

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config = config or ServerConfig()
        self._handlers: dict[ToolName, Callable[[dict[str, Any]], tuple[str, dict[str, Any]]]] = {
            ToolName.GENERATE_DIAGRAM: self._generate_diagram,
            ToolName.PARSE_FILE: self._parse_file,
        }

    def execute(self, name: str, raw_args: Any) -> ToolResult:
        """Execute tool *name* with *raw_args*.

        Raises:
            UnknownToolError: no tool named *name* is registered.
            SchemaError: *raw_args* violate the tool's input schema.
            ExecutionError: the tool body failed.
        """
        descriptor = self._lookup(name)
        args = validate_arguments(raw_args, descriptor.input_schema)
        logger.debug("Executing tool %s with %s", name, sorted(args))
        summary, structured = self._handlers[ToolName(descriptor.name)](args)
        return ToolResult(
            summary=summary,
            structured_content=structured,
            output_metadata=dict(descriptor.output_metadata),
        )

    def _lookup(self, name: Any) -> ToolDescriptor:
        descriptor = get_tool(name) if isinstance(name, str) else None
        if descriptor is None:
            raise UnknownToolError(str(name))
        return descriptor

    # -- tool bodies --

    def _generate_diagram(self, args: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        text = args["text"].strip()
        kind = args.get("diagramType")
        if kind is None and not self.config.auto_detect_kind:
            kind = DiagramKind.FLOWCHART
        try:
            diagram = generate_diagram(text, kind)
        except InvalidDiagramTypeError as exc:
            raise ExecutionError(exc.message) from exc
        summary = f"Generated {diagram.kind.value} diagram: {text}"
        return summary, {
            "mermaid_code": diagram.source_text,
            "diagram_type": diagram.kind.value,
            "input_text": text,
        }

    def _parse_file(self, args: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        file_type = args["file_type"]
        try:
            parsed = convert_file(args["file_content"], file_type)
        except ParseError as exc:
            logger.warning("parse_file failed: %s", exc.message)
            raise ExecutionError(exc.message, data={"file_type": exc.file_type}) from exc
        summary = f"Parsed {file_type.upper()} file and generated Mermaid diagram"
        return summary, {
            "mermaid_code": parsed.source_text,
            "parsed_data": parsed.structured,
            "file_type": file_type,
        }
