"""
Error taxonomy for the Mermaid MCP server.

Every protocol-level failure is a :class:`MermaidMCPError` carrying the
JSON-RPC error code it maps to.  The dispatcher converts these into error
envelopes; nothing here knows about transports.
"""

from __future__ import annotations

from typing import Any

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)

# ---------------------------------------------------------------------------
# JSON-RPC error codes
# ---------------------------------------------------------------------------

# Server-defined codes live in the -32000..-32099 range reserved by JSON-RPC.
RESOURCE_NOT_FOUND = -32002
UNKNOWN_TOOL = -32003

__all__ = [
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "RESOURCE_NOT_FOUND",
    "UNKNOWN_TOOL",
    "MermaidMCPError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "SchemaError",
    "UnknownToolError",
    "ResourceNotFoundError",
    "ResourceReadError",
    "ExecutionError",
    "InternalError",
    "ParseError",
    "InvalidDiagramTypeError",
]


# ---------------------------------------------------------------------------
# Protocol errors
# ---------------------------------------------------------------------------

class MermaidMCPError(Exception):
    """Base class for errors that map onto a JSON-RPC error object."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error(self) -> dict[str, Any]:
        """Return the ``error`` member of a JSON-RPC error response."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class InvalidRequestError(MermaidMCPError):
    """The request is not a structurally valid JSON-RPC envelope."""

    code = INVALID_REQUEST

    def __init__(self, message: str = "Invalid Request", *, data: Any = None) -> None:
        super().__init__(message, data=data)


class MethodNotFoundError(MermaidMCPError):
    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvalidParamsError(MermaidMCPError):
    """Top-level ``params`` are missing or malformed."""

    code = INVALID_PARAMS


class SchemaError(InvalidParamsError):
    """Tool arguments violate the tool's input schema.

    ``violations`` is a list of ``{"path": ..., "message": ...}`` dicts and is
    exposed to the caller as the error's ``data``.
    """

    def __init__(self, violations: list[dict[str, str]]) -> None:
        self.violations = violations
        super().__init__("Invalid params", data=violations)


class UnknownToolError(MermaidMCPError):
    code = UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}", data={"name": name})


class ResourceNotFoundError(MermaidMCPError):
    code = RESOURCE_NOT_FOUND

    def __init__(self, uri: Any) -> None:
        self.uri = uri
        super().__init__(f"Resource not found: {uri}", data={"uri": uri})


class ResourceReadError(MermaidMCPError):
    """The backing store for a known resource could not be read."""

    code = INTERNAL_ERROR

    def __init__(self, uri: str, reason: str) -> None:
        self.uri = uri
        super().__init__(f"Failed to read resource: {reason}")


class ExecutionError(MermaidMCPError):
    """A tool body failed after its arguments were accepted."""

    code = INTERNAL_ERROR


class InternalError(MermaidMCPError):
    code = INTERNAL_ERROR


# ---------------------------------------------------------------------------
# Domain errors (raised by the pure generator / converter functions)
# ---------------------------------------------------------------------------

class ParseError(Exception):
    """File content is malformed for its declared type."""

    def __init__(self, file_type: str, message: str) -> None:
        self.file_type = file_type
        self.message = f"Failed to parse {file_type} file: {message}"
        super().__init__(self.message)


class InvalidDiagramTypeError(ValueError):
    """An explicit diagram kind outside the supported set was requested."""

    def __init__(self, kind: Any, valid: list[str]) -> None:
        self.kind = kind
        self.message = (
            f"Invalid diagram type: {kind}. Valid types are: {', '.join(valid)}"
        )
        super().__init__(self.message)
