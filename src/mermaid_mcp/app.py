"""
HTTP binding for the protocol dispatcher.

A Starlette application exposing:

  POST /mcp              — JSON-RPC endpoint
  GET  /mcp              — human-readable server info
  GET  /health           — liveness probe
  GET  /template/mermaid-viewer — the viewer template as HTML
  POST /tools/list, /tools/call, /resources/list, /resources/read
                         — REST wrappers that build a JSON-RPC request and
                           unwrap the ``result`` / ``error`` member
  POST /upload           — raw file body converted with ``parse_file``

The app holds no protocol logic of its own; everything goes through
:class:`ProtocolDispatcher`.
"""

from __future__ import annotations

import itertools
import logging
import time
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse
from starlette.routing import Route

from mermaid_mcp.config import ServerConfig
from mermaid_mcp.dispatcher import ProtocolDispatcher, parse_error_response
from mermaid_mcp.errors import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RESOURCE_NOT_FOUND,
    UNKNOWN_TOOL,
    MermaidMCPError,
)
from mermaid_mcp.models import DiagramKind, FileType, Method, ToolName
from mermaid_mcp.registry import VIEWER_URI, TOOLS

logger = logging.getLogger("mermaid-mcp.app")

# Uploads larger than this are rejected with 413.
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

_CLIENT_ERROR_CODES = {PARSE_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, INVALID_PARAMS, UNKNOWN_TOOL}


def status_for(response: dict[str, Any]) -> int:
    """HTTP status for a JSON-RPC response dict."""
    error = response.get("error")
    if error is None:
        return 200
    if error["code"] == RESOURCE_NOT_FOUND:
        return 404
    if error["code"] in _CLIENT_ERROR_CODES:
        return 400
    return 500


async def _json_body(request: Request) -> dict[str, Any]:
    """Decode a REST wrapper body; anything but a JSON object counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def create_app(
    config: ServerConfig | None = None,
    dispatcher: ProtocolDispatcher | None = None,
) -> Starlette:
    """Build the Starlette app around a dispatcher."""
    dispatcher = dispatcher or ProtocolDispatcher(config)
    config = dispatcher.config
    request_ids = itertools.count(int(time.time() * 1000))

    async def passthrough(method: Method, params: dict[str, Any] | None, body: dict[str, Any]):
        rpc: dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method.value,
            "id": body["id"] if "id" in body else next(request_ids),
        }
        if params is not None:
            rpc["params"] = params
        return await dispatcher.handle(rpc)

    def unwrap(response: dict[str, Any]) -> JSONResponse:
        if "error" in response:
            return JSONResponse(response["error"], status_code=status_for(response))
        return JSONResponse(response["result"])

    # -- JSON-RPC --

    async def mcp_post(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError as exc:
            logger.warning("Rejected non-JSON body: %s", exc)
            return JSONResponse(parse_error_response(str(exc)), status_code=400)
        response = await dispatcher.handle(body)
        return JSONResponse(response, status_code=status_for(response))

    async def mcp_info(request: Request) -> JSONResponse:
        base = str(request.base_url).rstrip("/")
        return JSONResponse({
            "name": config.server_name,
            "version": config.server_version,
            "status": "healthy",
            "protocol": "MCP (Model Context Protocol)",
            "description": "Convert text and data into Mermaid diagrams",
            "endpoints": {"health": f"{base}/health", "mcp_post": f"{base}/mcp"},
            "capabilities": [tool.name for tool in TOOLS],
            "supported_diagram_types": DiagramKind.values(),
            "usage": {
                "method": "POST",
                "content_type": "application/json",
                "example": {"jsonrpc": "2.0", "method": Method.TOOLS_LIST.value, "id": 1},
            },
        })

    # -- plumbing --

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "server": config.server_name,
            "version": config.server_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def viewer_template(request: Request):
        try:
            html = await dispatcher.store.read_text(VIEWER_URI)
        except MermaidMCPError as exc:
            return JSONResponse({"error": f"Failed to serve template: {exc.message}"}, status_code=500)
        return HTMLResponse(html)

    async def oauth_not_configured(request: Request) -> JSONResponse:
        return JSONResponse(
            {"error": "not_configured", "message": "OAuth not required for this connector"},
            status_code=404,
        )

    # -- REST wrappers --

    async def rest_tools_list(request: Request) -> JSONResponse:
        body = await _json_body(request)
        return unwrap(await passthrough(Method.TOOLS_LIST, None, body))

    async def rest_tools_call(request: Request) -> JSONResponse:
        body = await _json_body(request)
        if not body.get("name"):
            return JSONResponse({"error": "Tool name is required"}, status_code=400)
        params = {"name": body["name"], "arguments": body.get("arguments") or {}}
        return unwrap(await passthrough(Method.TOOLS_CALL, params, body))

    async def rest_resources_list(request: Request) -> JSONResponse:
        body = await _json_body(request)
        return unwrap(await passthrough(Method.RESOURCES_LIST, None, body))

    async def rest_resources_read(request: Request) -> JSONResponse:
        body = await _json_body(request)
        if not body.get("uri"):
            return JSONResponse({"error": "Resource URI is required"}, status_code=400)
        return unwrap(await passthrough(Method.RESOURCES_READ, {"uri": body["uri"]}, body))

    async def upload(request: Request) -> JSONResponse:
        raw = await request.body()
        if not raw:
            return JSONResponse({"error": "No file uploaded"}, status_code=400)
        if len(raw) > MAX_UPLOAD_BYTES:
            return JSONResponse({"error": "File too large (max 5MB)"}, status_code=413)
        file_type = request.query_params.get("file_type")
        if not file_type:
            suffix = PurePosixPath(request.query_params.get("filename", "")).suffix
            file_type = suffix.lstrip(".").lower() or FileType.TXT.value
        if file_type not in FileType.values():
            return JSONResponse(
                {"error": "Invalid file type. Only CSV, JSON, and TXT files are supported."},
                status_code=400,
            )
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError:
            return JSONResponse({"error": "File must be UTF-8 text"}, status_code=400)
        params = {
            "name": ToolName.PARSE_FILE.value,
            "arguments": {"file_content": content, "file_type": file_type},
        }
        response = await passthrough(Method.TOOLS_CALL, params, {})
        if "error" in response:
            return JSONResponse(
                {"error": f"Failed to process file: {response['error']['message']}"},
                status_code=status_for(response),
            )
        return JSONResponse({"success": True, **response["result"]["structuredContent"]})

    routes = [
        Route("/mcp", mcp_post, methods=["POST"]),
        Route("/mcp", mcp_info, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Route("/template/mermaid-viewer", viewer_template, methods=["GET"]),
        Route("/.well-known/oauth-authorization-server", oauth_not_configured, methods=["GET"]),
        Route("/.well-known/openid-configuration", oauth_not_configured, methods=["GET"]),
        Route("/tools/list", rest_tools_list, methods=["POST"]),
        Route("/tools/call", rest_tools_call, methods=["POST"]),
        Route("/resources/list", rest_resources_list, methods=["POST"]),
        Route("/resources/read", rest_resources_read, methods=["POST"]),
        Route("/upload", upload, methods=["POST"]),
    ]
    return Starlette(routes=routes)
