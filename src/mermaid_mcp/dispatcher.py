"""
JSON-RPC protocol dispatcher.

Validates the request envelope, dispatches on the closed :class:`Method`
enum, and turns every outcome into a JSON-RPC response or error object.
:meth:`ProtocolDispatcher.handle` never raises: a single malformed request
must not take down the hosting transport.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from mermaid_mcp.config import ServerConfig
from mermaid_mcp.errors import (
    PARSE_ERROR,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MermaidMCPError,
    MethodNotFoundError,
)
from mermaid_mcp.executor import ToolExecutor
from mermaid_mcp.models import (
    JSONRPC_VERSION,
    Method,
    RequestId,
    error_response,
    result_response,
)
from mermaid_mcp.registry import list_resources, list_tools
from mermaid_mcp.resources import TemplateStore

logger = logging.getLogger("mermaid-mcp.dispatcher")

_MISSING = object()

Handler = Callable[[Any], Awaitable[dict[str, Any]]]


def _valid_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def parse_error_response(detail: str) -> dict[str, Any]:
    """Error response for a body that is not valid JSON at all."""
    return error_response(None, {"code": PARSE_ERROR, "message": f"Parse error: {detail}"})


class ProtocolDispatcher:
    """Routes JSON-RPC requests to the initialize / tools / resources handlers."""

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        executor: ToolExecutor | None = None,
        store: TemplateStore | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.executor = executor or ToolExecutor(self.config)
        self.store = store or TemplateStore(self.config.template_dir)
        self._handlers: dict[Method, Handler] = {
            Method.INITIALIZE: self._initialize,
            Method.TOOLS_LIST: self._tools_list,
            Method.TOOLS_CALL: self._tools_call,
            Method.RESOURCES_LIST: self._resources_list,
            Method.RESOURCES_READ: self._resources_read,
        }
        missing = set(Method) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for methods: {sorted(m.value for m in missing)}")

    async def handle(self, request: Any) -> dict[str, Any]:
        """Handle one decoded JSON-RPC request and return the response dict."""
        request_id: RequestId = None
        try:
            request_id = self._request_id(request)
            method = self._method(request)
            logger.debug("Dispatching %s (id=%r)", method.value, request_id)
            result = await self._handlers[method](request.get("params"))
            return result_response(request_id, result)
        except MermaidMCPError as exc:
            logger.warning("Request %r failed: [%d] %s", request_id, exc.code, exc.message)
            return error_response(request_id, exc.to_error())
        except Exception as exc:
            logger.exception("Unhandled error while handling request %r", request_id)
            return error_response(
                request_id, InternalError(f"Internal error: {exc}").to_error()
            )

    # -- envelope --

    def _request_id(self, request: Any) -> RequestId:
        if not isinstance(request, dict):
            raise InvalidRequestError()
        request_id = request.get("id", _MISSING)
        if request_id is _MISSING or not _valid_id(request_id):
            raise InvalidRequestError()
        return request_id

    def _method(self, request: dict[str, Any]) -> Method:
        if "jsonrpc" in request and request["jsonrpc"] != JSONRPC_VERSION:
            raise InvalidRequestError()
        method = request.get("method")
        if not isinstance(method, str) or not method:
            raise InvalidRequestError()
        try:
            return Method(method)
        except ValueError:
            raise MethodNotFoundError(method) from None

    # -- methods --

    async def _initialize(self, params: Any) -> dict[str, Any]:
        return {
            "protocolVersion": self.config.protocol_version,
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {
                "name": self.config.server_name,
                "version": self.config.server_version,
            },
        }

    async def _tools_list(self, params: Any) -> dict[str, Any]:
        return {"tools": list_tools()}

    async def _tools_call(self, params: Any) -> dict[str, Any]:
        params = params if isinstance(params, dict) else {}
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Invalid params: tool name is required")
        return self.executor.execute(name, params.get("arguments")).to_dict()

    async def _resources_list(self, params: Any) -> dict[str, Any]:
        return {"resources": list_resources()}

    async def _resources_read(self, params: Any) -> dict[str, Any]:
        params = params if isinstance(params, dict) else {}
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise InvalidParamsError("Invalid params: resource uri is required")
        descriptor = self.store.descriptor(uri)
        text = await self.store.read_text(uri)
        return {
            "contents": [
                {"uri": descriptor.uri, "mimeType": descriptor.mime_type, "text": text}
            ]
        }
