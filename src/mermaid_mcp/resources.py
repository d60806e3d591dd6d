"""
Static resource store.

Owns the bytes behind the catalog entries in :mod:`mermaid_mcp.registry`.
Reads are asynchronous so the dispatcher can await them without blocking
the event loop.
"""

from __future__ import annotations

import logging
from pathlib import Path

import anyio

from mermaid_mcp.errors import ResourceNotFoundError, ResourceReadError
from mermaid_mcp.models import ResourceDescriptor
from mermaid_mcp.registry import VIEWER_TEMPLATE_FILE, VIEWER_URI, get_resource

logger = logging.getLogger("mermaid-mcp.resources")


class TemplateStore:
    """Maps resource URIs onto template files under *template_dir*."""

    def __init__(self, template_dir: Path) -> None:
        self.template_dir = Path(template_dir)
        self._files: dict[str, str] = {VIEWER_URI: VIEWER_TEMPLATE_FILE}

    def descriptor(self, uri: str) -> ResourceDescriptor:
        descriptor = get_resource(uri)
        if descriptor is None or uri not in self._files:
            raise ResourceNotFoundError(uri)
        return descriptor

    def path_for(self, uri: str) -> Path:
        self.descriptor(uri)
        return self.template_dir / self._files[uri]

    async def read_text(self, uri: str) -> str:
        """Return the text of resource *uri*.

        Raises:
            ResourceNotFoundError: *uri* is not in the catalog.
            ResourceReadError: the backing file could not be read.
        """
        path = self.path_for(uri)
        try:
            return await anyio.Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s from %s: %s", uri, path, exc)
            raise ResourceReadError(uri, str(exc)) from exc

    def read_text_sync(self, uri: str) -> str:
        """Blocking variant for callers outside an event loop."""
        path = self.path_for(uri)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s from %s: %s", uri, path, exc)
            raise ResourceReadError(uri, str(exc)) from exc
