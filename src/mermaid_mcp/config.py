"""
Process-wide server configuration.

Read once from the environment at startup into an immutable
:class:`ServerConfig`; everything downstream receives the config object
instead of reading globals.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ServerConfig:
    server_name: str = "mermaid-visualizer"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    template_dir: Path = field(default=DEFAULT_TEMPLATE_DIR)
    # When False, generate_diagram without diagramType renders a flowchart.
    auto_detect_kind: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "WARNING"


def load_config(environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Build a :class:`ServerConfig` from environment variables."""
    env = os.environ if environ is None else environ
    defaults = ServerConfig()
    try:
        port = int(env.get("PORT", defaults.port))
    except ValueError:
        raise ValueError(f"PORT must be an integer, got '{env.get('PORT')}'") from None
    template_dir = env.get("MERMAID_MCP_TEMPLATE_DIR")
    return ServerConfig(
        server_name=env.get("MERMAID_MCP_SERVER_NAME", defaults.server_name),
        server_version=env.get("MERMAID_MCP_SERVER_VERSION", defaults.server_version),
        protocol_version=env.get("MERMAID_MCP_PROTOCOL_VERSION", defaults.protocol_version),
        template_dir=Path(template_dir) if template_dir else defaults.template_dir,
        auto_detect_kind=env.get("MERMAID_MCP_AUTO_DETECT", "").strip().lower() in _TRUTHY,
        host=env.get("HOST", defaults.host),
        port=port,
        log_level=env.get("MERMAID_MCP_LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(config: ServerConfig) -> None:
    """Apply the configured level to the server's loggers."""
    # FastMCP logs routine INFO messages that clients surface as warnings.
    logging.getLogger("mcp.server").setLevel(logging.WARNING)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logging.getLogger("mermaid-mcp").setLevel(config.log_level)
