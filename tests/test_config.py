"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from mermaid_mcp.config import DEFAULT_TEMPLATE_DIR, ServerConfig, load_config


def test_defaults() -> None:
    config = load_config({})
    assert config == ServerConfig()
    assert config.server_name == "mermaid-visualizer"
    assert config.protocol_version == "2024-11-05"
    assert config.port == 3000
    assert config.auto_detect_kind is False
    assert config.template_dir == DEFAULT_TEMPLATE_DIR


def test_bundled_template_exists() -> None:
    assert (DEFAULT_TEMPLATE_DIR / "mermaid-viewer.html").is_file()


def test_overrides() -> None:
    config = load_config({
        "MERMAID_MCP_SERVER_NAME": "diagrams",
        "MERMAID_MCP_SERVER_VERSION": "2.0.0",
        "MERMAID_MCP_TEMPLATE_DIR": "/tmp/templates",
        "MERMAID_MCP_LOG_LEVEL": "debug",
        "HOST": "127.0.0.1",
        "PORT": "8080",
    })
    assert config.server_name == "diagrams"
    assert config.server_version == "2.0.0"
    assert config.template_dir == Path("/tmp/templates")
    assert config.log_level == "DEBUG"
    assert config.host == "127.0.0.1"
    assert config.port == 8080


@pytest.mark.parametrize("value", ["1", "true", "Yes", " on "])
def test_auto_detect_truthy(value: str) -> None:
    assert load_config({"MERMAID_MCP_AUTO_DETECT": value}).auto_detect_kind is True


@pytest.mark.parametrize("value", ["", "0", "false", "maybe"])
def test_auto_detect_falsy(value: str) -> None:
    assert load_config({"MERMAID_MCP_AUTO_DETECT": value}).auto_detect_kind is False


def test_bad_port() -> None:
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_config({"PORT": "eighty"})
