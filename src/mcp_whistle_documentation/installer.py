"""Registers the Whistle documentation server with Claude Desktop."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SERVER_NAME = "whistle-docs"
SERVER_COMMAND = "mcp-whistle-documentation"
CONFIG_FILE_NAME = "claude_desktop_config.json"
ALWAYS_ALLOW = [
    "get_whistle_feature",
    "search_whistle_docs",
    "list_whistle_sections",
    "access_mcp_resource",
]


def default_config_path(platform: str | None = None, home: Path | None = None) -> Path:
    """Locate the Claude Desktop config file for the platform.

    Args:
        platform: ``sys.platform`` style platform name, defaults to the current one.
        home: Home directory, defaults to the current user's.

    Returns:
        Path to ``claude_desktop_config.json``.

    Raises:
        ValueError: If the platform has no known Claude Desktop location.
    """
    platform = platform or sys.platform
    home = home or Path.home()
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Claude" / CONFIG_FILE_NAME
    if platform == "win32":
        return Path(os.environ.get("APPDATA", "")) / "Claude" / CONFIG_FILE_NAME
    msg = f"Unsupported platform {platform!r}; pass --config-path to configure Claude Desktop manually"
    raise ValueError(msg)


def load_config(config_path: Path) -> dict[str, Any]:
    """Read an existing config, starting fresh if it is missing or unreadable.

    Args:
        config_path: Config file path.

    Returns:
        Config mapping with an ``mcpServers`` object.
    """
    config: dict[str, Any] = {}
    if config_path.exists():
        try:
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                config = loaded
            else:
                logger.warning("Ignoring non-object config in %s", config_path)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read %s, creating a new config: %s", config_path, exc)
    if not isinstance(config.get("mcpServers"), dict):
        config["mcpServers"] = {}
    return config


def server_entry(command: str = SERVER_COMMAND) -> dict[str, Any]:
    """Build the MCP server entry for the Claude Desktop config.

    Args:
        command: Executable that starts the server.

    Returns:
        The `mcpServers` entry for this server.
    """
    return {
        "type": "stdio",
        "command": command,
        "args": [],
        "autoStart": True,
        "alwaysAllow": list(ALWAYS_ALLOW),
    }


def install(config_path: Path, command: str = SERVER_COMMAND) -> dict[str, Any]:
    """Add or replace the server entry in the Claude Desktop config.

    Args:
        config_path: Config file path; parent directories are created.
        command: Command Claude Desktop should run.

    Returns:
        The config as written.
    """
    if not config_path.parent.exists():
        logger.info("Creating config directory: %s", config_path.parent)
        config_path.parent.mkdir(parents=True, exist_ok=True)

    config = load_config(config_path)
    config["mcpServers"][SERVER_NAME] = server_entry(command)
    config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    logger.info("Configured %s in %s", SERVER_NAME, config_path)
    return config


def main(argv: list[str] | None = None) -> int:
    """Entry point for the setup command."""
    parser = argparse.ArgumentParser(
        prog="mcp-whistle-documentation-setup",
        description="Register the Whistle documentation MCP server with Claude Desktop",
    )
    parser.add_argument("--config-path", type=Path, help="Claude Desktop config file to update")
    parser.add_argument("--command", default=SERVER_COMMAND, help=f"Server command (default: {SERVER_COMMAND})")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        config_path = args.config_path or default_config_path()
        install(config_path, args.command)
    except (ValueError, OSError) as exc:
        logger.error("Setup failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
