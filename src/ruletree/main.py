"""MCP entrypoint.

Usage:
    python -m ruletree.main
    # or via the script entrypoint:
    ruletree-mcp
"""

from __future__ import annotations

from .config.runtime import get_settings
from .interface.mcp.server import create_server
from .observability import configure_logging


def main() -> None:
    configure_logging(get_settings().log_level)
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
