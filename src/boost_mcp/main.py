"""boost-mcp - command-line entry point.

Runs the MCP server over stdio so an MCP client can introspect the project
found at ``base_path`` (or ``$BOOST_PROJECT_PATH``, or the working
directory).

Registering project tools
-------------------------

Built-in tools are installed by ``register_core_tools``. Additional tools
implement ``ToolBase`` and are registered before the loop starts::

    server = build_server(config)
    server.register_tool(SchemaInspector(config))

Tools may return a plain value or a full envelope built with
``boost_mcp.tools.result``; both reach the client in the same shape.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from boost_mcp import __version__
from boost_mcp.config import ConfigLoadError, ServerConfig, load_config
from boost_mcp.protocol.transport import StdioTransport
from boost_mcp.server import MCPServer
from boost_mcp.tools.builtin import register_core_tools


def build_server(config: ServerConfig, transport: StdioTransport | None = None) -> MCPServer:
    """Create a server with the built-in tools registered.

    Args:
        config: Server configuration.
        transport: Transport whose ``log`` receives operational messages.

    Returns:
        Ready-to-serve MCPServer.
    """
    server = MCPServer(config=config, log=transport.log if transport else None)
    register_core_tools(server.registry, config)
    return server


def main(argv: list[str] | None = None) -> int:
    """Run the MCP server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="boost-mcp",
        description="MCP developer-tooling server",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to server configuration YAML file (optional)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"boost-mcp {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else ServerConfig.from_dict({})
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    transport = StdioTransport()
    server = build_server(config, transport)
    transport.log(f"{config.server_name} {config.server_version} started")
    transport.log(f"Project path: {config.base_path}")
    transport.log(f"Tools registered: {', '.join(server.registry.names()) or 'none'}")

    try:
        with server:
            server.serve(transport)
    except KeyboardInterrupt:
        transport.log("Interrupted, shutting down")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        transport.log(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
