"""Command line entry point: ``giantswarm-apps-mcp [serve|version]``."""

import argparse
import logging
import sys
from typing import List, Optional

from giantswarm_apps_mcp import SERVER_NAME, __version__
from giantswarm_apps_mcp.config import TRANSPORTS, ServerConfig

logger = logging.getLogger("mcp-server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="giantswarm-apps-mcp",
        description="MCP server for Giant Swarm apps, catalogs and clusters",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the MCP server (default)")
    serve.add_argument("--kube-context", help="Kubernetes context to use (default: current context)")
    serve.add_argument(
        "--transport",
        choices=TRANSPORTS + ("http",),
        help="Transport: stdio, sse or streamable-http (default: stdio)",
    )
    serve.add_argument("--http-addr", help="Listen address for sse/streamable-http (default: :8080)")
    serve.add_argument("--sse-endpoint", help="SSE endpoint path (default: /sse)")
    serve.add_argument("--message-endpoint", help="SSE message endpoint path (default: /message)")
    serve.add_argument("--http-endpoint", help="Streamable HTTP endpoint path (default: /mcp)")
    serve.add_argument(
        "--non-destructive",
        action="store_true",
        default=None,
        help="Do not register tools that modify the cluster",
    )
    serve.add_argument("--log-level", help="Log level (default: INFO)")

    subparsers.add_parser("version", help="Print the version and exit")
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment defaults overridden by whatever flags were given."""
    return ServerConfig.from_env().with_overrides(
        kube_context=getattr(args, "kube_context", None),
        transport=getattr(args, "transport", None),
        http_addr=getattr(args, "http_addr", None),
        sse_endpoint=getattr(args, "sse_endpoint", None),
        message_endpoint=getattr(args, "message_endpoint", None),
        http_endpoint=getattr(args, "http_endpoint", None),
        non_destructive=getattr(args, "non_destructive", None),
        log_level=(getattr(args, "log_level", None) or "").upper() or None,
    )


def setup_logging(level: str) -> None:
    # stdout carries the stdio transport
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "version":
        print(f"{SERVER_NAME} version {__version__}")
        return 0

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)

    from giantswarm_apps_mcp.server import run

    try:
        run(config)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
