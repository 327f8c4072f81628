"""wpgate CLI - run and inspect the WordPress MCP gateway.

Example:
    # Start the gateway (reads wpgate.yml and WORDPRESS_* / API_KEY env vars)
    wpgate serve --port 3000

    # Report which settings are present, without revealing them
    wpgate check
"""

import argparse
import asyncio
import dataclasses
import logging
import sys

from wpgate import __version__
from wpgate.config import VALID_LOG_LEVELS, GatewayConfig, load_config
from wpgate.framework.errors import ConfigurationError
from wpgate.observability import configure_logging

logger = logging.getLogger(__name__)


def _apply_overrides(config: GatewayConfig, args: argparse.Namespace) -> GatewayConfig:
    overrides = {}
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None):
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level
    if not overrides:
        return config
    return dataclasses.replace(config, server=dataclasses.replace(config.server, **overrides))


# =============================================================================
# Commands
# =============================================================================


def serve(config: GatewayConfig, args: argparse.Namespace) -> int:
    """Start the HTTP gateway.

    Returns:
        Exit code (0 for clean shutdown, 1 for failure)
    """
    from wpgate.server.http_server import run_http_server

    try:
        asyncio.run(run_http_server(config))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception:
        logger.exception("Server error")
        return 1
    return 0


def check(config: GatewayConfig, args: argparse.Namespace) -> int:
    """Print configuration presence.

    Returns:
        Exit code (0 when WordPress credentials are complete, 1 otherwise)
    """
    for name, state in config.describe().items():
        print(f"{name}: {state}")

    try:
        config.wordpress.credential()
    except ConfigurationError as e:
        print(f"\n{e}", file=sys.stderr)
        return 1
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="wpgate",
        description="WordPress MCP gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the gateway on the default port (3000)
  wpgate serve

  # Explicit config file and bind address
  wpgate --config /etc/wpgate.yml serve --host 127.0.0.1 --port 8080

  # Verify credentials are configured
  wpgate check
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to YAML config file (default: ./wpgate.yml if present)",
    )
    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Logging level (default: WPGATE_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP/SSE gateway")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Bind port (default: PORT or 3000)"
    )
    serve_parser.set_defaults(func=serve)

    check_parser = subparsers.add_parser("check", help="Show which settings are configured")
    check_parser.set_defaults(func=check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = _apply_overrides(load_config(args.config), args)
    except (ConfigurationError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=config.server.log_level,
        structured=config.server.structured_logging,
        secrets=config.secrets(),
    )
    return args.func(config, args)


if __name__ == "__main__":
    sys.exit(main())
