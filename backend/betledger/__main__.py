"""Betledger CLI entry point."""

import argparse
import logging
import sys

from pydantic import ValidationError

from betledger import __version__
from betledger.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    log_level = "DEBUG" if args.debug else settings.log_level
    logging.getLogger().setLevel(log_level)

    host = args.host or settings.server.host
    port = args.port or settings.server.port
    logger.info(f"Starting Betledger API on {host}:{port}")

    uvicorn.run(
        "betledger.api.server:create_app",
        factory=True,
        host=host,
        port=port,
        log_level=log_level.lower(),
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== Betledger Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}")
        print(f"Environment: {settings.environment}")
        print(f"Log Level: {settings.log_level}\n")

        print("Ledger:")
        print(f"  Default Balance: {settings.ledger.default_balance:,.2f}\n")

        print("Server:")
        print(f"  Host: {settings.server.host}")
        print(f"  Port: {settings.server.port}")
        print(f"  Allowed Origins: {', '.join(settings.server.allowed_origins)}\n")

        print("Observability:")
        print(f"  Logfire: {'Set' if settings.logfire_token else 'Not set'}\n")

        return 0

    except ValidationError as e:
        print("\nConfiguration Error:\n")
        for error in e.errors():
            print(f"  - {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="betledger",
        description="Betledger: bet placement and settlement API",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Betledger {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_serve = subparsers.add_parser("serve", help="Start the HTTP API server")
    parser_serve.add_argument("--host", help="Override the configured host")
    parser_serve.add_argument("--port", type=int, help="Override the configured port")
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.set_defaults(func=cmd_serve)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
