"""Command-line interface for Brain Relay.

Usage:
    brainrelay serve
    brainrelay serve --port 8080
    brainrelay process "I help coaches build..."
    brainrelay process --file notes.txt --brand-analysis
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from brainrelay import __version__
from brainrelay.config import get_settings
from brainrelay.errors import ValidationError
from brainrelay.pipeline.orchestrator import open_orchestrator

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="brainrelay",
        description="Brain Relay — assistant pipeline for brain dumps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  brainrelay serve --port 5000
  brainrelay process "I help coaches build..."
  brainrelay process --file notes.txt --brand-analysis
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API server",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address (default: HOST setting)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listening port (default: PORT setting)",
    )

    # process command
    process_parser = subparsers.add_parser(
        "process",
        help="Run the pipeline once and print the result as JSON",
    )
    process_parser.add_argument(
        "brain_dump",
        type=str,
        nargs="?",
        default=None,
        help="Brain dump text (or use --file)",
    )
    process_parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read the brain dump from a file",
    )
    process_parser.add_argument(
        "--brand-analysis",
        action="store_true",
        help="Also run the brand analysis stage",
    )
    process_parser.add_argument(
        "--user",
        type=str,
        default=None,
        help="User id for persisted stages (default: DEFAULT_USER_ID setting)",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def cmd_serve(args: argparse.Namespace) -> int:
    """Execute the serve command."""
    import uvicorn

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    uvicorn.run(
        "brainrelay.api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_process(args: argparse.Namespace) -> int:
    """Execute the process command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 success, 2 missing input, 1 pipeline failure)
    """
    try:
        if args.file is not None:
            brain_dump = args.file.read_text(encoding="utf-8")
        else:
            brain_dump = args.brain_dump

        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)
        user_id = args.user or settings.default_user_id

        async def _run():
            async with open_orchestrator(settings) as orchestrator:
                return await orchestrator.process(
                    brain_dump,
                    trigger_brand_analysis=args.brand_analysis,
                    user_id=user_id,
                )

        result = asyncio.run(_run())
        print(json.dumps(result.to_response(), indent=2))
        return 0

    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Pipeline failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    print(f"Brain Relay v{__version__}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "process":
        return cmd_process(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
