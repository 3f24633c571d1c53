# main.py

"""Entry point for the ConsulteJá barcode lookup (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("consulteja.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    order = " -> ".join(p["label"] for p in Settings.AVAILABLE_PROVIDERS)

    parser = argparse.ArgumentParser(
        prog="consulteja",
        description="Look up product information by barcode.",
        epilog=f"Providers, in order: {order}",
    )
    parser.add_argument(
        "barcode",
        nargs="?",
        default=None,
        help="Barcode to look up. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--image",
        default=None,
        dest="image_path",
        help="Decode the barcode from an image file and look it up.",
    )
    parser.add_argument(
        "--scan",
        action="store_true",
        default=False,
        help="Scan one barcode from the camera and look it up.",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Print the recent lookup history.",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        default=False,
        dest="clear_history",
        help="Delete the recent lookup history.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all providers.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import ConsulteJaApp

    try:
        app = ConsulteJaApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("consulteja TUI shutting down")


def _run_command(args: argparse.Namespace) -> int:
    """Dispatch a headless command and return its exit code."""
    from src.cli import runner

    if args.clear_history:
        return runner.clear_history()
    if args.history:
        return runner.show_history(args.output_format)
    if args.health:
        return asyncio.run(runner.run_health_check())
    if args.image_path:
        return asyncio.run(
            runner.cli_lookup_image(args.image_path, args.output_format)
        )
    if args.scan:
        return asyncio.run(runner.cli_scan(args.output_format))
    return asyncio.run(
        runner.cli_lookup(args.barcode, args.output_format)
    )


def main() -> None:
    """Route to the TUI (no arguments) or a headless command."""
    log_file = setup_logging()
    logger.info("consulteja starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    headless = (
        args.barcode is not None
        or args.image_path
        or args.scan
        or args.history
        or args.clear_history
        or args.health
    )
    if not headless:
        _run_tui()
        return
    sys.exit(_run_command(args))


if __name__ == "__main__":
    main()
