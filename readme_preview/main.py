"""Main entry point for readme-preview."""

import argparse
import sys
from typing import List, NoReturn, Optional

import structlog

from . import config
from .app import PreviewApp
from .errors import PreviewError


def setup_logging() -> None:
    """Setup structured logging."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if config.ENVIRONMENT == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        # stdout belongs to the status display
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(config.LOG_LEVEL),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="readme-preview",
        description=(
            "Preview a package readme in your browser, in a registry page "
            "mockup that reloads every time the file is saved."
        ),
    )
    parser.add_argument("readme", help="Path to the readme file")
    parser.add_argument(
        "--host",
        default=config.DEFAULT_HOST,
        help=f"Hostname used by the hot reload client (default: {config.DEFAULT_HOST})",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=config.DEFAULT_PORT,
        help=f"Port used by the preview server, 0 picks a free one (default: {config.DEFAULT_PORT})",
    )
    parser.add_argument(
        "-o",
        "--open",
        action="store_true",
        help="Open the default browser on startup",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {config.APP_VERSION}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main entry point for the readme-preview application."""
    args = build_parser().parse_args(argv)
    setup_logging()
    logger = structlog.get_logger(__name__)

    try:
        logger.info("Starting readme preview", readme=args.readme)
        PreviewApp(config.PreviewSettings.from_args(args)).run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        sys.exit(0)
    except PreviewError as e:
        logger.error("Preview failed", error=str(e))
        print(f"⚫ {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error("Application crashed", error=str(e))
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
