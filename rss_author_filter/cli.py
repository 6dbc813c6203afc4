"""Command-line interface for the rss_author_filter application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import pprint
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import DEFAULT_LOG_LEVEL, load_app_config, parse_env_config
from .handler import handle

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Fetch an RSS feed and keep only items by selected authors."
    )
    parser.add_argument(
        "--feed-url",
        default=None,
        help="Feed to filter. Overrides RSS_FEED_URL.",
    )
    parser.add_argument(
        "--whitelist",
        default=None,
        help="Comma-separated author substrings to keep. Overrides AUTHOR_WHITELIST.",
    )
    parser.add_argument(
        "--blacklist",
        default=None,
        help="Comma-separated author substrings to drop. Overrides AUTHOR_BLACKLIST.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Optional XML file with <variable name=...> entries loaded into the environment.",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides LOG_LEVEL.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file.",
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run an HTTP server instead of filtering once.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Server bind address.")
    parser.add_argument("--port", type=int, default=8000, help="Server port.")

    return parser


def configure_logging(
    level_name: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None
) -> None:
    """Route filter logs to stderr and, optionally, a log file.

    Unless DEBUG is requested the urllib3 connection logger is held at WARNING,
    leaving one fetch line per request from this package.
    """
    log_level = logging.getLevelName(level_name.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("urllib3").setLevel(
        logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    )
    logger.debug("Logging at %s to %s", level_name.upper(), log_file or "stderr")


def _build_environment(args: argparse.Namespace) -> Dict[str, str]:
    environ = dict(os.environ)
    if args.env_file:
        environ.update(parse_env_config(args.env_file))
    if args.feed_url:
        environ["RSS_FEED_URL"] = args.feed_url
    return environ


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_app_config(_build_environment(args))
        if args.log_level:
            config = dataclasses.replace(config, log_level=args.log_level)

        configure_logging(config.log_level, args.log_file)
        logger.info("Active Configuration:\n%s", pprint.pformat(dataclasses.asdict(config)))

        if args.serve:
            from .server import serve

            serve(config, host=args.host, port=args.port)
            return 0

        response = handle(
            {"whitelist": args.whitelist, "blacklist": args.blacklist}, config
        )
    except ValueError as exc:
        parser.error(str(exc))
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    if response.status_code != 200:
        print(response.body, file=sys.stderr)
        return 1

    print(response.body)
    return 0
