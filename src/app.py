"""Application entry point for the comment linkifier."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.segment_formatting import FORMATS, format_segments
from core.config import SiteConfig
from core.linkifier import Linkifier

NAME = "LINKIFY"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        # stderr keeps formatted output on stdout clean for piping.
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/linkify.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _site_config(domain: Optional[str]) -> SiteConfig:
    return SiteConfig(domain=domain or settings.SITE_DOMAIN)


def _parse(args: argparse.Namespace) -> str:
    logger = logging.getLogger(__name__)

    content = args.text if args.text is not None else sys.stdin.read()
    site = _site_config(args.domain)
    output_format = args.format or settings.OUTPUT_FORMAT

    linkifier = Linkifier.for_site(site)
    segments = linkifier.parse(content)
    logger.info("Parsed %s characters into %s segments for %s", len(content), len(segments), site.domain)

    base_url = settings.SITE_BASE_URL if args.base_url is None else args.base_url
    return format_segments(segments, output_format, base_url=base_url)


def _playground(args: argparse.Namespace) -> None:
    _print_banner()
    from frontend.app import PlaygroundApp

    site = _site_config(args.domain)
    PlaygroundApp(Linkifier.for_site(site), site.domain).run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="linkify")
    subparsers = parser.add_subparsers(dest="command")

    parse_parser = subparsers.add_parser("parse", help="Linkify a comment and print the segments")
    parse_parser.add_argument("text", nargs="?", help="Comment text (read from stdin when omitted)")
    parse_parser.add_argument("--format", choices=FORMATS, help="Output format")
    parse_parser.add_argument("--domain", help="Site domain that owns book and bookshelf links")
    parse_parser.add_argument("--base-url", help="Prefix for preview links in markdown/html output")

    playground_parser = subparsers.add_parser("playground", help="Launch the interactive playground")
    playground_parser.add_argument("--domain", help="Site domain that owns book and bookshelf links")

    args = parser.parse_args(argv)
    _configure_logging()

    if args.command == "playground":
        _playground(args)
        return
    if args.command == "parse":
        try:
            print(_parse(args))
        except ValueError as exc:
            parser.error(str(exc))
        return
    parser.print_help()


if __name__ == "__main__":
    main()
