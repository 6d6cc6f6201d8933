"""Command line tool that writes a skeleton scraper script."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

_HEAD_TEMPLATE = '''import logging

from crawlkit.collector import Collector
from crawlkit.settings import CollectorConfig


def main():
    config = CollectorConfig()
'''

_COLLECTOR_TEMPLATE = """    c = Collector(config)
"""

_END_TEMPLATE = '''
    c.visit("https://example.com/")


if __name__ == "__main__":
    main()
'''

_HTML_CALLBACK_TEMPLATE = '''
    def on_html(e):
        logging.info(e.text)

    c.on_html("element-selector", on_html)
'''

_REQUEST_CALLBACK_TEMPLATE = '''
    def on_request(r):
        logging.info("Visiting %s", r.url)

    c.on_request(on_request)
'''

_RESPONSE_CALLBACK_TEMPLATE = '''
    def on_response(r):
        logging.info("Visited %s %s", r.request.url, r.status_code)

    c.on_response(on_response)
'''

_ERROR_CALLBACK_TEMPLATE = '''
    def on_error(r, err):
        logging.error("Error on %s: %s", r.request.url, err)

    c.on_error(on_error)
'''

_CALLBACK_TEMPLATES = {
    "html": _HTML_CALLBACK_TEMPLATE,
    "request": _REQUEST_CALLBACK_TEMPLATE,
    "response": _RESPONSE_CALLBACK_TEMPLATE,
    "error": _ERROR_CALLBACK_TEMPLATE,
}


def render_scraper(callbacks: Iterable[str], hosts: Iterable[str]) -> str:
    """Return the source of a new scraper script.

    Unknown callback names are ignored; callbacks keep the given order.
    """
    parts = [_HEAD_TEMPLATE]
    host_list = list(hosts)
    if host_list:
        parts.append(f"    config.allowed_domains = {host_list!r}\n")
    parts.append(_COLLECTOR_TEMPLATE)
    parts.extend(
        _CALLBACK_TEMPLATES[name] for name in callbacks if name in _CALLBACK_TEMPLATES
    )
    parts.append(_END_TEMPLATE)
    return "".join(parts)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crawlkit", description="Scraping framework")
    commands = parser.add_subparsers(dest="command", required=True)
    new = commands.add_parser("new", help="Create new scraper")
    new.add_argument(
        "--callbacks",
        default="",
        help="Add callbacks to the template. (e.g. '--callbacks=html,response,error')",
    )
    new.add_argument(
        "--hosts",
        default="",
        help="Specify scraper's allowed hosts. (e.g. '--hosts=xy.com,abcd.com')",
    )
    new.add_argument(
        "path", nargs="?", default="", metavar="PATH", help="Path of the new scraper"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line tool."""
    args = _build_parser().parse_args(argv)
    callbacks = args.callbacks.split(",") if args.callbacks else []
    hosts = args.hosts.split(",") if args.hosts else []
    text = render_scraper(callbacks, hosts)
    if args.path:
        Path(args.path).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())