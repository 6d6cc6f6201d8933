"""Collector settings and their environment-variable overrides."""

from __future__ import annotations

import itertools
import logging
import os
import re
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Mapping, Pattern

from crawlkit.helpers import is_yes_string

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "crawlkit"
DEFAULT_MAX_BODY_SIZE = 10 * 1024 * 1024
ENV_PREFIX = "CRAWLKIT_"

_INTEGER = re.compile(r"[+-]?[0-9]+")

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def _next_id() -> int:
    with _id_lock:
        return next(_id_counter)


def _parse_int(value: str) -> int | None:
    """Parse a plain decimal integer, or return None if ``value`` is not one."""
    if _INTEGER.fullmatch(value) is None:
        return None
    return int(value)


@dataclass
class CollectorConfig:
    """The tunable settings of a collector.

    ``max_depth`` of 0 means unlimited depth, ``max_body_size`` of 0 means an
    unlimited body size, and an empty ``allowed_domains`` allows every domain.
    """

    user_agent: str = DEFAULT_USER_AGENT
    headers: dict[str, str] | None = None
    max_depth: int = 0
    allowed_domains: list[str] = field(default_factory=list)
    disallowed_domains: list[str] = field(default_factory=list)
    disallowed_url_filters: list[Pattern[str]] = field(default_factory=list)
    url_filters: list[Pattern[str]] = field(default_factory=list)
    allow_url_revisit: bool = False
    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    cache_dir: str = ""
    ignore_robots_txt: bool = True
    asynchronous: bool = False
    parse_http_error_response: bool = False
    id: int = field(default_factory=_next_id)
    detect_charset: bool = False
    check_head: bool = False
    trace_http: bool = False
    cookies_enabled: bool = True
    follow_redirects: bool = True

    def apply_env(self, environ: Mapping[str, str] | None = None) -> list[str]:
        """Override settings from ``CRAWLKIT_*`` variables.

        ``environ`` defaults to the process environment. Variables without the
        prefix are skipped; unknown ones are logged and their names (without
        the prefix) returned in the order they were seen.
        """
        if environ is None:
            environ = os.environ
        unknown: list[str] = []
        for name, value in environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            key = name[len(ENV_PREFIX):]
            handler = _ENV_HANDLERS.get(key)
            if handler is None:
                logger.warning("Unknown environment variable: %s", key)
                unknown.append(key)
                continue
            handler(self, value)
        return unknown

    def copy(self) -> "CollectorConfig":
        """Return an independent copy that carries a fresh collector id."""
        return replace(
            self,
            headers=dict(self.headers) if self.headers is not None else None,
            allowed_domains=list(self.allowed_domains),
            disallowed_domains=list(self.disallowed_domains),
            disallowed_url_filters=list(self.disallowed_url_filters),
            url_filters=list(self.url_filters),
            id=_next_id(),
        )


def _set_max_body_size(config: CollectorConfig, value: str) -> None:
    size = _parse_int(value)
    if size is not None:
        config.max_body_size = size


def _set_max_depth(config: CollectorConfig, value: str) -> None:
    depth = _parse_int(value)
    if depth is not None:
        config.max_depth = depth


def _set_follow_redirects(config: CollectorConfig, value: str) -> None:
    if not is_yes_string(value):
        config.follow_redirects = False


def _set_attr(name: str) -> Callable[[CollectorConfig, str], None]:
    def handler(config: CollectorConfig, value: str) -> None:
        setattr(config, name, value)

    return handler


def _set_flag(name: str) -> Callable[[CollectorConfig, str], None]:
    def handler(config: CollectorConfig, value: str) -> None:
        setattr(config, name, is_yes_string(value))

    return handler


def _set_list(name: str) -> Callable[[CollectorConfig, str], None]:
    def handler(config: CollectorConfig, value: str) -> None:
        setattr(config, name, value.split(","))

    return handler


def _disable_cookies(config: CollectorConfig, _value: str) -> None:
    config.cookies_enabled = False


_ENV_HANDLERS: dict[str, Callable[[CollectorConfig, str], None]] = {
    "ALLOWED_DOMAINS": _set_list("allowed_domains"),
    "CACHE_DIR": _set_attr("cache_dir"),
    "DETECT_CHARSET": _set_flag("detect_charset"),
    "DISABLE_COOKIES": _disable_cookies,
    "DISALLOWED_DOMAINS": _set_list("disallowed_domains"),
    "IGNORE_ROBOTSTXT": _set_flag("ignore_robots_txt"),
    "FOLLOW_REDIRECTS": _set_follow_redirects,
    "MAX_BODY_SIZE": _set_max_body_size,
    "MAX_DEPTH": _set_max_depth,
    "PARSE_HTTP_ERROR_RESPONSE": _set_flag("parse_http_error_response"),
    "TRACE_HTTP": _set_flag("trace_http"),
    "USER_AGENT": _set_attr("user_agent"),
}