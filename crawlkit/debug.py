"""Debugging backends that receive collector events."""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, TextIO
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_WEB_ADDRESS = "127.0.0.1:7676"


@dataclass
class Event:
    """An action inside a collector."""

    type: str
    request_id: int = 0
    collector_id: int = 0
    values: dict[str, str] = field(default_factory=dict)


class Debugger(ABC):
    """Interface of debugging backends."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the backend for receiving events."""

    @abstractmethod
    def event(self, e: Event) -> None:
        """Receive a collector event."""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _quote_map(values: dict[str, str]) -> str:
    pairs = " ".join(f"{_quote(k)}:{_quote(v)}" for k, v in sorted(values.items()))
    return f"map[{pairs}]"


def _trim_number(value: float) -> str:
    text = f"{value:.9f}".rstrip("0").rstrip(".")
    return text or "0"


def _format_duration(nanoseconds: int) -> str:
    """Render a duration in the compact h/m/s/ms/µs/ns notation."""
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    ns = abs(nanoseconds)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_trim_number(ns / 1e3)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_trim_number(ns / 1e6)}ms"
    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    seconds = f"{_trim_number(rest / 1e9)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


class LogDebugger(Debugger):
    """Writes one line per event to a text stream (standard error by default)."""

    def __init__(
        self,
        output: TextIO | None = None,
        prefix: str = "",
        show_time: bool = False,
    ) -> None:
        self.output = output
        self.prefix = prefix
        self.show_time = show_time
        self._counter = 0
        self._start_ns = time.monotonic_ns()
        self._lock = threading.Lock()

    def init(self) -> None:
        """Reset the event counter and the clock, defaulting output to stderr."""
        with self._lock:
            self._counter = 0
            self._start_ns = time.monotonic_ns()
        if self.output is None:
            self.output = sys.stderr

    def event(self, e: Event) -> None:
        """Write the event as a single numbered log line."""
        with self._lock:
            self._counter += 1
            number = self._counter
        elapsed = time.monotonic_ns() - self._start_ns
        line = (
            f"[{number:06d}] {e.collector_id} [{e.request_id:6d} - {e.type}] "
            f"{_quote_map(e.values)} ({_format_duration(elapsed)})"
        )
        stamp = time.strftime("%Y/%m/%d %H:%M:%S ") if self.show_time else ""
        output = self.output if self.output is not None else sys.stderr
        with self._lock:
            output.write(f"{self.prefix}{stamp}{line}\n")
            output.flush()


@dataclass
class _RequestInfo:
    url: str = ""
    started: datetime | None = None
    duration_ns: int = 0
    response_status: str = ""
    id: int = 0
    collector_id: int = 0
    start_ns: int | None = field(default=None, repr=False, compare=False)

    def as_json(self) -> dict[str, Any]:
        started = (
            self.started.isoformat() if self.started else "0001-01-01T00:00:00Z"
        )
        return {
            "URL": self.url,
            "Started": started,
            "Duration": self.duration_ns,
            "ResponseStatus": self.response_status,
            "ID": self.id,
            "CollectorID": self.collector_id,
        }


_INDEX_PAGE = """<!DOCTYPE html>
<html>
<head>
 <meta charset="utf-8">
 <title>Crawler Debugger</title>
 <style>
  body { font-family: sans-serif; margin: 0; }
  header { background: #1b1c1d; color: #fff; padding: 0.8em 1.5em; }
  header a { color: #fff; font-weight: bold; text-decoration: none; }
  main { display: flex; gap: 2em; padding: 1em 1.5em; }
  section { flex: 1; }
  .event { border-bottom: 1px solid #ddd; padding: 0.4em 0; }
  .meta { color: #777; font-size: 0.85em; }
 </style>
</head>
<body>
<header><a href="/">Crawler Debugger</a></header>
<main>
 <section>
  <h1>Current Requests <span id="current_request_count"></span></h1>
  <div id="current_requests"></div>
 </section>
 <section>
  <h1>Finished Requests <span id="request_log_count"></span></h1>
  <div id="request_log"></div>
 </section>
</main>
<script>
function entry(url, meta) {
  var event = document.createElement("div");
  event.className = "event";
  var summary = document.createElement("div");
  summary.textContent = url;
  var info = document.createElement("div");
  info.className = "meta";
  info.textContent = meta;
  event.appendChild(summary);
  event.appendChild(info);
  return event;
}
function render(data) {
  var current = document.getElementById("current_requests");
  var log = document.getElementById("request_log");
  current.innerHTML = "";
  log.innerHTML = "";
  var keys = Object.keys(data.CurrentRequests);
  document.getElementById("current_request_count").textContent = "(" + keys.length + ")";
  document.getElementById("request_log_count").textContent = "(" + data.RequestLog.length + ")";
  keys.forEach(function (k) {
    var r = data.CurrentRequests[k];
    current.appendChild(entry(r.URL, "Collector #" + r.CollectorID + " - " + r.Started));
  });
  data.RequestLog.slice().reverse().forEach(function (r) {
    log.appendChild(entry(r.URL, "Collector #" + r.CollectorID + " - " + (r.Duration / 1000000000) + "s"));
  });
}
function fetchStatus() {
  fetch("/status")
    .then(function (resp) { return resp.json(); })
    .then(render)
    .finally(function () { setTimeout(fetchStatus, 1000); });
}
fetchStatus();
</script>
</body>
</html>
"""


class _Handler(BaseHTTPRequestHandler):
    server: "_DebugServer"

    def do_GET(self) -> None:  # noqa: N802 - name fixed by the base class
        path = urlsplit(self.path).path
        if path == "/status":
            body = self.server.debugger.status_json().encode("utf-8")
            content_type = "application/json"
        else:
            body = _INDEX_PAGE.encode("utf-8")
            content_type = "text/html; charset=utf-8"
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        """Send access log lines to the module logger instead of stderr."""
        logger.debug("%s - %s", self.address_string(), format % args)


class _DebugServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], debugger: "WebDebugger") -> None:
        self.debugger = debugger
        super().__init__(address, _Handler)


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {address!r}")
    return host.strip("[]"), int(port)


class WebDebugger(Debugger):
    """Keeps track of requests and shows them on a small local web page."""

    def __init__(self, address: str = "") -> None:
        self.address = address
        self.current_requests: dict[int, _RequestInfo] = {}
        self.request_log: list[_RequestInfo] = []
        self._initialized = False
        self._server: _DebugServer | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def init(self) -> None:
        """Start the web server in the background; later calls do nothing.

        After start, ``address`` holds the address the server is bound to.
        """
        if self._initialized:
            return
        if not self.address:
            self.address = DEFAULT_WEB_ADDRESS
        with self._lock:
            self.request_log = []
            self.current_requests = {}
        host, port = _split_address(self.address)
        server = _DebugServer((host, port), self)
        bound_host, bound_port = server.server_address[:2]
        self.address = f"{bound_host}:{bound_port}"
        logger.info("Starting debug webserver on %s", self.address)
        self._server = server
        self._thread = threading.Thread(target=server.serve_forever, daemon=True)
        self._thread.start()
        self._initialized = True

    def event(self, e: Event) -> None:
        """Record request starts and their finishing responses or errors."""
        with self._lock:
            if e.type == "request":
                self.current_requests[e.request_id] = _RequestInfo(
                    url=e.values.get("url", ""),
                    started=datetime.now(timezone.utc),
                    id=e.request_id,
                    collector_id=e.collector_id,
                    start_ns=time.monotonic_ns(),
                )
            elif e.type in ("response", "error"):
                info = self.current_requests.pop(e.request_id, None) or _RequestInfo()
                if info.start_ns is not None:
                    info.duration_ns = time.monotonic_ns() - info.start_ns
                info.response_status = e.values.get("status", "")
                self.request_log.append(info)

    def status_json(self) -> str:
        """Return the current state as the JSON document served on /status."""
        with self._lock:
            data = {
                "Address": self.address,
                "CurrentRequests": {
                    str(key): info.as_json()
                    for key, info in self.current_requests.items()
                },
                "RequestLog": [info.as_json() for info in self.request_log],
            }
        return json.dumps(data, indent=2)

    def close(self) -> None:
        """Stop the web server if it is running."""
        server, thread = self._server, self._thread
        self._server = None
        self._thread = None
        if server is not None:
            server.shutdown()
            server.server_close()
        if thread is not None:
            thread.join()
        self._initialized = False