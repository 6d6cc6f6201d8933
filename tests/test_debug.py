import io
import json
import urllib.request

import pytest

from crawlkit.debug import Debugger, Event, LogDebugger, WebDebugger


def _log_lines(debugger, events):
    for e in events:
        debugger.event(e)
    return debugger.output.getvalue().splitlines(keepends=True)


def test_debugger_is_abstract():
    with pytest.raises(TypeError):
        Debugger()


def test_log_debugger_line_format():
    out = io.StringIO()
    d = LogDebugger(output=out, prefix="dbg ")
    d.init()
    lines = _log_lines(d, [Event("request", 7, 3, {"url": "http://example.com/"})])
    assert len(lines) == 1
    assert lines[0].startswith(
        'dbg [000001] 3 [     7 - request] map["url":"http://example.com/"] ('
    )
    assert lines[0].endswith("s)\n")


def test_log_debugger_counts_events():
    out = io.StringIO()
    d = LogDebugger(output=out)
    d.init()
    lines = _log_lines(d, [Event("request", 1, 1), Event("response", 1, 1)])
    assert len(lines) == 2
    assert lines[1].startswith("[000002]")
    assert " - response]" in lines[1]


def test_log_debugger_sorts_values():
    out = io.StringIO()
    d = LogDebugger(output=out)
    d.init()
    lines = _log_lines(d, [Event("response", 2, 1, {"url": "u", "status": "OK"})])
    assert lines[0].index('"status":"OK"') < lines[0].index('"url":"u"')


def test_log_debugger_init_resets_counter():
    out = io.StringIO()
    d = LogDebugger(output=out)
    d.init()
    d.event(Event("request", 1, 1))
    d.init()
    d.event(Event("request", 2, 1))
    lines = out.getvalue().splitlines()
    assert lines[0][:8] == lines[1][:8]


def test_log_debugger_defaults_to_stderr(capsys):
    d = LogDebugger()
    d.init()
    d.event(Event("scraped", 4, 9, {"url": "http://example.com/"}))
    err = capsys.readouterr().err
    assert "[000001] 9" in err
    assert "scraped" in err


def test_web_debugger_request_then_response():
    d = WebDebugger()
    d.event(Event("request", 5, 2, {"url": "http://example.com/a"}))
    assert 5 in d.current_requests
    d.event(Event("response", 5, 2, {"url": "http://example.com/a", "status": "OK"}))
    assert d.current_requests == {}
    assert len(d.request_log) == 1
    entry = d.request_log[0]
    assert entry.url == "http://example.com/a"
    assert entry.response_status == "OK"
    assert entry.collector_id == 2
    assert entry.duration_ns >= 0


def test_web_debugger_error_finishes_request():
    d = WebDebugger()
    d.event(Event("request", 1, 1, {"url": "http://example.com/x"}))
    d.event(Event("error", 1, 1, {"status": "Not Found"}))
    assert [r.response_status for r in d.request_log] == ["Not Found"]


def test_web_debugger_ignores_other_events():
    d = WebDebugger()
    d.event(Event("html", 1, 1, {"selector": "a"}))
    assert d.current_requests == {}
    assert d.request_log == []


def test_web_debugger_status_json():
    d = WebDebugger()
    d.event(Event("request", 3, 1, {"url": "http://example.com/one"}))
    d.event(Event("request", 4, 1, {"url": "http://example.com/two"}))
    d.event(Event("response", 4, 1, {"status": "OK"}))
    data = json.loads(d.status_json())
    assert list(data["CurrentRequests"]) == ["3"]
    assert data["CurrentRequests"]["3"]["URL"] == "http://example.com/one"
    assert data["RequestLog"][0]["URL"] == "http://example.com/two"
    assert data["RequestLog"][0]["ResponseStatus"] == "OK"


def test_web_debugger_serves_status_and_index():
    d = WebDebugger("127.0.0.1:0")
    d.init()
    try:
        address = d.address
        d.init()
        assert d.address == address
        d.event(Event("request", 8, 1, {"url": "http://example.com/s"}))
        with urllib.request.urlopen(f"http://{address}/status", timeout=5) as resp:
            data = json.loads(resp.read().decode("utf-8"))
        assert data["CurrentRequests"]["8"]["URL"] == "http://example.com/s"
        with urllib.request.urlopen(f"http://{address}/", timeout=5) as resp:
            page = resp.read().decode("utf-8")
        assert "/status" in page
    finally:
        d.close()


def test_web_debugger_invalid_address():
    d = WebDebugger("no-port-here")
    with pytest.raises(ValueError):
        d.init()