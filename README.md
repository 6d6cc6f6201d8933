# crawlkit

crawlkit is a small toolkit for building web scrapers around callbacks.
A `Collector` holds the rules that decide which URLs may be requested
and the callbacks that run as a page moves through its life cycle:
request, response headers, response, matched HTML or XML elements,
errors, and the end of scraping.

## Installation

```
pip install crawlkit
```

To run the test suite:

```
pip install "crawlkit[test]"
pytest
```

## The collector

```python
from crawlkit.collector import Collector
from crawlkit.settings import CollectorConfig

collector = Collector(CollectorConfig())

collector.on_request(lambda request: print("visiting", request))
collector.on_html("a[href]", lambda element: print("link", element))
collector.on_xml("//urlset/url/loc", lambda element: print("sitemap entry", element))
collector.on_error(lambda response, error: print("failed:", error))
collector.on_scraped(lambda response: print("done"))
```

Callbacks registered for a selector or query can be removed again with
`on_html_detach` and `on_xml_detach`.

Before a request is sent, `request_check` applies the collector's rules in
order: a missing URL, the depth limit, the disallowed and allowed URL
filters, the allowed and disallowed domains, and, unless revisiting is
allowed, whether the same URL and body were already requested. Each rule
that fails raises its own exception:

```python
from crawlkit.errors import AlreadyVisitedError, CollyError

try:
    collector.request_check("https://example.com/", "GET", None, 1, True)
    collector.request_check("https://example.com/", "GET", None, 1, True)
except AlreadyVisitedError:
    print("seen it already")
except CollyError as error:
    print("refused:", error)
```

`has_visited(url)` and `has_posted(url, form_data)` tell whether a GET or
a form POST has been recorded. `check_filters` and `is_domain_allowed`
expose the URL and domain rules on their own, and `check_redirect` applies
them to a redirect target, with a custom policy settable through
`set_redirect_handler`.

`clone()` returns a collector with the same configuration and shared
visit store but no callbacks, and `str(collector)` gives a one-line
summary of requests, responses and registered callbacks.

### Configuration

`CollectorConfig` holds the collector's settings. `copy()` returns an
independent copy, and `apply_env(environ)` updates the settings from an
environment mapping, so a deployment can adjust a scraper without code
changes.

### Passing data between callbacks

Every request carries a `crawlkit.context.Context`:

```python
from crawlkit.context import Context

ctx = Context()
ctx.put("page", "1")
ctx.get("page")          # "1"
ctx.get("missing")       # ""
ctx.get_any("missing")   # None
ctx.for_each(lambda key, value: (key, value))
```

## Debugging

`crawlkit.debug` provides two debuggers that receive an `Event` for each
step a collector takes:

- `LogDebugger` writes one numbered line per event, with the collector
  id, request id, event type, values and elapsed time.
- `WebDebugger` serves a small status page listing requests in flight
  and finished requests; `status_json()` returns the same data as JSON,
  and `close()` stops the server.

```python
from crawlkit.debug import LogDebugger

collector = Collector(CollectorConfig(), debugger=LogDebugger())
```

A debugger can also be attached later with `collector.set_debugger(...)`.

## Scaffolding a new scraper

The `crawlkit` command writes the skeleton of a new scraper:

```
crawlkit new --callbacks=html,response,error --hosts=example.com,example.org scraper.py
```

`--callbacks` picks which callback stubs (`html`, `request`, `response`,
`error`) go into the skeleton, `--hosts` restricts it to the given
domains, and without a path the skeleton is printed to standard output.
The same text is available from Python with
`crawlkit.cli.render_scraper(callbacks, hosts)`.