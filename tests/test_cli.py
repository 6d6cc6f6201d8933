import ast

import pytest

from crawlkit import cli
from crawlkit.cli import main, render_scraper


def test_render_without_options_is_valid_python():
    text = render_scraper([], [])
    ast.parse(text)
    assert text.startswith(cli._HEAD_TEMPLATE)
    assert text.endswith(cli._END_TEMPLATE)
    assert "allowed_domains" not in text
    for template in cli._CALLBACK_TEMPLATES.values():
        assert template not in text


def test_render_hosts():
    text = render_scraper([], ["xy.com", "abcd.com"])
    ast.parse(text)
    assert f"config.allowed_domains = {['xy.com', 'abcd.com']!r}" in text
    assert text.index("allowed_domains") < text.index("Collector(config)")


@pytest.mark.parametrize("name", ["html", "request", "response", "error"])
def test_render_each_callback(name):
    text = render_scraper([name], [])
    ast.parse(text)
    assert cli._CALLBACK_TEMPLATES[name] in text


def test_render_keeps_callback_order():
    text = render_scraper(["error", "html"], [])
    assert text.index(cli._ERROR_CALLBACK_TEMPLATE) < text.index(
        cli._HTML_CALLBACK_TEMPLATE
    )
    assert text.index(cli._HTML_CALLBACK_TEMPLATE) < text.index(cli._END_TEMPLATE)


def test_render_ignores_unknown_callbacks():
    assert render_scraper(["bogus", "html"], []) == render_scraper(["html"], [])


def test_main_writes_stdout(capsys):
    assert main(["new"]) == 0
    assert capsys.readouterr().out == render_scraper([], [])


def test_main_writes_file(tmp_path):
    target = tmp_path / "scraper.py"
    assert main(["new", "--callbacks=html,response", "--hosts", "xy.com", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == render_scraper(
        ["html", "response"], ["xy.com"]
    )


def test_main_requires_command():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2