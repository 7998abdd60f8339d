import json
from pathlib import Path

from typer.testing import CliRunner

from urltabs.cli import app

runner = CliRunner()


def write_settings(tmp_path: Path) -> Path:
    path = tmp_path / "urltabs.json"
    path.write_text(
        json.dumps({"endpoints": [{"name": "tab"}, {"name": "overview", "mask": "CATEGORIES"}]}),
        encoding="utf-8",
    )
    return path


def test_resolve_command_shows_three_states(tmp_path: Path):
    cfg = write_settings(tmp_path)
    result = runner.invoke(app, ["--config", str(cfg), "resolve", "/cat/overview/"])

    assert result.exit_code == 0, result.output
    assert "Base URL: /cat/" in result.output
    assert "(absent)" in result.output
    assert "(empty)" in result.output


def test_tab_command():
    result = runner.invoke(app, ["tab", "/products/tab/shoes/", "--slug", "Shoes!!"])
    assert result.exit_code == 0, result.output
    assert "URL: /products/tab/shoes/" in result.output
    assert "Active: yes" in result.output


def test_visibility_command_fails_open():
    result = runner.invoke(app, ["visibility", "/p/tab/x/", "--condition", "bogus"])
    assert result.exit_code == 0, result.output
    assert "Condition: always" in result.output
    assert "Hidden: no" in result.output


def test_render_command(tmp_path: Path):
    blocks = [
        {
            "blockName": "core/navigation-link",
            "attrs": {"kind": "tab", "tabEndpoint": "tab", "url": "general"},
            "innerHTML": '<li class="item"><a href="#">General</a></li>',
        },
        {
            "blockName": "core/paragraph",
            "attrs": {"hmUrlTabVisibility": {"condition": "endpoint-empty"}},
            "innerHTML": "<p>Landing</p>",
        },
    ]
    blocks_file = tmp_path / "blocks.json"
    blocks_file.write_text(json.dumps(blocks), encoding="utf-8")

    result = runner.invoke(app, ["render", "/p/tab/general/", str(blocks_file)])
    assert result.exit_code == 0, result.output
    assert 'href="/p/tab/general/"' in result.output
    assert "Landing" not in result.output


def test_editor_data_command(tmp_path: Path):
    cfg = write_settings(tmp_path)
    result = runner.invoke(app, ["-c", str(cfg), "editor-data", "--current-url", "/page/"])
    assert result.exit_code == 0, result.output

    payload = json.loads(result.output)
    assert [e["name"] for e in payload["endpoints"]] == ["tab", "overview"]
    assert payload["currentUrl"] == "/page/"


def test_endpoints_command_filters_by_page_type(tmp_path: Path):
    cfg = write_settings(tmp_path)
    result = runner.invoke(app, ["-c", str(cfg), "endpoints", "--page", "PAGES"])
    assert result.exit_code == 0, result.output
    assert "tab" in result.output
    assert "overview" not in result.output


def test_bad_config_is_reported(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    result = runner.invoke(app, ["--config", str(bad), "resolve", "/p/"])
    assert result.exit_code != 0
