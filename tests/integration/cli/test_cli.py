"""Integration tests for the mdsite CLI commands"""

import json

import pytest
from typer.testing import CliRunner

from mdsite.cli.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def site(tmp_path, monkeypatch, write_mdx):
    """A small site in tmp_path, found through the default docs/ and content/ roots."""
    monkeypatch.chdir(tmp_path)
    for name in ("MODE", "DOCS_DIR", "CONTENT_DIR", "OUTPUT_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(f"MDSITE_{name}", raising=False)
    write_mdx(tmp_path / "docs", "00 - Quick Start & Setup/intro.mdx",
              "---\ntitle: Intro\norder: 1\ncategory: Basics\n---\n# Intro\n\nHello *there*.\n")
    write_mdx(tmp_path / "docs", "tips.mdx",
              "---\ntitle: Tips\norder: 2\ndraft: true\n---\n<Callout>\nA tip.\n</Callout>\n")
    write_mdx(tmp_path / "content" / "blog", "launch.mdx",
              "---\ntitle: Launch\ndate: 2024-06-01\n---\nWe launched.\n")


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("build", "list", "show", "nav", "render"):
        assert command in result.output


def test_list_docs():
    result = runner.invoke(app, ["list", "docs"])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0] == "quick-start/intro\tIntro\t1 min read"
    assert lines[1] == "tips\tTips\t1 min read [draft]"


def test_list_production_hides_drafts():
    result = runner.invoke(app, ["list", "docs", "--mode", "production"])
    assert result.exit_code == 0, result.output
    assert "tips" not in result.output


def test_list_empty_collection(tmp_path):
    (tmp_path / "content" / "blog" / "launch.mdx").unlink()
    result = runner.invoke(app, ["list", "blog"])
    assert result.exit_code == 1
    assert "No blog content found." in result.output


def test_list_docs_dir_from_env(tmp_path, monkeypatch, write_mdx):
    write_mdx(tmp_path / "other", "only.mdx", "---\ntitle: Only\n---\nBody\n")
    monkeypatch.setenv("MDSITE_DOCS_DIR", str(tmp_path / "other"))
    result = runner.invoke(app, ["list", "docs"])
    assert result.exit_code == 0, result.output
    assert result.output.startswith("only\tOnly")


def test_show():
    result = runner.invoke(app, ["show", "launch", "--category", "blog"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["slug"] == "launch"
    assert data["frontmatter"] == {"title": "Launch", "date": "2024-06-01", "tags": [], "draft": False}
    assert data["compiled"] is True


def test_show_not_found():
    result = runner.invoke(app, ["show", "missing"])
    assert result.exit_code == 1
    assert "No docs content with slug 'missing'" in result.output


def test_nav():
    result = runner.invoke(app, ["nav"])
    assert result.exit_code == 0, result.output
    nav = json.loads(result.output)
    assert [s["title"] for s in nav] == ["Basics", "General"]
    assert nav[0]["items"] == [{"title": "Intro", "href": "/docs/quick-start/intro", "order": 1}]


def test_render():
    result = runner.invoke(app, ["render", "quick-start/intro"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "<h1>Intro</h1><p>Hello <em>there</em>.</p>"


def test_render_missing_component_fails():
    result = runner.invoke(app, ["render", "tips"])
    assert result.exit_code == 1
    assert "Rendering 'tips' failed" in result.output
    assert "Expected component `Callout` to be defined" in result.output


def test_invalid_config(tmp_path):
    (tmp_path / "config.yaml").write_text("mode: [unclosed\n")
    result = runner.invoke(app, ["nav"])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output


def test_build(tmp_path):
    out = tmp_path / "site"
    result = runner.invoke(app, ["build", "--out-dir", str(out), "--mode", "production"])
    assert result.exit_code == 0, result.output
    assert (out / "docs" / "quick-start" / "intro.html").exists()
    assert (out / "blog" / "launch.html").exists()
    assert not (out / "docs" / "tips.html").exists()
    sidecar = json.loads((out / "docs" / "quick-start" / "intro.json").read_text())
    assert sidecar["view"] == "rendered"
    assert json.loads((out / "navigation.json").read_text())[0]["title"] == "Basics"
    assert "Built 1 doc(s) and 1 post(s)" in result.output


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("MDSITE_LOG_LEVEL", "verbose")
    result = runner.invoke(app, ["nav"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "log_level" in result.output
