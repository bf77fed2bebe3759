from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app import app
from overview.config import OverviewConfig
from overview.core import OverviewRenderer, build_preview_page
from web.api import set_renderer


PROJECT_ROOT = Path(__file__).resolve().parent.parent


def run_cmd(*args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, *args],
        cwd=PROJECT_ROOT,
        input=stdin,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


@pytest.fixture
def client():
    set_renderer(OverviewRenderer(OverviewConfig()))
    yield TestClient(app)
    set_renderer(None)


def test_cli_help():
    result = run_cmd("overview/main.py", "--help")
    assert result.returncode == 0
    assert "AI Overview" in result.stdout


def test_web_help():
    result = run_cmd("app.py", "--help")
    assert result.returncode == 0
    assert "overview-content-studio Web App" in result.stdout


def test_cli_collapsed_render_to_file(tmp_path):
    source = tmp_path / "pasted.html"
    source.write_text("<p>abcdefghij</p>[http://a.com/x.png]", encoding="utf-8")
    output = tmp_path / "out" / "overview.html"

    result = run_cmd("overview/main.py", str(source), "--collapsed", "-b", "5", "-o", str(output))
    assert result.returncode == 0
    assert output.read_text(encoding="utf-8") == "<p>abcde</p>"


def test_cli_reads_stdin():
    result = run_cmd("overview/main.py", "-", stdin="<script>alert(1)</script>Hello")
    assert result.returncode == 0
    assert result.stdout.strip() == "Hello"


def test_cli_missing_input():
    result = run_cmd("overview/main.py", "does-not-exist.html")
    assert result.returncode == 1


def test_index(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["name"] == "overview-content-studio"


def test_api_config(client):
    resp = client.get("/api/config")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["truncation_budget"] == 750
    assert payload["strip_platform_artifacts"] is True
    assert payload["highlight_color"] == "#d3e3fd"
    assert payload["notation_help"]


def test_api_render(client):
    resp = client.post(
        "/api/render",
        json={"content": "Hello {[http://a.com/1.jpg][http://a.com/2.jpg]} world", "expanded": True},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["image_count"] == 2
    assert len(payload["container_ids"]) == 1
    assert payload["was_truncated"] is False

    resp = client.post("/api/render", json={"content": "a" * 1000, "budget": 750})
    payload = resp.json()
    assert payload["was_truncated"] is True
    assert payload["visible_length"] == 750


def test_api_render_rejects_negative_budget(client):
    resp = client.post("/api/render", json={"content": "abc", "budget": -1})
    assert resp.status_code == 422


def test_api_preview(client):
    resp = client.post("/api/preview", json={"content": "<b>bold</b> text"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "<b>bold</b> text" in resp.text
    assert "AI Overview" in resp.text


def test_api_upload(client):
    resp = client.post(
        "/api/upload",
        files={"file": ("pasted.html", "<p>hi</p>".encode("utf-8"), "text/html")},
    )
    assert resp.status_code == 200
    assert resp.json() == {"filename": "pasted.html", "content": "<p>hi</p>"}

    resp = client.post(
        "/api/upload",
        files={"file": ("image.png", b"\x89PNG", "image/png")},
    )
    assert resp.status_code == 400


def test_preview_page_show_more_only_when_truncated():
    renderer = OverviewRenderer(OverviewConfig())
    collapsed = renderer.render_truncated("a" * 100, 10)
    full = renderer.render("a" * 100)

    assert "Show more" in build_preview_page(collapsed, toggle_href="#full")
    assert "Show more" not in build_preview_page(collapsed)
    assert "Show more" not in build_preview_page(full, toggle_href="#full")
