"""Tests for the static site catch-all route served through the app."""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Set env before importing app so pydantic-settings picks them up.
os.environ.setdefault("ENV", "test")

from toolbox_site.config import settings
from toolbox_site.main import app, request_target
from toolbox_site.static_files import load_static

client = TestClient(app)


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the app at a throw-away static root."""
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "styles.css").write_text("body { margin: 0; }")
    (root / "data.bin").write_bytes(bytes(range(256)))
    monkeypatch.setattr(settings, "STATIC_ROOT", str(root))
    return root


def test_root_serves_index(site_root: Path) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.content == b"<h1>home</h1>"
    assert response.headers["content-type"].startswith("text/html")


def test_known_asset_returns_exact_bytes_and_type(site_root: Path) -> None:
    response = client.get("/styles.css?cache=1")
    assert response.status_code == 200
    assert response.content == (site_root / "styles.css").read_bytes()
    assert response.headers["content-type"].startswith("text/css")


def test_unknown_extension_is_octet_stream(site_root: Path) -> None:
    response = client.get("/data.bin")
    assert response.status_code == 200
    assert response.content == bytes(range(256))
    assert response.headers["content-type"] == "application/octet-stream"


def test_unknown_document_path_falls_back_to_index(site_root: Path) -> None:
    """Extensionless misses are client-side routes: 200 with the default document."""
    response = client.get("/toolbox/character-counter")
    assert response.status_code == 200
    assert response.content == b"<h1>home</h1>"


def test_missing_asset_returns_404(site_root: Path) -> None:
    response = client.get("/missing.js")
    assert response.status_code == 404
    assert response.text == "Not found"


def test_missing_fallback_returns_500(site_root: Path) -> None:
    (site_root / "index.html").unlink()
    response = client.get("/anything")
    assert response.status_code == 500
    assert response.text == "Server error"


def test_traversal_returns_400(site_root: Path) -> None:
    (site_root.parent / "secret.txt").write_text("outside")
    response = client.get("/%2E%2E/%2E%2E/secret.txt")
    assert response.status_code == 400
    assert response.text == "Bad request"


def test_head_request_is_served(site_root: Path) -> None:
    response = client.head("/styles.css")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/css")


def test_post_to_static_path_is_served(site_root: Path) -> None:
    """Only the transcript route handles POST; other paths stay static."""
    response = client.post("/styles.css", content=b"ignored")
    assert response.status_code == 200
    assert response.content == b"body { margin: 0; }"


def test_other_methods_fall_through_to_static(site_root: Path) -> None:
    assert client.put("/index.html").content == b"<h1>home</h1>"
    response = client.delete("/missing.js")
    assert response.status_code == 404
    assert response.text == "Not found"


def test_request_target_keeps_raw_utf8_bytes() -> None:
    """Raw non-ASCII bytes decode as UTF-8 rather than Latin-1."""
    scope = {"path": "/café.txt", "raw_path": "/café.txt".encode()}
    assert request_target(scope) == "/café.txt"


def test_request_target_keeps_percent_escapes_for_the_responder() -> None:
    scope = {"path": "/my file.txt", "raw_path": b"/my%20file.txt"}
    assert request_target(scope) == "/my%20file.txt"


def test_raw_utf8_file_name_is_served(site_root: Path) -> None:
    (site_root / "café.txt").write_text("accent")
    scope = {"path": "/café.txt", "raw_path": "/café.txt".encode()}
    resource = load_static(site_root, request_target(scope))
    assert resource.body == b"accent"
