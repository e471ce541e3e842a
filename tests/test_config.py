"""Tests for settings defaults and environment overrides."""

from pathlib import Path

import pytest

from toolbox_site.config import PROJECT_ROOT, Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.PORT == 3000
    assert settings.MAX_BODY_BYTES == 1_000_000
    assert settings.DEFAULT_DOCUMENT == "index.html"


def test_port_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    assert Settings(_env_file=None).PORT == 8080


def test_relative_static_root_resolves_against_project_root() -> None:
    settings = Settings(_env_file=None, STATIC_ROOT="public")
    assert settings.static_root_path() == (PROJECT_ROOT / "public").resolve()


def test_absolute_static_root_is_kept(tmp_path: Path) -> None:
    settings = Settings(_env_file=None, STATIC_ROOT=str(tmp_path))
    assert settings.static_root_path() == tmp_path.resolve()
