"""Tests for environment settings validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.config.settings import Settings, load_settings

_KEYS = (
    "EMPLOYEES_PATH",
    "LOG_LEVEL",
    "NAME_MIN_SCORE",
    "FIELD_MIN_SCORE",
    "MATCH_TOP_N",
    "LLM_ENABLED",
    "LLM_API_KEY",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.employees_path is None
    assert settings.log_level == "INFO"
    assert (settings.name_min_score, settings.field_min_score, settings.match_top_n) == (85, 85, 3)
    assert settings.llm_enabled is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMPLOYEES_PATH", "data/employees.json")
    monkeypatch.setenv("NAME_MIN_SCORE", "90")
    monkeypatch.setenv("MATCH_TOP_N", "5")
    settings = load_settings()
    assert settings.employees_path == "data/employees.json"
    assert settings.name_min_score == 90
    assert settings.match_top_n == 5


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("FIELD_MIN_SCORE=80\n", encoding="utf-8")
    assert load_settings().field_min_score == 80


def test_llm_enabled_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_ENABLED", "true")
    with pytest.raises(RuntimeError):
        load_settings()


def test_scores_are_bounded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NAME_MIN_SCORE", "101")
    with pytest.raises(RuntimeError):
        load_settings()


def test_top_n_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, MATCH_TOP_N=0)
