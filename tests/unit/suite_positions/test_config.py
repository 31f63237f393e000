from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP
from pathlib import Path

import pytest

from suite_positions.config import PositionsSettings, get_settings, load_settings, reset_settings, set_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # Run from an empty directory so no .env file is picked up
    monkeypatch.chdir(tmp_path)
    for name in ("SUITE_POSITIONS_CURRENCY_TABLE", "SUITE_POSITIONS_ROUNDING", "SUITE_POSITIONS_STRICT_PRECISION", "SUITE_POSITIONS_STORAGE_BITS"):
        # setenv first so variables written by load_dotenv are removed again on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env) -> None:
    settings = load_settings()

    assert settings == PositionsSettings()
    assert settings.rounding == ROUND_HALF_EVEN
    assert settings.strict_precision is False
    assert settings.default_storage_bits == 64
    assert settings.currency_table_path is None


def test_environment_overrides(clean_env) -> None:
    clean_env.setenv("SUITE_POSITIONS_CURRENCY_TABLE", "/tmp/currencies.csv")
    clean_env.setenv("SUITE_POSITIONS_ROUNDING", "round_half_up")
    clean_env.setenv("SUITE_POSITIONS_STRICT_PRECISION", "yes")
    clean_env.setenv("SUITE_POSITIONS_STORAGE_BITS", "128")

    settings = load_settings()

    assert settings.currency_table_path == Path("/tmp/currencies.csv")
    assert settings.rounding == ROUND_HALF_UP
    assert settings.strict_precision is True
    assert settings.default_storage_bits == 128


def test_dotenv_file_is_loaded(clean_env, tmp_path) -> None:
    (tmp_path / ".env").write_text("SUITE_POSITIONS_STRICT_PRECISION=true\n", encoding="utf-8")
    assert load_settings().strict_precision is True


@pytest.mark.parametrize(
    "name, value",
    [
        ("SUITE_POSITIONS_ROUNDING", "ROUND_SOMETIMES"),
        ("SUITE_POSITIONS_STRICT_PRECISION", "maybe"),
        ("SUITE_POSITIONS_STORAGE_BITS", "sixty-four"),
        ("SUITE_POSITIONS_STORAGE_BITS", "48"),
        ("SUITE_POSITIONS_STORAGE_BITS", "32"),
    ],
)
def test_invalid_environment_values(clean_env, name: str, value: str) -> None:
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()


def test_get_settings_caches_until_reset(clean_env) -> None:
    custom = PositionsSettings(strict_precision=True)
    set_settings(custom)
    assert get_settings() is custom

    reset_settings()
    assert get_settings() == PositionsSettings()


def test_set_settings_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        set_settings({"strict_precision": True})
