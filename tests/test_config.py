"""Tests for environment and CLI configuration."""
from __future__ import annotations

import os

import pytest

from ambientble import const
from ambientble.cli import build_config, parse_args
from ambientble.config import AmbientConfig
from ambientble.transition import ColorMode, TransitionMode


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith(const.ENV_PREFIX):
            monkeypatch.delenv(name)


def test_defaults() -> None:
    config = AmbientConfig.from_env()
    assert config == AmbientConfig()
    assert config.match_names == const.DEFAULT_MATCH_NAMES
    assert config.color_mode is ColorMode.SINGLE
    assert config.max_frames is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMBIENTBLE_MATCH_NAMES", "ELK, QHM ,")
    monkeypatch.setenv("AMBIENTBLE_COLOR_MODE", "MULTI")
    monkeypatch.setenv("AMBIENTBLE_TRANSITION", "instant")
    monkeypatch.setenv("AMBIENTBLE_SATURATION_GAIN", "2.5")
    monkeypatch.setenv("AMBIENTBLE_KEEP_ALIVE_INTERVAL", "25")
    monkeypatch.setenv("AMBIENTBLE_UPDATE_LIGHTS", "no")
    monkeypatch.setenv("AMBIENTBLE_MAX_FRAMES", "100")

    config = AmbientConfig.from_env()

    assert config.match_names == ("ELK", "QHM")
    assert config.color_mode is ColorMode.MULTI
    assert config.transition_mode is TransitionMode.INSTANT
    assert config.saturation_gain == 2.5
    assert config.keep_alive_interval == 25
    assert config.update_lights is False
    assert config.max_frames == 100


def test_invalid_env_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMBIENTBLE_SENSITIVITY", "lots")
    monkeypatch.setenv("AMBIENTBLE_BLANK_THRESHOLD", "dark")
    monkeypatch.setenv("AMBIENTBLE_COLOR_MODE", "rainbow")

    config = AmbientConfig.from_env()

    assert config.sensitivity == const.DEFAULT_SENSITIVITY
    assert config.blank_threshold == const.DEFAULT_BLANK_THRESHOLD
    assert config.color_mode is ColorMode.SINGLE


def test_cli_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMBIENTBLE_SENSITIVITY", "9")
    args = parse_args(
        ["--match", "48EA", "--match", "ABCD", "--mode", "multi", "--dry-run", "--frames", "5"]
    )
    config = build_config(args)

    assert config.match_names == ("48EA", "ABCD")
    assert config.color_mode is ColorMode.MULTI
    assert config.sensitivity == 9
    assert config.update_lights is False
    assert config.max_frames == 5


def test_cli_defaults_follow_env() -> None:
    config = build_config(parse_args([]))
    assert config == AmbientConfig()


@pytest.mark.parametrize("sensitivity", [1, 0, -4])
def test_sensitivity_below_two_is_raised(sensitivity: int) -> None:
    assert AmbientConfig(sensitivity=sensitivity).sensitivity == const.MIN_SENSITIVITY


def test_sensitivity_from_env_and_cli_is_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMBIENTBLE_SENSITIVITY", "0")
    assert AmbientConfig.from_env().sensitivity == const.MIN_SENSITIVITY
    config = build_config(parse_args(["--sensitivity", "1"]))
    assert config.sensitivity == const.MIN_SENSITIVITY
