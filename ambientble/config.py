"""Runtime configuration for ambientble."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

from ambientble import const
from ambientble.transition import ColorMode, TransitionMode

_LOGGER = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on", "y"}


def _env_int(name: str, default: int) -> int:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val.strip())
    except ValueError:
        _LOGGER.warning("Ignoring invalid %s=%s", name, val)
        return default


def _env_float(name: str, default: float) -> float:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return float(val.strip())
    except ValueError:
        _LOGGER.warning("Ignoring invalid %s=%s", name, val)
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    val = os.environ.get(name)
    if not val:
        return default
    # Name matching is case-sensitive, so items keep their case.
    items = tuple(item.strip() for item in val.split(",") if item.strip())
    return items or default


def _env_enum(name: str, enum_cls: type[_E], default: _E) -> _E:
    val = os.environ.get(name)
    if not val:
        return default
    try:
        return enum_cls(val.strip().lower())
    except ValueError:
        _LOGGER.warning("Unknown %s=%s; defaulting to %s", name, val, default.value)
        return default


@dataclass(slots=True)
class AmbientConfig:
    """All tunables of a discovery + control loop session."""

    match_names: tuple[str, ...] = field(default=const.DEFAULT_MATCH_NAMES)
    color_mode: ColorMode = ColorMode.SINGLE
    transition_mode: TransitionMode = TransitionMode.SMOOTH
    saturation_gain: float = const.DEFAULT_SATURATION_GAIN
    saturation_offset: float = const.DEFAULT_SATURATION_OFFSET
    sensitivity: int = const.DEFAULT_SENSITIVITY
    keep_alive_interval: int = const.DEFAULT_KEEP_ALIVE_INTERVAL
    camera_index: int = const.DEFAULT_CAMERA_INDEX
    frame_width: int = const.DEFAULT_FRAME_WIDTH
    frame_height: int = const.DEFAULT_FRAME_HEIGHT
    frame_fps: int = const.DEFAULT_FRAME_FPS
    sample_stride: int = const.DEFAULT_SAMPLE_STRIDE
    blank_threshold: float = const.DEFAULT_BLANK_THRESHOLD
    frame_delay: float = const.DEFAULT_FRAME_DELAY
    settle_time: float = const.DEFAULT_SETTLE_TIME
    connect_timeout: float = const.DEFAULT_CONNECT_TIMEOUT
    update_lights: bool = True
    test_pattern: bool = False
    max_frames: int | None = None

    def __post_init__(self) -> None:
        if self.sensitivity < const.MIN_SENSITIVITY:
            _LOGGER.warning(
                "Sensitivity %d never converges; using %d",
                self.sensitivity,
                const.MIN_SENSITIVITY,
            )
            self.sensitivity = const.MIN_SENSITIVITY

    @classmethod
    def from_env(cls) -> AmbientConfig:
        """Build a config from ``AMBIENTBLE_*`` environment variables."""
        p = const.ENV_PREFIX
        defaults = cls()
        max_frames = _env_int(f"{p}MAX_FRAMES", 0)
        return cls(
            match_names=_env_list(f"{p}MATCH_NAMES", defaults.match_names),
            color_mode=_env_enum(f"{p}COLOR_MODE", ColorMode, defaults.color_mode),
            transition_mode=_env_enum(
                f"{p}TRANSITION", TransitionMode, defaults.transition_mode
            ),
            saturation_gain=_env_float(f"{p}SATURATION_GAIN", defaults.saturation_gain),
            saturation_offset=_env_float(
                f"{p}SATURATION_OFFSET", defaults.saturation_offset
            ),
            sensitivity=_env_int(f"{p}SENSITIVITY", defaults.sensitivity),
            keep_alive_interval=_env_int(
                f"{p}KEEP_ALIVE_INTERVAL", defaults.keep_alive_interval
            ),
            camera_index=_env_int(f"{p}CAMERA", defaults.camera_index),
            frame_width=_env_int(f"{p}FRAME_WIDTH", defaults.frame_width),
            frame_height=_env_int(f"{p}FRAME_HEIGHT", defaults.frame_height),
            frame_fps=_env_int(f"{p}FRAME_FPS", defaults.frame_fps),
            sample_stride=_env_int(f"{p}SAMPLE_STRIDE", defaults.sample_stride),
            blank_threshold=_env_float(f"{p}BLANK_THRESHOLD", defaults.blank_threshold),
            frame_delay=_env_float(f"{p}FRAME_DELAY", defaults.frame_delay),
            settle_time=_env_float(f"{p}SETTLE_TIME", defaults.settle_time),
            connect_timeout=_env_float(f"{p}CONNECT_TIMEOUT", defaults.connect_timeout),
            update_lights=_env_bool(f"{p}UPDATE_LIGHTS", defaults.update_lights),
            test_pattern=_env_bool(f"{p}TEST_PATTERN", defaults.test_pattern),
            max_frames=max_frames if max_frames > 0 else None,
        )
