"""The ambient control loop: camera frames in, fixture commands out."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from ambientble import const
from ambientble.capture import Camera
from ambientble.config import AmbientConfig
from ambientble.discovery import FixtureScanner
from ambientble.errors import DiscoveryError, EmptyFrame
from ambientble.fixture import Fixture
from ambientble.palette import extract_palette, palette_size
from ambientble.transition import TransitionController

_LOGGER = logging.getLogger(__name__)

RGB = tuple[int, int, int]


class StopReason(str, Enum):
    """Why the control loop returned."""

    BLANK_FRAME = "blank-frame"
    MAX_FRAMES = "max-frames"
    NO_FIXTURES = "no-fixtures"


async def run_test_pattern(
    fixtures: Sequence[Fixture],
    colors: Iterable[RGB] = const.TEST_PATTERN,
    delay: float = const.DEFAULT_TEST_PATTERN_DELAY,
) -> None:
    """Jump every fixture through ``colors`` to show they respond."""
    for color in colors:
        for fixture in fixtures:
            await fixture.set_color(*color)
        await asyncio.sleep(delay)


async def disconnect_all(fixtures: Iterable[Fixture]) -> None:
    """Disconnect every fixture; failures are logged by the fixture."""
    for fixture in fixtures:
        await fixture.disconnect()
    _LOGGER.info("Disconnected")


def log_health(fixtures: Iterable[Fixture]) -> None:
    """Log write statistics for each fixture."""
    for fixture in fixtures:
        health = fixture.health
        if health.failures:
            _LOGGER.warning(
                "%s: %d of %d writes failed (last error: %s)",
                fixture.name,
                health.failures,
                health.writes,
                health.last_error,
            )
        else:
            _LOGGER.info("%s: %d writes, no failures", fixture.name, health.writes)


class AmbientLoop:
    """Runs one tick at a time until the camera goes dark.

    Each tick captures a frame, extracts a palette and pushes one command to
    every fixture in turn, awaiting each write before the next. Fixtures are
    disconnected when the loop exits for any reason.
    """

    def __init__(
        self,
        config: AmbientConfig,
        fixtures: Sequence[Fixture],
        camera: Any,
        controller: TransitionController | None = None,
    ) -> None:
        self._config = config
        self._fixtures = list(fixtures)
        self._camera = camera
        self._controller = controller or TransitionController(
            config.color_mode,
            config.transition_mode,
            config.keep_alive_interval,
        )
        self._frames = 0

    @property
    def frames(self) -> int:
        """Return how many frames have been processed."""
        return self._frames

    async def run(self) -> StopReason:
        """Run until a stop condition; always disconnects the fixtures."""
        try:
            return await self._run()
        finally:
            await disconnect_all(self._fixtures)

    async def _run(self) -> StopReason:
        count = palette_size(len(self._fixtures))
        while True:
            max_frames = self._config.max_frames
            if max_frames is not None and self._frames >= max_frames:
                return StopReason.MAX_FRAMES
            if not any(fixture.is_connected for fixture in self._fixtures):
                _LOGGER.error("No connected fixtures left")
                return StopReason.NO_FIXTURES

            frame = await self._camera.next_frame()
            self._frames += 1
            brightness = frame.mean_brightness()
            if brightness < self._config.blank_threshold:
                _LOGGER.info(
                    "Frame brightness %.1f below %.1f; stopping",
                    brightness,
                    self._config.blank_threshold,
                )
                return StopReason.BLANK_FRAME

            try:
                palette = extract_palette(
                    frame,
                    count,
                    stride=self._config.sample_stride,
                    saturation_gain=self._config.saturation_gain,
                    saturation_offset=self._config.saturation_offset,
                )
            except EmptyFrame as err:
                _LOGGER.debug("Skipping frame %d: %s", self._frames, err)
                continue

            if self._config.update_lights:
                report = await self._controller.step(self._fixtures, palette)
                _LOGGER.debug(
                    "Tick %d: targets=%s sent=%d skipped=%d failed=%d keep_alive=%s",
                    report.iteration,
                    report.targets,
                    report.sent,
                    report.skipped,
                    report.failed,
                    report.keep_alive,
                )
            else:
                _LOGGER.info("Palette: %s", palette)

            if self._config.frame_delay > 0:
                await asyncio.sleep(self._config.frame_delay)


async def run_ambient(config: AmbientConfig) -> StopReason:
    """Discover fixtures and drive them from the camera until it goes dark."""
    scanner = FixtureScanner(
        config.match_names,
        settle_time=config.settle_time,
        connect_timeout=config.connect_timeout,
        sensitivity=config.sensitivity,
    )
    fixtures = await scanner.discover()
    if not fixtures:
        raise DiscoveryError(
            f"No fixtures matching {', '.join(config.match_names)} were found"
        )
    try:
        if config.test_pattern:
            await run_test_pattern(fixtures)
        camera = Camera(
            config.camera_index,
            width=config.frame_width,
            height=config.frame_height,
            fps=config.frame_fps,
        )
        camera.open()
    except BaseException:
        await disconnect_all(fixtures)
        raise

    loop = AmbientLoop(config, fixtures, camera)
    try:
        reason = await loop.run()
    finally:
        camera.close()
        log_health(fixtures)
    _LOGGER.info("Stopped after %d frames: %s", loop.frames, reason.value)
    return reason
