"""Per-tick color assignment and fixture transitions."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ambientble import const
from ambientble.errors import EmptyFrame
from ambientble.fixture import Fixture

_LOGGER = logging.getLogger(__name__)

RGB = tuple[int, int, int]


class ColorMode(str, Enum):
    """How palette entries map onto fixtures."""

    SINGLE = "single"
    MULTI = "multi"


class TransitionMode(str, Enum):
    """How a fixture moves toward its target."""

    SMOOTH = "smooth"
    INSTANT = "instant"


def assign_targets(
    palette: Sequence[RGB], fixture_count: int, mode: ColorMode
) -> list[RGB]:
    """Return the target color for each fixture index.

    In multi-color mode fixtures beyond the palette length follow the last
    palette entry.
    """
    if not palette:
        raise EmptyFrame("Cannot assign targets from an empty palette")
    if mode is ColorMode.SINGLE:
        return [palette[0]] * fixture_count
    last = len(palette) - 1
    return [palette[min(index, last)] for index in range(fixture_count)]


class KeepAliveScheduler:
    """Counts iterations and reports when a keep-alive is due."""

    def __init__(self, interval: int = const.DEFAULT_KEEP_ALIVE_INTERVAL) -> None:
        self._interval = interval
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def tick(self) -> bool:
        """Advance one iteration; return whether keep-alives are due."""
        self._count += 1
        if self._interval <= 0:
            return False
        return self._count % self._interval == 0


@dataclass(slots=True)
class TickReport:
    """What one controller step did."""

    iteration: int
    targets: list[RGB] = field(default_factory=list)
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    keep_alive: bool = False


class TransitionController:
    """Drives every fixture one step toward its palette target per tick."""

    def __init__(
        self,
        color_mode: ColorMode = ColorMode.SINGLE,
        transition_mode: TransitionMode = TransitionMode.SMOOTH,
        keep_alive_interval: int = const.DEFAULT_KEEP_ALIVE_INTERVAL,
    ) -> None:
        self._color_mode = color_mode
        self._transition_mode = transition_mode
        self._scheduler = KeepAliveScheduler(keep_alive_interval)
        self._dropped: set[int] = set()

    @property
    def color_mode(self) -> ColorMode:
        return self._color_mode

    @property
    def transition_mode(self) -> TransitionMode:
        return self._transition_mode

    def _active(self, fixtures: Sequence[Fixture]) -> list[bool]:
        active = []
        for fixture in fixtures:
            connected = fixture.is_connected
            if not connected and id(fixture) not in self._dropped:
                self._dropped.add(id(fixture))
                _LOGGER.warning(
                    "%s (%s) dropped its connection; no longer addressed",
                    fixture.name,
                    fixture.address,
                )
            active.append(connected)
        return active

    async def step(self, fixtures: Sequence[Fixture], palette: Sequence[RGB]) -> TickReport:
        """Push one command to each fixture, plus keep-alives when due."""
        targets = assign_targets(palette, len(fixtures), self._color_mode)
        report = TickReport(iteration=self._scheduler.count + 1, targets=targets)
        active = self._active(fixtures)

        for fixture, target, is_active in zip(fixtures, targets, active):
            if not is_active:
                report.skipped += 1
                continue
            if self._transition_mode is TransitionMode.INSTANT:
                ok: bool | None = await fixture.set_color(*target)
            else:
                ok = await fixture.set_color_smoothed(*target)
            if ok is None:
                report.skipped += 1
            elif ok:
                report.sent += 1
            else:
                report.failed += 1

        if self._scheduler.tick():
            report.keep_alive = True
            for fixture, is_active in zip(fixtures, active):
                if is_active:
                    await fixture.keep_alive()
        return report
