"""Handle for a connected ambientble light fixture."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bleak.exc import BleakError

from ambientble import const, protocol
from ambientble.errors import WriteError

_LOGGER = logging.getLogger(__name__)

RGB = tuple[int, int, int]


@dataclass(slots=True)
class WriteResult:
    """Outcome of a single command transmission."""

    fixture: Fixture
    frame: bytes
    error: WriteError | None = None

    @property
    def ok(self) -> bool:
        """Return whether the write went through."""
        return self.error is None


@dataclass(slots=True)
class FixtureHealth:
    """Running write statistics for one fixture."""

    writes: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    last_error: str | None = None

    def record(self, result: WriteResult) -> None:
        """Fold a write result into the counters."""
        self.writes += 1
        if result.ok:
            self.consecutive_failures = 0
            return
        self.failures += 1
        self.consecutive_failures += 1
        self.last_error = str(result.error)


class Fixture:
    """A connected fixture and its last known color.

    Commands are fire-and-forget: a failed write is logged and recorded in
    :attr:`health` but never raised, so one unreachable fixture cannot stop
    the control loop.
    """

    def __init__(
        self,
        client: Any,
        characteristic: Any,
        *,
        name: str,
        address: str,
        sensitivity: int = const.DEFAULT_SENSITIVITY,
        on_result: Callable[[WriteResult], None] | None = None,
    ) -> None:
        self._client = client
        self._characteristic = characteristic
        self._name = name
        self._address = address
        self._sensitivity = sensitivity
        self._on_result = on_result
        self._current_color: RGB = const.BLACK
        self._health = FixtureHealth()

    def __repr__(self) -> str:
        return f"Fixture(name={self._name!r}, address={self._address!r})"

    @property
    def name(self) -> str:
        """Return the advertised name."""
        return self._name

    @property
    def address(self) -> str:
        """Return the transport address."""
        return self._address

    @property
    def current_color(self) -> RGB:
        """Return the last color sent (or scheduled) for this fixture."""
        return self._current_color

    @property
    def sensitivity(self) -> int:
        """Return the per-channel delta below which colors count as equal."""
        return self._sensitivity

    @property
    def health(self) -> FixtureHealth:
        """Return the write statistics."""
        return self._health

    @property
    def is_connected(self) -> bool:
        """Return whether the transport still reports a connection."""
        return bool(getattr(self._client, "is_connected", False))

    def converged(self, r: int, g: int, b: int) -> bool:
        """Return whether every channel is within the sensitivity band."""
        return all(
            abs(current - target) < self._sensitivity
            for current, target in zip(self._current_color, (r, g, b))
        )

    async def set_color(self, r: int, g: int, b: int) -> bool:
        """Jump straight to a color."""
        frame = protocol.set_color_command(r, g, b)
        self._current_color = (r, g, b)
        return await self._send(frame)

    async def set_color_smoothed(self, r: int, g: int, b: int) -> bool | None:
        """Move halfway from the current color toward a target.

        Returns ``None`` without sending anything once the colors have
        converged.
        """
        if self.converged(r, g, b):
            return None
        midpoint = tuple(
            (current + target) // 2
            for current, target in zip(self._current_color, (r, g, b))
        )
        self._current_color = midpoint  # type: ignore[assignment]
        return await self._send(protocol.set_color_command(*midpoint))

    async def keep_alive(self) -> bool:
        """Send the liveness frame."""
        return await self._send(protocol.keep_alive_command())

    async def power_off(self) -> bool:
        """Switch the fixture off."""
        return await self._send(protocol.power_off_command())

    async def disconnect(self) -> None:
        """Disconnect from the fixture, logging any failure."""
        try:
            await self._client.disconnect()
        except (BleakError, asyncio.TimeoutError, OSError) as err:
            _LOGGER.warning("Failed to disconnect from %s: %s", self._name, err)
        else:
            _LOGGER.debug("Disconnected from %s (%s)", self._name, self._address)

    async def _send(self, frame: bytes) -> bool:
        _LOGGER.debug("Sending to %s: %s", self._name, protocol.format_frame(frame))
        error: WriteError | None = None
        try:
            await self._client.write_gatt_char(
                self._characteristic, frame, response=False
            )
        except (BleakError, asyncio.TimeoutError, OSError) as err:
            error = WriteError(f"Write to {self._name} failed: {err}")
            _LOGGER.warning("%s", error)
        result = WriteResult(fixture=self, frame=frame, error=error)
        self._health.record(result)
        if self._on_result is not None:
            self._on_result(result)
        return result.ok
