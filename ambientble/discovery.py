"""Find, connect and claim ambientble fixtures over BLE."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from bleak import BleakClient, BleakScanner
from bleak.backends.device import BLEDevice
from bleak.backends.scanner import AdvertisementData
from bleak.exc import BleakError

from ambientble import const
from ambientble.errors import CharacteristicNotFound, ConnectError, DiscoveryError
from ambientble.fixture import Fixture, WriteResult

_LOGGER = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (BleakError, asyncio.TimeoutError, OSError)


class FixtureScanner:
    """Snapshot scan that turns matching advertisements into fixtures.

    Devices are scanned once for ``settle_time`` seconds. Every candidate is
    connected and its control characteristic resolved; a candidate failing
    either step is skipped so the remaining fixtures are still claimed.
    """

    def __init__(
        self,
        match_names: Iterable[str],
        *,
        settle_time: float = const.DEFAULT_SETTLE_TIME,
        connect_timeout: float = const.DEFAULT_CONNECT_TIMEOUT,
        sensitivity: int = const.DEFAULT_SENSITIVITY,
        on_result: Callable[[WriteResult], None] | None = None,
        scanner_factory: Callable[[], Any] = BleakScanner,
        client_factory: Callable[..., Any] = BleakClient,
    ) -> None:
        self._match_names = tuple(match_names)
        self._settle_time = settle_time
        self._connect_timeout = connect_timeout
        self._sensitivity = sensitivity
        self._on_result = on_result
        self._scanner_factory = scanner_factory
        self._client_factory = client_factory

    @staticmethod
    def matches(name: str | None, patterns: Iterable[str]) -> bool:
        """Return whether ``name`` contains any of ``patterns``."""
        if not name:
            return False
        return any(pattern in name for pattern in patterns)

    @staticmethod
    def advertised_name(device: BLEDevice, adv: AdvertisementData) -> str | None:
        """Return the advertised local name, falling back to the device name."""
        return adv.local_name or device.name

    async def scan(self) -> list[tuple[BLEDevice, AdvertisementData]]:
        """Scan for ``settle_time`` seconds and return what was seen."""
        try:
            scanner = self._scanner_factory()
            await scanner.start()
        except _TRANSPORT_ERRORS as err:
            raise DiscoveryError(f"Bluetooth adapter unavailable: {err}") from err
        try:
            await asyncio.sleep(self._settle_time)
        finally:
            try:
                await scanner.stop()
            except _TRANSPORT_ERRORS as err:
                raise DiscoveryError(f"Could not stop scanning: {err}") from err
        seen = list(scanner.discovered_devices_and_advertisement_data.values())
        _LOGGER.debug("Scan saw %d advertising devices", len(seen))
        return seen

    def candidates(
        self, seen: Iterable[tuple[BLEDevice, AdvertisementData]]
    ) -> list[tuple[BLEDevice, str]]:
        """Filter scan results down to devices whose name matches."""
        result = []
        for device, adv in seen:
            name = self.advertised_name(device, adv)
            if self.matches(name, self._match_names):
                result.append((device, name))
        return result

    async def claim(self, device: BLEDevice, name: str) -> Fixture:
        """Connect to ``device`` and wrap it in a :class:`Fixture`."""
        client = self._client_factory(device, timeout=self._connect_timeout)
        try:
            await client.connect()
        except _TRANSPORT_ERRORS as err:
            raise ConnectError(f"Could not connect to {name}: {err}") from err
        _LOGGER.info("Connected to %s (%s)", name, device.address)

        characteristic = client.services.get_characteristic(
            const.CONTROL_CHARACTERISTIC_UUID
        )
        if characteristic is None:
            try:
                await client.disconnect()
            except _TRANSPORT_ERRORS as err:
                _LOGGER.debug("Disconnect from %s failed: %s", name, err)
            raise CharacteristicNotFound(
                f"{name} has no control characteristic "
                f"{const.CONTROL_CHARACTERISTIC_UUID}"
            )

        return Fixture(
            client,
            characteristic,
            name=name,
            address=device.address,
            sensitivity=self._sensitivity,
            on_result=self._on_result,
        )

    async def discover(self) -> list[Fixture]:
        """Scan once and claim every matching fixture."""
        fixtures: list[Fixture] = []
        for device, name in self.candidates(await self.scan()):
            try:
                fixtures.append(await self.claim(device, name))
            except (ConnectError, CharacteristicNotFound) as err:
                _LOGGER.warning("Skipping %s: %s", name, err)
        _LOGGER.info("Found %d fixtures", len(fixtures))
        return fixtures


async def discover_fixtures(match_names: Iterable[str], **kwargs: Any) -> list[Fixture]:
    """Discover fixtures whose advertised name contains any of ``match_names``."""
    return await FixtureScanner(match_names, **kwargs).discover()
