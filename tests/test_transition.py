"""Tests for target assignment and the transition controller."""
from __future__ import annotations

import asyncio

import pytest

from ambientble import protocol
from ambientble.errors import EmptyFrame
from ambientble.transition import (
    ColorMode,
    KeepAliveScheduler,
    TransitionController,
    TransitionMode,
    assign_targets,
)

from _fakes import make_fixture

RED = (254, 0, 0)
BLUE = (0, 0, 254)


def test_single_mode_uses_first_entry_for_all() -> None:
    assert assign_targets([RED, BLUE], 3, ColorMode.SINGLE) == [RED, RED, RED]


def test_multi_mode_clamps_to_last_entry() -> None:
    assert assign_targets([RED, BLUE], 3, ColorMode.MULTI) == [RED, BLUE, BLUE]


def test_multi_mode_ignores_extra_entries() -> None:
    assert assign_targets([RED, BLUE, (1, 2, 3)], 2, ColorMode.MULTI) == [RED, BLUE]


def test_empty_palette_is_rejected() -> None:
    with pytest.raises(EmptyFrame):
        assign_targets([], 2, ColorMode.MULTI)


def test_keep_alive_scheduler_interval() -> None:
    scheduler = KeepAliveScheduler(3)
    assert [scheduler.tick() for _ in range(7)] == [
        False, False, True, False, False, True, False,
    ]


def test_keep_alive_scheduler_disabled() -> None:
    scheduler = KeepAliveScheduler(0)
    assert not any(scheduler.tick() for _ in range(20))


def test_step_smooths_every_fixture_in_multi_mode() -> None:
    (a, client_a), (b, client_b) = make_fixture("a"), make_fixture("b")
    controller = TransitionController(ColorMode.MULTI, keep_alive_interval=0)

    report = asyncio.run(controller.step([a, b], [RED, BLUE]))

    assert a.current_color == (127, 0, 0)
    assert b.current_color == (0, 0, 127)
    assert report.sent == 2 and report.failed == 0
    assert report.targets == [RED, BLUE]
    assert client_a.writes == [protocol.set_color_command(127, 0, 0)]


def test_step_instant_mode_jumps() -> None:
    fixture, _ = make_fixture()
    controller = TransitionController(
        ColorMode.SINGLE, TransitionMode.INSTANT, keep_alive_interval=0
    )
    asyncio.run(controller.step([fixture], [RED, BLUE]))
    assert fixture.current_color == RED


def test_step_sends_keep_alive_in_addition_to_color() -> None:
    fixture, client = make_fixture(sensitivity=3)
    controller = TransitionController(keep_alive_interval=2)

    async def go():
        return [await controller.step([fixture], [RED]) for _ in range(4)]

    reports = asyncio.run(go())

    assert [r.keep_alive for r in reports] == [False, True, False, True]
    assert [r.iteration for r in reports] == [1, 2, 3, 4]
    assert client.writes.count(protocol.keep_alive_command()) == 2
    assert len(client.writes) == 6


def test_keep_alive_sent_even_when_converged() -> None:
    fixture, client = make_fixture(sensitivity=3)
    controller = TransitionController(keep_alive_interval=1)
    report = asyncio.run(controller.step([fixture], [(1, 1, 1)]))
    assert report.skipped == 1
    assert client.writes == [protocol.keep_alive_command()]


def test_dropped_fixture_is_skipped() -> None:
    live, live_client = make_fixture("live")
    dropped, dropped_client = make_fixture("dropped", connected=False)
    controller = TransitionController(keep_alive_interval=1)

    report = asyncio.run(controller.step([live, dropped], [RED]))

    assert report.sent == 1 and report.skipped == 1
    assert dropped_client.writes == []
    assert dropped.current_color == (0, 0, 0)
    assert len(live_client.writes) == 2


def test_failed_writes_are_counted() -> None:
    fixture, client = make_fixture()
    client.fail_write = True
    controller = TransitionController(keep_alive_interval=0)
    report = asyncio.run(controller.step([fixture], [RED]))
    assert report.failed == 1
    assert fixture.current_color == (127, 0, 0)
