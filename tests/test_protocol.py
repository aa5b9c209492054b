"""Tests for command frame encoding."""
from __future__ import annotations

from functools import reduce

import pytest

from ambientble import const, protocol
from ambientble.errors import InvalidOperandLength, ProtocolError


def test_set_color_frame_matches_known_bytes() -> None:
    frame = protocol.encode([0x33, 0x05, 0x02, 0xFF, 0x00, 0x00])
    assert len(frame) == 20
    assert frame[:6] == bytes([0x33, 0x05, 0x02, 0xFF, 0x00, 0x00])
    assert frame[6:19] == bytes(13)
    assert frame[19] == 0xCB


@pytest.mark.parametrize("length", [0, 1, 6, 18, 19])
def test_frame_is_padded_and_checksummed(length: int) -> None:
    payload = [(i * 37 + 11) & 0xFF for i in range(length)]
    frame = protocol.encode(payload)
    assert len(frame) == const.FRAME_LENGTH
    assert list(frame[:length]) == payload
    assert frame[19] == reduce(lambda a, b: a ^ b, frame[:19], 0)


def test_payload_longer_than_body_is_rejected() -> None:
    with pytest.raises(InvalidOperandLength):
        protocol.encode([0x01] * 20)


def test_invalid_operand_length_is_a_protocol_error() -> None:
    assert issubclass(InvalidOperandLength, ProtocolError)


@pytest.mark.parametrize("value", [-1, 256, 1.5])
def test_out_of_range_byte_is_rejected(value) -> None:
    with pytest.raises(ProtocolError):
        protocol.encode([0x33, value])


def test_set_color_command() -> None:
    frame = protocol.set_color_command(12, 34, 56)
    assert frame[:6] == bytes([0x33, 0x05, 0x02, 12, 34, 56])
    assert protocol.verify(frame)


def test_keep_alive_command() -> None:
    frame = protocol.keep_alive_command()
    assert frame[:2] == bytes([0xAA, 0x01])
    assert frame[2:19] == bytes(17)
    assert frame[19] == 0xAA ^ 0x01


def test_power_off_command() -> None:
    frame = protocol.power_off_command()
    assert frame[:3] == bytes([0x33, 0x01, 0x00])
    assert frame[19] == 0x33 ^ 0x01


def test_verify_rejects_bad_frames() -> None:
    frame = bytearray(protocol.set_color_command(1, 2, 3))
    assert not protocol.verify(bytes(frame[:19]))
    frame[19] ^= 0xFF
    assert not protocol.verify(bytes(frame))


def test_frames_are_immutable_bytes() -> None:
    assert isinstance(protocol.keep_alive_command(), bytes)


def test_format_frame() -> None:
    text = protocol.format_frame(protocol.keep_alive_command())
    assert text.startswith("AA 01 00")
    assert text.endswith("AB")
