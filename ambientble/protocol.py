"""Command frame codec for ambientble fixtures.

Every command is a 20 byte frame::

    [opcode][operands...][zero padding up to byte 18][XOR checksum]

The checksum is the XOR of the 19 body bytes.
"""
from __future__ import annotations

from collections.abc import Iterable
from functools import reduce
from operator import xor

from ambientble import const
from ambientble.errors import InvalidOperandLength, ProtocolError


def checksum(body: Iterable[int]) -> int:
    """Return the XOR fold of ``body``."""
    return reduce(xor, body, 0)


def encode(payload: Iterable[int]) -> bytes:
    """Pad ``payload`` to the body length and append its checksum."""
    body = list(payload)
    if len(body) > const.BODY_LENGTH:
        raise InvalidOperandLength(
            f"Command payload is {len(body)} bytes; at most "
            f"{const.BODY_LENGTH} bytes fit in a frame"
        )
    for value in body:
        if not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise ProtocolError(f"Command byte out of range: {value!r}")
    body.extend([0x00] * (const.BODY_LENGTH - len(body)))
    body.append(checksum(body))
    return bytes(body)


def verify(frame: bytes) -> bool:
    """Return whether ``frame`` has the right length and checksum."""
    if len(frame) != const.FRAME_LENGTH:
        return False
    return checksum(frame[: const.BODY_LENGTH]) == frame[const.BODY_LENGTH]


def set_color_command(r: int, g: int, b: int) -> bytes:
    """Build a frame setting the fixture to an RGB color."""
    return encode([const.OPCODE_COLOR, *const.SUB_SET_RGB, r, g, b])


def power_off_command() -> bytes:
    """Build a frame switching the fixture off."""
    return encode([const.OPCODE_COLOR, *const.SUB_POWER_OFF])


def keep_alive_command() -> bytes:
    """Build the liveness frame that keeps the link from timing out."""
    return encode([const.OPCODE_KEEP_ALIVE, *const.SUB_KEEP_ALIVE])


def format_frame(frame: bytes) -> str:
    """Render a frame as space separated hex for debug logs."""
    return " ".join(f"{b:02X}" for b in frame)
