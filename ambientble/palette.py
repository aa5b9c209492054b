"""Dominant color extraction with saturation shaping."""
from __future__ import annotations

import colorsys
import logging

import numpy as np
from PIL import Image

from ambientble import const
from ambientble.capture import VideoFrame
from ambientble.errors import EmptyFrame

_LOGGER = logging.getLogger(__name__)

RGB = tuple[int, int, int]

_MAX_QUANTIZE_COLORS = 256


def palette_size(fixture_count: int) -> int:
    """Return how many colors to extract for ``fixture_count`` fixtures."""
    return max(const.MIN_PALETTE_SIZE, fixture_count)


def sample_pixels(frame: VideoFrame, stride: int = const.DEFAULT_SAMPLE_STRIDE) -> np.ndarray:
    """Return every ``stride``-th pixel of ``frame`` as an ``(n, 3)`` array.

    Near-white pixels are dropped; they wash out the dominant colors.
    """
    if not frame.data:
        return np.empty((0, 3), dtype=np.uint8)
    pixels = np.frombuffer(frame.data, dtype=np.uint8)
    pixels = pixels[: len(pixels) - len(pixels) % 3].reshape(-1, 3)
    pixels = pixels[:: max(1, stride)]
    usable = ~np.all(pixels > const.WHITE_CUTOFF, axis=1)
    return pixels[usable]


def dominant_colors(samples: np.ndarray, count: int) -> list[RGB]:
    """Quantize ``samples`` to at most ``count`` colors, most common first."""
    if len(samples) == 0:
        raise EmptyFrame("Frame has no usable color samples")
    count = min(max(1, count), _MAX_QUANTIZE_COLORS)
    image = Image.fromarray(np.ascontiguousarray(samples.reshape(1, -1, 3)))
    quantized = image.quantize(colors=count, method=Image.Quantize.MEDIANCUT)
    palette = quantized.getpalette() or []
    counts = sorted(quantized.getcolors(_MAX_QUANTIZE_COLORS) or [], reverse=True)
    return [
        tuple(palette[index * 3 : index * 3 + 3])  # type: ignore[misc]
        for _, index in counts[:count]
    ]


def boost_saturation(
    color: RGB,
    gain: float = const.DEFAULT_SATURATION_GAIN,
    offset: float = const.DEFAULT_SATURATION_OFFSET,
) -> RGB:
    """Scale the HSL saturation of ``color``, clamped to the valid range."""
    r, g, b = (channel / 255.0 for channel in color)
    hue, lightness, saturation = colorsys.rgb_to_hls(r, g, b)
    saturation = min(1.0, max(0.0, saturation * gain + offset))
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return tuple(min(255, max(0, round(c * 255))) for c in (r, g, b))  # type: ignore[return-value]


def extract_palette(
    frame: VideoFrame,
    count: int,
    *,
    stride: int = const.DEFAULT_SAMPLE_STRIDE,
    saturation_gain: float = const.DEFAULT_SATURATION_GAIN,
    saturation_offset: float = const.DEFAULT_SATURATION_OFFSET,
) -> list[RGB]:
    """Reduce ``frame`` to up to ``count`` saturation-boosted dominant colors."""
    samples = sample_pixels(frame, stride)
    colors = dominant_colors(samples, count)
    boosted = [
        boost_saturation(color, saturation_gain, saturation_offset) for color in colors
    ]
    _LOGGER.debug("Palette from %d samples: %s -> %s", len(samples), colors, boosted)
    return boosted
