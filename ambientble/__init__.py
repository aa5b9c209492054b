"""ambientble package.

Ambient lighting for Bluetooth Low Energy RGB fixtures driven by a camera.

Supports:
- Fixture discovery by advertised name substring
- Fixed-length XOR-checksummed command frames
- Dominant color extraction with saturation shaping
- Smoothed per-fixture transitions with periodic keep-alives
- Single-color and multi-color modes
"""

__version__ = "0.1.0"
