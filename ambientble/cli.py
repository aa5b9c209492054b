"""Command line entry point for ambientble."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace

from ambientble.config import AmbientConfig
from ambientble.errors import AmbientBleError
from ambientble.loop import run_ambient
from ambientble.transition import ColorMode, TransitionMode

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; defaults come from AMBIENTBLE_* variables."""
    env = AmbientConfig.from_env()
    parser = argparse.ArgumentParser(
        description="Drive BLE RGB fixtures from the dominant color of a camera feed."
    )
    parser.add_argument(
        "--match",
        action="append",
        dest="match_names",
        help="Advertised name substring to claim; repeatable "
        f"(env: AMBIENTBLE_MATCH_NAMES, default: {','.join(env.match_names)})",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ColorMode],
        default=env.color_mode.value,
        help="single: all fixtures follow the dominant color; "
        "multi: one palette color per fixture",
    )
    parser.add_argument(
        "--transition",
        choices=[mode.value for mode in TransitionMode],
        default=env.transition_mode.value,
        help="Step halfway toward the target each frame, or jump to it",
    )
    parser.add_argument("--camera", type=int, default=env.camera_index, help="Camera index")
    parser.add_argument("--width", type=int, default=env.frame_width, help="Frame width")
    parser.add_argument("--height", type=int, default=env.frame_height, help="Frame height")
    parser.add_argument("--fps", type=int, default=env.frame_fps, help="Requested frame rate")
    parser.add_argument(
        "--saturation-gain",
        type=float,
        default=env.saturation_gain,
        help=f"Saturation multiplier (default: {env.saturation_gain})",
    )
    parser.add_argument(
        "--saturation-offset",
        type=float,
        default=env.saturation_offset,
        help="Flat saturation offset added after the gain",
    )
    parser.add_argument(
        "--sensitivity",
        type=int,
        default=env.sensitivity,
        help="Channel delta below which a fixture is left alone",
    )
    parser.add_argument(
        "--keep-alive",
        type=int,
        default=env.keep_alive_interval,
        help="Send a keep-alive every N frames (0 disables)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=env.max_frames or 0,
        help="Stop after N frames (0 runs until the camera goes dark)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=not env.update_lights,
        help="Log palettes without sending commands",
    )
    parser.add_argument(
        "--test-pattern",
        action="store_true",
        default=env.test_pattern,
        help="Flash red, green and blue before starting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    args.env_config = env
    return args


def build_config(args: argparse.Namespace) -> AmbientConfig:
    """Overlay parsed arguments on the environment config."""
    return replace(
        args.env_config,
        match_names=tuple(args.match_names or args.env_config.match_names),
        color_mode=ColorMode(args.mode),
        transition_mode=TransitionMode(args.transition),
        camera_index=args.camera,
        frame_width=args.width,
        frame_height=args.height,
        frame_fps=args.fps,
        saturation_gain=args.saturation_gain,
        saturation_offset=args.saturation_offset,
        sensitivity=args.sensitivity,
        keep_alive_interval=args.keep_alive,
        max_frames=args.frames if args.frames > 0 else None,
        update_lights=not args.dry_run,
        test_pattern=args.test_pattern,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = build_config(args)
    try:
        asyncio.run(run_ambient(config))
    except AmbientBleError as err:
        _LOGGER.error("%s", err)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
