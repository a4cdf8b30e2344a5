"""Command-line argument parsing for arframe."""

import argparse
import math
from pathlib import Path

from . import affine

_ORIENTATION_NAMES = ", ".join(o.value for o in affine.Orientation)


def parse_frame(values: list[str]) -> affine.FrameDescriptor:
    """Convert ``[W, H, ORIENTATION]`` into a frame descriptor."""
    width, height, orientation = values
    try:
        w, h = float(width), float(height)
    except ValueError:
        raise ValueError(f"Frame size must be numeric, got {width}x{height}") from None
    if not (math.isfinite(w) and w > 0.0 and math.isfinite(h) and h > 0.0):
        raise ValueError(f"Frame size must be positive and finite, got {width}x{height}")
    return affine.FrameDescriptor(width=w, height=h, orientation=affine.Orientation.parse(orientation))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="arframe",
        description="Compute the affine transform that fits one oriented frame into another",
    )

    parser.add_argument(
        "--source",
        nargs=3,
        metavar=("W", "H", "ORIENTATION"),
        default=None,
        help=f"Source frame size and orientation ({_ORIENTATION_NAMES})",
    )
    parser.add_argument(
        "--target",
        nargs=3,
        metavar=("W", "H", "ORIENTATION"),
        default=None,
        help="Target frame size and orientation",
    )
    parser.add_argument(
        "--reverse-rotation",
        action="store_true",
        help="Rotate from the target orientation to the source orientation",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to frames.json (read from ARFRAME_CONFIG or ~/.arframe/config if omitted)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the frames and resulting display matrix into the config file",
    )
    parser.add_argument(
        "--point",
        nargs=2,
        type=float,
        action="append",
        metavar=("U", "V"),
        default=None,
        help="Normalized target point to map into the source frame (repeatable)",
    )
    parser.add_argument(
        "--invert-vertical",
        action="store_true",
        help="Flip V after fitting (destination texture origin at bottom)",
    )
    parser.add_argument(
        "--invert-horizontal",
        action="store_true",
        help="Flip U after fitting",
    )
    parser.add_argument(
        "--remap",
        nargs=2,
        type=Path,
        metavar=("INPUT", "OUTPUT"),
        default=None,
        help="Resample INPUT (source frame) into the target frame and write OUTPUT",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)
