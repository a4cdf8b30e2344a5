"""2D affine transforms that fit one oriented rectangular frame into another.

Matrices are 4x4 float64 arrays acting on column vectors ``(u, v, 1, 1)`` by
left-multiplication, so in a product the rightmost factor is applied first.
The top-left 2x2 block holds rotation and scale, column 2 holds the
translation. Coordinates are normalized to [0, 1] with the origin top-left.

The core functions trust their inputs: a zero or negative dimension yields
inf/nan entries rather than an exception.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Sequence

import numpy as np

from . import constants

logger = logging.getLogger(__name__)


class Orientation(Enum):
    """Physical frame orientation. Each member is 90° clockwise from the previous."""

    LANDSCAPE_LEFT = "LandscapeLeft"
    PORTRAIT = "Portrait"
    LANDSCAPE_RIGHT = "LandscapeRight"
    PORTRAIT_UPSIDE_DOWN = "PortraitUpsideDown"

    @property
    def is_portrait(self) -> bool:
        return self in (Orientation.PORTRAIT, Orientation.PORTRAIT_UPSIDE_DOWN)

    @classmethod
    def parse(cls, name: str | Orientation) -> Orientation:
        """Resolve a member name (``LANDSCAPE_LEFT``) or platform name (``LandscapeLeft``)."""
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for member in cls:
            if key in (member.name, member.value):
                return member
        raise ValueError(f"Unknown orientation: {name!r}")


@dataclass(frozen=True)
class FrameDescriptor:
    """A rectangular pixel buffer as physically oriented."""

    width: float
    height: float
    orientation: Orientation


@dataclass(frozen=True)
class FitParameters:
    """Components of a fit transform.

    Attributes:
        scale: per-axis scale, 1.0 on the constrained axis
        translation: re-centering offset, ``((1 - sx) / 2, (1 - sy) / 2)``
        radians: rotation about the frame center
    """

    scale: tuple[float, float]
    translation: tuple[float, float]
    radians: float

    def to_matrix(self) -> np.ndarray:
        # Scale, re-center, then rotate about the center; (0.5, 0.5) is fixed.
        return _screen_rotation(self.radians) @ translation(self.translation) @ scaling(self.scale)


# Orientation -> quarter-turn index
_ROTATION_INDEX = MappingProxyType({
    Orientation.LANDSCAPE_LEFT: 0,
    Orientation.PORTRAIT: 1,
    Orientation.LANDSCAPE_RIGHT: 2,
    Orientation.PORTRAIT_UPSIDE_DOWN: 3,
})

_ROTATION_UNIT = math.pi / 2.0


def _readonly(matrix: np.ndarray) -> np.ndarray:
    matrix.setflags(write=False)
    return matrix


# v -> 1 - v
INVERT_VERTICAL = _readonly(np.array([
    [1, 0, 0, 0],
    [0, -1, 1, 0],
    [0, 0, 1, 0],
    [0, 0, 0, 1],
], dtype=np.float64))

# u -> 1 - u
INVERT_HORIZONTAL = _readonly(np.array([
    [-1, 0, 1, 0],
    [0, 1, 0, 0],
    [0, 0, 1, 0],
    [0, 0, 0, 1],
], dtype=np.float64))


# ---------------------------------------------------------------------------
# Primitive builders
# ---------------------------------------------------------------------------

def rotation(rad: float) -> np.ndarray:
    """Produce a 2D rotation matrix.

    Counter-clockwise positive in a y-up frame. In the y-down normalized frame
    used here (origin top-left) a positive angle turns clockwise on screen.
    """
    c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def translation(offset: Sequence[float]) -> np.ndarray:
    """Produce a 2D translation matrix."""
    return np.array([
        [1, 0, offset[0], 0],
        [0, 1, offset[1], 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


def scaling(factor: Sequence[float]) -> np.ndarray:
    """Produce a 2D scaling matrix."""
    return np.array([
        [factor[0], 0, 0, 0],
        [0, factor[1], 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ], dtype=np.float64)


# ---------------------------------------------------------------------------
# Orientation handling
# ---------------------------------------------------------------------------

def get_radians(from_: Orientation, to: Orientation) -> float:
    """Angle to rotate from one orientation to another, in quarter turns of pi/2.

    The result is one of -3pi/2 .. 3pi/2; callers that need a canonical angle
    reduce it modulo 2pi.
    """
    return (_ROTATION_INDEX[to] - _ROTATION_INDEX[from_]) * _ROTATION_UNIT


def _rotate_resolution(
    source_width: float,
    source_height: float,
    source_orientation: Orientation,
    target_orientation: Orientation,
) -> tuple[float, float]:
    """Source size as seen from the target orientation (swapped across portrait/landscape)."""
    if source_orientation.is_portrait == target_orientation.is_portrait:
        return source_width, source_height
    return source_height, source_width


def _screen_rotation(rad: float) -> np.ndarray:
    """Rotation by *rad* pivoting on the frame center rather than the origin."""
    cx, cy = constants.FRAME_CENTER
    return translation((cx, cy)) @ rotation(rad) @ translation((-cx, -cy))


# ---------------------------------------------------------------------------
# Fitting
# ---------------------------------------------------------------------------

def fit_parameters(
    source_width: float,
    source_height: float,
    source_orientation: Orientation,
    target_width: float,
    target_height: float,
    target_orientation: Orientation,
    reverse_rotation: bool = False,
) -> FitParameters:
    """Compute the scale, translation and rotation that :func:`fit` composes."""
    sw, sh = np.float64(source_width), np.float64(source_height)
    tw, th = np.float64(target_width), np.float64(target_height)

    container_x, container_y = _rotate_resolution(sw, sh, source_orientation, target_orientation)

    with np.errstate(divide="ignore", invalid="ignore"):
        if tw / th < 1.0:
            scale = (float(tw / (th / container_y * container_x)), 1.0)
        else:
            scale = (1.0, float(th / (tw / container_x * container_y)))

    if reverse_rotation:
        rad = get_radians(target_orientation, source_orientation)
    else:
        rad = get_radians(source_orientation, target_orientation)

    offset = ((1.0 - scale[0]) * 0.5, (1.0 - scale[1]) * 0.5)
    return FitParameters(scale=scale, translation=offset, radians=rad)


def fit(
    source_width: float,
    source_height: float,
    source_orientation: Orientation,
    target_width: float,
    target_height: float,
    target_orientation: Orientation,
    reverse_rotation: bool = False,
) -> np.ndarray:
    """Affine transform from normalized target coordinates to normalized source coordinates.

    The target content is aspect-fit into the source frame: scaled per axis so
    the constrained axis keeps scale 1.0, centered on both axes, and rotated
    by the orientation delta between the two frames (target to source when
    *reverse_rotation* is set).

    Returns a new 4x4 float64 array.
    """
    params = fit_parameters(
        source_width, source_height, source_orientation,
        target_width, target_height, target_orientation,
        reverse_rotation,
    )
    logger.debug(
        "fit %sx%s %s -> %sx%s %s: scale=%s translation=%s radians=%.4f",
        source_width, source_height, source_orientation.value,
        target_width, target_height, target_orientation.value,
        params.scale, params.translation, params.radians,
    )
    return params.to_matrix()


def fit_frames(
    source: FrameDescriptor,
    target: FrameDescriptor,
    reverse_rotation: bool = False,
) -> np.ndarray:
    """:func:`fit` for two :class:`FrameDescriptor` values."""
    return fit(
        source.width, source.height, source.orientation,
        target.width, target.height, target.orientation,
        reverse_rotation,
    )


# ---------------------------------------------------------------------------
# Applying and exporting transforms
# ---------------------------------------------------------------------------

def transform_point(matrix: np.ndarray, point: Sequence[float]) -> tuple[float, float]:
    """Map one normalized (u, v) point through *matrix*."""
    out = matrix @ np.array([point[0], point[1], 1.0, 1.0])
    return (float(out[0]), float(out[1]))


def transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Map an Nx2 array of normalized points through *matrix*."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    ones = np.ones((pts.shape[0], 1))
    homogeneous = np.hstack([pts, ones, ones])
    return (homogeneous @ matrix.T)[:, :2]


def to_affine_3x3(matrix: np.ndarray) -> np.ndarray:
    """Return the 3x3 affine block (linear part plus translation column)."""
    return np.array(matrix[:3, :3], dtype=np.float64)


def flatten(matrix: np.ndarray) -> list[float]:
    """Column-major float list, the layout native graphics APIs expect."""
    return [float(v) for v in np.asarray(matrix).flatten(order="F")]


def unflatten(values: Sequence[float]) -> np.ndarray:
    """Inverse of :func:`flatten` for 3x3 and 4x4 matrices."""
    if len(values) == constants.FLAT_MATRIX_4X4_LENGTH:
        size = 4
    elif len(values) == constants.FLAT_MATRIX_3X3_LENGTH:
        size = 3
    else:
        raise ValueError(
            f"Expected {constants.FLAT_MATRIX_3X3_LENGTH} or "
            f"{constants.FLAT_MATRIX_4X4_LENGTH} values, got {len(values)}"
        )
    return np.array([float(v) for v in values], dtype=np.float64).reshape((size, size), order="F")
