"""Read/write the frame configuration JSON file.

Numeric values are stored as strings with 17 significant digits so a matrix
written here reads back bit-identical. Numbers are accepted on read as well.
"""

import json
import math
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np

from . import affine, constants

FRAME_ROLES = ("source", "target")


def float_to_config_str(value: float) -> str:
    """Format a float with 17 significant digits (round-trips any float64)."""
    return f"{value:.17g}"


def load_config(path: Path) -> dict:
    """Load the frame config file."""
    with open(path, "r") as f:
        return json.load(f)


def save_config(config: dict, path: Path) -> Path | None:
    """Write config to *path*, creating a timestamped backup first.

    Returns the backup path, or None when there was no file to back up.
    """
    backup_path = _create_backup(path) if path.exists() else None
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config, f, indent=4)
        f.write("\n")
    return backup_path


def _create_backup(path: Path) -> Path:
    """Copy *path* to <path>_BACKUP_<timestamp>.json."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup = Path(f"{path}_BACKUP_{timestamp}.json")
    shutil.copy2(path, backup)
    return backup


def default_config_path() -> Path:
    return Path.home() / constants.DEFAULT_CONFIG_DIR / constants.DEFAULT_CONFIG_NAME


def resolve_config_path(explicit: Path | None) -> Path:
    """Resolve the config file path.

    Priority: explicit argument > $ARFRAME_CONFIG > ~/.arframe/config/frames.json.
    """
    if explicit is not None:
        return explicit.resolve()

    from_env = os.environ.get(constants.CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser().resolve()

    candidate = default_config_path()
    if candidate.exists():
        return candidate.resolve()

    raise FileNotFoundError(
        f"Cannot find frame config at {candidate}. "
        f"Set {constants.CONFIG_ENV_VAR} or pass --config."
    )


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

def get_frame(config: dict, role: str) -> affine.FrameDescriptor:
    """Read the *role* ("source" or "target") frame, validating its values."""
    if role not in FRAME_ROLES:
        raise ValueError(f"Unknown frame role: {role}")

    entry = config.get("frames", {}).get(role)
    if entry is None:
        raise ValueError(f"Config has no frames.{role} entry")

    try:
        width = float(entry["width"])
        height = float(entry["height"])
        orientation = affine.Orientation.parse(entry["orientation"])
    except KeyError as e:
        raise ValueError(f"frames.{role} is missing {e}") from None

    if not (math.isfinite(width) and width > 0.0 and math.isfinite(height) and height > 0.0):
        raise ValueError(f"frames.{role} size must be positive and finite, got {width}x{height}")

    return affine.FrameDescriptor(width=width, height=height, orientation=orientation)


def set_frame(config: dict, role: str, frame: affine.FrameDescriptor) -> None:
    """Write a frame descriptor into config dict."""
    if role not in FRAME_ROLES:
        raise ValueError(f"Unknown frame role: {role}")
    config.setdefault("frames", {})[role] = {
        "width": float_to_config_str(frame.width),
        "height": float_to_config_str(frame.height),
        "orientation": frame.orientation.value,
    }


def get_reverse_rotation(config: dict) -> bool:
    value: Any = config.get("frames", {}).get("reverse_rotation", False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def set_reverse_rotation(config: dict, reverse_rotation: bool) -> None:
    config.setdefault("frames", {})["reverse_rotation"] = "true" if reverse_rotation else "false"


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

def set_display_matrix(config: dict, matrix: np.ndarray) -> None:
    """Write a 4x4 display matrix into config dict.

    Stored column-major as 16 strings.
    """
    config.setdefault("outputs", {})["display_matrix"] = [
        float_to_config_str(v) for v in affine.flatten(matrix)
    ]


def get_display_matrix(config: dict) -> np.ndarray | None:
    """Return the stored display matrix, or None if absent."""
    values = config.get("outputs", {}).get("display_matrix")
    if values is None:
        return None
    if len(values) != constants.FLAT_MATRIX_4X4_LENGTH:
        raise ValueError(
            f"outputs.display_matrix must have {constants.FLAT_MATRIX_4X4_LENGTH} values, "
            f"got {len(values)}"
        )
    return affine.unflatten(values)
