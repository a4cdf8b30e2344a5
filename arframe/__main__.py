"""arframe entry point: compute, inspect and store a frame-fit display matrix.

Usage:
    python3 -m arframe --source 1920 1080 LandscapeLeft --target 1080 1920 Portrait
    python3 -m arframe --config frames.json --point 0 0 --point 0.5 0.5
    python3 -m arframe --config frames.json --save
    python3 -m arframe --config frames.json --remap camera.png fitted.png
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import cv2
import numpy as np

from . import affine, cli, config_manager, constants, remap

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("arframe")


def _config_path_for_write(explicit: Path | None) -> Path:
    """Like resolve_config_path, but the file need not exist yet."""
    if explicit is not None:
        return explicit.resolve()
    from_env = os.environ.get(constants.CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser().resolve()
    return config_manager.default_config_path()


def _load_optional_config(args) -> tuple[dict, Path | None]:
    """Load the config when one is needed or available.

    Frames given on the command line make the config optional unless --save is set.
    """
    frames_on_cli = args.source is not None and args.target is not None
    try:
        path = config_manager.resolve_config_path(args.config)
    except FileNotFoundError:
        if frames_on_cli:
            return {}, None
        raise

    if not path.exists():
        if frames_on_cli:
            return {}, path
        raise FileNotFoundError(f"Frame config not found: {path}")

    config = config_manager.load_config(path)
    logger.info("Config loaded from %s", path)
    return config, path


def _log_matrix(title: str, matrix: np.ndarray) -> None:
    logger.info("%s", title)
    for row in matrix:
        logger.info("  [%s]", "  ".join(f"{v: .6f}" for v in row))


def _run_remap(input_path: Path, output_path: Path, matrix: np.ndarray, target: affine.FrameDescriptor) -> None:
    image = cv2.imread(str(input_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError(f"Cannot read image {input_path}")
    size = (int(round(target.width)), int(round(target.height)))
    if size[0] < 1 or size[1] < 1:
        raise ValueError(f"Target frame {target.width:g}x{target.height:g} is smaller than one pixel")
    fitted = remap.remap_image(image, matrix, size)
    try:
        written = cv2.imwrite(str(output_path), fitted)
    except cv2.error as e:
        raise ValueError(f"Cannot write image {output_path}: {e}") from None
    if not written:
        raise ValueError(f"Cannot write image {output_path}")
    logger.info("Remapped %s -> %s (%dx%d)", input_path, output_path, size[0], size[1])


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None) -> int:
    args = cli.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config, config_path = _load_optional_config(args)
        source = cli.parse_frame(args.source) if args.source else config_manager.get_frame(config, "source")
        target = cli.parse_frame(args.target) if args.target else config_manager.get_frame(config, "target")
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    reverse_rotation = args.reverse_rotation or config_manager.get_reverse_rotation(config)

    params = affine.fit_parameters(
        source.width, source.height, source.orientation,
        target.width, target.height, target.orientation,
        reverse_rotation,
    )
    matrix = params.to_matrix()
    if args.invert_vertical:
        matrix = affine.INVERT_VERTICAL @ matrix
    if args.invert_horizontal:
        matrix = affine.INVERT_HORIZONTAL @ matrix

    logger.info(
        "Fit %gx%g %s -> %gx%g %s: scale=(%.6f, %.6f) translation=(%.6f, %.6f) rotation=%.1f deg",
        source.width, source.height, source.orientation.value,
        target.width, target.height, target.orientation.value,
        params.scale[0], params.scale[1],
        params.translation[0], params.translation[1],
        np.degrees(params.radians),
    )
    _log_matrix("Display matrix (target uv -> source uv):", matrix)

    for u, v in args.point or []:
        su, sv = affine.transform_point(matrix, (u, v))
        logger.info("(%.6f, %.6f) -> (%.6f, %.6f)", u, v, su, sv)

    if args.remap is not None:
        try:
            _run_remap(args.remap[0], args.remap[1], matrix, target)
        except ValueError as e:
            logger.error("%s", e)
            return 1

    if args.save:
        path = config_path or _config_path_for_write(args.config)
        config_manager.set_frame(config, "source", source)
        config_manager.set_frame(config, "target", target)
        config_manager.set_reverse_rotation(config, reverse_rotation)
        config_manager.set_display_matrix(config, matrix)
        backup = config_manager.save_config(config, path)
        if backup is not None:
            logger.info("Saved display matrix to %s (backup: %s)", path, backup)
        else:
            logger.info("Saved display matrix to %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
