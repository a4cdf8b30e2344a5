"""Data format constants for frame buffers and display matrices.

Byte lengths are upper bounds used to preallocate capture/encoding buffers.
"""

# Flattened matrix lengths (float count)
FLAT_MATRIX_3X3_LENGTH = 9
FLAT_MATRIX_4X4_LENGTH = 16

# Raw RGBA frame, 4 bytes per pixel
RGBA_256_144_IMG_WIDTH = 256
RGBA_256_144_IMG_HEIGHT = 144
RGBA_256_144_DATA_LENGTH = RGBA_256_144_IMG_WIDTH * RGBA_256_144_IMG_HEIGHT * 4

# JPEG frame; max length is a conservative 12 bytes per pixel
JPEG_720_540_IMG_WIDTH = 720
JPEG_720_540_IMG_HEIGHT = 540
JPEG_QUALITY = 90
JPEG_720_540_MAX_JPEG_DATA_LENGTH = JPEG_720_540_IMG_WIDTH * JPEG_720_540_IMG_HEIGHT * 12

# Rotation pivot in normalized coordinates
FRAME_CENTER = (0.5, 0.5)

# Config defaults
CONFIG_ENV_VAR = "ARFRAME_CONFIG"
DEFAULT_CONFIG_DIR = ".arframe/config"
DEFAULT_CONFIG_NAME = "frames.json"
