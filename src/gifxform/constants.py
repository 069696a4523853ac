"""Centralized constants for gifxform."""

# Rotation angles accepted in a plan (clockwise degrees)
ROTATE_ANGLES = (90, 180, 270)

# Quarter turns understood by rotate_image
ROTATE_90 = 1
ROTATE_270 = 3

# Screen used when a stream has no frames and no screen size yet
DEFAULT_SCREEN_WIDTH = 640
DEFAULT_SCREEN_HEIGHT = 480

# Largest color component value
MAX_COLOR_COMPONENT = 255

# Prefix for temporary files created by the pipe color transform
TEMP_FILE_PREFIX = "gifxform."
