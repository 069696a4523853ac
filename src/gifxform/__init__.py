"""gifxform - Geometric and palette transforms for indexed-color frame streams."""

import logging

__version__ = "0.1.0"
__all__ = ["__version__"]

# Prevent "No handler found" warnings when used as a library
logging.getLogger("gifxform").addHandler(logging.NullHandler())
