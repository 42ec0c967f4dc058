"""Commit-message context and commit-split analysis for staged git changes."""

import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hunkscope")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())
