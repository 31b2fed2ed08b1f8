import sys
from typing import Optional, Tuple

from .errors import Diagnostic, FileError, warning

STDIN_PATH = "-"

# Read and written with the same settings so arbitrary bytes pass through unchanged.
ENCODING = "utf-8"
ERRORS = "surrogateescape"


def read_geometry(path) -> str:
    """Read the whole geometry file verbatim. Raises FileError if unreadable."""
    if path == STDIN_PATH:
        return sys.stdin.buffer.read().decode(ENCODING, ERRORS)
    try:
        with open(path, "r", encoding=ENCODING, errors=ERRORS, newline="") as f:
            return f.read()
    except OSError as e:
        raise FileError(path, e.strerror) from e


def load_geometry(path) -> Tuple[str, Optional[Diagnostic]]:
    """Read the geometry, substituting an empty blob and a warning on failure."""
    try:
        return read_geometry(path), None
    except FileError as e:
        return "", warning(e)
