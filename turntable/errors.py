"""Error kinds raised or reported while preparing a turntable run."""

import sys
from dataclasses import dataclass
from typing import Optional, TextIO


class TurntableError(Exception):
    """Base class for everything turntable reports."""


class FileError(TurntableError):
    """The geometry file could not be read. Non-fatal."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = f"Failed to open polyfile at {path}!"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ArgumentError(TurntableError):
    """A flag could not be turned into a configuration value. Fatal."""

    def __init__(self, flag: str, message: str):
        self.flag = flag
        super().__init__(message)


class MissingArgument(ArgumentError):
    def __init__(self, flag: str, expected: str):
        super().__init__(flag, f"Must specify {expected} for {flag}")


class InvalidArgument(ArgumentError):
    def __init__(self, flag: str, value, expected: str):
        self.value = value
        super().__init__(flag, f"Invalid value {value!r} for {flag}: expected {expected}")


class CoercedArgument(TurntableError):
    """A flag value was only partly numeric; the readable prefix (or 0) is used. Non-fatal."""

    def __init__(self, flag: str, value: str, used: float):
        self.flag = flag
        self.value = value
        self.used = used
        super().__init__(f"Value {value!r} for {flag} is not a number, using {used:g}")


class UnknownFlag(TurntableError):
    """An unrecognised flag token. Reported and skipped."""

    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(f"Invalid option \"{flag}\"")


# ==============================================================================
# DIAGNOSTICS
# ==============================================================================
WARNING = "warning"
ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    error: TurntableError

    @property
    def fatal(self) -> bool:
        return self.severity == ERROR

    def __str__(self):
        return f"{self.severity}: {self.error}"


def warning(error: TurntableError) -> Diagnostic:
    return Diagnostic(WARNING, error)


def fatal(error: TurntableError) -> Diagnostic:
    return Diagnostic(ERROR, error)


def report(diagnostic: Diagnostic, stream: Optional[TextIO] = None):
    """Print a diagnostic on the error stream."""
    print(diagnostic, file=stream if stream is not None else sys.stderr)
