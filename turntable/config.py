"""Resolve command-line tokens into an immutable turntable configuration.

Flags are described once in FLAG_TABLE. ``resolve_config`` walks the tokens a
single time against that table and collects every problem it finds, so callers
can either report all of them or stop at the first one.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import (
    ArgumentError,
    CoercedArgument,
    Diagnostic,
    InvalidArgument,
    MissingArgument,
    TurntableError,
    UnknownFlag,
    fatal,
    warning,
)


class Axis(str, Enum):
    X = "X"
    Y = "Y"
    Z = "Z"


# Axes a user may pick with -r. Z is the default and is not selectable.
SELECTABLE_AXES = (Axis.X, Axis.Y)

DEFAULT_AXIS = Axis.Z
DEFAULT_VELOCITY = 0.1


def fits_float32(value) -> bool:
    """True if ``value`` is still finite once narrowed to float32."""
    with np.errstate(over="ignore", invalid="ignore"):
        return bool(np.isfinite(np.float32(value)))


def angles_fit(velocity, frame_limit: int) -> bool:
    """True if every angle up to the last frame is a finite float32."""
    with np.errstate(over="ignore", invalid="ignore"):
        last = np.float32(velocity) * np.float32(frame_limit - 1)
    return bool(np.isfinite(last))


@dataclass(frozen=True)
class TurntableConfig:
    rotation_axis: Axis = DEFAULT_AXIS
    angular_velocity: float = DEFAULT_VELOCITY  # degrees per frame
    frame_limit: Optional[int] = None  # None = run until cancelled
    render_axes: bool = False
    use_axis_lights: bool = False

    def __post_init__(self):
        if not isinstance(self.rotation_axis, Axis):
            raise InvalidArgument("rotation_axis", self.rotation_axis, "one of X, Y, Z")
        if self.frame_limit is not None:
            if isinstance(self.frame_limit, bool) or not isinstance(self.frame_limit, int) \
                    or self.frame_limit < 1:
                raise InvalidArgument("frame_limit", self.frame_limit, "an integer >= 1")
        if not fits_float32(self.angular_velocity):
            raise InvalidArgument("angular_velocity", self.angular_velocity,
                                  "a real number within float32 range")
        if self.bounded and not angles_fit(self.angular_velocity, self.frame_limit):
            raise InvalidArgument("angular_velocity", self.angular_velocity,
                                  f"an angle that stays finite over {self.frame_limit} frames")

    @property
    def bounded(self) -> bool:
        return self.frame_limit is not None


# ==============================================================================
# 1. VALUE CONVERTERS
# ==============================================================================
def parse_frame_limit(flag: str, value: str) -> int:
    try:
        frames = int(value, 10)
    except ValueError:
        raise InvalidArgument(flag, value, "an integer >= 1") from None
    if frames < 1:
        raise InvalidArgument(flag, value, "an integer >= 1")
    return frames


def parse_axis(flag: str, value: str) -> Axis:
    name = value.strip().upper()
    for axis in SELECTABLE_AXES:
        if axis.value == name:
            return axis
    raise InvalidArgument(flag, value, "X or Y")


NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_velocity(flag: str, value: str) -> float:
    """Read a velocity the way atof does: use the leading number, or 0.

    A value that is not entirely numeric raises CoercedArgument carrying the
    number actually used. Values outside float32 range are InvalidArgument.
    """
    coerced = False
    try:
        velocity = float(value)
    except ValueError:
        match = NUMERIC_PREFIX.match(value)
        velocity = float(match.group()) if match else 0.0
        coerced = True
    if not fits_float32(velocity):
        raise InvalidArgument(flag, value, "a real number within float32 range")
    if coerced:
        raise CoercedArgument(flag, value, velocity)
    return velocity


# ==============================================================================
# 2. FLAG TABLE
# ==============================================================================
@dataclass(frozen=True)
class FlagSpec:
    name: str
    field: str
    help: str
    aliases: Tuple[str, ...] = ()
    # None means the flag is a switch that sets ``field`` to True
    convert: Optional[Callable[[str, str], object]] = None
    metavar: str = ""
    expected: str = ""

    @property
    def takes_value(self) -> bool:
        return self.convert is not None

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases


FLAG_TABLE: Tuple[FlagSpec, ...] = (
    FlagSpec("-f", "frame_limit", "specify maximum number of frames, default unbounded",
             aliases=("--frames",), convert=parse_frame_limit,
             metavar="frame_count", expected="unsigned integer"),
    FlagSpec("-a", "render_axes", "render axis lines at the origin",
             aliases=("--axes",)),
    FlagSpec("-l", "use_axis_lights",
             "enable 3 axis-aligned lights to better show off angles (rather than ambient lighting)",
             aliases=("--lights",)),
    FlagSpec("-r", "rotation_axis", "change the axis of rotation to the one specified",
             aliases=("--rotate",), convert=parse_axis,
             metavar="X | Y", expected="either X or Y"),
    FlagSpec("-v", "angular_velocity", "change the speed of the rotation (degrees per frame)",
             aliases=("--velocity",), convert=parse_velocity,
             metavar="velocity", expected="velocity"),
)

FLAGS: Dict[str, FlagSpec] = {name: spec for spec in FLAG_TABLE for name in spec.names}


# ==============================================================================
# 3. RESOLUTION
# ==============================================================================
@dataclass
class Resolution:
    config: Optional[TurntableConfig] = None
    path: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    # caller-owned switches seen as flags (not consumed as values)
    switches: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.fatal]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.fatal]

    @property
    def ok(self) -> bool:
        return self.config is not None and not self.errors


def _looks_like_flag(token: str) -> bool:
    if not token.startswith("-") or token == "-":
        return False
    try:
        float(token)
    except ValueError:
        return True
    # negative numbers are positional values, not flags
    return False


def resolve_config(tokens: Sequence[str], extra_flags: Sequence[str] = ()) -> Resolution:
    """Turn raw option tokens (without the program name) into a Resolution.

    ``extra_flags`` names switches owned by the caller (e.g. ``--quiet``); they
    are collected in ``switches`` instead of being reported as unknown.
    """
    result = Resolution()
    values = {}
    given = {}  # field -> (flag, raw value)
    positional: List[str] = []

    i = 0
    only_positional = False
    while i < len(tokens):
        token = tokens[i]
        i += 1

        if only_positional or not _looks_like_flag(token):
            positional.append(token)
            continue
        if token == "--":
            only_positional = True
            continue
        if token in extra_flags:
            result.switches.append(token)
            continue

        spec = FLAGS.get(token)
        if spec is None:
            result.diagnostics.append(warning(UnknownFlag(token)))
            continue

        if not spec.takes_value:
            values[spec.field] = True
            continue

        if i >= len(tokens):
            result.diagnostics.append(fatal(MissingArgument(token, spec.expected)))
            continue
        value = tokens[i]
        i += 1
        given[spec.field] = (token, value)
        try:
            values[spec.field] = spec.convert(token, value)
        except CoercedArgument as e:
            values[spec.field] = e.used
            result.diagnostics.append(warning(e))
        except ArgumentError as e:
            result.diagnostics.append(fatal(e))

    frame_limit = values.get("frame_limit")
    velocity = values.get("angular_velocity", DEFAULT_VELOCITY)
    if frame_limit is not None and not angles_fit(velocity, frame_limit):
        flag, raw = given.get("angular_velocity", ("-v", str(velocity)))
        result.diagnostics.append(fatal(InvalidArgument(
            flag, raw, f"a velocity whose angle stays finite over {frame_limit} frames")))

    if positional:
        result.path = positional[0]
        for extra in positional[1:]:
            result.diagnostics.append(warning(TurntableError(f"Ignoring extra argument \"{extra}\"")))

    if not result.errors:
        result.config = replace(TurntableConfig(), **values)
    return result


def parse_args(tokens: Sequence[str]) -> Tuple[TurntableConfig, Optional[str], List[Diagnostic]]:
    """Like resolve_config, but raise the first fatal error."""
    result = resolve_config(tokens)
    if result.errors:
        raise result.errors[0].error
    return result.config, result.path, result.warnings


def usage_lines(prog: str = "turntable") -> List[str]:
    lines = [f"Usage: {prog} filepath [options]"]
    for spec in FLAG_TABLE:
        names = ", ".join(spec.names)
        if spec.metavar:
            names = f"{names} {spec.metavar}"
        lines.append(f"\t{names}: {spec.help}")
    return lines
