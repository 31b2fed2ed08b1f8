"""Frame sequence generation: one world block per animation step.

The rotation for frame ``i`` is always ``velocity * i`` computed in single
precision from the absolute index, never by adding ``velocity`` up frame after
frame, so the angle of any frame is reproducible on its own.
"""

from dataclasses import dataclass
from typing import Iterator, List

import numpy as np

from .config import TurntableConfig
from .preamble import axes_reference
from .sink import OutputSink

# ==============================================================================
# 1. LIGHTING & SURFACE
# ==============================================================================
# Far lights shine from the negative to the positive end of each axis.
AXIS_LIGHTS = (
    "FarLight -1 0 0 1 0 0 0.5",
    "FarLight 0 -1 0 0 1 0 0.5",
    "FarLight 0 0 -1 0 0 1 0.5",
    "AmbientLight 1 1 1 0.8",
)
FULL_AMBIENT = ("AmbientLight 1 1 1 1",)

KA = 0.5
KD = 1


@dataclass(frozen=True)
class Frame:
    index: int
    angle: np.float32


def frame_angle(velocity, index: int) -> np.float32:
    with np.errstate(over="ignore"):
        return np.float32(velocity) * np.float32(index)


def format_angle(angle) -> str:
    """Shortest decimal that reads back as the same float32. -0 prints as 0."""
    angle = np.float32(angle) + np.float32(0)
    return np.format_float_positional(angle, unique=True, trim="-")


# ==============================================================================
# 2. SEQUENCE
# ==============================================================================
def iter_frames(config: TurntableConfig, cancel=None) -> Iterator[Frame]:
    """Yield frames in order until ``frame_limit`` is reached.

    With no limit the sequence ends when ``cancel`` (anything with an
    ``is_set()`` method, e.g. a threading.Event) is set, or once the angle no
    longer fits in a float32. ``cancel`` is checked before each frame.
    """
    index = 0
    while not config.bounded or index < config.frame_limit:
        if cancel is not None and cancel.is_set():
            return
        angle = frame_angle(config.angular_velocity, index)
        if not np.isfinite(angle):
            return
        yield Frame(index, angle)
        index += 1


def lighting_lines(config: TurntableConfig) -> List[str]:
    return list(AXIS_LIGHTS if config.use_axis_lights else FULL_AMBIENT)


def frame_lines(frame: Frame, config: TurntableConfig) -> List[str]:
    """Directive lines for one frame, up to (not including) the geometry."""
    lines = [f"FrameBegin {frame.index}", "WorldBegin"]
    lines.extend(lighting_lines(config))
    lines.append(f"Ka {KA}")
    lines.append(f"Kd {KD}")
    if config.render_axes:
        lines.append(axes_reference())
    lines.append(f"Rotate \"{config.rotation_axis.value}\" {format_angle(frame.angle)}")
    return lines


FRAME_END = ("WorldEnd", "FrameEnd")


def render_frame(frame: Frame, config: TurntableConfig, geometry: str) -> str:
    """The full text of one frame block."""
    text = "".join(line + "\n" for line in frame_lines(frame, config))
    text += geometry
    if geometry and not geometry.endswith("\n"):
        text += "\n"
    return text + "".join(line + "\n" for line in FRAME_END)


def write_frame(sink: OutputSink, frame: Frame, config: TurntableConfig, geometry: str):
    # one write per block
    sink.write_raw(render_frame(frame, config, geometry))


def write_frames(sink: OutputSink, config: TurntableConfig, geometry: str,
                 cancel=None) -> int:
    """Drive the animation loop into ``sink``. Returns the number of frames written."""
    count = 0
    for frame in iter_frames(config, cancel):
        write_frame(sink, frame, config, geometry)
        sink.flush()
        count += 1
    return count
