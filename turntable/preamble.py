from .config import TurntableConfig
from .sink import OutputSink

# ==============================================================================
# 1. DISPLAY & CAMERA
# ==============================================================================
# Fixed, non-animated scene setup. Edit here for a different view.
DISPLAY = "Display  \"animation\" \"Screen\" \"rgbdouble\""
RESOLUTION = (640, 480)
CAMERA_EYE = (8, 8, -5)
CAMERA_AT = (0, 0, 0)
CAMERA_UP = (0, 0, 1)
CAMERA_FOV = 76


def _vec(values):
    return " ".join(str(v) for v in values)


HEADER = (
    DISPLAY,
    f"Format {_vec(RESOLUTION)}",
    f"CameraEye {_vec(CAMERA_EYE)}",
    f"CameraAt {_vec(CAMERA_AT)}",
    f"CameraUp {_vec(CAMERA_UP)}",
    f"CameraFOV {CAMERA_FOV}",
)

# ==============================================================================
# 2. AXES OBJECT
# ==============================================================================
AXES_OBJECT_NAME = "Axes"
AXIS_LENGTH = 10
AXIS_COLORS = (
    (1, 0, 0),  # X red
    (0, 1, 0),  # Y green
    (0, 0, 1),  # Z blue
)


def axes_definition():
    """Lines defining the reusable axes object: one colored segment per axis."""
    lines = [f"ObjectBegin \"{AXES_OBJECT_NAME}\""]
    for i, color in enumerate(AXIS_COLORS):
        end = [0, 0, 0]
        end[i] = AXIS_LENGTH
        lines.append(f"Color {_vec(color)}")
        lines.append(f"Line 0 0 0 {_vec(end)}")
    lines.append("ObjectEnd")
    return lines


def axes_reference():
    return f"ObjectInstance \"{AXES_OBJECT_NAME}\""


def preamble_lines(config: TurntableConfig):
    lines = list(HEADER)
    if config.render_axes:
        lines.extend(axes_definition())
    return lines


def write_preamble(sink: OutputSink, config: TurntableConfig):
    """Write the one-time scene setup. Call exactly once, before any frame."""
    sink.write_lines(preamble_lines(config))
