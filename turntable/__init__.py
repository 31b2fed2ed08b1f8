"""turntable - renderer scripts that spin an object on a turntable."""

__version__ = "1.0.0"

from .config import Axis, TurntableConfig, parse_args, resolve_config
from .frames import Frame, iter_frames, write_frames
from .preamble import write_preamble
from .sink import OutputSink

__all__ = [
    'Axis',
    'Frame',
    'OutputSink',
    'TurntableConfig',
    'iter_frames',
    'parse_args',
    'resolve_config',
    'write_frames',
    'write_preamble',
]
