"""Command line entry point.

    turntable filepath [-f frame_count] [-a] [-l] [-r X | Y] [-v velocity]

Writes a renderer script to stdout that spins the object described in
``filepath`` about the Z axis (or the axis given with -r), as if on a turntable.
"""

import os
import signal
import sys
import threading

from . import __version__
from .config import resolve_config, usage_lines
from .errors import report
from .frames import write_frames
from .geometry import ENCODING, ERRORS, load_geometry
from .preamble import write_preamble
from .sink import OutputSink

HELP_FLAGS = ("-h", "--help")
VERSION_FLAG = "--version"
QUIET_FLAGS = ("-q", "--quiet")
SUMMARY_FLAG = "--summary"
CLI_FLAGS = HELP_FLAGS + QUIET_FLAGS + (VERSION_FLAG, SUMMARY_FLAG)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_BAD_ARGS = 2


def usage(stream, prog="turntable"):
    for line in usage_lines(prog):
        print(line, file=stream)
    print("\t-q, --quiet: do not print warnings", file=stream)
    print("\t--summary: print the number of generated frames when done", file=stream)


def main(argv=None, stdout=None, stderr=None, cancel=None) -> int:
    tokens = list(sys.argv[1:] if argv is None else argv)
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    result = resolve_config(tokens, extra_flags=CLI_FLAGS)
    switches = set(result.switches)
    if switches & set(HELP_FLAGS):
        usage(stdout)
        return EXIT_OK
    if VERSION_FLAG in switches:
        print(f"turntable {__version__}", file=stdout)
        return EXIT_OK
    quiet = bool(switches & set(QUIET_FLAGS))

    if result.path is None:
        usage(stderr)
        return EXIT_USAGE

    # warnings are printed even when the run is aborted
    for diagnostic in result.diagnostics:
        if diagnostic.fatal or not quiet:
            report(diagnostic, stderr)
    if result.errors:
        return EXIT_BAD_ARGS

    geometry, problem = load_geometry(result.path)
    if problem is not None and not quiet:
        report(problem, stderr)

    sink = OutputSink(stdout)
    write_preamble(sink, result.config)
    count = write_frames(sink, result.config, geometry, cancel=cancel)
    sink.flush()

    if SUMMARY_FLAG in switches:
        print(f"Generated {count} frames ({sink.lines_written} lines)", file=stderr)
    return EXIT_OK


# ==============================================================================
# PROCESS ENTRY POINT
# ==============================================================================
class _Stop:
    """Signal handler that asks the frame loop to stop at the next frame."""

    def __init__(self):
        self.event = threading.Event()
        self.signum = None

    def __call__(self, signum, frame):
        self.signum = signum
        self.event.set()

    def install(self):
        signal.signal(signal.SIGINT, self)
        if hasattr(signal, "SIGTERM"):
            signal.signal(signal.SIGTERM, self)


def run():
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding=ENCODING, errors=ERRORS)
    stop = _Stop()
    stop.install()
    try:
        status = main(cancel=stop.event)
    except BrokenPipeError:
        # Downstream closed early (e.g. piped into head). Silence the final flush.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_OK
    if stop.signum is not None:
        return 128 + stop.signum
    return status


if __name__ == "__main__":
    sys.exit(run())
