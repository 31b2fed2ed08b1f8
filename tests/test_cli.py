"""End-to-end runs of the command line entry point."""

import io

import pytest

from turntable import __version__
from turntable.cli import EXIT_BAD_ARGS, EXIT_OK, EXIT_USAGE, main
from turntable.preamble import HEADER

GEOMETRY = "PolySet \"P\" 3 1\n0 0 0\n1 0 0\n0 1 0\n0 1 2 -1\n"


@pytest.fixture
def polyfile(tmp_path):
    path = tmp_path / "tri.rd"
    path.write_text(GEOMETRY)
    return str(path)


def _run(argv):
    out, err = io.StringIO(), io.StringIO()
    status = main(argv, stdout=out, stderr=err)
    return status, out.getvalue(), err.getvalue()


def test_example_run(polyfile):
    status, out, err = _run([polyfile, "-f", "3", "-a", "-v", "2.0"])
    assert status == EXIT_OK
    assert err == ""
    lines = out.splitlines()
    assert lines[:6] == list(HEADER)
    assert lines[6] == "ObjectBegin \"Axes\""
    assert out.count("ObjectBegin") == 1
    assert out.count("FrameBegin") == 3
    assert out.count("ObjectInstance \"Axes\"") == 3
    assert out.count("AmbientLight 1 1 1 1\n") == 3
    assert [l for l in lines if l.startswith("Rotate")] == [
        "Rotate \"Z\" 0",
        "Rotate \"Z\" 2",
        "Rotate \"Z\" 4",
    ]
    assert out.count(GEOMETRY) == 3
    assert out.endswith("WorldEnd\nFrameEnd\n")


def test_preamble_precedes_frames(polyfile):
    _, out, _ = _run([polyfile, "-f", "2", "-l"])
    lines = out.splitlines()
    assert lines.index("CameraFOV 76") < lines.index("FrameBegin 0")
    assert out.count("CameraFOV") == 1


def test_no_path_prints_usage():
    status, out, err = _run(["-a", "-f", "2"])
    assert status == EXIT_USAGE
    assert out == ""
    assert err.startswith("Usage: turntable")


def test_empty_invocation_prints_usage():
    status, out, err = _run([])
    assert status == EXIT_USAGE
    assert out == ""


def test_missing_rotate_value_aborts(polyfile):
    status, out, err = _run([polyfile, "-r"])
    assert status == EXIT_BAD_ARGS
    assert out == ""
    assert "Must specify either X or Y for -r" in err


def test_every_fatal_error_is_reported(polyfile):
    status, out, err = _run([polyfile, "-f", "0", "-r", "Z"])
    assert status == EXIT_BAD_ARGS
    assert out == ""
    assert err.count("error:") == 2


def test_unreadable_file_continues_with_empty_geometry(tmp_path):
    missing = str(tmp_path / "missing.rd")
    status, out, err = _run([missing, "-f", "2"])
    assert status == EXIT_OK
    assert "warning: Failed to open polyfile at" in err
    assert out.count("FrameBegin") == 2
    assert "Rotate \"Z\" 0.1\nWorldEnd\n" in out


def test_unknown_flag_warns_on_stderr_only(polyfile):
    status, out, err = _run([polyfile, "-x", "-f", "1"])
    assert status == EXIT_OK
    assert "warning: Invalid option \"-x\"" in err
    assert "Invalid option" not in out


def test_quiet_suppresses_warnings(tmp_path):
    status, out, err = _run([str(tmp_path / "missing.rd"), "-x", "-q", "-f", "1"])
    assert status == EXIT_OK
    assert err == ""
    assert out.count("FrameBegin") == 1


def test_summary(polyfile):
    _, _, err = _run([polyfile, "-f", "4", "--summary"])
    # 6 header lines + 4 frames of 8 directives and 5 geometry lines
    assert err == "Generated 4 frames (58 lines)\n"


def test_help_and_version():
    status, out, _ = _run(["--help"])
    assert status == EXIT_OK
    assert out.startswith("Usage: turntable")
    status, out, _ = _run(["--version"])
    assert status == EXIT_OK
    assert out.strip() == f"turntable {__version__}"


def test_rotate_axis(polyfile):
    _, out, _ = _run([polyfile, "-r", "y", "-f", "2", "-v", "-1"])
    assert "Rotate \"Y\" -1\n" in out


def test_warnings_are_reported_alongside_fatal_errors(polyfile):
    status, out, err = _run([polyfile, "extra.rd", "-x", "-f", "0"])
    assert status == EXIT_BAD_ARGS
    assert out == ""
    lines = err.splitlines()
    assert lines[0] == "warning: Invalid option \"-x\""
    assert lines[1].startswith("error: Invalid value '0' for -f")
    assert lines[2] == "warning: Ignoring extra argument \"extra.rd\""


def test_switch_used_as_flag_value_is_not_applied(polyfile):
    status, out, err = _run([polyfile, "-r", "-q", "-x"])
    assert status == EXIT_BAD_ARGS
    # -q was the value of -r, so warnings still print
    assert "warning: Invalid option \"-x\"" in err

    status, out, err = _run([polyfile, "-f", "1", "-v", "-h"])
    assert status == EXIT_OK
    assert not out.startswith("Usage")
    assert "Value '-h' for -v is not a number, using 0" in err
    assert "Rotate \"Z\" 0\n" in out


def test_non_numeric_velocity_renders_with_zero(polyfile):
    status, out, err = _run([polyfile, "-f", "2", "-v", "fast"])
    assert status == EXIT_OK
    assert "warning: Value 'fast' for -v is not a number, using 0" in err
    assert [l for l in out.splitlines() if l.startswith("Rotate")] == [
        "Rotate \"Z\" 0",
        "Rotate \"Z\" 0",
    ]


@pytest.mark.parametrize("argv", [
    ["-f", "2", "-v", "1e39"],
    ["-f", "3", "-v", "3e38"],
])
def test_velocity_that_overflows_float32_aborts(polyfile, argv):
    status, out, err = _run([polyfile] + argv)
    assert status == EXIT_BAD_ARGS
    assert out == ""
    assert "error: Invalid value" in err
    assert "nan" not in out and "inf" not in out
