"""Append-only text output for the generated script."""

from typing import Iterable, TextIO


class OutputSink:
    """Wraps a text stream. Only appends, never seeks or rewrites."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.lines_written = 0

    def write_line(self, line: str):
        self.stream.write(line + "\n")
        self.lines_written += 1

    def write_lines(self, lines: Iterable[str]):
        for line in lines:
            self.write_line(line)

    def write_raw(self, text: str):
        """Write text as-is. Used for the geometry blob."""
        if not text:
            return
        self.stream.write(text)
        self.lines_written += text.count("\n")

    def flush(self):
        self.stream.flush()
