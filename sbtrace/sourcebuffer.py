"""Character-by-character reading of a text stream, tracking line and column."""

from __future__ import annotations

import sys

EOF_CHAR = "\0"


class SourceBuffer:
    """Reads a text stream one character at a time for error reporting.

    Every line is returned with a trailing newline; ``"\\0"`` marks the end.
    """

    def __init__(self, stream, print_chars=False, print_lines=False):
        self._stream = stream
        self._print_chars = print_chars
        self._print_lines = print_lines
        self._line = ""
        self._pos = 0
        self._ok = True
        self._last_printed_line = 0
        self.column = 0
        self.line_number = 0

    @property
    def is_eof(self):
        """Whether the stream has been read past its end."""
        return not self._ok

    @property
    def current_line(self):
        """The text of the current line, including its newline."""
        return self._line

    def _get_line(self):
        text = self._stream.readline() if self._ok else ""
        if text == "":
            self._ok = False
        elif text.endswith("\n"):
            text = text[:-1]
        self._line = text + "\n"
        self._pos = 0
        self.column = 0
        self.line_number += 1
        if self._print_lines:
            self.print_line(sys.stdout)

    def get_ch(self):
        """Return the next character, or ``"\\0"`` at the end of the stream."""
        if not self._ok:
            return EOF_CHAR

        if self._pos >= len(self._line):
            # Nothing has been read yet.
            self._get_line()
            if self._pos >= len(self._line):
                return EOF_CHAR
        else:
            self._pos += 1
            self.column += 1

        while self._pos >= len(self._line):
            self._get_line()
            if not self._ok:
                return EOF_CHAR

        ch = self._line[self._pos]
        if self._print_chars:
            print(f"Read character `{ch}'")
        return ch

    def print_line(self, out=None):
        """Write the current line to ``out`` once, prefixed with ``# ``."""
        if out is None:
            out = sys.stdout
        if self.line_number > self._last_printed_line:
            out.write(f"# {self._line}\n")
            self._last_printed_line = self.line_number