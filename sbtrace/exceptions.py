"""Errors raised while reading a scene description."""

from __future__ import annotations

import io


class ParserException(Exception):
    """A scene file could not be parsed."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ParserFatalException(ParserException):
    """The parser reached a state that signals a bug in it."""


class SyntaxErrorException(ParserException):
    """A syntax error, with a message pointing at the offending column."""

    def __init__(self, message, tokenizer):
        super().__init__(message)
        out = io.StringIO()
        tokenizer.print_line(out)
        out.write("  " + " " * tokenizer.column + "^\n")
        out.write(f"Line {tokenizer.line_number}: syntax error: {message}\n")
        self.formatted_message = out.getvalue()