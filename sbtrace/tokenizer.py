"""Turns the characters of a scene file into a stream of tokens."""

from __future__ import annotations

import sys

from .exceptions import SyntaxErrorException
from .sourcebuffer import EOF_CHAR, SourceBuffer
from .tokens import IdentToken, ScalarToken, Symbol, Token, lookup_reserved_word

_PUNCTUATION = {
    "(": Symbol.LPAREN,
    ")": Symbol.RPAREN,
    "{": Symbol.LBRACE,
    "}": Symbol.RBRACE,
    ",": Symbol.COMMA,
    "=": Symbol.EQUALS,
    ";": Symbol.SEMICOLON,
}

_WHITESPACE = " \t\r\n\f\v"


def _is_ident_start(ch):
    return ch.isalpha() or ch == "_"


def _is_ident_char(ch):
    return ch.isalnum() or ch in "_-"


class Tokenizer:
    """Reads tokens from a text stream with one token of look-ahead."""

    def __init__(self, stream, print_tokens=False):
        self._buffer = SourceBuffer(stream, False, False)
        self._print_tokens = print_tokens
        self._pending = None
        self.column = 0
        self._current = self._buffer.get_ch()

    @property
    def line_number(self):
        """Number of the line being read, counting from 1."""
        return self._buffer.line_number

    def get(self):
        """Consume and return the next token."""
        if self._pending is not None:
            token, self._pending = self._pending, None
        else:
            token = self._scan()
        if self._print_tokens:
            print(f"Read token: {token}")
        return token

    def peek(self):
        """Return the next token without consuming it."""
        if self._pending is None:
            self._pending = self._scan()
        return self._pending

    def read(self, expected):
        """Consume the next token, which must be of kind ``expected``."""
        token = self.get()
        if token.kind != expected:
            raise SyntaxErrorException(
                f"Expected: '{Token(expected)}', found: '{token}'", self
            )
        return token

    def cond_read(self, expected):
        """Consume the next token only if it is of kind ``expected``."""
        if self.peek().kind == expected:
            self.get()
            return True
        return False

    def print_line(self, out=None):
        """Write the current source line to ``out``."""
        self._buffer.print_line(out if out is not None else sys.stdout)

    def scan_program(self):
        """Read and discard every remaining token; return how many there were."""
        count = 0
        while self.get().kind != Symbol.EOFSYM:
            count += 1
        return count

    def _advance(self):
        self._current = self._buffer.get_ch()

    def _skip_whitespace_and_comments(self):
        while True:
            while self._current in _WHITESPACE and self._current != EOF_CHAR:
                self._advance()
            if self._current != "/":
                return
            self.column = self._buffer.column
            self._advance()
            if self._current == "/":
                while self._current not in ("\n", EOF_CHAR):
                    self._advance()
            elif self._current == "*":
                self._advance()
                previous = ""
                while not (previous == "*" and self._current == "/"):
                    if self._current == EOF_CHAR:
                        raise SyntaxErrorException("Unterminated comment", self)
                    previous = self._current
                    self._advance()
                self._advance()
            else:
                raise SyntaxErrorException("Unexpected character '/'", self)

    def _scan(self):
        self._skip_whitespace_and_comments()
        self.column = self._buffer.column
        ch = self._current

        if ch == EOF_CHAR:
            return Token(Symbol.EOFSYM)
        if ch in _PUNCTUATION:
            self._advance()
            return Token(_PUNCTUATION[ch])
        if ch.isdigit() or ch in ".+-":
            return self._scan_scalar()
        if ch == '"':
            return self._scan_quoted_ident()
        if _is_ident_start(ch):
            return self._scan_ident()
        raise SyntaxErrorException(f"Unexpected character '{ch}'", self)

    def _take_while(self, predicate):
        chars = []
        while self._current != EOF_CHAR and predicate(self._current):
            chars.append(self._current)
            self._advance()
        return "".join(chars)

    def _scan_scalar(self):
        text = ""
        if self._current in "+-":
            text += self._current
            self._advance()
        text += self._take_while(lambda c: c.isdigit() or c == ".")
        if self._current in ("e", "E"):
            text += self._current
            self._advance()
            if self._current in "+-":
                text += self._current
                self._advance()
            text += self._take_while(str.isdigit)
        try:
            return ScalarToken(float(text))
        except ValueError:
            raise SyntaxErrorException(f"Malformed number '{text}'", self) from None

    def _scan_quoted_ident(self):
        self._advance()
        chars = []
        while self._current != '"':
            if self._current in (EOF_CHAR, "\n"):
                raise SyntaxErrorException("Unterminated quoted identifier", self)
            chars.append(self._current)
            self._advance()
        self._advance()
        return IdentToken("".join(chars))

    def _scan_ident(self):
        text = self._take_while(_is_ident_char)
        symbol = lookup_reserved_word(text)
        if symbol == Symbol.UNKNOWN:
            return IdentToken(text)
        return Token(symbol)