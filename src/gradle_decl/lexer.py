"""Tokenizer for the Gradle block/call syntax."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .errors import ConfigSyntaxError


class TokenKind(str, Enum):
    IDENT = "identifier"
    STRING = "string"
    LBRACE = "'{'"
    RBRACE = "'}'"
    LPAREN = "'('"
    RPAREN = "')'"
    COMMA = "','"
    SEMI = "';'"
    NEWLINE = "newline"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    """A lexical token with its 1-based position."""

    kind: TokenKind
    value: str
    line: int
    column: int


_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMI,
}

_ESCAPES = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "n": "\n",
    "t": "\t",
    "$": "$",
}


class Lexer:
    """Turn build-script text into a stream of tokens."""

    def __init__(self, text: str, source: str = "<string>") -> None:
        self._text = text
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokens(self) -> Iterator[Token]:
        while True:
            self._skip_blanks()
            if self._pos >= len(self._text):
                yield Token(TokenKind.EOF, "", self._line, self._column)
                return

            char = self._text[self._pos]
            line, column = self._line, self._column
            if char == "\n":
                self._advance()
                yield Token(TokenKind.NEWLINE, "\n", line, column)
            elif char in _PUNCTUATION:
                self._advance()
                yield Token(_PUNCTUATION[char], char, line, column)
            elif char in ("'", '"'):
                yield Token(TokenKind.STRING, self._read_string(char), line, column)
            elif _is_identifier_char(char) and not char.isdigit():
                yield Token(TokenKind.IDENT, self._read_identifier(), line, column)
            else:
                raise self._error(f"Unexpected character {char!r}", line, column)

    def _skip_blanks(self) -> None:
        text = self._text
        while self._pos < len(text):
            char = text[self._pos]
            if char in " \t\r\f\ufeff":
                self._advance()
            elif text.startswith("//", self._pos):
                while self._pos < len(text) and text[self._pos] != "\n":
                    self._advance()
            elif text.startswith("/*", self._pos):
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        line, column = self._line, self._column
        end = self._text.find("*/", self._pos + 2)
        if end < 0:
            raise self._error("Unterminated block comment", line, column)
        while self._pos < end + 2:
            self._advance()

    def _read_string(self, quote: str) -> str:
        line, column = self._line, self._column
        self._advance()
        chars: list[str] = []
        while True:
            if self._pos >= len(self._text) or self._text[self._pos] == "\n":
                raise self._error("Unterminated string literal", line, column)
            char = self._text[self._pos]
            if char == quote:
                self._advance()
                return "".join(chars)
            if char == "\\":
                self._advance()
                if self._pos >= len(self._text):
                    raise self._error("Unterminated string literal", line, column)
                escaped = self._text[self._pos]
                if escaped not in _ESCAPES:
                    raise self._error(
                        f"Unsupported escape sequence '\\{escaped}'", self._line, self._column - 1
                    )
                chars.append(_ESCAPES[escaped])
                self._advance()
                continue
            chars.append(char)
            self._advance()

    def _read_identifier(self) -> str:
        start = self._pos
        while self._pos < len(self._text) and _is_identifier_char(self._text[self._pos]):
            self._advance()
        return self._text[start : self._pos]

    def _advance(self) -> None:
        if self._text[self._pos] == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        self._pos += 1

    def _error(self, message: str, line: int, column: int) -> ConfigSyntaxError:
        return ConfigSyntaxError(message, source=self._source, line=line, column=column)


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def tokenize(text: str, source: str = "<string>") -> list[Token]:
    """Tokenize ``text`` eagerly, raising on the first lexical error."""

    return list(Lexer(text, source).tokens())


__all__ = ["Lexer", "Token", "TokenKind", "tokenize"]
