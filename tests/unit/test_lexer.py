from __future__ import annotations

import pytest

from gradle_decl.errors import ConfigSyntaxError
from gradle_decl.lexer import TokenKind, tokenize


def _kinds(text: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(text)]


def test_call_tokens() -> None:
    assert _kinds("google()\n") == [
        TokenKind.IDENT,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.NEWLINE,
        TokenKind.EOF,
    ]


def test_comments_are_skipped_and_positions_tracked() -> None:
    tokens = tokenize("  // comment\n  classpath 'a:b:1' /* trailing */\n")

    assert [token.kind for token in tokens] == [
        TokenKind.NEWLINE,
        TokenKind.IDENT,
        TokenKind.STRING,
        TokenKind.NEWLINE,
        TokenKind.EOF,
    ]
    ident, string = tokens[1], tokens[2]
    assert (ident.value, ident.line, ident.column) == ("classpath", 2, 3)
    assert (string.value, string.line, string.column) == ("a:b:1", 2, 13)


def test_block_comment_spanning_lines_advances_line_count() -> None:
    tokens = tokenize("/* one\ntwo\n*/ google")

    assert tokens[0].kind is TokenKind.IDENT
    assert (tokens[0].line, tokens[0].column) == (3, 4)


def test_string_quotes_and_escapes() -> None:
    tokens = tokenize("""'it\\'s' "say \\"hi\\"" "\\$version" """)

    assert [token.value for token in tokens if token.kind is TokenKind.STRING] == [
        "it's",
        'say "hi"',
        "$version",
    ]


@pytest.mark.parametrize(
    "text, expected_message, line, column",
    [
        ("classpath 'a:b:1", "Unterminated string literal", 1, 11),
        ("classpath 'a:b:1\n'", "Unterminated string literal", 1, 11),
        ("google()\n/* never closed", "Unterminated block comment", 2, 1),
        ("google() @", "Unexpected character '@'", 1, 10),
        ("'\\q'", "Unsupported escape sequence", 1, 2),
    ],
)
def test_lexical_errors_report_position(
    text: str, expected_message: str, line: int, column: int
) -> None:
    with pytest.raises(ConfigSyntaxError) as excinfo:
        tokenize(text)

    assert expected_message in str(excinfo.value)
    assert excinfo.value.line == line
    assert excinfo.value.column == column


@pytest.mark.parametrize(
    "text, column",
    [
        ("googlé()\n", 6),
        ("épicerie()\n", 1),
    ],
)
def test_identifiers_are_ascii_only(text: str, column: int) -> None:
    with pytest.raises(ConfigSyntaxError) as excinfo:
        tokenize(text)

    assert "Unexpected character" in str(excinfo.value)
    assert excinfo.value.column == column
