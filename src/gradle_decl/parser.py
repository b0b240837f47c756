"""Recursive descent parser producing a statement tree."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigSyntaxError
from .lexer import Token, TokenKind, tokenize


@dataclass(frozen=True)
class Statement:
    """One ``name(args) { body }`` statement.

    ``body`` is ``None`` when the statement has no block; ``called`` records
    whether parentheses were present so ``google()`` and ``google`` differ.
    """

    name: str
    args: tuple[str, ...] = ()
    body: tuple[Statement, ...] | None = None
    called: bool = False
    line: int = 0
    column: int = 0

    @property
    def is_block(self) -> bool:
        return self.body is not None


_TERMINATORS = (TokenKind.NEWLINE, TokenKind.SEMI, TokenKind.RBRACE, TokenKind.EOF)


class Parser:
    """Parse a token list into top-level statements."""

    def __init__(self, tokens: list[Token], source: str = "<string>") -> None:
        self._tokens = tokens
        self._source = source
        self._index = 0

    def parse(self) -> tuple[Statement, ...]:
        statements = self._statements(closing=None)
        self._expect(TokenKind.EOF)
        return statements

    def _statements(self, closing: Token | None) -> tuple[Statement, ...]:
        statements: list[Statement] = []
        while True:
            self._skip_separators()
            token = self._peek()
            if token.kind is TokenKind.RBRACE:
                if closing is None:
                    raise self._error("Unmatched '}'", token)
                return tuple(statements)
            if token.kind is TokenKind.EOF:
                if closing is not None:
                    raise self._error(
                        f"Missing '}}' for block opened at line {closing.line}", token
                    )
                return tuple(statements)
            statements.append(self._statement())
            self._expect_terminator()

    def _statement(self) -> Statement:
        name = self._expect(TokenKind.IDENT)
        token = self._peek()

        if token.kind is TokenKind.LBRACE:
            return Statement(
                name=name.value,
                body=self._block(),
                line=name.line,
                column=name.column,
            )

        if token.kind is TokenKind.LPAREN:
            args = self._call_arguments()
            body = self._block() if self._peek().kind is TokenKind.LBRACE else None
            return Statement(
                name=name.value,
                args=args,
                body=body,
                called=True,
                line=name.line,
                column=name.column,
            )

        if token.kind is TokenKind.STRING:
            return Statement(
                name=name.value,
                args=self._command_arguments(),
                line=name.line,
                column=name.column,
            )

        return Statement(name=name.value, line=name.line, column=name.column)

    def _block(self) -> tuple[Statement, ...]:
        opening = self._expect(TokenKind.LBRACE)
        body = self._statements(closing=opening)
        self._expect(TokenKind.RBRACE)
        return body

    def _call_arguments(self) -> tuple[str, ...]:
        opening = self._expect(TokenKind.LPAREN)
        args: list[str] = []
        self._skip_newlines()
        if self._peek().kind is TokenKind.RPAREN:
            self._advance()
            return ()
        while True:
            self._skip_newlines()
            self._check_unclosed_call(opening)
            args.append(self._expect(TokenKind.STRING).value)
            self._skip_newlines()
            token = self._peek()
            if token.kind is TokenKind.COMMA:
                self._advance()
                continue
            if token.kind is TokenKind.RPAREN:
                self._advance()
                return tuple(args)
            self._check_unclosed_call(opening)
            raise self._error(f"Expected ',' or ')' but found {token.kind.value}", token)

    def _check_unclosed_call(self, opening: Token) -> None:
        token = self._peek()
        if token.kind in (TokenKind.RBRACE, TokenKind.EOF):
            raise self._error(f"Missing ')' for call opened at line {opening.line}", token)

    def _command_arguments(self) -> tuple[str, ...]:
        args = [self._expect(TokenKind.STRING).value]
        while self._peek().kind is TokenKind.COMMA:
            self._advance()
            self._skip_newlines()
            args.append(self._expect(TokenKind.STRING).value)
        return tuple(args)

    def _expect_terminator(self) -> None:
        token = self._peek()
        if token.kind not in _TERMINATORS:
            raise self._error(
                f"Expected end of statement but found {token.kind.value}", token
            )

    def _skip_separators(self) -> None:
        while self._peek().kind in (TokenKind.NEWLINE, TokenKind.SEMI):
            self._advance()

    def _skip_newlines(self) -> None:
        while self._peek().kind is TokenKind.NEWLINE:
            self._advance()

    def _expect(self, kind: TokenKind) -> Token:
        token = self._peek()
        if token.kind is not kind:
            raise self._error(f"Expected {kind.value} but found {token.kind.value}", token)
        self._advance()
        return token

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> None:
        if self._tokens[self._index].kind is not TokenKind.EOF:
            self._index += 1

    def _error(self, message: str, token: Token) -> ConfigSyntaxError:
        return ConfigSyntaxError(
            message, source=self._source, line=token.line, column=token.column
        )


def parse(text: str, source: str = "<string>") -> tuple[Statement, ...]:
    """Parse build-script ``text`` into its top-level statements."""

    return Parser(tokenize(text, source), source).parse()


__all__ = ["Parser", "Statement", "parse"]
