"""Errors raised while loading build declarations."""

from __future__ import annotations


class DeclarationError(ValueError):
    """Base class for every load failure; carries the source position."""

    def __init__(
        self,
        message: str,
        *,
        source: str = "<string>",
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line is None:
            return f"{self.source}: {self.message}"
        if self.column is None:
            return f"{self.source}:{self.line}: {self.message}"
        return f"{self.source}:{self.line}:{self.column}: {self.message}"


class ConfigSyntaxError(DeclarationError):
    """Text cannot be parsed into the expected block/call shape."""


class InvalidCoordinateError(ConfigSyntaxError):
    """A classpath notation or its version is malformed."""


class UnknownRepositoryError(DeclarationError):
    """A repository identifier is outside the recognized set."""


class DuplicateRepositoryError(DeclarationError):
    """The same repository appears twice in one list."""


class DuplicateDependencyError(DeclarationError):
    """The same coordinate appears twice in one dependencies block."""


__all__ = [
    "ConfigSyntaxError",
    "DeclarationError",
    "DuplicateDependencyError",
    "DuplicateRepositoryError",
    "InvalidCoordinateError",
    "UnknownRepositoryError",
]
