"""gradle-decl package initialisation."""

from importlib import metadata

from .errors import (
    ConfigSyntaxError,
    DeclarationError,
    DuplicateDependencyError,
    DuplicateRepositoryError,
    InvalidCoordinateError,
    UnknownRepositoryError,
)
from .loader import DeclarationLoader, load_declarations, load_declarations_file
from .render import render_declarations, render_dependencies
from .types import (
    BuildDeclarations,
    Dependency,
    DependencySpec,
    DuplicatePolicy,
    Repository,
    RepositoryList,
)


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("gradle-decl")
    except metadata.PackageNotFoundError:  # pragma: no cover - occurs in source checkouts
        return "0.0.0"


__version__ = _discover_version()

__all__ = [
    "BuildDeclarations",
    "ConfigSyntaxError",
    "DeclarationError",
    "DeclarationLoader",
    "Dependency",
    "DependencySpec",
    "DuplicateDependencyError",
    "DuplicatePolicy",
    "DuplicateRepositoryError",
    "InvalidCoordinateError",
    "Repository",
    "RepositoryList",
    "UnknownRepositoryError",
    "__version__",
    "load_declarations",
    "load_declarations_file",
    "render_declarations",
    "render_dependencies",
]
