"""Render loaded declarations back to canonical build-script text."""

from __future__ import annotations

from .types import BuildDeclarations, DependencySpec, RepositoryList


def render_declarations(
    declarations: BuildDeclarations,
    *,
    indent: int = 4,
    quote: str = "'",
) -> str:
    """Return build-script text that loads back to ``declarations``."""

    pad = " " * indent
    lines = ["buildscript {"]
    lines.extend(_indent(_repositories_block(declarations.buildscript_repositories, pad), pad))
    lines.extend(_indent(_dependencies_block(declarations.classpath, pad, quote), pad))
    lines.append("}")
    lines.append("")
    lines.append("allprojects {")
    lines.extend(_indent(_repositories_block(declarations.project_repositories, pad), pad))
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_dependencies(spec: DependencySpec, *, indent: int = 4, quote: str = "'") -> str:
    """Render just a ``dependencies { ... }`` block."""

    return "\n".join(_dependencies_block(spec, " " * indent, quote)) + "\n"


def _repositories_block(repositories: RepositoryList, pad: str) -> list[str]:
    lines = ["repositories {"]
    lines.extend(f"{pad}{repo.value}()" for repo in repositories)
    lines.append("}")
    return lines


def _dependencies_block(spec: DependencySpec, pad: str, quote: str) -> list[str]:
    if quote not in ("'", '"'):
        raise ValueError(f"Unsupported quote character: {quote!r}")
    lines = ["dependencies {"]
    lines.extend(
        f"{pad}classpath {quote}{dependency.notation}{quote}" for dependency in spec.dependencies
    )
    lines.append("}")
    return lines


def _indent(lines: list[str], pad: str) -> list[str]:
    return [f"{pad}{line}" for line in lines]


__all__ = ["render_declarations", "render_dependencies"]
