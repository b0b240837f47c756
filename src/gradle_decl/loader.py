"""Interpret a parsed build script into immutable declarations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .errors import (
    ConfigSyntaxError,
    DeclarationError,
    DuplicateDependencyError,
    DuplicateRepositoryError,
    InvalidCoordinateError,
    UnknownRepositoryError,
)
from .parser import Statement, parse
from .types import (
    BuildDeclarations,
    Dependency,
    DependencySpec,
    DuplicatePolicy,
    Repository,
    RepositoryList,
)

LOGGER = logging.getLogger(__name__)

BUILDSCRIPT_BLOCK = "buildscript"
ALLPROJECTS_BLOCK = "allprojects"
REPOSITORIES_BLOCK = "repositories"
DEPENDENCIES_BLOCK = "dependencies"
CLASSPATH_CONFIGURATION = "classpath"


class DeclarationLoader:
    """Load ``buildscript``/``allprojects`` declarations from text."""

    def __init__(self, policy: DuplicatePolicy = DuplicatePolicy.REJECT) -> None:
        self.policy = DuplicatePolicy(policy)

    def load(self, text: str, *, source: str = "<string>") -> BuildDeclarations:
        """Parse ``text`` and return the declarations it contains."""

        statements = parse(text, source)
        load = _Load(self.policy, source)
        declarations = load.script(statements)
        LOGGER.debug(
            "Loaded %s: %d buildscript repositories, %d classpath dependencies, "
            "%d project repositories",
            source,
            len(declarations.buildscript_repositories),
            len(declarations.classpath),
            len(declarations.project_repositories),
        )
        return declarations

    def load_path(self, path: Path | str) -> BuildDeclarations:
        """Read and load a build script file."""

        file_path = Path(path).expanduser()
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DeclarationError(
                f"Cannot read build script: {exc}", source=str(file_path)
            ) from exc
        return self.load(text, source=str(file_path))


class _Load:
    """Single-use interpreter state for one load."""

    def __init__(self, policy: DuplicatePolicy, source: str) -> None:
        self._policy = policy
        self._source = source

    def script(self, statements: tuple[Statement, ...]) -> BuildDeclarations:
        blocks = self._blocks(
            statements, (BUILDSCRIPT_BLOCK, ALLPROJECTS_BLOCK), "the build script"
        )

        buildscript_repositories: RepositoryList = ()
        classpath = DependencySpec()
        project_repositories: RepositoryList = ()

        buildscript = blocks.get(BUILDSCRIPT_BLOCK)
        if buildscript is not None:
            inner = self._blocks(
                buildscript.body or (),
                (REPOSITORIES_BLOCK, DEPENDENCIES_BLOCK),
                BUILDSCRIPT_BLOCK,
            )
            if REPOSITORIES_BLOCK in inner:
                buildscript_repositories = self._repositories(inner[REPOSITORIES_BLOCK])
            if DEPENDENCIES_BLOCK in inner:
                classpath = self._dependencies(inner[DEPENDENCIES_BLOCK])

        allprojects = blocks.get(ALLPROJECTS_BLOCK)
        if allprojects is not None:
            inner = self._blocks(allprojects.body or (), (REPOSITORIES_BLOCK,), ALLPROJECTS_BLOCK)
            if REPOSITORIES_BLOCK in inner:
                project_repositories = self._repositories(inner[REPOSITORIES_BLOCK])

        return BuildDeclarations(
            buildscript_repositories=buildscript_repositories,
            classpath=classpath,
            project_repositories=project_repositories,
            source=self._source,
        )

    def _blocks(
        self,
        statements: tuple[Statement, ...],
        allowed: tuple[str, ...],
        context: str,
    ) -> dict[str, Statement]:
        found: dict[str, Statement] = {}
        for statement in statements:
            if statement.name not in allowed:
                raise self._syntax(
                    f"Unexpected '{statement.name}' in {context}; "
                    f"expected one of: {', '.join(allowed)}",
                    statement,
                )
            if not statement.is_block or statement.args:
                raise self._syntax(
                    f"'{statement.name}' must be a block: {statement.name} {{ ... }}",
                    statement,
                )
            if statement.name in found:
                raise self._syntax(
                    f"'{statement.name}' declared more than once in {context} "
                    f"(first at line {found[statement.name].line})",
                    statement,
                )
            found[statement.name] = statement
        return found

    def _repositories(self, block: Statement) -> RepositoryList:
        entries: list[tuple[Repository, Statement]] = []
        for statement in block.body or ():
            if statement.name not in Repository.names():
                raise UnknownRepositoryError(
                    f"Unknown repository '{statement.name}'; "
                    f"recognized: {', '.join(Repository.names())}",
                    source=self._source,
                    line=statement.line,
                    column=statement.column,
                )
            if not statement.called or statement.args or statement.is_block:
                raise self._syntax(
                    f"Repository must be declared as '{statement.name}()'", statement
                )
            entries.append((Repository(statement.name), statement))

        repositories = self._unique(
            entries,
            key=lambda repo: repo.value,
            on_duplicate=lambda repo, statement, first: DuplicateRepositoryError(
                f"Repository '{repo.value}' declared more than once "
                f"(first at line {first.line})",
                source=self._source,
                line=statement.line,
                column=statement.column,
            ),
        )
        return tuple(repositories)

    def _dependencies(self, block: Statement) -> DependencySpec:
        entries: list[tuple[Dependency, Statement]] = []
        for statement in block.body or ():
            if statement.name != CLASSPATH_CONFIGURATION:
                raise self._syntax(
                    f"Unsupported dependency configuration '{statement.name}'; "
                    f"only '{CLASSPATH_CONFIGURATION}' is allowed here",
                    statement,
                )
            if statement.is_block or len(statement.args) != 1:
                raise self._syntax(
                    "classpath expects exactly one 'group:artifact:version' string",
                    statement,
                )
            try:
                dependency = Dependency.parse(statement.args[0])
            except ValueError as exc:
                raise InvalidCoordinateError(
                    f"Invalid classpath dependency: {exc}",
                    source=self._source,
                    line=statement.line,
                    column=statement.column,
                ) from exc
            entries.append((dependency, statement))

        versions: dict[str, tuple[Dependency, Statement]] = {}
        for dependency, statement in entries:
            previous = versions.setdefault(dependency.coordinate, (dependency, statement))
            if previous[0].version != dependency.version:
                raise DuplicateDependencyError(
                    f"Conflicting versions for '{dependency.coordinate}': "
                    f"{previous[0].version} (line {previous[1].line}) and {dependency.version}",
                    source=self._source,
                    line=statement.line,
                    column=statement.column,
                )

        dependencies = self._unique(
            entries,
            key=lambda dep: dep.coordinate,
            on_duplicate=lambda dep, statement, first: DuplicateDependencyError(
                f"Dependency '{dep.coordinate}' declared more than once "
                f"(first at line {first.line})",
                source=self._source,
                line=statement.line,
                column=statement.column,
            ),
        )
        return DependencySpec.from_dependencies(dependencies)

    def _unique(
        self,
        entries: list[tuple],
        *,
        key: Callable[[object], str],
        on_duplicate: Callable[[object, Statement, Statement], DeclarationError],
    ) -> list:
        seen: dict[str, Statement] = {}
        unique = []
        for value, statement in entries:
            name = key(value)
            if name not in seen:
                seen[name] = statement
                unique.append(value)
                continue
            if self._policy is DuplicatePolicy.REJECT:
                raise on_duplicate(value, statement, seen[name])
            LOGGER.warning(
                "%s:%d: dropping duplicate declaration of '%s' (first at line %d)",
                self._source,
                statement.line,
                name,
                seen[name].line,
            )
        return unique

    def _syntax(self, message: str, statement: Statement) -> ConfigSyntaxError:
        return ConfigSyntaxError(
            message, source=self._source, line=statement.line, column=statement.column
        )


def load_declarations(
    text: str,
    *,
    policy: DuplicatePolicy = DuplicatePolicy.REJECT,
    source: str = "<string>",
) -> BuildDeclarations:
    """Load declarations from build-script text."""

    return DeclarationLoader(policy).load(text, source=source)


def load_declarations_file(
    path: Path | str,
    *,
    policy: DuplicatePolicy = DuplicatePolicy.REJECT,
) -> BuildDeclarations:
    """Load declarations from a build-script file."""

    return DeclarationLoader(policy).load_path(path)


__all__ = ["DeclarationLoader", "load_declarations", "load_declarations_file"]
