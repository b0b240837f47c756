"""Core immutable data structures produced by the declaration loader."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Repository(str, Enum):
    """Recognized artifact repositories."""

    GOOGLE = "google"
    MAVEN_CENTRAL = "mavenCentral"

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]


class DuplicatePolicy(str, Enum):
    """How repeated repositories or coordinates within one list are handled."""

    REJECT = "reject"
    DEDUPLICATE = "deduplicate"


RepositoryList = tuple[Repository, ...]

VERSION_PATTERN = re.compile(r"\d+(\.\d+)*([-.+][0-9A-Za-z]+([-.+][0-9A-Za-z]+)*)?")
_PART_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")


def is_valid_version(version: str) -> bool:
    """Return True if ``version`` looks like a semantic version token."""

    return bool(VERSION_PATTERN.fullmatch(version))


@dataclass(frozen=True)
class Dependency:
    """A single pinned classpath dependency."""

    group: str
    artifact: str
    version: str

    @property
    def coordinate(self) -> str:
        return f"{self.group}:{self.artifact}"

    @property
    def notation(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"

    @classmethod
    def parse(cls, notation: str) -> Dependency:
        """Split ``group:artifact:version`` notation.

        Raises ``ValueError`` with a human readable reason on malformed input;
        the loader wraps it into a positioned error.
        """

        parts = notation.split(":")
        if len(parts) != 3:
            raise ValueError(f"expected 'group:artifact:version', got '{notation}'")
        group, artifact, version = parts
        for label, value in (("group", group), ("artifact", artifact)):
            if not value:
                raise ValueError(f"{label} is empty in '{notation}'")
            if not _PART_PATTERN.fullmatch(value):
                raise ValueError(f"{label} '{value}' contains invalid characters")
        if not version:
            raise ValueError(f"version is empty in '{notation}'")
        if not is_valid_version(version):
            raise ValueError(f"version '{version}' is not a valid version")
        return cls(group=group, artifact=artifact, version=version)


@dataclass(frozen=True)
class DependencySpec(Mapping[str, str]):
    """Ordered, read-only mapping of coordinate to pinned version."""

    dependencies: tuple[Dependency, ...] = ()
    _index: Mapping[str, str] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        index: dict[str, str] = {}
        for dependency in self.dependencies:
            if dependency.coordinate in index:
                raise ValueError(f"Duplicate coordinate '{dependency.coordinate}'")
            index[dependency.coordinate] = dependency.version
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_dependencies(cls, dependencies: Iterable[Dependency]) -> DependencySpec:
        return cls(dependencies=tuple(dependencies))

    def __getitem__(self, coordinate: str) -> str:
        return self._index[coordinate]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)


@dataclass(frozen=True)
class BuildDeclarations:
    """Everything a build script declares for the bootstrap and all projects."""

    buildscript_repositories: RepositoryList = ()
    classpath: DependencySpec = field(default_factory=DependencySpec)
    project_repositories: RepositoryList = ()
    source: str = field(default="<string>", compare=False)

    def as_dict(self) -> dict[str, Any]:
        """Plain-data view suitable for JSON output."""

        return {
            "buildscript": {
                "repositories": [repo.value for repo in self.buildscript_repositories],
                "dependencies": {
                    "classpath": [dep.notation for dep in self.classpath.dependencies],
                },
            },
            "allprojects": {
                "repositories": [repo.value for repo in self.project_repositories],
            },
        }


__all__ = [
    "BuildDeclarations",
    "Dependency",
    "DependencySpec",
    "DuplicatePolicy",
    "Repository",
    "RepositoryList",
    "is_valid_version",
]
