from __future__ import annotations

import logging
from pathlib import Path

import pytest

ANDROID_BUILD_SCRIPT = """\
buildscript {
    repositories {
        google() // Android tooling is served from here
        mavenCentral()
    }
    dependencies {
        classpath 'com.android.tools.build:gradle:8.1.0'
        classpath "org.jetbrains.kotlin:kotlin-gradle-plugin:1.9.20"
    }
}

allprojects {
    repositories {
        google()
        mavenCentral()
    }
}"""


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep user settings and logging handlers out of every test."""

    monkeypatch.delenv("GRADLE_DECL_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def android_build_script() -> str:
    return ANDROID_BUILD_SCRIPT


@pytest.fixture
def build_file(tmp_path: Path, android_build_script: str) -> Path:
    path = tmp_path / "build.gradle.kts"
    path.write_text(android_build_script, encoding="utf-8")
    return path
