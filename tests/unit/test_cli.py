from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from gradle_decl.cli import app
from gradle_decl.loader import load_declarations
from gradle_decl.render import render_declarations

runner = CliRunner()


def _write_build(tmp_path: Path, content: str, name: str = "build.gradle") -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def _write_config(tmp_path: Path, *lines: str) -> Path:
    config = tmp_path / "config.yaml"
    config.write_text("\n".join([*lines, ""]), encoding="utf-8")
    return config


DUPLICATED = "allprojects {\n    repositories {\n        google()\n        google()\n    }\n}\n"


def test_show_lists_declarations_in_order(build_file: Path) -> None:
    result = runner.invoke(app, ["show", str(build_file)])

    assert result.exit_code == 0
    assert "buildscript repositories:\n  1. google\n  2. mavenCentral" in result.stdout
    assert "  - com.android.tools.build:gradle 8.1.0" in result.stdout
    assert "  - org.jetbrains.kotlin:kotlin-gradle-plugin 1.9.20" in result.stdout
    assert "allprojects repositories:\n  1. google\n  2. mavenCentral" in result.stdout


def test_show_json_matches_loaded_structure(build_file: Path, android_build_script: str) -> None:
    result = runner.invoke(app, ["show", "--json", str(build_file)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == load_declarations(android_build_script).as_dict()


def test_check_reports_summary(build_file: Path) -> None:
    result = runner.invoke(app, ["check", str(build_file)])

    assert result.exit_code == 0
    assert "2 buildscript repositories, 2 classpath dependencies, 2 project repositories" in (
        result.stdout
    )


def test_check_fails_on_unknown_repository(tmp_path: Path) -> None:
    path = _write_build(tmp_path, "allprojects {\n    repositories {\n        jcenter()\n    }\n}\n")

    result = runner.invoke(app, ["check", str(path)])

    assert result.exit_code == 1
    assert f"{path}:3:9: Unknown repository 'jcenter'" in result.output


def test_check_fails_on_missing_brace(tmp_path: Path) -> None:
    path = _write_build(tmp_path, "buildscript {\n    repositories {\n        google()\n    }\n")

    result = runner.invoke(app, ["check", str(path)])

    assert result.exit_code == 1
    assert "Missing '}' for block opened at line 1" in result.output


def test_duplicates_option_overrides_default(tmp_path: Path) -> None:
    path = _write_build(tmp_path, DUPLICATED)

    rejected = runner.invoke(app, ["check", str(path)])
    accepted = runner.invoke(app, ["--duplicates", "deduplicate", "check", str(path)])

    assert rejected.exit_code == 1
    assert "declared more than once" in rejected.output
    assert accepted.exit_code == 0
    assert "1 project repositories" in accepted.stdout


def test_duplicates_policy_from_settings(tmp_path: Path) -> None:
    path = _write_build(tmp_path, DUPLICATED)
    config = _write_config(tmp_path, "duplicates: deduplicate")

    result = runner.invoke(app, ["-c", str(config), "check", str(path)])

    assert result.exit_code == 0


def test_invalid_settings_exit_with_configuration_error(tmp_path: Path, build_file: Path) -> None:
    config = _write_config(tmp_path, "duplicates: sometimes")

    result = runner.invoke(app, ["-c", str(config), "check", str(build_file)])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_format_prints_canonical_text(build_file: Path, android_build_script: str) -> None:
    result = runner.invoke(app, ["format", str(build_file)])

    assert result.exit_code == 0
    assert result.stdout == render_declarations(load_declarations(android_build_script))


def test_format_writes_output_file(tmp_path: Path, build_file: Path) -> None:
    output = tmp_path / "out" / "build.gradle"
    output.parent.mkdir()

    result = runner.invoke(app, ["format", "--indent", "2", "-o", str(output), str(build_file)])

    assert result.exit_code == 0
    written = output.read_text(encoding="utf-8")
    assert written.startswith("buildscript {\n  repositories {\n    google()")
    assert load_declarations(written) == load_declarations(build_file.read_text(encoding="utf-8"))


def test_missing_build_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", str(tmp_path / "absent.gradle")])

    assert result.exit_code == 1
    assert "Cannot read build script" in result.output


def test_check_reports_undecodable_build_file(tmp_path: Path) -> None:
    path = tmp_path / "build.gradle"
    path.write_bytes(b"\xff\xfe buildscript {}\n")

    result = runner.invoke(app, ["check", str(path)])

    assert result.exit_code == 1
    assert "Cannot read build script" in result.output


def test_format_reports_unwritable_output(tmp_path: Path, build_file: Path) -> None:
    output = tmp_path / "missing-dir" / "build.gradle"

    result = runner.invoke(app, ["format", "-o", str(output), str(build_file)])

    assert result.exit_code == 1
    assert f"Cannot write {output}" in result.output
    assert not output.exists()


def test_unusable_log_file_is_reported(tmp_path: Path, build_file: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    config = _write_config(tmp_path, "logging:", f"  file: {blocker}/gradle-decl.log")

    result = runner.invoke(app, ["-c", str(config), "check", str(build_file)])

    assert result.exit_code == 1
    assert "Cannot open log file" in result.output
