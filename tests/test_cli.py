# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for the build and show commands."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from dsl_catalog.build import INDEX_FILENAME
from dsl_catalog.cli import app


def test_build_writes_catalogs(tmp_path: Path, raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()
    output = tmp_path / "catalogs"

    result = runner.invoke(
        app,
        ["build", "--raw-root", str(raw_root), "--schema", str(schema_path), "--output", str(output), "--no-emoji"],
    )

    assert result.exit_code == 0, result.output
    assert "Wrote 5 catalogs" in result.output
    index = json.loads((output / INDEX_FILENAME).read_text(encoding="utf-8"))
    assert set(index["catalogs"]) == {"components", "dataformats", "languages", "models", "patterns"}
    components = json.loads((output / "components.json").read_text(encoding="utf-8"))
    assert components["sql"]["propertiesSchema"]["properties"]["bridgeErrorHandler"]["default"] is False


def test_build_honours_overrides(tmp_path: Path, raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()
    output = tmp_path / "catalogs"
    config = tmp_path / "catalog.toml"
    config.write_text("indent = 4\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "build",
            "--raw-root",
            str(raw_root),
            "--schema",
            str(schema_path),
            "-o",
            str(output),
            "--config",
            str(config),
            "--indent",
            "0",
            "--workers",
            "2",
            "--no-validate",
            "--no-emoji",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Schema validation is disabled" in result.output
    text = (output / "models.json").read_text(encoding="utf-8")
    assert text.startswith('{\n"aggregate"')


def test_build_failure_exits_non_zero(tmp_path: Path, raw_root: Path) -> None:
    runner = CliRunner()
    schema = tmp_path / "schema.json"
    schema.write_text(json.dumps({"definitions": {}}), encoding="utf-8")

    result = runner.invoke(
        app,
        ["build", "--raw-root", str(raw_root), "--schema", str(schema), "--output", str(tmp_path / "out"), "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Catalog build failed" in result.output
    assert not (tmp_path / "out").exists()


def test_build_rejects_bad_config(tmp_path: Path, raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()
    config = tmp_path / "catalog.toml"
    config.write_text("max_workers = 0\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "build",
            "--raw-root",
            str(raw_root),
            "--schema",
            str(schema_path),
            "--output",
            str(tmp_path / "out"),
            "--config",
            str(config),
            "--no-emoji",
        ],
    )

    assert result.exit_code == 1
    assert "Catalog build failed" in result.output


def test_show_prints_entry(raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["show", "pattern", "aggregate", "--raw-root", str(raw_root), "--schema", str(schema_path), "--no-emoji"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    strategy = payload["propertiesSchema"]["properties"]["aggregationStrategy"]
    assert strategy["$comment"] == "class:org.apache.camel.AggregationStrategy"


def test_show_unknown_entity(raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["show", "language", "file", "--raw-root", str(raw_root), "--schema", str(schema_path), "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "No language named 'file'" in result.output


def test_build_reports_undecodable_document(tmp_path: Path, raw_root: Path, schema_path: Path) -> None:
    runner = CliRunner()
    raw_copy = tmp_path / "raw"
    shutil.copytree(raw_root, raw_copy)
    (raw_copy / "patterns" / "log.json").write_bytes(b"\xff\xfe")

    result = runner.invoke(
        app,
        ["build", "--raw-root", str(raw_copy), "--schema", str(schema_path), "-o", str(tmp_path / "out"), "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Catalog build failed" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
