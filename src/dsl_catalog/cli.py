# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command line entry point for building and inspecting DSL catalogs."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from .assembler import CatalogAssembler
from .build import write_catalogs
from .config import BuildSettings, CoercionPolicy, ConfigError, load_settings
from .console import CLIConsole, configure_logging
from .errors import CatalogIntegrityError
from .io import load_dsl_schema
from .scanner import RawCatalogSource
from .serialization import dump_json
from .types import EntityKind

app = typer.Typer(help="Normalise integration DSL metadata into editor catalogs.", no_args_is_help=True)

RawRootOption = Annotated[
    Path,
    typer.Option("--raw-root", help="Directory holding one sub-directory of raw documents per kind."),
]
SchemaOption = Annotated[Path, typer.Option("--schema", help="DSL JSON-Schema document.")]
ConfigOption = Annotated[Path | None, typer.Option("--config", help="TOML settings file.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Emit debug logging.")]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in status lines.")]


def _assembler(raw_root: Path, schema: Path, settings: BuildSettings) -> CatalogAssembler:
    return CatalogAssembler.from_source(RawCatalogSource(raw_root), load_dsl_schema(schema), settings)


@app.command("build")
def build_command(
    raw_root: RawRootOption,
    schema: SchemaOption,
    output: Annotated[Path, typer.Option("--output", "-o", help="Directory receiving the catalogs.")],
    config: ConfigOption = None,
    workers: Annotated[int | None, typer.Option("--workers", min=1, help="Kinds built in parallel.")] = None,
    coercion: Annotated[
        CoercionPolicy | None,
        typer.Option("--coercion", case_sensitive=False, help="Policy for defaults that cannot be coerced."),
    ] = None,
    indent: Annotated[int | None, typer.Option("--indent", min=0, help="JSON indentation.")] = None,
    validate: Annotated[
        bool | None,
        typer.Option("--validate/--no-validate", help="Validate emitted schemas with jsonschema."),
    ] = None,
    debug: DebugOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Build all five catalogs and write them with a checksummed index."""

    out = CLIConsole(use_emoji=not no_emoji)
    configure_logging(debug=debug, console=out.console)
    out.section("Catalog build")
    try:
        settings = load_settings(config).with_overrides(
            max_workers=workers,
            coercion_policy=coercion,
            indent=indent,
            validate_schemas=validate,
        )
        if not settings.validate_schemas:
            out.warn("Schema validation is disabled")
        out.info(f"Reading raw metadata from {raw_root}")
        aggregate = _assembler(raw_root, schema, settings).build()
        report = write_catalogs(aggregate, output)
    except (CatalogIntegrityError, ConfigError, FileNotFoundError) as exc:
        out.fail(f"Catalog build failed: {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Catalogs")
    table.add_column("Kind", style="cyan")
    table.add_column("File")
    table.add_column("Entries", justify="right")
    table.add_column("Checksum")
    for record in report.records:
        table.add_row(record.kind.value, record.file, str(record.entries), record.checksum[:12])
    out.console.print(table)
    out.ok(f"Wrote {len(report.records)} catalogs to {report.output_dir}")


@app.command("show")
def show_command(
    kind: Annotated[EntityKind, typer.Argument(case_sensitive=False, help="Entity kind.")],
    name: Annotated[str, typer.Argument(help="Entity name.")],
    raw_root: RawRootOption,
    schema: SchemaOption,
    config: ConfigOption = None,
    debug: DebugOption = False,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Print the merged catalog entry for one entity as JSON."""

    out = CLIConsole(use_emoji=not no_emoji)
    configure_logging(debug=debug, console=out.console)
    try:
        settings = load_settings(config)
        catalog = _assembler(raw_root, schema, settings).build_kind(kind)
    except (CatalogIntegrityError, ConfigError, FileNotFoundError) as exc:
        out.fail(f"Catalog build failed: {exc}")
        raise typer.Exit(code=1) from exc
    if name not in catalog:
        out.fail(f"No {kind.value} named '{name}'")
        raise typer.Exit(code=1)
    typer.echo(dump_json(catalog[name].to_dict(), settings))


__all__ = ["app"]
