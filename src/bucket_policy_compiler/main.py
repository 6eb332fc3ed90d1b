"""Command line entry point for the Bucket Policy Compiler."""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from typing import Any

import click

from . import logging as structured_logging
from .builders.config import create_security_config_from_spec
from .compiler import compile_config
from .compiler.validator import validate
from .serialization import artifact_fingerprint, artifact_to_dict, canonical_json
from .settings import CompilerSettings
from .tracing import initialize_tracing
from .utils.errors import ValidationError


def _load_spec(config_file: Any) -> dict[str, Any]:
    try:
        spec = json.load(config_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{config_file.name} is not valid JSON: {e}")
    if not isinstance(spec, dict):
        raise click.ClickException(f"{config_file.name} must contain a JSON object")
    return spec


def _report_validation_error(error: ValidationError) -> None:
    click.echo(f"Configuration is invalid ({len(error.errors)} problem(s)):", err=True)
    for field_error in error.errors:
        click.echo(f"  - {field_error}", err=True)


@click.group()
@click.option("--strict-object-lock", is_flag=True, default=False,
              help="Reject object lock settings supplied while object lock is disabled.")
@click.pass_context
def cli(ctx: click.Context, strict_object_lock: bool) -> None:
    """Compile bucket security configurations into policy and lifecycle documents."""
    settings = CompilerSettings.from_env()
    if strict_object_lock:
        settings = replace(settings, strict_object_lock=True)

    structured_logging.setup_structured_logging(settings.log_level, stream=sys.stderr)
    if settings.tracing_enabled:
        initialize_tracing()

    ctx.ensure_object(dict)
    ctx.obj["SETTINGS"] = settings


@cli.command("compile")
@click.argument("config_file", type=click.File("r"))
@click.option("--output", "-o", type=click.File("w"), default="-", help="Where to write the artifact JSON.")
@click.option("--pretty", is_flag=True, help="Indent the JSON output.")
@click.pass_context
def compile_command(ctx: click.Context, config_file: Any, output: Any, pretty: bool) -> None:
    """Compile CONFIG_FILE and write the artifact as JSON."""
    settings: CompilerSettings = ctx.obj["SETTINGS"]
    spec = _load_spec(config_file)

    try:
        config = create_security_config_from_spec(spec)
        artifact = compile_config(config, settings)
    except ValidationError as e:
        _report_validation_error(e)
        ctx.exit(1)

    data = artifact_to_dict(artifact)
    data["fingerprint"] = artifact_fingerprint(artifact)
    output.write(canonical_json(data, indent=2 if pretty else None))
    output.write("\n")


@cli.command("validate")
@click.argument("config_file", type=click.File("r"))
@click.pass_context
def validate_command(ctx: click.Context, config_file: Any) -> None:
    """Validate CONFIG_FILE without compiling it."""
    settings: CompilerSettings = ctx.obj["SETTINGS"]
    spec = _load_spec(config_file)

    try:
        config = create_security_config_from_spec(spec)
        validate(config, strict_object_lock=settings.strict_object_lock)
    except ValidationError as e:
        _report_validation_error(e)
        ctx.exit(1)

    click.echo(f"Configuration for bucket {config.name} is valid.")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
