"""Command line interface entry point."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from versioned_schema_tools.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    ToolOptions,
    load_options,
    write_placeholder_configuration,
)
from versioned_schema_tools.consistency_checks import (
    CHECK_SUITES,
    RuleStatus,
    UnknownSuiteError,
    check_repository,
)
from versioned_schema_tools.dereferencing import DereferenceError, dereference_schema
from versioned_schema_tools.logging_setup import configure_logging
from versioned_schema_tools.materialization import (
    MaterializationError,
    materialize_all_schemas,
    materialize_modified_schemas,
    materialize_schema_file,
    materialize_schema_to_path,
)
from versioned_schema_tools.results_writing import write_junit_report
from versioned_schema_tools.serialization import (
    SUPPORTED_CONTENT_TYPES,
    SerializationError,
    parse_object,
    read_object,
    serialize,
)
from versioned_schema_tools.version_control import GitOperationError, install_pre_commit_hook
from versioned_schema_tools.versioning import VersionError

STDIN_PATH = "-"

_COMMON_OPTIONS = (
    click.option(
        "--config",
        "config_paths",
        multiple=True,
        type=click.Path(path_type=str),
        help=f"YAML config file to read; repeatable. Defaults to {DEFAULT_CONFIG_FILENAME}",
    ),
    click.option(
        "--schema-base-path",
        type=click.Path(file_okay=False, path_type=str),
        help="Directory containing current and materialized schema files",
    ),
    click.option(
        "--schema-base-uri",
        "schema_base_uris",
        multiple=True,
        help="URI prefixed onto $refs when dereferencing; repeatable",
    ),
    click.option(
        "--content-type",
        "content_types",
        multiple=True,
        type=click.Choice(SUPPORTED_CONTENT_TYPES),
        help="Content type to materialize; repeatable, the first one is primary",
    ),
    click.option(
        "--schema-version-field",
        help="Field path the schema version is read from",
    ),
    click.option("--no-dereference", is_flag=True, default=False, help="Do not dereference $refs"),
    click.option(
        "--no-symlink",
        is_flag=True,
        default=False,
        help="Do not create extensionless version symlinks",
    ),
    click.option(
        "--no-symlink-latest",
        is_flag=True,
        default=False,
        help="Do not create or update latest symlinks",
    ),
    click.option(
        "--dry-run",
        is_flag=True,
        default=False,
        help="Log what would be written without touching the filesystem",
    ),
    click.option("-v", "--verbose", is_flag=True, default=False, help="Log at debug level"),
)

_DOMAIN_ERRORS = (
    ConfigurationError,
    DereferenceError,
    GitOperationError,
    MaterializationError,
    SerializationError,
    UnknownSuiteError,
    VersionError,
    OSError,
)


class CliError(Exception):
    """Custom CLI error."""


def common_options(function: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every schema command."""
    for option in reversed(_COMMON_OPTIONS):
        function = option(function)
    return function


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="versioned-schema-tools")
def cli() -> None:
    """Versioned JSON Schema repository tooling."""


@cli.command(name="materialize")
@click.argument("schema_paths", nargs=-1, required=True, type=click.Path(path_type=str))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=str),
    help="Directory to write versioned files into; defaults to each schema's directory",
)
@common_options
def materialize(schema_paths: tuple[str, ...], output_dir: str | None, **flags: Any) -> None:
    """Materialize the given schema files, or - for stdin, into versioned files."""
    options = _load_cli_options(**flags)
    if STDIN_PATH in schema_paths and output_dir is None:
        raise CliError("--output-dir is required when reading a schema from stdin.")
    for schema_path in schema_paths:
        try:
            if schema_path == STDIN_PATH:
                schema = _read_stdin_schema()
                written = materialize_schema_to_path(output_dir, schema, options)
            else:
                written = materialize_schema_file(schema_path, options, output_dir=output_dir)
        except _DOMAIN_ERRORS as exc:
            raise CliError(str(exc)) from exc
        _echo_paths(written)


@cli.command(name="materialize-all")
@common_options
def materialize_all(**flags: Any) -> None:
    """Materialize every current schema file under the schema base path."""
    options = _load_cli_options(**flags)
    try:
        written = materialize_all_schemas(options)
    except _DOMAIN_ERRORS as exc:
        raise CliError(str(exc)) from exc
    _echo_paths(written)


@cli.command(name="materialize-modified")
@click.option(
    "--staged/--unstaged",
    default=None,
    help="Materialize current files staged in the git index, or unstaged working tree changes",
)
@click.option("--no-git-add", is_flag=True, default=False, help="Do not git add materialized files")
@common_options
def materialize_modified(staged: bool | None, no_git_add: bool, **flags: Any) -> None:
    """Materialize current schema files that git reports as modified."""
    options = _load_cli_options(
        git_staged=staged,
        should_git_add=False if no_git_add else None,
        **flags,
    )
    try:
        written = materialize_modified_schemas(options)
    except _DOMAIN_ERRORS as exc:
        raise CliError(str(exc)) from exc
    _echo_paths(written)


@cli.command(name="dereference")
@click.argument("schema_paths", nargs=-1, required=True, type=click.Path(path_type=str))
@common_options
def dereference(schema_paths: tuple[str, ...], **flags: Any) -> None:
    """Print the given schema files, or - for stdin, with $refs and allOfs resolved."""
    options = _load_cli_options(**flags)
    for schema_path in schema_paths:
        try:
            if schema_path == STDIN_PATH:
                schema = _read_stdin_schema()
            else:
                schema = read_object(schema_path)
            dereferenced = dereference_schema(schema, options.base_uris)
            click.echo(serialize(dereferenced, options.primary_content_type), nl=False)
        except _DOMAIN_ERRORS as exc:
            raise CliError(str(exc)) from exc


@cli.command(name="check")
@click.option(
    "--suite",
    "suites",
    multiple=True,
    type=click.Choice(CHECK_SUITES),
    help="Rule suite to run; repeatable. Defaults to all suites",
)
@click.option(
    "--junit-xml",
    "junit_xml_path",
    type=click.Path(dir_okay=False, path_type=str),
    help="Write results as JUnit XML to this path",
)
@common_options
def check(suites: tuple[str, ...], junit_xml_path: str | None, **flags: Any) -> None:
    """Check the structure, robustness and compatibility of the schema repository."""
    options = _load_cli_options(**flags)
    try:
        results = check_repository(options, suites=suites or CHECK_SUITES)
        if junit_xml_path:
            write_junit_report(results, junit_xml_path)
    except _DOMAIN_ERRORS as exc:
        raise CliError(str(exc)) from exc

    failed = [result for result in results if result.status is RuleStatus.FAILED]
    for result in failed:
        click.echo(f"FAILED [{result.suite}] {result.subject}: {result.rule}: {result.message}")
    skipped = sum(1 for result in results if result.status is RuleStatus.SKIPPED)
    passed = len(results) - len(failed) - skipped
    click.echo(f"{passed} passed, {len(failed)} failed, {skipped} skipped")
    if failed:
        raise CliError(f"{len(failed)} schema repository rule(s) failed.")


@cli.command(name="install-git-hook")
@common_options
def install_git_hook(**flags: Any) -> None:
    """Install a git pre-commit hook that materializes staged current schema files."""
    options = _load_cli_options(**flags)
    try:
        hook_path = install_pre_commit_hook(options)
    except _DOMAIN_ERRORS as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(hook_path))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration file to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _load_cli_options(
    *,
    config_paths: tuple[str, ...],
    schema_base_path: str | None,
    schema_base_uris: tuple[str, ...],
    content_types: tuple[str, ...],
    schema_version_field: str | None,
    no_dereference: bool,
    no_symlink: bool,
    no_symlink_latest: bool,
    dry_run: bool,
    verbose: bool,
    **extra_overrides: Any,
) -> ToolOptions:
    overrides = {
        "schema_base_path": Path(schema_base_path) if schema_base_path else None,
        "schema_base_uris": list(schema_base_uris) or None,
        "content_types": list(content_types) or None,
        "schema_version_field": schema_version_field,
        "should_dereference": False if no_dereference else None,
        "should_symlink_extensionless": False if no_symlink else None,
        "should_symlink_latest": False if no_symlink_latest else None,
        "dry_run": True if dry_run else None,
        "log_level": "debug" if verbose else None,
        **extra_overrides,
    }
    try:
        options = load_options(overrides, config_paths=config_paths or None)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc
    configure_logging(options.log_level)
    return options


def _read_stdin_schema() -> Any:
    with click.open_file(STDIN_PATH, encoding="utf-8") as stream:
        return parse_object(stream.read(), "<stdin>")


def _echo_paths(paths: list[Path]) -> None:
    for path in paths:
        click.echo(str(path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
