"""Materialization of current schema sources into versioned files and symlinks."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.dereferencing import DereferenceError, Fetcher, dereference_schema
from versioned_schema_tools.numeric_bounds import enforce_numeric_bounds
from versioned_schema_tools.repository_scanning import SchemaInfo, find_all_schemas_info
from versioned_schema_tools.serialization import SerializationError, read_object, write_object
from versioned_schema_tools.version_control import GitRepository
from versioned_schema_tools.versioning import SemVer, VersionError, extract_version

from .symlink_pointers import SymlinkError, read_pointed_version, replace_symlink

_LOGGER = logging.getLogger(__name__)

_MATERIALIZATION_FAILURES = (
    DereferenceError,
    SerializationError,
    SymlinkError,
    VersionError,
    OSError,
)


class MaterializationError(Exception):
    """Raised when a schema file cannot be materialized."""

    def __init__(self, schema_path: Path | str, cause: Exception):
        self.schema_path = Path(schema_path)
        self.cause = cause
        super().__init__(f"Failed materializing schema {schema_path}: {cause}")


def materialize_schema(
    schema: Mapping[str, Any],
    options: ToolOptions,
    *,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> Any:
    """Return schema dereferenced and with numeric bounds enforced, as configured."""
    log = logger or _LOGGER
    materialized: Any = copy.deepcopy(schema)
    if options.should_dereference:
        materialized = dereference_schema(
            materialized, options.base_uris, fetcher=fetcher, logger=log
        )
    if options.enforced_numeric_bounds is not None:
        materialized = enforce_numeric_bounds(materialized, options.enforced_numeric_bounds)
    return materialized


def materialize_schema_to_path(
    schema_directory: Path | str,
    schema: Mapping[str, Any],
    options: ToolOptions,
    *,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Write schema as <version>.<content type> files into schema_directory.

    Each content type also gets its latest.<content type> symlink updated, and
    the primary content type gets the extensionless <version> and latest
    symlinks. Returns every path written or symlinked, in write order; with
    dry_run nothing touches the disk but the same paths are returned.
    """
    log = logger or _LOGGER
    directory = Path(schema_directory)
    version = extract_version(schema, options.schema_version_field)
    materialized = materialize_schema(schema, options, fetcher=fetcher, logger=log)

    if not options.dry_run:
        directory.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for content_type in options.content_types:
        target = directory / f"{version}.{content_type}"
        if options.dry_run:
            log.info("dry-run: would have materialized schema at %s", target)
        else:
            write_object(materialized, target, content_type)
            log.info("Materialized schema at %s", target)
        written.append(target)

        if options.should_symlink_latest:
            latest_path = directory / f"latest.{content_type}"
            if _update_latest(latest_path, target.name, version, options, log):
                written.append(latest_path)

        if content_type == options.primary_content_type and options.should_symlink_extensionless:
            version_path = directory / str(version)
            _symlink(target.name, version_path, options, log)
            written.append(version_path)
            if options.should_symlink_latest:
                latest_path = directory / "latest"
                if _update_latest(latest_path, f"latest.{content_type}", version, options, log):
                    written.append(latest_path)
    return written


def materialize_schema_file(
    schema_path: Path | str,
    options: ToolOptions,
    *,
    output_dir: Path | str | None = None,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Read one schema file and materialize it next to itself or into output_dir."""
    path = Path(schema_path)
    try:
        schema = read_object(path)
        return materialize_schema_to_path(
            Path(output_dir) if output_dir is not None else path.parent,
            schema,
            options,
            fetcher=fetcher,
            logger=logger,
        )
    except _MATERIALIZATION_FAILURES as exc:
        raise MaterializationError(path, exc) from exc


def materialize_all_schemas(
    options: ToolOptions,
    *,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Materialize every current schema source under schema_base_path.

    Sources whose title contains the dependency marker are materialized first,
    so that schemas referencing them find their versioned files.
    """
    log = logger or _LOGGER
    current_infos = [info for info in find_all_schemas_info(options) if info.current]
    marker = options.dependency_title_marker
    dependency_tier = [info for info in current_infos if marker in (info.title or "")]
    dependent_tier = [info for info in current_infos if marker not in (info.title or "")]

    materialized: list[Path] = []
    for tier in (dependency_tier, dependent_tier):
        materialized.extend(_materialize_tier(tier, options, fetcher, log))
    return materialized


def materialize_modified_schemas(
    options: ToolOptions,
    *,
    git: GitRepository | None = None,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Materialize current schema files that git reports as modified, then git add them."""
    log = logger or _LOGGER
    repository = git or GitRepository(options.schema_base_path)
    modified = repository.modified_paths(
        staged=options.git_staged, current_name=options.current_name
    )
    if not modified:
        log.info("No modified %s schema files found.", options.current_name)
        return []

    marker = options.dependency_title_marker
    ordered = sorted(modified, key=lambda path: (marker not in str(path), len(path.parts)))
    log.info("Materializing modified schema files: %s", ", ".join(str(path) for path in ordered))

    materialized: list[Path] = []
    for path in ordered:
        materialized.extend(materialize_schema_file(path, options, fetcher=fetcher, logger=log))

    if options.dry_run:
        log.info("dry-run: would have added %d materialized files to git.", len(materialized))
    elif options.should_git_add:
        log.info("New schema files have been materialized. Adding them to git.")
        repository.add(materialized)
    return materialized


def _materialize_tier(
    tier: Sequence[SchemaInfo],
    options: ToolOptions,
    fetcher: Fetcher | None,
    log: logging.Logger,
) -> list[Path]:
    if not tier:
        return []
    with ThreadPoolExecutor(max_workers=max(1, options.parallelism)) as executor:
        futures = [
            executor.submit(_materialize_info, info, options, fetcher, log) for info in tier
        ]
        wait(futures)

    materialized: list[Path] = []
    for future in futures:
        materialized.extend(future.result())
    return materialized


def _materialize_info(
    info: SchemaInfo,
    options: ToolOptions,
    fetcher: Fetcher | None,
    log: logging.Logger,
) -> list[Path]:
    try:
        return materialize_schema_to_path(
            info.path.parent, info.schema, options, fetcher=fetcher, logger=log
        )
    except _MATERIALIZATION_FAILURES as exc:
        raise MaterializationError(info.path, exc) from exc


def _update_latest(
    latest_path: Path,
    target_name: str,
    version: SemVer,
    options: ToolOptions,
    log: logging.Logger,
) -> bool:
    """Point latest_path at target_name unless it already resolves to a greater version."""
    latest_version = read_pointed_version(latest_path, options.schema_version_field)
    if latest_version is not None and version < latest_version:
        log.debug(
            "Not updating %s: version %s is older than latest version %s",
            latest_path,
            version,
            latest_version,
        )
        return False
    _symlink(target_name, latest_path, options, log)
    return True


def _symlink(
    target_name: str, symlink_path: Path, options: ToolOptions, log: logging.Logger
) -> None:
    if options.dry_run:
        log.info("dry-run: would have created symlink %s -> %s", symlink_path, target_name)
        return
    replace_symlink(target_name, symlink_path)
    log.info("Created symlink %s -> %s", symlink_path, target_name)
