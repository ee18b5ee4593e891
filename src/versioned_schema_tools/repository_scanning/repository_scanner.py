"""Discovery, ordering and grouping of schema files in a repository."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.serialization import read_object
from versioned_schema_tools.versioning import extract_version, get_field, parse_semver

from .schema_info_models import SchemaInfo, SchemaInfosByTitle, SchemaInfosByTitleAndMajor

_LOGGER = logging.getLogger(__name__)


def is_schema_file_name(path: Path, options: ToolOptions) -> bool:
    """Return True for current schema files and X.Y.Z.<content type> file names."""
    if path.name == options.current_name:
        return True
    return path.suffix[1:] in options.content_types and parse_semver(path.stem) is not None


def find_schema_paths(options: ToolOptions) -> list[Path]:
    """Return paths under schema_base_path that look like schema files.

    This does not read the files, so ignore_schemas is not applied here.
    """
    base_path = Path(options.schema_base_path)
    _LOGGER.debug("Finding all schema files in %s", base_path)
    return [
        path
        for path in sorted(base_path.rglob("*"))
        if path.is_file() and is_schema_file_name(path, options)
    ]


def schema_path_to_info(schema_path: Path | str, options: ToolOptions) -> SchemaInfo:
    """Read a schema file and describe it."""
    path = Path(schema_path)
    schema = read_object(path)
    title = get_field(schema, options.schema_title_field)
    return SchemaInfo(
        title=title if title is None else str(title),
        path=path,
        version=extract_version(schema, options.schema_version_field),
        current=path.name == options.current_name,
        content_type=path.suffix[1:],
        schema=schema,
    )


def schema_info_sort_key(info: SchemaInfo, dependency_marker: str) -> tuple:
    """Heuristic dependency ordering key for schema infos.

    Titles containing the dependency marker sort first, then shallower paths,
    then lower versions; a current file sorts after materialized files of the
    same version. This is a best-effort guess, not a $ref dependency graph.
    """
    is_dependency = dependency_marker in (info.title or "")
    return (not is_dependency, len(info.path.parts), info.version, info.current)


def find_all_schemas_info(options: ToolOptions) -> list[SchemaInfo]:
    """Return infos of every schema file not matched by ignore_schemas, in dependency order."""
    infos = [schema_path_to_info(path, options) for path in find_schema_paths(options)]
    kept = [info for info in infos if not _is_ignored(info, options.ignore_schemas)]
    marker = options.dependency_title_marker
    return sorted(kept, key=lambda info: schema_info_sort_key(info, marker))


def group_schemas_by_title(schema_infos: Iterable[SchemaInfo]) -> SchemaInfosByTitle:
    grouped: SchemaInfosByTitle = {}
    for info in schema_infos:
        grouped.setdefault(info.title, []).append(info)
    return grouped


def group_schemas_by_title_and_major(
    schema_infos: Iterable[SchemaInfo],
) -> SchemaInfosByTitleAndMajor:
    grouped: SchemaInfosByTitleAndMajor = {}
    for title, infos in group_schemas_by_title(schema_infos).items():
        by_major: dict[int, list[SchemaInfo]] = {}
        for info in infos:
            by_major.setdefault(info.version.major, []).append(info)
        grouped[title] = by_major
    return grouped


def find_schemas_by_title(options: ToolOptions) -> SchemaInfosByTitle:
    return group_schemas_by_title(find_all_schemas_info(options))


def find_schemas_by_title_and_major(options: ToolOptions) -> SchemaInfosByTitleAndMajor:
    return group_schemas_by_title_and_major(find_all_schemas_info(options))


def _is_ignored(info: SchemaInfo, patterns: Iterable[str]) -> bool:
    return any(re.search(pattern, info.schema_id) for pattern in patterns)
