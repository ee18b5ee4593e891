"""Configuration loader service."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from versioned_schema_tools.serialization import SUPPORTED_CONTENT_TYPES

from .tool_options import DEFAULT_CONFIG_PATHS, ToolOptions

_LOGGER = logging.getLogger(__name__)

_CAMEL_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
_OPTION_NAMES = frozenset(ToolOptions.__dataclass_fields__) - {"config_paths"}


class ConfigurationError(Exception):
    """Raised when the configuration is invalid."""


def load_options(
    overrides: Mapping[str, Any] | None = None,
    config_paths: Sequence[Path | str] | None = None,
) -> ToolOptions:
    """Merge defaults, config files and overrides into one ToolOptions.

    Config files are read in order and only if they exist; later files and then
    overrides take precedence key by key. Override values of None are ignored.
    """
    paths = tuple(Path(path) for path in (config_paths or DEFAULT_CONFIG_PATHS))
    merged: dict[str, Any] = {}
    for path in paths:
        if not path.exists():
            continue
        _LOGGER.debug("Reading config file %s", path)
        merged.update(_read_config_file(path))
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[_normalize_key(key, "overrides")] = value
    return _build_options(merged, paths)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError(f"Configuration root must be a mapping in {path}.")

    section = {_normalize_key(key, str(path)): value for key, value in parsed.items()}
    base_path = section.get("schema_base_path")
    if isinstance(base_path, str):
        section["schema_base_path"] = _resolve_path(path.parent, base_path)
    return section


def _normalize_key(key: Any, source: str) -> str:
    if not isinstance(key, str):
        raise ConfigurationError(f"Configuration keys must be strings in {source}.")
    normalized = _CAMEL_CASE_BOUNDARY.sub(r"_\1", key).replace("-", "_").lower()
    if normalized not in _OPTION_NAMES:
        raise ConfigurationError(f"Unknown configuration option '{key}' in {source}.")
    return normalized


def _build_options(values: Mapping[str, Any], config_paths: tuple[Path, ...]) -> ToolOptions:
    defaults = ToolOptions()
    schema_base_path = Path(values.get("schema_base_path", defaults.schema_base_path))
    return ToolOptions(
        schema_base_path=schema_base_path,
        schema_base_uris=_string_tuple(
            values.get("schema_base_uris", defaults.schema_base_uris), "schema_base_uris"
        ),
        content_types=_parse_content_types(values.get("content_types", defaults.content_types)),
        current_name=_require_non_empty_string(
            values.get("current_name", defaults.current_name), "current_name"
        ),
        schema_version_field=_require_non_empty_string(
            values.get("schema_version_field", defaults.schema_version_field),
            "schema_version_field",
        ),
        schema_title_field=_require_non_empty_string(
            values.get("schema_title_field", defaults.schema_title_field), "schema_title_field"
        ),
        should_dereference=_require_bool(values, "should_dereference", defaults),
        should_symlink_extensionless=_require_bool(
            values, "should_symlink_extensionless", defaults
        ),
        should_symlink_latest=_require_bool(values, "should_symlink_latest", defaults),
        enforced_numeric_bounds=_parse_numeric_bounds(
            values.get("enforced_numeric_bounds", defaults.enforced_numeric_bounds)
        ),
        ignore_schemas=_parse_patterns(values.get("ignore_schemas", ()), "ignore_schemas"),
        skip_schema_test_cases=_parse_skip_test_cases(values.get("skip_schema_test_cases", {})),
        require_examples=_require_bool(values, "require_examples", defaults),
        dependency_title_marker=_require_non_empty_string(
            values.get("dependency_title_marker", defaults.dependency_title_marker),
            "dependency_title_marker",
        ),
        dry_run=_require_bool(values, "dry_run", defaults),
        git_staged=_require_bool(values, "git_staged", defaults),
        should_git_add=_require_bool(values, "should_git_add", defaults),
        parallelism=_require_positive_int(
            values.get("parallelism", defaults.parallelism), "parallelism"
        ),
        log_level=_parse_log_level(values.get("log_level", defaults.log_level)),
        config_paths=config_paths,
    )


def _parse_content_types(value: Any) -> tuple[str, ...]:
    content_types = _string_tuple(value, "content_types")
    if not content_types:
        raise ConfigurationError("content_types must contain at least one content type.")
    unsupported = [item for item in content_types if item not in SUPPORTED_CONTENT_TYPES]
    if unsupported:
        raise ConfigurationError(
            f"content_types {unsupported} are not supported. "
            f"Use any of {', '.join(SUPPORTED_CONTENT_TYPES)}."
        )
    return tuple(dict.fromkeys(content_types))


def _parse_numeric_bounds(value: Any) -> tuple[float, float] | None:
    if value is None or value is False:
        return None
    if isinstance(value, str) or not isinstance(value, Sequence) or len(value) != 2:
        raise ConfigurationError("enforced_numeric_bounds must be a [minimum, maximum] pair.")
    minimum, maximum = value
    for bound in (minimum, maximum):
        if isinstance(bound, bool) or not isinstance(bound, (int, float)):
            raise ConfigurationError("enforced_numeric_bounds entries must be numbers.")
    if minimum > maximum:
        raise ConfigurationError("enforced_numeric_bounds minimum must not exceed maximum.")
    return (minimum, maximum)


def _parse_patterns(value: Any, field_name: str) -> tuple[str, ...]:
    patterns = _string_tuple(value, field_name)
    for pattern in patterns:
        _require_regex(pattern, field_name)
    return patterns


def _parse_skip_test_cases(value: Any) -> dict[str, tuple[str, ...]]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError("skip_schema_test_cases must be a mapping of regex to rule names.")
    parsed: dict[str, tuple[str, ...]] = {}
    for pattern, rule_names in value.items():
        if not isinstance(pattern, str):
            raise ConfigurationError("skip_schema_test_cases keys must be strings.")
        _require_regex(pattern, "skip_schema_test_cases")
        parsed[pattern] = _string_tuple(rule_names, f"skip_schema_test_cases.{pattern}")
    return parsed


def _parse_log_level(value: Any) -> str:
    level = _require_non_empty_string(value, "log_level").lower()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"log_level must be one of {', '.join(_LOG_LEVELS)}.")
    return level


def _string_tuple(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, Sequence):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            items.append(item)
        return tuple(items)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_regex(pattern: str, field_name: str) -> None:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"{field_name} has an invalid regex '{pattern}': {exc}") from exc


def _require_bool(values: Mapping[str, Any], field_name: str, defaults: ToolOptions) -> bool:
    value = values.get(field_name, getattr(defaults, field_name))
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
