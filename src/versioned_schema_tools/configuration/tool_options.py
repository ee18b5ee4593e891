"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

MAX_SAFE_INTEGER = 9007199254740991
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER

DEFAULT_CONFIG_PATHS: tuple[str, ...] = (".jsonschema-tools.yaml",)


@dataclass(frozen=True)
class ToolOptions:  # pylint: disable=too-many-instance-attributes
    """Options threaded through materialization, scanning and checking."""

    schema_base_path: Path = field(default_factory=Path.cwd)
    schema_base_uris: tuple[str, ...] = ()
    content_types: tuple[str, ...] = ("yaml", "json")
    current_name: str = "current.yaml"
    schema_version_field: str = "$id"
    schema_title_field: str = "title"
    should_dereference: bool = True
    should_symlink_extensionless: bool = True
    should_symlink_latest: bool = True
    enforced_numeric_bounds: tuple[float, float] | None = (MIN_SAFE_INTEGER, MAX_SAFE_INTEGER)
    ignore_schemas: tuple[str, ...] = ()
    skip_schema_test_cases: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    require_examples: bool = False
    dependency_title_marker: str = "common"
    dry_run: bool = False
    git_staged: bool = False
    should_git_add: bool = True
    parallelism: int = 4
    log_level: str = "warning"
    config_paths: tuple[Path, ...] = ()

    @property
    def primary_content_type(self) -> str:
        """Content type of the extensionless and latest symlink targets."""
        return self.content_types[0]

    @property
    def base_uris(self) -> tuple[str, ...]:
        """URIs prefixed onto $refs, defaulting to the schema base path."""
        return self.schema_base_uris or (str(self.schema_base_path),)

    def with_overrides(self, **changes: object) -> ToolOptions:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
