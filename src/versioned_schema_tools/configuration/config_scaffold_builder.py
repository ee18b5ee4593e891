"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

from .tool_options import DEFAULT_CONFIG_PATHS

DEFAULT_CONFIG_FILENAME = DEFAULT_CONFIG_PATHS[0]

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration for versioned-schema-tools.
# Every option is optional; the values below are the defaults.
# camelCase spellings of the same option names are accepted as well.

# Directory searched for current and materialized schema files.
schema_base_path: .
# URIs prefixed onto $ref values when dereferencing. Defaults to [schema_base_path].
# schema_base_uris:
#   - /path/to/local/schema/repo
#   - https://schema.example.org/repo

# Materialized content types. The first one is the target of symlinks.
content_types:
  - yaml
  - json
current_name: current.yaml
schema_version_field: $id
schema_title_field: title

should_dereference: true
should_symlink_extensionless: true
should_symlink_latest: true

# Inclusive [minimum, maximum] injected into number and integer fields.
# Set to false to disable.
enforced_numeric_bounds: [-9007199254740991, 9007199254740991]

# Schemas whose $id matches any of these regexes are ignored.
ignore_schemas: []
# $id regex -> list of rule names to skip for matching schemas.
skip_schema_test_cases: {}
require_examples: false

# Schemas whose title contains this marker are materialized first.
dependency_title_marker: common
parallelism: 4

git_staged: false
should_git_add: true
log_level: warning
"""


def build_placeholder_configuration() -> str:
    """Build a commented YAML configuration listing every option with its default."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
