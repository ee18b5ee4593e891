"""Repository scanning entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from versioned_schema_tools.versioning import SemVer


@dataclass(frozen=True, eq=False)
class SchemaInfo:
    """Metadata about one schema file found in the repository."""

    title: str | None
    path: Path
    version: SemVer
    current: bool
    content_type: str
    schema: Any

    @property
    def schema_id(self) -> str:
        """The schema's $id, or an empty string when it has none."""
        value = self.schema.get("$id", "") if isinstance(self.schema, dict) else ""
        return value if isinstance(value, str) else str(value)


SchemaInfosByTitle = dict[str | None, list[SchemaInfo]]
SchemaInfosByTitleAndMajor = dict[str | None, dict[int, list[SchemaInfo]]]
