"""Repository scanning domain exports."""

from .repository_scanner import (
    find_all_schemas_info,
    find_schema_paths,
    find_schemas_by_title,
    find_schemas_by_title_and_major,
    group_schemas_by_title,
    group_schemas_by_title_and_major,
    is_schema_file_name,
    schema_info_sort_key,
    schema_path_to_info,
)
from .schema_info_models import SchemaInfo, SchemaInfosByTitle, SchemaInfosByTitleAndMajor

__all__ = [
    "SchemaInfo",
    "SchemaInfosByTitle",
    "SchemaInfosByTitleAndMajor",
    "find_all_schemas_info",
    "find_schema_paths",
    "find_schemas_by_title",
    "find_schemas_by_title_and_major",
    "group_schemas_by_title",
    "group_schemas_by_title_and_major",
    "is_schema_file_name",
    "schema_info_sort_key",
    "schema_path_to_info",
]
