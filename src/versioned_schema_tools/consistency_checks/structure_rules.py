"""Structural rules for the files and symlinks of each schema title."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.dereferencing import Fetcher
from versioned_schema_tools.materialization import materialize_schema
from versioned_schema_tools.repository_scanning import SchemaInfo, SchemaInfosByTitle
from versioned_schema_tools.versioning import SemVer

from .check_outcomes import RuleResult, RuleViolation
from .rule_recording import RuleRecorder, assert_rule

STRUCTURE_SUITE = "structure"


def check_structure(
    schemas_by_title: SchemaInfosByTitle,
    options: ToolOptions,
    *,
    fetcher: Fetcher | None = None,
) -> list[RuleResult]:
    """Evaluate structural rules for every title group."""
    recorder = RuleRecorder(STRUCTURE_SUITE, options.skip_schema_test_cases)
    for title, infos in schemas_by_title.items():
        if infos:
            _TitleStructure(recorder, title, infos, options, fetcher).check()
    return recorder.results


class _TitleStructure:
    """Structural rules for the schema files sharing one title."""

    def __init__(
        self,
        recorder: RuleRecorder,
        title: str | None,
        infos: Sequence[SchemaInfo],
        options: ToolOptions,
        fetcher: Fetcher | None,
    ):
        self._recorder = recorder
        self._title = title
        self._infos = list(infos)
        self._options = options
        self._fetcher = fetcher
        self._base_path = Path(options.schema_base_path)
        self._current = next((info for info in self._infos if info.current), None)
        self._schema_id = (self._current or self._infos[0]).schema_id
        self._schema_dir = self._infos[0].path.parent

    def check(self) -> None:
        self._evaluate("same-directory", self._assert_same_directory)

        mismatched = [info for info in self._infos if self._relative_directory(info) != self._title]
        if mismatched:
            # Every further rule assumes the directory layout, so only report this one.
            self._evaluate(
                "title-matches-directory",
                lambda: assert_rule(
                    False,
                    "Schema title must match relative schema directory",
                    expected=self._title,
                    actual=sorted({self._relative_directory(info) for info in mismatched}),
                ),
            )
            return

        current_name = self._options.current_name
        self._evaluate(
            "has-current-file",
            lambda: assert_rule(
                (self._schema_dir / current_name).exists(),
                f"{self._schema_dir} must contain {current_name}",
            ),
        )
        self._evaluate(
            "no-extensionless-current-symlink",
            lambda: assert_rule(
                not os.path.lexists(self._schema_dir / "current"),
                f"{self._schema_dir} must not contain an extensionless current symlink",
            ),
        )

        current = self._current
        if current is None:
            self._evaluate(
                "has-current-source",
                lambda: assert_rule(False, f"Could not find {current_name} schema file"),
            )
            return

        primary = self._options.primary_content_type
        materialized_primary = sorted(
            (info for info in self._infos if not info.current and info.content_type == primary),
            key=lambda info: info.version,
        )
        if not materialized_primary:
            self._evaluate(
                "has-latest-version",
                lambda: assert_rule(
                    False, "Could not find latest materialized schema version file"
                ),
            )
            return
        latest = materialized_primary[-1]

        self._evaluate(
            "latest-version-is-current", lambda: self._assert_latest_is_current(current, latest)
        )
        self._evaluate(
            "current-equals-latest", lambda: self._assert_current_equals_latest(current, latest)
        )
        if self._options.should_symlink_latest:
            latest_target = self._schema_dir / f"{latest.version}.{primary}"
            self._evaluate(
                "latest-symlink",
                lambda: _assert_symlink_resolves_to(
                    self._schema_dir / f"latest.{primary}", latest_target
                ),
            )
            if self._options.should_symlink_extensionless:
                self._evaluate(
                    "extensionless-latest-symlink",
                    lambda: _assert_symlink_resolves_to(self._schema_dir / "latest", latest_target),
                )

        for version, version_infos in self._group_by_version().items():
            self._check_version(version, version_infos)

    def _check_version(self, version: SemVer, version_infos: list[SchemaInfo]) -> None:
        schema_id = version_infos[0].schema_id
        primary = self._options.primary_content_type
        for content_type in self._options.content_types:
            subject = f"{self._title} {version}.{content_type}"
            candidates = [info for info in version_infos if info.content_type == content_type]
            info = next((candidate for candidate in candidates if not candidate.current), None)
            info = info or next(iter(candidates), None)

            exists = self._evaluate(
                "content-type-exists",
                lambda info=info: self._assert_content_type_exists(info, content_type),
                subject=subject,
                schema_id=schema_id,
            )
            if self._options.should_symlink_extensionless and content_type == primary:
                self._evaluate(
                    "extensionless-version-symlink",
                    lambda: _assert_symlink_targets(
                        self._schema_dir / str(version), f"{version}.{content_type}"
                    ),
                    subject=subject,
                    schema_id=schema_id,
                )
            if info is None or exists.failed:
                continue
            self._evaluate(
                "title-correct",
                lambda info=info: assert_rule(
                    info.title == self._title,
                    f"{info.path} must have {self._options.schema_title_field} {self._title}",
                    expected=self._title,
                    actual=info.title,
                ),
                subject=subject,
                schema_id=schema_id,
            )
            self._evaluate(
                "id-matches-directory",
                lambda info=info: self._assert_id_matches_directory(info),
                subject=subject,
                schema_id=schema_id,
            )

        materialized = [info for info in version_infos if not info.current]
        self._evaluate(
            "content-types-equal",
            lambda: _assert_content_types_equal(self._title, version, materialized),
            subject=f"{self._title} {version}",
            schema_id=schema_id,
        )

    def _evaluate(
        self,
        rule: str,
        check,
        *,
        subject: str | None = None,
        schema_id: str | None = None,
    ) -> RuleResult:
        return self._recorder.evaluate(
            subject or str(self._title),
            rule,
            check,
            schema_id=self._schema_id if schema_id is None else schema_id,
        )

    def _assert_same_directory(self) -> None:
        directories = sorted({str(info.path.parent) for info in self._infos})
        assert_rule(
            len(directories) == 1,
            f"All schema files with title {self._title} must be in the same directory",
            expected=directories[:1],
            actual=directories,
        )

    def _assert_latest_is_current(self, current: SchemaInfo, latest: SchemaInfo) -> None:
        expected_path = self._schema_dir / f"{current.version}.{self._options.primary_content_type}"
        assert_rule(
            latest.path == expected_path and expected_path.exists(),
            f"Greatest materialized version must be the current version {current.version}",
            expected=str(expected_path),
            actual=str(latest.path),
        )

    def _assert_current_equals_latest(self, current: SchemaInfo, latest: SchemaInfo) -> None:
        assert_rule(
            latest.version == current.version,
            "Current and latest schema versions read from "
            f"{self._options.schema_version_field} do not match",
            expected=str(current.version),
            actual=str(latest.version),
        )
        materialized = materialize_schema(current.schema, self._options, fetcher=self._fetcher)
        assert_rule(
            latest.schema == materialized,
            f"Materialized current schema does not equal latest schema version {latest.version}",
            expected=materialized,
            actual=latest.schema,
        )

    def _assert_content_type_exists(self, info: SchemaInfo | None, content_type: str) -> None:
        if info is None:
            raise RuleViolation(f"Does not have a {content_type} schema file")
        assert_rule(
            info.path.parent == self._schema_dir,
            f"{info.path} is not in expected {self._schema_dir}",
        )
        assert_rule(info.path.exists(), f"{info.path} does not exist")

    def _assert_id_matches_directory(self, info: SchemaInfo) -> None:
        relative_path = self._relative_path(info)
        assert_rule(
            info.schema_id.lstrip("/") in relative_path,
            "Schema $id must match relative schema directory",
            expected=relative_path,
            actual=info.schema_id,
        )

    def _group_by_version(self) -> dict[SemVer, list[SchemaInfo]]:
        grouped: dict[SemVer, list[SchemaInfo]] = {}
        for info in sorted(self._infos, key=lambda info: info.version):
            grouped.setdefault(info.version, []).append(info)
        return grouped

    def _relative_path(self, info: SchemaInfo) -> str:
        return Path(os.path.relpath(info.path, self._base_path)).as_posix()

    def _relative_directory(self, info: SchemaInfo) -> str:
        return Path(self._relative_path(info)).parent.as_posix()


def _assert_symlink_resolves_to(symlink_path: Path, target_path: Path) -> None:
    assert_rule(symlink_path.is_symlink(), f"{symlink_path} must be a symlink")
    assert_rule(symlink_path.exists(), f"{symlink_path} does not resolve to a file")
    assert_rule(
        symlink_path.resolve() == target_path.resolve(),
        f"{symlink_path} must point to {target_path.name}",
        expected=str(target_path.resolve()),
        actual=str(symlink_path.resolve()),
    )


def _assert_symlink_targets(symlink_path: Path, target_name: str) -> None:
    assert_rule(symlink_path.is_symlink(), f"{symlink_path} must be a symlink")
    actual = os.readlink(symlink_path)
    assert_rule(
        actual == target_name,
        f"{symlink_path} must point to {target_name}",
        expected=target_name,
        actual=actual,
    )


def _assert_content_types_equal(
    title: str | None, version: SemVer, infos: Sequence[SchemaInfo]
) -> None:
    for previous, following in zip(infos, infos[1:]):
        assert_rule(
            following.schema == previous.schema,
            f"{title} {version}.{following.content_type} does not equal "
            f"{version}.{previous.content_type}",
            expected=previous.schema,
            actual=following.schema,
        )
