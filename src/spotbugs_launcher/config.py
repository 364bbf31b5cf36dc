"""Loading of the spotbugs.toml project file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from spotbugs_launcher.dispatch import FeatureFlags
from spotbugs_launcher.exceptions import ConfigurationError
from spotbugs_launcher.models.extension import SpotBugsExtension
from spotbugs_launcher.models.report import ReportOptions
from spotbugs_launcher.models.task import TaskSettings
from spotbugs_launcher.task import SpotBugsTask

DEFAULT_CONFIG_NAME = "spotbugs.toml"

EXTENSION_PATH_FIELDS = (
    "build_dir",
    "reports_dir",
    "include_filter",
    "exclude_filter",
    "baseline_file",
    "java_home",
    "spotbugs_home",
)
EXTENSION_PATH_LIST_FIELDS = ("plugin_jars",)

TASK_PATH_FIELDS = ("reports_dir", "include_filter", "exclude_filter", "baseline_file", "launcher")
TASK_PATH_LIST_FIELDS = ("source_dirs", "class_dirs", "aux_class_paths", "classes")

REPORT_PATH_FIELDS = ("destination",)


@dataclass
class Project:
    """A loaded project file: conventions plus the tasks built from it."""

    root: Path
    extension: SpotBugsExtension
    tasks: dict[str, SpotBugsTask] = field(default_factory=dict)

    def select(self, names: list[str] | None = None) -> list[SpotBugsTask]:
        """Tasks with the given names, all tasks when names is empty."""
        if not names:
            return list(self.tasks.values())
        unknown = [name for name in names if name not in self.tasks]
        if unknown:
            raise ConfigurationError(f"Unknown task(s): {', '.join(unknown)}")
        return [self.tasks[name] for name in names]


def _absolute(root: Path, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _resolve_paths(
    table: dict[str, Any], root: Path, single: tuple[str, ...], many: tuple[str, ...]
) -> dict[str, Any]:
    resolved = dict(table)
    for key in single:
        if key in resolved:
            resolved[key] = _absolute(root, resolved[key])
    for key in many:
        if isinstance(resolved.get(key), list):
            resolved[key] = [_absolute(root, item) for item in resolved[key]]
    return resolved


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def _table(data: dict[str, Any], key: str, where: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{key}' in {where} must be a table")
    return value


def _configure_reports(task: SpotBugsTask, reports: dict[str, Any], root: Path) -> None:
    for name, table in reports.items():
        report = task.reports.report(name)
        if not isinstance(table, dict):
            raise ConfigurationError(f"Report '{name}' of task {task.name} must be a table")
        try:
            options = ReportOptions.model_validate(
                _resolve_paths(table, root, REPORT_PATH_FIELDS, ())
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid options for report '{name}' of task {task.name}:\n{e}"
            ) from e

        report.enabled = options.enabled
        if options.destination is not None:
            report.output_location = options.destination
        if options.stylesheet is not None:
            if not hasattr(report, "stylesheet"):
                raise ConfigurationError(f"Report '{name}' has no stylesheet option")
            report.stylesheet = options.stylesheet


def load_project(path: Path | None = None, flags: FeatureFlags | None = None) -> Project:
    """
    Load a project file and build its tasks.

    Args:
        path: Project file (default: ./spotbugs.toml)
        flags: Dispatch flags given to every task (default: from environment)

    Returns:
        Project with initialized tasks

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    path = (path or Path.cwd() / DEFAULT_CONFIG_NAME).absolute()
    root = path.parent
    flags = flags or FeatureFlags.from_env()
    data = _load_toml(path)

    extension_table = _resolve_paths(
        _table(data, "spotbugs", str(path)), root, EXTENSION_PATH_FIELDS, EXTENSION_PATH_LIST_FIELDS
    )
    extension_table.setdefault("project_name", root.name)
    extension_table.setdefault("build_dir", root / "build")
    try:
        extension = SpotBugsExtension.model_validate(extension_table)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid [spotbugs] settings in {path}:\n{e}") from e

    project = Project(root=root, extension=extension)
    for name, table in _table(data, "tasks", str(path)).items():
        if not name.strip():
            raise ConfigurationError(f"Task names in {path} must not be empty")
        if not isinstance(table, dict):
            raise ConfigurationError(f"Task {name} in {path} must be a table")
        table = dict(table)
        reports = table.pop("reports", {})
        if not isinstance(reports, dict):
            raise ConfigurationError(f"'reports' of task {name} in {path} must be a table")
        settings_table = _resolve_paths(table, root, TASK_PATH_FIELDS, TASK_PATH_LIST_FIELDS)
        try:
            settings = TaskSettings.model_validate(settings_table)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings for task {name} in {path}:\n{e}") from e

        task = SpotBugsTask(name, settings).init(
            extension, flags.enable_worker_api, flags.enable_hybrid_worker
        )
        _configure_reports(task, reports, root)
        project.tasks[name] = task

    return project
