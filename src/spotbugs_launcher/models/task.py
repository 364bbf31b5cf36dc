"""Per-task settings and their resolution against project conventions."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spotbugs_launcher.models.extension import SpotBugsExtension
from spotbugs_launcher.models.levels import Confidence, Effort
from spotbugs_launcher.toolchain import launcher_for

# Settings that fall back to a project-wide convention when unset
CONVENTION_FIELDS = (
    "ignore_failures",
    "show_stack_traces",
    "show_progress",
    "report_level",
    "effort",
    "visitors",
    "omit_visitors",
    "reports_dir",
    "include_filter",
    "exclude_filter",
    "baseline_file",
    "only_analyze",
    "project_name",
    "release",
    "extra_args",
    "jvm_args",
    "max_heap_size",
    "use_auxclasspath_file",
    "launcher",
)

# Settings where an explicit None clears the convention
NULLABLE_FIELDS = frozenset(
    {"include_filter", "exclude_filter", "baseline_file", "release", "max_heap_size", "launcher"}
)


class TaskSettings(BaseModel):
    """
    Values set explicitly for one task.

    A field counts as set once it is passed to the constructor or assigned.
    An explicit empty list or False overrides the convention; an explicit None
    does so only for the optional file and string settings. Unset fields
    resolve to the project convention.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    ignore_failures: bool | None = None
    show_stack_traces: bool | None = None
    show_progress: bool | None = None
    report_level: Confidence | None = None
    effort: Effort | None = None
    visitors: list[str] | None = None
    omit_visitors: list[str] | None = None
    reports_dir: Path | None = None
    include_filter: Path | None = None
    exclude_filter: Path | None = None
    baseline_file: Path | None = None
    only_analyze: list[str] | None = None
    project_name: str | None = None
    release: str | None = None
    extra_args: list[str] | None = None
    jvm_args: list[str] | None = None
    max_heap_size: str | None = None
    use_auxclasspath_file: bool | None = None
    launcher: Path | None = Field(default=None, description="java executable for this task")

    # Inputs of the analysis unit, no project convention
    source_dirs: list[Path] = Field(default_factory=list)
    class_dirs: list[Path] = Field(default_factory=list)
    aux_class_paths: list[Path] = Field(default_factory=list)
    classes: list[Path] | None = Field(
        default=None, description="Class files to analyze (default: all under class_dirs)"
    )

    @field_validator("report_level", "effort", mode="before")
    @classmethod
    def _lower_level(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    def explicit_values(self) -> dict[str, Any]:
        """Overridable values that were set explicitly."""
        return {
            name: getattr(self, name)
            for name in CONVENTION_FIELDS
            if name in self.model_fields_set
            and (getattr(self, name) is not None or name in NULLABLE_FIELDS)
        }


class TaskConfig(BaseModel):
    """Resolved settings of one task, read-only during execution."""

    model_config = ConfigDict(frozen=True)

    ignore_failures: bool
    show_stack_traces: bool
    show_progress: bool
    report_level: Confidence
    effort: Effort
    visitors: list[str]
    omit_visitors: list[str]
    reports_dir: Path
    include_filter: Path | None
    exclude_filter: Path | None
    baseline_file: Path | None
    only_analyze: list[str]
    project_name: str
    release: str | None
    extra_args: list[str]
    jvm_args: list[str]
    max_heap_size: str | None
    use_auxclasspath_file: bool
    launcher: Path | None


def conventions(extension: SpotBugsExtension, task_name: str) -> dict[str, Any]:
    """Default value of every overridable setting for the named task."""
    launcher = None
    if extension.use_java_toolchains and extension.java_home is not None:
        launcher = launcher_for(extension.java_home).executable_path

    return {
        "ignore_failures": extension.ignore_failures,
        "show_stack_traces": extension.show_stack_traces,
        "show_progress": extension.show_progress,
        "report_level": extension.report_level,
        "effort": extension.effort,
        "visitors": list(extension.visitors),
        "omit_visitors": list(extension.omit_visitors),
        "reports_dir": extension.resolved_reports_dir,
        "include_filter": extension.include_filter,
        "exclude_filter": extension.exclude_filter,
        "baseline_file": extension.baseline_file,
        "only_analyze": list(extension.only_analyze),
        "project_name": f"{extension.project_name} ({task_name})",
        "release": extension.release,
        "extra_args": list(extension.extra_args),
        "jvm_args": list(extension.jvm_args),
        "max_heap_size": extension.max_heap_size,
        "use_auxclasspath_file": extension.use_auxclasspath_file,
        "launcher": launcher,
    }


def resolve_settings(
    settings: TaskSettings, extension: SpotBugsExtension, task_name: str
) -> TaskConfig:
    """Overlay explicitly set values on the project conventions."""
    values = conventions(extension, task_name)
    values.update(settings.explicit_values())
    return TaskConfig.model_validate(values)
