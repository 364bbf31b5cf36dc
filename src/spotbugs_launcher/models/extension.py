"""Project-wide SpotBugs settings used as defaults by every task."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spotbugs_launcher.models.levels import DEFAULT_CONFIDENCE, DEFAULT_EFFORT, Confidence, Effort

DEFAULT_REPORTS_DIR_NAME = "spotbugs"
DEFAULT_WORKER_IMAGE = "eclipse-temurin:17-jdk-jammy"


class WorkerConfig(BaseModel):
    """Docker container used by the isolated worker."""

    model_config = ConfigDict(extra="forbid")

    image: str = Field(default=DEFAULT_WORKER_IMAGE, description="Image providing a JVM")
    cpus: int = Field(default=2, description="CPU cores")
    memory_mb: int = Field(default=4096, description="Memory limit in MB")


class SpotBugsExtension(BaseModel):
    """Conventions shared by all SpotBugs tasks of a project."""

    model_config = ConfigDict(extra="forbid")

    project_name: str = Field(..., description="Project name shown in reports")
    release: str | None = Field(default=None, description="Release identifier of the project")

    ignore_failures: bool = Field(default=False, description="Do not fail when bugs are found")
    show_stack_traces: bool = Field(default=False, description="Attach analyzer output to failures")
    show_progress: bool = Field(default=False, description="Report progress during the analysis")

    report_level: Confidence = Field(default=DEFAULT_CONFIDENCE, description="Confidence level")
    effort: Effort = Field(default=DEFAULT_EFFORT, description="Analysis effort")

    # Empty lists mean "no restriction" or "no extra argument"
    visitors: list[str] = Field(default_factory=list, description="Detectors to run")
    omit_visitors: list[str] = Field(default_factory=list, description="Detectors to skip")
    only_analyze: list[str] = Field(default_factory=list, description="Classes to analyze")
    extra_args: list[str] = Field(default_factory=list, description="Extra analyzer arguments")
    jvm_args: list[str] = Field(default_factory=list, description="Extra JVM arguments")

    build_dir: Path = Field(default=Path("build"), description="Build output directory")
    reports_dir: Path | None = Field(
        default=None, description="Report directory (default: <build_dir>/reports/spotbugs)"
    )
    include_filter: Path | None = Field(default=None, description="Include filter file")
    exclude_filter: Path | None = Field(default=None, description="Exclude filter file")
    baseline_file: Path | None = Field(default=None, description="Baseline result file")

    max_heap_size: str | None = Field(default=None, description="JVM max heap size (-Xmx)")
    use_auxclasspath_file: bool = Field(
        default=False, description="Pass the aux classpath through a file"
    )
    use_java_toolchains: bool = Field(default=False, description="Run with the toolchain JVM")
    java_home: Path | None = Field(default=None, description="Toolchain installation")

    spotbugs_home: Path | None = Field(default=None, description="SpotBugs distribution")
    plugin_jars: list[Path] = Field(default_factory=list, description="SpotBugs plugin jars")

    worker: WorkerConfig = Field(default_factory=WorkerConfig, description="Isolated worker")

    @field_validator("report_level", "effort", mode="before")
    @classmethod
    def _lower_level(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def resolved_reports_dir(self) -> Path:
        if self.reports_dir is not None:
            return self.reports_dir
        return self.build_dir / "reports" / DEFAULT_REPORTS_DIR_NAME
