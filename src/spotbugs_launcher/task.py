"""The SpotBugs analysis task."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import cached_property
from pathlib import Path

from spotbugs_launcher.dispatch import create_runner, select_runner_kind
from spotbugs_launcher.exceptions import ConfigurationError
from spotbugs_launcher.models.extension import SpotBugsExtension
from spotbugs_launcher.models.result import AnalysisResult
from spotbugs_launcher.models.task import TaskConfig, TaskSettings, resolve_settings
from spotbugs_launcher.reports import ReportContainer, SpotBugsReport
from spotbugs_launcher.toolchain import JavaLauncher, default_launcher

logger = logging.getLogger(__name__)

TASK_PREFIX = "spotbugs"


class SpotBugsTask:
    """
    One SpotBugs analysis unit, e.g. the main classes of a project.

    Typical lifecycle:
    1. Create the task with explicitly set values
    2. init() with the project extension and the two dispatch flags
    3. Let the build script adjust settings and reports
    4. await run()

    Settings are resolved against the extension on first read of ``config``
    and are not resolved again afterwards.
    """

    description = "Run SpotBugs analysis."

    def __init__(self, name: str, settings: TaskSettings | None = None):
        self.name = name
        self.settings = settings or TaskSettings()
        self.reports = ReportContainer(self)

        self.extension: SpotBugsExtension | None = None
        self.enable_worker_api = False
        self.enable_hybrid_worker = False

    def init(
        self,
        extension: SpotBugsExtension,
        enable_worker_api: bool = False,
        enable_hybrid_worker: bool = False,
    ) -> SpotBugsTask:
        """
        Take conventions from the extension right after task creation.

        Args:
            extension: Project-wide defaults
            enable_worker_api: Run through a worker instead of a plain process
            enable_hybrid_worker: Use the in-process worker (needs worker API)
        """
        self.extension = extension
        self.enable_worker_api = enable_worker_api
        self.enable_hybrid_worker = enable_hybrid_worker
        return self

    @cached_property
    def config(self) -> TaskConfig:
        if self.extension is None:
            raise ConfigurationError(f"Task {self.name} was not initialized with an extension")
        return resolve_settings(self.settings, self.extension, self.name)

    def configure_reports(
        self, action: Callable[[ReportContainer], object]
    ) -> ReportContainer:
        """Apply a build-script style block to the report container."""
        action(self.reports)
        return self.reports

    def enabled_reports(self) -> frozenset[SpotBugsReport]:
        return self.reports.enabled_reports()

    def first_enabled_report(self) -> SpotBugsReport | None:
        return self.reports.first_enabled_report()

    @property
    def base_name(self) -> str:
        """Task name without the 'spotbugs' prefix, e.g. spotbugsMain -> main."""
        pruned = self.name.replace(TASK_PREFIX, "", 1) or self.name
        return pruned[0].lower() + pruned[1:]

    @property
    def classes(self) -> list[Path]:
        """Explicit class files, or every .class file found under class_dirs."""
        if self.settings.classes is not None:
            return list(self.settings.classes)

        found: list[Path] = []
        for class_dir in self.settings.class_dirs:
            if class_dir.is_file() and class_dir.suffix == ".class":
                found.append(class_dir)
            elif class_dir.is_dir():
                found.extend(sorted(class_dir.rglob("*.class")))
        return found

    @property
    def source_dirs(self) -> list[Path]:
        return list(self.settings.source_dirs)

    @property
    def aux_class_paths(self) -> list[Path]:
        return list(self.settings.aux_class_paths)

    @property
    def spotbugs_classpath(self) -> list[Path]:
        """Analyzer jars from the SpotBugs distribution, empty when unknown."""
        home = self.extension.spotbugs_home if self.extension else None
        if home is None:
            return []
        lib_dir = home / "lib"
        if not lib_dir.is_dir():
            return []
        return sorted(lib_dir.glob("*.jar"))

    @property
    def plugin_jars(self) -> list[Path]:
        return list(self.extension.plugin_jars) if self.extension else []

    @property
    def work_dir(self) -> Path:
        """Directory for argument files passed to the analyzer."""
        build_dir = self.extension.build_dir if self.extension else Path("build")
        return build_dir / TASK_PREFIX / self.name

    @property
    def launcher(self) -> JavaLauncher:
        if self.config.launcher is not None:
            return JavaLauncher(executable_path=self.config.launcher)
        return default_launcher()

    async def run(self) -> AnalysisResult:
        """
        Run the analysis with the strategy picked by the dispatch flags.

        Returns:
            AnalysisResult of the run

        Raises:
            LaunchError: If the analyzer could not be started
            VerificationFailedError: If the analyzer failed and failures are not ignored
        """
        if not self.classes:
            logger.info("Skipping %s: no classes to analyze", self.name)
            return AnalysisResult(task_name=self.name, skipped=True)

        kind = select_runner_kind(self.enable_worker_api, self.enable_hybrid_worker)
        runner = create_runner(kind, self.extension)
        return await runner.run(self)
