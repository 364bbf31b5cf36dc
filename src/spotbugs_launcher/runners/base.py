"""Shared assembly of the analyzer invocation."""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from spotbugs_launcher.dispatch import RunnerKind
from spotbugs_launcher.environments.base import BaseEnvironment, ExecResult
from spotbugs_launcher.exceptions import LaunchError, VerificationFailedError
from spotbugs_launcher.models.result import AnalysisResult

if TYPE_CHECKING:
    from spotbugs_launcher.task import SpotBugsTask

logger = logging.getLogger(__name__)

MAIN_CLASS = "edu.umd.cs.findbugs.FindBugs2"
ANALYSE_CLASS_FILE = "analyseClassFile.txt"
AUX_CLASSPATH_FILE = "auxclasspath.txt"


def _join_paths(paths: list[Path]) -> str:
    return os.pathsep.join(str(path.absolute()) for path in paths)


def _write_lines(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class SpotBugsRunner(ABC):
    """
    Runs SpotBugs for one task.

    Subclasses only decide where the JVM runs; building the command line and
    interpreting the exit code is common to all strategies.
    """

    kind: RunnerKind
    description: str

    def build_arguments(self, task: SpotBugsTask) -> list[str]:
        """
        Analyzer arguments derived from the task configuration.

        Writes the class list (and the aux classpath when use_auxclasspath_file
        is set) into the task work directory.
        """
        config = task.config
        args = ["-exitcode", "-timestampNow"]

        aux_class_paths = task.aux_class_paths
        if aux_class_paths:
            if config.use_auxclasspath_file:
                aux_file = _write_lines(
                    task.work_dir / AUX_CLASSPATH_FILE,
                    [str(path.absolute()) for path in aux_class_paths],
                )
                args += ["-auxclasspathFromFile", str(aux_file.absolute())]
            else:
                args += ["-auxclasspath", _join_paths(aux_class_paths)]

        if task.source_dirs:
            args += ["-sourcepath", _join_paths(task.source_dirs)]
        if config.show_progress:
            args.append("-progress")
        if task.plugin_jars:
            args += ["-pluginList", _join_paths(task.plugin_jars)]

        for report in task.reports:
            if report.enabled:
                report.destination.parent.mkdir(parents=True, exist_ok=True)
                args.append(report.to_argument())

        if config.visitors:
            args += ["-visitors", ",".join(config.visitors)]
        if config.omit_visitors:
            args += ["-omitVisitors", ",".join(config.omit_visitors)]
        if config.include_filter is not None:
            args += ["-include", str(config.include_filter.absolute())]
        if config.exclude_filter is not None:
            args += ["-exclude", str(config.exclude_filter.absolute())]
        if config.baseline_file is not None:
            args += ["-excludeBugs", str(config.baseline_file.absolute())]
        if config.only_analyze:
            args += ["-onlyAnalyze", ",".join(config.only_analyze)]

        args += ["-projectName", config.project_name]
        if config.release:
            args += ["-release", config.release]

        class_file = _write_lines(
            task.work_dir / ANALYSE_CLASS_FILE,
            [str(path.absolute()) for path in task.classes],
        )
        args += ["-analyzeFromFile", str(class_file.absolute())]

        args.append(config.effort.to_command_line_option())
        confidence = config.report_level.to_command_line_option()
        if confidence:
            args.append(confidence)

        args += config.extra_args
        return args

    def build_classpath(self, task: SpotBugsTask) -> list[Path]:
        """
        Jars needed to start the analyzer.

        Raises:
            LaunchError: If the analyzer or a plugin jar cannot be found
        """
        classpath = task.spotbugs_classpath
        if not classpath:
            home = task.extension.spotbugs_home if task.extension else None
            if home is None:
                raise LaunchError("SpotBugs distribution is not configured (spotbugs_home)")
            raise LaunchError(f"No SpotBugs jars found in {home / 'lib'}")

        for entry in [*classpath, *task.plugin_jars]:
            if not entry.exists():
                raise LaunchError(f"Classpath entry not found: {entry}")
        return classpath

    def build_jvm_options(self, task: SpotBugsTask) -> list[str]:
        config = task.config
        options = []
        if config.max_heap_size:
            options.append(f"-Xmx{config.max_heap_size}")
        options += config.jvm_args
        return options

    def java_executable(self, task: SpotBugsTask) -> str:
        """Java executable of the task launcher, checked on this host."""
        return str(task.launcher.check())

    def build_command(self, task: SpotBugsTask) -> list[str]:
        classpath = self.build_classpath(task)
        return [
            self.java_executable(task),
            *self.build_jvm_options(task),
            "-cp",
            _join_paths(classpath),
            MAIN_CLASS,
            *self.build_arguments(task),
        ]

    @abstractmethod
    def create_environment(self, task: SpotBugsTask) -> BaseEnvironment:
        """Environment owned by a single run."""

    async def run(self, task: SpotBugsTask) -> AnalysisResult:
        """
        Run the analyzer and check its exit status.

        Raises:
            LaunchError: If the analyzer could not be started
            VerificationFailedError: If the analyzer failed and failures are not ignored
        """
        logger.info("Running SpotBugs by %s...", self.description)
        command = self.build_command(task)
        logger.debug("SpotBugs command: %s", " ".join(command))

        async with self.create_environment(task) as environment:
            exec_result = await environment.exec(command)

        if exec_result.output:
            logger.debug("SpotBugs output:\n%s", exec_result.output)

        result = AnalysisResult(
            task_name=task.name,
            runner=self.kind.value,
            exit_code=exec_result.return_code,
            duration_sec=exec_result.duration_sec,
            output=exec_result.output,
            reports=sorted(report.destination for report in task.enabled_reports()),
        )
        return self.check_result(task, result, command, exec_result)

    def check_result(
        self,
        task: SpotBugsTask,
        result: AnalysisResult,
        command: list[str],
        exec_result: ExecResult,
    ) -> AnalysisResult:
        status = result.status
        if status is None or status.ok:
            return result

        message = (
            f"Verification failed: SpotBugs ended with exit code {status.code} "
            f"({status.describe()})."
        )
        if result.reports:
            message += " SpotBugs report can be found in " + ", ".join(
                str(path) for path in result.reports
            )

        if task.config.ignore_failures:
            logger.warning(message)
            result.ignored_failure = True
            return result

        error = VerificationFailedError(message, result)
        if task.config.show_stack_traces:
            raise error from subprocess.CalledProcessError(
                status.code, command, output=exec_result.stdout, stderr=exec_result.stderr
            )
        raise error
