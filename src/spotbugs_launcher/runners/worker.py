"""Run SpotBugs inside a process-isolated worker container."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

from spotbugs_launcher.dispatch import RunnerKind
from spotbugs_launcher.environments.docker import DockerEnvironment
from spotbugs_launcher.exceptions import LaunchError
from spotbugs_launcher.models.extension import WorkerConfig
from spotbugs_launcher.runners.base import SpotBugsRunner

if TYPE_CHECKING:
    from spotbugs_launcher.task import SpotBugsTask

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


class WorkerRunner(SpotBugsRunner):
    """
    Runs the analyzer JVM in a throwaway Docker container.

    Every path the analyzer reads is bind-mounted read-only at the same
    location, so the assembled command line is valid inside the container.
    Report and work directories are mounted read-write.
    """

    kind = RunnerKind.WORKER
    description = "process-isolated worker"

    def __init__(self, worker: WorkerConfig | None = None):
        self.worker = worker or WorkerConfig()

    def java_executable(self, task: SpotBugsTask) -> str:
        # Without a toolchain the image's own java is used
        launcher = task.config.launcher
        if launcher is None:
            return "java"
        if not launcher.is_file():
            raise LaunchError(f"Java launcher not found: {launcher}")
        return str(launcher.absolute())

    def mounts(self, task: SpotBugsTask) -> dict[Path, str]:
        config = task.config
        read_only: list[Path] = [
            *task.spotbugs_classpath,
            *task.plugin_jars,
            *task.source_dirs,
            *task.aux_class_paths,
        ]
        if task.settings.classes is not None:
            read_only += task.classes
        else:
            read_only += task.settings.class_dirs
        read_only += [
            path
            for path in (config.include_filter, config.exclude_filter, config.baseline_file)
            if path is not None
        ]
        if config.launcher is not None:
            # <java_home>/bin/java
            read_only.append(config.launcher.absolute().parent.parent)

        writable = [task.work_dir, *(report.destination.parent for report in task.enabled_reports())]

        mounts: dict[Path, str] = {}
        for path in read_only:
            if path.exists():
                mounts[path.absolute()] = "ro"
        for path in writable:
            path.mkdir(parents=True, exist_ok=True)
            mounts[path.absolute()] = "rw"
        return mounts

    def create_environment(self, task: SpotBugsTask) -> DockerEnvironment:
        safe_name = _UNSAFE_NAME_CHARS.sub("-", task.name)
        return DockerEnvironment(
            container_name=f"spotbugs-{safe_name}-{uuid4().hex[:8]}",
            image_name=self.worker.image,
            cpus=self.worker.cpus,
            memory_mb=self.worker.memory_mb,
            mounts=self.mounts(task),
            working_dir=task.work_dir.absolute(),
        )
