from __future__ import annotations

from pathlib import Path

import pytest

from spotbugs_launcher.environments.base import ExecResult
from spotbugs_launcher.environments.local import LocalEnvironment
from spotbugs_launcher.models.extension import SpotBugsExtension
from spotbugs_launcher.models.task import TaskSettings
from spotbugs_launcher.task import SpotBugsTask


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with a SpotBugs distribution, two classes and a source dir."""
    lib = tmp_path / "spotbugs" / "lib"
    lib.mkdir(parents=True)
    (lib / "spotbugs.jar").write_bytes(b"")
    (lib / "asm.jar").write_bytes(b"")

    classes = tmp_path / "build" / "classes" / "java" / "main" / "com" / "example"
    classes.mkdir(parents=True)
    (classes / "App.class").write_bytes(b"")
    (classes / "Util.class").write_bytes(b"")
    (classes / "README.txt").write_text("not a class", encoding="utf-8")

    (tmp_path / "src" / "main" / "java").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def extension(project_dir: Path) -> SpotBugsExtension:
    return SpotBugsExtension(
        project_name="demo",
        release="1.0.0",
        build_dir=project_dir / "build",
        spotbugs_home=project_dir / "spotbugs",
    )


@pytest.fixture
def make_task(project_dir: Path, extension: SpotBugsExtension):
    def _make(name: str = "spotbugsMain", ext: SpotBugsExtension | None = None, **settings):
        settings.setdefault("class_dirs", [project_dir / "build" / "classes" / "java" / "main"])
        settings.setdefault("source_dirs", [project_dir / "src" / "main" / "java"])
        task = SpotBugsTask(name, TaskSettings(**settings))
        return task.init(ext or extension)

    return _make


@pytest.fixture
def fake_exec(monkeypatch):
    """Replace process spawning; set .return_code and inspect .commands."""

    class FakeExec:
        return_code = 0
        stdout = "analysis done"
        stderr = ""

        def __init__(self):
            self.commands: list[list[str]] = []

        async def __call__(self, environment, command, cwd=None, env=None, timeout_sec=None):
            self.commands.append(list(command))
            return ExecResult(
                stdout=self.stdout,
                stderr=self.stderr,
                return_code=self.return_code,
                duration_sec=0.5,
            )

    fake = FakeExec()

    async def _exec(self, command, cwd=None, env=None, timeout_sec=None):
        return await fake(self, command, cwd, env, timeout_sec)

    monkeypatch.setattr(LocalEnvironment, "exec", _exec)
    # Launcher lookup must not depend on a JDK being installed
    monkeypatch.setattr(
        "spotbugs_launcher.runners.base.SpotBugsRunner.java_executable",
        lambda self, task: "/usr/bin/java",
    )
    return fake
