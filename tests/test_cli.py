from __future__ import annotations

from textwrap import dedent

import pytest
from typer.testing import CliRunner

from spotbugs_launcher import __version__
from spotbugs_launcher.cli.main import app
from spotbugs_launcher.environments.base import ExecResult
from spotbugs_launcher.environments.local import ThreadWorkerEnvironment

runner = CliRunner()


@pytest.fixture
def config(project_dir):
    path = project_dir / "spotbugs.toml"
    path.write_text(
        dedent(
            """
            [spotbugs]
            project_name = "demo"
            spotbugs_home = "spotbugs"

            [tasks.spotbugsMain]
            class_dirs = ["build/classes/java/main"]

            [tasks.spotbugsMain.reports.xml]
            enabled = true

            [tasks.spotbugsTest]
            class_dirs = ["build/classes/java/test"]
            """
        ),
        encoding="utf-8",
    )
    return path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_tasks_lists_configured_tasks(config):
    result = runner.invoke(app, ["tasks", "--config", str(config)])
    assert result.exit_code == 0
    assert "spotbugsMain" in result.output
    assert "spotbugsTest" in result.output
    assert "xml" in result.output


def test_run_clean(config, fake_exec):
    result = runner.invoke(app, ["run", "--config", str(config), "--task", "spotbugsMain"])
    assert result.exit_code == 0, result.output
    assert "No issues" in result.output
    assert len(fake_exec.commands) == 1


def test_run_skips_task_without_classes(config, fake_exec):
    result = runner.invoke(app, ["run", "-c", str(config), "-t", "spotbugsTest"])
    assert result.exit_code == 0
    assert "Skipped" in result.output
    assert fake_exec.commands == []


def test_run_failure_exits_nonzero(config, fake_exec):
    fake_exec.return_code = 1
    fake_exec.stdout = "H C NP: Possible null pointer dereference"
    result = runner.invoke(app, ["run", "-c", str(config), "-t", "spotbugsMain"])
    assert result.exit_code == 1
    assert "Verification failed" in result.output
    assert "Possible null pointer dereference" in result.output


def test_run_ignore_failures(config, fake_exec):
    fake_exec.return_code = 1
    result = runner.invoke(
        app, ["run", "-c", str(config), "-t", "spotbugsMain", "--ignore-failures"]
    )
    assert result.exit_code == 0
    assert "Failures ignored" in result.output


def test_run_unknown_task(config, fake_exec):
    result = runner.invoke(app, ["run", "-c", str(config), "-t", "spotbugsIt"])
    assert result.exit_code == 1
    assert "Unknown task" in result.output


def test_run_missing_config(tmp_path):
    result = runner.invoke(app, ["run", "-c", str(tmp_path / "missing.toml")])
    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_environment_selects_hybrid_worker(config, fake_exec, monkeypatch):
    calls = []

    def fake_blocking(self, command, cwd, env, timeout_sec):
        calls.append(command)
        return ExecResult(stdout="", stderr="", return_code=0)

    monkeypatch.setattr(ThreadWorkerEnvironment, "_run_blocking", fake_blocking)

    result = runner.invoke(
        app,
        ["run", "-c", str(config), "-t", "spotbugsMain"],
        env={"SPOTBUGS_WORKER_API": "true", "SPOTBUGS_HYBRID_WORKER": "true"},
    )
    assert result.exit_code == 0, result.output
    assert "Strategy: hybrid" in result.output
    assert len(calls) == 1
    assert fake_exec.commands == []
