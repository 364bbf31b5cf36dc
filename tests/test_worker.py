from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from docker.errors import DockerException, ImageNotFound

from spotbugs_launcher.exceptions import LaunchError, VerificationFailedError
from spotbugs_launcher.models.extension import WorkerConfig
from spotbugs_launcher.runners import WorkerRunner


@pytest.fixture
def docker_client():
    """Mocked docker client whose container exits with exit_code."""
    client = MagicMock()
    container = MagicMock()
    container.exec_run.return_value = MagicMock(output=(b"bugs listed", None), exit_code=0)
    client.containers.run.return_value = container

    with patch("spotbugs_launcher.environments.docker.docker.from_env", return_value=client):
        yield client


def test_worker_runs_analyzer_in_container(make_task, docker_client, project_dir):
    task = make_task()
    task.reports.create("xml")
    runner = WorkerRunner(WorkerConfig(image="eclipse-temurin:21-jdk", cpus=1, memory_mb=1024))

    result = asyncio.run(runner.run(task))

    assert result.success
    assert result.runner == "worker"
    assert result.output == "bugs listed"

    run_kwargs = docker_client.containers.run.call_args.kwargs
    assert run_kwargs["image"] == "eclipse-temurin:21-jdk"
    assert run_kwargs["cpu_count"] == 1
    assert run_kwargs["mem_limit"] == "1024m"
    assert run_kwargs["network_mode"] == "none"
    assert run_kwargs["name"].startswith("spotbugs-spotbugsMain-")

    volumes = run_kwargs["volumes"]
    class_dir = str(project_dir / "build" / "classes" / "java" / "main")
    assert volumes[class_dir] == {"bind": class_dir, "mode": "ro"}
    reports_dir = str(project_dir / "build" / "reports" / "spotbugs")
    assert volumes[reports_dir]["mode"] == "rw"
    assert volumes[str(task.work_dir.absolute())]["mode"] == "rw"
    jar = str(project_dir / "spotbugs" / "lib" / "spotbugs.jar")
    assert volumes[jar]["mode"] == "ro"

    container = docker_client.containers.run.return_value
    command = container.exec_run.call_args.args[0]
    assert command[0] == "java"
    assert "edu.umd.cs.findbugs.FindBugs2" in command
    container.stop.assert_called_once()
    container.remove.assert_called_once()


def test_worker_uses_toolchain_launcher(make_task, docker_client, project_dir):
    java = project_dir / "jdk" / "bin" / "java"
    java.parent.mkdir(parents=True)
    java.write_text("", encoding="utf-8")

    task = make_task(launcher=java)
    asyncio.run(WorkerRunner().run(task))

    run_kwargs = docker_client.containers.run.call_args.kwargs
    assert run_kwargs["volumes"][str(project_dir / "jdk")]["mode"] == "ro"
    container = docker_client.containers.run.return_value
    assert container.exec_run.call_args.args[0][0] == str(java)


def test_worker_failure_without_ignore(make_task, docker_client):
    container = docker_client.containers.run.return_value
    container.exec_run.return_value = MagicMock(output=(None, b"error"), exit_code=1)

    with pytest.raises(VerificationFailedError):
        asyncio.run(WorkerRunner().run(make_task()))
    container.remove.assert_called_once()


def test_worker_pulls_missing_image(make_task, docker_client):
    docker_client.images.get.side_effect = ImageNotFound("missing")
    asyncio.run(WorkerRunner().run(make_task()))
    docker_client.images.pull.assert_called_once_with("eclipse-temurin:17-jdk-jammy")


def test_docker_unavailable_is_launch_error(make_task):
    task = make_task(ignore_failures=True)
    with patch(
        "spotbugs_launcher.environments.docker.docker.from_env",
        side_effect=DockerException("daemon not running"),
    ):
        with pytest.raises(LaunchError, match="daemon not running"):
            asyncio.run(WorkerRunner().run(task))


def test_exec_failure_is_launch_error(make_task, docker_client):
    container = docker_client.containers.run.return_value
    container.exec_run.side_effect = DockerException("exec failed")

    with pytest.raises(LaunchError, match="exec failed"):
        asyncio.run(WorkerRunner().run(make_task(ignore_failures=True)))
    container.remove.assert_called_once()


def test_missing_toolchain_launcher_is_fatal(make_task, docker_client, project_dir):
    task = make_task(ignore_failures=True, launcher=project_dir / "nojdk" / "bin" / "java")

    with pytest.raises(LaunchError, match="Java launcher not found"):
        asyncio.run(WorkerRunner().run(task))
    docker_client.containers.run.assert_not_called()


@pytest.mark.parametrize("exit_code", [126, 127])
def test_unexecutable_command_is_fatal(make_task, docker_client, exit_code):
    container = docker_client.containers.run.return_value
    container.exec_run.return_value = MagicMock(
        output=(None, b"exec: java: not found"), exit_code=exit_code
    )

    with pytest.raises(LaunchError, match=f"exit code {exit_code}"):
        asyncio.run(WorkerRunner().run(make_task(ignore_failures=True)))
    container.remove.assert_called_once()
