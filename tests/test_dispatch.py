from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from spotbugs_launcher.dispatch import (
    HYBRID_WORKER_ENV,
    WORKER_API_ENV,
    FeatureFlags,
    RunnerKind,
    create_runner,
    select_runner_kind,
)
from spotbugs_launcher.models.extension import WorkerConfig
from spotbugs_launcher.runners import HybridRunner, JavaExecRunner, WorkerRunner


@pytest.mark.parametrize(
    ("worker", "hybrid", "expected"),
    [
        (False, False, RunnerKind.JAVA_EXEC),
        (False, True, RunnerKind.JAVA_EXEC),
        (True, False, RunnerKind.WORKER),
        (True, True, RunnerKind.HYBRID),
    ],
)
def test_select_runner_kind_table(worker, hybrid, expected):
    assert select_runner_kind(worker, hybrid) is expected
    assert FeatureFlags(enable_worker_api=worker, enable_hybrid_worker=hybrid).runner_kind is expected


@pytest.mark.parametrize(
    ("environ", "expected"),
    [
        ({}, RunnerKind.JAVA_EXEC),
        ({WORKER_API_ENV: "true"}, RunnerKind.WORKER),
        ({WORKER_API_ENV: "1", HYBRID_WORKER_ENV: "yes"}, RunnerKind.HYBRID),
        ({WORKER_API_ENV: "false", HYBRID_WORKER_ENV: "true"}, RunnerKind.JAVA_EXEC),
        ({WORKER_API_ENV: " ON "}, RunnerKind.WORKER),
    ],
)
def test_feature_flags_from_env(environ, expected):
    assert FeatureFlags.from_env(environ).runner_kind is expected


def test_feature_flags_are_frozen():
    flags = FeatureFlags(enable_worker_api=True)
    with pytest.raises(ValidationError):
        flags.enable_worker_api = False


def test_create_runner_builds_matching_strategy(extension):
    assert isinstance(create_runner(RunnerKind.JAVA_EXEC, extension), JavaExecRunner)
    assert isinstance(create_runner(RunnerKind.HYBRID, extension), HybridRunner)

    extension.worker = WorkerConfig(image="custom:jdk")
    runner = create_runner(RunnerKind.WORKER, extension)
    assert isinstance(runner, WorkerRunner)
    assert runner.worker.image == "custom:jdk"


def test_task_run_uses_selected_strategy(make_task, monkeypatch):
    seen = []

    async def fake_run(self, task):
        seen.append(type(self))
        return "done"

    for runner_type in (JavaExecRunner, WorkerRunner, HybridRunner):
        monkeypatch.setattr(runner_type, "run", fake_run)

    for worker, hybrid, expected in [
        (False, True, JavaExecRunner),
        (True, False, WorkerRunner),
        (True, True, HybridRunner),
    ]:
        task = make_task()
        task.init(task.extension, enable_worker_api=worker, enable_hybrid_worker=hybrid)
        assert asyncio.run(task.run()) == "done"
        assert seen[-1] is expected
