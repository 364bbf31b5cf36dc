"""Selection of the strategy used to run the analyzer."""

from __future__ import annotations

import os
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from spotbugs_launcher.models.extension import SpotBugsExtension
    from spotbugs_launcher.runners.base import SpotBugsRunner

WORKER_API_ENV = "SPOTBUGS_WORKER_API"
HYBRID_WORKER_ENV = "SPOTBUGS_HYBRID_WORKER"

_TRUTHY = {"1", "true", "yes", "on"}


class RunnerKind(str, Enum):
    """The three ways to execute the analyzer."""

    JAVA_EXEC = "java-exec"
    WORKER = "worker"
    HYBRID = "hybrid"


def select_runner_kind(enable_worker_api: bool, enable_hybrid_worker: bool) -> RunnerKind:
    """
    Map the two feature flags onto a strategy.

    worker off -> spawn the JVM directly (hybrid flag is ignored)
    worker on, hybrid off -> isolated worker
    worker on, hybrid on -> in-process worker
    """
    if not enable_worker_api:
        return RunnerKind.JAVA_EXEC
    if enable_hybrid_worker:
        return RunnerKind.HYBRID
    return RunnerKind.WORKER


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


class FeatureFlags(BaseModel):
    """Process-wide dispatch flags, read once."""

    model_config = ConfigDict(frozen=True)

    enable_worker_api: bool = Field(default=False, description="Run through a worker")
    enable_hybrid_worker: bool = Field(default=False, description="Use the in-process worker")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> FeatureFlags:
        env = os.environ if environ is None else environ
        return cls(
            enable_worker_api=_flag(env.get(WORKER_API_ENV)),
            enable_hybrid_worker=_flag(env.get(HYBRID_WORKER_ENV)),
        )

    @property
    def runner_kind(self) -> RunnerKind:
        return select_runner_kind(self.enable_worker_api, self.enable_hybrid_worker)


def create_runner(kind: RunnerKind, extension: SpotBugsExtension | None = None) -> SpotBugsRunner:
    """Build the runner for a strategy."""
    from spotbugs_launcher.runners import HybridRunner, JavaExecRunner, WorkerRunner

    if kind is RunnerKind.JAVA_EXEC:
        return JavaExecRunner()
    if kind is RunnerKind.HYBRID:
        return HybridRunner()
    worker = extension.worker if extension is not None else None
    return WorkerRunner(worker)
