"""Environments the analyzer JVM can run in."""

from spotbugs_launcher.environments.base import BaseEnvironment, ExecResult
from spotbugs_launcher.environments.docker import DockerEnvironment
from spotbugs_launcher.environments.local import LocalEnvironment, ThreadWorkerEnvironment

__all__ = [
    "BaseEnvironment",
    "DockerEnvironment",
    "ExecResult",
    "LocalEnvironment",
    "ThreadWorkerEnvironment",
]
