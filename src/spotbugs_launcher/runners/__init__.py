"""Strategies for running the analyzer."""

from spotbugs_launcher.runners.base import SpotBugsRunner
from spotbugs_launcher.runners.hybrid import HybridRunner
from spotbugs_launcher.runners.java_exec import JavaExecRunner
from spotbugs_launcher.runners.worker import WorkerRunner

__all__ = ["HybridRunner", "JavaExecRunner", "SpotBugsRunner", "WorkerRunner"]
