"""Data models for spotbugs-launcher."""

from spotbugs_launcher.models.extension import SpotBugsExtension, WorkerConfig
from spotbugs_launcher.models.levels import Confidence, Effort
from spotbugs_launcher.models.report import ReportOptions
from spotbugs_launcher.models.result import AnalysisResult, ExitStatus
from spotbugs_launcher.models.task import TaskConfig, TaskSettings

__all__ = [
    "AnalysisResult",
    "Confidence",
    "Effort",
    "ExitStatus",
    "ReportOptions",
    "SpotBugsExtension",
    "TaskConfig",
    "TaskSettings",
    "WorkerConfig",
]
