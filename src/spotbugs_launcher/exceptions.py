"""Errors raised while configuring and running SpotBugs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spotbugs_launcher.models.result import AnalysisResult


class SpotBugsError(Exception):
    """Base class for every launcher error."""


class ConfigurationError(SpotBugsError):
    """Invalid task or project configuration."""


class InvalidReportNameError(ConfigurationError, ValueError):
    """A report name outside the four supported kinds was requested."""

    def __init__(self, name: str):
        super().__init__(f"{name} is invalid as the report name")
        self.name = name


class LaunchError(SpotBugsError):
    """The analyzer could not be started at all."""


class VerificationFailedError(SpotBugsError):
    """The analyzer ran but reported bugs or an internal error."""

    def __init__(self, message: str, result: AnalysisResult):
        super().__init__(message)
        self.result = result
