"""Report descriptors and the per-task report registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from spotbugs_launcher.exceptions import ConfigurationError, InvalidReportNameError

if TYPE_CHECKING:
    from spotbugs_launcher.task import SpotBugsTask

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SpotBugsReport:
    """
    One report the analyzer should write.

    Descriptors compare by identity so they can be collected in sets.
    """

    name: ClassVar[str]
    extension: ClassVar[str]
    option: ClassVar[str]

    task: SpotBugsTask = field(repr=False)
    enabled: bool = True
    output_location: Path | None = None

    @property
    def destination(self) -> Path:
        """Explicit location, or <reports_dir>/<task base name>.<extension>."""
        if self.output_location is not None:
            return self.output_location
        return self.task.config.reports_dir / f"{self.task.base_name}.{self.extension}"

    def to_command_line_option(self) -> str:
        return self.option

    def to_argument(self) -> str:
        return f"{self.to_command_line_option()}={self.destination.absolute()}"


@dataclass(eq=False)
class SpotBugsHtmlReport(SpotBugsReport):
    name: ClassVar[str] = "html"
    extension: ClassVar[str] = "html"
    option: ClassVar[str] = "-html"

    stylesheet: str | None = None

    def to_command_line_option(self) -> str:
        if self.stylesheet:
            return f"{self.option}:{self.stylesheet}"
        return self.option


@dataclass(eq=False)
class SpotBugsXmlReport(SpotBugsReport):
    name: ClassVar[str] = "xml"
    extension: ClassVar[str] = "xml"
    option: ClassVar[str] = "-xml:withMessages"


@dataclass(eq=False)
class SpotBugsTextReport(SpotBugsReport):
    name: ClassVar[str] = "text"
    extension: ClassVar[str] = "txt"
    option: ClassVar[str] = "-sortByClass"


@dataclass(eq=False)
class SpotBugsSarifReport(SpotBugsReport):
    name: ClassVar[str] = "sarif"
    extension: ClassVar[str] = "sarif"
    option: ClassVar[str] = "-sarif"


REPORT_TYPES: dict[str, type[SpotBugsReport]] = {
    report_type.name: report_type
    for report_type in (
        SpotBugsHtmlReport,
        SpotBugsXmlReport,
        SpotBugsTextReport,
        SpotBugsSarifReport,
    )
}


class ReportContainer:
    """Name-keyed reports of one task, iterated in creation order."""

    def __init__(self, task: SpotBugsTask):
        self.task = task
        self._reports: dict[str, SpotBugsReport] = {}

    def __iter__(self) -> Iterator[SpotBugsReport]:
        return iter(self._reports.values())

    def __len__(self) -> int:
        return len(self._reports)

    def __contains__(self, name: object) -> bool:
        return name in self._reports

    def names(self) -> list[str]:
        return list(self._reports)

    def create(self, name: str, **attrs) -> SpotBugsReport:
        """
        Build and register the report of the given kind.

        Raises:
            InvalidReportNameError: If name is not html, xml, text or sarif
            ConfigurationError: If the report was already created
        """
        report_type = REPORT_TYPES.get(name)
        if report_type is None:
            raise InvalidReportNameError(name)
        if name in self._reports:
            raise ConfigurationError(f"Report '{name}' already exists")
        report = report_type(task=self.task, **attrs)
        self._reports[name] = report
        return report

    def get(self, name: str) -> SpotBugsReport | None:
        """Registered report with this name, or None."""
        if name not in REPORT_TYPES:
            raise InvalidReportNameError(name)
        return self._reports.get(name)

    def report(self, name: str) -> SpotBugsReport:
        """Return the named report, creating it on first use."""
        existing = self.get(name)
        if existing is not None:
            return existing
        return self.create(name)

    def enabled_reports(self) -> frozenset[SpotBugsReport]:
        return frozenset(report for report in self if report.enabled)

    def first_enabled_report(self) -> SpotBugsReport | None:
        """
        First enabled report in creation order.

        With more than one enabled report the answer depends on the order the
        reports were created in, so a warning is logged.
        """
        enabled = [report for report in self if report.enabled]
        if not enabled:
            return None
        if len(enabled) > 1:
            logger.warning(
                "Task %s has %d enabled reports; using '%s' by creation order",
                self.task.name,
                len(enabled),
                enabled[0].name,
            )
        return enabled[0]
