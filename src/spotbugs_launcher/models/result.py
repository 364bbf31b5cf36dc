"""Analysis result models."""

from pathlib import Path

from pydantic import BaseModel, Field

BUGS_FOUND_FLAG = 1
MISSING_CLASS_FLAG = 2
ERROR_FLAG = 4
MAX_FLAGS = BUGS_FOUND_FLAG | MISSING_CLASS_FLAG | ERROR_FLAG


class ExitStatus(BaseModel):
    """Decoded exit status of an analyzer run started with -exitcode."""

    model_config = {"frozen": True}

    code: int = Field(..., description="Process exit code")

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def in_flag_range(self) -> bool:
        """Codes 1-7 are a combination of the analyzer flags."""
        return 0 < self.code <= MAX_FLAGS

    @property
    def bugs_found(self) -> bool:
        return self.in_flag_range and bool(self.code & BUGS_FOUND_FLAG)

    @property
    def missing_classes(self) -> bool:
        return self.in_flag_range and bool(self.code & MISSING_CLASS_FLAG)

    @property
    def analysis_error(self) -> bool:
        """True for internal errors, including codes outside the flag range."""
        if self.ok:
            return False
        return not self.in_flag_range or bool(self.code & ERROR_FLAG)

    def describe(self) -> str:
        if self.ok:
            return "no issues"
        if not self.in_flag_range:
            return f"analysis error (exit code {self.code})"
        parts = []
        if self.bugs_found:
            parts.append("bugs found")
        if self.missing_classes:
            parts.append("missing classes")
        if self.analysis_error:
            parts.append("analysis error")
        return ", ".join(parts)


class AnalysisResult(BaseModel):
    """Outcome of one task run."""

    task_name: str = Field(..., description="Task name")
    runner: str | None = Field(default=None, description="Execution strategy used")
    exit_code: int | None = Field(default=None, description="Analyzer exit code")
    duration_sec: float = Field(default=0.0, description="Analyzer run time in seconds")
    output: str = Field(default="", description="stdout/stderr of the analyzer")
    reports: list[Path] = Field(default_factory=list, description="Enabled report files")
    skipped: bool = Field(default=False, description="No classes to analyze")
    ignored_failure: bool = Field(
        default=False, description="Failed, but ignore_failures was set"
    )

    @property
    def status(self) -> ExitStatus | None:
        if self.exit_code is None:
            return None
        return ExitStatus(code=self.exit_code)

    @property
    def success(self) -> bool:
        """The build step outcome: skipped, clean, or an ignored failure."""
        if self.skipped or self.ignored_failure:
            return True
        return self.exit_code == 0
