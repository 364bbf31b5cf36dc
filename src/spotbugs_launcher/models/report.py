"""Options of one report table in the project file."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ReportOptions(BaseModel):
    """[tasks.<name>.reports.<kind>] table."""

    model_config = ConfigDict(extra="forbid")

    enabled: StrictBool = Field(default=True, description="Write this report")
    destination: Path | None = Field(
        default=None, description="Report file (default: <reports_dir>/<base name>.<ext>)"
    )
    stylesheet: str | None = Field(default=None, description="XSL stylesheet, html only")
