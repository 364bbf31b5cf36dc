"""Confidence and effort levels passed to the analyzer."""

from enum import Enum


class _Level(str, Enum):
    """Lower-case string enum that also accepts upper/mixed case input."""

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Confidence(_Level):
    """Minimum confidence of bugs to report."""

    LOW = "low"
    MEDIUM = "medium"
    DEFAULT = "default"
    HIGH = "high"

    def to_command_line_option(self) -> str | None:
        """Return the analyzer flag, or None when the analyzer default applies."""
        if self is Confidence.DEFAULT:
            return None
        return f"-{self.value}"


class Effort(_Level):
    """How much work the detectors put into the analysis."""

    MIN = "min"
    LESS = "less"
    DEFAULT = "default"
    MORE = "more"
    MAX = "max"

    def to_command_line_option(self) -> str:
        return f"-effort:{self.value}"


DEFAULT_CONFIDENCE = Confidence.DEFAULT
DEFAULT_EFFORT = Effort.DEFAULT
