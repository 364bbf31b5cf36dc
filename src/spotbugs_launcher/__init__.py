"""Configure and launch SpotBugs analysis runs."""

__version__ = "0.1.0"
