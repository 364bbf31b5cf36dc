"""Java toolchain selection."""

import os
import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from spotbugs_launcher.exceptions import LaunchError

JAVA_EXECUTABLE = "java.exe" if os.name == "nt" else "java"


class JavaLauncher(BaseModel):
    """A JVM executable used to run the analyzer."""

    model_config = {"frozen": True}

    executable_path: Path = Field(..., description="Path to the java executable")

    def check(self) -> Path:
        """Return the executable path, or raise LaunchError if it cannot be run."""
        path = self.executable_path
        if path.is_absolute() or path.parent != Path("."):
            if not path.is_file():
                raise LaunchError(f"Java launcher not found: {path}")
            return path

        found = shutil.which(str(path))
        if found is None:
            raise LaunchError(f"Java launcher '{path}' is not on PATH")
        return Path(found)


def launcher_for(java_home: Path) -> JavaLauncher:
    """Launcher of the JDK installed at java_home."""
    return JavaLauncher(executable_path=java_home / "bin" / JAVA_EXECUTABLE)


def default_launcher() -> JavaLauncher:
    """Launcher resolved from PATH at execution time."""
    return JavaLauncher(executable_path=Path(JAVA_EXECUTABLE))
