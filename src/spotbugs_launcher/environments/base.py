"""Base environment interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ExecResult:
    """Result of command execution in environment."""

    stdout: str
    stderr: str
    return_code: int
    duration_sec: float = 0.0

    @property
    def output(self) -> str:
        if self.stdout and self.stderr:
            return self.stdout + "\n" + self.stderr
        return self.stdout or self.stderr


class BaseEnvironment(ABC):
    """Base class for places the analyzer JVM can run in."""

    async def start(self) -> None:
        """Prepare the environment. Nothing to do by default."""

    async def stop(self) -> None:
        """Release the environment. Nothing to do by default."""

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    @abstractmethod
    async def exec(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> ExecResult:
        """
        Execute command in environment.

        Args:
            command: Program and arguments
            cwd: Working directory
            env: Extra environment variables
            timeout_sec: Timeout in seconds, None to wait indefinitely

        Returns:
            ExecResult with stdout, stderr, and return code

        Raises:
            LaunchError: If the program could not be started
        """
        pass
