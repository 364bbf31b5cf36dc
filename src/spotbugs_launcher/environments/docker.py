"""Docker environment implementation."""

import logging
import os
import time
from pathlib import Path

import docker
from docker.errors import DockerException, ImageNotFound, NotFound
from docker.models.containers import Container

from spotbugs_launcher.environments.base import BaseEnvironment, ExecResult
from spotbugs_launcher.exceptions import LaunchError

logger = logging.getLogger(__name__)

# Exit codes of the container runtime for a command that is not executable or not found
EXEC_FAILURE_CODES = frozenset({126, 127})


class DockerEnvironment(BaseEnvironment):
    """Docker container used as a process-isolated worker."""

    def __init__(
        self,
        container_name: str,
        image_name: str,
        cpus: int = 2,
        memory_mb: int = 4096,
        mounts: dict[Path, str] | None = None,
        working_dir: Path | None = None,
    ):
        """
        Initialize Docker environment.

        Args:
            container_name: Name for the container
            image_name: Docker image name, must provide a JVM
            cpus: Number of CPU cores
            memory_mb: Memory limit in MB
            mounts: Host paths to bind at the same path, mapped to "ro" or "rw"
            working_dir: Working directory in container
        """
        self.container_name = container_name
        self.image_name = image_name
        self.cpus = cpus
        self.memory_mb = memory_mb
        self.mounts = mounts or {}
        self.working_dir = working_dir

        self.client: docker.DockerClient | None = None
        self.container: Container | None = None

    def _volumes(self) -> dict[str, dict[str, str]]:
        return {
            str(path): {"bind": str(path), "mode": mode}
            for path, mode in self.mounts.items()
        }

    async def start(self) -> None:
        """Start the Docker container."""
        try:
            self.client = docker.from_env()

            try:
                self.client.images.get(self.image_name)
            except ImageNotFound:
                logger.info("Pulling worker image %s", self.image_name)
                self.client.images.pull(self.image_name)

            # Stop existing container with same name if exists
            try:
                existing = self.client.containers.get(self.container_name)
                existing.remove(force=True)
            except NotFound:
                pass

            user = f"{os.getuid()}:{os.getgid()}" if hasattr(os, "getuid") else None
            self.container = self.client.containers.run(
                image=self.image_name,
                name=self.container_name,
                command="sleep infinity",
                detach=True,
                network_mode="none",
                cpu_count=self.cpus,
                mem_limit=f"{self.memory_mb}m",
                volumes=self._volumes(),
                working_dir=str(self.working_dir) if self.working_dir else None,
                user=user,
                remove=False,
            )
        except DockerException as e:
            raise LaunchError(f"Failed to start worker container: {e}") from e

    async def stop(self) -> None:
        """Stop and delete the container."""
        if self.container:
            try:
                self.container.stop(timeout=10)
                self.container.remove()
            except DockerException as e:
                logger.warning("Failed to remove worker container %s: %s", self.container_name, e)
            self.container = None
        if self.client:
            self.client.close()
            self.client = None

    async def exec(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> ExecResult:
        """Execute command in Docker container."""
        if not self.container:
            raise RuntimeError("Container not started")

        work_dir = cwd or self.working_dir
        start_time = time.time()

        try:
            exec_result = self.container.exec_run(
                command,
                workdir=str(work_dir) if work_dir else None,
                environment=env or {},
                demux=True,
            )
        except DockerException as e:
            raise LaunchError(f"Failed to execute in worker container: {e}") from e

        stdout, stderr = exec_result.output or (None, None)
        result = ExecResult(
            stdout=stdout.decode(errors="replace") if stdout else "",
            stderr=stderr.decode(errors="replace") if stderr else "",
            return_code=exec_result.exit_code,
            duration_sec=time.time() - start_time,
        )
        if result.return_code in EXEC_FAILURE_CODES:
            raise LaunchError(
                f"Failed to start {command[0]} in worker container "
                f"(exit code {result.return_code}): {result.output.strip()}"
            )
        return result
