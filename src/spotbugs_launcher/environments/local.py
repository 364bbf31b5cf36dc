"""Local process environments."""

import asyncio
import os
import subprocess
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from spotbugs_launcher.environments.base import BaseEnvironment, ExecResult
from spotbugs_launcher.exceptions import LaunchError


def _merged_env(env: dict[str, str] | None) -> dict[str, str] | None:
    if not env:
        return None
    return {**os.environ, **env}


def _decode(data: bytes | None) -> str:
    return data.decode(errors="replace") if data else ""


class LocalEnvironment(BaseEnvironment):
    """Spawns commands as child processes of the launcher."""

    async def exec(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> ExecResult:
        start_time = time.time()

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                env=_merged_env(env),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(f"Failed to start {command[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
        except (asyncio.CancelledError, asyncio.TimeoutError):
            # Cancelled by the caller or timed out, do not leave the JVM behind
            proc.kill()
            await proc.wait()
            raise

        return ExecResult(
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            return_code=proc.returncode,
            duration_sec=time.time() - start_time,
        )


class ThreadWorkerEnvironment(BaseEnvironment):
    """
    In-process worker: commands run on a worker thread of this process.

    The event loop stays free while the worker thread blocks on the child
    process.
    """

    def __init__(self):
        self.executor: ThreadPoolExecutor | None = None
        self._process: subprocess.Popen | None = None

    async def start(self) -> None:
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="spotbugs-worker")

    async def stop(self) -> None:
        if self.executor:
            self.executor.shutdown(wait=True)
            self.executor = None

    def _run_blocking(
        self,
        command: list[str],
        cwd: Path | None,
        env: dict[str, str] | None,
        timeout_sec: float | None,
    ) -> ExecResult:
        start_time = time.time()

        try:
            self._process = subprocess.Popen(
                command,
                cwd=cwd,
                env=_merged_env(env),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(f"Failed to start {command[0]}: {e}") from e

        try:
            stdout, stderr = self._process.communicate(timeout=timeout_sec)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.communicate()
            raise
        finally:
            return_code = self._process.returncode
            self._process = None

        return ExecResult(
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            return_code=return_code,
            duration_sec=time.time() - start_time,
        )

    async def exec(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout_sec: float | None = None,
    ) -> ExecResult:
        if not self.executor:
            raise RuntimeError("Worker not started")

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                self.executor, self._run_blocking, command, cwd, env, timeout_sec
            )
        except asyncio.CancelledError:
            process = self._process
            if process is not None:
                process.kill()
            raise
