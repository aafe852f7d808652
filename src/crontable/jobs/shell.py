"""Shell command actions for crontable jobs."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from crontable.errors import CommandFailedError

if TYPE_CHECKING:
    from crontable.models import JobDefinition

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a successful command run."""

    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int


@dataclass
class ShellCommand:
    """Async action running a shell command.

    Raises CommandFailedError on a non-zero exit or a timeout, so failures
    reach the table's failure sink.
    """

    name: str
    command: str
    timeout: int = 300
    working_dir: str | None = None
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_job(cls, job: JobDefinition) -> ShellCommand:
        """Create the action for a jobs file entry."""
        return cls(
            name=job.name,
            command=job.command,
            timeout=job.timeout,
            working_dir=job.working_dir,
            env=dict(job.env),
        )

    async def __call__(self) -> CommandResult:
        started_at = datetime.now()

        working_dir = self._expand_path(self.working_dir) if self.working_dir else None
        env = {**os.environ, **self.env}

        logger.info(f"Running job '{self.name}': {self.command}")

        try:
            proc = await asyncio.create_subprocess_shell(
                self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=working_dir,
                env=env,
            )
        except FileNotFoundError as e:
            raise CommandFailedError(f"Working directory not found: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(),
                timeout=self.timeout,
            )
        except TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise CommandFailedError(f"Command timed out after {self.timeout}s") from e

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        exit_code = proc.returncode or 0
        duration_ms = self._duration_ms(started_at)

        if stdout.strip():
            logger.info(f"[{self.name}] {stdout.strip()}")
        if stderr.strip():
            logger.warning(f"[{self.name}] {stderr.strip()}")

        if exit_code != 0:
            raise CommandFailedError(
                f"Command exited with code {exit_code}",
                exit_code=exit_code,
                stderr=stderr,
            )

        logger.info(f"Job '{self.name}' finished in {duration_ms}ms")
        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            duration_ms=duration_ms,
        )

    @staticmethod
    def _expand_path(path: str) -> Path:
        """Expand ~ and environment variables in path."""
        expanded = os.path.expandvars(os.path.expanduser(path))
        return Path(expanded)

    @staticmethod
    def _duration_ms(started_at: datetime) -> int:
        """Calculate duration in milliseconds."""
        return int((datetime.now() - started_at).total_seconds() * 1000)
