"""Jobs file YAML parser for crontable."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from crontable.errors import JobsFileError
from crontable.models import JobsFile
from crontable.scheduler.table import CronTable, FailureSink

from .shell import ShellCommand


class JobsFileParser:
    """Parser for jobs YAML files."""

    def parse_file(self, path: Path | str) -> JobsFile:
        """Parse jobs from YAML file.

        Args:
            path: Path to the jobs YAML file.

        Returns:
            Parsed JobsFile object.

        Raises:
            JobsFileError: If the file cannot be parsed.
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Jobs file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise JobsFileError(f"Invalid YAML syntax: {e}") from e

        if data is None:
            raise JobsFileError("Empty jobs file")

        return self.parse_dict(data, source=str(path))

    def parse_string(self, content: str) -> JobsFile:
        """Parse jobs from YAML string.

        Raises:
            JobsFileError: If the content cannot be parsed.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise JobsFileError(f"Invalid YAML syntax: {e}") from e

        if data is None:
            raise JobsFileError("Empty jobs content")

        return self.parse_dict(data)

    def parse_dict(self, data: dict[str, Any], source: str = "<dict>") -> JobsFile:
        """Parse jobs from dictionary.

        Args:
            data: Jobs data as dictionary.
            source: Source identifier for error messages.

        Raises:
            JobsFileError: If the data is invalid.
        """
        if not isinstance(data, dict):
            raise JobsFileError(f"Jobs file must be a mapping ({source})")

        try:
            return JobsFile.model_validate(data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = " -> ".join(str(part) for part in error["loc"])
                errors.append(
                    {
                        "location": loc or "<root>",
                        "message": error["msg"],
                        "type": error["type"],
                    }
                )

            error_messages = [f"  {err['location']}: {err['message']}" for err in errors]
            msg = f"Jobs file validation failed ({source}):\n" + "\n".join(error_messages)
            raise JobsFileError(msg, errors=errors) from e


def build_table(
    jobs_file: JobsFile,
    timezone: str | None = None,
    resolution: float | None = None,
    on_error: FailureSink | None = None,
) -> CronTable:
    """Create a cron table holding a shell command entry per job.

    Args:
        jobs_file: Parsed jobs file.
        timezone: Overrides the file's timezone.
        resolution: Overrides the file's clock resolution.
        on_error: Failure sink for the table.

    Returns:
        A table that has not been started yet.
    """
    table = CronTable(
        timezone=timezone or jobs_file.timezone,
        resolution=resolution or jobs_file.resolution,
        on_error=on_error,
    )

    for job in jobs_file.jobs:
        table.register(job.schedule, job.name, ShellCommand.from_job(job))

    return table
