"""Jobs file models for crontable."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from crontable.errors import ScheduleParseError


class JobDefinition(BaseModel):
    """A shell command run on a cron schedule."""

    name: str = Field(
        ...,
        pattern=r"^[a-z][a-z0-9-]*$",
        description="Job name (lowercase, alphanumeric, hyphens)",
    )
    schedule: str = Field(..., description="Five-field cron expression")
    command: str = Field(..., min_length=1, description="Shell command to run")
    timeout: int = Field(default=300, ge=1, description="Command timeout in seconds")
    working_dir: str | None = Field(default=None, description="Working directory")
    env: dict[str, str] = Field(default_factory=dict, description="Extra environment")
    description: str = Field(default="", description="Job description")

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v: str) -> str:
        """Reject schedules the table would refuse at registration."""
        from crontable.scheduler.expression import parse_schedule

        try:
            parse_schedule(v)
        except ScheduleParseError as e:
            raise ValueError(e.message) from e
        return v


class JobsFile(BaseModel):
    """Complete jobs file."""

    timezone: str = Field(default="local", description="Timezone for schedules")
    resolution: float = Field(default=60.0, gt=0, description="Clock resolution in seconds")
    jobs: list[JobDefinition] = Field(default_factory=list, description="Scheduled jobs")

    @model_validator(mode="after")
    def validate_unique_names(self) -> JobsFile:
        """Job names must be unique within a file."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for job in self.jobs:
            if job.name in seen:
                duplicates.append(job.name)
            seen.add(job.name)

        if duplicates:
            msg = f"Duplicate job names: {', '.join(sorted(set(duplicates)))}"
            raise ValueError(msg)
        return self

    def get_job(self, name: str) -> JobDefinition | None:
        """Look up a job definition by name."""
        for job in self.jobs:
            if job.name == name:
                return job
        return None
