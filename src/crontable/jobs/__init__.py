"""Jobs files: shell commands on cron schedules."""

from .parser import JobsFileParser, build_table
from .shell import CommandResult, ShellCommand

__all__ = ["CommandResult", "JobsFileParser", "ShellCommand", "build_table"]
