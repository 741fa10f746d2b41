"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from simple_jmeter_runner.command_line import ArgumentList
from simple_jmeter_runner.configuration import ProjectConfiguration, RunRequest, TaskSettings


@dataclass(frozen=True)
class TaskRequest:
    """Input contract for executing one configured task."""

    configuration: ProjectConfiguration
    task: TaskSettings
    overrides: TaskSettings | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed JMeter invocation."""

    request: RunRequest
    arguments: ArgumentList
    command: tuple[str, ...]
    working_dir: Path
    exit_code: int
