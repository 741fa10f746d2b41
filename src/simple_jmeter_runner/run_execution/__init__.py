"""Run execution domain exports."""

from .jmeter_process import (
    CommandRunner,
    TaskExecutionError,
    build_java_command,
    launch_jmeter,
    resolve_java_executable,
)
from .run_contracts import RunOutcome, TaskRequest
from .task_use_case import execute_jmeter_task

__all__ = [
    "TaskRequest",
    "RunOutcome",
    "CommandRunner",
    "TaskExecutionError",
    "build_java_command",
    "launch_jmeter",
    "resolve_java_executable",
    "execute_jmeter_task",
]
