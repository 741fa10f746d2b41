"""Launch JMeter as a java subprocess."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

from simple_jmeter_runner.command_line import ArgumentList
from simple_jmeter_runner.configuration import ToolSettings

LOGGER = logging.getLogger(__name__)

JAVA_HOME_ENV = "JAVA_HOME"
DEFAULT_JAVA = "java"

CommandRunner = Callable[[tuple[str, ...], Path], int]


class TaskExecutionError(Exception):
    """Raised when JMeter cannot be started or exits unsuccessfully."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def resolve_java_executable(
    tool: ToolSettings, environ: Mapping[str, str] | None = None
) -> str:
    """Return the configured java, the one below JAVA_HOME, or plain ``java``."""
    if tool.java:
        return tool.java
    env = os.environ if environ is None else environ
    java_home = env.get(JAVA_HOME_ENV)
    if java_home:
        return str(Path(java_home) / "bin" / DEFAULT_JAVA)
    return DEFAULT_JAVA


def build_java_command(
    *,
    java: str,
    jar: Path,
    main_class: str,
    arguments: ArgumentList,
    max_heap: str | None = None,
    jvm_args: tuple[str, ...] = (),
) -> tuple[str, ...]:
    """Assemble ``java [-Xmx] <jvm args> -cp <jar> <main class> <args>``."""
    command = [java]
    if max_heap:
        command.append(f"-Xmx{max_heap}")
    command.extend(jvm_args)
    command.extend(("-cp", str(jar.absolute()), main_class))
    command.extend(arguments)
    return tuple(command)


def launch_jmeter(
    *,
    java: str,
    jar: Path,
    main_class: str,
    arguments: ArgumentList,
    working_dir: Path,
    max_heap: str | None = None,
    jvm_args: tuple[str, ...] = (),
    run_command: CommandRunner | None = None,
) -> tuple[tuple[str, ...], int]:
    """Run JMeter to completion and return the command and its exit code.

    Raises:
      TaskExecutionError: If java cannot be started or JMeter exits non-zero.
    """
    command_runner = run_command or _run_command
    if max_heap:
        LOGGER.info("Using maximum heap size of %s.", max_heap)
    LOGGER.debug(
        "Running jmeter with jvmArgs: %s and cmdArgs: %s",
        list(jvm_args),
        list(arguments.loggable()),
    )
    command = build_java_command(
        java=java,
        jar=jar,
        main_class=main_class,
        arguments=arguments,
        max_heap=max_heap,
        jvm_args=jvm_args,
    )
    exit_code = command_runner(command, working_dir)
    if exit_code != 0:
        raise TaskExecutionError(f"JMeter exited with code {exit_code}", exit_code=exit_code)
    return command, exit_code


def _run_command(command: tuple[str, ...], cwd: Path) -> int:
    try:
        completed = subprocess.run(list(command), cwd=cwd, check=False)
    except FileNotFoundError as exc:
        raise TaskExecutionError(f"Java executable not found: {command[0]}") from exc
    except OSError as exc:
        raise TaskExecutionError(f"Failed to start {shlex.quote(command[0])}: {exc}") from exc
    return completed.returncode
