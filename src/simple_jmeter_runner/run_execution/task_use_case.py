"""Task orchestration: merge, build arguments, prepare the tool and launch."""

from __future__ import annotations

import logging
from pathlib import Path

from simple_jmeter_runner.command_line import build_arguments
from simple_jmeter_runner.configuration import (
    RunRequest,
    layer_task_settings,
    resolve_run_request,
)
from simple_jmeter_runner.resource_staging import stage_run_resources
from simple_jmeter_runner.toolchain import ToolResolver, setup_tool_directory

from .jmeter_process import CommandRunner, launch_jmeter, resolve_java_executable
from .run_contracts import RunOutcome, TaskRequest

LOGGER = logging.getLogger(__name__)


def execute_jmeter_task(
    request: TaskRequest,
    *,
    resolver: ToolResolver | None = None,
    run_command: CommandRunner | None = None,
) -> RunOutcome:
    """Execute one configured task and return its outcome.

    Arguments are built before anything touches the file system, so invalid
    settings fail without side effects.

    Raises:
      ConfigurationError: If the merged settings are invalid.
      ToolResolutionError: If the JMeter jars cannot be provided.
      ResourceStagingError: If a resource cannot be staged.
      TaskExecutionError: If JMeter fails to start or exits non-zero.
    """
    configuration = request.configuration
    task = request.task
    if request.overrides is not None:
        task = layer_task_settings(task, request.overrides)
    run_request = resolve_run_request(configuration.extension, task)
    arguments = build_arguments(run_request)

    tool = configuration.tool
    layout = setup_tool_directory(tool, configuration.tool_dir, resolver=resolver)
    stage_run_resources(layout.bin_dir, run_request, tool, layout.defaults_dir)
    _create_output_directories(run_request)

    LOGGER.info("Executing task %s (%s)", task.name, task.mode.value)
    command, exit_code = launch_jmeter(
        java=resolve_java_executable(tool),
        jar=layout.jar,
        main_class=tool.main_class,
        arguments=arguments,
        working_dir=layout.bin_dir,
        max_heap=run_request.max_heap,
        jvm_args=run_request.jvm_args,
        run_command=run_command,
    )
    return RunOutcome(
        request=run_request,
        arguments=arguments,
        command=command,
        working_dir=layout.bin_dir,
        exit_code=exit_code,
    )


def _create_output_directories(run_request: RunRequest) -> None:
    targets: list[Path] = []
    if run_request.result_file is not None:
        targets.append(run_request.result_file.parent)
    if run_request.log_output_file is not None:
        targets.append(run_request.log_output_file.parent)
    if run_request.produces_report and run_request.report_dir is not None:
        targets.append(run_request.report_dir.parent)
    for directory in targets:
        directory.mkdir(parents=True, exist_ok=True)
