"""Command line interface entry point."""

from __future__ import annotations

import dataclasses
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from simple_jmeter_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    ExecutionMode,
    ProjectConfiguration,
    TaskSettings,
    load_project_configuration,
    write_placeholder_configuration,
)
from simple_jmeter_runner.resource_staging import ResourceStagingError
from simple_jmeter_runner.run_execution import (
    TaskExecutionError,
    TaskRequest,
    execute_jmeter_task,
)
from simple_jmeter_runner.toolchain import ToolResolutionError, setup_tool_directory

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CliError(Exception):
    """Custom CLI error."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def _parse_key_values(
    _ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str] | None:
    if not values:
        return None
    parsed: dict[str, str] = {}
    for item in values:
        key, separator, value = item.partition("=")
        if not separator or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param=param)
        parsed[key] = value
    return parsed


def _task_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that launches JMeter."""
    options = [
        click.option(
            "--config",
            "config_path",
            default=DEFAULT_CONFIG_FILENAME,
            show_default=True,
            type=click.Path(path_type=str),
            help="Path to the YAML project file",
        ),
        click.option("--task", "task_name", help="Name of the task to execute"),
        click.option("--test", "jmx_file", help="Test plan, relative to the JMX root directory"),
        click.option("--max-heap", "max_heap", help="Maximum heap size, e.g. 512m"),
        click.option(
            "-J",
            "--jmeter-property",
            "jmeter_properties",
            multiple=True,
            callback=_parse_key_values,
            help="Local JMeter property KEY=VALUE",
        ),
        click.option(
            "-D",
            "--system-property",
            "system_properties",
            multiple=True,
            callback=_parse_key_values,
            help="Java system property KEY=VALUE",
        ),
        click.option(
            "-G",
            "--global-property",
            "global_properties",
            multiple=True,
            callback=_parse_key_values,
            help="Global property KEY=VALUE sent to remote servers",
        ),
        click.option(
            "--sys-prop-file",
            "system_property_files",
            multiple=True,
            type=click.Path(path_type=Path),
            help="Additional system property file",
        ),
        click.option(
            "--propfile",
            "main_property_file",
            type=click.Path(path_type=Path),
            help="Main JMeter property file",
        ),
        click.option(
            "--addprop",
            "additional_property_files",
            multiple=True,
            type=click.Path(path_type=Path),
            help="Additional JMeter property file",
        ),
        click.option(
            "--global-property-file",
            "global_properties_file",
            type=click.Path(path_type=Path),
            help="Global property file sent to remote servers",
        ),
        click.option("--proxy-scheme", "proxy_scheme", help="Proxy scheme, e.g. http"),
        click.option("--proxy-host", "proxy_host", help="Proxy host name"),
        click.option("--proxy-port", "proxy_port", help="Proxy port"),
        click.option(
            "--non-proxy-host",
            "non_proxy_hosts",
            multiple=True,
            help="Host that bypasses the proxy",
        ),
        click.option("--proxy-user", "proxy_username", help="Proxy user name"),
        click.option("--proxy-password", "proxy_password", help="Proxy password"),
        click.option(
            "--remote/--no-remote",
            "enable_remote_execution",
            default=None,
            help="Run on all configured remote servers",
        ),
        click.option(
            "--exit-remote/--no-exit-remote",
            "exit_remote_servers",
            default=None,
            help="Stop remote servers at the end of the test",
        ),
        click.option(
            "--delete-results/--keep-results",
            "delete_results",
            default=None,
            help="Delete existing result files and report directory first",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def option_overrides(task: TaskSettings, options: dict[str, Any]) -> TaskSettings:
    """Turn command line options into an override layer for ``task``.

    Options that were not given stay UNSET and leave the task untouched.
    Paths are taken relative to the current working directory.
    """
    values: dict[str, Any] = {}
    for name, value in options.items():
        if value is None or value == ():
            continue
        if isinstance(value, Path):
            value = value.absolute()
        elif isinstance(value, tuple) and isinstance(value[0], Path):
            value = tuple(item.absolute() for item in value)
        values[name] = value
    return dataclasses.replace(TaskSettings(name=task.name, mode=task.mode), **values)


def _load(config_path: str) -> ProjectConfiguration:
    try:
        return load_project_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def select_task(
    configuration: ProjectConfiguration, mode: ExecutionMode, task_name: str | None
) -> TaskSettings:
    """Pick the named task, the only task of ``mode``, or an implicit default task."""
    if task_name is not None:
        task = configuration.tasks.get(task_name)
        if task is None:
            known = ", ".join(sorted(configuration.tasks)) or "none"
            raise CliError(f"Unknown task {task_name!r}. Configured tasks: {known}")
        if task.mode is not mode:
            raise CliError(
                f"Task {task_name!r} is a {task.mode.value} task and cannot be used with "
                f"the {mode.value} command."
            )
        return task
    candidates = [task for task in configuration.tasks.values() if task.mode is mode]
    if len(candidates) > 1:
        names = ", ".join(task.name for task in candidates)
        raise CliError(
            f"Several {mode.value} tasks are configured, choose one with --task: {names}"
        )
    if candidates:
        return candidates[0]
    return TaskSettings(name=mode.value, mode=mode)


def _execute(mode: ExecutionMode, config_path: str, task_name: str | None, **options) -> None:
    configuration = _load(config_path)
    task = select_task(configuration, mode, task_name)
    overrides = option_overrides(task, options)
    try:
        outcome = execute_jmeter_task(
            TaskRequest(configuration=configuration, task=task, overrides=overrides)
        )
    except TaskExecutionError as exc:
        raise CliError(str(exc), exit_code=exc.exit_code) from exc
    except (ConfigurationError, ToolResolutionError, ResourceStagingError) as exc:
        raise CliError(str(exc)) from exc
    request = outcome.request
    if mode is ExecutionMode.RUN and request.result_file is not None:
        click.echo(str(request.result_file))
    if request.produces_report and request.report_dir is not None:
        click.echo(str(request.report_dir))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-jmeter-runner")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress messages")
@click.option("--debug", is_flag=True, default=False, help="Log debug messages")
def cli(verbose: bool, debug: bool) -> None:
    """Configure and execute Apache JMeter load tests."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML project file to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML project file with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="tasks")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML project file",
)
def list_tasks(config_path: str) -> None:
    """List the tasks configured in the project file."""
    configuration = _load(config_path)
    for task in configuration.tasks.values():
        plan = task.jmx_file if isinstance(task.jmx_file, str) else "-"
        click.echo(f"{task.name}\t{task.mode.value}\t{plan}")


@cli.command(name="setup")
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML project file",
)
def setup(config_path: str) -> None:
    """Prepare the JMeter tool directory without running a test."""
    configuration = _load(config_path)
    try:
        layout = setup_tool_directory(configuration.tool, configuration.tool_dir)
    except ToolResolutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(layout.tool_dir))


@cli.command(name="run")
@_task_options
@click.option(
    "--generate-report/--no-report",
    "generate_report",
    default=None,
    help="Render the HTML dashboard after the run",
)
def run_test(config_path: str, task_name: str | None, **options) -> None:
    """Execute a test plan in non-GUI mode."""
    _execute(ExecutionMode.RUN, config_path, task_name, **options)


@cli.command(name="report")
@_task_options
def report(config_path: str, task_name: str | None, **options) -> None:
    """Generate the HTML dashboard from an existing result file."""
    _execute(ExecutionMode.REPORT, config_path, task_name, **options)


@cli.command(name="gui")
@_task_options
def gui(config_path: str, task_name: str | None, **options) -> None:
    """Open the JMeter GUI, optionally with a test plan loaded."""
    _execute(ExecutionMode.GUI, config_path, task_name, **options)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
