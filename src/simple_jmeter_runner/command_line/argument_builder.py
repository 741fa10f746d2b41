"""Translate a RunRequest into JMeter command line tokens.

Token order follows the JMeter CLI contract: property sources first,
then logging, global properties, proxy settings, the test plan, result
and report destinations, and the remote flags last.
"""

from __future__ import annotations

import logging
from pathlib import Path

from simple_jmeter_runner.configuration import ConfigurationError, ExecutionMode, RunRequest

from .argument_list import ArgumentCollector, ArgumentList

LOGGER = logging.getLogger(__name__)

NON_PROXY_HOST_SEPARATOR = "|"
MAX_PORT = 65535


def build_arguments(request: RunRequest) -> ArgumentList:
    """Build the argument list matching the request's execution mode.

    Raises:
      ConfigurationError: If a value cannot be put on the command line.
    """
    builders = {
        ExecutionMode.RUN: build_run_arguments,
        ExecutionMode.REPORT: build_report_arguments,
        ExecutionMode.GUI: build_gui_arguments,
    }
    return builders[request.mode](request)


def build_run_arguments(request: RunRequest) -> ArgumentList:
    """Non-GUI test execution, optionally rendering the dashboard afterwards."""
    args = ArgumentCollector()
    args.add("-n")
    add_base_arguments(request, args)
    add_global_properties(request, args)
    add_proxy(request, args)
    add_test_file(request, args)
    add_result_file(request, args, for_report=False)
    if request.generate_report:
        args.add("-e")
        add_report(request, args)
    add_delete(request, args)
    add_remote(request, args)
    return args.build()


def build_report_arguments(request: RunRequest) -> ArgumentList:
    """Dashboard generation from an existing result file."""
    args = ArgumentCollector()
    add_base_arguments(request, args)
    add_global_properties(request, args)
    add_test_file(request, args)
    add_result_file(request, args, for_report=True)
    add_report(request, args)
    add_delete(request, args)
    return args.build()


def build_gui_arguments(request: RunRequest) -> ArgumentList:
    """GUI launch; the test plan is optional."""
    args = ArgumentCollector()
    add_base_arguments(request, args)
    add_global_properties(request, args)
    if request.test_file is not None:
        add_test_file(request, args)
    return args.build()


def add_base_arguments(request: RunRequest, args: ArgumentCollector) -> None:
    """Property sources and logging shared by every mode."""
    for property_file in request.system_property_files:
        args.add("-S", _path_text(property_file))
    for key, value in request.system_properties.items():
        args.add(f"-D{key}={value}")
    if request.main_property_file is not None:
        args.add("-p", _path_text(request.main_property_file))
    for property_file in request.additional_property_files:
        args.add("-q", _path_text(property_file))
    for key, value in request.jmeter_properties.items():
        args.add(f"-J{key}={value}")
    if request.log_config is not None:
        args.add("-i", _path_text(request.log_config))
    if request.log_output_file is not None:
        args.add("-j", _path_text(request.log_output_file))


def add_global_properties(request: RunRequest, args: ArgumentCollector) -> None:
    # file first so that explicit entries come later on the command line
    if request.global_properties_file is not None:
        args.add(f"-G{_path_text(request.global_properties_file)}")
    for key, value in request.global_properties.items():
        args.add(f"-G{key}={value}")


def add_proxy(request: RunRequest, args: ArgumentCollector) -> None:
    if request.proxy_scheme:
        args.add("-E", request.proxy_scheme)
    if request.proxy_host:
        args.add("-H", request.proxy_host)
    if request.proxy_port is not None:
        args.add("-P", parse_proxy_port(request.proxy_port))
    if request.proxy_username:
        args.add_secret("-u", request.proxy_username)
    if request.proxy_password:
        args.add_secret("-a", request.proxy_password)
    if request.non_proxy_hosts:
        args.add("-N", NON_PROXY_HOST_SEPARATOR.join(request.non_proxy_hosts))


def add_test_file(request: RunRequest, args: ArgumentCollector) -> None:
    args.add("-t", _path_text(_require_test_file(request)))


def add_result_file(request: RunRequest, args: ArgumentCollector, *, for_report: bool) -> None:
    if request.result_file is None:
        raise ConfigurationError(
            f"No result file could be derived for a {request.mode.value} task."
        )
    args.add("-g" if for_report else "-l", _path_text(request.result_file))


def add_report(request: RunRequest, args: ArgumentCollector) -> None:
    if request.report_dir is None:
        raise ConfigurationError(
            f"No report directory could be derived for a {request.mode.value} task."
        )
    args.add("-o", _path_text(request.report_dir))


def add_delete(request: RunRequest, args: ArgumentCollector) -> None:
    if request.delete_results:
        args.add("-f")


def add_remote(request: RunRequest, args: ArgumentCollector) -> None:
    if request.enable_remote_execution:
        args.add("-r")
        if request.exit_remote_servers:
            args.add("-X")
    elif request.exit_remote_servers:
        LOGGER.warning(
            "exit_remote_servers is ignored because enable_remote_execution is disabled."
        )


def parse_proxy_port(raw_port: str) -> str:
    """Validate the proxy port and return its canonical text.

    Raises:
      ConfigurationError: If the port is not a number in the TCP port range.
    """
    try:
        port = int(str(raw_port).strip())
    except ValueError as exc:
        raise ConfigurationError(f"Port must be a valid number! Got >{raw_port}<") from exc
    if not 0 < port <= MAX_PORT:
        raise ConfigurationError(f"Port must be between 1 and {MAX_PORT}! Got >{raw_port}<")
    return str(port)


def _require_test_file(request: RunRequest) -> Path:
    if request.test_file is None:
        raise ConfigurationError(f"A test plan is required for a {request.mode.value} task.")
    return request.test_file


def _path_text(path: Path) -> str:
    return str(path.absolute())
