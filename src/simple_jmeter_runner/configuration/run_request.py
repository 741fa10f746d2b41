"""Resolved configuration snapshot for one JMeter invocation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .runtime_settings import ExecutionMode


@dataclass(frozen=True)
class RunRequest:  # pylint: disable=too-many-instance-attributes
    """Extension defaults merged with task overrides; every value is final."""

    mode: ExecutionMode
    test_file: Path | None
    result_file: Path | None
    report_dir: Path | None
    report_template: Path | None = None
    system_property_files: tuple[Path, ...] = ()
    system_properties: Mapping[str, str] = field(default_factory=dict)
    main_property_file: Path | None = None
    additional_property_files: tuple[Path, ...] = ()
    jmeter_properties: Mapping[str, str] = field(default_factory=dict)
    log_config: Path | None = None
    log_output_file: Path | None = None
    global_properties_file: Path | None = None
    global_properties: Mapping[str, str] = field(default_factory=dict)
    max_heap: str | None = None
    jvm_args: tuple[str, ...] = ()
    proxy_scheme: str | None = None
    proxy_host: str | None = None
    proxy_port: str | None = None
    non_proxy_hosts: tuple[str, ...] | None = ()
    proxy_username: str | None = None
    proxy_password: str | None = None
    generate_report: bool = False
    delete_results: bool = False
    enable_remote_execution: bool = False
    exit_remote_servers: bool = False

    @property
    def produces_report(self) -> bool:
        """Whether this invocation renders the HTML dashboard."""
        return self.mode is ExecutionMode.REPORT or (
            self.mode is ExecutionMode.RUN and self.generate_report
        )
