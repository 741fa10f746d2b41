"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .settings_values import UNSET, Unset

if TYPE_CHECKING:
    from simple_jmeter_runner.toolchain.dependency import DependencyDescriptor


DEFAULT_JMX_ROOT_DIR = Path("src/test/jmeter")
DEFAULT_BUILD_DIR = Path("build")
DEFAULT_RESULT_DIR = Path("test-results/jmeter")
DEFAULT_REPORT_DIR = Path("reports/jmeter")
APACHE_COMPONENTS: tuple[str, ...] = (
    "bolt",
    "components",
    "core",
    "ftp",
    "functions",
    "http",
    "java",
    "jdbc",
    "jms",
    "junit",
    "ldap",
    "mail",
    "mongodb",
    "native",
    "tcp",
)


class ExecutionMode(str, Enum):
    """How one task invokes JMeter."""

    RUN = "run"
    REPORT = "report"
    GUI = "gui"


@dataclass(frozen=True)
class ToolSettings:  # pylint: disable=too-many-instance-attributes
    """Identity of the JMeter build to execute and its tool-level resources."""

    group: str = "org.apache.jmeter"
    name: str = "ApacheJMeter"
    version: str = "5.4.3"
    main_class: str = "org.apache.jmeter.NewDriver"
    home: Path | None = None
    repository: Path | None = None
    java: str | None = None
    report_template_dir: Path | None = None
    reportgenerator_properties: Path | None = None
    saveservice_properties: Path | None = None
    upgrade_properties: Path | None = None
    components: tuple[str, ...] = APACHE_COMPONENTS
    plugins: tuple[Path, ...] = ()
    libraries: tuple[Path, ...] = ()
    configure_dependency: Callable[[DependencyDescriptor], None] | None = field(
        default=None, compare=False
    )


@dataclass(frozen=True)
class ExtensionSettings:  # pylint: disable=too-many-instance-attributes
    """Project-wide defaults every task starts from."""

    jmx_root_dir: Path
    result_dir: Path
    report_dir: Path
    tool: ToolSettings = field(default_factory=ToolSettings)
    system_property_files: tuple[Path, ...] = ()
    system_properties: Mapping[str, str] = field(default_factory=dict)
    main_property_file: Path | None = None
    additional_property_files: tuple[Path, ...] = ()
    jmeter_properties: Mapping[str, str] = field(default_factory=dict)
    log_config: Path | None = None
    log_output_file: Path | None | Unset = UNSET
    global_properties_file: Path | None = None
    global_properties: Mapping[str, str] = field(default_factory=dict)
    max_heap: str | None = None
    jvm_args: tuple[str, ...] = ()
    proxy_scheme: str | None = None
    proxy_host: str | None = None
    proxy_port: str | None = None
    non_proxy_hosts: tuple[str, ...] = ()
    proxy_username: str | None = None
    proxy_password: str | None = None
    enable_remote_execution: bool = False
    exit_remote_servers: bool = False

    @classmethod
    def with_defaults(cls, project_dir: Path, build_dir: Path, **values) -> ExtensionSettings:
        """Create extension settings whose directories default below the project."""
        values.setdefault("jmx_root_dir", project_dir / DEFAULT_JMX_ROOT_DIR)
        values.setdefault("result_dir", build_dir / DEFAULT_RESULT_DIR)
        values.setdefault("report_dir", build_dir / DEFAULT_REPORT_DIR)
        return cls(**values)


@dataclass(frozen=True)
class TaskSettings:  # pylint: disable=too-many-instance-attributes
    """Task-level overrides; every untouched value inherits from the extension."""

    name: str
    mode: ExecutionMode
    jmx_file: str | None | Unset = UNSET
    generate_report: bool | Unset = UNSET
    delete_results: bool | Unset = UNSET
    report_template: Path | None | Unset = UNSET
    result_dir: Path | Unset = UNSET
    report_dir: Path | Unset = UNSET
    system_property_files: tuple[Path, ...] | None | Unset = UNSET
    system_properties: Mapping[str, str] | None | Unset = UNSET
    main_property_file: Path | None | Unset = UNSET
    additional_property_files: tuple[Path, ...] | None | Unset = UNSET
    jmeter_properties: Mapping[str, str] | None | Unset = UNSET
    log_config: Path | None | Unset = UNSET
    log_output_file: Path | None | Unset = UNSET
    global_properties_file: Path | None | Unset = UNSET
    global_properties: Mapping[str, str] | None | Unset = UNSET
    max_heap: str | None | Unset = UNSET
    jvm_args: tuple[str, ...] | None | Unset = UNSET
    proxy_scheme: str | None | Unset = UNSET
    proxy_host: str | None | Unset = UNSET
    proxy_port: str | None | Unset = UNSET
    non_proxy_hosts: tuple[str, ...] | None | Unset = UNSET
    proxy_username: str | None | Unset = UNSET
    proxy_password: str | None | Unset = UNSET
    enable_remote_execution: bool | Unset = UNSET
    exit_remote_servers: bool | Unset = UNSET


@dataclass(frozen=True)
class ProjectConfiguration:
    """Top-level configuration aggregate of one project file."""

    path: Path | None
    project_dir: Path
    build_dir: Path
    extension: ExtensionSettings
    tasks: Mapping[str, TaskSettings] = field(default_factory=dict)

    @property
    def tool(self) -> ToolSettings:
        return self.extension.tool

    @property
    def tool_dir(self) -> Path:
        return self.build_dir / "jmeter"
