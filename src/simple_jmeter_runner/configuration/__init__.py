"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    ConfigurationError,
    build_project_configuration,
    load_project_configuration,
    parse_task_settings,
)
from .override_merge import (
    discover_test_file,
    layer_task_settings,
    merge_mapping,
    merge_scalar,
    merge_sequence,
    resolve_run_request,
    resolve_test_file,
)
from .run_request import RunRequest
from .runtime_settings import (
    ExecutionMode,
    ExtensionSettings,
    ProjectConfiguration,
    TaskSettings,
    ToolSettings,
)
from .settings_values import UNSET, Unset, is_set

__all__ = [
    "ExecutionMode",
    "ExtensionSettings",
    "ProjectConfiguration",
    "RunRequest",
    "TaskSettings",
    "ToolSettings",
    "UNSET",
    "Unset",
    "is_set",
    "ConfigurationError",
    "build_project_configuration",
    "load_project_configuration",
    "parse_task_settings",
    "discover_test_file",
    "layer_task_settings",
    "merge_mapping",
    "merge_scalar",
    "merge_sequence",
    "resolve_run_request",
    "resolve_test_file",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
