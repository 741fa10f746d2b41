"""Project file loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_BUILD_DIR,
    ExecutionMode,
    ExtensionSettings,
    ProjectConfiguration,
    TaskSettings,
    ToolSettings,
)


class ConfigurationError(Exception):
    """Raised when the project configuration is invalid."""


_OVERRIDE_KEYS = frozenset(
    {
        "result_dir",
        "report_dir",
        "system_property_files",
        "system_properties",
        "main_property_file",
        "additional_property_files",
        "jmeter_properties",
        "log_config",
        "log_output_file",
        "global_properties_file",
        "global_properties",
        "max_heap",
        "jvm_args",
        "proxy",
        "enable_remote_execution",
        "exit_remote_servers",
    }
)
_EXTENSION_KEYS = _OVERRIDE_KEYS | {"tool", "jmx_root_dir"}
_TASK_KEYS = _OVERRIDE_KEYS | {
    "type",
    "jmx_file",
    "generate_report",
    "delete_results",
    "report_template",
}
_PROXY_KEYS = frozenset({"scheme", "host", "port", "non_proxy_hosts", "username", "password"})
_TOOL_KEYS = frozenset(
    {
        "group",
        "name",
        "version",
        "main_class",
        "home",
        "repository",
        "java",
        "report_template_dir",
        "reportgenerator_properties",
        "saveservice_properties",
        "upgrade_properties",
        "components",
        "plugins",
        "libraries",
    }
)
_ROOT_KEYS = frozenset({"project_dir", "build_dir", "jmeter", "tasks"})
_MAPPING_VALUES = ("system_properties", "jmeter_properties", "global_properties")
_SEQUENCE_VALUES = (
    "system_property_files",
    "additional_property_files",
    "jvm_args",
    "non_proxy_hosts",
)
_NON_NULL_DIRECTORIES = ("result_dir", "report_dir")


def load_project_configuration(config_path: Path | str) -> ProjectConfiguration:
    """Load and validate the project file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Project file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse project file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Project file root must be a mapping.")

    return build_project_configuration(parsed, base_path=path.resolve().parent, path=path)


def build_project_configuration(
    parsed: Mapping[str, Any], *, base_path: Path, path: Path | None = None
) -> ProjectConfiguration:
    """Validate an already parsed project document."""
    _reject_unknown_keys(parsed, _ROOT_KEYS, "project file")
    project_dir = _path_value(parsed.get("project_dir"), base_path, "project_dir") or base_path
    build_dir = _path_value(parsed.get("build_dir"), project_dir, "build_dir") or (
        project_dir / DEFAULT_BUILD_DIR
    )

    extension = _parse_extension_section(parsed.get("jmeter"), project_dir, build_dir)
    tasks = _parse_tasks_section(parsed.get("tasks"), project_dir)

    return ProjectConfiguration(
        path=path,
        project_dir=project_dir,
        build_dir=build_dir,
        extension=extension,
        tasks=tasks,
    )


def _parse_extension_section(value: Any, project_dir: Path, build_dir: Path) -> ExtensionSettings:
    section = _optional_mapping(value, "jmeter")
    _reject_unknown_keys(section, _EXTENSION_KEYS, "jmeter")
    values = _parse_override_values(section, project_dir, "jmeter")
    for name in _MAPPING_VALUES + _SEQUENCE_VALUES:
        if name in values and values[name] is None:
            del values[name]
    for name in ("enable_remote_execution", "exit_remote_servers"):
        if values.get(name) is None:
            values.pop(name, None)
    if "jmx_root_dir" in section:
        values["jmx_root_dir"] = _require_path(
            section["jmx_root_dir"], project_dir, "jmeter.jmx_root_dir"
        )
    values["tool"] = _parse_tool_section(section.get("tool"), project_dir)
    return ExtensionSettings.with_defaults(project_dir, build_dir, **values)


def _parse_tool_section(value: Any, project_dir: Path) -> ToolSettings:
    section = _optional_mapping(value, "jmeter.tool")
    _reject_unknown_keys(section, _TOOL_KEYS, "jmeter.tool")
    values: dict[str, Any] = {}
    for name in ("group", "name", "version", "main_class"):
        if name in section:
            values[name] = _require_non_empty_string(section[name], f"jmeter.tool.{name}")
    if "java" in section:
        values["java"] = _optional_string(section["java"], "jmeter.tool.java")
    for name in (
        "home",
        "repository",
        "report_template_dir",
        "reportgenerator_properties",
        "saveservice_properties",
        "upgrade_properties",
    ):
        if name in section:
            values[name] = _path_value(section[name], project_dir, f"jmeter.tool.{name}")
    for name in ("plugins", "libraries"):
        if name in section:
            values[name] = _path_sequence(section[name], project_dir, f"jmeter.tool.{name}") or ()
    if "components" in section:
        values["components"] = (
            _string_sequence(section["components"], "jmeter.tool.components") or ()
        )
    return ToolSettings(**values)


def _parse_tasks_section(value: Any, project_dir: Path) -> dict[str, TaskSettings]:
    section = _optional_mapping(value, "tasks")
    tasks: dict[str, TaskSettings] = {}
    for raw_name, raw_task in section.items():
        name = _require_non_empty_string(raw_name, "task name")
        label = f"tasks.{name}"
        task_section = _optional_mapping(raw_task, label)
        _reject_unknown_keys(task_section, _TASK_KEYS, label)
        tasks[name] = parse_task_settings(task_section, name=name, base_path=project_dir)
    return tasks


def parse_task_settings(
    section: Mapping[str, Any], *, name: str, base_path: Path
) -> TaskSettings:
    """Validate one task definition; absent keys stay untouched."""
    label = f"tasks.{name}"
    mode = _parse_mode(section.get("type"), f"{label}.type")
    values = _parse_override_values(section, base_path, label)
    if "jmx_file" in section:
        values["jmx_file"] = _optional_string(section["jmx_file"], f"{label}.jmx_file")
    for flag in ("generate_report", "delete_results"):
        if flag in section:
            values[flag] = _require_bool(section[flag], f"{label}.{flag}")
    if "report_template" in section:
        values["report_template"] = _path_value(
            section["report_template"], base_path, f"{label}.report_template"
        )
    for flag in ("enable_remote_execution", "exit_remote_servers"):
        if flag in values and values[flag] is None:
            raise ConfigurationError(f"{label}.{flag} must be a boolean.")
    return TaskSettings(name=name, mode=mode, **values)


def _parse_override_values(
    section: Mapping[str, Any], base_path: Path, label: str
) -> dict[str, Any]:
    """Parse the keys shared by the extension and task layers.

    Only keys present in ``section`` end up in the result; an explicit null
    is kept as ``None``.
    """
    values: dict[str, Any] = {}
    for name in _NON_NULL_DIRECTORIES:
        if name in section:
            values[name] = _require_path(section[name], base_path, f"{label}.{name}")
    for name in (
        "main_property_file",
        "log_config",
        "log_output_file",
        "global_properties_file",
    ):
        if name in section:
            values[name] = _path_value(section[name], base_path, f"{label}.{name}")
    for name in ("system_property_files", "additional_property_files"):
        if name in section:
            values[name] = _path_sequence(section[name], base_path, f"{label}.{name}")
    for name in _MAPPING_VALUES:
        if name in section:
            values[name] = _string_mapping(section[name], f"{label}.{name}")
    if "jvm_args" in section:
        values["jvm_args"] = _string_sequence(section["jvm_args"], f"{label}.jvm_args")
    if "max_heap" in section:
        values["max_heap"] = _optional_string(section["max_heap"], f"{label}.max_heap")
    for flag in ("enable_remote_execution", "exit_remote_servers"):
        if flag in section:
            raw = section[flag]
            values[flag] = None if raw is None else _require_bool(raw, f"{label}.{flag}")
    if "proxy" in section:
        values.update(_parse_proxy_section(section["proxy"], f"{label}.proxy"))
    return values


def _parse_proxy_section(value: Any, label: str) -> dict[str, Any]:
    section = _optional_mapping(value, label)
    _reject_unknown_keys(section, _PROXY_KEYS, label)
    values: dict[str, Any] = {}
    for key in ("scheme", "host", "username", "password"):
        if key in section:
            values[f"proxy_{key}"] = _optional_string(section[key], f"{label}.{key}")
    if "port" in section:
        values["proxy_port"] = _port_text(section["port"], f"{label}.port")
    if "non_proxy_hosts" in section:
        values["non_proxy_hosts"] = _string_sequence(
            section["non_proxy_hosts"], f"{label}.non_proxy_hosts"
        )
    return values


def _parse_mode(value: Any, field_name: str) -> ExecutionMode:
    text = _require_non_empty_string(value, field_name).lower()
    try:
        return ExecutionMode(text)
    except ValueError as exc:
        allowed = ", ".join(mode.value for mode in ExecutionMode)
        raise ConfigurationError(f"{field_name} '{text}' must be one of: {allowed}.") from exc


def _reject_unknown_keys(section: Mapping[str, Any], allowed: frozenset[str], label: str) -> None:
    unknown = sorted(str(key) for key in section if key not in allowed)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in {label}: {', '.join(unknown)}")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _path_value(value: Any, base_path: Path, field_name: str) -> Path | None:
    if value is None:
        return None
    return _require_path(value, base_path, field_name)


def _require_path(value: Any, base_path: Path, field_name: str) -> Path:
    return _resolve_path(base_path, _require_non_empty_string(value, field_name))


def _path_sequence(value: Any, base_path: Path, field_name: str) -> tuple[Path, ...] | None:
    entries = _string_sequence(value, field_name)
    if entries is None:
        return None
    return tuple(_resolve_path(base_path, entry) for entry in entries)


def _string_sequence(value: Any, field_name: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _string_mapping(value: Any, field_name: str) -> dict[str, str] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{field_name} must be a mapping.")
    normalized: dict[str, str] = {}
    for key, item in value.items():
        key_text = _require_non_empty_string(str(key), f"{field_name} key")
        normalized[key_text] = _scalar_text(item, f"{field_name}.{key_text}")
    return normalized


def _scalar_text(value: Any, field_name: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    if value is None:
        return ""
    raise ConfigurationError(f"{field_name} must be a scalar value.")


def _port_text(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a number.")
    if isinstance(value, int):
        return str(value)
    return _optional_string(value, field_name)


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value
