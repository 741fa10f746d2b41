"""Merge extension defaults with task overrides into a RunRequest."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

from .loader import ConfigurationError
from .run_request import RunRequest
from .runtime_settings import ExecutionMode, ExtensionSettings, TaskSettings
from .settings_values import UNSET, Unset, is_set

T = TypeVar("T")

JMX_SUFFIX = ".jmx"
RESULT_SUFFIX = ".jtl"
LOG_SUFFIX = ".log"
DEFAULT_LOG_STEM = "jmeter"

_MAPPING_FIELDS = frozenset({"system_properties", "jmeter_properties", "global_properties"})
_SEQUENCE_FIELDS = frozenset(
    {"system_property_files", "additional_property_files", "jvm_args", "non_proxy_hosts"}
)
_LAYER_IDENTITY_FIELDS = frozenset({"name", "mode"})


def merge_mapping(
    base: Mapping[str, str], override: Mapping[str, str] | None | Unset
) -> dict[str, str]:
    """Put override entries on top of a copy of base; None drops everything."""
    if override is UNSET:
        return dict(base)
    if override is None:
        return {}
    merged = dict(base)
    merged.update(override)
    return merged


def merge_sequence(base: Sequence[T], override: Sequence[T] | None | Unset) -> tuple[T, ...]:
    """Append override items to base, keeping duplicates; None drops everything."""
    if override is UNSET:
        return tuple(base)
    if override is None:
        return ()
    return (*base, *override)


def merge_scalar(base: T | None, override: T | None | Unset) -> T | None:
    """Replace base with override unless the override was never touched."""
    return override if is_set(override) else base


def layer_task_settings(base: TaskSettings, top: TaskSettings) -> TaskSettings:
    """Apply another override layer (e.g. command line options) on top of a task."""
    values: dict[str, Any] = {}
    for settings_field in dataclasses.fields(TaskSettings):
        name = settings_field.name
        if name in _LAYER_IDENTITY_FIELDS:
            continue
        lower = getattr(base, name)
        upper = getattr(top, name)
        if not is_set(upper):
            continue
        if upper is None or not is_set(lower) or lower is None:
            values[name] = upper
        elif name in _MAPPING_FIELDS:
            values[name] = {**lower, **upper}
        elif name in _SEQUENCE_FIELDS:
            values[name] = (*lower, *upper)
        else:
            values[name] = upper
    return dataclasses.replace(base, **values)


def resolve_test_file(
    jmx_file: str | None | Unset, jmx_root_dir: Path, *, required: bool
) -> Path | None:
    """Resolve the test plan of a task.

    Relative names are resolved against ``jmx_root_dir``. When no name is
    given and the file is required, the root directory must hold exactly
    one ``.jmx`` file. A required plan that was named must exist.

    Raises:
      ConfigurationError: If the test plan is required but missing or cannot
        be resolved unambiguously.
    """
    if jmx_file is UNSET:
        if not required:
            return None
        return discover_test_file(jmx_root_dir)
    if jmx_file is None:
        if required:
            raise ConfigurationError("A test plan (jmx_file) is required but was set to null.")
        return None
    candidate = Path(jmx_file)
    if not candidate.is_absolute():
        candidate = jmx_root_dir / candidate
    if required and not candidate.is_file():
        raise ConfigurationError(f"Test plan not found: {candidate}")
    return candidate


def discover_test_file(jmx_root_dir: Path) -> Path:
    """Return the single test plan directly inside the root directory."""
    if not jmx_root_dir.is_dir():
        raise ConfigurationError(
            f"No jmx_file given and JMX root directory does not exist: {jmx_root_dir}"
        )
    candidates = sorted(
        path for path in jmx_root_dir.iterdir() if path.is_file() and path.suffix == JMX_SUFFIX
    )
    if not candidates:
        raise ConfigurationError(
            f"No jmx_file given and no {JMX_SUFFIX} file found in {jmx_root_dir}"
        )
    if len(candidates) > 1:
        names = ", ".join(path.name for path in candidates)
        raise ConfigurationError(
            f"No jmx_file given and {jmx_root_dir} contains several {JMX_SUFFIX} files: {names}"
        )
    return candidates[0]


def resolve_run_request(extension: ExtensionSettings, task: TaskSettings) -> RunRequest:
    """Merge extension defaults and task overrides into one immutable snapshot.

    Raises:
      ConfigurationError: If the test plan of a run or report task cannot be
        resolved.
    """
    test_file = resolve_test_file(
        task.jmx_file,
        extension.jmx_root_dir,
        required=task.mode is not ExecutionMode.GUI,
    )
    stem = test_file.stem if test_file else None
    result_dir = _merge_directory(extension.result_dir, task.result_dir)
    report_root = _merge_directory(extension.report_dir, task.report_dir)

    return RunRequest(
        mode=task.mode,
        test_file=test_file,
        result_file=result_dir / f"{stem}{RESULT_SUFFIX}" if stem else None,
        report_dir=report_root / stem if stem else None,
        report_template=merge_scalar(extension.tool.report_template_dir, task.report_template),
        system_property_files=merge_sequence(
            extension.system_property_files, task.system_property_files
        ),
        system_properties=merge_mapping(extension.system_properties, task.system_properties),
        main_property_file=merge_scalar(extension.main_property_file, task.main_property_file),
        additional_property_files=merge_sequence(
            extension.additional_property_files, task.additional_property_files
        ),
        jmeter_properties=merge_mapping(extension.jmeter_properties, task.jmeter_properties),
        log_config=merge_scalar(extension.log_config, task.log_config),
        log_output_file=_resolve_log_output_file(extension, task, result_dir, stem),
        global_properties_file=merge_scalar(
            extension.global_properties_file, task.global_properties_file
        ),
        global_properties=merge_mapping(extension.global_properties, task.global_properties),
        max_heap=merge_scalar(extension.max_heap, task.max_heap),
        jvm_args=merge_sequence(extension.jvm_args, task.jvm_args),
        proxy_scheme=merge_scalar(extension.proxy_scheme, task.proxy_scheme),
        proxy_host=merge_scalar(extension.proxy_host, task.proxy_host),
        proxy_port=merge_scalar(extension.proxy_port, task.proxy_port),
        non_proxy_hosts=(
            None
            if task.non_proxy_hosts is None
            else merge_sequence(extension.non_proxy_hosts, task.non_proxy_hosts)
        ),
        proxy_username=merge_scalar(extension.proxy_username, task.proxy_username),
        proxy_password=merge_scalar(extension.proxy_password, task.proxy_password),
        generate_report=bool(merge_scalar(False, task.generate_report)),
        delete_results=bool(merge_scalar(False, task.delete_results)),
        enable_remote_execution=bool(
            merge_scalar(extension.enable_remote_execution, task.enable_remote_execution)
        ),
        exit_remote_servers=bool(
            merge_scalar(extension.exit_remote_servers, task.exit_remote_servers)
        ),
    )


def _merge_directory(base: Path, override: Path | Unset) -> Path:
    return override if is_set(override) else base


def _resolve_log_output_file(
    extension: ExtensionSettings,
    task: TaskSettings,
    result_dir: Path,
    stem: str | None,
) -> Path | None:
    if is_set(task.log_output_file):
        return task.log_output_file
    if is_set(extension.log_output_file):
        return extension.log_output_file
    return result_dir / f"{stem or DEFAULT_LOG_STEM}{LOG_SUFFIX}"
