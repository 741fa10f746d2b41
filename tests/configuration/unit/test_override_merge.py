"""Override merge tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from simple_jmeter_runner.configuration import (
    UNSET,
    ConfigurationError,
    ExecutionMode,
    ExtensionSettings,
    TaskSettings,
    ToolSettings,
    discover_test_file,
    is_set,
    layer_task_settings,
    merge_mapping,
    merge_scalar,
    merge_sequence,
    resolve_run_request,
    resolve_test_file,
)


def _extension(tmp_path: Path, **values) -> ExtensionSettings:
    plans = tmp_path / "src" / "test" / "jmeter"
    plans.mkdir(parents=True, exist_ok=True)
    (plans / "Test.jmx").write_text("<jmeterTestPlan/>", encoding="utf-8")
    return ExtensionSettings.with_defaults(tmp_path, tmp_path / "build", **values)


def _run_task(**values) -> TaskSettings:
    values.setdefault("jmx_file", "Test.jmx")
    return TaskSettings(name="runTest", mode=ExecutionMode.RUN, **values)


def test_merge_mapping_is_additive_and_task_wins() -> None:
    base = {"a": "1", "b": "2"}

    merged = merge_mapping(base, {"b": "3", "c": "4"})

    assert merged == {"a": "1", "b": "3", "c": "4"}
    assert base == {"a": "1", "b": "2"}


def test_merge_mapping_unset_inherits_copy_and_none_drops() -> None:
    base = {"a": "1"}

    inherited = merge_mapping(base, UNSET)
    inherited["b"] = "2"

    assert base == {"a": "1"}
    assert merge_mapping(base, None) == {}


def test_merge_sequence_appends_and_keeps_duplicates() -> None:
    assert merge_sequence(("a", "b"), ("b", "c")) == ("a", "b", "b", "c")
    assert merge_sequence(("a",), UNSET) == ("a",)
    assert merge_sequence(("a",), None) == ()


def test_merge_scalar_replaces_unless_unset() -> None:
    assert merge_scalar("1g", UNSET) == "1g"
    assert merge_scalar("1g", "2g") == "2g"
    assert merge_scalar("1g", None) is None


def test_task_property_overrides_extension_value(tmp_path: Path) -> None:
    extension = _extension(tmp_path, jmeter_properties={"a": "1", "b": "2"})
    task = _run_task(jmeter_properties={"b": "3", "c": "4"})

    request = resolve_run_request(extension, task)

    assert request.jmeter_properties == {"a": "1", "b": "3", "c": "4"}
    assert extension.jmeter_properties == {"a": "1", "b": "2"}


def test_task_explicit_none_suppresses_extension_scalar(tmp_path: Path) -> None:
    extension = _extension(tmp_path, max_heap="1g", main_property_file=tmp_path / "j.properties")
    task = _run_task(max_heap=None, main_property_file=None)

    request = resolve_run_request(extension, task)

    assert request.max_heap is None
    assert request.main_property_file is None


def test_unset_task_values_inherit_extension_values(tmp_path: Path) -> None:
    extension = _extension(tmp_path, max_heap="1g", jvm_args=("-Da=b",))

    request = resolve_run_request(extension, _run_task())

    assert request.max_heap == "1g"
    assert request.jvm_args == ("-Da=b",)


def test_non_proxy_hosts_append_with_duplicates_and_none_suppresses(tmp_path: Path) -> None:
    extension = _extension(tmp_path, non_proxy_hosts=("localhost", "a.example"))

    appended = resolve_run_request(extension, _run_task(non_proxy_hosts=("a.example",)))
    suppressed = resolve_run_request(extension, _run_task(non_proxy_hosts=None))

    assert appended.non_proxy_hosts == ("localhost", "a.example", "a.example")
    assert suppressed.non_proxy_hosts is None


def test_derived_output_locations_follow_test_file_stem(tmp_path: Path) -> None:
    extension = _extension(tmp_path)

    request = resolve_run_request(extension, _run_task(jmx_file="Test.jmx"))

    assert request.test_file == tmp_path / "src" / "test" / "jmeter" / "Test.jmx"
    assert request.result_file == tmp_path / "build" / "test-results" / "jmeter" / "Test.jtl"
    assert request.report_dir == tmp_path / "build" / "reports" / "jmeter" / "Test"
    assert request.log_output_file == tmp_path / "build" / "test-results" / "jmeter" / "Test.log"


def test_task_result_dir_override_moves_result_and_log_files(tmp_path: Path) -> None:
    extension = _extension(tmp_path)

    request = resolve_run_request(extension, _run_task(result_dir=tmp_path / "custom"))

    assert request.result_file == tmp_path / "custom" / "Test.jtl"
    assert request.log_output_file == tmp_path / "custom" / "Test.log"


def test_log_output_file_can_be_disabled_or_replaced(tmp_path: Path) -> None:
    extension = _extension(tmp_path, log_output_file=tmp_path / "all.log")

    inherited = resolve_run_request(extension, _run_task())
    disabled = resolve_run_request(extension, _run_task(log_output_file=None))

    assert inherited.log_output_file == tmp_path / "all.log"
    assert disabled.log_output_file is None


def test_gui_without_test_file_uses_default_log_name(tmp_path: Path) -> None:
    extension = _extension(tmp_path)
    task = TaskSettings(name="gui", mode=ExecutionMode.GUI)

    request = resolve_run_request(extension, task)

    assert request.test_file is None
    assert request.result_file is None
    assert request.report_dir is None
    assert request.log_output_file == tmp_path / "build" / "test-results" / "jmeter" / "jmeter.log"


def test_report_template_prefers_task_then_tool(tmp_path: Path) -> None:
    tool = ToolSettings(report_template_dir=tmp_path / "tool-template")
    extension = _extension(tmp_path, tool=tool)

    from_tool = resolve_run_request(extension, _run_task())
    from_task = resolve_run_request(extension, _run_task(report_template=tmp_path / "mine"))

    assert from_tool.report_template == tmp_path / "tool-template"
    assert from_task.report_template == tmp_path / "mine"


def test_flags_default_to_false(tmp_path: Path) -> None:
    request = resolve_run_request(_extension(tmp_path), _run_task())

    assert request.generate_report is False
    assert request.delete_results is False
    assert request.enable_remote_execution is False
    assert request.exit_remote_servers is False
    assert request.produces_report is False


def test_report_task_always_produces_report(tmp_path: Path) -> None:
    task = TaskSettings(name="report", mode=ExecutionMode.REPORT, jmx_file="Test.jmx")

    request = resolve_run_request(_extension(tmp_path), task)

    assert request.produces_report is True


def test_absolute_test_file_is_used_as_is(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "Other.jmx"
    absolute.parent.mkdir()
    absolute.write_text("<jmeterTestPlan/>", encoding="utf-8")

    assert resolve_test_file(str(absolute), tmp_path / "root", required=True) == absolute


def test_named_test_plan_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Test plan not found"):
        resolve_test_file("Missing.jmx", tmp_path, required=True)


def test_run_task_with_missing_test_plan_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Missing.jmx"):
        resolve_run_request(_extension(tmp_path), _run_task(jmx_file="Missing.jmx"))


def test_gui_task_accepts_test_plan_that_does_not_exist_yet(tmp_path: Path) -> None:
    assert resolve_test_file("New.jmx", tmp_path, required=False) == tmp_path / "New.jmx"


def test_discovery_uses_single_test_plan(tmp_path: Path) -> None:
    (tmp_path / "Only.jmx").write_text("<jmeterTestPlan/>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")

    assert discover_test_file(tmp_path) == tmp_path / "Only.jmx"
    assert resolve_test_file(UNSET, tmp_path, required=True) == tmp_path / "Only.jmx"


def test_discovery_fails_on_several_test_plans(tmp_path: Path) -> None:
    (tmp_path / "A.jmx").write_text("", encoding="utf-8")
    (tmp_path / "B.jmx").write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="A.jmx, B.jmx"):
        discover_test_file(tmp_path)


def test_discovery_fails_without_test_plan(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="no .jmx file found"):
        discover_test_file(tmp_path)


def test_discovery_fails_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        resolve_test_file(UNSET, tmp_path / "missing", required=True)


def test_gui_mode_skips_discovery(tmp_path: Path) -> None:
    (tmp_path / "Only.jmx").write_text("", encoding="utf-8")

    assert resolve_test_file(UNSET, tmp_path, required=False) is None


def test_layer_task_settings_applies_command_line_layer() -> None:
    task = _run_task(
        jmeter_properties={"a": "1"},
        jvm_args=("-Da=b",),
        max_heap="1g",
    )
    options = TaskSettings(
        name="ignored",
        mode=ExecutionMode.GUI,
        jmeter_properties={"a": "2", "b": "3"},
        jvm_args=("-Dc=d",),
        max_heap="2g",
    )

    layered = layer_task_settings(task, options)

    assert layered.name == "runTest"
    assert layered.mode is ExecutionMode.RUN
    assert layered.jmeter_properties == {"a": "2", "b": "3"}
    assert layered.jvm_args == ("-Da=b", "-Dc=d")
    assert layered.max_heap == "2g"
    assert layered.jmx_file == "Test.jmx"


def test_layer_task_settings_keeps_task_when_layer_is_untouched() -> None:
    task = _run_task(max_heap=None, jmeter_properties={"a": "1"})

    layered = layer_task_settings(task, TaskSettings(name="runTest", mode=ExecutionMode.RUN))

    assert layered == task


def test_is_set_treats_explicit_none_as_touched() -> None:
    assert not is_set(UNSET)
    assert is_set(None)
    assert is_set("")
    assert is_set(())
