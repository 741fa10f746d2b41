"""Task orchestration tests."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
from simple_jmeter_runner.configuration import (
    ConfigurationError,
    ExecutionMode,
    ExtensionSettings,
    ProjectConfiguration,
    TaskSettings,
    ToolSettings,
)
from simple_jmeter_runner.run_execution import (
    TaskExecutionError,
    TaskRequest,
    execute_jmeter_task,
)
from simple_jmeter_runner.toolchain import DependencyDescriptor, ToolResolutionError


class _FakeResolver:
    def __init__(self, root: Path, config_archive: Path | None = None) -> None:
        self.root = root
        self.config_archive = config_archive

    def resolve(self, descriptor: DependencyDescriptor) -> Path:
        if descriptor.name == "ApacheJMeter_config":
            if self.config_archive is None:
                raise ToolResolutionError(f"Could not resolve {descriptor.notation}")
            return self.config_archive
        jar = self.root / descriptor.file_name
        jar.write_bytes(b"jar")
        return jar

    def runtime_libraries(self) -> tuple[Path, ...]:
        return ()

    def resource_dir(self) -> Path | None:
        return None


def _configuration(tmp_path: Path, **extension_values) -> ProjectConfiguration:
    project_dir = tmp_path / "project"
    plans = project_dir / "src" / "test" / "jmeter"
    plans.mkdir(parents=True)
    (plans / "Test.jmx").write_text("<jmeterTestPlan/>", encoding="utf-8")
    build_dir = project_dir / "build"
    extension_values.setdefault("tool", ToolSettings(java="java", components=("core",)))
    return ProjectConfiguration(
        path=None,
        project_dir=project_dir,
        build_dir=build_dir,
        extension=ExtensionSettings.with_defaults(project_dir, build_dir, **extension_values),
    )


def _resolver(tmp_path: Path, config_archive: Path | None = None) -> _FakeResolver:
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir(exist_ok=True)
    return _FakeResolver(artifacts, config_archive)


def test_run_task_prepares_tool_directory_and_launches_java(tmp_path: Path) -> None:
    configuration = _configuration(tmp_path, max_heap="16m")
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN, generate_report=True)
    captured_calls: list[tuple[tuple[str, ...], Path]] = []

    def _fake_run(command: tuple[str, ...], cwd: Path) -> int:
        captured_calls.append((command, cwd))
        return 0

    outcome = execute_jmeter_task(
        TaskRequest(configuration=configuration, task=task),
        resolver=_resolver(tmp_path),
        run_command=_fake_run,
    )

    bin_dir = configuration.build_dir / "jmeter" / "bin"
    command, cwd = captured_calls[0]
    assert cwd == bin_dir
    assert command[:4] == ("java", "-Xmx16m", "-cp", str(bin_dir / "ApacheJMeter-5.4.3.jar"))
    assert command[4] == "org.apache.jmeter.NewDriver"
    assert command[5:] == outcome.arguments.tokens
    assert outcome.exit_code == 0
    assert (bin_dir / "jmeter.properties").is_file()
    assert (bin_dir / "report-template").is_dir()
    assert (configuration.build_dir / "test-results" / "jmeter").is_dir()
    assert (configuration.build_dir / "reports" / "jmeter").is_dir()
    assert not (configuration.build_dir / "reports" / "jmeter" / "Test").exists()


def test_overrides_are_layered_on_top_of_task(tmp_path: Path) -> None:
    configuration = _configuration(tmp_path)
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN, jmeter_properties={"a": "1"})
    overrides = TaskSettings(
        name="runTest", mode=ExecutionMode.RUN, jmeter_properties={"b": "2"}, max_heap="32m"
    )

    outcome = execute_jmeter_task(
        TaskRequest(configuration=configuration, task=task, overrides=overrides),
        resolver=_resolver(tmp_path),
        run_command=lambda command, cwd: 0,
    )

    assert outcome.request.jmeter_properties == {"a": "1", "b": "2"}
    assert "-Xmx32m" in outcome.command


def test_invalid_settings_fail_before_tool_directory_is_touched(tmp_path: Path) -> None:
    configuration = _configuration(tmp_path, proxy_port="N0P0r7")
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN)

    with pytest.raises(ConfigurationError, match="N0P0r7"):
        execute_jmeter_task(
            TaskRequest(configuration=configuration, task=task),
            resolver=_resolver(tmp_path),
            run_command=lambda command, cwd: 0,
        )

    assert not configuration.tool_dir.exists()


def test_failed_jmeter_run_propagates_exit_code(tmp_path: Path) -> None:
    configuration = _configuration(tmp_path)
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN)

    with pytest.raises(TaskExecutionError) as exc_info:
        execute_jmeter_task(
            TaskRequest(configuration=configuration, task=task),
            resolver=_resolver(tmp_path),
            run_command=lambda command, cwd: 2,
        )

    assert exc_info.value.exit_code == 2


def test_stock_resources_from_configuration_archive_are_staged(tmp_path: Path) -> None:
    archive = tmp_path / "ApacheJMeter_config-5.4.3.jar"
    with zipfile.ZipFile(archive, "w") as jar:
        jar.writestr("bin/saveservice.properties", "_version=5.0\nstock=true\n")
        jar.writestr("bin/report-template/index.html.fmkr", "stock")
    configuration = _configuration(tmp_path)
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN, generate_report=True)

    outcome = execute_jmeter_task(
        TaskRequest(configuration=configuration, task=task),
        resolver=_resolver(tmp_path, archive),
        run_command=lambda command, cwd: 0,
    )

    saveservice = outcome.working_dir / "saveservice.properties"
    assert saveservice.read_text(encoding="utf-8") == "_version=5.0\nstock=true\n"
    template = outcome.working_dir / "report-template" / "index.html.fmkr"
    assert template.read_text(encoding="utf-8") == "stock"


def test_missing_test_plan_fails_before_java_is_launched(tmp_path: Path) -> None:
    configuration = _configuration(tmp_path)
    task = TaskSettings(name="runTest", mode=ExecutionMode.RUN, jmx_file="Missing.jmx")
    launched: list[tuple[str, ...]] = []

    def _fake_run(command: tuple[str, ...], cwd: Path) -> int:
        launched.append(command)
        return 0

    with pytest.raises(ConfigurationError, match="Missing.jmx"):
        execute_jmeter_task(
            TaskRequest(configuration=configuration, task=task),
            resolver=_resolver(tmp_path),
            run_command=_fake_run,
        )

    assert launched == []
    assert not configuration.tool_dir.exists()
