"""Project file scaffold tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from simple_jmeter_runner.configuration import (
    ExecutionMode,
    build_placeholder_configuration,
    load_project_configuration,
    write_placeholder_configuration,
)


def test_placeholder_configuration_is_valid_yaml_with_example_tasks() -> None:
    parsed = yaml.safe_load(build_placeholder_configuration())

    assert set(parsed) == {"jmeter", "tasks"}
    assert parsed["tasks"]["runTest"]["type"] == "run"
    assert parsed["tasks"]["reportTest"]["type"] == "report"
    assert parsed["tasks"]["gui"]["type"] == "gui"


def test_written_placeholder_loads_as_project_configuration(tmp_path: Path) -> None:
    destination = write_placeholder_configuration(tmp_path / "jmeter.yaml")

    configuration = load_project_configuration(destination)

    assert destination == (tmp_path / "jmeter.yaml").resolve()
    assert configuration.tasks["runTest"].mode is ExecutionMode.RUN
    assert configuration.tasks["gui"].mode is ExecutionMode.GUI


def test_write_placeholder_refuses_to_overwrite(tmp_path: Path) -> None:
    destination = tmp_path / "jmeter.yaml"
    destination.write_text("keep: me\n", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(destination)

    assert destination.read_text(encoding="utf-8") == "keep: me\n"
