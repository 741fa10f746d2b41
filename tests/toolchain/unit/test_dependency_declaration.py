"""Dependency declaration tests."""

from __future__ import annotations

from simple_jmeter_runner.configuration import ToolSettings
from simple_jmeter_runner.toolchain import (
    DependencyDescriptor,
    component_dependency,
    config_dependency,
    declare_component_dependencies,
    declare_tool_dependency,
)


def test_tool_dependency_excludes_invalid_bom_reference() -> None:
    descriptor = declare_tool_dependency(ToolSettings())

    assert descriptor.notation == "org.apache.jmeter:ApacheJMeter:5.4.3"
    assert descriptor.file_name == "ApacheJMeter-5.4.3.jar"
    assert descriptor.excludes == [("org.apache.jmeter", "bom")]


def test_configure_dependency_callback_is_invoked_once() -> None:
    seen: list[DependencyDescriptor] = []

    def _configure(descriptor: DependencyDescriptor) -> None:
        seen.append(descriptor)
        descriptor.exclude("org.example", "unwanted")

    descriptor = declare_tool_dependency(ToolSettings(configure_dependency=_configure))

    assert seen == [descriptor]
    assert ("org.example", "unwanted") in descriptor.excludes


def test_component_dependency_uses_tool_version_by_default() -> None:
    tool = ToolSettings(version="5.5")

    assert component_dependency(tool, "http").notation == (
        "org.apache.jmeter:ApacheJMeter_http:5.5"
    )
    assert component_dependency(tool, "http", "5.4.1").version == "5.4.1"


def test_component_dependencies_follow_configured_components() -> None:
    tool = ToolSettings(components=("core", "http"))

    descriptors = declare_component_dependencies(tool, declare_tool_dependency(tool))

    assert [descriptor.name for descriptor in descriptors] == [
        "ApacheJMeter_core",
        "ApacheJMeter_http",
    ]


def test_exclude_ignores_duplicates() -> None:
    descriptor = DependencyDescriptor(group="g", name="n", version="1")
    descriptor.exclude("g", "bom")
    descriptor.exclude("g", "bom")

    assert descriptor.excludes == [("g", "bom")]


def test_components_excluded_by_the_tool_dependency_are_dropped() -> None:
    def _configure(descriptor: DependencyDescriptor) -> None:
        descriptor.exclude("org.apache.jmeter", "ApacheJMeter_mongodb")

    tool = ToolSettings(components=("core", "mongodb", "http"), configure_dependency=_configure)

    descriptors = declare_component_dependencies(tool, declare_tool_dependency(tool))

    assert [descriptor.name for descriptor in descriptors] == [
        "ApacheJMeter_core",
        "ApacheJMeter_http",
    ]


def test_excludes_artifact_matches_group_and_name() -> None:
    tool_dependency = declare_tool_dependency(ToolSettings())
    bom = DependencyDescriptor(group="org.apache.jmeter", name="bom", version="5.4.3")
    foreign_bom = DependencyDescriptor(group="org.example", name="bom", version="1")

    assert tool_dependency.excludes_artifact(bom)
    assert not tool_dependency.excludes_artifact(foreign_bom)


def test_config_dependency_shares_tool_group_and_version() -> None:
    descriptor = config_dependency(ToolSettings(version="5.5"))

    assert descriptor.notation == "org.apache.jmeter:ApacheJMeter_config:5.5"
    assert ("org.apache.jmeter", "bom") in descriptor.excludes
