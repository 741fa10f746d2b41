"""Dependency declarations for the JMeter tool."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from simple_jmeter_runner.configuration import ToolSettings

LOGGER = logging.getLogger(__name__)

COMPONENT_PREFIX = "ApacheJMeter_"
CONFIG_COMPONENT = "config"


@dataclass
class DependencyDescriptor:
    """Coordinates of one artifact plus the modules to exclude from it."""

    group: str
    name: str
    version: str
    excludes: list[tuple[str, str]] = field(default_factory=list)

    @property
    def notation(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"

    @property
    def file_name(self) -> str:
        return f"{self.name}-{self.version}.jar"

    def exclude(self, group: str, module: str) -> None:
        if (group, module) not in self.excludes:
            self.excludes.append((group, module))

    def excludes_artifact(self, descriptor: DependencyDescriptor) -> bool:
        return (descriptor.group, descriptor.name) in self.excludes


def declare_tool_dependency(tool: ToolSettings) -> DependencyDescriptor:
    """Declare the main JMeter artifact and let the tool callback adjust it."""
    descriptor = DependencyDescriptor(group=tool.group, name=tool.name, version=tool.version)
    apply_bom_workaround(descriptor, tool)
    if tool.configure_dependency is not None:
        tool.configure_dependency(descriptor)
    return descriptor


def component_dependency(
    tool: ToolSettings, component: str, version: str | None = None
) -> DependencyDescriptor:
    """Declare one core JMeter component such as ``http`` or ``core``."""
    descriptor = DependencyDescriptor(
        group=tool.group,
        name=f"{COMPONENT_PREFIX}{component}",
        version=version or tool.version,
    )
    return apply_bom_workaround(descriptor, tool)


def config_dependency(tool: ToolSettings) -> DependencyDescriptor:
    """Declare the archive holding JMeter's ``bin`` resources and report template."""
    return component_dependency(tool, CONFIG_COMPONENT)


def declare_component_dependencies(
    tool: ToolSettings, tool_dependency: DependencyDescriptor
) -> list[DependencyDescriptor]:
    """Declare the configured components, minus those ``tool_dependency`` excludes."""
    descriptors = []
    for component in tool.components:
        descriptor = component_dependency(tool, component)
        if tool_dependency.excludes_artifact(descriptor):
            LOGGER.debug("Skipping excluded dependency %s", descriptor.notation)
            continue
        LOGGER.debug("Adding dependency for %s", descriptor.notation)
        descriptors.append(descriptor)
    return descriptors


def apply_bom_workaround(
    descriptor: DependencyDescriptor, tool: ToolSettings
) -> DependencyDescriptor:
    """Exclude the invalid ``bom`` reference of the JMeter module descriptors.

    See https://bz.apache.org/bugzilla/show_bug.cgi?id=64465
    """
    descriptor.exclude(tool.group, "bom")
    return descriptor
