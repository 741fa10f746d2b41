"""Toolchain domain exports."""

from .dependency import (
    DependencyDescriptor,
    apply_bom_workaround,
    component_dependency,
    config_dependency,
    declare_component_dependencies,
    declare_tool_dependency,
)
from .resolvers import (
    ChainedResolver,
    InstallationResolver,
    RepositoryResolver,
    ToolResolutionError,
    ToolResolver,
    default_resolver,
)
from .tool_setup import ToolLayout, copy_to_dir, extract_archive, setup_tool_directory

__all__ = [
    "DependencyDescriptor",
    "apply_bom_workaround",
    "component_dependency",
    "config_dependency",
    "declare_component_dependencies",
    "declare_tool_dependency",
    "ChainedResolver",
    "InstallationResolver",
    "RepositoryResolver",
    "ToolResolutionError",
    "ToolResolver",
    "default_resolver",
    "ToolLayout",
    "copy_to_dir",
    "extract_archive",
    "setup_tool_directory",
]
