"""Prepare the directory layout JMeter expects below the build directory."""

from __future__ import annotations

import dataclasses
import logging
import shutil
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from simple_jmeter_runner.configuration import ToolSettings

from .dependency import (
    DependencyDescriptor,
    config_dependency,
    declare_component_dependencies,
    declare_tool_dependency,
)
from .resolvers import ToolResolutionError, ToolResolver, default_resolver

LOGGER = logging.getLogger(__name__)

ARCHIVE_METADATA_DIR = "META-INF/"


@dataclass(frozen=True)
class ToolLayout:
    """Directories of one prepared JMeter tool directory.

    ``defaults_dir`` holds the stock ``bin`` resources of the resolved JMeter
    version, or is ``None`` when none were found and bundled copies apply.
    """

    tool_dir: Path
    bin_dir: Path
    lib_dir: Path
    ext_dir: Path
    junit_dir: Path
    config_dir: Path
    jar: Path
    defaults_dir: Path | None = None

    @classmethod
    def for_tool(cls, tool_dir: Path, tool: ToolSettings) -> ToolLayout:
        bin_dir = tool_dir / "bin"
        lib_dir = tool_dir / "lib"
        return cls(
            tool_dir=tool_dir,
            bin_dir=bin_dir,
            lib_dir=lib_dir,
            ext_dir=lib_dir / "ext",
            junit_dir=lib_dir / "junit",
            config_dir=tool_dir / "config",
            jar=bin_dir / f"{tool.name}-{tool.version}.jar",
        )

    def directories(self) -> tuple[Path, ...]:
        return (self.tool_dir, self.bin_dir, self.lib_dir, self.ext_dir, self.junit_dir)


def setup_tool_directory(
    tool: ToolSettings, tool_dir: Path, *, resolver: ToolResolver | None = None
) -> ToolLayout:
    """Resolve the JMeter jars and copy them into ``tool_dir``.

    The main jar goes to ``bin``, core components and plugins to ``lib/ext``,
    runtime and tool libraries to ``lib``. The configuration archive of the
    same JMeter version is unpacked below ``config``.

    Raises:
      ToolResolutionError: If an artifact cannot be located or copied.
    """
    active_resolver = resolver or default_resolver(tool)
    layout = ToolLayout.for_tool(tool_dir, tool)
    for directory in layout.directories():
        directory.mkdir(parents=True, exist_ok=True)

    tool_dependency = declare_tool_dependency(tool)
    main_jar = active_resolver.resolve(tool_dependency)
    _copy_file(main_jar, layout.jar)
    LOGGER.info("Using JMeter %s from %s", tool.version, main_jar)

    components = [
        active_resolver.resolve(descriptor)
        for descriptor in declare_component_dependencies(tool, tool_dependency)
    ]
    copy_to_dir(components, layout.ext_dir)
    copy_to_dir(tool.plugins, layout.ext_dir)
    copy_to_dir(active_resolver.runtime_libraries(), layout.lib_dir)
    copy_to_dir(tool.libraries, layout.lib_dir)
    defaults_dir = _install_default_resources(tool, tool_dependency, active_resolver, layout)
    return dataclasses.replace(layout, defaults_dir=defaults_dir)


def copy_to_dir(files: Iterable[Path], target_dir: Path) -> list[Path]:
    """Copy files into a directory, skipping files already present there."""
    copied = []
    for source in files:
        destination = target_dir / source.name
        if not destination.exists():
            _copy_file(source, destination)
        copied.append(destination)
    return copied


def extract_archive(archive: Path, target_dir: Path) -> list[Path]:
    """Unpack a jar into ``target_dir``, replacing what an earlier setup left there.

    Manifest entries below ``META-INF`` are skipped.
    """
    try:
        if target_dir.exists():
            shutil.rmtree(target_dir)
        with zipfile.ZipFile(archive) as jar:
            members = [
                name for name in jar.namelist() if not name.startswith(ARCHIVE_METADATA_DIR)
            ]
            jar.extractall(target_dir, members=members)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ToolResolutionError(f"Failed to extract {archive} to {target_dir}: {exc}") from exc
    LOGGER.debug("Extracted %d entries of %s to %s", len(members), archive, target_dir)
    return [target_dir / name for name in members]


def _install_default_resources(
    tool: ToolSettings,
    tool_dependency: DependencyDescriptor,
    resolver: ToolResolver,
    layout: ToolLayout,
) -> Path | None:
    descriptor = config_dependency(tool)
    if tool_dependency.excludes_artifact(descriptor):
        LOGGER.debug("Skipping excluded dependency %s", descriptor.notation)
        return resolver.resource_dir()
    try:
        archive = resolver.resolve(descriptor)
    except ToolResolutionError:
        resource_dir = resolver.resource_dir()
        LOGGER.info(
            "%s not found, default resources come from %s",
            descriptor.notation,
            resource_dir or "the bundled copies",
        )
        return resource_dir
    extract_archive(archive, layout.config_dir)
    return layout.config_dir / "bin"


def _copy_file(source: Path, destination: Path) -> None:
    try:
        shutil.copy2(source, destination)
    except OSError as exc:
        raise ToolResolutionError(f"Failed to copy {source} to {destination}: {exc}") from exc
    LOGGER.debug("Copied %s to %s", source, destination)
