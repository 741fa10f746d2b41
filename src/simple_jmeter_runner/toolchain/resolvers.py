"""Locate JMeter artifacts on the local file system."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from simple_jmeter_runner.configuration import ToolSettings

from .dependency import DependencyDescriptor

JMETER_HOME_ENV = "JMETER_HOME"
DEFAULT_REPOSITORY = Path("~/.m2/repository")


class ToolResolutionError(Exception):
    """Raised when an artifact cannot be located."""


class ToolResolver(Protocol):
    """Turns a dependency declaration into a jar file."""

    def resolve(self, descriptor: DependencyDescriptor) -> Path: ...

    def runtime_libraries(self) -> tuple[Path, ...]: ...

    def resource_dir(self) -> Path | None: ...


class InstallationResolver:
    """Resolve artifacts inside an unpacked JMeter distribution."""

    def __init__(self, home: Path) -> None:
        self.home = home

    def candidates(self, descriptor: DependencyDescriptor) -> tuple[Path, ...]:
        plain = f"{descriptor.name}.jar"
        return (
            self.home / "bin" / plain,
            self.home / "bin" / descriptor.file_name,
            self.home / "lib" / "ext" / plain,
            self.home / "lib" / "ext" / descriptor.file_name,
            self.home / "lib" / descriptor.file_name,
        )

    def resolve(self, descriptor: DependencyDescriptor) -> Path:
        return _first_existing(descriptor, self.candidates(descriptor))

    def runtime_libraries(self) -> tuple[Path, ...]:
        lib_dir = self.home / "lib"
        if not lib_dir.is_dir():
            return ()
        return tuple(sorted(path for path in lib_dir.glob("*.jar") if path.is_file()))

    def resource_dir(self) -> Path | None:
        bin_dir = self.home / "bin"
        return bin_dir if bin_dir.is_dir() else None


class RepositoryResolver:
    """Resolve artifacts inside a Maven-layout repository directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def candidates(self, descriptor: DependencyDescriptor) -> tuple[Path, ...]:
        group_dir = self.root.joinpath(*descriptor.group.split("."))
        return (group_dir / descriptor.name / descriptor.version / descriptor.file_name,)

    def resolve(self, descriptor: DependencyDescriptor) -> Path:
        return _first_existing(descriptor, self.candidates(descriptor))

    def runtime_libraries(self) -> tuple[Path, ...]:
        return ()

    def resource_dir(self) -> Path | None:
        return None


class ChainedResolver:
    """Ask each resolver in turn; the first hit wins."""

    def __init__(self, resolvers: Sequence[InstallationResolver | RepositoryResolver]) -> None:
        self.resolvers = tuple(resolvers)

    def resolve(self, descriptor: DependencyDescriptor) -> Path:
        tried: list[Path] = []
        for resolver in self.resolvers:
            try:
                return resolver.resolve(descriptor)
            except ToolResolutionError:
                tried.extend(resolver.candidates(descriptor))
        raise ToolResolutionError(_not_found_message(descriptor, tried))

    def runtime_libraries(self) -> tuple[Path, ...]:
        libraries: list[Path] = []
        for resolver in self.resolvers:
            libraries.extend(resolver.runtime_libraries())
        return tuple(libraries)

    def resource_dir(self) -> Path | None:
        for resolver in self.resolvers:
            directory = resolver.resource_dir()
            if directory is not None:
                return directory
        return None


def default_resolver(
    tool: ToolSettings, environ: Mapping[str, str] | None = None
) -> ChainedResolver:
    """Build the resolver chain for a tool: explicit settings, JMETER_HOME, ~/.m2."""
    env = os.environ if environ is None else environ
    resolvers: list[InstallationResolver | RepositoryResolver] = []
    if tool.home is not None:
        resolvers.append(InstallationResolver(tool.home))
    elif env.get(JMETER_HOME_ENV):
        resolvers.append(InstallationResolver(Path(env[JMETER_HOME_ENV]).expanduser()))
    if tool.repository is not None:
        resolvers.append(RepositoryResolver(tool.repository))
    resolvers.append(RepositoryResolver(DEFAULT_REPOSITORY.expanduser()))
    return ChainedResolver(resolvers)


def _first_existing(descriptor: DependencyDescriptor, candidates: Sequence[Path]) -> Path:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise ToolResolutionError(_not_found_message(descriptor, candidates))


def _not_found_message(descriptor: DependencyDescriptor, tried: Sequence[Path]) -> str:
    locations = ", ".join(str(path) for path in tried) or "<no locations configured>"
    return f"Could not resolve {descriptor.notation}; looked in: {locations}"
