"""Copy configuration resources into JMeter's working directory."""

from __future__ import annotations

import logging
import shutil
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from simple_jmeter_runner.configuration import RunRequest, ToolSettings

LOGGER = logging.getLogger(__name__)

BUNDLED_PACKAGE = "simple_jmeter_runner.resource_staging"
BUNDLED_DIR = "bundled"
LOG_CONFIG = "log4j2.xml"
MAIN_PROPERTIES = "jmeter.properties"
UPGRADE_PROPERTIES = "upgrade.properties"
SAVESERVICE_PROPERTIES = "saveservice.properties"
REPORT_GENERATOR_PROPERTIES = "reportgenerator.properties"
REPORT_TEMPLATE = "report-template"


class ResourceStagingError(Exception):
    """Raised when a resource cannot be put into the working directory."""


def stage_run_resources(
    bin_dir: Path, request: RunRequest, tool: ToolSettings, defaults_dir: Path | None = None
) -> list[Path]:
    """Stage every resource the invocation needs and return the staged paths.

    Resources the user did not configure come from ``defaults_dir`` when it
    holds them, and from the bundled copies otherwise.
    """
    _ensure_directory(bin_dir)
    staged = [
        stage_file(request.log_config, LOG_CONFIG, bin_dir, defaults_dir),
        stage_file(request.main_property_file, MAIN_PROPERTIES, bin_dir, defaults_dir),
        stage_file(tool.upgrade_properties, UPGRADE_PROPERTIES, bin_dir, defaults_dir),
        stage_file(tool.saveservice_properties, SAVESERVICE_PROPERTIES, bin_dir, defaults_dir),
    ]
    if request.produces_report:
        staged.append(
            stage_file(
                tool.reportgenerator_properties,
                REPORT_GENERATOR_PROPERTIES,
                bin_dir,
                defaults_dir,
            )
        )
        staged.append(stage_report_template(request.report_template, bin_dir, defaults_dir))
    return staged


def stage_file(
    source: Path | None, resource_name: str, target_dir: Path, defaults_dir: Path | None = None
) -> Path:
    """Copy the user file, or a default, to ``target_dir/resource_name``.

    An existing file at the destination is overwritten.
    """
    destination = target_dir / resource_name
    if source is None:
        stock = _stock_resource(defaults_dir, resource_name)
        if stock is None or not stock.is_file():
            LOGGER.debug("Extracting bundled %s", resource_name)
            _write_bytes(destination, bundled_resource(resource_name).read_bytes())
            return destination
        source = stock
    elif not source.is_file():
        raise ResourceStagingError(f"Resource file for {resource_name} not found: {source}")
    LOGGER.debug("Copying %s to %s", source, destination)
    try:
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise ResourceStagingError(f"Failed to copy {source} to {destination}: {exc}") from exc
    return destination


def stage_report_template(
    template_dir: Path | None, target_dir: Path, defaults_dir: Path | None = None
) -> Path:
    """Replace the report template below ``target_dir`` as a whole.

    Content of a template staged by an earlier run never survives, unless the
    configured template directory is missing, which fails before anything is
    removed.
    """
    destination = target_dir / REPORT_TEMPLATE
    if template_dir is not None and not template_dir.is_dir():
        raise ResourceStagingError(f"Report template directory not found: {template_dir}")
    if template_dir is None:
        stock = _stock_resource(defaults_dir, REPORT_TEMPLATE)
        if stock is not None and stock.is_dir():
            template_dir = stock
    try:
        if destination.exists():
            shutil.rmtree(destination)
        if template_dir is None:
            LOGGER.debug("Extracting bundled %s", REPORT_TEMPLATE)
            _extract_tree(bundled_resource(REPORT_TEMPLATE), destination)
        else:
            LOGGER.debug("Copying report template %s", template_dir)
            shutil.copytree(template_dir, destination)
    except OSError as exc:
        raise ResourceStagingError(
            f"Failed to stage report template into {destination}: {exc}"
        ) from exc
    return destination


def bundled_resource(name: str) -> Traversable:
    """Return a packaged default resource."""
    resource = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_DIR).joinpath(name)
    if not resource.is_file() and not resource.is_dir():
        raise ResourceStagingError(f"Bundled resource missing: {name}")
    return resource


def _stock_resource(defaults_dir: Path | None, name: str) -> Path | None:
    if defaults_dir is None:
        return None
    return defaults_dir / name


def _extract_tree(source: Traversable, destination: Path) -> None:
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        target = destination / entry.name
        if entry.is_dir():
            _extract_tree(entry, target)
        else:
            target.write_bytes(entry.read_bytes())


def _write_bytes(destination: Path, content: bytes) -> None:
    try:
        destination.write_bytes(content)
    except OSError as exc:
        raise ResourceStagingError(f"Failed to write {destination}: {exc}") from exc


def _ensure_directory(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ResourceStagingError(f"Failed to create {directory}: {exc}") from exc
