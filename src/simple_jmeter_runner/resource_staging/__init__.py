"""Resource staging domain exports."""

from .staging import (
    LOG_CONFIG,
    MAIN_PROPERTIES,
    REPORT_GENERATOR_PROPERTIES,
    REPORT_TEMPLATE,
    SAVESERVICE_PROPERTIES,
    UPGRADE_PROPERTIES,
    ResourceStagingError,
    bundled_resource,
    stage_file,
    stage_report_template,
    stage_run_resources,
)

__all__ = [
    "LOG_CONFIG",
    "MAIN_PROPERTIES",
    "REPORT_GENERATOR_PROPERTIES",
    "REPORT_TEMPLATE",
    "SAVESERVICE_PROPERTIES",
    "UPGRADE_PROPERTIES",
    "ResourceStagingError",
    "bundled_resource",
    "stage_file",
    "stage_report_template",
    "stage_run_resources",
]
