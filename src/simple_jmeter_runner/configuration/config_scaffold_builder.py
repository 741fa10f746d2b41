"""Project file scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "jmeter.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Project file for simple-jmeter-runner.
# Values under `jmeter` are project-wide defaults; every task inherits them.
# Maps and lists in a task are added to the defaults, scalars replace them.
# Set a task value to null to drop the inherited value entirely.

# project_dir: "."        # defaults to the directory of this file
# build_dir: "build"      # relative to project_dir

jmeter:
  tool:
    version: "5.4.3"
    # home: "/opt/apache-jmeter-5.4.3"   # or set JMETER_HOME
    # repository: "~/.m2/repository"     # Maven-layout directory holding the jars
    # java: "/usr/bin/java"              # defaults to JAVA_HOME/bin/java, then java
    # report_template_dir: "custom-template/report-template"
    # plugins: []                        # jars copied to lib/ext
    # libraries: []                      # jars copied to lib
  jmx_root_dir: "src/test/jmeter"
  # result_dir: "build/test-results/jmeter"
  # report_dir: "build/reports/jmeter"
  # log_config: "log4j2.xml"
  # main_property_file: "jmeter.properties"
  # additional_property_files: []
  # system_property_files: []
  system_properties: {}
  jmeter_properties: {}
  # global_properties_file: "global.properties"
  global_properties: {}
  # max_heap: "1g"
  jvm_args: []
  # proxy:
  #   scheme: "https"
  #   host: "proxy.example.com"
  #   port: 8080
  #   non_proxy_hosts: ["localhost"]
  #   username: "<OPTIONAL>"
  #   password: "<OPTIONAL>"
  enable_remote_execution: false
  exit_remote_servers: false

tasks:
  runTest:
    type: run
    jmx_file: "Test.jmx"
    generate_report: false
    delete_results: false
  reportTest:
    type: report
    jmx_file: "Test.jmx"
    delete_results: true
  gui:
    type: gui
"""


def build_placeholder_configuration() -> str:
    """Build a project file template with defaults and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the project file template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Project file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
