"""Configure and execute Apache JMeter load tests from a YAML project file."""
