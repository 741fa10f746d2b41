"""Command line argument domain exports."""

from .argument_builder import (
    add_base_arguments,
    build_arguments,
    build_gui_arguments,
    build_report_arguments,
    build_run_arguments,
    parse_proxy_port,
)
from .argument_list import MASK, ArgumentCollector, ArgumentList

__all__ = [
    "MASK",
    "ArgumentCollector",
    "ArgumentList",
    "add_base_arguments",
    "build_arguments",
    "build_gui_arguments",
    "build_report_arguments",
    "build_run_arguments",
    "parse_proxy_port",
]
