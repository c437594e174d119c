"""Report generation and utilization tools."""

from .generate_report import register_ai_report_tools
from .utilization_report import register_utilization_tools

__all__ = ["register_ai_report_tools", "register_utilization_tools"]
