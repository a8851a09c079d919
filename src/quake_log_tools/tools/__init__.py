"""
Quake Log Command Line Tools

This package provides the command line tools that build match reports from
server logs and export them to JSON, CSV or Excel.
"""

from .log_report import LogReportTool

__all__ = [
    'LogReportTool',
]
