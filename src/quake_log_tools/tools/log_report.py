#!/usr/bin/env python3
"""
Quake Log Tools - Log Report

Parses a Quake III: Arena server log and reports, for every match, the
players, their kill score and the kills per means of death. The report is
printed as JSON or exported as CSV/Excel tables.
"""

import argparse
import json
import logging
import sys
from typing import Dict, Any, List, Optional, Union

from ..base import JSONTool, QuakeTool
from ..log.parser import LogWalker
from ..report import LogReport

__all__ = ['LogReportTool', 'main']

logger = logging.getLogger(__name__)


class LogReportTool(JSONTool):
    """
    Builds the match report of a Quake server log.
    """

    DEFAULT_LOG_FILE = "qgames.log"
    DEFAULT_APP_LOG = "script.log"
    FORMATS = ("json", "csv", "xlsx")

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the report tool with configuration.

        Args:
            config: Configuration dictionary from Config class
        """
        super().__init__(config)
        self.initialize_directories()

        self.log_file = self.get_config('paths.log_file', self.DEFAULT_LOG_FILE)
        self.encoding = self.get_config('report.encoding', 'utf-8')
        self.report_format = self.get_config('report.format', 'json')

    def build_report(self, input_path: Optional[str] = None) -> LogReport:
        """
        Parse a log file and build its report.

        Args:
            input_path: Log file, plain or ``.gz``. Defaults to the configured log.

        Returns:
            The log report.

        Raises:
            OSError: If the log cannot be read.
            ReportError: If a match report cannot be built.
        """
        resolved_path = self.resolve_path(input_path or self.log_file)

        with LogWalker.from_path(resolved_path, encoding=self.encoding) as walker:
            report = LogReport.generate(walker)

        logger.info(f"Parsed {len(report.matches)} matches from {resolved_path}")
        return report

    def write_report(self, report: LogReport, output_path: Optional[str] = None,
                     report_format: Optional[str] = None) -> Union[str, List[str], None]:
        """
        Serialize a report.

        Args:
            report: The log report.
            output_path: Output file. JSON goes to stdout when omitted.
            report_format: One of ``json``, ``csv`` or ``xlsx``.

        Returns:
            The written path (both table paths for CSV), or None when
            printed to stdout.
        """
        report_format = report_format or self.report_format
        if report_format not in self.FORMATS:
            raise ValueError(f"Unsupported report format: {report_format}")

        data = report.to_dict()

        if report_format == "json":
            if not output_path:
                json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
                sys.stdout.write("\n")
                return None
            return self.write_json(data, output_path)

        # Tabular exports need pandas, imported only when asked for
        from .report_to_excel import ReportToExcelTool

        exporter = ReportToExcelTool(self.config)
        if not output_path:
            output_path = self.generate_timestamped_filename("quake_report", report_format)
        if report_format == "csv":
            return exporter.write_csv(data, output_path)
        return exporter.write_excel(data, output_path)

    def run(self, input_path: Optional[str] = None, output_path: Optional[str] = None,
            report_format: Optional[str] = None) -> Dict[str, Any]:
        """
        Run the log report.

        Args:
            input_path: Log file to parse.
            output_path: Output file; JSON goes to stdout when omitted.
            report_format: Output format.

        Returns:
            Dictionary with the run results
        """
        report = self.build_report(input_path)
        written = self.write_report(report, output_path, report_format)

        return {
            "success": True,
            "match_count": len(report.matches),
            "kill_count": sum(match.total_kills for match in report.matches.values()),
            "output_file": written,
        }


def main(argv=None):
    """
    Main entry point for the log report command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Parse a Quake III: Arena log and report kills per match.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s qgames.log
    %(prog)s qgames.log.gz -l parser.log
    %(prog)s qgames.log -f xlsx -o report.xlsx

Configuration:
    - paths.log_file: Default log file to parse
    - paths.app_log: Default diagnostics log file
    - report.format: Default output format (json, csv, xlsx)
    - report.encoding: Text encoding of the log file
    - general.output_path: Directory for relative output paths
        """
    )
    parser.add_argument("input_path", nargs="?", default=None,
                        help=f"Log file to parse (default: configured log or {LogReportTool.DEFAULT_LOG_FILE})")
    parser.add_argument("-l", "--app-log", default=None,
                        help=f"Diagnostics log file, appended to (default: {LogReportTool.DEFAULT_APP_LOG})")
    parser.add_argument("-o", "--output", default=None,
                        help="Output file (default: JSON on stdout)")
    parser.add_argument("-f", "--format", choices=LogReportTool.FORMATS, default=None,
                        help="Output format (default: configured format or json)")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args(argv)

    try:
        config = LogReportTool.load_config(args.profile)
        tool = LogReportTool(config)

        app_log = args.app_log or tool.get_config('paths.app_log', LogReportTool.DEFAULT_APP_LOG)
        LogReportTool.add_file_logging(app_log, level=logging.getLogger().level)

        result = tool.run(args.input_path, args.output, args.format)

        if args.console:
            logger.info(f"Log report completed: {result}")

        return 0 if result["success"] else 1

    # LookupError: unknown report.encoding
    except (OSError, ValueError, LookupError) as e:
        logger.error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    exit(main())
