"""
Report to Excel Tool

Flattens a log report into tables (match summary, player scores, kills per
means of death) and writes them as an Excel workbook or as CSV files, which
is easier to sort and chart in spreadsheet software than the nested JSON.
"""

import argparse
import logging
import os
from typing import Dict, List, Optional, Any

from ..base import JSONTool, QuakeTool

try:
    import pandas as pd
    import openpyxl
except ImportError:
    raise ImportError("This tool requires pandas and openpyxl. Install with: pip install pandas openpyxl")

__all__ = ['ReportToExcelTool', 'main']

logger = logging.getLogger(__name__)


class ReportToExcelTool(JSONTool):
    """Tool for converting a JSON log report to Excel or CSV tables."""

    SUMMARY_SHEET = 'summary'
    KILLS_SHEET = 'kills'
    MEANS_SHEET = 'kills_by_means'

    SUMMARY_COLUMNS = ['game', 'total_kills', 'players']
    KILLS_COLUMNS = ['game', 'player', 'kills']
    MEANS_COLUMNS = ['game', 'means', 'kills']

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(config)
        self.initialize_directories()

    def build_tables(self, report: Dict[str, Any]) -> Dict[str, 'pd.DataFrame']:
        """
        Flatten a report dictionary into data frames.

        Args:
            report: Report as produced by ``LogReport.to_dict()``.

        Returns:
            Data frames keyed by sheet name.
        """
        summary_rows: List[Dict[str, Any]] = []
        kill_rows: List[Dict[str, Any]] = []
        means_rows: List[Dict[str, Any]] = []

        for game, match in report.items():
            summary_rows.append({
                'game': game,
                'total_kills': match['total_kills'],
                'players': ', '.join(match['players']),
            })
            for player, kills in match['kills'].items():
                kill_rows.append({'game': game, 'player': player, 'kills': kills})
            for means, kills in match['kills_by_means'].items():
                means_rows.append({'game': game, 'means': means, 'kills': kills})

        return {
            self.SUMMARY_SHEET: pd.DataFrame(summary_rows, columns=self.SUMMARY_COLUMNS),
            self.KILLS_SHEET: pd.DataFrame(kill_rows, columns=self.KILLS_COLUMNS),
            self.MEANS_SHEET: pd.DataFrame(means_rows, columns=self.MEANS_COLUMNS),
        }

    def write_excel(self, report: Dict[str, Any], excel_file: str) -> str:
        """
        Write the report tables to an Excel workbook, one sheet per table.

        Args:
            report: Report dictionary.
            excel_file: Path to the output workbook.

        Returns:
            Path to the written workbook.
        """
        excel_path = self.output_path_for(excel_file)
        tables = self.build_tables(report)

        with pd.ExcelWriter(excel_path, engine='openpyxl') as writer:
            for sheet_name, df in tables.items():
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                worksheet = writer.sheets[sheet_name]

                # Widen columns to fit their longest value
                for idx, column in enumerate(df.columns, 1):
                    letter = openpyxl.utils.get_column_letter(idx)
                    width = max([len(str(column))] + [len(str(value)) for value in df[column]])
                    worksheet.column_dimensions[letter].width = width + 2

        logger.info(f"Report exported to {excel_path}")
        return excel_path

    def write_csv(self, report: Dict[str, Any], csv_file: str) -> List[str]:
        """
        Write the player score and means of death tables as CSV files.

        ``report.csv`` becomes ``report_kills.csv`` and
        ``report_kills_by_means.csv``.

        Args:
            report: Report dictionary.
            csv_file: Base path for the output files.

        Returns:
            Paths to the written files.
        """
        tables = self.build_tables(report)
        stem, _ = os.path.splitext(csv_file)

        written = []
        for sheet_name in (self.KILLS_SHEET, self.MEANS_SHEET):
            csv_path = self.output_path_for(f"{stem}_{sheet_name}.csv")
            tables[sheet_name].to_csv(csv_path, index=False)
            logger.info(f"Report table '{sheet_name}' written to {csv_path}")
            written.append(csv_path)

        return written

    def run(self, input_path: str, output_path: str, to_csv: bool = False) -> int:
        """
        Run the report to Excel tool.

        Args:
            input_path: JSON report file.
            output_path: Output workbook, or base path for the CSV files.
            to_csv: Write CSV files instead of a workbook.

        Returns:
            0 on success, 1 on failure
        """
        try:
            report = self.read_json(input_path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read report {input_path}: {e}")
            return 1

        if not isinstance(report, dict):
            logger.error(f"Not a log report: {input_path}")
            return 1

        try:
            if to_csv:
                self.write_csv(report, output_path)
            else:
                self.write_excel(report, output_path)
        except (OSError, KeyError, TypeError) as e:
            logger.error(f"Failed to export report: {e}")
            return 1

        return 0


def main():
    """
    Main entry point for the report to Excel command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Convert a JSON Quake log report to Excel or CSV tables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s report.json
    %(prog)s report.json -o stats.xlsx
    %(prog)s report.json -o stats.csv --csv

Configuration:
    - general.output_path: Directory for relative output paths
        """
    )
    parser.add_argument("input_path", help="JSON report written by quake-log-report")
    parser.add_argument("-o", "--output", help="Output file (default: timestamped file in the output directory)")
    parser.add_argument("--csv", action="store_true", help="Write CSV files instead of an Excel workbook")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    config = ReportToExcelTool.load_config(args.profile)
    tool = ReportToExcelTool(config)

    output_path = args.output
    if not output_path:
        output_path = tool.generate_timestamped_filename("quake_report", "csv" if args.csv else "xlsx")

    result = tool.run(args.input_path, output_path, to_csv=args.csv)

    if args.console:
        logger.info(f"Report export finished with status {result}")

    return result


if __name__ == "__main__":
    exit(main())
