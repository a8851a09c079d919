#!/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name="quake_log_tools",
    version="0.1.0",
    description="Python tools for Quake III: Arena server log parsing and match kill reports",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.7",
    install_requires=[
        "pandas>=1.0.0",
        "openpyxl>=3.0.0",
    ],
    extras_require={
        "test": ["pytest>=6.0"],
    },
    entry_points={
        "console_scripts": [
            "quake-log-report=quake_log_tools.tools.log_report:main",
            "quake-report-to-excel=quake_log_tools.tools.report_to_excel:main",
        ],
    },
)
