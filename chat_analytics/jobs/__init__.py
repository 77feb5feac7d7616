"""
Reporting Jobs for Chat Analytics.

This module provides report generation built on the analytics engine:
- Markdown analysis report (analysis_report.py)

Usage:
    from chat_analytics.jobs import generate_analysis_report, write_analysis_report

    markdown = generate_analysis_report(summary)
    path = write_analysis_report(records, "reports/analysis-report.md")
"""

from chat_analytics.jobs.analysis_report import (
    generate_analysis_report,
    write_analysis_report,
)

__all__ = [
    "generate_analysis_report",
    "write_analysis_report",
]
