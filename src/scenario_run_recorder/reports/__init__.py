"""Derived report exports."""

from .rich_report import render_rich_report, write_rich_report
from .run_projection import RunProjection, project_run
from .summary_report import SummaryReportFormatter, render_summary_report, write_summary_report

__all__ = [
    "RunProjection",
    "SummaryReportFormatter",
    "project_run",
    "render_rich_report",
    "render_summary_report",
    "write_rich_report",
    "write_summary_report",
]
