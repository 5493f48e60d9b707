"""Writers for job costing reports."""

from job_costing.writers.costing_report import REPORT_COLUMNS, CostingReportGenerator

__all__ = ["REPORT_COLUMNS", "CostingReportGenerator"]
