"""Costing report generator for creating job costing DataFrames.

This module turns costed jobs into a flat pandas DataFrame (one row per job)
for display and CSV export.
"""

import datetime as dt
import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from job_costing.calculators.job_calculator import JobCostingResult
from job_costing.models.job import Job
from job_costing.models.job_type import JobType

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Job ID",
    "Date",
    "Day",
    "Job Type",
    "Dispatch Type",
    "Driver",
    "Dispatcher",
    "Hours of Job",
    "Hours of Driver",
    "Gross Amount",
    "Driver Pay",
    "Estimated Fuel",
    "Estimated Revenue",
    "Invoice Status",
]


class CostingReportGenerator:
    """Generate a costing DataFrame from jobs and their costing results.

    Example:
        >>> generator = CostingReportGenerator(jobs, results, job_types)
        >>> df = generator.generate()
        >>> df["Gross Amount"].sum()
        815.0
    """

    def __init__(
        self,
        jobs: List[Job],
        results: List[JobCostingResult],
        job_types: Optional[Dict[str, JobType]] = None,
    ):
        """Initialize with jobs and their results (same order).

        Args:
            jobs: Costed jobs
            results: Costing results, one per job
            job_types: Job types keyed by id, used for the job type title

        Raises:
            ValueError: If jobs and results do not line up
        """
        if len(jobs) != len(results):
            raise ValueError(
                f"Got {len(jobs)} job(s) but {len(results)} costing result(s)"
            )
        self.jobs = jobs
        self.results = results
        self.job_types = job_types or {}

    def generate(self) -> pd.DataFrame:
        """Build the report DataFrame (empty with all columns when no jobs)."""
        if not self.jobs:
            return pd.DataFrame(columns=REPORT_COLUMNS)

        rows = [self._build_row(job, result) for job, result in zip(self.jobs, self.results)]
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def write_csv(self, path: Union[str, Path]) -> Path:
        """Write the report to a CSV file and return its path."""
        path = Path(path)
        df = self.generate()
        df.to_csv(path, index=False)
        logger.info(f"Wrote costing report with {len(df)} row(s) to {path}")
        return path

    def _build_row(self, job: Job, result: JobCostingResult) -> Dict:
        job_type = self.job_types.get(job.job_type_id) if job.job_type_id else None
        return {
            "Job ID": job.job_id,
            "Date": self._format_date(job.job_date),
            "Day": result.day_of_job or "",
            "Job Type": job_type.title if job_type else (job.job_type_id or ""),
            "Dispatch Type": result.dispatch_type.value if result.dispatch_type else "",
            "Driver": job.driver_id or "",
            "Dispatcher": job.dispatcher_id or "",
            "Hours of Job": self._to_float(result.hours_of_job),
            "Hours of Driver": self._to_float(result.hours_of_driver),
            "Gross Amount": self._to_float(result.job_gross_amount),
            "Driver Pay": self._to_float(result.driver_pay),
            "Estimated Fuel": self._to_float(result.estimated_fuel),
            "Estimated Revenue": self._to_float(result.estimated_revenue),
            "Invoice Status": job.invoice_status.value,
        }

    @staticmethod
    def _format_date(date: Optional[dt.date]) -> str:
        return date.isoformat() if date else ""

    @staticmethod
    def _to_float(value: Decimal) -> float:
        # Amounts are already rounded to cents, so float is exact enough for display
        return float(value)
