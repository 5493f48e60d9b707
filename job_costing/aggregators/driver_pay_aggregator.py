"""Driver pay and monthly revenue summaries.

Reports over jobs whose derived fields have already been computed (see
``job_costing.calculators.job_calculator.apply_costing``):

- per-driver earnings, split into paid and outstanding pay
- per-month gross amount, driver pay and revenue
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import pandas as pd

from job_costing.calculators.money import to_cents
from job_costing.models.job import Job

logger = logging.getLogger(__name__)


@dataclass
class DriverPaySummary:
    """Earnings of one driver over a period.

    Attributes:
        driver_id: Driver identifier
        job_count: Number of jobs with computed pay
        total_hours: Sum of driver hours
        total_pay: Sum of driver pay
        paid_pay: Pay on jobs marked as driver paid
        outstanding_pay: Pay on jobs not yet paid to the driver

    Example:
        >>> summary = DriverPaySummary(
        ...     driver_id="d-1",
        ...     job_count=2,
        ...     total_hours=Decimal("9.50"),
        ...     total_pay=Decimal("237.50"),
        ...     paid_pay=Decimal("100.00"),
        ...     outstanding_pay=Decimal("137.50"),
        ... )
        >>> summary.outstanding_pay
        Decimal('137.50')
    """

    driver_id: str
    job_count: int
    total_hours: Decimal
    total_pay: Decimal
    paid_pay: Decimal
    outstanding_pay: Decimal


class DriverPayAggregator:
    """Summarizes driver earnings and monthly revenue from costed jobs.

    Jobs without a driver, without computed pay, or outside the requested
    date range are skipped. A date range excludes undated jobs.
    """

    def summarize(
        self,
        jobs: Iterable[Job],
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        driver_id: Optional[str] = None,
    ) -> List[DriverPaySummary]:
        """Summarize pay per driver.

        Args:
            jobs: Costed jobs
            start_date: First job date to include (inclusive)
            end_date: Last job date to include (inclusive)
            driver_id: Only summarize this driver

        Returns:
            One DriverPaySummary per driver, sorted by driver id
        """
        grouped: Dict[str, List[Job]] = defaultdict(list)
        for job in self._select(jobs, start_date, end_date):
            if job.driver_id is None or job.driver_pay is None:
                continue
            if driver_id is not None and job.driver_id != driver_id:
                continue
            grouped[job.driver_id].append(job)

        summaries = []
        for key in sorted(grouped):
            driver_jobs = grouped[key]
            paid = sum((j.driver_pay for j in driver_jobs if j.driver_paid), Decimal("0"))
            total = sum((j.driver_pay for j in driver_jobs), Decimal("0"))
            summaries.append(
                DriverPaySummary(
                    driver_id=key,
                    job_count=len(driver_jobs),
                    total_hours=sum(
                        (j.hours_of_driver or Decimal("0") for j in driver_jobs),
                        Decimal("0"),
                    ),
                    total_pay=to_cents(total),
                    paid_pay=to_cents(paid),
                    outstanding_pay=to_cents(total - paid),
                )
            )

        logger.info(f"Summarized pay for {len(summaries)} driver(s)")
        return summaries

    def monthly_revenue(
        self,
        jobs: Iterable[Job],
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> pd.DataFrame:
        """Gross amount, driver pay and revenue per calendar month.

        Returns:
            DataFrame with columns month ("YYYY-MM"), job_count,
            gross_amount, driver_pay, estimated_revenue; one row per month
            in ascending order. Undated jobs are skipped.
        """
        columns = ["month", "job_count", "gross_amount", "driver_pay", "estimated_revenue"]
        rows = [
            {
                "month": job.job_date.strftime("%Y-%m"),
                "gross_amount": job.job_gross_amount or Decimal("0"),
                "driver_pay": job.driver_pay or Decimal("0"),
                "estimated_revenue": job.estimated_revenue or Decimal("0"),
            }
            for job in self._select(jobs, start_date, end_date)
            if job.job_date is not None
        ]
        if not rows:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(rows)
        monthly = (
            df.groupby("month", sort=True)
            .agg(
                job_count=("gross_amount", "size"),
                gross_amount=("gross_amount", "sum"),
                driver_pay=("driver_pay", "sum"),
                estimated_revenue=("estimated_revenue", "sum"),
            )
            .reset_index()
        )
        return monthly[columns]

    @staticmethod
    def _select(
        jobs: Iterable[Job],
        start_date: Optional[dt.date],
        end_date: Optional[dt.date],
    ) -> Iterable[Job]:
        for job in jobs:
            if start_date is None and end_date is None:
                yield job
                continue
            if job.job_date is None:
                continue
            if start_date is not None and job.job_date < start_date:
                continue
            if end_date is not None and job.job_date > end_date:
                continue
            yield job
