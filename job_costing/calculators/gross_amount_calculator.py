"""Gross amount calculator.

Computes the billable amount of a single job from its measured quantities
and its job type's dispatch rule:

- Hourly:  job hours rounded up to the billing increment × rate
- Tonnage: sum of all weights × rate
- Load:    loads × rate
- Fixed:   rate, whatever the hours, weight or loads

An unrecognised dispatch type is a configuration problem, not a runtime
fault: it is logged and the job bills 0 so the rest of a batch proceeds.
The same holds for an amount that overflows the decimal context. Negative
quantities never produce a negative bill; the amount is floored at 0.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow
from typing import Optional

from job_costing.calculators.money import to_cents
from job_costing.calculators.time_utils import round_up_hours
from job_costing.models.job import Job
from job_costing.models.job_type import DispatchType, JobType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrossAmountResult:
    """Billable amount of a job and the dispatch type that produced it.

    Attributes:
        amount: Billable amount (2 decimal precision)
        dispatch_type: Dispatch type used, or None if unrecognised
        billed_hours: Hours actually billed (Hourly only, after rounding up)
    """

    amount: Decimal
    dispatch_type: Optional[DispatchType]
    billed_hours: Optional[Decimal] = None


def calculate_gross_amount(
    job: Job,
    job_type: JobType,
    hours_of_job: Decimal,
    increment_minutes: int = 15,
) -> GrossAmountResult:
    """Calculate the billable amount for one job.

    Args:
        job: Job snapshot (weight and loads are read from it)
        job_type: The job's job type (dispatch type and rate)
        hours_of_job: Exact elapsed job hours
        increment_minutes: Billing increment for Hourly jobs

    Returns:
        GrossAmountResult with the amount and the dispatch type used

    Example:
        >>> job = Job(job_id="j-1", weight=[10, "12.5"])
        >>> job_type = JobType(job_type_id="jt-1", dispatch_type="Tonnage", rate_of_job=20)
        >>> calculate_gross_amount(job, job_type, Decimal("0")).amount
        Decimal('450.00')
    """
    dispatch_type = job_type.dispatch
    rate = job_type.rate_of_job
    billed_hours = None

    try:
        if dispatch_type is DispatchType.HOURLY:
            billed_hours = round_up_hours(hours_of_job, increment_minutes)
            amount = billed_hours * rate
        elif dispatch_type is DispatchType.TONNAGE:
            amount = job.total_weight * rate
        elif dispatch_type is DispatchType.LOAD:
            amount = Decimal(job.loads) * rate
        elif dispatch_type is DispatchType.FIXED:
            amount = rate
        else:
            logger.warning(
                f"Unknown dispatch type {job_type.dispatch_type!r} on job type "
                f"{job_type.job_type_id}; job {job.job_id} bills 0"
            )
            amount = Decimal("0")
    except (InvalidOperation, Overflow):
        logger.warning(f"Gross amount of job {job.job_id} is out of range; job bills 0")
        amount = Decimal("0")

    if amount < 0:
        logger.warning(f"Negative gross amount {amount} for job {job.job_id}; job bills 0")
        amount = Decimal("0")

    return GrossAmountResult(
        amount=to_cents(amount),
        dispatch_type=dispatch_type,
        billed_hours=billed_hours,
    )
