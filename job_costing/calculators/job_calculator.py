"""Job costing pipeline.

This module combines the duration, gross amount and driver pay calculators
into the single computation the persistence layer calls whenever a job is
created or edited:

- Job and driver hours (with midnight rollover)
- Gross amount and driver pay, always from the same snapshot
- Estimated fuel (driver hours × flat fuel cost per hour)
- Estimated revenue (gross amount - driver pay)
- Weekday of the job

It also provides batch costing with job type and driver lookups, and a
summary of many costed jobs for reporting.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow
from typing import Dict, List, Optional

from job_costing.calculators.driver_pay_calculator import calculate_driver_pay
from job_costing.calculators.gross_amount_calculator import calculate_gross_amount
from job_costing.calculators.money import to_cents, to_hours
from job_costing.calculators.time_utils import calculate_duration_hours, day_of_week
from job_costing.config.settings import CostingConfig, get_config
from job_costing.models.driver import Driver
from job_costing.models.job import Job
from job_costing.models.job_type import DispatchType, JobType
from job_costing.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobCostingResult:
    """Derived fields of one job, ready to be persisted by the caller.

    Attributes:
        job_id: Job the result belongs to
        hours_of_job: Billable window hours (2 decimal places)
        hours_of_driver: Driver on-duty hours (2 decimal places)
        day_of_job: Weekday name of the job date, or None
        job_gross_amount: Billable amount
        driver_pay: Amount owed to the driver
        estimated_fuel: Fuel cost estimate
        estimated_revenue: job_gross_amount - driver_pay
        dispatch_type: Dispatch type used, or None if unrecognised
    """

    job_id: str
    hours_of_job: Decimal
    hours_of_driver: Decimal
    day_of_job: Optional[str]
    job_gross_amount: Decimal
    driver_pay: Decimal
    estimated_fuel: Decimal
    estimated_revenue: Decimal
    dispatch_type: Optional[DispatchType]

    def as_record(self) -> Dict[str, object]:
        """Derived fields keyed by their stored (camelCase) column names."""
        return {
            "hoursOfJob": self.hours_of_job,
            "hoursOfDriver": self.hours_of_driver,
            "dayOfJob": self.day_of_job,
            "jobGrossAmount": self.job_gross_amount,
            "driverPay": self.driver_pay,
            "estimatedFuel": self.estimated_fuel,
            "estimatedRevenue": self.estimated_revenue,
        }


@dataclass(frozen=True)
class JobCostingSummary:
    """Totals over many costed jobs.

    Attributes:
        job_count: Number of jobs summarized
        total_job_hours: Sum of job hours
        total_driver_hours: Sum of driver hours
        total_gross_amount: Sum of gross amounts
        total_driver_pay: Sum of driver pay
        total_estimated_fuel: Sum of fuel estimates
        total_estimated_revenue: Sum of revenue estimates
        average_gross_amount: Mean gross amount per job
    """

    job_count: int
    total_job_hours: Decimal
    total_driver_hours: Decimal
    total_gross_amount: Decimal
    total_driver_pay: Decimal
    total_estimated_fuel: Decimal
    total_estimated_revenue: Decimal
    average_gross_amount: Decimal


def calculate_estimated_fuel(
    hours_of_driver: Decimal, fuel_cost_per_hour: Decimal = Decimal("30")
) -> Decimal:
    """Flat fuel estimate: driver hours × fuel cost per hour.

    Example:
        >>> calculate_estimated_fuel(Decimal("4"))
        Decimal('120.00')
    """
    try:
        return to_cents(hours_of_driver * fuel_cost_per_hour)
    except (InvalidOperation, Overflow):
        logger.warning(f"Fuel estimate for {hours_of_driver} h is out of range, using 0")
        return Decimal("0.00")


def calculate_estimated_revenue(job_gross_amount: Decimal, driver_pay: Decimal) -> Decimal:
    """Revenue estimate: gross amount minus driver pay."""
    return job_gross_amount - driver_pay


def calculate_job_costing(
    job: Job,
    job_type: JobType,
    driver: Driver,
    config: Optional[CostingConfig] = None,
) -> JobCostingResult:
    """Compute every derived field of a job from one snapshot.

    Args:
        job: Job with raw times, weights and loads
        job_type: The job's job type
        driver: The job's driver
        config: Costing configuration (default: global configuration)

    Returns:
        JobCostingResult with all derived fields

    Example:
        >>> job = Job(
        ...     job_id="j-1",
        ...     start_time_for_job="08:00",
        ...     end_time_for_job="08:50",
        ...     start_time_for_driver="07:30",
        ...     end_time_for_driver="09:30",
        ... )
        >>> job_type = JobType(job_type_id="jt-1", dispatch_type="Hourly", rate_of_job=100)
        >>> driver = Driver(driver_id="d-1", hourly_rate=25)
        >>> result = calculate_job_costing(job, job_type, driver)
        >>> result.job_gross_amount, result.driver_pay, result.estimated_revenue
        (Decimal('100.00'), Decimal('50.00'), Decimal('50.00'))
    """
    config = config or get_config()

    hours_of_job = calculate_duration_hours(job.start_time_for_job, job.end_time_for_job)
    hours_of_driver = calculate_duration_hours(
        job.start_time_for_driver, job.end_time_for_driver
    )

    gross = calculate_gross_amount(
        job, job_type, hours_of_job, config.billing_increment_minutes
    )
    driver_pay = calculate_driver_pay(job, job_type, driver, hours_of_driver)

    return JobCostingResult(
        job_id=job.job_id,
        hours_of_job=to_hours(hours_of_job),
        hours_of_driver=to_hours(hours_of_driver),
        day_of_job=day_of_week(job.job_date),
        job_gross_amount=gross.amount,
        driver_pay=driver_pay,
        estimated_fuel=calculate_estimated_fuel(hours_of_driver, config.fuel_cost_per_hour),
        estimated_revenue=calculate_estimated_revenue(gross.amount, driver_pay),
        dispatch_type=gross.dispatch_type,
    )


def apply_costing(job: Job, result: JobCostingResult) -> Job:
    """Return a copy of ``job`` with all derived fields replaced at once.

    Raises:
        ValueError: If the result was computed for a different job
    """
    if result.job_id != job.job_id:
        raise ValueError(
            f"Costing result for job {result.job_id} cannot be applied to job {job.job_id}"
        )
    return job.model_copy(
        update={
            "hours_of_job": result.hours_of_job,
            "hours_of_driver": result.hours_of_driver,
            "day_of_job": result.day_of_job,
            "job_gross_amount": result.job_gross_amount,
            "driver_pay": result.driver_pay,
            "estimated_fuel": result.estimated_fuel,
            "estimated_revenue": result.estimated_revenue,
        }
    )


def calculate_job_costing_batch(
    jobs: List[Job],
    job_types: Dict[str, JobType],
    drivers: Dict[str, Driver],
    config: Optional[CostingConfig] = None,
) -> List[JobCostingResult]:
    """Cost many jobs, looking up each job's type and driver by id.

    Args:
        jobs: Jobs to cost
        job_types: Job types keyed by job_type_id
        drivers: Drivers keyed by driver_id
        config: Costing configuration (default: global configuration)

    Returns:
        List of JobCostingResult in the same order as ``jobs``

    Raises:
        KeyError: If a job references a job type or driver not supplied
    """
    config = config or get_config()
    results = []

    for job in jobs:
        try:
            job_type = job_types[job.job_type_id]  # type: ignore[index]
        except KeyError:
            raise KeyError(
                f"No job type '{job.job_type_id}' found for job '{job.job_id}'"
            )
        try:
            driver = drivers[job.driver_id]  # type: ignore[index]
        except KeyError:
            raise KeyError(f"No driver '{job.driver_id}' found for job '{job.job_id}'")

        with LogContext(job_id=job.job_id):
            results.append(calculate_job_costing(job, job_type, driver, config))

    logger.info(f"Costed {len(results)} job(s)")
    return results


def aggregate_job_costings(results: List[JobCostingResult]) -> JobCostingSummary:
    """Summarize many costing results.

    Example:
        >>> aggregate_job_costings([]).job_count
        0
    """
    if not results:
        zero = Decimal("0.00")
        return JobCostingSummary(
            job_count=0,
            total_job_hours=zero,
            total_driver_hours=zero,
            total_gross_amount=zero,
            total_driver_pay=zero,
            total_estimated_fuel=zero,
            total_estimated_revenue=zero,
            average_gross_amount=zero,
        )

    total_gross = sum((r.job_gross_amount for r in results), Decimal("0"))

    return JobCostingSummary(
        job_count=len(results),
        total_job_hours=sum((r.hours_of_job for r in results), Decimal("0")),
        total_driver_hours=sum((r.hours_of_driver for r in results), Decimal("0")),
        total_gross_amount=to_cents(total_gross),
        total_driver_pay=to_cents(sum((r.driver_pay for r in results), Decimal("0"))),
        total_estimated_fuel=to_cents(
            sum((r.estimated_fuel for r in results), Decimal("0"))
        ),
        total_estimated_revenue=to_cents(
            sum((r.estimated_revenue for r in results), Decimal("0"))
        ),
        average_gross_amount=to_cents(total_gross / len(results)),
    )
