"""Business rule validators for costed jobs.

This module checks a job against its job type and driver: configuration
that makes a job bill or pay nothing, windows that do not make sense, and
cached derived fields that no longer match a fresh computation.
"""

from decimal import Decimal
from typing import Optional

from job_costing.calculators.job_calculator import JobCostingResult
from job_costing.calculators.time_utils import calculate_duration_minutes
from job_costing.models.driver import Driver
from job_costing.models.job import Job
from job_costing.models.job_type import DispatchType, JobType
from job_costing.validators.validation_report import ValidationReport

STALE_TOLERANCE = Decimal("0.01")

_CACHED_FIELDS = (
    "hours_of_job",
    "hours_of_driver",
    "job_gross_amount",
    "driver_pay",
    "estimated_fuel",
    "estimated_revenue",
)


class BusinessRuleValidators:
    """Collection of business rule validation methods."""

    @staticmethod
    def validate_dispatch_type(job_type: JobType, report: ValidationReport) -> None:
        if job_type.dispatch is None:
            report.add_warning(
                "dispatch_type",
                f"Job type {job_type.job_type_id} has unknown dispatch type; "
                "the job bills 0 and the driver is paid 0",
                job_type.dispatch_type,
            )

    @staticmethod
    def validate_rates(job_type: JobType, driver: Driver, report: ValidationReport) -> None:
        """Zero rates are legal but almost always a data entry mistake."""
        if job_type.rate_of_job == 0:
            report.add_warning(
                "rate_of_job",
                f"Job type {job_type.job_type_id} has a zero rate; the job bills 0",
                job_type.rate_of_job,
            )
        if driver.hourly_rate == 0:
            report.add_warning(
                "hourly_rate",
                f"Driver {driver.driver_id} has a zero rate; the driver is paid 0",
                driver.hourly_rate,
            )

    @staticmethod
    def validate_driver_window(job: Job, report: ValidationReport) -> None:
        """The driver is normally on duty at least as long as the job runs."""
        job_minutes = calculate_duration_minutes(job.start_time_for_job, job.end_time_for_job)
        driver_minutes = calculate_duration_minutes(
            job.start_time_for_driver, job.end_time_for_driver
        )
        if driver_minutes and driver_minutes < job_minutes:
            report.add_info(
                "end_time_for_driver",
                f"Driver window ({driver_minutes} min) is shorter than "
                f"job window ({job_minutes} min)",
                job.end_time_for_driver,
            )

    @staticmethod
    def validate_weight_usage(job: Job, job_type: JobType, report: ValidationReport) -> None:
        if job.weight and job_type.dispatch is not DispatchType.TONNAGE:
            report.add_info(
                "weight",
                f"Weight is ignored for {job_type.dispatch_type} jobs",
                [str(w) for w in job.weight],
            )

    @staticmethod
    def validate_cached_fields(
        job: Job, fresh: JobCostingResult, report: ValidationReport
    ) -> None:
        """Stored derived fields must match a fresh computation within 0.01.

        Fields that were never stored are not reported.
        """
        for name in _CACHED_FIELDS:
            stored: Optional[Decimal] = getattr(job, name)
            expected: Decimal = getattr(fresh, name)
            if stored is not None and abs(stored - expected) > STALE_TOLERANCE:
                report.add_warning(
                    name,
                    f"Stored value {stored} is stale; recomputed value is {expected}",
                    stored,
                )
        if job.day_of_job is not None and job.day_of_job != fresh.day_of_job:
            report.add_warning(
                "day_of_job",
                f"Stored day {job.day_of_job} does not match job date ({fresh.day_of_job})",
                job.day_of_job,
            )

    @staticmethod
    def validate_job(
        job: Job,
        job_type: JobType,
        driver: Driver,
        fresh: JobCostingResult,
        report: ValidationReport,
    ) -> None:
        """Run every business rule for one job."""
        BusinessRuleValidators.validate_dispatch_type(job_type, report)
        BusinessRuleValidators.validate_rates(job_type, driver, report)
        BusinessRuleValidators.validate_driver_window(job, report)
        BusinessRuleValidators.validate_weight_usage(job, job_type, report)
        BusinessRuleValidators.validate_cached_fields(job, fresh, report)
