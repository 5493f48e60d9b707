"""Driver pay calculator.

Driver pay follows the job's dispatch type, with the driver's stored rate
resolved into an explicit wage or percentage first:

- Hourly / Tonnage: driver hours × wage (no increment rounding)
- Load:  loads × job rate × percentage / 100
- Fixed: job rate × percentage / 100

Load and Fixed pay are a share of the job's own billing rate. Pay is never
negative, and an amount too large for the decimal context pays 0.
"""

import logging
from decimal import Decimal, InvalidOperation, Overflow

from job_costing.calculators.money import to_cents
from job_costing.models.driver import Driver, RateKind
from job_costing.models.job import Job
from job_costing.models.job_type import DispatchType, JobType

logger = logging.getLogger(__name__)


def calculate_driver_pay(
    job: Job, job_type: JobType, driver: Driver, hours_of_driver: Decimal
) -> Decimal:
    """Calculate what the driver is owed for one job.

    Args:
        job: Job snapshot (loads are read from it)
        job_type: The job's job type
        driver: Assigned driver
        hours_of_driver: Exact driver on-duty hours

    Returns:
        Driver pay (2 decimal precision); 0 for an unknown dispatch type

    Example:
        >>> job = Job(job_id="j-1", loads=5)
        >>> job_type = JobType(job_type_id="jt-1", dispatch_type="Load", rate_of_job=50)
        >>> driver = Driver(driver_id="d-1", hourly_rate=20)
        >>> calculate_driver_pay(job, job_type, driver, Decimal("0"))
        Decimal('50.00')
    """
    dispatch_type = job_type.dispatch
    driver_rate = driver.rate_for(dispatch_type)

    if driver_rate is None:
        logger.warning(
            f"Unknown dispatch type {job_type.dispatch_type!r} on job type "
            f"{job_type.job_type_id}; driver {driver.driver_id} is paid 0 "
            f"for job {job.job_id}"
        )
        return Decimal("0.00")

    try:
        if driver_rate.kind is RateKind.WAGE:
            pay = hours_of_driver * driver_rate.amount
        elif dispatch_type is DispatchType.LOAD:
            pay = Decimal(job.loads) * job_type.rate_of_job * driver_rate.fraction
        else:
            pay = job_type.rate_of_job * driver_rate.fraction
    except (InvalidOperation, Overflow):
        logger.warning(f"Driver pay for job {job.job_id} is out of range; paying 0")
        return Decimal("0.00")

    if pay < 0:
        logger.warning(f"Negative driver pay {pay} for job {job.job_id}; paying 0")
        return Decimal("0.00")

    return to_cents(pay)
