"""Job data model.

A job is the unit of work being billed. Its raw inputs (times, weights,
loads) come from the dispatcher; the derived fields (hours, amounts, pay,
estimates) are a cache of the last costing run and are replaced together by
``job_costing.calculators.job_calculator.apply_costing``.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator

from job_costing.models.base import BaseDataModel
from job_costing.utils.parsing import normalize_weight, to_int


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status shared by jobs and invoices."""

    PENDING = "Pending"
    RAISED = "Raised"
    RECEIVED = "Received"

    @classmethod
    def parse(cls, value: Any) -> Optional["InvoiceStatus"]:
        """Resolve a raw status name (exact, case-insensitive) or return None.

        Example:
            >>> InvoiceStatus.parse("raised")
            <InvoiceStatus.RAISED: 'Raised'>
            >>> InvoiceStatus.parse("Paid") is None
            True
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        for member in cls:
            if member.value.lower() == name:
                return member
        return None


class Job(BaseDataModel):
    """Represents a single dispatched job.

    Attributes:
        job_id: Unique job identifier
        job_date: Date the job was performed
        start_time_for_job: Billable window start ("HH:MM")
        end_time_for_job: Billable window end ("HH:MM")
        start_time_for_driver: Driver on-duty start ("HH:MM")
        end_time_for_driver: Driver on-duty end ("HH:MM")
        weight: Normalized weights (only meaningful for Tonnage jobs)
        loads: Number of loads (only meaningful for Load jobs)
        job_type_id: Referenced job type
        driver_id: Assigned driver
        dispatcher_id: Dispatcher the job is billed through
        invoice_id: Invoice the job is currently linked to, if any
        invoice_status: Invoice lifecycle status (defaults to Pending)
        payment_received: Whether the customer paid for the job
        driver_paid: Whether the driver was paid for the job
        hours_of_job, hours_of_driver, day_of_job, job_gross_amount,
        driver_pay, estimated_fuel, estimated_revenue: cached derived fields

    Example:
        >>> job = Job.model_validate({
        ...     "jobId": "j-1",
        ...     "jobDate": "2024-03-04",
        ...     "startTimeForJob": "08:00",
        ...     "endTimeForJob": "08:50",
        ...     "weight": "[10, 12.5]",
        ...     "jobTypeId": "jt-1",
        ...     "driverId": "d-1",
        ... })
        >>> job.weight
        [Decimal('10'), Decimal('12.5')]
        >>> job.invoice_status
        <InvoiceStatus.PENDING: 'Pending'>
    """

    job_id: str = Field(..., min_length=1, description="Job identifier")
    job_date: Optional[dt.date] = Field(
        None,
        validation_alias=AliasChoices("jobDate", "dateOfJob", "job_date"),
        description="Date of the job",
    )
    start_time_for_job: Optional[str] = None
    end_time_for_job: Optional[str] = None
    start_time_for_driver: Optional[str] = None
    end_time_for_driver: Optional[str] = None
    weight: List[Decimal] = Field(default_factory=list)
    loads: int = 0
    job_type_id: Optional[str] = None
    driver_id: Optional[str] = None
    dispatcher_id: Optional[str] = None
    invoice_id: Optional[str] = None
    invoice_status: InvoiceStatus = InvoiceStatus.PENDING
    payment_received: bool = False
    driver_paid: bool = False

    hours_of_job: Optional[Decimal] = None
    hours_of_driver: Optional[Decimal] = None
    day_of_job: Optional[str] = None
    job_gross_amount: Optional[Decimal] = None
    driver_pay: Optional[Decimal] = None
    estimated_fuel: Optional[Decimal] = None
    estimated_revenue: Optional[Decimal] = None

    @field_validator("weight", mode="before")
    @classmethod
    def parse_weight(cls, v: Any) -> List[Decimal]:
        return normalize_weight(v)

    @field_validator("loads", mode="before")
    @classmethod
    def parse_loads(cls, v: Any) -> int:
        return to_int(v, field="loads")

    @field_validator(
        "start_time_for_job",
        "end_time_for_job",
        "start_time_for_driver",
        "end_time_for_driver",
        mode="before",
    )
    @classmethod
    def coerce_clock_time(cls, v: Any) -> Optional[str]:
        """Keep clock times as text; blank becomes None."""
        if v is None:
            return None
        if isinstance(v, dt.time):
            return v.strftime("%H:%M")
        text = str(v).strip()
        return text or None

    @field_validator("invoice_status", mode="before")
    @classmethod
    def default_invoice_status(cls, v: Any) -> Any:
        # Absent status resolves to Pending here, once, instead of at call sites
        if v is None or (isinstance(v, str) and not v.strip()):
            return InvoiceStatus.PENDING
        parsed = InvoiceStatus.parse(v)
        return parsed if parsed is not None else v

    @field_validator("job_date", mode="before")
    @classmethod
    def parse_job_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            text = v.strip()
            if not text:
                return None
            # Accept full ISO timestamps as stored by some clients
            return text[:10]
        return v

    @property
    def total_weight(self) -> Decimal:
        """Sum of all weight entries."""
        return sum(self.weight, Decimal("0"))
