"""Job type (billing template) data model.

A job type tells the engine how a job is billed: its dispatch type selects
the gross amount formula and its rate feeds that formula.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from job_costing.models.base import BaseDataModel
from job_costing.utils.parsing import to_decimal


class DispatchType(str, Enum):
    """Billing method assigned to a job type."""

    HOURLY = "Hourly"
    TONNAGE = "Tonnage"
    LOAD = "Load"
    FIXED = "Fixed"

    @classmethod
    def parse(cls, value: Any) -> Optional["DispatchType"]:
        """Resolve a raw dispatch type name, case-insensitively.

        Args:
            value: Raw dispatch type (string or DispatchType)

        Returns:
            The matching DispatchType, or None if the name is not recognised

        Example:
            >>> DispatchType.parse("tonnage")
            <DispatchType.TONNAGE: 'Tonnage'>
            >>> DispatchType.parse("Per Mile") is None
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


class JobType(BaseDataModel):
    """Represents a billing template referenced by jobs.

    ``dispatch_type`` is kept as the raw string so that a misconfigured job
    type still loads; calculators resolve it with ``DispatchType.parse`` and
    fall back to a zero amount when it is not recognised.

    Attributes:
        job_type_id: Unique job type identifier
        title: Display title (e.g. "Gravel - Quarry to Site")
        dispatch_type: Raw dispatch type name
        rate_of_job: Rate applied by the dispatch formula
        start_location: Optional pickup location
        end_location: Optional drop-off location
        company_id: Owning company

    Example:
        >>> job_type = JobType(
        ...     job_type_id="jt-1",
        ...     title="Gravel haul",
        ...     dispatch_type="Tonnage",
        ...     rate_of_job="20",
        ... )
        >>> job_type.rate_of_job
        Decimal('20')
        >>> job_type.dispatch
        <DispatchType.TONNAGE: 'Tonnage'>
    """

    job_type_id: str = Field(..., min_length=1, description="Job type identifier")
    title: str = Field("", description="Job type title")
    dispatch_type: str = Field("", description="Dispatch type name")
    rate_of_job: Decimal = Field(Decimal("0"), description="Rate of the job")
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    company_id: Optional[str] = None

    @field_validator("rate_of_job", mode="before")
    @classmethod
    def parse_rate(cls, v: Any) -> Decimal:
        """Parse the rate defensively; missing or non-numeric becomes 0."""
        return to_decimal(v, field="rateOfJob")

    @field_validator("dispatch_type", mode="before")
    @classmethod
    def coerce_dispatch_type(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, DispatchType):
            return v.value
        return str(v).strip()

    @property
    def dispatch(self) -> Optional[DispatchType]:
        """The recognised dispatch type, or None."""
        return DispatchType.parse(self.dispatch_type)
