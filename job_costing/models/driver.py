"""Driver data model and the per-dispatch interpretation of its rate.

Drivers store a single ``hourly_rate`` number. For Hourly and Tonnage jobs
it is a wage per hour; for Load and Fixed jobs the same number is a
percentage share of the job rate. ``Driver.rate_for`` resolves that once
into an explicit ``DriverRate`` so pay formulas never guess the unit.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from job_costing.models.base import BaseDataModel
from job_costing.models.job_type import DispatchType
from job_costing.utils.parsing import to_decimal


class RateKind(str, Enum):
    """Unit of a driver's rate."""

    WAGE = "wage"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class DriverRate:
    """A driver rate tagged with its unit.

    Attributes:
        kind: WAGE (currency per hour) or PERCENTAGE (share of job rate, 0-100)
        amount: The numeric rate
    """

    kind: RateKind
    amount: Decimal

    @property
    def fraction(self) -> Decimal:
        """The percentage expressed as a fraction (20 -> 0.20).

        Raises:
            ValueError: If called on a wage rate
        """
        if self.kind is not RateKind.PERCENTAGE:
            raise ValueError("Only percentage rates have a fraction")
        return self.amount / Decimal("100")


_RATE_KIND_BY_DISPATCH = {
    DispatchType.HOURLY: RateKind.WAGE,
    DispatchType.TONNAGE: RateKind.WAGE,
    DispatchType.LOAD: RateKind.PERCENTAGE,
    DispatchType.FIXED: RateKind.PERCENTAGE,
}


class Driver(BaseDataModel):
    """Represents a driver assigned to jobs.

    Attributes:
        driver_id: Unique driver identifier
        name: Driver name
        hourly_rate: Stored rate (wage or percentage depending on dispatch type)

    Example:
        >>> driver = Driver(driver_id="d-1", name="Sam", hourly_rate="20")
        >>> driver.rate_for(DispatchType.LOAD)
        DriverRate(kind=<RateKind.PERCENTAGE: 'percentage'>, amount=Decimal('20'))
    """

    driver_id: str = Field(..., min_length=1, description="Driver identifier")
    name: str = Field("", description="Driver name")
    hourly_rate: Decimal = Field(Decimal("0"), description="Stored driver rate")

    @field_validator("hourly_rate", mode="before")
    @classmethod
    def parse_rate(cls, v: Any) -> Decimal:
        return to_decimal(v, field="hourlyRate")

    def rate_for(self, dispatch_type: Optional[DispatchType]) -> Optional[DriverRate]:
        """Resolve the stored rate for a dispatch type.

        Args:
            dispatch_type: The job's dispatch type

        Returns:
            The tagged rate, or None for an unrecognised dispatch type
        """
        kind = _RATE_KIND_BY_DISPATCH.get(dispatch_type)  # type: ignore[arg-type]
        if kind is None:
            return None
        return DriverRate(kind=kind, amount=self.hourly_rate)
