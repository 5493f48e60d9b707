"""Invoice data model."""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from job_costing.models.base import BaseDataModel
from job_costing.models.job import InvoiceStatus
from job_costing.utils.parsing import to_decimal


class Invoice(BaseDataModel):
    """Billable statement aggregating one dispatcher's jobs.

    The monetary fields are derived by the invoice aggregator; they are
    stored here only so a persisted invoice can be checked against its jobs.

    Attributes:
        invoice_id: Unique invoice identifier
        invoice_number: Human-facing invoice number
        invoice_date: Invoice date
        dispatcher_id: Dispatcher billed by this invoice
        billed_to: Recipient name
        billed_email: Recipient email
        commission: Dispatcher commission percentage (0-100)
        status: Invoice status (defaults to Pending)
        sub_total, hst, total: Stored derived amounts
    """

    invoice_id: str = Field(..., min_length=1)
    invoice_number: Optional[str] = None
    invoice_date: Optional[dt.date] = None
    dispatcher_id: str = Field(..., min_length=1)
    billed_to: Optional[str] = None
    billed_email: Optional[str] = None
    commission: Decimal = Field(
        Decimal("0"),
        ge=0,
        le=100,
        validation_alias=AliasChoices("commission", "dispatchPercent"),
    )
    status: InvoiceStatus = InvoiceStatus.PENDING

    sub_total: Optional[Decimal] = None
    hst: Optional[Decimal] = None
    total: Optional[Decimal] = None

    @field_validator("commission", mode="before")
    @classmethod
    def parse_commission(cls, v: Any) -> Decimal:
        return to_decimal(v, field="commission")

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return InvoiceStatus.PENDING
        parsed = InvoiceStatus.parse(v)
        return parsed if parsed is not None else v

    @field_validator("invoice_date", mode="before")
    @classmethod
    def parse_invoice_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            text = v.strip()
            return text[:10] if text else None
        return v
