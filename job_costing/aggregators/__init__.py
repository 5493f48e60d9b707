"""Aggregators for invoices and driver pay.

This module groups costed jobs into invoices, enforces the job invoice
status lifecycle, and summarizes driver earnings.
"""

from job_costing.aggregators.driver_pay_aggregator import (
    DriverPayAggregator,
    DriverPaySummary,
)
from job_costing.aggregators.invoice_aggregator import (
    InvoiceAggregationResult,
    InvoiceAggregator,
    InvoiceTotals,
)
from job_costing.aggregators.invoice_status import (
    ALLOWED_TRANSITIONS,
    InvoiceStatusChange,
    change_invoice_status,
    is_valid_transition,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DriverPayAggregator",
    "DriverPaySummary",
    "InvoiceAggregationResult",
    "InvoiceAggregator",
    "InvoiceStatusChange",
    "InvoiceTotals",
    "change_invoice_status",
    "is_valid_transition",
]
