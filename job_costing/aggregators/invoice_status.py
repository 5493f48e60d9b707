"""Invoice status state machine for jobs.

Allowed transitions::

    Pending  -> Raised
    Raised   -> Received, Pending
    Received -> Pending, Raised

Setting a job to the status it already has is a no-op. Anything else,
including an unrecognised status name, is rejected through a
ValidationReport and leaves the job's status untouched.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from job_costing.models.job import InvoiceStatus, Job
from job_costing.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.RAISED}),
    InvoiceStatus.RAISED: frozenset({InvoiceStatus.RECEIVED, InvoiceStatus.PENDING}),
    InvoiceStatus.RECEIVED: frozenset({InvoiceStatus.PENDING, InvoiceStatus.RAISED}),
}


@dataclass
class InvoiceStatusChange:
    """Outcome of a requested status change for one job.

    Attributes:
        job_id: Job the change applies to
        previous_status: Status before the change
        new_status: Status after the change (equals previous_status if rejected)
        invoice_id: Invoice the job is linked to after the change
        report: Validation issues; an error means the change was rejected
    """

    job_id: str
    previous_status: InvoiceStatus
    new_status: InvoiceStatus
    invoice_id: Optional[str] = None
    report: ValidationReport = field(default_factory=ValidationReport)

    @property
    def changed(self) -> bool:
        return self.previous_status is not self.new_status

    def as_record(self) -> Dict[str, Any]:
        """Fields the caller persists for the job."""
        return {
            "jobId": self.job_id,
            "invoiceId": self.invoice_id,
            "invoiceStatus": self.new_status.value,
        }


def is_valid_transition(current: InvoiceStatus, requested: InvoiceStatus) -> bool:
    """Check whether ``current`` may move to ``requested``.

    Example:
        >>> is_valid_transition(InvoiceStatus.PENDING, InvoiceStatus.RAISED)
        True
        >>> is_valid_transition(InvoiceStatus.PENDING, InvoiceStatus.RECEIVED)
        False
    """
    if current is requested:
        return True
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def change_invoice_status(job: Job, requested: Any) -> InvoiceStatusChange:
    """Validate a manual status change for a job.

    The job itself is not modified; the caller persists ``new_status``
    when the change's report is valid.

    Args:
        job: Job whose status is being changed
        requested: Requested status (InvoiceStatus or its name)

    Returns:
        InvoiceStatusChange describing the outcome
    """
    current = job.invoice_status
    change = InvoiceStatusChange(
        job_id=job.job_id,
        previous_status=current,
        new_status=current,
        invoice_id=job.invoice_id,
    )

    status = InvoiceStatus.parse(requested)
    if status is None:
        allowed = ", ".join(s.value for s in InvoiceStatus)
        change.report.add_error(
            "invoice_status",
            f"Unknown invoice status; expected one of: {allowed}",
            requested,
            {"job_id": job.job_id},
        )
        return change

    if not is_valid_transition(current, status):
        change.report.add_error(
            "invoice_status",
            f"Cannot change invoice status from {current.value} to {status.value}",
            status.value,
            {"job_id": job.job_id},
        )
        return change

    change.new_status = status
    if change.changed:
        logger.info(
            f"Job {job.job_id} invoice status {current.value} -> {status.value}"
        )
    return change
