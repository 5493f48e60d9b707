"""Invoice aggregator for grouping a dispatcher's jobs into an invoice.

This module computes invoice figures from the jobs' gross amounts:

- subTotal:   sum of jobGrossAmount over the included jobs
- commission: subTotal × commission% / 100
- hst:        subTotal × HST rate (tax on the pre-commission subtotal)
- total:      subTotal + hst - commission

Conflicting job sets (unknown jobs, jobs of another dispatcher, jobs already
billed on another invoice) are rejected as a whole. Nothing is persisted
here: the result lists the job link/status changes for the caller to write.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from job_costing.aggregators.invoice_status import InvoiceStatusChange
from job_costing.calculators.money import to_cents
from job_costing.config.settings import get_config
from job_costing.models.invoice import Invoice
from job_costing.models.job import InvoiceStatus, Job
from job_costing.utils.parsing import in_range
from job_costing.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = Decimal("0.01")

_ZERO = Decimal("0.00")


@dataclass(frozen=True)
class InvoiceTotals:
    """Invoice figures derived from a subtotal.

    Attributes:
        sub_total: Sum of the jobs' gross amounts
        commission: Commission amount deducted for the dispatcher
        hst: Tax on the subtotal
        total: sub_total + hst - commission
    """

    sub_total: Decimal
    commission: Decimal
    hst: Decimal
    total: Decimal


@dataclass
class InvoiceAggregationResult:
    """Outcome of aggregating a job set into an invoice.

    When the report holds errors the aggregation was rejected: all amounts
    are zero and there are no status changes.

    Attributes:
        dispatcher_id: Dispatcher the invoice bills
        invoice_id: Invoice the jobs are linked to; None for a new invoice
            whose id is not known yet
        commission_percent: Commission percentage applied
        sub_total, commission, hst, total: Invoice figures
        job_ids: Included job ids (de-duplicated, input order)
        job_invoice_status_changes: Link/status updates to persist, for
            included jobs first and then for released jobs
        report: Validation issues found while aggregating
    """

    dispatcher_id: str
    invoice_id: Optional[str]
    commission_percent: Decimal
    sub_total: Decimal = _ZERO
    commission: Decimal = _ZERO
    hst: Decimal = _ZERO
    total: Decimal = _ZERO
    job_ids: List[str] = field(default_factory=list)
    job_invoice_status_changes: List[InvoiceStatusChange] = field(default_factory=list)
    report: ValidationReport = field(default_factory=ValidationReport)

    @property
    def is_valid(self) -> bool:
        return self.report.is_valid()

    def as_record(self) -> Dict[str, Any]:
        """Invoice figures keyed by their stored (camelCase) names."""
        return {
            "subTotal": self.sub_total,
            "commission": self.commission,
            "hst": self.hst,
            "total": self.total,
            "jobInvoiceStatusChanges": [
                change.as_record() for change in self.job_invoice_status_changes
            ],
        }


class InvoiceAggregator:
    """Aggregates jobs into invoices and keeps job/invoice links consistent.

    Example:
        >>> aggregator = InvoiceAggregator(hst_rate=Decimal("0.13"))
        >>> result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs)
        >>> result.sub_total, result.hst, result.commission, result.total
        (Decimal('500.00'), Decimal('65.00'), Decimal('50.00'), Decimal('515.00'))
    """

    def __init__(self, hst_rate: Optional[Decimal] = None) -> None:
        """Initialize the aggregator.

        Args:
            hst_rate: Tax rate as a fraction (default: from configuration)
        """
        self.hst_rate = hst_rate if hst_rate is not None else get_config().hst_rate

    def calculate_totals(
        self, gross_amounts: Iterable[Decimal], commission_percent: Decimal
    ) -> InvoiceTotals:
        """Compute invoice figures from the jobs' gross amounts.

        The total is built from the rounded components so the displayed
        figures always add up.
        """
        sub_total = to_cents(sum(gross_amounts, Decimal("0")))
        commission = to_cents(sub_total * commission_percent / Decimal("100"))
        hst = to_cents(sub_total * self.hst_rate)
        return InvoiceTotals(
            sub_total=sub_total,
            commission=commission,
            hst=hst,
            total=sub_total + hst - commission,
        )

    def aggregate(
        self,
        dispatcher_id: str,
        commission_percent: Any,
        job_ids: Iterable[str],
        jobs: Iterable[Job],
        invoice_id: Optional[str] = None,
        new_invoice_id: Optional[str] = None,
    ) -> InvoiceAggregationResult:
        """Validate a job set for one dispatcher and compute its invoice.

        Args:
            dispatcher_id: Dispatcher the invoice bills
            commission_percent: Commission percentage (0-100)
            job_ids: Jobs to include
            jobs: Known jobs (at least every job referenced by ``job_ids``
                and, when editing, every job linked to ``invoice_id``)
            invoice_id: Invoice being edited; jobs linked to it but no
                longer included are released back to Pending
            new_invoice_id: Id already assigned to a new invoice. Status
                changes link the jobs to it. Without either id the changes
                carry ``invoice_id=None`` and the caller must set the link
                once the invoice is stored.

        Returns:
            InvoiceAggregationResult

        Raises:
            ValueError: If ``job_ids`` is empty, or both ``invoice_id`` and
                ``new_invoice_id`` are given
        """
        requested = list(job_ids)
        if not requested:
            raise ValueError("An invoice needs at least one job")
        if invoice_id and new_invoice_id:
            raise ValueError("Pass invoice_id to edit an invoice or new_invoice_id to create one")
        link_id = invoice_id or new_invoice_id

        jobs = list(jobs)
        jobs_by_id = {job.job_id: job for job in jobs}
        report = ValidationReport()
        context = {"dispatcher_id": dispatcher_id}
        if invoice_id:
            context["invoice_id"] = invoice_id

        logger.info(
            f"Aggregating {len(requested)} job(s) for dispatcher {dispatcher_id}"
            + (f" on invoice {invoice_id}" if invoice_id else "")
        )

        commission = self._parse_commission(commission_percent, report, context)

        included: List[str] = []
        for job_id in requested:
            if job_id in included:
                report.add_info("job_ids", "Duplicate job id ignored", job_id, context)
                continue
            included.append(job_id)
            self._check_job(
                jobs_by_id.get(job_id), job_id, dispatcher_id, invoice_id, report, context
            )

        result = InvoiceAggregationResult(
            dispatcher_id=dispatcher_id,
            invoice_id=link_id,
            commission_percent=commission if commission is not None else Decimal("0"),
            job_ids=included,
            report=report,
        )

        if report.has_errors() or commission is None:
            logger.warning(
                f"Invoice aggregation for dispatcher {dispatcher_id} rejected: "
                f"{report.summary()}"
            )
            return result

        gross_amounts = []
        for job_id in included:
            job = jobs_by_id[job_id]
            if job.job_gross_amount is None:
                report.add_warning(
                    "job_gross_amount",
                    "Job has no computed gross amount; counted as 0",
                    None,
                    {**context, "job_id": job_id},
                )
                gross_amounts.append(Decimal("0"))
            elif not in_range(job.job_gross_amount):
                report.add_warning(
                    "job_gross_amount",
                    "Stored gross amount is out of range; counted as 0",
                    job.job_gross_amount,
                    {**context, "job_id": job_id},
                )
                gross_amounts.append(Decimal("0"))
            else:
                gross_amounts.append(job.job_gross_amount)

        totals = self.calculate_totals(gross_amounts, commission)
        result.sub_total = totals.sub_total
        result.commission = totals.commission
        result.hst = totals.hst
        result.total = totals.total

        for job_id in included:
            job = jobs_by_id[job_id]
            new_status = (
                InvoiceStatus.RAISED
                if job.invoice_status is InvoiceStatus.PENDING
                else job.invoice_status
            )
            result.job_invoice_status_changes.append(
                InvoiceStatusChange(
                    job_id=job_id,
                    previous_status=job.invoice_status,
                    new_status=new_status,
                    invoice_id=link_id,
                )
            )

        if invoice_id:
            kept = set(included)
            released = [job for job in jobs if job.job_id not in kept]
            result.job_invoice_status_changes.extend(self.release(invoice_id, released))

        logger.info(
            f"Invoice for dispatcher {dispatcher_id}: subTotal={totals.sub_total} "
            f"hst={totals.hst} commission={totals.commission} total={totals.total}"
        )
        return result

    def release(self, invoice_id: str, jobs: Iterable[Job]) -> List[InvoiceStatusChange]:
        """Unlink every job linked to ``invoice_id`` and return it to Pending.

        Used when jobs are removed from an invoice or the invoice is deleted.
        Jobs linked to other invoices (or none) are ignored.
        """
        changes = [
            InvoiceStatusChange(
                job_id=job.job_id,
                previous_status=job.invoice_status,
                new_status=InvoiceStatus.PENDING,
                invoice_id=None,
            )
            for job in jobs
            if job.invoice_id == invoice_id
        ]
        if changes:
            logger.info(f"Released {len(changes)} job(s) from invoice {invoice_id}")
        return changes

    def verify_invoice(self, invoice: Invoice, jobs: Iterable[Job]) -> ValidationReport:
        """Check an invoice's stored figures against its linked jobs.

        Each stored figure differing from the recomputed one by more than
        0.01 is reported as an error; missing figures are reported as
        warnings.
        """
        report = ValidationReport()
        context = {"invoice_id": invoice.invoice_id}
        linked = [job for job in jobs if job.invoice_id == invoice.invoice_id]

        for job in linked:
            if job.dispatcher_id != invoice.dispatcher_id:
                report.add_error(
                    "dispatcher_id",
                    f"Linked job belongs to dispatcher {job.dispatcher_id}, "
                    f"not {invoice.dispatcher_id}",
                    job.dispatcher_id,
                    {**context, "job_id": job.job_id},
                )

        totals = self.calculate_totals(
            (job.job_gross_amount or Decimal("0") for job in linked),
            invoice.commission,
        )
        for name in ("sub_total", "hst", "total"):
            stored = getattr(invoice, name)
            expected = getattr(totals, name)
            if stored is None:
                report.add_warning(name, "Invoice has no stored amount", None, context)
            elif abs(stored - expected) > AMOUNT_TOLERANCE:
                report.add_error(
                    name,
                    f"Stored amount {stored} differs from recomputed {expected}",
                    stored,
                    context,
                )
        return report

    def _parse_commission(
        self, value: Any, report: ValidationReport, context: Dict[str, Any]
    ) -> Optional[Decimal]:
        try:
            commission = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            report.add_error("commission", "Commission must be a number", value, context)
            return None
        if not commission.is_finite() or commission < 0 or commission > 100:
            report.add_error(
                "commission", "Commission must be between 0 and 100", value, context
            )
            return None
        return commission

    def _check_job(
        self,
        job: Optional[Job],
        job_id: str,
        dispatcher_id: str,
        invoice_id: Optional[str],
        report: ValidationReport,
        context: Dict[str, Any],
    ) -> None:
        job_context = {**context, "job_id": job_id}
        if job is None:
            report.add_error("job_ids", "Unknown job", job_id, job_context)
            return
        if job.dispatcher_id != dispatcher_id:
            report.add_error(
                "dispatcher_id",
                f"Job belongs to dispatcher {job.dispatcher_id}",
                job.dispatcher_id,
                job_context,
            )
        if job.invoice_id and job.invoice_id != invoice_id:
            report.add_error(
                "invoice_id",
                f"Job is already on invoice {job.invoice_id}",
                job.invoice_id,
                job_context,
            )
