"""Unit tests for invoice aggregation."""

from decimal import Decimal

import pytest

from job_costing.aggregators.invoice_aggregator import InvoiceAggregator
from job_costing.models import Invoice, InvoiceStatus, Job
from job_costing.validators.validation_report import ValidationSeverity


def make_job(job_id, gross, dispatcher_id="disp-1", **kwargs):
    return Job(
        job_id=job_id,
        dispatcher_id=dispatcher_id,
        job_gross_amount=None if gross is None else Decimal(gross),
        **kwargs,
    )


@pytest.fixture
def aggregator():
    return InvoiceAggregator(hst_rate=Decimal("0.13"))


@pytest.fixture
def jobs():
    return [make_job("j-1", "300.00"), make_job("j-2", "200.00")]


class TestCalculateTotals:
    def test_subtotal_tax_commission_total(self, aggregator):
        totals = aggregator.calculate_totals([Decimal("300"), Decimal("200")], Decimal("10"))

        assert totals.sub_total == Decimal("500.00")
        assert totals.hst == Decimal("65.00")
        assert totals.commission == Decimal("50.00")
        assert totals.total == Decimal("515.00")

    def test_total_is_built_from_rounded_parts(self, aggregator):
        totals = aggregator.calculate_totals([Decimal("10.05")], Decimal("7.5"))

        assert totals.hst == Decimal("1.31")
        assert totals.commission == Decimal("0.75")
        assert totals.total == totals.sub_total + totals.hst - totals.commission

    def test_zero_commission(self, aggregator):
        totals = aggregator.calculate_totals([Decimal("100")], Decimal("0"))

        assert totals.total == Decimal("113.00")

    def test_default_rate_comes_from_config(self, monkeypatch):
        monkeypatch.setenv("HST_RATE", "0.05")

        assert InvoiceAggregator().hst_rate == Decimal("0.05")


class TestAggregate:
    """Test aggregating a job set into a new or existing invoice."""

    def test_new_invoice(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs)

        assert result.is_valid
        assert result.sub_total == Decimal("500.00")
        assert result.hst == Decimal("65.00")
        assert result.commission == Decimal("50.00")
        assert result.total == Decimal("515.00")
        assert result.job_ids == ["j-1", "j-2"]

    def test_pending_jobs_are_raised(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", "10", ["j-1", "j-2"], jobs, invoice_id="inv-1")

        changes = result.job_invoice_status_changes
        assert [(c.job_id, c.new_status, c.invoice_id) for c in changes] == [
            ("j-1", InvoiceStatus.RAISED, "inv-1"),
            ("j-2", InvoiceStatus.RAISED, "inv-1"),
        ]

    def test_received_job_keeps_its_status(self, aggregator):
        jobs = [make_job("j-1", "100", invoice_id="inv-1", invoice_status="Received")]

        result = aggregator.aggregate("disp-1", 0, ["j-1"], jobs, invoice_id="inv-1")

        (change,) = result.job_invoice_status_changes
        assert change.new_status is InvoiceStatus.RECEIVED
        assert not change.changed

    def test_duplicates_are_counted_once(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-1", "j-2"], jobs)

        assert result.job_ids == ["j-1", "j-2"]
        assert result.sub_total == Decimal("500.00")
        assert result.report.info_count == 1

    def test_missing_gross_counts_as_zero(self, aggregator):
        jobs = [make_job("j-1", "300"), make_job("j-2", None)]

        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs)

        assert result.is_valid
        assert result.sub_total == Decimal("300.00")
        assert result.report.warning_count == 1

    def test_empty_job_set(self, aggregator, jobs):
        with pytest.raises(ValueError, match="at least one job"):
            aggregator.aggregate("disp-1", 10, [], jobs)

    def test_as_record(self, aggregator, jobs):
        record = aggregator.aggregate("disp-1", 10, ["j-1"], jobs, invoice_id="inv-1").as_record()

        assert record["subTotal"] == Decimal("300.00")
        assert record["jobInvoiceStatusChanges"] == [
            {"jobId": "j-1", "invoiceId": "inv-1", "invoiceStatus": "Raised"}
        ]

    def test_new_invoice_id_links_jobs(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs, new_invoice_id="inv-7")

        assert result.invoice_id == "inv-7"
        assert [c.as_record()["invoiceId"] for c in result.job_invoice_status_changes] == [
            "inv-7",
            "inv-7",
        ]

    def test_new_invoice_without_id_leaves_link_to_caller(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-1"], jobs)

        assert result.invoice_id is None
        assert result.job_invoice_status_changes[0].invoice_id is None

    def test_edit_and_new_id_together(self, aggregator, jobs):
        with pytest.raises(ValueError, match="new_invoice_id"):
            aggregator.aggregate(
                "disp-1", 10, ["j-1"], jobs, invoice_id="inv-1", new_invoice_id="inv-2"
            )

    def test_out_of_range_stored_amount_counts_as_zero(self, aggregator):
        jobs = [make_job("j-1", "1e30"), make_job("j-2", "200.00")]

        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs)

        assert result.is_valid
        assert result.sub_total == Decimal("200.00")
        (warning,) = result.report.get_warnings()
        assert warning.context["job_id"] == "j-1"


class TestAggregateConflicts:
    """Conflicting job sets are rejected as a whole."""

    def assert_rejected(self, result, field):
        assert not result.is_valid
        assert result.total == Decimal("0.00")
        assert result.sub_total == Decimal("0.00")
        assert result.job_invoice_status_changes == []
        assert field in [i.field for i in result.report.get_errors()]

    def test_unknown_job(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-404"], jobs)

        self.assert_rejected(result, "job_ids")

    def test_job_of_another_dispatcher(self, aggregator):
        jobs = [make_job("j-1", "100"), make_job("j-2", "100", dispatcher_id="disp-2")]

        result = aggregator.aggregate("disp-1", 10, ["j-1", "j-2"], jobs)

        self.assert_rejected(result, "dispatcher_id")

    def test_job_on_another_invoice(self, aggregator):
        jobs = [make_job("j-1", "100", invoice_id="inv-2", invoice_status="Raised")]

        result = aggregator.aggregate("disp-1", 10, ["j-1"], jobs, invoice_id="inv-1")

        self.assert_rejected(result, "invoice_id")

    def test_job_already_on_any_invoice_blocks_new_invoice(self, aggregator):
        jobs = [make_job("j-1", "100", invoice_id="inv-2")]

        result = aggregator.aggregate("disp-1", 10, ["j-1"], jobs)

        self.assert_rejected(result, "invoice_id")

    @pytest.mark.parametrize("commission", ["ten", "-1", "100.5", "NaN"])
    def test_bad_commission(self, aggregator, jobs, commission):
        result = aggregator.aggregate("disp-1", commission, ["j-1"], jobs)

        self.assert_rejected(result, "commission")

    def test_errors_carry_context(self, aggregator, jobs):
        result = aggregator.aggregate("disp-1", 10, ["j-404"], jobs, invoice_id="inv-1")

        (issue,) = result.report.issues
        assert issue.severity is ValidationSeverity.ERROR
        assert issue.context == {
            "dispatcher_id": "disp-1",
            "invoice_id": "inv-1",
            "job_id": "j-404",
        }


class TestEditAndRelease:
    def test_removed_jobs_are_released(self, aggregator):
        jobs = [
            make_job("j-1", "300", invoice_id="inv-1", invoice_status="Raised"),
            make_job("j-2", "200", invoice_id="inv-1", invoice_status="Raised"),
        ]

        result = aggregator.aggregate("disp-1", 10, ["j-1"], jobs, invoice_id="inv-1")

        assert result.sub_total == Decimal("300.00")
        released = result.job_invoice_status_changes[-1]
        assert released.job_id == "j-2"
        assert released.new_status is InvoiceStatus.PENDING
        assert released.invoice_id is None

    def test_release_ignores_other_invoices(self, aggregator):
        jobs = [
            make_job("j-1", "1", invoice_id="inv-1", invoice_status="Received"),
            make_job("j-2", "1", invoice_id="inv-2", invoice_status="Raised"),
            make_job("j-3", "1"),
        ]

        changes = aggregator.release("inv-1", jobs)

        assert [c.job_id for c in changes] == ["j-1"]
        assert changes[0].previous_status is InvoiceStatus.RECEIVED
        assert changes[0].as_record() == {
            "jobId": "j-1",
            "invoiceId": None,
            "invoiceStatus": "Pending",
        }


class TestVerifyInvoice:
    @pytest.fixture
    def linked_jobs(self):
        return [
            make_job("j-1", "300", invoice_id="inv-1", invoice_status="Raised"),
            make_job("j-2", "200", invoice_id="inv-1", invoice_status="Raised"),
            make_job("j-3", "999"),
        ]

    def make_invoice(self, **amounts):
        return Invoice(invoice_id="inv-1", dispatcher_id="disp-1", commission=10, **amounts)

    def test_matching_invoice(self, aggregator, linked_jobs):
        invoice = self.make_invoice(sub_total="500.00", hst="65.00", total="515.00")

        report = aggregator.verify_invoice(invoice, linked_jobs)

        assert report.issues == []

    def test_cent_difference_is_tolerated(self, aggregator, linked_jobs):
        invoice = self.make_invoice(sub_total="500.01", hst="65.00", total="515.00")

        assert aggregator.verify_invoice(invoice, linked_jobs).is_valid()

    def test_stale_total(self, aggregator, linked_jobs):
        invoice = self.make_invoice(sub_total="500.00", hst="65.00", total="565.00")

        report = aggregator.verify_invoice(invoice, linked_jobs)

        assert [i.field for i in report.get_errors()] == ["total"]

    def test_missing_amounts_are_warnings(self, aggregator, linked_jobs):
        report = aggregator.verify_invoice(self.make_invoice(), linked_jobs)

        assert report.is_valid()
        assert report.warning_count == 3

    def test_linked_job_of_other_dispatcher(self, aggregator):
        jobs = [make_job("j-1", "100", dispatcher_id="disp-2", invoice_id="inv-1")]
        invoice = self.make_invoice(sub_total="100.00", hst="13.00", total="103.00")

        report = aggregator.verify_invoice(invoice, jobs)

        assert [i.field for i in report.get_errors()] == ["dispatcher_id"]
