"""Unit tests for the gross amount calculator.

Covers every dispatch rule:
- Hourly billing rounded up to the quarter hour
- Tonnage billing over all weights
- Load billing
- Fixed billing regardless of measured quantities
- Unknown dispatch types billing 0
"""

import logging
from decimal import Decimal

import pytest

from job_costing.calculators.gross_amount_calculator import calculate_gross_amount
from job_costing.calculators.time_utils import calculate_duration_hours
from job_costing.models import DispatchType, Job, JobType


class TestHourly:
    """Hourly jobs bill rounded-up hours × rate."""

    def test_fifty_minutes_bills_one_hour(self, hourly_job, hourly_job_type):
        hours = calculate_duration_hours("08:00", "08:50")

        result = calculate_gross_amount(hourly_job, hourly_job_type, hours)

        assert result.amount == Decimal("100.00")
        assert result.billed_hours == Decimal("1")
        assert result.dispatch_type is DispatchType.HOURLY

    def test_overnight_job(self, hourly_job_type):
        job = Job(job_id="j-2", start_time_for_job="22:00", end_time_for_job="02:00")
        hours = calculate_duration_hours(job.start_time_for_job, job.end_time_for_job)

        result = calculate_gross_amount(job, hourly_job_type, hours)

        assert result.amount == Decimal("400.00")

    def test_61_minutes_bills_75(self, hourly_job_type):
        job = Job(job_id="j-3")

        result = calculate_gross_amount(job, hourly_job_type, Decimal(61) / Decimal(60))

        assert result.amount == Decimal("125.00")

    def test_custom_increment(self, hourly_job_type):
        job = Job(job_id="j-4")

        result = calculate_gross_amount(
            job, hourly_job_type, Decimal(61) / Decimal(60), increment_minutes=30
        )

        assert result.amount == Decimal("150.00")

    def test_weight_and_loads_are_ignored(self, hourly_job_type):
        job = Job(job_id="j-5", weight=[100], loads=9)

        result = calculate_gross_amount(job, hourly_job_type, Decimal("2"))

        assert result.amount == Decimal("200.00")


class TestTonnage:
    """Tonnage jobs bill total weight × rate."""

    def test_weight_list(self, tonnage_job_type):
        job = Job(job_id="j-1", weight=[10, "12.5"])

        result = calculate_gross_amount(job, tonnage_job_type, Decimal("0"))

        assert result.amount == Decimal("450.00")
        assert result.billed_hours is None

    def test_json_encoded_weight(self, tonnage_job_type):
        job = Job(job_id="j-1", weight="[10, 12.5]")

        result = calculate_gross_amount(job, tonnage_job_type, Decimal("3"))

        assert result.amount == Decimal("450.00")

    def test_single_weight(self, tonnage_job_type):
        job = Job(job_id="j-1", weight=7.5)

        assert calculate_gross_amount(job, tonnage_job_type, Decimal("0")).amount == Decimal(
            "150.00"
        )

    def test_no_weight_bills_zero(self, tonnage_job_type):
        job = Job(job_id="j-1")

        assert calculate_gross_amount(job, tonnage_job_type, Decimal("5")).amount == Decimal(
            "0.00"
        )


class TestLoad:
    def test_loads_times_rate(self, load_job_type):
        job = Job(job_id="j-1", loads=5)

        assert calculate_gross_amount(job, load_job_type, Decimal("0")).amount == Decimal(
            "250.00"
        )

    def test_missing_loads_bill_zero(self, load_job_type):
        job = Job(job_id="j-1", loads=None)

        assert calculate_gross_amount(job, load_job_type, Decimal("0")).amount == Decimal(
            "0.00"
        )


class TestFixed:
    @pytest.mark.parametrize(
        "weight,loads,hours",
        [
            ([], 0, Decimal("0")),
            ([10, 20], 3, Decimal("7.5")),
            ("[1000]", 99, Decimal("23.99")),
        ],
    )
    def test_amount_is_rate_regardless_of_quantities(
        self, fixed_job_type, weight, loads, hours
    ):
        job = Job(job_id="j-1", weight=weight, loads=loads)

        result = calculate_gross_amount(job, fixed_job_type, hours)

        assert result.amount == fixed_job_type.rate_of_job


class TestUnknownDispatchType:
    def test_bills_zero_and_logs_warning(self, caplog):
        job_type = JobType(job_type_id="jt-x", dispatch_type="Weekly", rate_of_job=500)
        job = Job(job_id="j-1", loads=3)

        with caplog.at_level(logging.WARNING):
            result = calculate_gross_amount(job, job_type, Decimal("8"))

        assert result.amount == Decimal("0.00")
        assert result.dispatch_type is None
        assert "Weekly" in caplog.text

    def test_dispatch_type_is_case_insensitive(self):
        job_type = JobType(job_type_id="jt-x", dispatch_type=" load ", rate_of_job=10)
        job = Job(job_id="j-1", loads=3)

        result = calculate_gross_amount(job, job_type, Decimal("0"))

        assert result.amount == Decimal("30.00")
        assert result.dispatch_type is DispatchType.LOAD


class TestPurity:
    def test_same_snapshot_same_result(self, hourly_job, hourly_job_type):
        hours = Decimal("1.2")

        first = calculate_gross_amount(hourly_job, hourly_job_type, hours)
        second = calculate_gross_amount(hourly_job, hourly_job_type, hours)

        assert first == second

    def test_non_numeric_rate_bills_zero(self):
        job_type = JobType(job_type_id="jt-x", dispatch_type="Fixed", rate_of_job="n/a")

        result = calculate_gross_amount(Job(job_id="j-1"), job_type, Decimal("1"))

        assert result.amount == Decimal("0.00")


class TestNegativeQuantities:
    """Negative loads or weights never produce a negative bill."""

    def test_negative_loads_bill_zero(self, load_job_type, caplog):
        job = Job(job_id="j-1", loads="-3")

        with caplog.at_level(logging.WARNING):
            result = calculate_gross_amount(job, load_job_type, Decimal("0"))

        assert result.amount == Decimal("0.00")
        assert "Negative gross amount" in caplog.text

    def test_negative_weight_total_bills_zero(self, tonnage_job_type):
        job = Job(job_id="j-1", weight="[10, -25]")

        assert calculate_gross_amount(job, tonnage_job_type, Decimal("0")).amount == Decimal(
            "0.00"
        )

    def test_positive_total_with_a_negative_entry(self, tonnage_job_type):
        job = Job(job_id="j-1", weight="[30, -5]")

        assert calculate_gross_amount(job, tonnage_job_type, Decimal("0")).amount == Decimal(
            "500.00"
        )


class TestOutOfRangeValues:
    """Absurdly large inputs degrade to 0 instead of raising."""

    def test_huge_weight(self, tonnage_job_type):
        job = Job(job_id="j-1", weight="[1e27]")

        assert calculate_gross_amount(job, tonnage_job_type, Decimal("0")).amount == Decimal(
            "0.00"
        )

    def test_huge_rate(self):
        job_type = JobType(job_type_id="jt-x", dispatch_type="Fixed", rate_of_job="1e30")

        result = calculate_gross_amount(Job(job_id="j-1"), job_type, Decimal("1"))

        assert result.amount == Decimal("0.00")

    def test_huge_loads(self, load_job_type):
        job = Job(job_id="j-1", loads="1e999999999")

        assert job.loads == 0
        assert calculate_gross_amount(job, load_job_type, Decimal("0")).amount == Decimal(
            "0.00"
        )
