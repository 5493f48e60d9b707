"""Field-level validators for raw job, job type and driver records.

These run on the raw values, before model construction, because the models
deliberately coerce bad input to defaults (a garbled rate becomes 0, a
malformed clock time becomes "absent"). The validators surface what the
coercion would hide.
"""

import datetime as dt
import json
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from job_costing.calculators.time_utils import parse_clock_time
from job_costing.models.job import InvoiceStatus
from job_costing.models.job_type import DispatchType
from job_costing.utils.parsing import MAX_MAGNITUDE
from job_costing.validators.validation_report import ValidationReport


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


class FieldValidators:
    """Collection of field-level validation methods.

    Every method takes the raw value, the field name used in issues, and
    the report to add issues to.
    """

    @staticmethod
    def validate_required_string(value: Any, field_name: str, report: ValidationReport) -> None:
        """Identifiers and names must be present and non-blank."""
        if _is_blank(value):
            report.add_error(field_name, "Value is required", value)

    @staticmethod
    def validate_date(value: Any, field_name: str, report: ValidationReport) -> None:
        """Dates are optional but must be ISO formatted when present.

        A missing date leaves dayOfJob empty, so it is reported as a warning.
        """
        if _is_blank(value):
            report.add_warning(field_name, "Date is missing; day of job cannot be set", value)
            return
        if isinstance(value, dt.date):
            return
        try:
            dt.date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            report.add_error(field_name, "Date must be in YYYY-MM-DD format", value)

    @staticmethod
    def validate_clock_time(value: Any, field_name: str, report: ValidationReport) -> None:
        """Clock times must be "HH:MM" or "HH:MM:SS".

        Missing and malformed times both count as zero hours, so a missing
        time is a warning and a malformed one an error.
        """
        if _is_blank(value):
            report.add_warning(field_name, "Time is missing; duration counts as 0", value)
            return
        if parse_clock_time(value) is None:
            report.add_error(field_name, "Time must be in HH:MM format", value)

    @staticmethod
    def validate_non_negative_number(
        value: Any,
        field_name: str,
        report: ValidationReport,
        required: bool = True,
    ) -> None:
        """Rates and amounts must be numbers >= 0; numeric strings are accepted."""
        if _is_blank(value):
            if required:
                report.add_error(field_name, "Value is required", value)
            return
        parsed = _as_decimal(value)
        if parsed is None:
            report.add_error(field_name, "Value must be a number", value)
        elif parsed < 0:
            report.add_error(field_name, "Value cannot be negative", value)
        elif parsed >= MAX_MAGNITUDE:
            report.add_error(field_name, "Value is too large; it counts as 0", value)

    @staticmethod
    def validate_loads(value: Any, field_name: str, report: ValidationReport) -> None:
        """Loads are a whole, non-negative count (absent means 0)."""
        if _is_blank(value):
            return
        parsed = _as_decimal(value)
        if parsed is None:
            report.add_error(field_name, "Loads must be a whole number", value)
            return
        if parsed < 0:
            report.add_error(field_name, "Loads cannot be negative", value)
        elif parsed >= MAX_MAGNITUDE:
            report.add_error(field_name, "Loads value is too large; it counts as 0", value)
        elif parsed != parsed.to_integral_value():
            report.add_warning(field_name, "Fractional loads are truncated", value)

    @staticmethod
    def validate_weight(value: Any, field_name: str, report: ValidationReport) -> None:
        """Weights are a number, a list of numbers, or their JSON encoding.

        Plain space or comma separated strings are accepted with an info
        message because they are read by a lenient fallback.
        """
        if _is_blank(value):
            return

        entries = value
        if isinstance(value, str):
            try:
                entries = json.loads(value)
            except ValueError:
                report.add_info(field_name, "Weight is not JSON encoded", value)
                tokens = value.strip().strip("[]").replace(",", " ").replace(";", " ").split()
                bad = [t for t in tokens if _as_decimal(t) is None]
                if bad:
                    report.add_warning(
                        field_name, f"Non-numeric weight entries are ignored: {bad}", value
                    )
                return

        if not isinstance(entries, (list, tuple)):
            entries = [entries]
        for index, entry in enumerate(entries):
            parsed = _as_decimal(entry)
            if parsed is None:
                report.add_error(
                    f"{field_name}[{index}]", "Weight entry must be a number", entry
                )
            elif parsed < 0:
                report.add_error(
                    f"{field_name}[{index}]", "Weight entry cannot be negative", entry
                )
            elif parsed >= MAX_MAGNITUDE:
                report.add_error(
                    f"{field_name}[{index}]", "Weight entry is too large; it counts as 0", entry
                )

    @staticmethod
    def validate_dispatch_type(value: Any, field_name: str, report: ValidationReport) -> None:
        """Unknown dispatch types bill 0, which is a warning rather than a failure."""
        if DispatchType.parse(value) is None:
            allowed = ", ".join(d.value for d in DispatchType)
            report.add_warning(
                field_name,
                f"Unknown dispatch type; jobs of this type bill 0 (expected one of: {allowed})",
                value,
            )

    @staticmethod
    def validate_invoice_status(value: Any, field_name: str, report: ValidationReport) -> None:
        """Absent status means Pending; anything else must be a known status."""
        if _is_blank(value):
            return
        if InvoiceStatus.parse(value) is None:
            allowed = ", ".join(s.value for s in InvoiceStatus)
            report.add_error(field_name, f"Invoice status must be one of: {allowed}", value)
