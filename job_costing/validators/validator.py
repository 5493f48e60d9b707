"""Validator orchestrator for raw job records.

JobValidator runs field validation on the raw record, builds the Job model,
then (when job types and drivers are known) recomputes the job and applies
the business rules.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import ValidationError

from job_costing.calculators.job_calculator import calculate_job_costing
from job_costing.config.settings import CostingConfig
from job_costing.models.driver import Driver
from job_costing.models.job import Job
from job_costing.models.job_type import JobType
from job_costing.validators.business_validators import BusinessRuleValidators
from job_costing.validators.field_validators import FieldValidators
from job_costing.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

_CLOCK_FIELDS = (
    "startTimeForJob",
    "endTimeForJob",
    "startTimeForDriver",
    "endTimeForDriver",
)


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


class JobValidator:
    """Validates raw job records against field and business rules.

    Example:
        >>> validator = JobValidator(job_types={"jt-1": job_type}, drivers={"d-1": driver})
        >>> report = validator.validate_record({"jobId": "j-1", ...}, row_number=1)
        >>> if not report.is_valid():
        ...     print(report.format())
    """

    def __init__(
        self,
        job_types: Optional[Dict[str, JobType]] = None,
        drivers: Optional[Dict[str, Driver]] = None,
        config: Optional[CostingConfig] = None,
    ) -> None:
        """Initialize the validator.

        Args:
            job_types: Known job types keyed by id (enables business rules)
            drivers: Known drivers keyed by id (enables business rules)
            config: Costing configuration used for recomputation
        """
        self.job_types = job_types or {}
        self.drivers = drivers or {}
        self.config = config

    def validate_record(
        self,
        raw: Mapping[str, Any],
        row_number: Optional[int] = None,
        validate_business_rules: bool = True,
    ) -> ValidationReport:
        """Validate a single raw job record.

        Args:
            raw: Job record as stored (camelCase keys)
            row_number: Optional row number added to every issue's context
            validate_business_rules: Whether to apply business rules

        Returns:
            ValidationReport with any issues found
        """
        report = ValidationReport()
        self._validate_fields(raw, report)

        job = self._build_job(raw, report)
        if job is not None and validate_business_rules:
            self._validate_business_rules(job, report)

        context: Dict[str, Any] = {}
        if row_number is not None:
            context["row"] = row_number
        job_id = _first(raw, "jobId", "job_id")
        if job_id:
            context["job_id"] = job_id
        if context:
            report.add_context(**context)
        return report

    def validate_records(
        self,
        records: Iterable[Mapping[str, Any]],
        validate_business_rules: bool = True,
    ) -> ValidationReport:
        """Validate many raw job records, numbering rows from 1."""
        combined = ValidationReport()
        count = 0
        for count, raw in enumerate(records, start=1):
            combined.merge(
                self.validate_record(
                    raw, row_number=count, validate_business_rules=validate_business_rules
                )
            )
        logger.info(f"Validated {count} job record(s): {combined.summary()}")
        return combined

    def validate_job_type_record(self, raw: Mapping[str, Any]) -> ValidationReport:
        """Validate a raw job type record."""
        report = ValidationReport()
        FieldValidators.validate_required_string(
            _first(raw, "jobTypeId", "job_type_id"), "job_type_id", report
        )
        FieldValidators.validate_dispatch_type(
            _first(raw, "dispatchType", "dispatch_type"), "dispatch_type", report
        )
        FieldValidators.validate_non_negative_number(
            _first(raw, "rateOfJob", "rate_of_job"), "rate_of_job", report
        )
        return report

    def validate_driver_record(self, raw: Mapping[str, Any]) -> ValidationReport:
        """Validate a raw driver record."""
        report = ValidationReport()
        FieldValidators.validate_required_string(
            _first(raw, "driverId", "driver_id"), "driver_id", report
        )
        FieldValidators.validate_non_negative_number(
            _first(raw, "hourlyRate", "hourly_rate"), "hourly_rate", report
        )
        return report

    def _validate_fields(self, raw: Mapping[str, Any], report: ValidationReport) -> None:
        FieldValidators.validate_required_string(
            _first(raw, "jobId", "job_id"), "job_id", report
        )
        FieldValidators.validate_date(
            _first(raw, "jobDate", "dateOfJob", "job_date"), "job_date", report
        )
        for key in _CLOCK_FIELDS:
            FieldValidators.validate_clock_time(raw.get(key), key, report)
        FieldValidators.validate_weight(raw.get("weight"), "weight", report)
        FieldValidators.validate_loads(raw.get("loads"), "loads", report)
        FieldValidators.validate_invoice_status(
            _first(raw, "invoiceStatus", "invoice_status"), "invoice_status", report
        )

    def _build_job(self, raw: Mapping[str, Any], report: ValidationReport) -> Optional[Job]:
        try:
            return Job.model_validate(dict(raw))
        except ValidationError as e:
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "job"
                report.add_error(field, error["msg"], error.get("input"))
            return None

    def _validate_business_rules(self, job: Job, report: ValidationReport) -> None:
        if not self.job_types and not self.drivers:
            return

        job_type = self.job_types.get(job.job_type_id) if job.job_type_id else None
        driver = self.drivers.get(job.driver_id) if job.driver_id else None
        if job_type is None:
            report.add_error("job_type_id", "Unknown job type", job.job_type_id)
        if driver is None:
            report.add_error("driver_id", "Unknown driver", job.driver_id)
        if job_type is None or driver is None:
            return

        fresh = calculate_job_costing(job, job_type, driver, self.config)
        BusinessRuleValidators.validate_job(job, job_type, driver, fresh, report)
