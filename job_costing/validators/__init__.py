"""Validation layer for data quality and business rule compliance."""

from job_costing.validators.business_validators import BusinessRuleValidators
from job_costing.validators.field_validators import FieldValidators
from job_costing.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)
from job_costing.validators.validator import JobValidator

__all__ = [
    "JobValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
    "FieldValidators",
    "BusinessRuleValidators",
]
