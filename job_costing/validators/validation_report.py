"""Validation report for collecting and formatting validation issues.

Reports are shared by the record validators, the invoice aggregator and the
status state machine: anything that can reject data returns one instead of
raising.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues (ordered)."""

    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def from_name(cls, name: str) -> "ValidationSeverity":
        """Resolve a severity from its name, case-insensitively.

        Raises:
            ValueError: If the name is not a known severity
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {name}")


@dataclass
class ValidationIssue:
    """A single validation issue.

    Attributes:
        severity: The severity level of the issue
        field: The field (or record) the issue is about
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Optional context information (e.g., row, job_id)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        context_str = ""
        if self.context:
            context_str = " (" + ", ".join(f"{k}={v}" for k, v in self.context.items()) + ")"
        return f"[{self.severity.name}] {self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects validation issues and answers questions about them.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("job_ids", "Job already invoiced", "j-7")
        >>> report.add_warning("rate_of_job", "Rate is zero", 0)
        >>> report.is_valid()
        False
        >>> report.summary()
        '1 error(s), 1 warning(s)'
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """True when there are no errors; warnings and info do not count."""
        return self.error_count == 0

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ValidationIssue:
        """Record an issue and return it."""
        issue = ValidationIssue(
            severity=severity,
            field=field,
            message=message,
            value=value,
            context=dict(context) if context else None,
        )
        self.issues.append(issue)
        return issue

    def add_error(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, context)

    def get_errors(self) -> List[ValidationIssue]:
        return self.filter(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def filter(self, min_severity: ValidationSeverity) -> List[ValidationIssue]:
        """Issues at or above ``min_severity``, in the order they were added."""
        return [i for i in self.issues if i.severity >= min_severity]

    def add_context(self, **context: Any) -> None:
        """Attach context to every issue, keeping keys an issue already has."""
        for issue in self.issues:
            merged = dict(context)
            if issue.context:
                merged.update(issue.context)
            issue.context = merged

    def merge(self, other: "ValidationReport") -> None:
        """Append all issues of another report."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        parts = []
        if self.error_count:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count:
            parts.append(f"{self.info_count} info message(s)")
        return ", ".join(parts) if parts else "No issues found"

    def format(self, min_severity: ValidationSeverity = ValidationSeverity.INFO) -> str:
        """Format the report for display, grouped by severity (highest first).

        Args:
            min_severity: Hide issues below this severity
        """
        shown = self.filter(min_severity)
        if not shown:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]
        for severity in sorted(ValidationSeverity, reverse=True):
            group = [i for i in shown if i.severity == severity]
            if not group:
                continue
            lines.append(f"\n{severity.name}:")
            lines.extend(f"  - {issue}" for issue in group)
        return "\n".join(lines)
