"""Validate snapshot records command."""

import click

from job_costing.cli.error_handlers import DataValidationError, with_error_handling
from job_costing.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from job_costing.cli.utils.snapshot import load_snapshot
from job_costing.config.settings import get_config
from job_costing.validators.validation_report import ValidationSeverity
from job_costing.validators.validator import JobValidator

_MAX_ISSUES_PER_SEVERITY = 20


@click.command(name="validate")
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="warning",
    help="Minimum severity level to display (default: warning)",
)
@click.pass_context
def validate_snapshot(ctx: click.Context, snapshot: str, severity: str):
    """Validate the job records in SNAPSHOT.

    Checks for:
    - Field-level problems (times, weights, loads, statuses)
    - Business rule issues (unknown dispatch types, zero rates)
    - Stored derived fields that no longer match a fresh computation

    Returns non-zero exit code if errors are found.

    Example:
        job-costing validate snapshot.json
        job-costing validate snapshot.json --severity info
    """
    with with_error_handling(ctx.obj.get("debug", False)):
        click.echo(format_info("Validating snapshot records..."))
        data = load_snapshot(snapshot)
        min_severity = ValidationSeverity.from_name(severity)

        validator = JobValidator(data.job_types, data.drivers, get_config())
        report = validator.validate_records(data.raw_jobs)

        click.echo()
        click.echo("=" * 60)
        click.echo("Validation Summary")
        click.echo("=" * 60)
        click.echo(f"Job records:      {len(data.raw_jobs)}")
        click.echo(f"Errors:           {report.error_count}")
        click.echo(f"Warnings:         {report.warning_count}")
        click.echo(f"Info:             {report.info_count}")

        styles = {
            ValidationSeverity.ERROR: format_error,
            ValidationSeverity.WARNING: format_warning,
            ValidationSeverity.INFO: format_info,
        }
        for level in sorted(ValidationSeverity, reverse=True):
            if level < min_severity:
                continue
            issues = [i for i in report.issues if i.severity == level]
            if not issues:
                continue
            click.echo()
            click.echo(f"{level.name} ({len(issues)}):")
            for issue in issues[:_MAX_ISSUES_PER_SEVERITY]:
                click.echo(styles[level](f"  {issue}"))
            if len(issues) > _MAX_ISSUES_PER_SEVERITY:
                click.echo(f"  ... and {len(issues) - _MAX_ISSUES_PER_SEVERITY} more")

        click.echo()
        if report.has_errors():
            raise DataValidationError(
                f"Validation failed with {report.error_count} error(s)",
                "Fix the listed records and run validate again",
            )
        if report.warning_count:
            click.echo(
                format_warning(f"Validation completed with {report.warning_count} warning(s)")
            )
        else:
            click.echo(format_success("Validation passed! No issues found."))
