"""Compute job costing command."""

import logging
from typing import Optional

import click

from job_costing.calculators.job_calculator import (
    aggregate_job_costings,
    calculate_job_costing_batch,
)
from job_costing.cli.error_handlers import DataValidationError, with_error_handling
from job_costing.cli.utils.formatters import (
    format_amount,
    format_info,
    format_success,
    format_table,
    format_warning,
)
from job_costing.cli.utils.snapshot import load_snapshot
from job_costing.config.settings import get_config
from job_costing.writers.costing_report import CostingReportGenerator

logger = logging.getLogger(__name__)


@click.command(name="compute")
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the costing report to this CSV file",
)
@click.pass_context
def compute_costing(ctx: click.Context, snapshot: str, output: Optional[str]):
    """Compute hours, amounts, pay and estimates for every job in SNAPSHOT.

    Example:
        job-costing compute snapshot.json
        job-costing compute snapshot.json --output costing.csv
    """
    with with_error_handling(ctx.obj.get("debug", False)):
        data = load_snapshot(snapshot)
        if data.skipped:
            click.echo(format_warning(f"Skipped {data.skipped} invalid record(s)"))

        if not data.jobs:
            click.echo(format_info("No jobs to compute"))
            return

        try:
            results = calculate_job_costing_batch(
                data.jobs, data.job_types, data.drivers, get_config()
            )
        except KeyError as e:
            raise DataValidationError(
                e.args[0] if e.args else str(e),
                "Every job must reference a job type and driver present in the snapshot",
            )

        rows = [
            [
                r.job_id,
                r.day_of_job or "",
                r.dispatch_type.value if r.dispatch_type else "?",
                r.hours_of_job,
                r.hours_of_driver,
                format_amount(r.job_gross_amount),
                format_amount(r.driver_pay),
                format_amount(r.estimated_fuel),
                format_amount(r.estimated_revenue),
            ]
            for r in results
        ]
        click.echo(
            format_table(
                [
                    "Job",
                    "Day",
                    "Dispatch",
                    "Job Hrs",
                    "Driver Hrs",
                    "Gross",
                    "Driver Pay",
                    "Fuel",
                    "Revenue",
                ],
                rows,
                numeric_columns=range(3, 9),
            )
        )

        summary = aggregate_job_costings(results)
        click.echo()
        click.echo(f"Jobs:              {summary.job_count}")
        click.echo(f"Total gross:       {format_amount(summary.total_gross_amount)}")
        click.echo(f"Total driver pay:  {format_amount(summary.total_driver_pay)}")
        click.echo(f"Total fuel:        {format_amount(summary.total_estimated_fuel)}")
        click.echo(f"Total revenue:     {format_amount(summary.total_estimated_revenue)}")

        unknown = [r.job_id for r in results if r.dispatch_type is None]
        if unknown:
            click.echo(
                format_warning(
                    f"{len(unknown)} job(s) have an unknown dispatch type and bill 0: "
                    + ", ".join(unknown)
                )
            )

        if output:
            path = CostingReportGenerator(data.jobs, results, data.job_types).write_csv(
                output
            )
            click.echo(format_success(f"Report written to {path}"))
