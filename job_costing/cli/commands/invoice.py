"""Invoice aggregation command."""

from decimal import Decimal
from typing import Optional, Tuple

import click

from job_costing.aggregators.invoice_aggregator import InvoiceAggregator
from job_costing.calculators.job_calculator import apply_costing, calculate_job_costing
from job_costing.cli.error_handlers import ProcessingError, with_error_handling
from job_costing.cli.utils.formatters import (
    format_amount,
    format_error,
    format_info,
    format_success,
    format_table,
    format_warning,
)
from job_costing.cli.utils.snapshot import load_snapshot
from job_costing.config.settings import get_config
from job_costing.validators.validation_report import ValidationSeverity


@click.command(name="invoice")
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option("--dispatcher", "dispatcher_id", required=True, help="Dispatcher to bill")
@click.option(
    "--commission",
    type=str,
    required=True,
    help="Dispatcher commission percentage (0-100)",
)
@click.option(
    "--job-id",
    "job_ids",
    multiple=True,
    required=True,
    help="Job to include (repeat for several jobs)",
)
@click.option(
    "--invoice-id",
    default=None,
    help="Existing invoice being edited; jobs no longer listed are released",
)
@click.option(
    "--recompute/--no-recompute",
    default=False,
    help="Recompute each job's gross amount before aggregating",
)
@click.pass_context
def invoice_totals(
    ctx: click.Context,
    snapshot: str,
    dispatcher_id: str,
    commission: str,
    job_ids: Tuple[str, ...],
    invoice_id: Optional[str],
    recompute: bool,
):
    """Compute invoice totals for a dispatcher's jobs in SNAPSHOT.

    Exits non-zero when the job set conflicts (unknown jobs, jobs of another
    dispatcher, jobs already on another invoice).

    Example:
        job-costing invoice snapshot.json --dispatcher disp-1 --commission 10 \\
            --job-id j-1 --job-id j-2
    """
    with with_error_handling(ctx.obj.get("debug", False)):
        data = load_snapshot(snapshot)
        config = get_config()
        jobs = data.jobs

        if recompute:
            recomputed = []
            for job in jobs:
                job_type = data.job_types.get(job.job_type_id or "")
                driver = data.drivers.get(job.driver_id or "")
                if job_type is not None and driver is not None:
                    job = apply_costing(
                        job, calculate_job_costing(job, job_type, driver, config)
                    )
                recomputed.append(job)
            jobs = recomputed

        aggregator = InvoiceAggregator(hst_rate=config.hst_rate)
        result = aggregator.aggregate(
            dispatcher_id, commission, list(job_ids), jobs, invoice_id=invoice_id
        )

        for issue in result.report.issues:
            if issue.severity == ValidationSeverity.ERROR:
                click.echo(format_error(str(issue)))
            elif issue.severity == ValidationSeverity.WARNING:
                click.echo(format_warning(str(issue)))
            else:
                click.echo(format_info(str(issue)))

        if not result.is_valid:
            raise ProcessingError(
                f"Invoice rejected: {result.report.summary()}",
                "Remove conflicting jobs or release them from their current invoice",
            )

        click.echo(
            format_table(
                ["", "Amount"],
                [
                    ["Sub total", format_amount(result.sub_total)],
                    [f"HST ({format_rate(aggregator.hst_rate)})", format_amount(result.hst)],
                    [
                        f"Commission ({result.commission_percent}%)",
                        format_amount(result.commission),
                    ],
                    ["Total", format_amount(result.total)],
                ],
                numeric_columns=[1],
            )
        )

        if result.job_invoice_status_changes:
            click.echo()
            click.echo(
                format_table(
                    ["Job", "Status", "Invoice"],
                    [
                        [
                            change.job_id,
                            f"{change.previous_status.value} -> {change.new_status.value}",
                            change.invoice_id or "-",
                        ]
                        for change in result.job_invoice_status_changes
                    ],
                )
            )

        click.echo(format_success(f"Invoice computed for {len(result.job_ids)} job(s)"))


def format_rate(rate: Decimal) -> str:
    """Render a fractional rate as a percentage, e.g. 0.13 -> '13%'."""
    return f"{(rate * 100).normalize():f}%"
