"""Driver pay summary command."""

import datetime as dt
from typing import Optional

import click

from job_costing.aggregators.driver_pay_aggregator import DriverPayAggregator
from job_costing.calculators.job_calculator import apply_costing, calculate_job_costing
from job_costing.cli.error_handlers import ConfigurationError, with_error_handling
from job_costing.cli.utils.formatters import format_amount, format_info, format_table
from job_costing.cli.utils.snapshot import load_snapshot
from job_costing.config.settings import get_config


def parse_date_input(value: Optional[str], option: str) -> Optional[dt.date]:
    """Parse a YYYY-MM-DD option value.

    Raises:
        ConfigurationError: If the value is not a valid date
    """
    if value is None:
        return None
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ConfigurationError(
            f"Invalid {option}: {value}", "Dates must be in YYYY-MM-DD format"
        )


@click.command(name="driver-pay")
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option("--start-date", default=None, help="First job date (YYYY-MM-DD)")
@click.option("--end-date", default=None, help="Last job date (YYYY-MM-DD)")
@click.option("--driver", "driver_id", default=None, help="Only this driver")
@click.pass_context
def driver_pay_summary(
    ctx: click.Context,
    snapshot: str,
    start_date: Optional[str],
    end_date: Optional[str],
    driver_id: Optional[str],
):
    """Summarize driver pay (paid and outstanding) for jobs in SNAPSHOT.

    Jobs are recomputed first, so stale stored pay does not leak into the
    summary. Jobs whose job type or driver is missing are skipped.

    Example:
        job-costing driver-pay snapshot.json --start-date 2024-03-01 --end-date 2024-03-31
    """
    with with_error_handling(ctx.obj.get("debug", False)):
        start = parse_date_input(start_date, "--start-date")
        end = parse_date_input(end_date, "--end-date")
        if start and end and start > end:
            raise ConfigurationError(
                f"--start-date {start} is after --end-date {end}",
                "Swap the dates or widen the range",
            )

        data = load_snapshot(snapshot)
        config = get_config()
        costed = []
        for job in data.jobs:
            job_type = data.job_types.get(job.job_type_id or "")
            driver = data.drivers.get(job.driver_id or "")
            if job_type is None or driver is None:
                continue
            costed.append(apply_costing(job, calculate_job_costing(job, job_type, driver, config)))

        summaries = DriverPayAggregator().summarize(costed, start, end, driver_id)
        if not summaries:
            click.echo(format_info("No driver pay in the selected range"))
            return

        click.echo(
            format_table(
                ["Driver", "Jobs", "Hours", "Total Pay", "Paid", "Outstanding"],
                [
                    [
                        s.driver_id,
                        s.job_count,
                        s.total_hours,
                        format_amount(s.total_pay),
                        format_amount(s.paid_pay),
                        format_amount(s.outstanding_pay),
                    ]
                    for s in summaries
                ],
                numeric_columns=range(1, 6),
            )
        )
