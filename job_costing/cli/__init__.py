"""Job Costing CLI.

This module provides a command-line interface for the job-costing engine.
It includes commands for costing jobs, computing invoices, summarizing
driver pay, and validating snapshot data.
"""

import click
from pydantic import ValidationError

from job_costing import __version__
from job_costing.cli.commands.compute import compute_costing
from job_costing.cli.commands.driver_pay import driver_pay_summary
from job_costing.cli.commands.invoice import invoice_totals
from job_costing.cli.commands.validate import validate_snapshot
from job_costing.cli.error_handlers import ConfigurationError, handle_cli_error
from job_costing.config.logging_config import LoggingConfig, configure_logging
from job_costing.config.settings import get_config


@click.group(help="Job Costing CLI - Cost trucking jobs and compute dispatcher invoices")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Verbose logging and full stack traces")
@click.option(
    "--log-format",
    type=click.Choice(["standard", "json"]),
    default="standard",
    help="Log output format (default: standard)",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_format: str):
    """Job Costing CLI main entry point."""
    ctx.ensure_object(dict)
    try:
        settings = get_config()
    except ValidationError as e:
        error = ConfigurationError(
            f"Invalid settings: {e.error_count()} error(s)\n{e}",
            "Check HST_RATE, FUEL_COST_PER_HOUR, BILLING_INCREMENT_MINUTES "
            "and LOG_LEVEL in your environment or .env file",
        )
        ctx.exit(handle_cli_error(error, debug))

    logging_config = LoggingConfig.from_settings(settings, log_format=log_format)
    if debug:
        logging_config.log_level = "DEBUG"
    configure_logging(logging_config)
    ctx.obj["debug"] = debug or settings.debug


# Register commands
cli.add_command(compute_costing)
cli.add_command(invoice_totals)
cli.add_command(validate_snapshot)
cli.add_command(driver_pay_summary)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
