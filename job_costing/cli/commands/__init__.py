"""CLI commands."""

from job_costing.cli.commands.compute import compute_costing
from job_costing.cli.commands.driver_pay import driver_pay_summary
from job_costing.cli.commands.invoice import invoice_totals
from job_costing.cli.commands.validate import validate_snapshot

__all__ = ["compute_costing", "driver_pay_summary", "invoice_totals", "validate_snapshot"]
