"""Unit tests for the invoice command."""

import json
from decimal import Decimal

import pytest
from click.testing import CliRunner

from job_costing.cli import cli
from job_costing.cli.commands.invoice import format_rate


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, snapshot_file, *args):
    return runner.invoke(cli, ["invoice", str(snapshot_file), *args])


class TestInvoiceCommand:
    """Test invoice totals from the command line."""

    def test_new_invoice(self, runner, snapshot_file):
        result = invoke(
            runner,
            snapshot_file,
            "--dispatcher", "disp-1",
            "--commission", "10",
            "--job-id", "j-1",
            "--job-id", "j-2",
        )

        assert result.exit_code == 0
        assert "550.00" in result.output
        assert "HST (13%)" in result.output
        assert "71.50" in result.output
        assert "Commission (10%)" in result.output
        assert "55.00" in result.output
        assert "566.50" in result.output
        assert "Pending -> Raised" in result.output
        assert "Invoice computed for 2 job(s)" in result.output

    def test_existing_invoice_matches_stored_total(self, runner, snapshot_file):
        result = invoke(
            runner,
            snapshot_file,
            "--dispatcher", "disp-2",
            "--commission", "5",
            "--job-id", "j-4",
            "--invoice-id", "inv-9",
        )

        assert result.exit_code == 0
        assert "270.00" in result.output
        assert "Raised -> Raised" in result.output

    def test_recompute_replaces_stale_gross(self, runner, tmp_path, sample_snapshot_data):
        sample_snapshot_data["jobs"][2]["jobGrossAmount"] = "1.00"
        path = tmp_path / "stale.json"
        path.write_text(json.dumps(sample_snapshot_data), encoding="utf-8")
        args = ["--dispatcher", "disp-1", "--commission", "0", "--job-id", "j-3"]

        stale = invoke(runner, path, *args)
        fresh = invoke(runner, path, *args, "--recompute")

        assert stale.exit_code == 0
        assert "1.13" in stale.output
        assert fresh.exit_code == 0
        assert "282.50" in fresh.output

    def test_job_of_other_dispatcher_is_rejected(self, runner, snapshot_file):
        result = invoke(
            runner,
            snapshot_file,
            "--dispatcher", "disp-1",
            "--commission", "10",
            "--job-id", "j-1",
            "--job-id", "j-4",
        )

        assert result.exit_code == 3
        assert "Invoice rejected" in result.output
        assert "Job belongs to dispatcher disp-2" in result.output

    def test_bad_commission(self, runner, snapshot_file):
        result = invoke(
            runner,
            snapshot_file,
            "--dispatcher", "disp-1",
            "--commission", "150",
            "--job-id", "j-1",
        )

        assert result.exit_code == 3
        assert "Commission must be between 0 and 100" in result.output

    def test_job_id_is_required(self, runner, snapshot_file):
        result = invoke(runner, snapshot_file, "--dispatcher", "disp-1", "--commission", "10")

        assert result.exit_code == 2
        assert "--job-id" in result.output


class TestFormatRate:
    def test_whole_percent(self):
        assert format_rate(Decimal("0.13")) == "13%"

    def test_fractional_percent(self):
        assert format_rate(Decimal("0.075")) == "7.5%"
