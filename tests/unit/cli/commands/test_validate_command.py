"""Unit tests for the validate command."""

import json

import pytest
from click.testing import CliRunner

from job_costing.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_snapshot(tmp_path, sample_snapshot_data):
    def write(mutate):
        mutate(sample_snapshot_data)
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(sample_snapshot_data), encoding="utf-8")
        return path

    return write


class TestValidateCommand:
    def test_clean_snapshot(self, runner, snapshot_file):
        result = runner.invoke(cli, ["validate", str(snapshot_file)])

        assert result.exit_code == 0
        assert "Validating snapshot records..." in result.output
        assert "Job records:      4" in result.output
        assert "Validation passed! No issues found." in result.output

    def test_errors_fail(self, runner, write_snapshot):
        def bad_time(data):
            data["jobs"][0]["endTimeForJob"] = "25:00"

        result = runner.invoke(cli, ["validate", str(write_snapshot(bad_time))])

        assert result.exit_code == 2
        assert "ERROR (1):" in result.output
        assert "endTimeForJob: Time must be in HH:MM format (row=1, job_id=j-1)" in result.output
        assert "Validation failed with 1 error(s)" in result.output

    def test_warnings_pass(self, runner, write_snapshot):
        def stale_gross(data):
            data["jobs"][1]["jobGrossAmount"] = "400.00"

        result = runner.invoke(cli, ["validate", str(write_snapshot(stale_gross))])

        assert result.exit_code == 0
        assert "WARNING (1):" in result.output
        assert "Validation completed with 1 warning(s)" in result.output

    def test_info_is_hidden_by_default(self, runner, write_snapshot):
        def plain_weight(data):
            data["jobs"][1]["weight"] = "10 12.5"

        path = write_snapshot(plain_weight)

        hidden = runner.invoke(cli, ["validate", str(path)])
        shown = runner.invoke(cli, ["validate", str(path), "--severity", "info"])

        assert "INFO (1):" not in hidden.output
        assert "INFO (1):" in shown.output
        assert "Weight is not JSON encoded" in shown.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2", encoding="utf-8")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 2
        assert "not valid JSON" in result.output
