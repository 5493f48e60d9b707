"""Snapshot loading shared by CLI commands."""

from pathlib import Path

from job_costing.cli.error_handlers import DataValidationError
from job_costing.readers.snapshot_reader import Snapshot, SnapshotReader


def load_snapshot(path: str) -> Snapshot:
    """Read a snapshot, turning read failures into DataValidationError."""
    try:
        return SnapshotReader().read(Path(path))
    except FileNotFoundError:
        raise DataValidationError(
            f"Snapshot not found: {path}", "Check the path to the JSON snapshot"
        )
    except ValueError as e:
        raise DataValidationError(
            str(e),
            'Expected a JSON object with "job_types", "drivers", "jobs" '
            'and "invoices" lists',
        )
