"""Readers that turn stored records into engine models."""

from job_costing.readers.snapshot_reader import Snapshot, SnapshotReader

__all__ = ["Snapshot", "SnapshotReader"]
