"""Snapshot reader for loading job-costing input records from JSON.

A snapshot is the in-memory view the persistence layer hands the engine:

```
{
  "job_types": [{"jobTypeId": "jt-1", "dispatchType": "Hourly", "rateOfJob": 100}],
  "drivers":   [{"driverId": "d-1", "hourlyRate": 25}],
  "jobs":      [{"jobId": "j-1", "jobTypeId": "jt-1", "driverId": "d-1", ...}],
  "invoices":  [{"invoiceId": "inv-1", "dispatcherId": "disp-1", ...}]
}
```

Every section is optional. Records that fail model validation are skipped
with a warning so one bad record does not prevent reading the rest; the raw
job records are kept for the validators.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar, Union

from pydantic import ValidationError

from job_costing.models.base import BaseDataModel
from job_costing.models.driver import Driver
from job_costing.models.invoice import Invoice
from job_costing.models.job import Job
from job_costing.models.job_type import JobType

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseDataModel)

SECTIONS = ("job_types", "drivers", "jobs", "invoices")


@dataclass
class Snapshot:
    """Parsed snapshot contents.

    Attributes:
        job_types: Job types keyed by job_type_id
        drivers: Drivers keyed by driver_id
        jobs: Jobs in file order
        invoices: Invoices in file order
        raw_jobs: Job records exactly as read
        skipped: Number of records that failed validation
    """

    job_types: Dict[str, JobType] = field(default_factory=dict)
    drivers: Dict[str, Driver] = field(default_factory=dict)
    jobs: List[Job] = field(default_factory=list)
    invoices: List[Invoice] = field(default_factory=list)
    raw_jobs: List[Dict[str, Any]] = field(default_factory=list)
    skipped: int = 0

    def get_job(self, job_id: str) -> Job:
        """Look up a job by id.

        Raises:
            KeyError: If the snapshot has no such job
        """
        for job in self.jobs:
            if job.job_id == job_id:
                return job
        raise KeyError(f"No job '{job_id}' in snapshot")

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Look up an invoice by id.

        Raises:
            KeyError: If the snapshot has no such invoice
        """
        for invoice in self.invoices:
            if invoice.invoice_id == invoice_id:
                return invoice
        raise KeyError(f"No invoice '{invoice_id}' in snapshot")


class SnapshotReader:
    """Reads JSON snapshots into validated models.

    Example:
        >>> reader = SnapshotReader()
        >>> snapshot = reader.read("snapshot.json")
        >>> len(snapshot.jobs)
        12
    """

    def read(self, path: Union[str, Path]) -> Snapshot:
        """Read a snapshot file.

        Args:
            path: Path to a JSON snapshot

        Returns:
            Parsed Snapshot

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a JSON object with list sections
        """
        path = Path(path)
        logger.info(f"Reading snapshot from {path}")
        with path.open(encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Snapshot {path} is not valid JSON: {e}") from e
        return self.parse(data)

    def parse(self, data: Any) -> Snapshot:
        """Build a Snapshot from already decoded JSON data.

        Raises:
            ValueError: If the data is not an object or a section is not a list
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")
        for section in SECTIONS:
            if not isinstance(data.get(section, []), list):
                raise ValueError(f"Snapshot section '{section}' must be a list")

        snapshot = Snapshot()

        for job_type in self._parse_records(data.get("job_types", []), JobType, snapshot):
            snapshot.job_types[job_type.job_type_id] = job_type
        for driver in self._parse_records(data.get("drivers", []), Driver, snapshot):
            snapshot.drivers[driver.driver_id] = driver

        snapshot.raw_jobs = [r for r in data.get("jobs", []) if isinstance(r, dict)]
        snapshot.jobs = self._parse_records(data.get("jobs", []), Job, snapshot)
        snapshot.invoices = self._parse_records(data.get("invoices", []), Invoice, snapshot)

        logger.info(
            f"Snapshot loaded: {len(snapshot.job_types)} job type(s), "
            f"{len(snapshot.drivers)} driver(s), {len(snapshot.jobs)} job(s), "
            f"{len(snapshot.invoices)} invoice(s), {snapshot.skipped} skipped"
        )
        return snapshot

    def _parse_records(
        self, records: List[Any], model: Type[ModelT], snapshot: Snapshot
    ) -> List[ModelT]:
        parsed = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning(f"Skipping {model.__name__} #{index}: not an object")
                snapshot.skipped += 1
                continue
            try:
                parsed.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping {model.__name__} #{index}: "
                    f"{e.error_count()} validation error(s)"
                )
                logger.debug(f"Validation errors for {model.__name__} #{index}: {e}")
                snapshot.skipped += 1
        return parsed
