"""Data models for the job-costing engine.

This package contains Pydantic models for the engine's inputs:
- BaseDataModel: Base class with common configuration
- JobType / DispatchType: Billing template and billing method
- Driver / DriverRate / RateKind: Driver and its tagged rate
- Job / InvoiceStatus: Dispatched job and its invoice lifecycle status
- Invoice: Dispatcher invoice
"""

from job_costing.models.base import BaseDataModel
from job_costing.models.driver import Driver, DriverRate, RateKind
from job_costing.models.invoice import Invoice
from job_costing.models.job import InvoiceStatus, Job
from job_costing.models.job_type import DispatchType, JobType

__all__ = [
    "BaseDataModel",
    "DispatchType",
    "Driver",
    "DriverRate",
    "Invoice",
    "InvoiceStatus",
    "Job",
    "JobType",
    "RateKind",
]
