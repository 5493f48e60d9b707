"""Job costing and invoice aggregation engine for a trucking back office."""

__version__ = "1.0.0"
