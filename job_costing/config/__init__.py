"""
Configuration module for the job-costing engine.

Billing settings (tax rate, fuel cost, billing increment) come from the
environment or a .env file; logging is configured separately from them.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import (
    CostingConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'CostingConfig',
    'LoggingConfig',
    'configure_logging',
    'get_config',
    'load_config',
    'reload_config',
    'reset_logging'
]
