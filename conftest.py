"""
Global pytest configuration and fixtures.
"""
import json
from decimal import Decimal
from typing import Any, Dict

import pytest

import job_costing.config.settings
from job_costing.config import CostingConfig, reload_config
from job_costing.config.logging_config import reset_logging
from job_costing.models import Driver, Job, JobType


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'HST_RATE': '0.13',
        'FUEL_COST_PER_HOUR': '30',
        'BILLING_INCREMENT_MINUTES': '15',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture(autouse=True)
def clear_global_config(monkeypatch):
    """Make every test start from default settings."""
    for key in ('HST_RATE', 'FUEL_COST_PER_HOUR', 'BILLING_INCREMENT_MINUTES',
                'ENVIRONMENT', 'DEBUG', 'LOG_LEVEL'):
        monkeypatch.delenv(key, raising=False)
    job_costing.config.settings._config = None
    yield
    job_costing.config.settings._config = None


@pytest.fixture(autouse=True)
def clean_logging():
    """Drop handlers installed by the CLI so they never outlive a test."""
    yield
    reset_logging()


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    yield test_env_vars


@pytest.fixture
def test_config(mock_env) -> CostingConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def hourly_job_type() -> JobType:
    return JobType(job_type_id='jt-hourly', title='Hourly haul',
                   dispatch_type='Hourly', rate_of_job=Decimal('100'))


@pytest.fixture
def tonnage_job_type() -> JobType:
    return JobType(job_type_id='jt-tonnage', title='Gravel by the tonne',
                   dispatch_type='Tonnage', rate_of_job=Decimal('20'))


@pytest.fixture
def load_job_type() -> JobType:
    return JobType(job_type_id='jt-load', title='Sand per load',
                   dispatch_type='Load', rate_of_job=Decimal('50'))


@pytest.fixture
def fixed_job_type() -> JobType:
    return JobType(job_type_id='jt-fixed', title='Flat move',
                   dispatch_type='Fixed', rate_of_job=Decimal('250'))


@pytest.fixture
def driver() -> Driver:
    """Driver whose rate reads as 25/h or 25%."""
    return Driver(driver_id='d-1', name='Sam Driver', hourly_rate=Decimal('25'))


@pytest.fixture
def percentage_driver() -> Driver:
    """Driver whose rate reads as 20/h or 20%."""
    return Driver(driver_id='d-2', name='Alex Driver', hourly_rate=Decimal('20'))


@pytest.fixture
def hourly_job() -> Job:
    """Monday job billed 50 minutes, driver on duty for 2 hours."""
    return Job(
        job_id='j-1',
        job_date='2024-03-04',
        start_time_for_job='08:00',
        end_time_for_job='08:50',
        start_time_for_driver='07:30',
        end_time_for_driver='09:30',
        job_type_id='jt-hourly',
        driver_id='d-1',
        dispatcher_id='disp-1',
    )


@pytest.fixture
def sample_snapshot_data() -> Dict[str, Any]:
    """Raw snapshot as the persistence layer would export it."""
    return {
        'job_types': [
            {'jobTypeId': 'jt-hourly', 'title': 'Hourly haul',
             'dispatchType': 'Hourly', 'rateOfJob': 100},
            {'jobTypeId': 'jt-tonnage', 'title': 'Gravel by the tonne',
             'dispatchType': 'Tonnage', 'rateOfJob': '20'},
            {'jobTypeId': 'jt-load', 'title': 'Sand per load',
             'dispatchType': 'Load', 'rateOfJob': 50},
            {'jobTypeId': 'jt-fixed', 'title': 'Flat move',
             'dispatchType': 'Fixed', 'rateOfJob': 250},
        ],
        'drivers': [
            {'driverId': 'd-1', 'name': 'Sam Driver', 'hourlyRate': 25},
            {'driverId': 'd-2', 'name': 'Alex Driver', 'hourlyRate': '20'},
        ],
        'jobs': [
            {'jobId': 'j-1', 'jobDate': '2024-03-04',
             'startTimeForJob': '08:00', 'endTimeForJob': '08:50',
             'startTimeForDriver': '07:30', 'endTimeForDriver': '09:30',
             'jobTypeId': 'jt-hourly', 'driverId': 'd-1', 'dispatcherId': 'disp-1',
             'jobGrossAmount': '100.00'},
            {'jobId': 'j-2', 'jobDate': '2024-03-05',
             'startTimeForJob': '09:00', 'endTimeForJob': '11:00',
             'startTimeForDriver': '09:00', 'endTimeForDriver': '11:00',
             'weight': '[10, 12.5]',
             'jobTypeId': 'jt-tonnage', 'driverId': 'd-1', 'dispatcherId': 'disp-1',
             'jobGrossAmount': '450.00'},
            {'jobId': 'j-3', 'jobDate': '2024-03-06',
             'startTimeForJob': '12:00', 'endTimeForJob': '15:00',
             'startTimeForDriver': '12:00', 'endTimeForDriver': '15:00',
             'loads': 5,
             'jobTypeId': 'jt-load', 'driverId': 'd-2', 'dispatcherId': 'disp-1',
             'jobGrossAmount': '250.00', 'driverPaid': True},
            {'jobId': 'j-4', 'jobDate': '2024-03-07',
             'startTimeForJob': '22:00', 'endTimeForJob': '02:00',
             'startTimeForDriver': '21:30', 'endTimeForDriver': '02:30',
             'jobTypeId': 'jt-fixed', 'driverId': 'd-2', 'dispatcherId': 'disp-2',
             'jobGrossAmount': '250.00',
             'invoiceId': 'inv-9', 'invoiceStatus': 'Raised'},
        ],
        'invoices': [
            {'invoiceId': 'inv-9', 'invoiceNumber': 'INV-0009',
             'invoiceDate': '2024-03-31', 'dispatcherId': 'disp-2',
             'billedTo': 'North Dispatch', 'commission': 5,
             'status': 'Raised', 'subTotal': '250.00', 'hst': '32.50',
             'total': '270.00'},
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path, sample_snapshot_data):
    """The sample snapshot written to a JSON file."""
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps(sample_snapshot_data), encoding='utf-8')
    return path


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
