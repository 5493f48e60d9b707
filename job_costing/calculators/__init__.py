"""Calculator modules for the job-costing engine."""

from job_costing.calculators.driver_pay_calculator import calculate_driver_pay
from job_costing.calculators.gross_amount_calculator import (
    GrossAmountResult,
    calculate_gross_amount,
)
from job_costing.calculators.job_calculator import (
    JobCostingResult,
    JobCostingSummary,
    aggregate_job_costings,
    apply_costing,
    calculate_estimated_fuel,
    calculate_estimated_revenue,
    calculate_job_costing,
    calculate_job_costing_batch,
)
from job_costing.calculators.money import to_cents, to_hours
from job_costing.calculators.time_utils import (
    calculate_duration_hours,
    calculate_duration_minutes,
    convert_time_to_minutes,
    day_of_week,
    parse_clock_time,
    round_up_hours,
)

__all__ = [
    # driver_pay_calculator
    "calculate_driver_pay",
    # gross_amount_calculator
    "GrossAmountResult",
    "calculate_gross_amount",
    # job_calculator
    "JobCostingResult",
    "JobCostingSummary",
    "aggregate_job_costings",
    "apply_costing",
    "calculate_estimated_fuel",
    "calculate_estimated_revenue",
    "calculate_job_costing",
    "calculate_job_costing_batch",
    # money
    "to_cents",
    "to_hours",
    # time_utils
    "calculate_duration_hours",
    "calculate_duration_minutes",
    "convert_time_to_minutes",
    "day_of_week",
    "parse_clock_time",
    "round_up_hours",
]
