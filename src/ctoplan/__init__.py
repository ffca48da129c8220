"""CTO Day Optimizer.

Choose which days to spend a fixed budget of discretionary days off on, so
that together with weekends, public holidays and company days off they
form the longest (or best-shaped) consecutive breaks.
"""

from ctoplan.breaks import count_extended_weekends, find_breaks
from ctoplan.classifier import build_calendar, classify, expand_company_days
from ctoplan.errors import (
    InvalidBudgetError,
    OptimizerError,
    PartialAllocationError,
    ValidationError,
)
from ctoplan.holidays import get_holidays
from ctoplan.models import (
    Break,
    BreakCategory,
    CalendarDay,
    CompanyDayOff,
    Holiday,
    OptimizationResult,
    OptimizationStats,
    OptimizationStrategy,
)
from ctoplan.optimizer import AllocatorState, CTOAllocator, optimize
from ctoplan.scoring import score
from ctoplan.stats import compute_stats

__all__ = [
    "AllocatorState",
    "Break",
    "BreakCategory",
    "CTOAllocator",
    "CalendarDay",
    "CompanyDayOff",
    "Holiday",
    "InvalidBudgetError",
    "OptimizationResult",
    "OptimizationStats",
    "OptimizationStrategy",
    "OptimizerError",
    "PartialAllocationError",
    "ValidationError",
    "build_calendar",
    "classify",
    "compute_stats",
    "count_extended_weekends",
    "expand_company_days",
    "find_breaks",
    "get_holidays",
    "optimize",
    "score",
]
