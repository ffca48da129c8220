"""Exceptions raised by the CTO optimizer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctoplan.models import OptimizationResult


class OptimizerError(Exception):
    """Base class for every error raised by :mod:`ctoplan`."""


class ValidationError(OptimizerError, ValueError):
    """Malformed input: a bad date string, unknown strategy, bad config entry."""


class InvalidBudgetError(OptimizerError, ValueError):
    """The requested number of CTO days is not a positive integer."""

    def __init__(self, budget: int):
        self.budget = budget
        super().__init__("Number of CTO days must be greater than 0")


class PartialAllocationError(OptimizerError):
    """The calendar ran out of selectable weekdays before the budget was spent.

    The work done so far is not discarded: ``result`` holds the partial
    optimization and ``unallocated`` the number of CTO days left over.
    """

    def __init__(self, result: OptimizationResult, unallocated: int):
        self.result = result
        self.unallocated = unallocated
        used = result.stats.total_cto_days
        super().__init__(
            f"Only {used} of {used + unallocated} CTO days could be placed; "
            f"{unallocated} left unallocated (no selectable weekdays remain)."
        )
