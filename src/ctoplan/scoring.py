"""Strategy scoring.

Every strategy is a row in :data:`STRATEGY_POLICIES`.  A break of length
*L* contributes::

    weight[category(L)] * L ** exponent + day_bonus * L

The exponent shapes how the greedy allocator behaves.  With an exponent of
1 the marginal value of lengthening a break is small compared with starting
a fresh 3-day break, so the allocator spreads days out.  With an exponent of
3 each extra day is worth more than the last, so it keeps growing the same
break.

A policy with a ``peak`` category stops that growth: a break longer than
the peak category's upper bound is worth the value at the bound, halved
(``overshoot``) for every extra day.  A ``repeat`` factor below 1 discounts
each further break of the same category, the most valuable one counting in
full.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from ctoplan.errors import ValidationError
from ctoplan.models import (
    LONG_WEEKEND_MAX,
    MINI_BREAK_MAX,
    WEEK_LONG_MAX,
    Break,
    BreakCategory,
    OptimizationStrategy,
    break_category,
)


class StrategyPolicy(NamedTuple):
    weights: dict[BreakCategory, float]
    exponent: float
    day_bonus: float = 0.0
    peak: BreakCategory | None = None
    overshoot: float = 0.5
    repeat: float = 1.0


_LW = BreakCategory.LONG_WEEKEND
_MINI = BreakCategory.MINI_BREAK
_WEEK = BreakCategory.WEEK_LONG
_EXT = BreakCategory.EXTENDED

# Longest break in each bounded category
_CATEGORY_MAX: dict[BreakCategory, int] = {
    _LW: LONG_WEEKEND_MAX,
    _MINI: MINI_BREAK_MAX,
    _WEEK: WEEK_LONG_MAX,
}

STRATEGY_POLICIES: dict[OptimizationStrategy, StrategyPolicy] = {
    # Quadratic growth up to nine days, and every further break of a category
    # already taken is worth half the previous one, so a short break is
    # grown into a mini or week-long break before another long weekend.
    OptimizationStrategy.BALANCED: StrategyPolicy(
        weights={_LW: 1.0, _MINI: 1.1, _WEEK: 1.2},
        exponent=2.0,
        day_bonus=0.5,
        peak=_WEEK,
        repeat=0.5,
    ),
    # Peak at 5-6 days, decaying beyond.
    OptimizationStrategy.MINI_BREAKS: StrategyPolicy(
        weights={_LW: 1.0, _MINI: 3.0},
        exponent=3.0,
        peak=_MINI,
    ),
    # Linear: a new 3-day weekend always beats stretching an existing one.
    OptimizationStrategy.LONG_WEEKENDS: StrategyPolicy(
        weights={_LW: 4.0},
        exponent=1.0,
        peak=_LW,
    ),
    # Grow towards 7-9 days, then drop sharply.
    OptimizationStrategy.WEEK_LONG_BREAKS: StrategyPolicy(
        weights={_LW: 1.0, _MINI: 2.0, _WEEK: 4.0},
        exponent=3.0,
        peak=_WEEK,
    ),
    # Convex all the way: consolidate into one long run.
    OptimizationStrategy.EXTENDED_VACATIONS: StrategyPolicy(
        weights={_LW: 0.5, _MINI: 1.0, _WEEK: 2.0, _EXT: 4.0},
        exponent=3.0,
    ),
}


def resolve_strategy(strategy: OptimizationStrategy | str) -> OptimizationStrategy:
    """Accept an enum member or its string value (``"weekLongBreaks"`` …)."""
    if isinstance(strategy, OptimizationStrategy):
        return strategy
    try:
        return OptimizationStrategy(strategy)
    except ValueError:
        choices = ", ".join(s.value for s in OptimizationStrategy)
        raise ValidationError(
            f"Invalid strategy {strategy!r}. Choose from: {choices}"
        ) from None


def break_value(length: int, policy: StrategyPolicy) -> float:
    """Score contribution of a single run of *length* off days."""
    category = break_category(length)
    if category is None:
        return 0.0
    if policy.peak is not None:
        longest = _CATEGORY_MAX[policy.peak]
        if length > longest:
            return break_value(longest, policy) * policy.overshoot ** (length - longest)
    return policy.weights[category] * length**policy.exponent + policy.day_bonus * length


def score_lengths(lengths: Iterable[int], strategy: OptimizationStrategy) -> float:
    """Score a set of breaks given only their lengths."""
    policy = STRATEGY_POLICIES[strategy]
    by_category: dict[BreakCategory, list[float]] = {}
    for n in lengths:
        category = break_category(n)
        if category is not None:
            by_category.setdefault(category, []).append(break_value(n, policy))

    total = 0.0
    for category in BreakCategory:
        values = sorted(by_category.get(category, ()), reverse=True)
        total += sum(v * policy.repeat**i for i, v in enumerate(values))
    return total


def score(breaks: Iterable[Break], strategy: OptimizationStrategy | str) -> float:
    """Desirability of *breaks* under *strategy*; higher is better."""
    return score_lengths((b.total_days for b in breaks), resolve_strategy(strategy))
