"""
govkit -- Condition ABC

All conditions implement this interface.

A Condition is a stateless rule over a Ballot. It captures only its own
configuration (thresholds, role names, membership lookups) and receives the
ballot explicitly on every query, so one instance can be shared by any number
of proposals and evaluated any number of times.

Two queries matter for governance:
  - eval(ballot)    is the rule satisfied right now?
  - signal(ballot)  how close is it, as a fraction in [0.0, 1.0]?

render() and render_with_votes() are presentation only and must never
influence eval() or signal().

Custom conditions subclass Condition and compose under And/Or exactly like
the built-ins; the combinators only ever call the four methods below.
"""

from __future__ import annotations

import abc
from fractions import Fraction
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from govkit.systems.cond.ballot import Ballot


class Condition(abc.ABC):
    """Strategy interface for a single governance rule."""

    @abc.abstractmethod
    def eval(self, ballot: Ballot) -> bool:
        """Return True when the ballot satisfies this condition."""
        ...

    @abc.abstractmethod
    def signal(self, ballot: Ballot) -> float:
        """Return progress toward satisfaction, clamped to [0.0, 1.0]."""
        ...

    @abc.abstractmethod
    def render(self) -> str:
        """Static, human-readable description of the rule."""
        ...

    @abc.abstractmethod
    def render_with_votes(self, ballot: Ballot) -> str:
        """Description of the rule including the current tallies."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.render()}>"


# ─── Helpers ─────────────────────────────────────────────────────


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def exact_fraction(value: float) -> Fraction:
    """
    Decimal-exact rational for a configured threshold.

    Fraction(str(0.1)) is 1/10, whereas Fraction(0.1) is slightly above it and
    would make "1 of 10" fail a 10% threshold.
    """
    return Fraction(str(value))


def ratio_signal(approvals: int, total: int) -> float:
    """approvals / total, clamped to [0, 1]; zero when total is zero."""
    if total <= 0:
        return 0.0
    return _clamp(approvals / total)


def format_percent(value: float) -> str:
    return f"{value * 100:g}%"
