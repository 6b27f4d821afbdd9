"""
govkit -- Threshold Conditions

The three leaf rules. Each counts YES votes from eligible voters and compares
the count against either a fraction of an externally supplied population or
a fixed number.

  MembersThreshold  fraction of all members
  RoleThreshold     fraction of the holders of one role
  RoleCount         absolute number of role holders

Membership and role data are never stored here. The lookups are called at
query time so the answer always reflects the directory as it is now.
NO and ABSTAIN votes occupy ballot slots but never count as approvals.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import TYPE_CHECKING

from govkit.primitives.common import VoteChoice
from govkit.systems.cond.condition import (
    Condition,
    _clamp,
    exact_fraction,
    format_percent,
    ratio_signal,
)
from govkit.systems.cond.errors import ConditionConfigError

if TYPE_CHECKING:
    from govkit.systems.cond.ballot import Ballot

IsMemberFn = Callable[[str], bool]
MembersCountFn = Callable[[], int]
HasRoleFn = Callable[[str, str], bool]
RoleCountFn = Callable[[str], int]


def _check_threshold(threshold: float) -> float:
    if not 0.0 < threshold <= 1.0:
        raise ConditionConfigError(f"Threshold must be in (0, 1], got {threshold!r}")
    return float(threshold)


def _count_approvals(ballot: Ballot, eligible: Callable[[str], bool]) -> int:
    return sum(
        1 for voter, choice in ballot.items()
        if choice == VoteChoice.YES and eligible(voter)
    )


class _FractionThreshold(Condition):
    """Shared arithmetic for the two fraction-of-population rules."""

    def __init__(self, threshold: float) -> None:
        self._threshold = _check_threshold(threshold)
        self._exact = exact_fraction(self._threshold)

    @property
    def threshold(self) -> float:
        return self._threshold

    @abc.abstractmethod
    def _approvals(self, ballot: Ballot) -> int: ...

    @abc.abstractmethod
    def _population(self) -> int: ...

    def eval(self, ballot: Ballot) -> bool:
        population = self._population()
        if population <= 0:
            return False
        # approvals / population >= threshold, compared without float rounding
        return self._approvals(ballot) >= self._exact * population

    def signal(self, ballot: Ballot) -> float:
        return ratio_signal(self._approvals(ballot), self._population())

    def _tally_text(self, ballot: Ballot) -> str:
        return (
            f"{self._approvals(ballot)}/{self._population()} yes, "
            f"signal {self.signal(ballot):.2f}"
        )


class MembersThreshold(_FractionThreshold):
    """Satisfied once `threshold` of all members have voted YES."""

    def __init__(
        self,
        threshold: float,
        is_member: IsMemberFn,
        members_count: MembersCountFn,
    ) -> None:
        super().__init__(threshold)
        self._is_member = is_member
        self._members_count = members_count

    def _approvals(self, ballot: Ballot) -> int:
        return _count_approvals(ballot, self._is_member)

    def _population(self) -> int:
        return self._members_count()

    def render(self) -> str:
        return f"{format_percent(self._threshold)} of members"

    def render_with_votes(self, ballot: Ballot) -> str:
        return f"{self.render()} ({self._tally_text(ballot)})"


class RoleThreshold(_FractionThreshold):
    """Satisfied once `threshold` of the holders of `role` have voted YES."""

    def __init__(
        self,
        threshold: float,
        role: str,
        has_role: HasRoleFn,
        role_count: RoleCountFn,
    ) -> None:
        if not role:
            raise ConditionConfigError("Role must not be empty")
        super().__init__(threshold)
        self._role = role
        self._has_role = has_role
        self._role_count = role_count

    @property
    def role(self) -> str:
        return self._role

    def _approvals(self, ballot: Ballot) -> int:
        return _count_approvals(ballot, lambda voter: self._has_role(voter, self._role))

    def _population(self) -> int:
        return self._role_count(self._role)

    def render(self) -> str:
        return f"{format_percent(self._threshold)} of {self._role}"

    def render_with_votes(self, ballot: Ballot) -> str:
        return f"{self.render()} ({self._tally_text(ballot)})"


class RoleCount(Condition):
    """Satisfied once at least `count` holders of `role` have voted YES."""

    def __init__(self, count: int, role: str, has_role: HasRoleFn) -> None:
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ConditionConfigError(f"Count must be a non-negative integer, got {count!r}")
        if not role:
            raise ConditionConfigError("Role must not be empty")
        self._count = count
        self._role = role
        self._has_role = has_role

    @property
    def count(self) -> int:
        return self._count

    @property
    def role(self) -> str:
        return self._role

    def _approvals(self, ballot: Ballot) -> int:
        return _count_approvals(ballot, lambda voter: self._has_role(voter, self._role))

    def eval(self, ballot: Ballot) -> bool:
        return self._approvals(ballot) >= self._count

    def signal(self, ballot: Ballot) -> float:
        if self._count == 0:
            return 1.0
        return _clamp(self._approvals(ballot) / self._count)

    def render(self) -> str:
        return f"{self._count} {self._role}"

    def render_with_votes(self, ballot: Ballot) -> str:
        return (
            f"{self.render()} ({self._approvals(ballot)}/{self._count} yes, "
            f"signal {self.signal(ballot):.2f})"
        )
