"""
govkit -- Boolean Combinators

And / Or compose any conditions, built-in or custom, into trees.

  And  eval = all children,  signal = weakest child (min),   empty = (True, 1.0)
  Or   eval = any child,     signal = strongest child (max), empty = (False, 0.0)

Children are kept in the order given; since every child is pure, evaluation
order never changes the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from govkit.systems.cond.condition import Condition, _clamp

if TYPE_CHECKING:
    from collections.abc import Iterable

    from govkit.systems.cond.ballot import Ballot


class _Combinator(Condition):
    _name: str = ""

    def __init__(self, *conditions: Condition) -> None:
        for child in conditions:
            if not isinstance(child, Condition):
                raise TypeError(
                    f"{self._name}() children must be Condition instances, got {child!r}"
                )
        self._conditions: tuple[Condition, ...] = tuple(conditions)

    @classmethod
    def of(cls, conditions: Iterable[Condition]) -> _Combinator:
        return cls(*conditions)

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return self._conditions

    def render(self) -> str:
        return f"{self._name}({', '.join(c.render() for c in self._conditions)})"

    def render_with_votes(self, ballot: Ballot) -> str:
        inner = ", ".join(c.render_with_votes(ballot) for c in self._conditions)
        return f"{self._name}({inner}) [signal {self.signal(ballot):.2f}]"


class And(_Combinator):
    _name = "And"

    def eval(self, ballot: Ballot) -> bool:
        return all(c.eval(ballot) for c in self._conditions)

    def signal(self, ballot: Ballot) -> float:
        if not self._conditions:
            return 1.0
        return _clamp(min(c.signal(ballot) for c in self._conditions))


class Or(_Combinator):
    _name = "Or"

    def eval(self, ballot: Ballot) -> bool:
        return any(c.eval(ballot) for c in self._conditions)

    def signal(self, ballot: Ballot) -> float:
        if not self._conditions:
            return 0.0
        return _clamp(max(c.signal(ballot) for c in self._conditions))
