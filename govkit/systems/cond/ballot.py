"""
govkit -- Ballot

The per-proposal record of votes: one entry per voter, last write wins.

A Ballot is pure data. It never evaluates anything and never consults
membership; conditions do that when they are handed the ballot.
Iteration is in sorted voter-id order so renders and tests are stable
regardless of the order votes arrived in.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterator

from govkit.primitives.common import VoteChoice


class Ballot:
    """Mapping of voter id to VoteChoice."""

    def __init__(self) -> None:
        self._votes: dict[str, VoteChoice] = {}

    def vote(self, voter: str, choice: VoteChoice) -> None:
        """Record a vote, replacing any earlier vote by the same voter."""
        if not voter:
            raise ValueError("Voter id must not be empty")
        self._votes[voter] = VoteChoice(choice)

    def get(self, voter: str) -> VoteChoice | None:
        """Return the voter's recorded choice, or None if they have not voted."""
        return self._votes.get(voter)

    def total(self) -> int:
        """Number of distinct voters with any recorded vote, abstentions included."""
        return len(self._votes)

    def iterate(self, fn: Callable[[str, VoteChoice], bool | None]) -> None:
        """
        Visit every entry in voter-id order.

        Stops early as soon as fn returns True.
        """
        for voter in sorted(self._votes):
            if fn(voter, self._votes[voter]):
                return

    def items(self) -> Iterator[tuple[str, VoteChoice]]:
        for voter in sorted(self._votes):
            yield voter, self._votes[voter]

    def tally(self) -> dict[VoteChoice, int]:
        """Count of votes per choice. Every choice is present, possibly zero."""
        counts = Counter(self._votes.values())
        return {choice: counts.get(choice, 0) for choice in VoteChoice}

    def copy(self) -> Ballot:
        clone = Ballot()
        clone._votes = dict(self._votes)
        return clone

    def __contains__(self, voter: object) -> bool:
        return voter in self._votes

    def __len__(self) -> int:
        return len(self._votes)

    def __repr__(self) -> str:
        return f"<Ballot votes={dict(self.items())!r}>"
