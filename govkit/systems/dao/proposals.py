"""
govkit -- Proposals

A Proposal is a request to run one Action, tracked through
OPEN -> PASSED -> EXECUTED. Ids are assigned sequentially from 1 and are
never reused. A proposal is only ever deleted to roll back the failed call
that created it.

The ProposalStore only stores. Every state transition is decided by DAOCore,
the store's sole writer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

import structlog
from pydantic import field_validator

from govkit.primitives.common import FrozenModel, utc_now
from govkit.systems.cond.ballot import Ballot
from govkit.systems.dao.actions import Action
from govkit.systems.dao.errors import UnknownProposalError
from govkit.systems.dao.store import KeyedStore, MemoryStore

logger = structlog.get_logger()


class ProposalState(enum.StrEnum):
    OPEN = "open"
    PASSED = "passed"
    EXECUTED = "executed"


class ProposalRequest(FrozenModel):
    """What a caller submits. Immutable once built."""

    title: str
    description: str = ""
    action: Action

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Proposal title must not be blank")
        return value


@dataclass
class Proposal:
    """
    Runtime record of one proposal.

    Not a Pydantic model because the ballot and state are mutated in place
    by DAOCore as votes arrive.
    """

    id: int
    request: ProposalRequest
    ballot: Ballot = field(default_factory=Ballot)
    state: ProposalState = ProposalState.OPEN
    proposer: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    executed_at: datetime | None = None

    @property
    def kind(self) -> str:
        return self.request.action.kind

    @property
    def is_terminal(self) -> bool:
        return self.state == ProposalState.EXECUTED

    def copy(self) -> Proposal:
        """Detached snapshot; mutating it never reaches the store."""
        return replace(self, ballot=self.ballot.copy())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.request.title,
            "description": self.request.description,
            "kind": self.kind,
            "state": self.state.value,
            "proposer": self.proposer,
            "votes": {voter: choice.value for voter, choice in self.ballot.items()},
            "tally": {choice.value: n for choice, n in self.ballot.tally().items()},
            "created_at": self.created_at.isoformat(),
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
        }


class ProposalStore:
    def __init__(self, store: KeyedStore[int, Proposal] | None = None) -> None:
        self._store: KeyedStore[int, Proposal] = store if store is not None else MemoryStore()
        # Resume numbering after whatever a persistent store already holds
        existing = self._store.keys()
        self._last_id = existing[-1] if existing else 0
        self._logger = logger.bind(system="dao.proposals")

    @property
    def last_id(self) -> int:
        return self._last_id

    def create(self, request: ProposalRequest, proposer: str | None = None) -> Proposal:
        proposal = Proposal(id=self._last_id + 1, request=request, proposer=proposer)
        self._store.set(proposal.id, proposal)
        self._last_id = proposal.id
        self._logger.debug("proposal_stored", proposal_id=proposal.id, kind=proposal.kind)
        return proposal

    def save(self, proposal: Proposal) -> None:
        """Persist a proposal DAOCore has mutated."""
        if not self._store.has(proposal.id):
            raise UnknownProposalError(proposal.id)
        self._store.set(proposal.id, proposal)

    def discard(self, proposal_id: int) -> None:
        """
        Undo a create() whose enclosing operation failed. Discarding the
        newest proposal also hands its id back.
        """
        if not self._store.remove(proposal_id):
            raise UnknownProposalError(proposal_id)
        if proposal_id == self._last_id:
            self._last_id = proposal_id - 1
        self._logger.debug("proposal_discarded", proposal_id=proposal_id)

    def get(self, proposal_id: int) -> Proposal | None:
        return self._store.get(proposal_id)

    def get_strict(self, proposal_id: int) -> Proposal:
        proposal = self._store.get(proposal_id)
        if proposal is None:
            raise UnknownProposalError(proposal_id)
        return proposal

    def list(self) -> list[Proposal]:
        """All proposals in id order."""
        return self._store.values()

    def __len__(self) -> int:
        return len(self._store)
