"""
govkit -- DAO Core

The orchestrator. DAOCore owns the resource store and the proposal store and
is the only code that writes to either. Everything a DAO does goes through
it: registering resources, proposing, voting, executing.

Lifecycle of a proposal:
  propose()  -> OPEN        resource for the action kind must exist
  vote()     -> PASSED      as soon as the condition evaluates True
  execute()  -> EXECUTED    condition re-checked, handler run, exactly once

Binding is late: the resource (and so the condition and handler) is looked up
by kind at vote and execute time, not snapshotted at propose time. Replacing
or removing a resource therefore affects proposals already in flight.

Every operation validates before it mutates. A call that raises leaves both
stores exactly as they were, which makes execute() safe to retry.

Scheduling is the host's job: one call runs to completion before the next
begins. Nothing here locks, spawns, or awaits.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from govkit.config import DAOConfig
from govkit.primitives.common import VoteChoice, utc_now
from govkit.systems.cond.ballot import Ballot
from govkit.systems.dao.errors import (
    ConditionNotMetError,
    ProposalTerminalError,
    UnknownResourceKindError,
)
from govkit.systems.dao.events import EventSink, safe_emit
from govkit.systems.dao.extensions import Extension, ExtensionRegistry
from govkit.systems.dao.proposals import (
    Proposal,
    ProposalRequest,
    ProposalState,
    ProposalStore,
)
from govkit.systems.dao.resources import Resource, ResourceStore
from govkit.systems.dao.store import KeyedStore

logger = structlog.get_logger()


class DAOCore:
    """
    One governed entity. Construct one per DAO; never share across DAOs.
    """

    def __init__(
        self,
        config: DAOConfig | None = None,
        *,
        events: EventSink | None = None,
        resource_store: KeyedStore[str, Resource] | None = None,
        proposal_store: KeyedStore[int, Proposal] | None = None,
        extensions: Iterable[Extension] = (),
    ) -> None:
        self._config = config or DAOConfig()
        self._resources = ResourceStore(
            resource_store, policy=self._config.duplicate_resource_policy,
        )
        self._proposals = ProposalStore(proposal_store)
        self._extensions = ExtensionRegistry()
        self._events = events if self._config.emit_events else None
        self._executing: set[int] = set()
        self._logger = logger.bind(system="dao.core", dao=self._config.name)

        for extension in extensions:
            self._extensions.set(extension)

        self._logger.info(
            "dao_created",
            policy=self._config.duplicate_resource_policy.value,
            extensions=len(self._extensions),
        )
        self._emit("dao_created", dao=self._config.name)

    @property
    def config(self) -> DAOConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    # ── Resources ────────────────────────────────────────────────

    def register_resource(self, resource: Resource) -> bool:
        """
        Bind resource.kind to its condition and handler.

        Returns True if an existing binding was replaced. Under the REJECT
        policy a duplicate raises DuplicateResourceKindError instead.
        """
        replaced = self._resources.set(resource)
        self._logger.info(
            "resource_registered",
            kind=resource.kind,
            condition=resource.condition.render(),
            replaced=replaced,
        )
        self._emit("resource_registered", kind=resource.kind, replaced=replaced)
        return replaced

    def remove_resource(self, kind: str) -> bool:
        removed = self._resources.remove(kind)
        if removed:
            self._logger.info("resource_removed", kind=kind)
            self._emit("resource_removed", kind=kind)
        return removed

    def get_resource(self, kind: str) -> Resource | None:
        return self._resources.get(kind)

    def list_resources(self) -> list[Resource]:
        return self._resources.list()

    # ── Proposals ────────────────────────────────────────────────

    def propose(self, request: ProposalRequest, proposer: str | None = None) -> int:
        """
        Open a proposal for request.action and return its id.

        Raises UnknownResourceKindError, without consuming an id, if no
        resource is registered for the action kind.
        """
        kind = request.action.kind
        if kind not in self._resources:
            self._logger.warning("propose_rejected", kind=kind, reason="unknown_resource_kind")
            raise UnknownResourceKindError(kind)

        proposal = self._proposals.create(request, proposer=proposer)

        self._logger.info(
            "proposal_created",
            proposal_id=proposal.id,
            kind=kind,
            title=request.title,
            proposer=proposer,
        )
        self._emit(
            "proposal_created",
            proposal_id=proposal.id,
            kind=kind,
            proposer=proposer,
        )
        return proposal.id

    def vote(self, proposal_id: int, voter: str, choice: VoteChoice) -> ProposalState:
        """
        Record voter's choice and return the resulting proposal state.

        An OPEN proposal moves to PASSED as soon as its condition holds.
        Voting on a PASSED proposal is recorded but changes nothing else.
        """
        proposal = self._proposals.get_strict(proposal_id)
        if proposal.is_terminal:
            self._logger.warning("vote_rejected", proposal_id=proposal_id, reason="terminal")
            raise ProposalTerminalError(proposal_id)

        # Evaluate against a copy so a failing lookup cannot leave a half-applied vote
        ballot = proposal.ballot.copy()
        ballot.vote(voter, choice)

        previous_state = proposal.state
        next_state = previous_state
        if previous_state == ProposalState.OPEN:
            resource = self._resources.get(proposal.kind)
            if resource is None:
                self._logger.warning(
                    "vote_unbound_resource", proposal_id=proposal_id, kind=proposal.kind,
                )
            elif resource.condition.eval(ballot):
                next_state = ProposalState.PASSED

        proposal.ballot = ballot
        proposal.state = next_state
        self._proposals.save(proposal)

        self._logger.info(
            "vote_cast",
            proposal_id=proposal_id,
            voter=voter,
            choice=VoteChoice(choice).value,
            total=ballot.total(),
        )
        self._emit(
            "vote_cast", proposal_id=proposal_id, voter=voter, choice=VoteChoice(choice).value,
        )

        if previous_state != next_state:
            self._logger.info("proposal_passed", proposal_id=proposal_id, kind=proposal.kind)
            self._emit("proposal_passed", proposal_id=proposal_id, kind=proposal.kind)
        return proposal.state

    def execute(self, proposal_id: int) -> Any:
        """
        Run the proposal's action and mark it EXECUTED.

        The condition is re-evaluated against the current ballot whatever the
        stored state says, so a proposal still OPEN can execute if membership
        changed in its favour, and a PASSED one cannot if it changed against.
        Handler exceptions propagate and leave the proposal untouched.

        A handler that calls back into execute() for the proposal it is
        running gets ProposalTerminalError; the action runs at most once.
        """
        proposal = self._proposals.get_strict(proposal_id)
        if proposal.is_terminal or proposal_id in self._executing:
            self._logger.warning(
                "execute_rejected",
                proposal_id=proposal_id,
                reason="terminal" if proposal.is_terminal else "in_progress",
            )
            raise ProposalTerminalError(proposal_id)

        resource = self._resources.get(proposal.kind)
        if resource is None:
            self._logger.warning(
                "execute_rejected", proposal_id=proposal_id, reason="unknown_resource_kind",
            )
            raise UnknownResourceKindError(proposal.kind)

        if not resource.condition.eval(proposal.ballot):
            self._logger.warning(
                "execute_rejected",
                proposal_id=proposal_id,
                reason="condition_not_met",
                signal=resource.condition.signal(proposal.ballot),
            )
            raise ConditionNotMetError(
                proposal_id, resource.condition.render_with_votes(proposal.ballot),
            )

        self._executing.add(proposal_id)
        try:
            result = resource.handler.execute(proposal.request.action)
        finally:
            self._executing.discard(proposal_id)

        proposal.state = ProposalState.EXECUTED
        proposal.executed_at = utc_now()
        self._proposals.save(proposal)

        self._logger.info("proposal_executed", proposal_id=proposal_id, kind=proposal.kind)
        self._emit("proposal_executed", proposal_id=proposal_id, kind=proposal.kind)
        return result

    def instant_execute(self, request: ProposalRequest, caller: str) -> int:
        """
        Propose, vote YES as caller, and execute as one operation.

        For requests the caller alone can satisfy. The condition is checked
        against a ballot holding only the caller's vote before anything is
        stored, so UnknownResourceKindError and ConditionNotMetError leave no
        proposal behind. If the handler fails, the new proposal is discarded
        and the handler's exception propagates.
        """
        kind = request.action.kind
        resource = self._resources.get(kind)
        if resource is None:
            self._logger.warning(
                "instant_execute_rejected", kind=kind, reason="unknown_resource_kind",
            )
            raise UnknownResourceKindError(kind)

        trial = Ballot()
        trial.vote(caller, VoteChoice.YES)
        if not resource.condition.eval(trial):
            self._logger.warning(
                "instant_execute_rejected",
                kind=kind,
                caller=caller,
                reason="condition_not_met",
            )
            # The id the proposal would have received
            raise ConditionNotMetError(
                self._proposals.last_id + 1, resource.condition.render_with_votes(trial),
            )

        proposal_id = self.propose(request, proposer=caller)
        try:
            self.vote(proposal_id, caller, VoteChoice.YES)
            self.execute(proposal_id)
        except Exception:
            self._proposals.discard(proposal_id)
            self._logger.warning("instant_execute_rolled_back", proposal_id=proposal_id, kind=kind)
            self._emit("proposal_discarded", proposal_id=proposal_id, kind=kind)
            raise
        return proposal_id

    def get_proposal(self, proposal_id: int) -> Proposal:
        """
        Snapshot of one proposal. Changing it does not change the DAO.

        Raises UnknownProposalError for an id that was never assigned.
        """
        return self._proposals.get_strict(proposal_id).copy()

    def list_proposals(self) -> list[Proposal]:
        return [p.copy() for p in self._proposals.list()]

    def progress(self, proposal_id: int) -> float:
        """
        Current signal of the proposal's condition, in [0.0, 1.0].

        Executed proposals report 1.0; proposals whose resource was removed
        report 0.0.
        """
        proposal = self._proposals.get_strict(proposal_id)
        if proposal.is_terminal:
            return 1.0
        resource = self._resources.get(proposal.kind)
        if resource is None:
            return 0.0
        return resource.condition.signal(proposal.ballot)

    # ── Extensions ───────────────────────────────────────────────

    @property
    def extensions(self) -> ExtensionRegistry:
        """
        The full registry, private extensions included. For code running
        inside the DAO's own context; outside callers use extension().
        """
        return self._extensions

    def extension(self, path: str) -> Extension | None:
        """Public extension at path, or None. Private ones are never returned."""
        extension = self._extensions.get(path)
        if extension is None or extension.info().private:
            return None
        return extension

    def extensions_list(self) -> list[Extension]:
        return [e for e in self._extensions.list() if not e.info().private]

    # ── Internal ─────────────────────────────────────────────────

    def _emit(self, name: str, **fields: Any) -> None:
        safe_emit(self._events, name, **fields)

    def __repr__(self) -> str:
        return (
            f"<DAOCore name={self.name!r} resources={len(self._resources)} "
            f"proposals={len(self._proposals)}>"
        )


def instant_execute(core: DAOCore, request: ProposalRequest, caller: str) -> int:
    """Module-level form of DAOCore.instant_execute."""
    return core.instant_execute(request, caller)
