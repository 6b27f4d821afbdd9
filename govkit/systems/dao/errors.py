"""
govkit -- DAO Error Hierarchy

All exceptions raised by the proposal / resource orchestration core.

Every error is raised to the immediate caller of the failing operation and
nothing is retried internally. No error leaves a store partially mutated:
a failed execute() can be retried once the ballot or membership changes.

  UnknownProposalError       no proposal with that id
  ProposalTerminalError      vote/execute on an executed proposal
  ConditionNotMetError       execute while the condition evaluates False
  UnknownResourceKindError   no resource bound to the action kind
  PayloadMismatchError       handler given a payload it cannot interpret
  DuplicateResourceKindError kind already bound and the policy is "reject"
  ExtensionNotFoundError     no (reachable) extension at that path
"""

from __future__ import annotations


class GovernanceError(RuntimeError):
    """Base for all DAO orchestration errors."""


class UnknownProposalError(GovernanceError):
    def __init__(self, proposal_id: int) -> None:
        super().__init__(f"Unknown proposal {proposal_id!r}")
        self.proposal_id = proposal_id


class ProposalTerminalError(GovernanceError):
    def __init__(self, proposal_id: int) -> None:
        super().__init__(f"Proposal {proposal_id} is already executed")
        self.proposal_id = proposal_id


class ConditionNotMetError(GovernanceError):
    def __init__(self, proposal_id: int, condition: str = "") -> None:
        detail = f": {condition}" if condition else ""
        super().__init__(f"Condition not met for proposal {proposal_id}{detail}")
        self.proposal_id = proposal_id
        self.condition = condition


class UnknownResourceKindError(GovernanceError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"No resource registered for action kind {kind!r}")
        self.kind = kind


class PayloadMismatchError(GovernanceError):
    """
    A handler received an action whose kind or payload shape it does not
    handle. This is a programming error in the host, not a governance outcome.
    """

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"Payload mismatch for {kind!r}: {reason}")
        self.kind = kind
        self.reason = reason


class DuplicateResourceKindError(GovernanceError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"A resource is already registered for action kind {kind!r}")
        self.kind = kind


class ExtensionNotFoundError(GovernanceError):
    def __init__(self, path: str) -> None:
        super().__init__(f"No extension registered at {path!r}")
        self.path = path
