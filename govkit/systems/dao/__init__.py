"""
govkit -- DAO (Proposal & Resource Orchestration)

Turns a ballot and a condition into a decision, and a decision into exactly
one execution of the bound action.

Public interface:
  DAOCore           propose / vote / execute, resource registration
  instant_execute   propose + YES vote + execute in one call
  Action            kind-tagged payload
  ActionHandler     ABC for handlers; FuncActionHandler, NoopActionHandler
  Resource          condition + handler bound to one kind
  ProposalRequest   caller-supplied title, description, action
  Proposal          runtime record; ProposalState
  Extension         ABC for read-only capabilities; ExtensionRegistry
  MemberDirectory   membership collaborator; MemoryMemberDirectory
  KeyedStore        storage collaborator; MemoryStore
  EventSink         notification collaborator; LogEventSink, RecordingEventSink
"""

from govkit.systems.dao.actions import (
    Action,
    ActionHandler,
    FuncActionHandler,
    NoopActionHandler,
)
from govkit.systems.dao.core import DAOCore, instant_execute
from govkit.systems.dao.errors import (
    ConditionNotMetError,
    DuplicateResourceKindError,
    ExtensionNotFoundError,
    GovernanceError,
    PayloadMismatchError,
    ProposalTerminalError,
    UnknownProposalError,
    UnknownResourceKindError,
)
from govkit.systems.dao.events import EventSink, LogEventSink, RecordingEventSink
from govkit.systems.dao.extensions import (
    Extension,
    ExtensionInfo,
    ExtensionRegistry,
    MembersViewExtension,
)
from govkit.systems.dao.members import MemberDirectory, MemoryMemberDirectory
from govkit.systems.dao.proposals import Proposal, ProposalRequest, ProposalState
from govkit.systems.dao.resources import Resource
from govkit.systems.dao.store import KeyedStore, MemoryStore

__all__ = [
    "Action",
    "ActionHandler",
    "ConditionNotMetError",
    "DAOCore",
    "DuplicateResourceKindError",
    "EventSink",
    "Extension",
    "ExtensionInfo",
    "ExtensionNotFoundError",
    "ExtensionRegistry",
    "FuncActionHandler",
    "GovernanceError",
    "KeyedStore",
    "LogEventSink",
    "MemberDirectory",
    "MembersViewExtension",
    "MemoryMemberDirectory",
    "MemoryStore",
    "NoopActionHandler",
    "PayloadMismatchError",
    "Proposal",
    "ProposalRequest",
    "ProposalState",
    "ProposalTerminalError",
    "RecordingEventSink",
    "Resource",
    "UnknownProposalError",
    "UnknownResourceKindError",
    "instant_execute",
]
