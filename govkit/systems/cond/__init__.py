"""
govkit -- Condition Engine

Stateless rules over a Ballot. Leaf thresholds (members, role fraction,
role count) compose through And/Or into arbitrary trees; every node answers
eval() and signal() for whatever ballot it is handed.

Public interface:
  Ballot            per-proposal vote record
  Condition         ABC for custom conditions
  MembersThreshold  fraction of all members voting YES
  RoleThreshold     fraction of one role's holders voting YES
  RoleCount         absolute number of one role's holders voting YES
  And, Or           boolean combinators
"""

from govkit.systems.cond.ballot import Ballot
from govkit.systems.cond.condition import Condition
from govkit.systems.cond.errors import ConditionConfigError
from govkit.systems.cond.logic import And, Or
from govkit.systems.cond.thresholds import MembersThreshold, RoleCount, RoleThreshold

__all__ = [
    "And",
    "Ballot",
    "Condition",
    "ConditionConfigError",
    "MembersThreshold",
    "Or",
    "RoleCount",
    "RoleThreshold",
]
