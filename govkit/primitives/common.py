"""
govkit -- Common Primitives

Shared enums, base classes, and utilities used across all systems.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


# ─── Enums ────────────────────────────────────────────────────────


class VoteChoice(enum.StrEnum):
    """
    A single voter's position on a proposal.

    There is no "unset" member: a voter who has not voted is simply absent
    from the ballot, which is distinct from an explicit ABSTAIN.
    """

    ABSTAIN = "abstain"
    NO = "no"
    YES = "yes"


# ─── Base Models ──────────────────────────────────────────────────


class GovkitBaseModel(BaseModel):
    """Base model for all govkit primitives."""

    model_config = {"populate_by_name": True, "from_attributes": True}


class FrozenModel(GovkitBaseModel):
    """Immutable value model. Instances cannot be changed once built."""

    model_config = {"populate_by_name": True, "from_attributes": True, "frozen": True}
