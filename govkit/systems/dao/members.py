"""
govkit -- Member Directory

The membership / role collaborator that leaf conditions read from.

The engine only ever reads through MemberDirectory. Who gets added, removed,
or promoted is the host's business; MemoryMemberDirectory exposes mutators
purely so hosts and tests can seed it.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable

import structlog

logger = structlog.get_logger()


class MemberDirectory(abc.ABC):
    """Read-only view of membership used by conditions and extensions."""

    @abc.abstractmethod
    def is_member(self, member_id: str) -> bool: ...

    @abc.abstractmethod
    def members_count(self) -> int: ...

    @abc.abstractmethod
    def has_role(self, member_id: str, role: str) -> bool: ...

    @abc.abstractmethod
    def role_count(self, role: str) -> int: ...


class MemoryMemberDirectory(MemberDirectory):
    """
    In-process directory. Roles are only held by members: removing a member
    drops their roles, and assigning a role to a non-member adds them.
    """

    def __init__(
        self,
        members: Iterable[str] = (),
        roles: dict[str, Iterable[str]] | None = None,
    ) -> None:
        self._roles: dict[str, set[str]] = {}
        self._logger = logger.bind(system="dao.members")
        for member_id in members:
            self.add_member(member_id)
        for member_id, member_roles in (roles or {}).items():
            for role in member_roles:
                self.assign_role(member_id, role)

    # ── Read interface ───────────────────────────────────────────

    def is_member(self, member_id: str) -> bool:
        return member_id in self._roles

    def members_count(self) -> int:
        return len(self._roles)

    def has_role(self, member_id: str, role: str) -> bool:
        return role in self._roles.get(member_id, ())

    def role_count(self, role: str) -> int:
        return sum(1 for held in self._roles.values() if role in held)

    def members(self) -> list[str]:
        return sorted(self._roles)

    def roles_of(self, member_id: str) -> list[str]:
        return sorted(self._roles.get(member_id, ()))

    # ── Seeding ──────────────────────────────────────────────────

    def add_member(self, member_id: str) -> bool:
        if not member_id:
            raise ValueError("Member id must not be empty")
        if member_id in self._roles:
            return False
        self._roles[member_id] = set()
        self._logger.debug("member_added", member=member_id)
        return True

    def remove_member(self, member_id: str) -> bool:
        removed = self._roles.pop(member_id, None) is not None
        if removed:
            self._logger.debug("member_removed", member=member_id)
        return removed

    def assign_role(self, member_id: str, role: str) -> None:
        if not role:
            raise ValueError("Role must not be empty")
        self.add_member(member_id)
        self._roles[member_id].add(role)

    def unassign_role(self, member_id: str, role: str) -> bool:
        held = self._roles.get(member_id)
        if held is None or role not in held:
            return False
        held.discard(role)
        return True

    def __len__(self) -> int:
        return len(self._roles)

    def __repr__(self) -> str:
        return f"<MemoryMemberDirectory members={self.members_count()}>"
