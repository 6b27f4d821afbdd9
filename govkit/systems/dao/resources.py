"""
govkit -- Resources

A Resource binds one action kind to the Condition that must hold before the
kind may run and the Handler that runs it. The ResourceStore is the DAO's
governance configuration: at most one resource per kind.

Duplicate registration follows DAOConfig.duplicate_resource_policy:
  REPLACE  the new resource silently supersedes the old one (default)
  REJECT   DuplicateResourceKindError, store unchanged
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from govkit.config import DuplicateResourcePolicy
from govkit.systems.cond.condition import Condition
from govkit.systems.dao.actions import ActionHandler
from govkit.systems.dao.errors import DuplicateResourceKindError, UnknownResourceKindError
from govkit.systems.dao.store import KeyedStore, MemoryStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class Resource:
    """
    Immutable binding of condition and handler. Not a Pydantic model because
    it carries arbitrary callables.
    """

    condition: Condition
    handler: ActionHandler
    display_name: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.condition, Condition):
            raise TypeError(f"Resource condition must be a Condition, got {self.condition!r}")
        if not isinstance(self.handler, ActionHandler):
            raise TypeError(f"Resource handler must be an ActionHandler, got {self.handler!r}")
        if not self.handler.kind:
            raise ValueError(f"Handler {self.handler!r} has no kind set")

    @property
    def kind(self) -> str:
        return self.handler.kind

    @property
    def title(self) -> str:
        return self.display_name or self.kind


class ResourceStore:
    def __init__(
        self,
        store: KeyedStore[str, Resource] | None = None,
        policy: DuplicateResourcePolicy = DuplicateResourcePolicy.REPLACE,
    ) -> None:
        self._store: KeyedStore[str, Resource] = store if store is not None else MemoryStore()
        self._policy = policy
        self._logger = logger.bind(system="dao.resources")

    @property
    def policy(self) -> DuplicateResourcePolicy:
        return self._policy

    def set(self, resource: Resource) -> bool:
        """
        Register resource under its kind.

        Returns True if an existing binding was replaced.
        Raises DuplicateResourceKindError under the REJECT policy.
        """
        kind = resource.kind
        if self._policy == DuplicateResourcePolicy.REJECT and self._store.has(kind):
            self._logger.warning("resource_rejected_duplicate", kind=kind)
            raise DuplicateResourceKindError(kind)
        replaced = self._store.set(kind, resource)
        self._logger.debug("resource_set", kind=kind, replaced=replaced)
        return replaced

    def get(self, kind: str) -> Resource | None:
        return self._store.get(kind)

    def get_strict(self, kind: str) -> Resource:
        resource = self._store.get(kind)
        if resource is None:
            raise UnknownResourceKindError(kind)
        return resource

    def remove(self, kind: str) -> bool:
        return self._store.remove(kind)

    def list(self) -> list[Resource]:
        """All resources, ordered by kind."""
        return self._store.values()

    def kinds(self) -> list[str]:
        return self._store.keys()

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and self._store.has(kind)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"<ResourceStore kinds={self.kinds()}>"
