"""
govkit -- Actions and Action Handlers

An Action is what a passed proposal will do: a kind string plus a payload.
Kinds are globally unique, by convention a namespaced path such as
"govkit.treasury/transfer".

An ActionHandler is bound to exactly one kind. It knows:
  - What kind it handles (kind)
  - What payload shape that kind carries (payload_type, optional)
  - How to perform the side effect (handle)

Dispatch is a plain lookup by kind in the resource store; there is no default
handler. A handler given an action of another kind, or a payload it cannot
narrow to payload_type, raises PayloadMismatchError instead of guessing.

Payload narrowing:
  - payload already an instance of payload_type  -> used as-is
  - payload_type is a pydantic model and the payload is a mapping
                                                 -> validated into the model
  - anything else                                -> PayloadMismatchError
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError, field_validator

from govkit.primitives.common import FrozenModel
from govkit.systems.dao.errors import PayloadMismatchError

logger = structlog.get_logger()


class Action(FrozenModel):
    """A kind-tagged payload. Immutable once built."""

    kind: str
    payload: Any = None

    @field_validator("kind")
    @classmethod
    def _kind_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Action kind must not be blank")
        return value


class ActionHandler(abc.ABC):
    """
    Base class for all action handlers.

    Subclass this, set `kind` (and usually `payload_type`), implement
    handle(), and bind it to a condition through a Resource.
    """

    kind: str = ""                          # Registry key, must be unique per DAO
    payload_type: type | None = None        # None accepts any payload
    description: str = ""

    def execute(self, action: Action) -> Any:
        """
        Narrow the payload, then perform the side effect.

        Exceptions from handle() propagate unchanged to the caller.
        """
        payload = self.narrow_payload(action)
        return self.handle(payload, action)

    def narrow_payload(self, action: Action) -> Any:
        if action.kind != self.kind:
            raise PayloadMismatchError(
                action.kind, f"handler is bound to {self.kind!r}"
            )

        expected = self.payload_type
        payload = action.payload
        if expected is None or isinstance(payload, expected):
            return payload

        if isinstance(expected, type) and issubclass(expected, BaseModel):
            if isinstance(payload, Mapping):
                try:
                    return expected.model_validate(dict(payload))
                except ValidationError as exc:
                    raise PayloadMismatchError(
                        action.kind,
                        f"payload does not validate as {expected.__name__}: "
                        f"{exc.error_count()} error(s)",
                    ) from exc

        raise PayloadMismatchError(
            action.kind,
            f"expected {expected.__name__}, got {type(payload).__name__}",
        )

    @abc.abstractmethod
    def handle(self, payload: Any, action: Action) -> Any:
        """Perform the action. payload is already narrowed to payload_type."""
        ...

    def __repr__(self) -> str:
        type_name = self.payload_type.__name__ if self.payload_type else "Any"
        return f"<{self.__class__.__name__} kind={self.kind!r} payload={type_name}>"


class FuncActionHandler(ActionHandler):
    """Adapts a plain callable taking the narrowed payload."""

    def __init__(
        self,
        kind: str,
        fn: Callable[[Any], Any],
        payload_type: type | None = None,
        description: str = "",
    ) -> None:
        if not kind:
            raise ValueError("FuncActionHandler requires a kind")
        self.kind = kind
        self.payload_type = payload_type
        self.description = description
        self._fn = fn

    def handle(self, payload: Any, action: Action) -> Any:
        return self._fn(payload)


class NoopActionHandler(ActionHandler):
    """
    Handler with no side effect, for proposals whose only purpose is to
    record a decision.
    """

    def __init__(self, kind: str, description: str = "") -> None:
        if not kind:
            raise ValueError("NoopActionHandler requires a kind")
        self.kind = kind
        self.description = description

    def handle(self, payload: Any, action: Action) -> None:
        logger.debug("noop_action_executed", kind=action.kind)
