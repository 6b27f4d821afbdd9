"""
Unit tests for Resource and ResourceStore.

Tests binding validation and both duplicate-registration policies.
"""

from __future__ import annotations

import pytest

from govkit.config import DuplicateResourcePolicy
from govkit.systems.cond import And, Or
from govkit.systems.dao.actions import NoopActionHandler
from govkit.systems.dao.errors import DuplicateResourceKindError, UnknownResourceKindError
from govkit.systems.dao.resources import Resource, ResourceStore


def make_resource(kind: str = "x/signal", condition=None, name: str = "") -> Resource:
    return Resource(
        condition=condition if condition is not None else And(),
        handler=NoopActionHandler(kind),
        display_name=name,
    )


# ─── Tests: Resource ──────────────────────────────────────────────


def test_kind_comes_from_handler():
    resource = make_resource("x/signal")
    assert resource.kind == "x/signal"


def test_title_falls_back_to_kind():
    assert make_resource("x/signal").title == "x/signal"
    assert make_resource("x/signal", name="Signal").title == "Signal"


def test_resource_is_frozen():
    resource = make_resource()
    with pytest.raises(AttributeError):
        resource.display_name = "changed"


def test_resource_requires_condition():
    with pytest.raises(TypeError, match="must be a Condition"):
        Resource(condition=lambda b: True, handler=NoopActionHandler("x/y"))


def test_resource_requires_handler():
    with pytest.raises(TypeError, match="must be an ActionHandler"):
        Resource(condition=And(), handler=print)


# ─── Tests: ResourceStore ─────────────────────────────────────────


class TestReplacePolicy:
    def test_set_and_get(self):
        store = ResourceStore()
        resource = make_resource()
        assert store.set(resource) is False
        assert store.get("x/signal") is resource
        assert "x/signal" in store
        assert len(store) == 1

    def test_duplicate_replaces(self):
        store = ResourceStore()
        first = make_resource(condition=And())
        second = make_resource(condition=Or())
        store.set(first)
        assert store.set(second) is True
        assert store.get("x/signal") is second
        assert len(store) == 1


class TestRejectPolicy:
    def test_duplicate_rejected_and_store_unchanged(self):
        store = ResourceStore(policy=DuplicateResourcePolicy.REJECT)
        first = make_resource()
        store.set(first)
        with pytest.raises(DuplicateResourceKindError, match="already registered"):
            store.set(make_resource())
        assert store.get("x/signal") is first

    def test_reregister_after_remove(self):
        store = ResourceStore(policy=DuplicateResourcePolicy.REJECT)
        store.set(make_resource())
        assert store.remove("x/signal") is True
        store.set(make_resource())
        assert len(store) == 1


def test_get_strict_raises_on_missing():
    with pytest.raises(UnknownResourceKindError) as exc_info:
        ResourceStore().get_strict("x/missing")
    assert exc_info.value.kind == "x/missing"


def test_remove_missing_returns_false():
    assert ResourceStore().remove("x/missing") is False


def test_list_ordered_by_kind():
    store = ResourceStore()
    for kind in ("c/k", "a/k", "b/k"):
        store.set(make_resource(kind))
    assert store.kinds() == ["a/k", "b/k", "c/k"]
    assert [r.kind for r in store.list()] == ["a/k", "b/k", "c/k"]
