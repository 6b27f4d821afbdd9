"""
Unit tests for build_dao.

Tests that config files, preloaded configs and env overrides all reach the
constructed DAOCore, and that logging setup is optional.
"""

from __future__ import annotations

import logging
import os

import pytest
import structlog

from govkit.config import DAOConfig, DuplicateResourcePolicy, GovkitConfig, LoggingConfig
from govkit.main import build_dao
from govkit.systems.cond import MembersThreshold
from govkit.systems.dao import (
    DuplicateResourceKindError,
    MembersViewExtension,
    MemoryMemberDirectory,
    NoopActionHandler,
    RecordingEventSink,
    Resource,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("GOVKIT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def _restore_logging():
    yield
    logging.getLogger().handlers.clear()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def test_build_from_config_file(tmp_path, _restore_logging):
    path = tmp_path / "govkit.yaml"
    path.write_text(
        "dao:\n"
        "  name: treasury\n"
        "  duplicate_resource_policy: reject\n"
        "logging:\n"
        "  level: debug\n"
        "  format: json\n"
    )
    core = build_dao(path)
    assert core.name == "treasury"
    assert core.config.duplicate_resource_policy == DuplicateResourcePolicy.REJECT
    assert logging.getLogger().level == logging.DEBUG
    assert structlog.contextvars.get_contextvars()["dao"] == "treasury"

    directory = MemoryMemberDirectory(members=["a"])
    resource = Resource(
        condition=MembersThreshold(1.0, directory.is_member, directory.members_count),
        handler=NoopActionHandler("govkit.test/apply"),
    )
    core.register_resource(resource)
    with pytest.raises(DuplicateResourceKindError):
        core.register_resource(resource)


def test_config_path_from_env(tmp_path, monkeypatch, _restore_logging):
    path = tmp_path / "other.yaml"
    path.write_text("dao:\n  name: grants\n")
    monkeypatch.setenv("GOVKIT_CONFIG_PATH", str(path))
    assert build_dao().name == "grants"


def test_preloaded_config_and_collaborators():
    sink = RecordingEventSink()
    config = GovkitConfig(dao=DAOConfig(name="council"), logging=LoggingConfig())
    ext = MembersViewExtension(MemoryMemberDirectory())
    core = build_dao(config, events=sink, extensions=[ext], configure_logging=False)
    assert core.name == "council"
    assert core.extension(MembersViewExtension.PATH) is ext
    assert sink.names() == ["dao_created"]


def test_events_disabled_through_env(tmp_path, monkeypatch):
    path = tmp_path / "govkit.yaml"
    path.write_text("dao:\n  name: quiet\n")
    monkeypatch.setenv("GOVKIT_DAO__EMIT_EVENTS", "false")
    sink = RecordingEventSink()
    build_dao(path, events=sink, configure_logging=False)
    assert sink.events == []
