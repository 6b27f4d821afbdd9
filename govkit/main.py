"""
govkit -- Entry Point

Builds a ready DAOCore from configuration:
  1. load config (YAML, then GOVKIT_* env overrides)
  2. set up structured logging
  3. construct the core with the host's collaborators
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

import structlog

from govkit.config import GovkitConfig, load_config
from govkit.systems.dao.core import DAOCore
from govkit.systems.dao.events import EventSink
from govkit.systems.dao.extensions import Extension
from govkit.systems.dao.proposals import Proposal
from govkit.systems.dao.resources import Resource
from govkit.systems.dao.store import KeyedStore
from govkit.telemetry.logging import setup_logging

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = "config/default.yaml"


def build_dao(
    config: GovkitConfig | str | Path | None = None,
    *,
    events: EventSink | None = None,
    resource_store: KeyedStore[str, Resource] | None = None,
    proposal_store: KeyedStore[int, Proposal] | None = None,
    extensions: Iterable[Extension] = (),
    configure_logging: bool = True,
) -> DAOCore:
    """
    Create a DAOCore from a loaded config or a config file path.

    With no argument the path comes from GOVKIT_CONFIG_PATH, falling back to
    config/default.yaml. Hosts that own their logging setup pass
    configure_logging=False.
    """
    if not isinstance(config, GovkitConfig):
        config_path = config or os.environ.get("GOVKIT_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        config = load_config(config_path)

    if configure_logging:
        setup_logging(config.logging, dao_name=config.dao.name)

    logger.info(
        "govkit_starting",
        dao=config.dao.name,
        policy=config.dao.duplicate_resource_policy.value,
        emit_events=config.dao.emit_events,
    )

    return DAOCore(
        config.dao,
        events=events,
        resource_store=resource_store,
        proposal_store=proposal_store,
        extensions=extensions,
    )
