"""
govkit -- Extension Registry

A capability directory, independent of the proposal lifecycle. Each
extension is a named, versioned, read-only view a DAO exposes to other
code: "is X a member", "what is the treasury balance", and so on.

Private extensions are visible only to code holding the DAO's own registry
(get/get_strict). The external entry point query() only ever resolves
public extensions, and it resolves them by their query_path.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

import structlog
from pydantic import field_validator

from govkit.primitives.common import FrozenModel
from govkit.systems.dao.errors import ExtensionNotFoundError

if TYPE_CHECKING:
    from govkit.systems.dao.members import MemberDirectory

logger = structlog.get_logger()


class ExtensionInfo(FrozenModel):
    path: str
    version: str
    query_path: str = ""
    private: bool = False

    @field_validator("path")
    @classmethod
    def _path_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Extension path must not be blank")
        return value


class Extension(abc.ABC):
    @abc.abstractmethod
    def info(self) -> ExtensionInfo: ...

    def __repr__(self) -> str:
        info = self.info()
        return f"<{self.__class__.__name__} path={info.path!r} version={info.version!r}>"


class ExtensionRegistry:
    def __init__(self) -> None:
        self._extensions: dict[str, Extension] = {}
        self._logger = logger.bind(system="dao.extensions")

    def set(self, extension: Extension) -> bool:
        """Register or replace by path. Returns True if one was replaced."""
        path = extension.info().path
        replaced = path in self._extensions
        self._extensions[path] = extension
        self._logger.debug("extension_set", path=path, replaced=replaced)
        return replaced

    def get(self, path: str) -> Extension | None:
        return self._extensions.get(path)

    def get_strict(self, path: str) -> Extension:
        extension = self._extensions.get(path)
        if extension is None:
            raise ExtensionNotFoundError(path)
        return extension

    def remove(self, path: str) -> bool:
        removed = self._extensions.pop(path, None) is not None
        if removed:
            self._logger.debug("extension_removed", path=path)
        return removed

    def list(self) -> list[Extension]:
        """All extensions ordered by path, private ones included."""
        return [self._extensions[p] for p in sorted(self._extensions)]

    def infos(self) -> list[ExtensionInfo]:
        return [e.info() for e in self.list()]

    def query(self, query_path: str) -> Extension:
        """
        External lookup. Only public extensions are reachable, matched on
        their query_path.
        """
        for extension in self.list():
            info = extension.info()
            if not info.private and info.query_path and info.query_path == query_path:
                return extension
        self._logger.warning("extension_query_miss", query_path=query_path)
        raise ExtensionNotFoundError(query_path)

    def __contains__(self, path: object) -> bool:
        return path in self._extensions

    def __len__(self) -> int:
        return len(self._extensions)


# ─── Built-in Extensions ─────────────────────────────────────────


class MembersViewExtension(Extension):
    """Read-only membership lookups for code outside the DAO."""

    PATH = "govkit.ext/members"
    VERSION = "1"

    def __init__(
        self,
        directory: MemberDirectory,
        query_path: str = "members",
        private: bool = False,
    ) -> None:
        self._directory = directory
        self._info = ExtensionInfo(
            path=self.PATH,
            version=self.VERSION,
            query_path=query_path,
            private=private,
        )

    def info(self) -> ExtensionInfo:
        return self._info

    def is_member(self, member_id: str) -> bool:
        return self._directory.is_member(member_id)

    def has_role(self, member_id: str, role: str) -> bool:
        return self._directory.has_role(member_id, role)
