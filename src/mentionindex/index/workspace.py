"""Workspace-root provider.

The host editor reports its open folders; the first one is the indexing
root. Listeners are told whenever the resolved root changes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

logger = structlog.get_logger()

RootListener = Callable[[str], None]


def _resolve(folder: str | Path) -> str:
    return str(Path(folder).expanduser().resolve())


class WorkspaceRoots:
    """Current workspace folders with change notifications."""

    def __init__(self, folders: Sequence[str | Path] = ()) -> None:
        self._folders: list[str] = [_resolve(f) for f in folders if str(f)]
        self._listeners: list[RootListener] = []

    @property
    def folders(self) -> list[str]:
        return list(self._folders)

    @property
    def root(self) -> str:
        """First workspace folder, or ``""`` when no workspace is open."""
        return self._folders[0] if self._folders else ""

    def set_folders(self, folders: Sequence[str | Path]) -> None:
        """Replace the open folders; notifies listeners if the root changed."""
        previous = self.root
        self._folders = [_resolve(f) for f in folders if str(f)]
        if self.root == previous:
            return
        logger.info("workspace_root_changed", previous=previous or None, root=self.root or None)
        for listener in list(self._listeners):
            listener(self.root)

    def subscribe(self, listener: RootListener) -> Callable[[], None]:
        """Register a root-change listener. Returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
