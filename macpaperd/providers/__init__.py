"""Display and workspace discovery.

The engine only needs the display UUIDs and, per display, the workspace
(Space) UUIDs in the order the window server reports them. How those are
obtained is up to the provider:

- ``skylight.SkyLightProvider``: live query of CoreGraphics and SkyLight (macOS)
- ``snapshot.StoreSnapshotProvider``: identities already recorded in a store
- ``StaticProvider``: a fixed list
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Workspace:
    """A virtual desktop (Space)."""

    uuid: str
    is_fullscreen: bool = False


@dataclass(frozen=True)
class Display:
    """A physical display and the workspaces shown on it."""

    uuid: str
    workspaces: tuple[Workspace, ...] = field(default_factory=tuple)

    def distinct_workspace_uuids(self) -> list[str]:
        """Workspace UUIDs without repeats, first occurrence wins."""
        return list(dict.fromkeys(ws.uuid for ws in self.workspaces))


@runtime_checkable
class DisplayProvider(Protocol):
    """Anything that can list the current displays."""

    def list_displays(self) -> list[Display]: ...


class StaticProvider:
    """Provider returning a fixed snapshot."""

    def __init__(self, displays: list[Display]):
        self._displays = list(displays)

    def list_displays(self) -> list[Display]:
        return list(self._displays)


__all__ = ["Display", "Workspace", "DisplayProvider", "StaticProvider"]
