"""Capability interfaces injected into tool invocations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pixelpage.typing.models import HistoryEntry


class HistoryStore(Protocol):
    """Recent-items store for tool invocations."""

    def append(self, entry: HistoryEntry, cap: int) -> None:
        """Record an entry, newest first, keeping at most `cap` entries for its tool.

        Args:
            entry: Entry to record.
            cap: Maximum number of entries retained.
        """

    def list(self, tool: str | None = None) -> list[HistoryEntry]:
        """Return entries, newest first, optionally only those of `tool`.

        Returns:
            list[HistoryEntry]: Stored entries.
        """
