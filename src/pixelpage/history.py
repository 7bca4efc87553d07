"""Recent-items history stores."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from pixelpage.exceptions import HistoryStoreError
from pixelpage.logging import get_logger
from pixelpage.typing.models import HistoryEntry

logger = get_logger(__name__)

_HISTORY_FILE_VERSION = 1
_ENTRIES_ADAPTER: TypeAdapter[list[HistoryEntry]] = TypeAdapter(list[HistoryEntry])


def _prepend_capped(entries: list[HistoryEntry], entry: HistoryEntry, cap: int) -> list[HistoryEntry]:
    if cap < 1:
        raise HistoryStoreError(message=f"history cap must be >= 1, got {cap}")
    kept = [entry]
    per_tool = 1
    for existing in entries:
        if existing.tool == entry.tool:
            if per_tool >= cap:
                continue
            per_tool += 1
        kept.append(existing)
    return kept


def _for_tool(entries: list[HistoryEntry], tool: str | None) -> list[HistoryEntry]:
    return [entry for entry in entries if tool is None or entry.tool == tool]


class InMemoryHistoryStore:
    """History kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def append(self, entry: HistoryEntry, cap: int) -> None:
        """Record an entry, newest first, keeping at most `cap` entries for its tool."""
        self._entries = _prepend_capped(self._entries, entry, cap)

    def list(self, tool: str | None = None) -> list[HistoryEntry]:
        """Return entries, newest first, optionally only those of `tool`."""
        return _for_tool(self._entries, tool)


class JsonFileHistoryStore(BaseModel):
    """History persisted as a versioned JSON envelope."""

    model_config = ConfigDict(extra="forbid")

    path: Path = Field(description="History file path.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the parent directory exists.

        Args:
            __context (object): Pydantic model context.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def list(self, tool: str | None = None) -> list[HistoryEntry]:
        """Return stored entries, newest first.

        Args:
            tool: Only return entries recorded for this tool when given.

        Raises:
            HistoryStoreError: If the file exists but cannot be parsed.

        Returns:
            list[HistoryEntry]: Stored entries.
        """
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            entries = _ENTRIES_ADAPTER.validate_python(payload.get("entries", []))
        except (OSError, ValueError, AttributeError, ValidationError) as exc:
            raise HistoryStoreError(message=f"Unreadable history file: {self.path}") from exc
        return _for_tool(entries, tool)

    def append(self, entry: HistoryEntry, cap: int) -> None:
        """Record an entry, newest first, and rewrite the file.

        At most `cap` entries are kept per tool; other tools are untouched.

        Raises:
            HistoryStoreError: If the file cannot be written.
        """
        entries = _prepend_capped(self.list(), entry, cap)
        envelope = {
            "history_file_version": _HISTORY_FILE_VERSION,
            "entries": _ENTRIES_ADAPTER.dump_python(entries, mode="json"),
        }
        try:
            self.path.write_text(json.dumps(envelope, indent=2), encoding="utf-8")
        except OSError as exc:
            raise HistoryStoreError(message=f"Cannot write history file: {self.path}") from exc
        logger.debug("History updated", extra={"history_path": str(self.path), "entries": len(entries)})
