"""Artifacts exchanged with the shell and invocation results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from pixelpage.exceptions import PackageError
from pixelpage.typing.enums import ToolStatus


class InputArtifact(BaseModel):
    """One acquired file: raw bytes plus the metadata the shell knows."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = ""
    filename: str = "input"


class OutputArtifact(BaseModel):
    """One produced file, ready to be downloaded or written."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str
    filename: str


class HistoryEntry(BaseModel):
    """Recent-items record for a tool."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tool: str
    label: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class ToolResult[T]:
    """Outcome of one tool invocation: a value or a typed package error."""

    status: ToolStatus
    value: T | None = None
    error: PackageError | None = None

    @property
    def ok(self) -> bool:
        """Return whether the invocation succeeded."""
        return self.error is None and self.status is ToolStatus.COMPLETE
