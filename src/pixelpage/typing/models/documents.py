"""Document page views and layout placement models."""

from __future__ import annotations

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

PageRotation = Literal[0, 90, 180, 270, -90]

_LAYOUT_TOLERANCE = 1e-6


class PageHandle(BaseModel):
    """One page of a derived document view.

    `rotation_degrees` is applied on top of the source page's own rotation
    when the view is materialized.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_index: int = Field(ge=0)
    rotation_degrees: PageRotation = 0


class LayoutBox(BaseModel):
    """Fit-and-center placement of a source image on a page (points)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_width: float = Field(gt=0)
    page_height: float = Field(gt=0)
    margin_pt: float = Field(ge=0)
    source_width: float = Field(gt=0)
    source_height: float = Field(gt=0)
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    scale: float = Field(gt=0, le=1.0)

    @model_validator(mode="after")
    def _check_fits_printable_area(self) -> Self:
        available_width = self.page_width - 2 * self.margin_pt
        available_height = self.page_height - 2 * self.margin_pt
        if self.width > available_width + _LAYOUT_TOLERANCE or self.height > available_height + _LAYOUT_TOLERANCE:
            raise ValueError("placed image exceeds the printable area")
        return self

    @property
    def rect(self) -> tuple[float, float, float, float]:
        """Return `(x0, y0, x1, y1)` with a top-left origin."""
        return self.x, self.y, self.x + self.width, self.y + self.height
