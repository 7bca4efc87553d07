from __future__ import annotations

import pytest

from pixelpage.documents.layout import MARGINS_PT, page_dimensions, place
from pixelpage.exceptions import InvalidGeometryError
from pixelpage.typing.enums import MarginPreset, PageOrientation, PageSize


def test_place_scales_down_to_fit_page() -> None:
    box = place(100, 100, 50, 50, 0)

    assert box.scale <= 1
    assert box.width <= 50
    assert box.height <= 50
    assert (box.x, box.y) == (0, 0)


def test_place_never_upscales() -> None:
    box = place(100, 50, 600, 800, 40)

    assert box.scale == 1.0
    assert (box.width, box.height) == (100, 50)
    assert (box.x, box.y) == (250, 375)


def test_place_preserves_aspect_ratio_within_margins() -> None:
    box = place(1000, 500, 595.28, 841.89, 40)

    assert box.width == pytest.approx(515.28)
    assert box.height == pytest.approx(257.64)
    assert box.x == pytest.approx(40)
    assert box.y == pytest.approx((841.89 - 257.64) / 2)
    assert box.width / box.height == pytest.approx(2.0)


def test_place_rect_is_top_left_based() -> None:
    box = place(10, 20, 100, 100)

    assert box.rect == (45, 40, 55, 60)


@pytest.mark.parametrize(
    "args",
    [
        (0, 10, 100, 100, 0),
        (10, -1, 100, 100, 0),
        (10, 10, 0, 100, 0),
        (10, 10, 100, 100, -5),
        (10, 10, 100, 100, 50),
    ],
)
def test_place_rejects_invalid_geometry(args: tuple[float, ...]) -> None:
    with pytest.raises(InvalidGeometryError):
        place(*args)


def test_page_dimensions_swap_for_landscape() -> None:
    assert page_dimensions(PageSize.A4) == (595.28, 841.89)
    assert page_dimensions(PageSize.A4, PageOrientation.LANDSCAPE) == (841.89, 595.28)
    assert page_dimensions(PageSize.LETTER) == (612.0, 792.0)


def test_margin_presets() -> None:
    assert [MARGINS_PT[preset] for preset in MarginPreset] == [0.0, 20.0, 40.0, 60.0]
