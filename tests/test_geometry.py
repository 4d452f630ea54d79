import math

import pytest

from bbcards.layout.geometry import (
    PAPER_HEIGHT,
    PAPER_WIDTH,
    ROUNDED_CORNER_RADIUS,
    compute_geometry,
    slot_box,
)


def test_small_cards_on_letter():
    g = compute_geometry()

    assert (g.card_width, g.card_height) == (144, 144)
    assert (g.paper_width, g.paper_height) == (PAPER_WIDTH, PAPER_HEIGHT) == (612, 792)
    assert (g.cards_across, g.cards_high) == (4, 5)
    assert g.capacity == 20
    assert (g.page_width, g.page_height) == (576, 720)
    assert (g.margin_left, g.margin_top) == (18, 36)
    assert g.rounded_corner_radius is None
    assert not g.rounded


def test_large_rounded_cards():
    g = compute_geometry(2.5, 3.5, rounded=True)

    assert (g.cards_across, g.cards_high) == (3, 3)
    assert (g.page_width, g.page_height) == (540, 756)
    assert (g.margin_left, g.margin_top) == (36, 18)
    assert g.rounded_corner_radius == ROUNDED_CORNER_RADIUS == 9


def test_one_card_per_page_uses_card_sized_paper():
    g = compute_geometry(2.5, 3.5, one_per_page=True)

    assert (g.paper_width, g.paper_height) == (180, 252)
    assert g.capacity == 1
    assert (g.margin_left, g.margin_top) == (0, 0)


@pytest.mark.parametrize("width,height", [(2.0, 2.0), (2.5, 3.5), (1.3, 0.7), (3.1, 4.9), (8.5, 11.0)])
def test_grid_fits_and_is_centered(width, height):
    g = compute_geometry(width, height)

    assert g.cards_across == math.floor(g.paper_width / g.card_width)
    assert g.cards_high == math.floor(g.paper_height / g.card_height)
    assert g.page_width == pytest.approx(g.cards_across * g.card_width)
    assert g.page_width <= g.paper_width
    assert g.page_height <= g.paper_height
    assert g.margin_left >= 0 and g.margin_top >= 0
    assert 2 * g.margin_left + g.page_width == pytest.approx(g.paper_width)
    assert 2 * g.margin_top + g.page_height == pytest.approx(g.paper_height)


def test_card_larger_than_paper_gives_empty_grid():
    g = compute_geometry(9.0, 2.0)

    assert g.cards_across == 0
    assert g.capacity == 0
    assert g.page_width == 0
    assert g.margin_left == g.paper_width / 2


def test_slot_box_top_left_is_index_zero():
    g = compute_geometry()
    box = slot_box(g, 0)

    assert box == (10, 710, 124, 134)
    assert (box.left, box.right, box.top, box.bottom) == (10, 134, 710, 576)


def test_slot_box_row_major_order():
    g = compute_geometry()

    assert slot_box(g, 1).x == 154
    assert slot_box(g, 3).y == slot_box(g, 0).y
    # second row starts one card lower
    assert slot_box(g, 4).x == 10
    assert slot_box(g, 4).y == 710 - 144


def test_slot_box_last_slot_sits_on_grid_bottom():
    g = compute_geometry()
    box = slot_box(g, g.capacity - 1)

    assert (box.x, box.y) == (442, 134)
    assert box.bottom == 0


def test_slot_box_inset_only_taken_once_from_height():
    g = compute_geometry(2.5, 3.5)
    box = slot_box(g, 0)

    assert box.width == g.card_width - 20
    assert box.height == g.card_height - 10
