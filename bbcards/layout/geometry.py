"""Card grid geometry for a sheet of paper.

All lengths are PDF points (1/72 inch). Slot boxes are expressed in the
grid's own coordinate space: origin at the bottom-left of the occupied
grid, y growing upwards, so a box is anchored by its top-left corner.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.units import inch

PAPER_NAME = "LETTER"
PAPER_WIDTH, PAPER_HEIGHT = LETTER  # 612 x 792

DEFAULT_CARD_WIDTH_IN = 2.0
DEFAULT_CARD_HEIGHT_IN = 2.0

# 1/8"
ROUNDED_CORNER_RADIUS = inch / 8.0

# Inset between a card edge and its content box
SLOT_INSET = 10


@dataclass(frozen=True)
class CardGeometry:
    """Grid of cards laid out on one sheet."""

    card_width: float
    card_height: float
    paper_width: float
    paper_height: float
    rounded_corner_radius: Optional[float]
    one_card_per_page: bool
    cards_across: int
    cards_high: int
    page_width: float
    page_height: float
    margin_left: float
    margin_top: float

    @property
    def capacity(self) -> int:
        """Number of card slots on one page."""
        return self.cards_across * self.cards_high

    @property
    def rounded(self) -> bool:
        return self.rounded_corner_radius is not None


class SlotBox(NamedTuple):
    """Content box of one card slot, anchored at its top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y - self.height


def compute_geometry(
    card_width_in: float = DEFAULT_CARD_WIDTH_IN,
    card_height_in: float = DEFAULT_CARD_HEIGHT_IN,
    rounded: bool = False,
    one_per_page: bool = False,
) -> CardGeometry:
    """Compute how many cards fit on a sheet and where the grid sits.

    Args:
        card_width_in: Card width in inches
        card_height_in: Card height in inches
        rounded: Draw rounded card outlines instead of a cut-line grid
        one_per_page: Use a sheet exactly the size of one card

    Returns:
        CardGeometry. Cards larger than the paper give a zero-count grid;
        callers must treat a zero capacity as "cannot render".
    """
    card_width = card_width_in * inch
    card_height = card_height_in * inch

    if one_per_page:
        paper_width, paper_height = card_width, card_height
    else:
        paper_width, paper_height = PAPER_WIDTH, PAPER_HEIGHT

    cards_across = math.floor(paper_width / card_width)
    cards_high = math.floor(paper_height / card_height)

    page_width = card_width * cards_across
    page_height = card_height * cards_high

    return CardGeometry(
        card_width=card_width,
        card_height=card_height,
        paper_width=paper_width,
        paper_height=paper_height,
        rounded_corner_radius=ROUNDED_CORNER_RADIUS if rounded else None,
        one_card_per_page=one_per_page,
        cards_across=cards_across,
        cards_high=cards_high,
        page_width=page_width,
        page_height=page_height,
        margin_left=(paper_width - page_width) / 2,
        margin_top=(paper_height - page_height) / 2,
    )


def slot_box(geometry: CardGeometry, index: int) -> SlotBox:
    """Content box for the slot at a zero-based, row-major index.

    Index 0 is the top-left card. Rows are counted from the bottom of the
    grid, so the box's y is the top edge of that row minus the inset.
    The height only loses the inset once; the bottom of the box sits on
    the card's lower edge.
    """
    column = index % geometry.cards_across
    row = geometry.cards_high - index // geometry.cards_across

    x = geometry.card_width * column + SLOT_INSET
    y = geometry.card_height * row - SLOT_INSET

    return SlotBox(
        x=x,
        y=y,
        width=geometry.card_width - 2 * SLOT_INSET,
        height=geometry.card_height - SLOT_INSET,
    )
