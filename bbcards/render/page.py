"""Draw one sheet of cards onto a reportlab canvas.

Layout per slot (slot box from ``slot_box``):

  +-----------------------------+
  | Card text, shrunk to fit    |
  |                             |
  |                      DRAW (2)|  <- pick 3 only
  | [icon]               PICK (n)|  <- pick 2 / pick 3
  +-----------------------------+
"""

import logging
import re
from typing import Sequence

from PIL import Image
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Paragraph

from bbcards.cards.markup import TAG, ParsedCard, parse_card, tokenize
from bbcards.layout.geometry import CardGeometry, SlotBox, slot_box
from bbcards.render.icon import fit_size

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"
BOLD_FONT_NAME = "Helvetica-Bold"
FONT_SIZE = 14
MIN_FONT_SIZE = 6
FONT_STEP = 0.5
LEADING_RATIO = 1.2
LINE_WIDTH = 0.5

# Space kept free under the text for icon and badges
TEXT_FOOTER = 35
TEXT_FOOTER_PICK3 = 55

LOGO_MAX_HEIGHT = 15
LOGO_OFFSET = 25

BADGE_LABEL_SIZE = 11
BADGE_DIGIT_SIZE = 14
BADGE_RADIUS = 7.5

_ATTR_RE = re.compile(r"""([A-Za-z_]+)\s*=\s*(["'])(.*?)\2""")


def _tag_attrs(tag: str) -> dict[str, str]:
    return {name: value for name, _, value in _ATTR_RE.findall(tag)}


def _cmyk_to_hex(attrs: dict[str, str]) -> str:
    try:
        c, m, y, k = (float(attrs.get(key, 0)) / 100.0 for key in ("c", "m", "y", "k"))
    except ValueError:
        return "#000000"
    r, g, b = (round(255 * (1 - v) * (1 - k)) for v in (c, m, y))
    return f"#{r:02x}{g:02x}{b:02x}"


def translate_tag(tag: str) -> str:
    """Map a whitelisted card tag to its reportlab Paragraph equivalent."""
    if tag in ("<strikethrough>", "</strikethrough>"):
        return tag.replace("strikethrough", "strike")
    if tag == "</color>":
        return "</font>"
    if tag.startswith("<font"):
        attrs = _tag_attrs(tag)
        parts = []
        if "name" in attrs:
            parts.append(f'face="{attrs["name"]}"')
        if "size" in attrs:
            parts.append(f'size="{attrs["size"]}"')
        return "<font " + " ".join(parts) + ">" if parts else "<font>"
    if tag.startswith("<color"):
        attrs = _tag_attrs(tag)
        if "rgb" in attrs:
            return f'<font color="#{attrs["rgb"].lstrip("#")}">'
        if any(key in attrs for key in ("c", "m", "y", "k")):
            return f'<font color="{_cmyk_to_hex(attrs)}">'
        return "<font>"
    return tag


def _literal_markup(text: str) -> str:
    text = text.replace("<", "&lt;")
    text = text.replace("\n", "<br/>")
    return text.replace("\t", "&nbsp;" * 4)


def to_paragraph_markup(display_text: str) -> str:
    """Translate card display markup to reportlab Paragraph markup."""
    out = []
    for token in tokenize(display_text, extract_fields=False):
        if token.kind == TAG:
            out.append(translate_tag(token.text))
        else:
            out.append(_literal_markup(token.text))
    return "".join(out)


def plain_markup(card: ParsedCard) -> str:
    """Card text with every style tag dropped, for markup the backend rejects."""
    text = "".join(
        token.text for token in tokenize(card.body, extract_fields=False)
        if token.kind != TAG
    )
    text = text.replace("&", "&amp;").replace("&amp;lt;", "&lt;")
    return "<b>" + _literal_markup(text) + "</b>"


def card_style(text_color, font_size: float = FONT_SIZE) -> ParagraphStyle:
    return ParagraphStyle(
        "card",
        fontName=FONT_NAME,
        fontSize=font_size,
        leading=font_size * LEADING_RATIO,
        textColor=text_color,
    )


def fit_paragraph(markup: str, text_color, width: float, height: float):
    """Build the largest paragraph (down to MIN_FONT_SIZE) that fits the box.

    Returns:
        (paragraph, drawn height)
    """
    size = FONT_SIZE
    while True:
        para = Paragraph(markup, card_style(text_color, size))
        _, used = para.wrap(width, height)
        if used <= height or size <= MIN_FONT_SIZE:
            return para, used
        size -= FONT_STEP


def draw_card_text(canvas: Canvas, geometry: CardGeometry, box: SlotBox, card: ParsedCard, text_color) -> None:
    footer = TEXT_FOOTER_PICK3 if card.pick_count == 3 else TEXT_FOOTER
    height = geometry.card_height - footer
    if height <= 0 or box.width <= 0:
        return

    try:
        para, used = fit_paragraph(to_paragraph_markup(card.display_text), text_color, box.width, height)
    except ValueError as e:
        logger.warning(f"Unrenderable markup {card.body!r} ({e}); drawing as plain text")
        para, used = fit_paragraph(plain_markup(card), text_color, box.width, height)

    para.drawOn(canvas, box.x, box.top - used)


def _text_box(canvas: Canvas, text: str, x: float, top: float, width: float, size: float, align: str = "left") -> None:
    """Single-line text with its top edge at ``top``, aligned inside [x, x + width]."""
    canvas.setFont(BOLD_FONT_NAME, size)
    baseline = top - pdfmetrics.getAscent(BOLD_FONT_NAME, size)
    if align == "right":
        canvas.drawRightString(x + width, baseline, text)
    elif align == "center":
        canvas.drawCentredString(x + width / 2, baseline, text)
    else:
        canvas.drawString(x, baseline, text)


def _badge(canvas: Canvas, box: SlotBox, label: str, label_x: float, label_width: float,
           row_offset: float, digit: str, foreground, background) -> None:
    right, bottom = box.right, box.bottom

    canvas.setFillColor(foreground)
    _text_box(canvas, label, right - label_x, bottom + 20 + row_offset, label_width, BADGE_LABEL_SIZE, "right")

    canvas.setStrokeColor(foreground)
    canvas.circle(right - 10, bottom + 15.5 + row_offset, BADGE_RADIUS, stroke=1, fill=1)

    canvas.setFillColor(background)
    _text_box(canvas, digit, right - 14, bottom + 21 + row_offset, 8, BADGE_DIGIT_SIZE, "center")
    canvas.setFillColor(foreground)


def draw_badges(canvas: Canvas, box: SlotBox, pick_count: int, foreground, background) -> None:
    """PICK n badge for pick 2 and 3, plus DRAW 2 above it for pick 3."""
    if pick_count not in (2, 3):
        return
    _badge(canvas, box, "PICK", 50, 30, 0, str(pick_count), foreground, background)
    if pick_count == 3:
        _badge(canvas, box, "DRAW", 55, 35, 20, "2", foreground, background)


def draw_grid(canvas: Canvas, geometry: CardGeometry) -> None:
    """Cut lines around every slot: a line grid, or one rounded box per card."""
    w, h = geometry.card_width, geometry.card_height

    if not geometry.rounded:
        for i in range(geometry.cards_across + 1):
            canvas.line(w * i, 0, w * i, geometry.page_height)
        for j in range(geometry.cards_high + 1):
            canvas.line(0, h * j, geometry.page_width, h * j)
        return

    for i in range(geometry.cards_across):
        for j in range(geometry.cards_high):
            canvas.roundRect(i * w, j * h, w, h, geometry.rounded_corner_radius, stroke=1, fill=0)


def draw_icons(canvas: Canvas, geometry: CardGeometry, icon: Image.Image) -> None:
    """Icon in the lower-left corner of every slot, filled or not."""
    reader = ImageReader(icon)
    width, height = fit_size(icon.size, geometry.card_width / 2, LOGO_MAX_HEIGHT)
    if width <= 0 or height <= 0:
        return

    for index in range(geometry.capacity):
        box = slot_box(geometry, index)
        top = box.bottom + LOGO_OFFSET
        canvas.drawImage(reader, box.left, top - height, width=width, height=height, mask="auto")


def render_card_page(
    canvas: Canvas,
    geometry: CardGeometry,
    records: Sequence[str],
    icon: Image.Image,
    is_prompt: bool = False,
) -> None:
    """Draw one page of cards. Does not start a new page.

    Prompt pages are white on a solid black sheet.
    """
    if is_prompt:
        foreground, background = colors.white, colors.black
    else:
        foreground, background = colors.black, colors.white

    canvas.saveState()

    if is_prompt:
        canvas.setFillColor(background)
        canvas.setStrokeColor(background)
        canvas.rect(0, 0, geometry.paper_width, geometry.paper_height, stroke=1, fill=1)

    canvas.translate(geometry.margin_left, geometry.margin_top)
    canvas.setLineWidth(LINE_WIDTH)
    canvas.setStrokeColor(foreground)
    canvas.setFillColor(foreground)

    draw_grid(canvas, geometry)

    for index, record in enumerate(records[:geometry.capacity]):
        card = parse_card(record, is_prompt)
        box = slot_box(geometry, index)
        draw_card_text(canvas, geometry, box, card, foreground)
        draw_badges(canvas, box, card.pick_count, foreground, background)
        canvas.setStrokeColor(foreground)
        canvas.setFillColor(foreground)

    draw_icons(canvas, geometry, icon)
    canvas.restoreState()
