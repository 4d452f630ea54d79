"""Web form front end: turn submitted form fields into a streamed PDF.

The form posts ``whitecards``, ``blackcards``, ``cardsize`` (S, L or LR)
and ``pagelayout``. Nothing here looks at the process environment; the
caller hands over the request pieces and the execution mode.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Mapping, Optional, Union
from urllib.parse import parse_qs

from bbcards.layout.geometry import CardGeometry, compute_geometry
from bbcards.render.document import ExecutionMode, render_strings
from bbcards.render.icon import load_icon

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MAX_BODY_BYTES = 4 * 1024 * 1024


@dataclass(frozen=True)
class CardRequest:
    """One submitted form."""

    white_cards: str = ""
    black_cards: str = ""
    card_size: str = ""
    page_layout: str = ""

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> "CardRequest":
        return cls(
            white_cards=fields.get("whitecards", ""),
            black_cards=fields.get("blackcards", ""),
            card_size=fields.get("cardsize", ""),
            page_layout=fields.get("pagelayout", ""),
        )

    def geometry(self) -> CardGeometry:
        """S is 2x2; anything else is 2.5x3.5, rounded for LR."""
        rounded = self.card_size == "LR"
        one_per_page = self.page_layout == "oneperpage"
        if self.card_size == "S":
            return compute_geometry(2.0, 2.0, rounded, one_per_page)
        return compute_geometry(2.5, 3.5, rounded, one_per_page)


def parse_form(
    query_string: str = "",
    body: bytes = b"",
    content_type: Optional[str] = None,
) -> dict[str, str]:
    """Decode form fields from a query string and an urlencoded body.

    Body fields win over query fields. Multipart bodies are not decoded.
    """
    fields = {key: values[0] for key, values in parse_qs(query_string, keep_blank_values=True).items()}

    if body:
        media_type = (content_type or FORM_CONTENT_TYPE).split(";")[0].strip().lower()
        if media_type == FORM_CONTENT_TYPE:
            decoded = body[:MAX_BODY_BYTES].decode("utf-8", errors="replace")
            for key, values in parse_qs(decoded, keep_blank_values=True).items():
                fields[key] = values[0]
        else:
            logger.warning(f"Unsupported form encoding {media_type!r}; only query fields used")

    return fields


def handle_request(
    fields: Mapping[str, str],
    stream: BinaryIO,
    mode: ExecutionMode = ExecutionMode.CGI,
    default_icon: Optional[Union[str, Path]] = None,
) -> int:
    """Render the submitted decks and write the document to ``stream``.

    Uploaded icons are not accepted; every card gets ``default_icon`` or
    the generated icon.

    Returns:
        Number of pages written
    """
    request = CardRequest.from_fields(fields)
    geometry = request.geometry()
    logger.info(
        f"Web request: size={request.card_size or 'L'} layout={request.page_layout or 'sheet'} "
        f"grid={geometry.cards_across}x{geometry.cards_high}"
    )
    return render_strings(
        request.white_cards,
        request.black_cards,
        geometry,
        icon=load_icon(None, default_icon),
        mode=mode,
        stream=stream,
    )
