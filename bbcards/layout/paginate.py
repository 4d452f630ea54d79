"""Split deck text into pages of raw card records."""

import logging
import re
from pathlib import Path
from typing import Iterable, Union

from bbcards.layout.geometry import CardGeometry

logger = logging.getLogger(__name__)

# Only tabs and line terminators are trimmed; a lone space is still a card.
_TRIM_CHARS = "\t\r\n"
_LINE_BREAKS = re.compile(r"[\r\n]+")

Page = tuple[str, ...]


def clean_records(lines: Iterable[str]) -> list[str]:
    """Trim each line and drop the ones left empty, keeping order."""
    records = []
    for line in lines:
        line = line.strip(_TRIM_CHARS)
        if line != "":
            records.append(line)
    return records


def paginate(lines: Iterable[str], geometry: CardGeometry) -> list[Page]:
    """Partition deck lines into pages of at most ``geometry.capacity`` records.

    Args:
        lines: Raw deck lines, in source order
        geometry: Grid geometry giving the per-page capacity

    Returns:
        Pages in order. No records (or a zero-capacity grid) gives no pages.
    """
    records = clean_records(lines)
    capacity = geometry.capacity

    if capacity <= 0:
        if records:
            logger.warning(
                f"Card grid holds no cards ({geometry.cards_across}x{geometry.cards_high}); "
                f"dropping {len(records)} records"
            )
        return []

    return [
        tuple(records[start:start + capacity])
        for start in range(0, len(records), capacity)
    ]


def load_pages_from_string(text: str, geometry: CardGeometry) -> list[Page]:
    """Paginate an in-memory deck."""
    return paginate(_LINE_BREAKS.split(text), geometry)


def load_pages_from_file(path: Union[str, Path], geometry: CardGeometry) -> list[Page]:
    """Paginate a deck file. A missing or unreadable file is an empty deck."""
    path = Path(path)
    if not path.is_file():
        logger.debug(f"No deck file at {path}")
        return []

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return []

    pages = paginate(lines, geometry)
    logger.debug(f"Loaded {sum(len(p) for p in pages)} cards in {len(pages)} pages from {path}")
    return pages
