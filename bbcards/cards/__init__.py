"""Card text parsing for bbcards."""

from bbcards.cards.markup import (
    STYLE_TAGS,
    ParsedCard,
    Token,
    count_blank_runs,
    expand_escapes,
    parse_card,
    resolve_pick_count,
    split_record,
    tokenize,
)

__all__ = [
    "STYLE_TAGS",
    "ParsedCard",
    "Token",
    "count_blank_runs",
    "expand_escapes",
    "parse_card",
    "resolve_pick_count",
    "split_record",
    "tokenize",
]
