"""Card text parsing: escapes, inline style tags, [[field]] extraction, pick counts.

A raw record is one tab-delimited deck line. The first field is the card
text; any further fields are extra fields. For prompt cards the first
extra field may force the pick count ("2" or "3").

Card text is scanned once by ``tokenize`` into four kinds of run:

  TAG      a whitelisted inline style tag, kept as live markup
  FIELD    a ``[[...]]`` segment, moved out of the text into extra fields
  BLANK    a run of two or more underscores (a fill-in blank)
  LITERAL  anything else; a literal ``<`` is escaped to ``&lt;``
"""

import re
from dataclasses import dataclass
from typing import Iterator, NamedTuple

TAG = "tag"
FIELD = "field"
BLANK = "blank"
LITERAL = "literal"

# Style tag name -> whether the opening tag may carry attributes
STYLE_TAGS = {
    "b": False,
    "i": False,
    "u": False,
    "strikethrough": False,
    "sub": False,
    "sup": False,
    "font": True,
    "color": True,
}
# Self-closing tags, written back in one canonical form
VOID_TAGS = {"br": "<br/>"}

FIELD_OPEN = "[["
FIELD_CLOSE = "]]"

_TAG_RE = re.compile(r"<(/?)([A-Za-z]+)(\s[^<>]*?)?\s*(/?)>")
_BLANK_RE = re.compile(r"_{2,}")
_TEXT_RE = re.compile(r"[^<\[_]+")
_NEWLINE_ESCAPE = re.compile(r"\\n *")
_EDGE_SPACE = re.compile(r"^[\t ]+|[\t ]+$", re.MULTILINE)


class Token(NamedTuple):
    kind: str
    text: str


@dataclass(frozen=True)
class ParsedCard:
    """Card content ready for drawing.

    ``body`` is the normalized text; ``display_text`` is the same text in
    the bold wrapper every card is drawn with.
    """

    body: str
    extra_fields: tuple[str, ...]
    pick_count: int

    @property
    def display_text(self) -> str:
        return f"<b>{self.body}</b>"


def _match_tag(text: str, pos: int):
    """Return (markup, end) for a whitelisted tag at ``pos``, else None."""
    m = _TAG_RE.match(text, pos)
    if not m:
        return None

    closing, name, attrs, self_closing = m.groups()
    attrs = (attrs or "").strip()

    if name in VOID_TAGS:
        if closing or attrs:
            return None
        return VOID_TAGS[name], m.end()

    if name not in STYLE_TAGS:
        return None
    if closing:
        if attrs or self_closing:
            return None
        return f"</{name}>", m.end()
    if self_closing:
        return None
    if attrs:
        if not STYLE_TAGS[name]:
            return None
        return f"<{name} {attrs}>", m.end()
    return f"<{name}>", m.end()


def tokenize(text: str, extract_fields: bool = True) -> Iterator[Token]:
    """Split card text into TAG, FIELD, BLANK and LITERAL runs.

    A ``[[`` opens a field only when a ``]]`` follows before the next
    ``[[``; otherwise it stays literal. A ``]]`` with no opener is plain
    text.
    """
    pos = 0
    end = len(text)

    while pos < end:
        if extract_fields and text.startswith(FIELD_OPEN, pos):
            close = text.find(FIELD_CLOSE, pos + 2)
            reopen = text.find(FIELD_OPEN, pos + 2)
            if close != -1 and (reopen == -1 or close < reopen):
                yield Token(FIELD, text[pos + 2:close])
                pos = close + 2
            else:
                yield Token(LITERAL, FIELD_OPEN)
                pos += 2
            continue

        char = text[pos]
        if char == "<":
            tag = _match_tag(text, pos)
            if tag:
                yield Token(TAG, tag[0])
                pos = tag[1]
            else:
                yield Token(LITERAL, char)
                pos += 1
            continue

        if char == "_":
            m = _BLANK_RE.match(text, pos)
            if m:
                yield Token(BLANK, m.group(0))
                pos = m.end()
                continue

        m = _TEXT_RE.match(text, pos)
        if m:
            yield Token(LITERAL, m.group(0))
            pos = m.end()
        else:
            yield Token(LITERAL, char)
            pos += 1


def expand_escapes(text: str) -> str:
    """Turn the two-character sequences ``\\n`` and ``\\t`` into real characters.

    Spaces right after a ``\\n`` are dropped.
    """
    text = _NEWLINE_ESCAPE.sub("\n", text)
    return text.replace("\\t", "\t")


def split_record(raw_line: str) -> tuple[str, list[str]]:
    """Split a deck record into its card text and the tab fields after it."""
    fields = raw_line.split("\t")
    while len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return fields[0], fields[1:]


def count_blank_runs(text: str) -> int:
    """Count fill-in blanks (runs of two or more underscores)."""
    return len(_BLANK_RE.findall(text))


def resolve_pick_count(card_text: str, extra_fields, is_prompt: bool) -> int:
    """Pick count for a card: 0 for response cards, else 1, 2 or 3.

    An explicit "2" or "3" in the first extra field wins. Any other value
    falls back to counting blanks in the card text: two blanks pick 2,
    three or more pick 3.
    """
    if not is_prompt:
        return 0

    explicit = extra_fields[0] if extra_fields else ""
    if explicit == "2":
        return 2
    if explicit == "3":
        return 3

    blanks = count_blank_runs(card_text)
    if blanks == 2:
        return 2
    if blanks >= 3:
        return 3
    return 1


def parse_card(raw_line: str, is_prompt: bool = False) -> ParsedCard:
    """Parse one deck record into drawable card content.

    Args:
        raw_line: Tab-delimited deck record
        is_prompt: True for prompt (black) cards, which carry a pick count

    Returns:
        ParsedCard. Never raises for malformed text; unknown tags and
        unmatched brackets come through as literal text.
    """
    card_text, extra_fields = split_record(raw_line)

    parts = []
    for token in tokenize(expand_escapes(card_text)):
        if token.kind == FIELD:
            extra_fields.append(token.text)
        elif token.kind == TAG:
            parts.append(token.text)
        else:
            parts.append(token.text.replace("<", "&lt;"))

    body = _EDGE_SPACE.sub("", "".join(parts))

    return ParsedCard(
        body=body,
        extra_fields=tuple(extra_fields),
        pick_count=resolve_pick_count(card_text, extra_fields, is_prompt),
    )
