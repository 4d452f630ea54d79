import pytest

from bbcards.cards.markup import (
    BLANK,
    FIELD,
    LITERAL,
    TAG,
    count_blank_runs,
    expand_escapes,
    parse_card,
    split_record,
    tokenize,
)


# ------------------------------------------------------------
# Plain text and the bold wrapper
# ------------------------------------------------------------

def test_clean_text_is_only_wrapped_in_bold():
    card = parse_card("A sensible response card.")

    assert card.body == "A sensible response card."
    assert card.display_text == "<b>A sensible response card.</b>"
    assert card.extra_fields == ()
    assert card.pick_count == 0


def test_whitelisted_tag_survives():
    card = parse_card("Hello <b>world</b>")

    assert card.display_text == "<b>Hello <b>world</b></b>"
    assert card.extra_fields == ()
    assert card.pick_count == 0


# ------------------------------------------------------------
# Tag whitelist and escaping
# ------------------------------------------------------------

@pytest.mark.parametrize("text", [
    "<i>x</i>",
    "<u>x</u>",
    "<strikethrough>x</strikethrough>",
    "<sub>x</sub>",
    "<sup>x</sup>",
    '<font size="20">x</font>',
    '<font name="Arial" size="9">x</font>',
    '<color rgb="ff0000">x</color>',
])
def test_style_tags_kept(text):
    assert parse_card(text).body == text


@pytest.mark.parametrize("text", ["a<br>b", "a<br/>b", "a<br />b"])
def test_line_break_forms_normalized(text):
    assert parse_card(text).body == "a<br/>b"


@pytest.mark.parametrize("text,expected", [
    ("x < y", "x &lt; y"),
    ("<script>alert(1)</script>", "&lt;script>alert(1)&lt;/script>"),
    ("<b attr='1'>x</b>", "&lt;b attr='1'>x</b>"),
    ("<br>x</br>", "<br/>x&lt;/br>"),
    ("<B>loud</B>", "&lt;B>loud&lt;/B>"),
    ("<b/>", "&lt;b/>"),
    ("<font", "&lt;font"),
])
def test_unrecognized_angle_brackets_escaped(text, expected):
    assert parse_card(text).body == expected


def test_triple_brackets_are_not_a_tag():
    card = parse_card("[[[b]]] is not bold")

    assert card.body == "] is not bold"
    assert card.extra_fields == ("[b",)


# ------------------------------------------------------------
# Escape sequences and trimming
# ------------------------------------------------------------

def test_escaped_newline_eats_following_spaces():
    assert expand_escapes(r"line one\n   line two") == "line one\nline two"


def test_escaped_tab():
    assert parse_card(r"a\tb").body == "a\tb"


def test_each_line_trimmed():
    card = parse_card(r"  first  \n second \t")

    assert card.body == "first\nsecond"


# ------------------------------------------------------------
# [[field]] extraction
# ------------------------------------------------------------

def test_bracket_field_removed_from_text():
    card = parse_card("Pick a [[noun]] to eat")

    assert card.body == "Pick a  to eat"
    assert card.extra_fields == ("noun",)


def test_bracket_fields_follow_tab_fields_in_order():
    card = parse_card("A [[one]] and [[two]]\textra")

    assert card.body == "A  and"
    assert card.extra_fields == ("extra", "one", "two")


def test_unmatched_open_bracket_kept():
    card = parse_card("a [[b c")

    assert card.body == "a [[b c"
    assert card.extra_fields == ()


def test_open_bracket_needs_close_before_next_open():
    card = parse_card("[[a [[b]] c")

    assert card.body == "[[a  c"
    assert card.extra_fields == ("b",)


def test_stray_close_bracket_is_text():
    card = parse_card("a ]] b")

    assert card.body == "a ]] b"
    assert card.extra_fields == ()


def test_empty_field():
    card = parse_card("x[[]]y")

    assert card.body == "xy"
    assert card.extra_fields == ("",)


# ------------------------------------------------------------
# Pick counts
# ------------------------------------------------------------

@pytest.mark.parametrize("text,pick", [
    ("___ and ___", 2),
    ("___, ___, and ___", 3),
    ("__ __ __ __", 3),
    ("no blanks here", 1),
    ("one _ underscore", 1),
    ("only ____ one blank", 1),
])
def test_pick_inferred_from_blank_runs(text, pick):
    assert parse_card(text, is_prompt=True).pick_count == pick


def test_explicit_pick_overrides_blanks():
    assert parse_card("___ and ___\t3", is_prompt=True).pick_count == 3
    assert parse_card("no blanks\t2", is_prompt=True).pick_count == 2


@pytest.mark.parametrize("value", ["1", "banana", "4", ""])
def test_invalid_explicit_pick_falls_back_to_blanks(value):
    assert parse_card(f"___ and ___\t{value}\tx", is_prompt=True).pick_count == 2
    assert parse_card(f"no blanks\t{value}\tx", is_prompt=True).pick_count == 1


def test_extracted_field_can_carry_the_pick():
    assert parse_card("Choose wisely [[3]]", is_prompt=True).pick_count == 3


def test_blanks_counted_in_raw_text():
    # the blank inside the brackets still counts
    card = parse_card("[[__]] and __", is_prompt=True)

    assert card.body == "and __"
    assert card.pick_count == 2


def test_response_cards_never_pick():
    assert parse_card("___ and ___\t3").pick_count == 0


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def test_tokenize_kinds():
    tokens = list(tokenize("a __ <b>x</b> [[f]] <z"))

    assert [t.kind for t in tokens] == [
        LITERAL, BLANK, LITERAL, TAG, LITERAL, TAG, LITERAL, FIELD, LITERAL, LITERAL, LITERAL,
    ]
    assert tokens[7].text == "f"


def test_tokenize_without_fields_keeps_brackets_literal():
    tokens = list(tokenize("[[f]]", extract_fields=False))

    assert all(t.kind == LITERAL for t in tokens)
    assert "".join(t.text for t in tokens) == "[[f]]"


def test_count_blank_runs():
    assert count_blank_runs("___ and ___") == 2
    assert count_blank_runs("_a_b_") == 0


def test_split_record_drops_trailing_empty_fields():
    assert split_record("a\tb\t\t") == ("a", ["b"])
    assert split_record("a\t\tb") == ("a", ["", "b"])
    assert split_record("solo") == ("solo", [])


def test_blank_record():
    card = parse_card(" ", is_prompt=True)

    assert card.display_text == "<b></b>"
    assert card.pick_count == 1


def test_blanks_inside_tag_attributes_count():
    card = parse_card('a<font name="x__y">__</font>', is_prompt=True)

    assert card.body == 'a<font name="x__y">__</font>'
    assert card.pick_count == 2
    assert count_blank_runs('<font name="x__y">__</font>') == 2
