from bbcards.layout.geometry import compute_geometry
from bbcards.layout.paginate import (
    clean_records,
    load_pages_from_file,
    load_pages_from_string,
    paginate,
)


SMALL = compute_geometry()


def test_blank_lines_give_no_pages():
    assert paginate(["", "\n", "\t\r\n", "\r\n"], SMALL) == []
    assert load_pages_from_string("\n\n\r\n", SMALL) == []


def test_pages_respect_capacity_and_order():
    lines = [f"card {i}\n" for i in range(45)]
    pages = paginate(lines, SMALL)

    assert [len(p) for p in pages] == [20, 20, 5]
    assert [r for p in pages for r in p] == [f"card {i}" for i in range(45)]


def test_exactly_full_pages():
    pages = paginate([f"c{i}" for i in range(40)], SMALL)

    assert len(pages) == 2
    assert all(len(p) == SMALL.capacity for p in pages)


def test_records_trimmed_of_tabs_and_line_breaks_only():
    assert clean_records(["\tfoo\r\n", "bar\t\t", "  spaced  \n", "", "\n"]) == [
        "foo",
        "bar",
        "  spaced  ",
    ]


def test_single_space_deck_is_one_blank_card():
    assert load_pages_from_string(" ", SMALL) == [(" ",)]


def test_string_split_on_any_line_break():
    pages = load_pages_from_string("a\r\nb\n\nc\rd", SMALL)

    assert pages == [("a", "b", "c", "d")]


def test_inner_tabs_kept():
    pages = load_pages_from_string("What is ___?\t2\n", SMALL)

    assert pages == [("What is ___?\t2",)]


def test_missing_file_is_empty_deck(tmp_path):
    assert load_pages_from_file(tmp_path / "nope.txt", SMALL) == []


def test_load_from_file(tmp_path):
    deck = tmp_path / "white.txt"
    deck.write_text("one\n\ntwo\nthree\n", encoding="utf-8")

    assert load_pages_from_file(deck, compute_geometry(2.5, 3.5, one_per_page=True)) == [
        ("one",),
        ("two",),
        ("three",),
    ]


def test_zero_capacity_grid_gives_no_pages():
    assert paginate(["a", "b"], compute_geometry(9.0, 2.0)) == []
