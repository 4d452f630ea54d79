"""Bigger, Blacker Cards - print-ready card sheets from plain-text decks."""

__version__ = "0.1.0"


class BBCardsError(Exception):
    """Base error for bbcards."""
    pass
