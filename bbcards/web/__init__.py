"""Web form front end for bbcards."""

from bbcards.web.form import CardRequest, handle_request, parse_form

__all__ = [
    "CardRequest",
    "handle_request",
    "parse_form",
]
