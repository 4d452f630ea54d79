"""PDF rendering for bbcards.

Exports are lazily loaded so ``python -m bbcards.render.<module>`` style
imports stay cheap.
"""

__all__ = [
    # page.py
    "render_card_page",
    "to_paragraph_markup",
    # document.py
    "ExecutionMode",
    "RenderOptions",
    "render_cards",
    "render_directory",
    "render_files",
    "render_strings",
    "write_document",
    # fonts.py
    "load_ttf_fonts",
    # icon.py
    "load_icon",
    "default_icon",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("render_card_page", "to_paragraph_markup"):
        from bbcards.render import page
        return getattr(page, name)
    elif name in ("ExecutionMode", "RenderOptions", "render_cards", "render_directory",
                  "render_files", "render_strings", "write_document"):
        from bbcards.render import document
        return getattr(document, name)
    elif name == "load_ttf_fonts":
        from bbcards.render import fonts
        return getattr(fonts, name)
    elif name in ("load_icon", "default_icon"):
        from bbcards.render import icon
        return getattr(icon, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
