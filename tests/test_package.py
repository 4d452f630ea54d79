"""Smoke test that the bbcards package and its subpackages import."""


def test_package_imports():
    import bbcards
    from bbcards import cards, layout, render, web
    from bbcards.cli import cli

    assert bbcards.__version__
    assert callable(cli)
    assert callable(cards.parse_card)
    assert callable(layout.compute_geometry)
    assert callable(web.handle_request)


def test_render_lazy_exports():
    from bbcards import render

    for name in render.__all__:
        assert getattr(render, name) is not None
