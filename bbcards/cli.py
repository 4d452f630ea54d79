#!/usr/bin/env python3
"""bbcards CLI - print-ready PDF card sheets from plain-text decks."""

import logging
import os
import sys
from pathlib import Path

import click
import yaml

from bbcards import __version__
from bbcards.cards.markup import parse_card
from bbcards.config import ConfigError, load_settings
from bbcards.layout.paginate import load_pages_from_file
from bbcards.render.document import DEFAULT_OUTPUT, ExecutionMode, render_cards
from bbcards.render.fonts import load_ttf_fonts
from bbcards.web.form import handle_request, parse_form

logger = logging.getLogger(__name__)

RENDER_EPILOG = """\b
Directory mode reads white.txt (response cards), black.txt (prompt
cards) and icon.png from DIRECTORY and writes DIRECTORY_NAME.pdf,
descending into every subdirectory that holds card files.

\b
Examples:
  bbcards render --directory decks/
  bbcards render -w white.txt -b black.txt -i icon.png -o cards.pdf
  bbcards render -d decks/ --large --rounded
"""


def _settings(config, **overrides):
    try:
        return load_settings(config, overrides)
    except ConfigError as e:
        raise click.UsageError(str(e))


def _card_size(small, large):
    if large:
        return "large"
    if small:
        return "small"
    return None


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """bbcards - Bigger, Blacker Cards.

    Lay out response (white) and prompt (black) card decks on printable
    PDF sheets.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@cli.command(epilog=RENDER_EPILOG)
@click.option("-d", "--directory", type=click.Path(file_okay=False, path_type=Path),
              help="Directory to search for card files")
@click.option("-w", "--white", type=click.Path(dir_okay=False, path_type=Path), help="White (response) card file")
@click.option("-b", "--black", type=click.Path(dir_okay=False, path_type=Path), help="Black (prompt) card file")
@click.option("-i", "--icon", type=click.Path(dir_okay=False, path_type=Path), help="Icon file, .png or .jpg")
@click.option("-o", "--output", default=DEFAULT_OUTPUT, show_default=True, help="Output PDF file")
@click.option("-s", "--small", is_flag=True, help='Generate small 2"x2" cards (default)')
@click.option("-l", "--large", is_flag=True, help='Generate large 2.5"x3.5" cards')
@click.option("-r", "--rounded", is_flag=True, help="Rounded card outlines instead of a grid")
@click.option("-p", "--oneperpage", is_flag=True, help="One card per page")
@click.option("--no-recurse", is_flag=True, help="Do not descend into subdirectories")
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the PDF to standard output")
@click.option("--title", help="Document title")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Settings file (default: ./bbcards.yml)")
@click.option("--font-dir", type=click.Path(file_okay=False), help="Directory of TrueType fonts")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Where directory-mode PDFs are written")
@click.pass_context
def render(ctx, directory, white, black, icon, output, small, large, rounded, oneperpage,
           no_recurse, to_stdout, title, config_path, font_dir, output_dir):
    """Render card decks to PDF.

    Give EITHER a directory OR white/black card files. If both are
    given, the files are ignored and the directory is used.
    """
    if directory is None and white is None and black is None:
        click.echo(ctx.get_help())
        return

    settings = _settings(
        config_path,
        card_size=_card_size(small, large),
        rounded=rounded or None,
        one_per_page=oneperpage or None,
        font_dir=font_dir,
        output_dir=output_dir,
    )
    try:
        options = settings.render_options()
    except ConfigError as e:
        raise click.UsageError(str(e))

    load_ttf_fonts(settings.font_dir)
    mode = ExecutionMode.STDOUT if to_stdout else ExecutionMode.FILE
    geometry = options.geometry
    logger.info(
        f"{geometry.cards_across}x{geometry.cards_high} cards per page "
        f"({geometry.card_width / 72:g}\" x {geometry.card_height / 72:g}\")"
    )

    if directory is not None and not directory.is_dir():
        raise click.BadParameter(f"{directory} is not a directory", param_hint="--directory")

    count = render_cards(
        directory=directory,
        white=white,
        black=black,
        icon=icon,
        output=output,
        recurse=not (no_recurse or to_stdout),
        mode=mode,
        title=title,
        options=options,
    )
    if count:
        return
    if directory is not None:
        logger.warning(f"No card files found under {directory}")
    else:
        raise click.ClickException("No cards found in the given files")


@cli.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Settings file (default: ./bbcards.yml)")
def cgi(config_path):
    """Serve one web form submission as a CGI script.

    Reads the form from QUERY_STRING or an urlencoded request body and
    writes a PDF response to standard output.
    """
    settings = _settings(config_path)
    load_ttf_fonts(settings.font_dir)

    body = b""
    if os.environ.get("REQUEST_METHOD", "GET").upper() == "POST":
        try:
            length = int(os.environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length > 0:
            body = sys.stdin.buffer.read(length)

    fields = parse_form(
        os.environ.get("QUERY_STRING", ""),
        body,
        os.environ.get("CONTENT_TYPE"),
    )
    handle_request(fields, sys.stdout.buffer, ExecutionMode.CGI, settings.default_icon)


@cli.command()
@click.argument("deck", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--prompt", is_flag=True, help="Parse as prompt (black) cards")
@click.option("-l", "--large", is_flag=True, help='Paginate for large 2.5"x3.5" cards')
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Settings file (default: ./bbcards.yml)")
def inspect(deck, prompt, large, config_path):
    """Print a deck's pages and parsed cards as YAML."""
    settings = _settings(config_path, card_size=_card_size(False, large))
    try:
        geometry = settings.geometry()
    except ConfigError as e:
        raise click.UsageError(str(e))

    pages = []
    for number, records in enumerate(load_pages_from_file(deck, geometry), start=1):
        cards = []
        for record in records:
            card = parse_card(record, prompt)
            entry = {"text": card.body}
            if card.extra_fields:
                entry["fields"] = list(card.extra_fields)
            if prompt:
                entry["pick"] = card.pick_count
            cards.append(entry)
        pages.append({"page": number, "cards": cards})

    click.echo(yaml.safe_dump(
        {"deck": str(deck), "cards_per_page": geometry.capacity, "pages": pages},
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    ))


if __name__ == "__main__":
    cli()
