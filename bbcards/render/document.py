"""Assemble deck pages into one PDF per deck pair, and walk deck directories."""

import enum
import io
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Union

from PIL import Image
from reportlab.pdfgen.canvas import Canvas

from bbcards.layout.geometry import CardGeometry, compute_geometry
from bbcards.layout.paginate import Page, load_pages_from_file, load_pages_from_string
from bbcards.render.icon import load_icon
from bbcards.render.page import render_card_page

logger = logging.getLogger(__name__)

PRODUCER = "Bigger, Blacker Cards"
DEFAULT_OUTPUT = "cards.pdf"
WHITE_FILE = "white.txt"
BLACK_FILE = "black.txt"
ICON_FILE = "icon.png"


class ExecutionMode(enum.Enum):
    """Where a rendered document goes."""

    FILE = "file"
    STDOUT = "stdout"
    CGI = "cgi"


@dataclass
class RenderOptions:
    """Settings shared by every deck pair in one run."""

    geometry: CardGeometry
    default_icon: Optional[Path] = None
    output_dir: Path = Path(".")
    white_file: str = WHITE_FILE
    black_file: str = BLACK_FILE
    icon_file: str = ICON_FILE


def document_title(output: Union[str, Path, None], mode: ExecutionMode, title: Optional[str] = None) -> Optional[str]:
    """Explicit title, else the producer name when streaming, else the output stem."""
    if title is not None:
        return title
    if mode is not ExecutionMode.FILE:
        return PRODUCER
    if output is not None and Path(output).name != DEFAULT_OUTPUT:
        return Path(output).stem
    return None


def write_document(
    white_pages: Sequence[Page],
    black_pages: Sequence[Page],
    geometry: CardGeometry,
    icon: Image.Image,
    target: Union[str, Path, BinaryIO],
    title: Optional[str] = None,
) -> int:
    """Render response pages then prompt pages into one PDF.

    Returns:
        Number of pages written (0 means nothing was written)
    """
    if not white_pages and not black_pages:
        return 0

    if isinstance(target, Path):
        target = str(target)

    canvas = Canvas(target, pagesize=(geometry.paper_width, geometry.paper_height))
    canvas.setProducer(PRODUCER)
    canvas.setCreator(PRODUCER)
    if title:
        canvas.setTitle(title)

    page_count = 0
    for records in white_pages:
        render_card_page(canvas, geometry, records, icon, is_prompt=False)
        canvas.showPage()
        page_count += 1
    for records in black_pages:
        render_card_page(canvas, geometry, records, icon, is_prompt=True)
        canvas.showPage()
        page_count += 1

    canvas.save()
    return page_count


def emit_document(
    white_pages: Sequence[Page],
    black_pages: Sequence[Page],
    geometry: CardGeometry,
    icon: Image.Image,
    output: Union[str, Path],
    mode: ExecutionMode = ExecutionMode.FILE,
    title: Optional[str] = None,
    stream: Optional[BinaryIO] = None,
) -> int:
    """Write a deck pair to a file, or stream it for STDOUT/CGI modes.

    Returns:
        Number of pages written
    """
    title = document_title(output, mode, title)

    if mode is ExecutionMode.FILE:
        output = Path(output)
        if white_pages or black_pages:
            output.parent.mkdir(parents=True, exist_ok=True)
        pages = write_document(white_pages, black_pages, geometry, icon, output, title)
        if pages:
            logger.info(f"Saved PDF: {output} ({pages} pages)")
        return pages

    buffer = io.BytesIO()
    pages = write_document(white_pages, black_pages, geometry, icon, buffer, title)
    if not pages:
        return 0

    stream = stream if stream is not None else sys.stdout.buffer
    if mode is ExecutionMode.CGI:
        stream.write(b"Content-Type: application/pdf\r\n\r\n")
    stream.write(buffer.getvalue())
    stream.flush()
    return pages


def render_strings(
    white_text: str,
    black_text: str,
    geometry: CardGeometry,
    icon: Optional[Image.Image] = None,
    output: Union[str, Path] = DEFAULT_OUTPUT,
    mode: ExecutionMode = ExecutionMode.STDOUT,
    title: Optional[str] = None,
    stream: Optional[BinaryIO] = None,
) -> int:
    """Render decks given as text. Two empty decks give one blank card each."""
    if white_text == "" and black_text == "":
        white_text = black_text = " "

    white_pages = load_pages_from_string(white_text, geometry)
    black_pages = load_pages_from_string(black_text, geometry)
    return emit_document(
        white_pages, black_pages, geometry, icon or load_icon(), output, mode, title, stream
    )


def render_files(
    white_path: Optional[Union[str, Path]],
    black_path: Optional[Union[str, Path]],
    geometry: CardGeometry,
    icon_path: Optional[Union[str, Path]] = None,
    output: Union[str, Path] = DEFAULT_OUTPUT,
    mode: ExecutionMode = ExecutionMode.FILE,
    title: Optional[str] = None,
    default_icon: Optional[Path] = None,
    stream: Optional[BinaryIO] = None,
) -> int:
    """Render explicitly named deck files into one document."""
    white_pages = load_pages_from_file(white_path, geometry) if white_path else []
    black_pages = load_pages_from_file(black_path, geometry) if black_path else []
    if not white_pages and not black_pages:
        logger.warning("No cards found in the given deck files")
        return 0

    icon = load_icon(icon_path, default_icon)
    return emit_document(white_pages, black_pages, geometry, icon, output, mode, title, stream)


def output_name_for(directory: Path, default: str = DEFAULT_OUTPUT) -> str:
    """A directory deck is named after its directory; ``.`` keeps the default."""
    if str(directory) == ".":
        return default
    name = directory.resolve().name
    return f"{name}.pdf" if name else default


def render_directory(
    directory: Union[str, Path],
    options: RenderOptions,
    output: str = DEFAULT_OUTPUT,
    recurse: bool = True,
    mode: ExecutionMode = ExecutionMode.FILE,
    title: Optional[str] = None,
) -> list[Path]:
    """Render the deck pair in ``directory`` and, optionally, every subdirectory.

    Directories are visited depth-first in sorted order. A directory with
    no cards produces no document.

    Returns:
        Output paths of the documents produced (streamed documents included)
    """
    directory = Path(directory)
    written = []

    if not directory.is_dir():
        logger.warning(f"Not a directory: {directory}")
        return written

    geometry = options.geometry
    white_pages = load_pages_from_file(directory / options.white_file, geometry)
    black_pages = load_pages_from_file(directory / options.black_file, geometry)

    if white_pages or black_pages:
        output_path = options.output_dir / output_name_for(directory, output)
        icon = load_icon(directory / options.icon_file, options.default_icon)
        pages = emit_document(white_pages, black_pages, geometry, icon, output_path, mode, title)
        if pages:
            written.append(output_path)
    else:
        logger.debug(f"No cards in {directory}, skipping")

    if recurse:
        try:
            subdirs = sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError as e:
            logger.warning(f"Cannot list {directory}, skipping its subdirectories: {e}")
            subdirs = []
        for subdir in subdirs:
            written.extend(render_directory(subdir, options, output, recurse=True, mode=mode))

    return written


def render_cards(
    directory: Optional[Union[str, Path]] = None,
    white: Optional[Union[str, Path]] = None,
    black: Optional[Union[str, Path]] = None,
    icon: Optional[Union[str, Path]] = None,
    output: Union[str, Path] = DEFAULT_OUTPUT,
    geometry: Optional[CardGeometry] = None,
    recurse: bool = True,
    mode: ExecutionMode = ExecutionMode.FILE,
    title: Optional[str] = None,
    default_icon: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    options: Optional[RenderOptions] = None,
) -> int:
    """Render either a deck directory tree or a pair of deck files.

    A directory takes precedence over explicit files. When ``options`` is
    given it supplies the geometry, default icon, output directory and
    deck file names.

    Returns:
        Number of documents produced
    """
    if options is None:
        options = RenderOptions(
            geometry=geometry or compute_geometry(),
            default_icon=default_icon,
            output_dir=output_dir or Path("."),
        )
    started = datetime.now()

    if directory is not None:
        written = render_directory(directory, options, str(output), recurse=recurse, mode=mode, title=title)
        count = len(written)
    else:
        output = Path(output)
        if not output.is_absolute():
            output = options.output_dir / output
        pages = render_files(
            white, black, options.geometry, icon, output, mode, title, options.default_icon
        )
        count = 1 if pages else 0

    elapsed = (datetime.now() - started).total_seconds()
    logger.info(f"Rendered {count} document(s) in {elapsed:.1f}s")
    return count
