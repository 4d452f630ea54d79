"""Register TrueType font families for inline ``<font name=...>`` markup."""

import logging
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.fonts import ps2tt
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

DEFAULT_FONT_DIR = "/usr/share/fonts/truetype/msttcorefonts"

# Filename suffix -> style, longest first
STYLE_SUFFIXES = (
    ("_Bold_Italic", "bold_italic"),
    ("_Italic", "italic"),
    ("_Bold", "bold"),
)


def scan_font_dir(font_dir: Union[str, Path]) -> dict[str, dict[str, Path]]:
    """Group ``Family_Name[_Bold|_Italic|_Bold_Italic].ttf`` files by family.

    Returns:
        {family name: {style: path}}, family names with spaces for underscores
    """
    families: dict[str, dict[str, Path]] = {}
    for ttf in sorted(Path(font_dir).glob("*.ttf")):
        name = ttf.stem
        style = "normal"
        for suffix, suffix_style in STYLE_SUFFIXES:
            if name.endswith(suffix):
                style = suffix_style
                name = name[: -len(suffix)]
                break
        name = name.replace("_", " ")
        families.setdefault(name, {})[style] = ttf
    return families


def resolve_styles(styles: dict[str, Path]) -> Optional[dict[str, Path]]:
    """Fill in missing styles from the ones present. Needs a normal style."""
    if "normal" not in styles:
        return None

    normal = styles["normal"]
    italic = styles.get("italic", normal)
    bold = styles.get("bold", normal)
    if "bold_italic" in styles:
        bold_italic = styles["bold_italic"]
    elif "italic" in styles:
        bold_italic = italic
    else:
        bold_italic = bold

    return {"normal": normal, "italic": italic, "bold": bold, "bold_italic": bold_italic}


def _is_registered_family(name: str) -> bool:
    try:
        ps2tt(name)
    except ValueError:
        return False
    return True


def load_ttf_fonts(font_dir: Optional[Union[str, Path]]) -> list[str]:
    """Register every complete font family found in ``font_dir``.

    Families that are already registered are left alone. A missing
    directory registers nothing.

    Returns:
        Names of the families registered by this call
    """
    if font_dir is None or not Path(font_dir).is_dir():
        return []

    registered = []
    for family, styles in scan_font_dir(font_dir).items():
        resolved = resolve_styles(styles)
        if resolved is None or _is_registered_family(family):
            continue

        face_names = {}
        try:
            for style, path in resolved.items():
                face = family if style == "normal" else f"{family}-{style}"
                if face not in pdfmetrics.getRegisteredFontNames():
                    pdfmetrics.registerFont(TTFont(face, str(path)))
                face_names[style] = face
        except Exception as e:
            logger.warning(f"Skipping font family {family!r}: {e}")
            continue

        pdfmetrics.registerFontFamily(
            family,
            normal=face_names["normal"],
            bold=face_names["bold"],
            italic=face_names["italic"],
            boldItalic=face_names["bold_italic"],
        )
        registered.append(family)
        logger.debug(f"Registered font family {family!r}")

    return registered
