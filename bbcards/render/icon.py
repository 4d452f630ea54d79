"""Card icon loading."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 64
ICON_OUTLINE = (128, 128, 128, 255)
ICON_FILL = (255, 255, 255, 255)


@lru_cache(maxsize=1)
def default_icon() -> Image.Image:
    """Two stacked cards, drawn so they read on both white and black sheets."""
    size = DEFAULT_ICON_SIZE
    icon = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(icon)

    card_w = int(size * 0.55)
    card_h = int(size * 0.75)
    radius = size // 12
    back = (size - card_w - 4, 2)
    front = (4, size - card_h - 2)

    for x, y in (back, front):
        draw.rounded_rectangle(
            [x, y, x + card_w, y + card_h],
            radius=radius,
            fill=ICON_FILL,
            outline=ICON_OUTLINE,
            width=3,
        )
    return icon


def load_icon(
    icon_path: Optional[Union[str, Path]] = None,
    fallback_path: Optional[Union[str, Path]] = None,
) -> Image.Image:
    """Load the card icon, falling back to a configured default then a drawn one.

    Args:
        icon_path: Deck icon (usually icon.png beside the deck files)
        fallback_path: Configured default icon file

    Returns:
        RGBA image
    """
    for path in (icon_path, fallback_path):
        if path is None or not Path(path).is_file():
            continue
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except OSError as e:
            logger.warning(f"Failed to load icon {path}: {e}")

    return default_icon()


def fit_size(image_size: tuple[int, int], max_width: float, max_height: float) -> tuple[float, float]:
    """Scale ``image_size`` to fit inside the box, keeping the aspect ratio."""
    w, h = image_size
    if w <= 0 or h <= 0:
        return 0.0, 0.0
    scale = min(max_width / w, max_height / h)
    return w * scale, h * scale
