"""Sheet geometry and deck pagination."""

from bbcards.layout.geometry import (
    CardGeometry,
    SlotBox,
    compute_geometry,
    slot_box,
)
from bbcards.layout.paginate import (
    Page,
    clean_records,
    paginate,
    load_pages_from_string,
    load_pages_from_file,
)

__all__ = [
    # geometry.py
    "CardGeometry",
    "SlotBox",
    "compute_geometry",
    "slot_box",
    # paginate.py
    "Page",
    "clean_records",
    "paginate",
    "load_pages_from_string",
    "load_pages_from_file",
]
