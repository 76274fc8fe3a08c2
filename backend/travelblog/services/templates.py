"""Post layout templates known to the front end.

The table is built once at import time and never mutated; posts store the
canonical template id and responses carry the human readable name.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType

from travelblog.core.errors import InvalidInput


class TemplateId(str, enum.Enum):
    CLASSIC = "template-01"
    PHOTO_GRID = "template-02"
    STORY = "template-03"
    MAGAZINE = "template-04"
    GALLERY = "template-05"
    TIMELINE = "template-06"
    POSTCARD = "template-07"
    JOURNAL = "template-08"
    SPLIT = "template-09"
    MINIMAL = "template-10"


@dataclass(frozen=True, slots=True)
class TemplateInfo:
    id: TemplateId
    name: str
    description: str


DEFAULT_TEMPLATE = TemplateId.CLASSIC

TEMPLATES = MappingProxyType(
    {
        info.id: info
        for info in (
            TemplateInfo(TemplateId.CLASSIC, "Classic", "Title, text and photos in a single column"),
            TemplateInfo(TemplateId.PHOTO_GRID, "Photo Grid", "Photos in a grid with captions below"),
            TemplateInfo(TemplateId.STORY, "Story", "Alternating text and full width media"),
            TemplateInfo(TemplateId.MAGAZINE, "Magazine", "Two column layout with a hero image"),
            TemplateInfo(TemplateId.GALLERY, "Gallery", "Media first, text as an introduction"),
            TemplateInfo(TemplateId.TIMELINE, "Timeline", "Content laid out along a vertical timeline"),
            TemplateInfo(TemplateId.POSTCARD, "Postcard", "Short post with one large cover photo"),
            TemplateInfo(TemplateId.JOURNAL, "Journal", "Long form text with inline photos"),
            TemplateInfo(TemplateId.SPLIT, "Split", "Media and text side by side"),
            TemplateInfo(TemplateId.MINIMAL, "Minimal", "Text only rendering, media as links"),
        )
    }
)


def normalize_template_id(value: str | None) -> TemplateId:
    """Accept canonical ids (``template-03``) as well as legacy short ids (``3``)."""
    if value is None or not str(value).strip():
        return DEFAULT_TEMPLATE
    raw = str(value).strip().lower()
    if raw.isdigit():
        raw = f"template-{int(raw):02d}"
    try:
        return TemplateId(raw)
    except ValueError as exc:
        raise InvalidInput(f"Unknown template: {value}") from exc


def get_template(template_id: str) -> TemplateInfo:
    return TEMPLATES[normalize_template_id(template_id)]
