#!/usr/bin/env python3
"""Outline and package-part models for the PanicPoint generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from core.errors import OutlineError


DEFAULT_OUTPUT_PREFIX = "PanicPoint"


@dataclass(frozen=True)
class Paragraph:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"paragraph": self.text}


@dataclass(frozen=True)
class Bullets:
    items: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"bullets": list(self.items)}


SlideContent = Union[Paragraph, Bullets]


@dataclass(frozen=True)
class SlideInput:
    title: str
    content: SlideContent

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title}
        out.update(self.content.to_dict())
        return out


@dataclass(frozen=True)
class PresentationInput:
    """Fully collected outline: a non-empty title and at least one slide."""

    title: str
    slides: List[SlideInput]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "slides": [s.to_dict() for s in self.slides]}


@dataclass(frozen=True)
class PackagePart:
    """One named part of the package, as it will be stored in the archive."""

    relative_path: str
    data: bytes


def default_output_filename(title: str, prefix: str = DEFAULT_OUTPUT_PREFIX) -> str:
    return f"{prefix}_{title.replace(' ', '_')}.pptx"


def _require_text(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise OutlineError(f"{where} must be non-empty text", field=where)
    return value.strip()


def slide_from_dict(obj: Any, position: int) -> SlideInput:
    where = f"slides[{position}]"
    if not isinstance(obj, dict):
        raise OutlineError(f"{where} must be an object", field=where)
    title = _require_text(obj.get("title"), f"{where}.title")
    has_paragraph = "paragraph" in obj
    has_bullets = "bullets" in obj
    if has_paragraph == has_bullets:
        raise OutlineError(f"{where} needs exactly one of 'paragraph' or 'bullets'", field=where)
    if has_paragraph:
        return SlideInput(title=title, content=Paragraph(_require_text(obj["paragraph"], f"{where}.paragraph")))
    raw = obj["bullets"]
    if not isinstance(raw, list) or not raw:
        raise OutlineError(f"{where}.bullets must be a non-empty list", field=f"{where}.bullets")
    items = [_require_text(item, f"{where}.bullets[{idx}]") for idx, item in enumerate(raw)]
    return SlideInput(title=title, content=Bullets(items))


def presentation_from_dict(obj: Any) -> PresentationInput:
    """Validate a JSON outline and turn it into a ``PresentationInput``."""
    if not isinstance(obj, dict):
        raise OutlineError("outline must be a JSON object")
    title = _require_text(obj.get("title"), "title")
    slides_raw = obj.get("slides")
    if not isinstance(slides_raw, list) or not slides_raw:
        raise OutlineError("outline needs at least one slide", field="slides")
    return PresentationInput(
        title=title,
        slides=[slide_from_dict(item, idx) for idx, item in enumerate(slides_raw)],
    )
