#!/usr/bin/env python3
"""Assemble the OOXML parts of a PanicPoint presentation package."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Callable, List, Optional
from xml.sax.saxutils import escape

from core.deck_model import Bullets, PackagePart, PresentationInput, SlideInput

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

NS_CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
NS_PKG_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

REL_OFFICE_DOCUMENT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument"
REL_CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
REL_SLIDE_MASTER = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slideMaster"
REL_SLIDE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide"

CT_RELS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"
CT_PRESENTATION = "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
CT_SLIDE_MASTER = "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_CORE_PROPERTIES = "application/vnd.openxmlformats-package.core-properties+xml"

CONTENT_TYPES_PATH = "[Content_Types].xml"
ROOT_RELS_PATH = "_rels/.rels"
PRESENTATION_PATH = "ppt/presentation.xml"
PRESENTATION_RELS_PATH = "ppt/_rels/presentation.xml.rels"
SLIDE_MASTER_PATH = "ppt/slideMasters/slideMaster1.xml"
SLIDE_MASTER_RELS_PATH = "ppt/slideMasters/_rels/slideMaster1.xml.rels"
CORE_PROPERTIES_PATH = "docProps/core.xml"

# Fixed ids shared by every part that references them.
SLIDE_MASTER_ID = 2147483648
SLIDE_MASTER_REL_ID = "rId1"
FIRST_SLIDE_REL_NUMBER = 2
FIRST_SLIDE_ID = 256

SLIDE_CX = 9144000
SLIDE_CY = 6858000
NOTES_CX = 6858000
NOTES_CY = 9144000

TITLE_BOX = (914400, 457200, 7315200, 457200)
BODY_BOX = (914400, 1143000, 7315200, 3657600)

DEFAULT_CREATOR = "PanicPoint"

_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _text(value: str) -> str:
    return escape(_XML_ILLEGAL.sub("", str(value)), _ENTITIES)


@dataclass(frozen=True)
class SlideAllocation:
    index: int
    slide_id: int
    rel_id: str

    @property
    def part_path(self) -> str:
        return f"ppt/slides/slide{self.index}.xml"

    @property
    def rels_path(self) -> str:
        return f"ppt/slides/_rels/slide{self.index}.xml.rels"

    @property
    def rel_target(self) -> str:
        return f"slides/slide{self.index}.xml"


def allocate_slides(count: int) -> List[SlideAllocation]:
    """Assign slide ids and presentation relationship ids in one pass."""
    return [
        SlideAllocation(
            index=pos + 1,
            slide_id=FIRST_SLIDE_ID + pos,
            rel_id=f"rId{FIRST_SLIDE_REL_NUMBER + pos}",
        )
        for pos in range(count)
    ]


def _relationships_xml(items: List[str]) -> str:
    return f'{XML_DECL}<Relationships xmlns="{NS_PKG_RELS}">' + "".join(items) + "</Relationships>"


def _relationship(rel_id: str, rel_type: str, target: str) -> str:
    return f'<Relationship Id="{rel_id}" Type="{rel_type}" Target="{_text(target)}"/>'


def _content_types_xml(slides: List[SlideAllocation]) -> str:
    overrides = [
        (f"/{PRESENTATION_PATH}", CT_PRESENTATION),
        (f"/{SLIDE_MASTER_PATH}", CT_SLIDE_MASTER),
        (f"/{CORE_PROPERTIES_PATH}", CT_CORE_PROPERTIES),
    ]
    overrides.extend((f"/{slide.part_path}", CT_SLIDE) for slide in slides)
    return (
        f'{XML_DECL}<Types xmlns="{NS_CONTENT_TYPES}">'
        f'<Default Extension="rels" ContentType="{CT_RELS}"/>'
        f'<Default Extension="xml" ContentType="{CT_XML}"/>'
        + "".join(f'<Override PartName="{name}" ContentType="{ctype}"/>' for name, ctype in overrides)
        + "</Types>"
    )


def _root_rels_xml() -> str:
    return _relationships_xml(
        [
            _relationship("rId1", REL_OFFICE_DOCUMENT, PRESENTATION_PATH),
            _relationship("rId2", REL_CORE_PROPERTIES, CORE_PROPERTIES_PATH),
        ]
    )


def _presentation_xml(slides: List[SlideAllocation]) -> str:
    slide_ids = "".join(f'<p:sldId id="{slide.slide_id}" r:id="{slide.rel_id}"/>' for slide in slides)
    return (
        f'{XML_DECL}<p:presentation xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
        f'<p:sldMasterIdLst><p:sldMasterId id="{SLIDE_MASTER_ID}" r:id="{SLIDE_MASTER_REL_ID}"/></p:sldMasterIdLst>'
        f"<p:sldIdLst>{slide_ids}</p:sldIdLst>"
        f'<p:sldSz cx="{SLIDE_CX}" cy="{SLIDE_CY}"/>'
        f'<p:notesSz cx="{NOTES_CX}" cy="{NOTES_CY}"/>'
        "</p:presentation>"
    )


def _presentation_rels_xml(slides: List[SlideAllocation]) -> str:
    items = [_relationship(SLIDE_MASTER_REL_ID, REL_SLIDE_MASTER, "slideMasters/slideMaster1.xml")]
    items.extend(_relationship(slide.rel_id, REL_SLIDE, slide.rel_target) for slide in slides)
    return _relationships_xml(items)


_GROUP_SHAPE_PROPS = (
    '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
    '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
)


def _slide_master_xml() -> str:
    return (
        f'{XML_DECL}<p:sldMaster xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
        "<p:cSld>"
        '<p:bg><p:bgPr><a:solidFill><a:srgbClr val="FFFFFF"/></a:solidFill><a:effectLst/></p:bgPr></p:bg>'
        f"<p:spTree>{_GROUP_SHAPE_PROPS}</p:spTree>"
        "</p:cSld>"
        '<p:clrMap bg1="lt1" tx1="dk1" bg2="lt2" tx2="dk2" accent1="accent1" accent2="accent2" '
        'accent3="accent3" accent4="accent4" accent5="accent5" accent6="accent6" '
        'hlink="hlink" folHlink="folHlink"/>'
        "</p:sldMaster>"
    )


def _run_paragraph(text: str, *, level: Optional[int] = None) -> str:
    ppr = f'<a:pPr lvl="{level}"/>' if level is not None else ""
    return f'<a:p>{ppr}<a:r><a:rPr lang="en-US"/><a:t>{_text(text)}</a:t></a:r></a:p>'


def _placeholder_shape(shape_id: int, name: str, placeholder: str, box: tuple, paragraphs: List[str]) -> str:
    x, y, cx, cy = box
    return (
        "<p:sp>"
        f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/><p:cNvSpPr/><p:nvPr>{placeholder}</p:nvPr></p:nvSpPr>'
        f'<p:spPr><a:xfrm><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm></p:spPr>'
        "<p:txBody><a:bodyPr/><a:lstStyle/>"
        f"{''.join(paragraphs)}"
        "</p:txBody>"
        "</p:sp>"
    )


def _content_paragraphs(slide: SlideInput) -> List[str]:
    if isinstance(slide.content, Bullets):
        return [_run_paragraph(item, level=0) for item in slide.content.items]
    return [_run_paragraph(slide.content.text)]


def _slide_xml(slide: SlideInput) -> str:
    shapes = [
        _placeholder_shape(2, "Title", '<p:ph type="title"/>', TITLE_BOX, [_run_paragraph(slide.title)]),
        _placeholder_shape(3, "Content", '<p:ph type="body" idx="1"/>', BODY_BOX, _content_paragraphs(slide)),
    ]
    return (
        f'{XML_DECL}<p:sld xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
        f"<p:cSld><p:spTree>{_GROUP_SHAPE_PROPS}{''.join(shapes)}</p:spTree></p:cSld>"
        "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
        "</p:sld>"
    )


def _w3cdtf(moment: dt.datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat(timespec="seconds")


def _core_xml(title: str, creator: str, moment: dt.datetime) -> str:
    stamp = _w3cdtf(moment)
    return (
        f"{XML_DECL}"
        '<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/" '
        'xmlns:dcmitype="http://purl.org/dc/dcmitype/" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        f"<dc:title>{_text(title)}</dc:title>"
        f"<dc:creator>{_text(creator)}</dc:creator>"
        f"<cp:lastModifiedBy>{_text(creator)}</cp:lastModifiedBy>"
        f'<dcterms:created xsi:type="dcterms:W3CDTF">{stamp}</dcterms:created>'
        f'<dcterms:modified xsi:type="dcterms:W3CDTF">{stamp}</dcterms:modified>'
        "</cp:coreProperties>"
    )


def _part(path: str, xml: str) -> PackagePart:
    return PackagePart(relative_path=path, data=xml.encode("utf-8"))


def build_package(
    presentation: PresentationInput,
    *,
    clock: Optional[Callable[[], dt.datetime]] = None,
    creator: str = DEFAULT_CREATOR,
) -> List[PackagePart]:
    """Build every part of the package, in archive order.

    ``clock`` supplies the created/modified instant of the core properties;
    it defaults to the current local time. Nothing else depends on it, so two
    builds of the same outline differ only in ``docProps/core.xml``.
    """
    slides = allocate_slides(len(presentation.slides))
    moment = (clock or dt.datetime.now)()
    parts = [
        _part(CONTENT_TYPES_PATH, _content_types_xml(slides)),
        _part(ROOT_RELS_PATH, _root_rels_xml()),
        _part(PRESENTATION_PATH, _presentation_xml(slides)),
        _part(PRESENTATION_RELS_PATH, _presentation_rels_xml(slides)),
        _part(SLIDE_MASTER_PATH, _slide_master_xml()),
        _part(SLIDE_MASTER_RELS_PATH, _relationships_xml([])),
    ]
    for alloc, slide in zip(slides, presentation.slides):
        parts.append(_part(alloc.part_path, _slide_xml(slide)))
        parts.append(_part(alloc.rels_path, _relationships_xml([])))
    parts.append(_part(CORE_PROPERTIES_PATH, _core_xml(presentation.title, creator, moment)))
    return parts
