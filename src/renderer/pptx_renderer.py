"""
src/renderer/pptx_renderer.py -- PPTX Rendering Engine

Converts captured narrative slides into a .pptx file using python-pptx.
Deterministic: same input always produces the same output.

Each slide gets the narrative caption as heading and the chart scene
scaled from its 450x350 viewbox into the content area. Bar tooltips,
which cannot hover in a deck, go into the speaker notes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_CONNECTOR
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from src.narrative.models import LineShape, RectShape, Scene, TextShape
from src.services.slide_controller import SlideSnapshot

logger = logging.getLogger(__name__)

# ── Geometry Constants (inches, 16:9) ─────────────────────────────

SLIDE_WIDTH = Inches(13.333)
SLIDE_HEIGHT = Inches(7.5)

MARGIN_TOP = 0.5
MARGIN_BOTTOM = 0.4
MARGIN_LEFT = 0.7
MARGIN_RIGHT = 0.7

CONTENT_WIDTH = 13.333 - MARGIN_LEFT - MARGIN_RIGHT  # 11.933

TITLE_LEFT = MARGIN_LEFT
TITLE_TOP = MARGIN_TOP
TITLE_WIDTH = CONTENT_WIDTH
TITLE_HEIGHT = 0.9

CHART_TOP = TITLE_TOP + TITLE_HEIGHT + 0.1  # 1.5
CHART_HEIGHT = 7.5 - CHART_TOP - MARGIN_BOTTOM  # 5.6

# Font sizes (points)
FONT_HEADING = 20

# Average glyph advance as a fraction of the font size
GLYPH_WIDTH = 0.55

# ── Color Utilities ───────────────────────────────────────────────

NAMED_COLORS = {"white": "FFFFFF", "black": "000000", "red": "FF0000"}


def resolve_color(color_ref: str) -> RGBColor:
    """Resolve "#0073BB", "0073BB" or a named color to an RGBColor."""
    hex_val = NAMED_COLORS.get(color_ref.lower(), color_ref).lstrip("#")
    r = int(hex_val[0:2], 16)
    g = int(hex_val[2:4], 16)
    b = int(hex_val[4:6], 16)
    return RGBColor(r, g, b)


# ── Viewbox Mapping ───────────────────────────────────────────────


class ViewboxMapper:
    """Scales viewbox units onto a chart region of the slide, centred horizontally."""

    def __init__(self, scene: Scene, left: float = MARGIN_LEFT, top: float = CHART_TOP):
        self.scale = min(CONTENT_WIDTH / scene.width, CHART_HEIGHT / scene.height)
        self.left = left + (CONTENT_WIDTH - scene.width * self.scale) / 2
        self.top = top

    def x(self, vx: float) -> float:
        return self.left + vx * self.scale

    def y(self, vy: float) -> float:
        return self.top + vy * self.scale

    def length(self, v: float) -> float:
        return v * self.scale

    def points(self, v: float) -> float:
        return v * self.scale * 72


# ── Text Helpers ──────────────────────────────────────────────────


def _add_textbox(
    slide,
    left: float,
    top: float,
    width: float,
    height: float,
    text: str,
    font_size: float = 12,
    bold: bool = False,
    color: Optional[RGBColor] = None,
    alignment: PP_ALIGN = PP_ALIGN.LEFT,
    word_wrap: bool = True,
) -> object:
    """Add a textbox to a slide and return the shape."""
    txBox = slide.shapes.add_textbox(
        Inches(left),
        Inches(top),
        Inches(width),
        Inches(height),
    )
    tf = txBox.text_frame
    tf.word_wrap = word_wrap
    tf.margin_left = tf.margin_right = tf.margin_top = tf.margin_bottom = 0
    tf.vertical_anchor = MSO_ANCHOR.BOTTOM

    p = tf.paragraphs[0]
    p.text = text
    p.font.size = Pt(font_size)
    p.font.bold = bold
    p.alignment = alignment
    if color:
        p.font.color.rgb = color
    return txBox


# ── Shape Renderers ───────────────────────────────────────────────

_ALIGN = {"start": PP_ALIGN.LEFT, "middle": PP_ALIGN.CENTER, "end": PP_ALIGN.RIGHT}


def _render_rect(slide, shape: RectShape, vm: ViewboxMapper):
    if shape.width <= 0 or shape.height <= 0:
        return None
    box = slide.shapes.add_shape(
        1,  # MSO_SHAPE.RECTANGLE
        Inches(vm.x(shape.x)),
        Inches(vm.y(shape.y)),
        Inches(vm.length(shape.width)),
        Inches(vm.length(shape.height)),
    )
    box.fill.solid()
    box.fill.fore_color.rgb = resolve_color(shape.fill)
    box.line.fill.background()
    return box


def _render_line(slide, shape: LineShape, vm: ViewboxMapper):
    connector = slide.shapes.add_connector(
        MSO_CONNECTOR.STRAIGHT,
        Inches(vm.x(shape.x1)),
        Inches(vm.y(shape.y1)),
        Inches(vm.x(shape.x2)),
        Inches(vm.y(shape.y2)),
    )
    connector.line.color.rgb = resolve_color(shape.stroke)
    connector.line.width = Pt(max(0.25, vm.points(shape.stroke_width)))
    return connector


def _render_text(slide, shape: TextShape, vm: ViewboxMapper):
    """Place a text run so its baseline and anchor land where the SVG would put them."""
    size = shape.font_size
    width = max(len(shape.text), 1) * size * GLYPH_WIDTH
    if shape.anchor == "middle":
        left = shape.x - width / 2
    elif shape.anchor == "end":
        left = shape.x - width
    else:
        left = shape.x
    baseline = shape.y + shape.dy_em * size
    return _add_textbox(
        slide,
        vm.x(left),
        vm.y(baseline - size * 1.2),
        vm.length(width),
        vm.length(size * 1.2),
        shape.text,
        font_size=vm.points(size),
        bold=shape.bold,
        color=resolve_color(shape.fill),
        alignment=_ALIGN[shape.anchor],
        word_wrap=False,
    )


# ── Dispatch Table ────────────────────────────────────────────────

_RENDERERS = {
    "rect": _render_rect,
    "line": _render_line,
    "text": _render_text,
}


def render_scene(slide, scene: Scene) -> int:
    """Draw every scene element onto a slide. Returns the number of shapes added."""
    vm = ViewboxMapper(scene)
    added = 0
    for element in scene.elements:
        if _RENDERERS[element.kind](slide, element, vm) is not None:
            added += 1
    return added


# ── Speaker Notes ─────────────────────────────────────────────────


def _add_speaker_notes(slide, notes: str):
    """Add speaker notes to a slide."""
    notes_slide = slide.notes_slide
    notes_slide.notes_text_frame.text = notes


def _bar_notes(scene: Scene) -> str:
    return "\n\n".join(bar.tooltip for bar in scene.bars() if bar.tooltip)


# ── Public API ────────────────────────────────────────────────────


def render(
    snapshots: Sequence[SlideSnapshot],
    output_dir: Path,
    title: str = "Time Use Narrative",
) -> Path:
    """Render captured slides to a .pptx file.

    Args:
        snapshots: Slides captured by SlideController.collect().
        output_dir: Directory to write output file.
        title: Deck title, used for the filename.

    Returns:
        Path to the generated .pptx file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT
    blank_layout = prs.slide_layouts[6]  # blank layout

    for snap in snapshots:
        slide = prs.slides.add_slide(blank_layout)

        _add_textbox(
            slide,
            TITLE_LEFT,
            TITLE_TOP,
            TITLE_WIDTH,
            TITLE_HEIGHT,
            snap.caption_text,
            font_size=FONT_HEADING,
            bold=True,
            color=resolve_color("black"),
        )
        count = render_scene(slide, snap.scene)
        logger.debug("Slide %d: %d chart shapes", snap.slide_number, count)

        notes = _bar_notes(snap.scene)
        if notes:
            _add_speaker_notes(slide, notes)

    safe_title = "".join(c if c.isalnum() or c in " -_" else "_" for c in title).strip()[:80]
    output_path = output_dir / f"{safe_title}.pptx"
    prs.save(str(output_path))

    logger.info("Rendered %d slides to %s", len(snapshots), output_path)
    return output_path
