"""
src/chart/annotations.py — Fixed callouts drawn over a rendered chart

Each slide carries two label-style callouts: a connector from the anchor
point to the note, a short rule under/over the note, a bold title and a
wrapped label. Positions are absolute in the chart viewbox, independent of
the data.
"""

from __future__ import annotations

import logging
import textwrap

from src.chart.surface import ChartContainer
from src.narrative.errors import UnrecognizedSlideError
from src.narrative.models import AnnotationSpec, LineShape, Shape, TextShape
from src.narrative.slides import get_slide

logger = logging.getLogger(__name__)

NOTE_WRAP_CHARS = 30
NOTE_CHAR_WIDTH = 3.6  # average glyph advance at NOTE_FONT
NOTE_FONT = 7
NOTE_LINE_HEIGHT = 8.5
NOTE_PADDING = 3


def callout_shapes(spec: AnnotationSpec) -> list[Shape]:
    """Lay out one callout. Text aligns away from the anchor."""
    nx, ny = spec.x + spec.dx, spec.y + spec.dy
    align_left = spec.dx >= 0
    below = spec.dy >= 0

    title_lines = textwrap.wrap(spec.title, NOTE_WRAP_CHARS)
    label_lines = textwrap.wrap(spec.label, NOTE_WRAP_CHARS)
    lines = [(t, True) for t in title_lines] + [(t, False) for t in label_lines]

    width = max(len(t) for t, _ in lines) * NOTE_CHAR_WIDTH
    x_start, x_end = (nx, nx + width) if align_left else (nx - width, nx)

    shapes: list[Shape] = [
        LineShape(
            x1=spec.x,
            y1=spec.y,
            x2=nx,
            y2=ny,
            stroke=spec.color,
            css_class="annotation-connector",
        ),
        LineShape(
            x1=x_start,
            y1=ny,
            x2=x_end,
            y2=ny,
            stroke=spec.color,
            css_class="annotation-note",
        ),
    ]

    if below:
        first_baseline = ny + NOTE_PADDING + NOTE_LINE_HEIGHT
    else:
        first_baseline = ny - NOTE_PADDING - NOTE_LINE_HEIGHT * (len(lines) - 1)

    for i, (text, is_title) in enumerate(lines):
        shapes.append(
            TextShape(
                x=x_start if align_left else x_end,
                y=first_baseline + i * NOTE_LINE_HEIGHT,
                text=text,
                font_size=NOTE_FONT,
                fill=spec.color,
                anchor="start" if align_left else "end",
                bold=is_title,
                css_class="annotation-title" if is_title else "annotation-label",
            )
        )
    return shapes


class AnnotationOverlay:
    """Adds a slide's callouts to the surface currently mounted in a container."""

    def __init__(self, container: ChartContainer):
        self.container = container

    def apply_annotations(self, slide_number: int) -> list[Shape]:
        """Draw the two callouts for `slide_number`.

        Raises:
            UnrecognizedSlideError: slide number is not 1, 2 or 3.
            RenderStateError: no chart has been rendered.
        """
        try:
            slide = get_slide(slide_number)
        except UnrecognizedSlideError:
            logger.error("No slide with number %r; no annotations drawn", slide_number)
            raise

        surface = self.container.require_surface()
        added: list[Shape] = []
        for spec in slide.annotations:
            for shape in callout_shapes(spec):
                added.append(surface.scene.add(shape))
        logger.debug("Slide %d: %d annotation shape(s)", slide_number, len(added))
        return added
