"""
src/renderer/svg_renderer.py -- Scene → SVG / HTML

Serialises a chart Scene into inline SVG. Bars carry a <title> holding the
tooltip text so the hover detail survives in a static file. render_html
wraps one or more slides into a standalone page with caption and
navigation.

No JavaScript. Pure static SVG/HTML.
"""

from __future__ import annotations

import html as _html
from typing import Sequence

from src.chart.surface import NAV_SELECTED, NAV_UNSELECTED
from src.narrative.models import LineShape, RectShape, Scene, Shape, TextShape
from src.services.slide_controller import SlideSnapshot

STYLESHEET = """
body { font-family: Helvetica, Arial, sans-serif; margin: 2em auto; max-width: 900px; }
.slide-title { font-size: 1.3em; margin: 0.5em 0 1em; }
.nav-button, .nav-button-select { display: inline-block; padding: 4px 12px; border-radius: 12px; }
.nav-button { background: #eeeeee; }
.nav-button-select { background: #0073BB; color: #ffffff; }
.chart-title { font-weight: bold; }
.bar:hover { opacity: 0.6; }
"""


def _esc(text) -> str:
    """HTML-escape a string."""
    return _html.escape(str(text)) if text else ""


def _num(v: float) -> str:
    """Compact coordinate: 12.0 -> "12", 1/3 -> "0.333"."""
    return f"{v:.3f}".rstrip("0").rstrip(".") or "0"


# ── SVG Helpers ─────────────────────────────────────────────


def _svg_open(width: float, height: float, element_id: str = "chart_svg") -> str:
    """Open an SVG tag with viewBox for fluid scaling."""
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" id="{_esc(element_id)}"'
        f' width="100%" height="100%" viewBox="0 0 {_num(width)} {_num(height)}"'
        f' preserveAspectRatio="xMinYMin">'
    )


def _class_attr(css_class) -> str:
    return f' class="{_esc(css_class)}"' if css_class else ""


def _svg_rect(shape: RectShape) -> str:
    parts = [
        f'<rect x="{_num(shape.x)}" y="{_num(shape.y)}"'
        f' width="{_num(shape.width)}" height="{_num(shape.height)}"'
        f' fill="{_esc(shape.fill)}"'
    ]
    if shape.opacity != 1.0:
        parts.append(f' opacity="{_num(shape.opacity)}"')
    if shape.element_id:
        parts.append(f' id="{_esc(shape.element_id)}"')
    parts.append(_class_attr(shape.css_class))
    if shape.tooltip:
        parts.append(f"><title>{_esc(shape.tooltip)}</title></rect>")
    else:
        parts.append("/>")
    return "".join(parts)


def _svg_line(shape: LineShape) -> str:
    return (
        f'<line x1="{_num(shape.x1)}" y1="{_num(shape.y1)}"'
        f' x2="{_num(shape.x2)}" y2="{_num(shape.y2)}"'
        f' stroke="{_esc(shape.stroke)}" stroke-width="{_num(shape.stroke_width)}"'
        f"{_class_attr(shape.css_class)}/>"
    )


def _svg_text(shape: TextShape) -> str:
    parts = [
        f'<text x="{_num(shape.x)}" y="{_num(shape.y)}"'
        f' font-size="{_num(shape.font_size)}" fill="{_esc(shape.fill)}"'
        f' text-anchor="{shape.anchor}"'
    ]
    if shape.dy_em:
        parts.append(f' dy="{_num(shape.dy_em)}em"')
    if shape.bold:
        parts.append(' font-weight="bold"')
    parts.append(_class_attr(shape.css_class))
    parts.append(f">{_esc(shape.text)}</text>")
    return "".join(parts)


_WRITERS = {
    "rect": _svg_rect,
    "line": _svg_line,
    "text": _svg_text,
}


def svg_element(shape: Shape) -> str:
    return _WRITERS[shape.kind](shape)


# ── Public API ────────────────────────────────────────────────────


def render_svg(scene: Scene, element_id: str = "chart_svg") -> str:
    """Serialise a scene to a standalone <svg> element."""
    body = "".join(svg_element(e) for e in scene.elements)
    return f"{_svg_open(scene.width, scene.height, element_id)}{body}</svg>"


def _nav_html(active: int, slide_numbers: Sequence[int]) -> str:
    buttons = []
    for n in slide_numbers:
        cls = NAV_SELECTED if n == active else NAV_UNSELECTED
        buttons.append(f'<a class="{cls}" id="nav-button-{n}" href="#slide-{n}">{n}</a>')
    return f'<nav>{"".join(buttons)}</nav>'


def render_html(snapshots: Sequence[SlideSnapshot], title: str = "Time Use Before and After the Pandemic") -> str:
    """Standalone page with one section per captured slide."""
    numbers = [s.slide_number for s in snapshots]
    sections = []
    for snap in snapshots:
        n = snap.slide_number
        sections.append(
            f'<section id="slide-{n}">'
            f"{_nav_html(n, numbers)}"
            f'<h2 class="slide-title">{_esc(snap.caption_text)}</h2>'
            f'<div class="chart" id="chart_div-{n}">{render_svg(snap.scene, f"chart_svg-{n}")}</div>'
            "</section>"
        )
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{_esc(title)}</title><style>{STYLESHEET}</style></head>"
        f"<body>{''.join(sections)}</body></html>\n"
    )
