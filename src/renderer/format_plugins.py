"""
src/renderer/format_plugins.py — Output format exporters

Every exporter takes captured slides and writes one or more files:

  svg   one slide-<n>.svg per slide
  html  a single page with all slides
  pptx  a deck with one slide per narrative slide
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from src.renderer import pptx_renderer, svg_renderer
from src.services.slide_controller import SlideSnapshot

logger = logging.getLogger(__name__)


class SceneExporter(Protocol):
    """Plugin interface for output formats."""

    def can_export(self, target_format: str) -> bool: ...
    def export(self, snapshots: Sequence[SlideSnapshot], output_dir: Path, title: str) -> list[Path]: ...


class SVGExporter:
    """One standalone .svg per slide."""

    def can_export(self, target_format: str) -> bool:
        return target_format.lower() == "svg"

    def export(self, snapshots: Sequence[SlideSnapshot], output_dir: Path, title: str) -> list[Path]:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for snap in snapshots:
            path = output_dir / f"slide-{snap.slide_number}.svg"
            path.write_text(svg_renderer.render_svg(snap.scene), encoding="utf-8")
            paths.append(path)
        logger.info("Wrote %d SVG file(s) to %s", len(paths), output_dir)
        return paths


class HTMLExporter:
    """A single page holding every slide."""

    def can_export(self, target_format: str) -> bool:
        return target_format.lower() == "html"

    def export(self, snapshots: Sequence[SlideSnapshot], output_dir: Path, title: str) -> list[Path]:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / "narrative.html"
        path.write_text(svg_renderer.render_html(snapshots, title=title), encoding="utf-8")
        logger.info("Wrote %s", path)
        return [path]


class PPTXExporter:
    """A PowerPoint deck via python-pptx."""

    def can_export(self, target_format: str) -> bool:
        return target_format.lower() == "pptx"

    def export(self, snapshots: Sequence[SlideSnapshot], output_dir: Path, title: str) -> list[Path]:
        return [pptx_renderer.render(snapshots, output_dir, title=title)]


FORMATS = ("svg", "html", "pptx")


def get_exporter(target_format: str) -> SceneExporter:
    """Get the exporter for a target format."""
    exporters: list[SceneExporter] = [SVGExporter(), HTMLExporter(), PPTXExporter()]
    for e in exporters:
        if e.can_export(target_format):
            return e
    raise ValueError(f"No exporter available for format: {target_format}")
