"""
tests/test_renderer.py — Tests for output adapters: SVG, HTML, PPTX, exporters

Covers:
  - render_svg: viewbox, element mapping, escaping, bar <title> tooltips
  - render_html: captions and navigation per slide
  - PPTX renderer: slide count, caption heading, chart shapes, speaker notes
  - Color utilities
  - Format plugins: exporter registry, files written
  - Skills wrappers
"""

import asyncio

import pytest
from pptx import Presentation as PptxPresentation
from pptx.dml.color import RGBColor

from skills.export_deck import export
from skills.render_slide import render_slide
from src.narrative.config import NarrativeConfig
from src.narrative.models import LineShape, RectShape, Scene, TextShape
from src.renderer.format_plugins import (
    HTMLExporter,
    PPTXExporter,
    SVGExporter,
    get_exporter,
)
from src.renderer.pptx_renderer import (
    SLIDE_HEIGHT,
    SLIDE_WIDTH,
    ViewboxMapper,
    render,
    render_scene,
    resolve_color,
)
from src.renderer.svg_renderer import render_html, render_svg, svg_element
from src.services.slide_controller import SlideController


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def snapshots(data_dir):
    controller = SlideController.from_config(NarrativeConfig(data_url=str(data_dir)))
    return asyncio.run(controller.collect())


@pytest.fixture
def blank_slide():
    """Return a blank slide from a fresh presentation."""
    prs = PptxPresentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT
    return prs.slides.add_slide(prs.slide_layouts[6])


def _slide_texts(slide):
    return [s.text_frame.text for s in slide.shapes if s.has_text_frame]


# ── SVG ──────────────────────────────────────────────────────────


class TestSvgElement:
    def test_rect(self):
        out = svg_element(RectShape(x=1, y=2.5, width=10, height=4, fill="#0073BB"))
        assert out == '<rect x="1" y="2.5" width="10" height="4" fill="#0073BB"/>'

    def test_rect_with_tooltip(self):
        out = svg_element(
            RectShape(x=0, y=0, width=1, height=1, fill="red", element_id="bar-0-0", tooltip="A & B")
        )
        assert 'id="bar-0-0"' in out
        assert "<title>A &amp; B</title></rect>" in out

    def test_line(self):
        out = svg_element(LineShape(x1=0, y1=0, x2=0, y2=240, css_class="grid"))
        assert out.startswith('<line x1="0" y1="0" x2="0" y2="240"')
        assert 'class="grid"' in out

    def test_text_escaped(self):
        out = svg_element(TextShape(x=5, y=5, text="<Men & Women>", anchor="end", bold=True))
        assert "&lt;Men &amp; Women&gt;" in out
        assert 'text-anchor="end"' in out
        assert 'font-weight="bold"' in out


class TestRenderSvg:
    def test_viewbox(self, snapshots):
        svg = render_svg(snapshots[0].scene)
        assert svg.startswith("<svg")
        assert 'viewBox="0 0 450 350"' in svg
        assert 'preserveAspectRatio="xMinYMin"' in svg
        assert svg.endswith("</svg>")

    def test_bars_carry_tooltips(self, snapshots):
        svg = render_svg(snapshots[0].scene)
        assert "<title>Personal Care\nPre-Pandemic (2019)\n9.5 hours</title>" in svg

    def test_annotations_present(self, snapshots):
        svg = render_svg(snapshots[1].scene)
        assert "Women are working 3.07% more" in svg
        assert 'class="annotation-title"' in svg

    def test_empty_scene(self):
        assert render_svg(Scene(width=450, height=350)).count("<") == 2


class TestRenderHtml:
    def test_sections_and_nav(self, snapshots):
        page = render_html(snapshots)
        assert page.startswith("<!DOCTYPE html>")
        for snap in snapshots:
            assert f'id="slide-{snap.slide_number}"' in page
        assert page.count('class="nav-button-select"') == 3
        assert page.count('class="nav-button"') == 6

    def test_captions_escaped(self, snapshots):
        page = render_html(snapshots)
        assert "Men are working less and women are working more." in page
        assert "personal care and leisure -- and less time" in page


# ── PPTX ─────────────────────────────────────────────────────────


class TestResolveColor:
    def test_hex_with_hash(self):
        assert resolve_color("#0073BB") == RGBColor(0x00, 0x73, 0xBB)

    def test_hex_without_hash(self):
        assert resolve_color("8EBFFE") == RGBColor(0x8E, 0xBF, 0xFE)

    def test_named_red(self):
        assert resolve_color("red") == RGBColor(0xFF, 0x00, 0x00)


class TestViewboxMapper:
    def test_scene_fits_chart_area(self):
        vm = ViewboxMapper(Scene(width=450, height=350))
        assert vm.y(350) <= 7.5
        assert vm.x(450) <= 13.333

    def test_points_scale_with_viewbox(self):
        vm = ViewboxMapper(Scene(width=450, height=350))
        assert vm.points(10) == pytest.approx(10 * vm.scale * 72)


class TestRenderScene:
    def test_adds_shape_per_element(self, blank_slide, snapshots):
        scene = snapshots[0].scene
        count = render_scene(blank_slide, scene)
        assert count == len(blank_slide.shapes)
        assert count == len(scene.elements)

    def test_zero_width_rect_skipped(self, blank_slide):
        scene = Scene(width=450, height=350)
        scene.add(RectShape(x=0, y=0, width=0, height=10, fill="#000000"))
        assert render_scene(blank_slide, scene) == 0


class TestRender:
    def test_creates_deck(self, snapshots, tmp_path):
        path = render(snapshots, tmp_path / "out", title="Time / Use")
        assert path.exists()
        assert path.name == "Time _ Use.pptx"
        prs = PptxPresentation(str(path))
        assert len(prs.slides) == 3

    def test_caption_heading_and_chart_text(self, snapshots, tmp_path):
        prs = PptxPresentation(str(render(snapshots, tmp_path)))
        texts = _slide_texts(prs.slides[1])
        assert texts[0] == snapshots[1].caption_text
        assert "Time Worked by Gender" in texts
        assert "Men" in texts

    def test_tooltips_in_notes(self, snapshots, tmp_path):
        prs = PptxPresentation(str(render(snapshots, tmp_path)))
        notes = prs.slides[0].notes_slide.notes_text_frame.text
        assert "Pre-Pandemic (2019)" in notes
        assert "9.62 hours" in notes


# ── Format Plugins ───────────────────────────────────────────────


class TestFormatPlugins:
    def test_registry(self):
        assert isinstance(get_exporter("svg"), SVGExporter)
        assert isinstance(get_exporter("HTML"), HTMLExporter)
        assert isinstance(get_exporter("pptx"), PPTXExporter)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="gif"):
            get_exporter("gif")

    def test_svg_exporter_writes_one_file_per_slide(self, snapshots, tmp_path):
        paths = SVGExporter().export(snapshots, tmp_path / "svg", "T")
        assert [p.name for p in paths] == ["slide-1.svg", "slide-2.svg", "slide-3.svg"]
        assert all(p.read_text(encoding="utf-8").startswith("<svg") for p in paths)

    def test_html_exporter(self, snapshots, tmp_path):
        (path,) = HTMLExporter().export(snapshots, tmp_path, "My Story")
        assert "<title>My Story</title>" in path.read_text(encoding="utf-8")


# ── Skills ───────────────────────────────────────────────────────


class TestSkills:
    def test_render_slide(self, data_dir):
        svg = render_slide(3, data_url=str(data_dir))
        assert "Time Spent by Leisure Activity" in svg
        assert "Relaxing and Thinking" in svg

    def test_export_deck(self, data_dir, tmp_path):
        paths = export(str(tmp_path / "deck"), "pptx", data_url=str(data_dir))
        assert len(paths) == 1
        assert paths[0].suffix == ".pptx"
