"""
tests/test_chart_renderer.py — Tests for the grouped bar chart renderer

Covers:
  - render(): container replacement, failure leaves container empty
  - Scales: worked two-group example, nice upper bound
  - Scene: axes, gridlines, bars, captions, legend
  - Hover: tooltip text, opacity, position, leave
  - Subgroup style validation
"""

import asyncio

import pytest

from src.chart.renderer import (
    AXIS_LABEL,
    DATA_FOOTNOTE,
    DATA_SOURCE,
    MARGIN_LEFT,
    MARGIN_TOP,
    PLOT_HEIGHT,
    PLOT_WIDTH,
    SUBGROUP_STYLES,
    TOOLTIP_HINT,
    ChartRenderer,
    SubgroupStyle,
)
from src.chart.surface import ChartContainer, DrawingSurface, TooltipElement
from src.data.dataset import DatasetLoader
from src.narrative.errors import DataLoadError, InconsistentDomainError, RenderStateError

EXAMPLE_CSV = """group,subgroup,value
A,2019,10
A,2022,15
B,2019,5
B,2022,5
"""


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "example.csv").write_text(EXAMPLE_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def container():
    return ChartContainer()


@pytest.fixture
def renderer(container, data_dir):
    return ChartRenderer(container, DatasetLoader(str(data_dir)))


@pytest.fixture
def result(renderer):
    return asyncio.run(renderer.render("example.csv", "Test"))


def _bar(result, group, subgroup):
    gi = result.context.series.group_names.index(group)
    si = result.context.series.subgroup_names.index(subgroup)
    return next(b for b in result.scene.bars() if b.element_id == f"bar-{gi}-{si}")


# ── render() ─────────────────────────────────────────────────────


class TestRender:
    def test_mounts_one_surface_and_tooltip(self, container, result):
        assert len(container.children) == 2
        assert container.surface is result.surface
        assert container.tooltip.opacity == 0

    def test_render_twice_leaves_one_surface(self, container, renderer):
        asyncio.run(renderer.render("example.csv", "First"))
        asyncio.run(renderer.render("example.csv", "Second"))
        surfaces = [c for c in container.children if isinstance(c, DrawingSurface)]
        tooltips = [c for c in container.children if isinstance(c, TooltipElement)]
        assert len(surfaces) == 1
        assert len(tooltips) == 1
        assert "Second" in surfaces[0].scene.texts()
        assert "First" not in surfaces[0].scene.texts()

    def test_missing_dataset_raises_and_clears(self, container, renderer, result):
        with pytest.raises(DataLoadError):
            asyncio.run(renderer.render("missing.csv", "Nope"))
        assert container.children == []

    def test_stale_surface_hover_leaves_container_empty(self, container, renderer, result):
        with pytest.raises(DataLoadError):
            asyncio.run(renderer.render("missing.csv", "Nope"))
        result.surface.dispatch("pointerenter", "bar-0-0", 5, 5)
        result.surface.dispatch("pointermove", "bar-0-0", 6, 6)
        assert container.children == []
        assert result.context.tooltip.visible

    def test_empty_dataset_raises(self, container, renderer, data_dir):
        (data_dir / "empty.csv").write_text("group,subgroup,value\n", encoding="utf-8")
        with pytest.raises(DataLoadError):
            asyncio.run(renderer.render("empty.csv", "Empty"))
        assert container.surface is None

    def test_unstyled_subgroup_raises(self, renderer, data_dir):
        (data_dir / "odd.csv").write_text(
            "group,subgroup,value\nA,2019,1\nA,2020,2\n", encoding="utf-8"
        )
        with pytest.raises(InconsistentDomainError, match="2020"):
            asyncio.run(renderer.render("odd.csv", "Odd"))

    def test_single_subgroup_raises(self, container, renderer, data_dir):
        (data_dir / "half.csv").write_text(
            "group,subgroup,value\nA,2019,1\nB,2019,2\n", encoding="utf-8"
        )
        with pytest.raises(InconsistentDomainError, match="2022"):
            asyncio.run(renderer.render("half.csv", "Half"))
        assert container.children == []

    def test_mismatched_subgroups_raise(self, renderer, data_dir):
        (data_dir / "ragged.csv").write_text(
            "group,subgroup,value\nA,2019,1\nA,2022,2\nB,2019,3\n", encoding="utf-8"
        )
        with pytest.raises(InconsistentDomainError):
            asyncio.run(renderer.render("ragged.csv", "Ragged"))

    def test_custom_styles(self, container, data_dir):
        (data_dir / "q.csv").write_text(
            "group,subgroup,value\nA,Q1,1\nA,Q2,2\n", encoding="utf-8"
        )
        styles = {"Q1": SubgroupStyle("First", "#111111"), "Q2": SubgroupStyle("Second", "#222222")}
        r = ChartRenderer(container, DatasetLoader(str(data_dir)), styles=styles)
        res = asyncio.run(r.render("q.csv", "Quarters"))
        assert {b.fill for b in res.scene.bars()} == {"#111111", "#222222"}


# ── Scales ───────────────────────────────────────────────────────


class TestScales:
    def test_category_bands(self, result):
        assert result.context.y_scale.domain == ["A", "B"]
        assert result.context.y_sub_scale.domain == ["2019", "2022"]

    def test_value_domain_covers_max(self, result):
        lo, hi = result.context.x_scale.domain
        assert lo == 0
        assert hi >= 15
        assert result.context.x_scale.range == (0, PLOT_WIDTH)

    def test_bar_widths_proportional_to_values(self, result):
        x = result.context.x_scale
        for group, subgroup, value in [("A", "2019", 10), ("A", "2022", 15), ("B", "2019", 5)]:
            assert _bar(result, group, subgroup).width == pytest.approx(x(value))
        a19, a22 = _bar(result, "A", "2019"), _bar(result, "A", "2022")
        assert a22.width / a19.width == pytest.approx(1.5)

    def test_bars_sit_in_their_band(self, result):
        y = result.context.y_scale
        for group in ("A", "B"):
            top = MARGIN_TOP + y(group)
            for subgroup in ("2019", "2022"):
                bar = _bar(result, group, subgroup)
                assert bar.y >= top
                assert bar.y + bar.height <= top + y.bandwidth + 1e-9

    def test_bars_start_at_zero(self, result):
        assert all(b.x == MARGIN_LEFT for b in result.scene.bars())

    def test_each_group_draws_same_subgroups(self, result):
        by_group = {}
        for bar in result.scene.bars():
            gi, si = bar.element_id.split("-")[1:]
            by_group.setdefault(gi, set()).add(si)
        assert len(set(map(frozenset, by_group.values()))) == 1

    def test_colors_follow_subgroup(self, result):
        assert _bar(result, "A", "2019").fill == SUBGROUP_STYLES["2019"].color
        assert _bar(result, "B", "2022").fill == SUBGROUP_STYLES["2022"].color


# ── Scene ────────────────────────────────────────────────────────


class TestScene:
    def test_four_bars(self, result):
        assert len(result.scene.bars()) == 4

    def test_axis_tick_labels(self, result):
        ticks = [e.text for e in result.scene.by_class("tick")]
        assert ticks == ["0", "5", "10", "15", "A", "B"]

    def test_gridlines_behind_bars(self, result):
        elements = result.scene.elements
        last_grid = max(i for i, e in enumerate(elements) if e.css_class == "grid")
        first_bar = min(i for i, e in enumerate(elements) if e.css_class == "bar")
        assert last_grid < first_bar

    def test_gridlines_span_plot(self, result):
        grid = result.scene.by_class("grid")
        assert len(grid) == 9  # 0, 2, ..., 16
        assert all(g.y1 == MARGIN_TOP and g.y2 == MARGIN_TOP + PLOT_HEIGHT for g in grid)

    def test_captions(self, result):
        texts = result.scene.texts()
        for expected in ("Test", AXIS_LABEL, DATA_SOURCE, DATA_FOOTNOTE, *TOOLTIP_HINT):
            assert expected in texts

    def test_title_position(self, result):
        (title,) = result.scene.by_class("chart-title")
        assert (title.x, title.y) == pytest.approx((42, 20))
        assert title.bold

    def test_legend(self, result):
        labels = [e.text for e in result.scene.by_class("legend")]
        swatches = [e.fill for e in result.scene.by_class("legend-swatch")]
        assert labels == ["Pre-Pandemic (2019)", "Post-Pandemic (2022)"]
        assert swatches == ["#0073BB", "#8EBFFE"]

    def test_viewbox(self, result):
        assert (result.scene.width, result.scene.height) == (450, 350)


# ── Hover ────────────────────────────────────────────────────────


class TestHover:
    def test_enter_shows_tooltip(self, container, result):
        bar = _bar(result, "A", "2019")
        result.surface.dispatch("pointerenter", bar.element_id, 100, 200)
        tip = container.tooltip
        assert tip.text == "A\nPre-Pandemic (2019)\n10 hours"
        assert tip.opacity == pytest.approx(0.9)
        assert bar.opacity == pytest.approx(0.6)
        assert (tip.left, tip.top) == (110, 190)

    def test_move_follows_pointer(self, container, result):
        bar = _bar(result, "B", "2022")
        result.surface.dispatch("pointerenter", bar.element_id, 0, 0)
        result.surface.dispatch("pointermove", bar.element_id, 50, 60)
        assert (container.tooltip.left, container.tooltip.top) == (60, 50)
        assert "Post-Pandemic (2022)" in container.tooltip.text

    def test_leave_restores(self, container, result):
        bar = _bar(result, "A", "2022")
        result.surface.dispatch("pointerenter", bar.element_id, 0, 0)
        result.surface.dispatch("pointerleave", bar.element_id)
        assert container.tooltip.opacity == 0
        assert not container.tooltip.visible
        assert bar.opacity == 1

    def test_static_tooltip_matches_hover(self, container, result):
        bar = _bar(result, "A", "2022")
        result.surface.dispatch("pointerenter", bar.element_id, 0, 0)
        assert bar.tooltip == container.tooltip.text

    def test_thousands_separator(self, container, data_dir):
        (data_dir / "big.csv").write_text(
            "group,subgroup,value\nA,2019,1234.5\nA,2022,2000\n", encoding="utf-8"
        )
        r = ChartRenderer(container, DatasetLoader(str(data_dir)))
        res = asyncio.run(r.render("big.csv", "Big"))
        res.surface.dispatch("pointerenter", "bar-0-0", 0, 0)
        assert container.tooltip.text.endswith("1,234.5 hours")

    def test_unknown_bar(self, result):
        with pytest.raises(RenderStateError):
            result.surface.dispatch("pointerenter", "bar-9-9", 0, 0)

    def test_unknown_event(self, result):
        with pytest.raises(ValueError):
            result.surface.dispatch("click", "bar-0-0", 0, 0)
