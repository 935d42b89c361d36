"""
src/chart/renderer.py -- Grouped Bar Chart Renderer

Turns a dataset into a grouped horizontal bar chart scene and mounts it in
the chart container. Deterministic: the same rows always produce the same
scene.

Every render is a full rebuild: the previous surface and tooltip are
removed, the dataset is fetched, scales are computed, and a new surface
with hover bindings replaces the old one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.chart.formatting import format_si, format_thousands
from src.chart.scales import BandScale, LinearScale
from src.chart.surface import ChartContainer, DrawingSurface, TooltipElement
from src.data.dataset import DatasetLoader, aggregate
from src.narrative.errors import InconsistentDomainError, NarrativeError
from src.narrative.models import GroupedSeries, LineShape, RectShape, Scene, TextShape

logger = logging.getLogger(__name__)

# ── Geometry Constants (viewbox units) ────────────────────────────

VIEWBOX_WIDTH = 450
VIEWBOX_HEIGHT = 350

MARGIN_TOP = 60
MARGIN_RIGHT = 20
MARGIN_BOTTOM = 50
MARGIN_LEFT = 140

PLOT_WIDTH = VIEWBOX_WIDTH - MARGIN_LEFT - MARGIN_RIGHT  # 290
PLOT_HEIGHT = VIEWBOX_HEIGHT - MARGIN_TOP - MARGIN_BOTTOM  # 240

# Left edge of title, legend and footnotes, relative to the plot origin
TEXT_LEFT = -MARGIN_LEFT * 0.7

CATEGORY_PADDING = 0.2
SUBCATEGORY_PADDING = 0.05

X_AXIS_TICKS = 5
X_TICK_PRECISION = 3
GRID_TICKS = 6
X_TICK_PADDING = 6
Y_TICK_PADDING = 8

LEGEND_SWATCH = 10

# Font sizes (viewbox units)
FONT_TITLE = 12
FONT_TICK = 8
FONT_LABEL = 8
FONT_LEGEND = 7
FONT_SMALL = 6

BAR_HOVER_OPACITY = 0.6
TOOLTIP_OPACITY = 0.9
TOOLTIP_OFFSET_X = 10
TOOLTIP_OFFSET_Y = -10

GRID_COLOR = "#e0e0e0"
MUTED_COLOR = "#666666"

AXIS_LABEL = "Average Time Spent Per Day (hours)"
DATA_SOURCE = "Source: U.S. Bureau of Labor Statistics"
DATA_FOOTNOTE = "Time spent by employed persons age 15 and over on working days"
TOOLTIP_HINT = ("Move mouse over bars in", "chart to see details")


# ── Subgroup Styles ───────────────────────────────────────────────


@dataclass(frozen=True)
class SubgroupStyle:
    label: str
    color: str


SUBGROUP_STYLES: dict[str, SubgroupStyle] = {
    "2019": SubgroupStyle(label="Pre-Pandemic (2019)", color="#0073BB"),
    "2022": SubgroupStyle(label="Post-Pandemic (2022)", color="#8EBFFE"),
}


def validate_styles(series: GroupedSeries, styles: dict[str, SubgroupStyle]) -> None:
    """The series must carry exactly the subgroups of the style table."""
    unknown = [s for s in series.subgroup_names if s not in styles]
    if unknown:
        raise InconsistentDomainError(
            f"No label/color for subgroup(s) {unknown}; known: {sorted(styles)}"
        )
    missing = [s for s in styles if s not in series.subgroup_names]
    if missing:
        raise InconsistentDomainError(
            f"Dataset has no rows for subgroup(s) {missing}; found: {series.subgroup_names}"
        )


# ── Render Context ────────────────────────────────────────────────


@dataclass
class RenderContext:
    """Scales, colors, data and the tooltip of one render. Handed to hover handlers."""

    series: GroupedSeries
    x_scale: LinearScale
    y_scale: BandScale
    y_sub_scale: BandScale
    styles: dict[str, SubgroupStyle]
    tooltip: TooltipElement = field(default_factory=TooltipElement)

    def color_of(self, subgroup: str) -> str:
        return self.styles[subgroup].color

    def label_of(self, subgroup: str) -> str:
        return self.styles[subgroup].label

    def tooltip_text(self, group: str, subgroup: str) -> str:
        value = self.series.groups[self.y_scale.domain.index(group)].value_for(subgroup)
        return f"{group}\n{self.label_of(subgroup)}\n{format_thousands(value)} hours"


@dataclass
class RenderResult:
    dataset_ref: str
    title: str
    context: RenderContext
    surface: DrawingSurface

    @property
    def scene(self) -> Scene:
        return self.surface.scene


def build_context(
    series: GroupedSeries,
    styles: Optional[dict[str, SubgroupStyle]] = None,
) -> RenderContext:
    """Compute the three scales for a series."""
    styles = styles if styles is not None else SUBGROUP_STYLES
    validate_styles(series, styles)

    x_scale = LinearScale([0, series.max_value()], [0, PLOT_WIDTH]).nice()
    y_scale = BandScale(series.group_names, [0, PLOT_HEIGHT], padding=CATEGORY_PADDING)
    y_sub_scale = BandScale(
        series.subgroup_names, [0, y_scale.bandwidth], padding=SUBCATEGORY_PADDING
    )
    return RenderContext(
        series=series,
        x_scale=x_scale,
        y_scale=y_scale,
        y_sub_scale=y_sub_scale,
        styles=styles,
    )


# ── Hover ─────────────────────────────────────────────────────────


@dataclass
class BarHover:
    """Tooltip behaviour for one bar."""

    context: RenderContext
    bar: RectShape
    group: str
    subgroup: str

    def enter(self, page_x: float, page_y: float) -> None:
        self.context.tooltip.opacity = TOOLTIP_OPACITY
        self.bar.opacity = BAR_HOVER_OPACITY
        self.move(page_x, page_y)

    def move(self, page_x: float, page_y: float) -> None:
        tooltip = self.context.tooltip
        tooltip.text = self.context.tooltip_text(self.group, self.subgroup)
        tooltip.left = page_x + TOOLTIP_OFFSET_X
        tooltip.top = page_y + TOOLTIP_OFFSET_Y

    def leave(self) -> None:
        self.context.tooltip.opacity = 0.0
        self.bar.opacity = 1.0


# ── Scene Building ────────────────────────────────────────────────


def _draw_axes(scene: Scene, ctx: RenderContext) -> None:
    # Bottom value axis: labels only, no domain line
    for t in ctx.x_scale.ticks(X_AXIS_TICKS):
        scene.add(
            TextShape(
                x=MARGIN_LEFT + ctx.x_scale(t),
                y=MARGIN_TOP + PLOT_HEIGHT + X_TICK_PADDING,
                text=format_si(t, X_TICK_PRECISION, trim=True),
                font_size=FONT_TICK,
                anchor="middle",
                dy_em=0.71,
                css_class="tick",
            )
        )

    # Left category axis
    for group in ctx.y_scale.domain:
        scene.add(
            TextShape(
                x=MARGIN_LEFT - Y_TICK_PADDING,
                y=MARGIN_TOP + ctx.y_scale.center(group),
                text=group,
                font_size=FONT_TICK,
                anchor="end",
                dy_em=0.32,
                css_class="tick",
            )
        )


def _draw_grid(scene: Scene, ctx: RenderContext) -> None:
    for t in ctx.x_scale.ticks(GRID_TICKS):
        x = MARGIN_LEFT + ctx.x_scale(t)
        scene.add(
            LineShape(
                x1=x,
                y1=MARGIN_TOP,
                x2=x,
                y2=MARGIN_TOP + PLOT_HEIGHT,
                stroke=GRID_COLOR,
                css_class="grid",
            )
        )


def _draw_bars(scene: Scene, ctx: RenderContext) -> list[tuple[RectShape, str, str]]:
    drawn = []
    x0 = ctx.x_scale(0)
    for gi, group in enumerate(ctx.series.groups):
        band_top = MARGIN_TOP + ctx.y_scale(group.name)
        for si, sv in enumerate(group.values):
            bar = scene.add(
                RectShape(
                    x=MARGIN_LEFT + x0,
                    y=band_top + ctx.y_sub_scale(sv.name),
                    width=ctx.x_scale(sv.value) - x0,
                    height=ctx.y_sub_scale.bandwidth,
                    fill=ctx.color_of(sv.name),
                    css_class="bar",
                    element_id=f"bar-{gi}-{si}",
                    tooltip=ctx.tooltip_text(group.name, sv.name),
                )
            )
            drawn.append((bar, group.name, sv.name))
    return drawn


def _draw_captions(scene: Scene, title: str) -> None:
    left = MARGIN_LEFT + TEXT_LEFT
    title_y = MARGIN_TOP - MARGIN_TOP / 1.5

    scene.add(
        TextShape(
            x=left, y=title_y, text=title, font_size=FONT_TITLE, bold=True, css_class="chart-title"
        )
    )
    for i, line in enumerate(TOOLTIP_HINT):
        scene.add(
            TextShape(
                x=left + 300,
                y=title_y + 3 + 7 * i,
                text=line,
                font_size=FONT_SMALL,
                fill=MUTED_COLOR,
                css_class="tooltip-instructions",
            )
        )
    scene.add(
        TextShape(
            x=MARGIN_LEFT + PLOT_WIDTH / 2,
            y=MARGIN_TOP + PLOT_HEIGHT + MARGIN_BOTTOM / 2,
            text=AXIS_LABEL,
            font_size=FONT_LABEL,
            anchor="middle",
            css_class="chart-label",
        )
    )
    scene.add(
        TextShape(
            x=left,
            y=MARGIN_TOP + PLOT_HEIGHT + MARGIN_BOTTOM * 0.7,
            text=DATA_SOURCE,
            font_size=FONT_SMALL,
            fill=MUTED_COLOR,
            css_class="data-source",
        )
    )
    scene.add(
        TextShape(
            x=left,
            y=MARGIN_TOP + PLOT_HEIGHT + MARGIN_BOTTOM * 0.9,
            text=DATA_FOOTNOTE,
            font_size=FONT_SMALL,
            fill=MUTED_COLOR,
            css_class="data-footnote",
        )
    )


def _draw_legend(scene: Scene, ctx: RenderContext) -> None:
    left = MARGIN_LEFT + TEXT_LEFT
    for i, subgroup in enumerate(ctx.y_sub_scale.domain):
        x = left + 80 * i
        scene.add(
            RectShape(
                x=x,
                y=MARGIN_TOP - MARGIN_TOP / 2,
                width=LEGEND_SWATCH,
                height=LEGEND_SWATCH,
                fill=ctx.color_of(subgroup),
                css_class="legend-swatch",
            )
        )
        scene.add(
            TextShape(
                x=x + 15,
                y=MARGIN_TOP - MARGIN_TOP / 2.5,
                text=ctx.label_of(subgroup),
                font_size=FONT_LEGEND,
                css_class="legend",
            )
        )


def build_scene(ctx: RenderContext, title: str) -> tuple[Scene, list[tuple[RectShape, str, str]]]:
    """Lay out the full chart. Returns the scene and (bar, group, subgroup) triples."""
    scene = Scene(width=VIEWBOX_WIDTH, height=VIEWBOX_HEIGHT)
    _draw_axes(scene, ctx)
    _draw_grid(scene, ctx)
    bars = _draw_bars(scene, ctx)
    _draw_captions(scene, title)
    _draw_legend(scene, ctx)
    return scene, bars


# ── Public API ────────────────────────────────────────────────────


class ChartRenderer:
    """Draws one grouped bar chart into a ChartContainer per render call."""

    def __init__(
        self,
        container: ChartContainer,
        loader: DatasetLoader,
        styles: Optional[dict[str, SubgroupStyle]] = None,
    ):
        self.container = container
        self.loader = loader
        self.styles = styles if styles is not None else SUBGROUP_STYLES

    async def render(self, dataset_ref: str, title: str) -> RenderResult:
        """Clear the container, load `dataset_ref`, and draw a fresh chart.

        Raises:
            DataLoadError: fetch/parse failed or the dataset is empty. The
                container is left empty.
            InconsistentDomainError: subgroup keys disagree or have no style.
        """
        self.container.clear()
        try:
            rows = await self.loader.load(dataset_ref)
            return self.draw(aggregate(rows), dataset_ref, title)
        except NarrativeError as exc:
            logger.error("Render of %s failed: %s", dataset_ref, exc)
            raise

    def draw(self, series: GroupedSeries, dataset_ref: str, title: str) -> RenderResult:
        """Synchronous drawing pass for an already aggregated series."""
        self.container.clear()
        ctx = build_context(series, self.styles)
        scene, bars = build_scene(ctx, title)

        surface = DrawingSurface(scene=scene)
        for bar, group, subgroup in bars:
            surface.bind(bar.element_id, BarHover(ctx, bar, group, subgroup))
        self.container.mount(surface)
        self.container.mount(ctx.tooltip)

        logger.info(
            "Rendered %r: %d groups x %d subgroups, x domain %s",
            title,
            len(series.groups),
            len(series.subgroup_names),
            ctx.x_scale.domain,
        )
        return RenderResult(dataset_ref=dataset_ref, title=title, context=ctx, surface=surface)
