"""
src/narrative/models.py — Pydantic data models for the time-use narrative

Everything flows through these models: the dataset loader produces
DataPoints and a GroupedSeries, the chart renderer turns them into a Scene,
the output adapters (SVG, PPTX) consume the Scene.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Dataset ────────────────────────────────────────────────────────


class DataPoint(BaseModel):
    """One row of a dataset: an activity, a year, and hours per day."""

    group: str  # y-axis category, e.g. "Personal Care"
    subgroup: str  # comparison key, e.g. "2019"
    value: float  # hours


class SubgroupValue(BaseModel):
    name: str
    value: float


class GroupSeries(BaseModel):
    """All subgroup totals for one group, in subgroup domain order."""

    name: str
    values: list[SubgroupValue] = Field(default_factory=list)

    def value_for(self, subgroup: str) -> float:
        for sv in self.values:
            if sv.name == subgroup:
                return sv.value
        raise KeyError(subgroup)


class GroupedSeries(BaseModel):
    """Rows aggregated by (group, subgroup), first-occurrence ordered."""

    groups: list[GroupSeries] = Field(default_factory=list)

    @property
    def group_names(self) -> list[str]:
        return [g.name for g in self.groups]

    @property
    def subgroup_names(self) -> list[str]:
        if not self.groups:
            return []
        return [sv.name for sv in self.groups[0].values]

    def max_value(self) -> float:
        return max((sv.value for g in self.groups for sv in g.values), default=0.0)


# ── Slides ─────────────────────────────────────────────────────────


class AnnotationSpec(BaseModel):
    """A fixed callout in viewbox coordinates: anchor (x, y), note offset (dx, dy)."""

    model_config = ConfigDict(frozen=True)

    title: str
    label: str
    x: float
    y: float
    dx: float
    dy: float
    color: str = "red"


class SlideSpec(BaseModel):
    """Everything needed to show one slide. Defined once, never mutated."""

    model_config = ConfigDict(frozen=True)

    slide_number: int
    dataset_ref: str  # "scene1.csv"
    chart_title: str
    caption_text: str
    annotations: tuple[AnnotationSpec, ...] = ()


class SlideState(BaseModel):
    """Explicit controller state: which slide is showing and what is selected."""

    model_config = ConfigDict(frozen=True)

    slide_number: int
    caption_text: str
    selected: tuple[bool, ...]


# ── Scene ──────────────────────────────────────────────────────────


TextAnchor = Literal["start", "middle", "end"]


class RectShape(BaseModel):
    kind: Literal["rect"] = "rect"
    x: float
    y: float
    width: float
    height: float
    fill: str
    opacity: float = 1.0
    css_class: Optional[str] = None
    element_id: Optional[str] = None  # set on bars so pointer events can find them
    tooltip: Optional[str] = None


class LineShape(BaseModel):
    kind: Literal["line"] = "line"
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "#cccccc"
    stroke_width: float = 1.0
    css_class: Optional[str] = None


class TextShape(BaseModel):
    kind: Literal["text"] = "text"
    x: float
    y: float
    text: str
    font_size: float = 8.0
    fill: str = "#000000"
    anchor: TextAnchor = "start"
    bold: bool = False
    dy_em: float = 0.0  # baseline shift, in ems
    css_class: Optional[str] = None


Shape = Union[RectShape, LineShape, TextShape]


class Scene(BaseModel):
    """Ordered shapes in viewbox coordinates; later shapes paint over earlier ones."""

    width: float
    height: float
    elements: list[Shape] = Field(default_factory=list)

    def add(self, shape: Shape) -> Shape:
        self.elements.append(shape)
        return shape

    def bars(self) -> list[RectShape]:
        return [e for e in self.elements if isinstance(e, RectShape) and e.element_id]

    def texts(self) -> list[str]:
        return [e.text for e in self.elements if isinstance(e, TextShape)]

    def by_class(self, css_class: str) -> list[Shape]:
        return [e for e in self.elements if e.css_class == css_class]
