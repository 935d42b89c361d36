"""
src/chart/surface.py — In-memory page: chart container, drawing surface, tooltip

Stands in for the page elements the narrative draws into:

  NarrativePage      caption element + navigation affordances + chart container
  ChartContainer     holds at most one DrawingSurface and one TooltipElement
  DrawingSurface     a Scene plus pointer-event bindings for its bars
  TooltipElement     floating label shown while hovering a bar
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, Union

from src.narrative.errors import RenderStateError
from src.narrative.models import Scene

logger = logging.getLogger(__name__)

NAV_SELECTED = "nav-button-select"
NAV_UNSELECTED = "nav-button"


class BarHandler(Protocol):
    """Receives pointer events for one bar."""

    def enter(self, page_x: float, page_y: float) -> None: ...
    def move(self, page_x: float, page_y: float) -> None: ...
    def leave(self) -> None: ...


@dataclass
class TooltipElement:
    element_id: str = "tooltip"
    text: str = ""
    left: float = 0.0
    top: float = 0.0
    opacity: float = 0.0

    @property
    def visible(self) -> bool:
        return self.opacity > 0


@dataclass
class DrawingSurface:
    """One mounted chart: the scene and the handlers wired to its bars."""

    scene: Scene
    element_id: str = "chart_svg"
    handlers: dict[str, BarHandler] = field(default_factory=dict)

    def bind(self, bar_id: str, handler: BarHandler) -> None:
        self.handlers[bar_id] = handler

    def dispatch(self, event: str, bar_id: str, page_x: float = 0.0, page_y: float = 0.0) -> None:
        """Deliver a pointer event to the bar with `bar_id`."""
        handler = self.handlers.get(bar_id)
        if handler is None:
            raise RenderStateError(f"No bar {bar_id!r} on surface {self.element_id}")
        if event == "pointerenter":
            handler.enter(page_x, page_y)
        elif event == "pointermove":
            handler.move(page_x, page_y)
        elif event == "pointerleave":
            handler.leave()
        else:
            raise ValueError(f"Unsupported pointer event: {event}")


Child = Union[DrawingSurface, TooltipElement]


@dataclass
class ChartContainer:
    """The element charts are drawn into. Children are replaced, never stacked."""

    element_id: str = "chart_div"
    children: list[Child] = field(default_factory=list)

    @property
    def surface(self) -> Optional[DrawingSurface]:
        for child in self.children:
            if isinstance(child, DrawingSurface):
                return child
        return None

    @property
    def tooltip(self) -> Optional[TooltipElement]:
        for child in self.children:
            if isinstance(child, TooltipElement):
                return child
        return None

    def clear(self) -> None:
        """Remove the current surface and tooltip. Safe when empty."""
        if self.children:
            logger.debug("Clearing %d element(s) from #%s", len(self.children), self.element_id)
        self.children.clear()

    def mount(self, child: Child) -> Child:
        self.children.append(child)
        return child

    def require_surface(self) -> DrawingSurface:
        surface = self.surface
        if surface is None:
            raise RenderStateError(f"No drawing surface mounted in #{self.element_id}")
        return surface


@dataclass
class NarrativePage:
    """Caption, navigation affordances and the chart container."""

    nav_ids: tuple[str, ...] = ("nav-button-1", "nav-button-2", "nav-button-3")
    caption: str = ""
    nav_classes: dict[str, str] = field(default_factory=dict)
    container: ChartContainer = field(default_factory=ChartContainer)

    def __post_init__(self):
        for nav_id in self.nav_ids:
            self.nav_classes.setdefault(nav_id, NAV_UNSELECTED)

    def select_nav(self, selected: tuple[bool, ...]) -> None:
        for nav_id, is_selected in zip(self.nav_ids, selected):
            self.nav_classes[nav_id] = NAV_SELECTED if is_selected else NAV_UNSELECTED

    def selected_nav(self) -> list[str]:
        return [n for n in self.nav_ids if self.nav_classes[n] == NAV_SELECTED]
