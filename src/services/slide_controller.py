"""
src/services/slide_controller.py — Slide navigation state machine

Three states, one per slide, no implicit transitions:

  go_to_slide(n) → select nav n → set caption → render chart → annotate

Navigation requests are serialised through an asyncio.Lock: a request that
arrives while a render is in flight waits, then runs in arrival order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from src.chart.annotations import AnnotationOverlay
from src.chart.renderer import ChartRenderer
from src.chart.surface import NarrativePage
from src.data.dataset import DatasetLoader
from src.narrative.config import NarrativeConfig
from src.narrative.errors import RenderStateError, UnrecognizedSlideError
from src.narrative.models import Scene, SlideState
from src.narrative.slides import SLIDE_NUMBERS, get_slide

logger = logging.getLogger(__name__)


def enter_slide(slide_number: int) -> SlideState:
    """Pure transition: the state that results from entering `slide_number`."""
    spec = get_slide(slide_number)
    return SlideState(
        slide_number=slide_number,
        caption_text=spec.caption_text,
        selected=tuple(n == slide_number for n in SLIDE_NUMBERS),
    )


@dataclass
class SlideSnapshot:
    """A rendered slide captured for export."""

    slide_number: int
    chart_title: str
    caption_text: str
    scene: Scene


class SlideController:
    """
    Drives the page from one slide to another.

    Usage:
        controller = SlideController.from_config(NarrativeConfig())
        await controller.start()          # slide 1
        await controller.go_to_slide(3)
    """

    def __init__(
        self,
        page: NarrativePage,
        renderer: ChartRenderer,
        overlay: AnnotationOverlay,
    ):
        self.page = page
        self.renderer = renderer
        self.overlay = overlay
        self.state: Optional[SlideState] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls, config: NarrativeConfig, page: Optional[NarrativePage] = None
    ) -> "SlideController":
        page = page or NarrativePage()
        loader = DatasetLoader(config.data_url, timeout=config.fetch_timeout)
        return cls(
            page=page,
            renderer=ChartRenderer(page.container, loader),
            overlay=AnnotationOverlay(page.container),
        )

    async def start(self) -> SlideState:
        """Enter the first slide."""
        return await self.go_to_slide(SLIDE_NUMBERS[0])

    async def go_to_slide(self, slide_number: int) -> SlideState:
        """Transition to `slide_number` and redraw.

        Raises:
            UnrecognizedSlideError: state and page are left untouched.
            DataLoadError: the slide is selected but its chart area is empty.
            InconsistentDomainError: as DataLoadError.
        """
        try:
            new_state = enter_slide(slide_number)
        except UnrecognizedSlideError:
            logger.error("No slide with number %r; staying on %s", slide_number, self.current)
            raise

        async with self._lock:
            spec = get_slide(slide_number)
            self.page.select_nav(new_state.selected)
            self.page.caption = new_state.caption_text
            self.state = new_state

            await self.renderer.render(spec.dataset_ref, spec.chart_title)
            self.overlay.apply_annotations(slide_number)
            logger.info("Showing slide %d: %s", slide_number, spec.chart_title)
        return new_state

    @property
    def current(self) -> Optional[int]:
        return self.state.slide_number if self.state else None

    def snapshot(self) -> SlideSnapshot:
        """Copy of what is currently on the page."""
        if self.state is None:
            raise RenderStateError("No slide has been shown yet")
        surface = self.page.container.require_surface()
        spec = get_slide(self.state.slide_number)
        return SlideSnapshot(
            slide_number=self.state.slide_number,
            chart_title=spec.chart_title,
            caption_text=self.state.caption_text,
            scene=surface.scene.model_copy(deep=True),
        )

    async def collect(self, slide_numbers: Iterable[int] = SLIDE_NUMBERS) -> list[SlideSnapshot]:
        """Visit each slide in turn and capture it."""
        snapshots = []
        for n in slide_numbers:
            await self.go_to_slide(n)
            snapshots.append(self.snapshot())
        return snapshots
