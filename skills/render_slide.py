"""
skills/render_slide.py — Render one narrative slide to SVG text.

Wraps src.services.slide_controller.SlideController and
src.renderer.svg_renderer.render_svg.
"""

import asyncio
from typing import Optional

from src.narrative.config import NarrativeConfig
from src.renderer.svg_renderer import render_svg
from src.services.slide_controller import SlideController


async def _render(slide_number: int, config: NarrativeConfig) -> str:
    controller = SlideController.from_config(config)
    await controller.go_to_slide(slide_number)
    return render_svg(controller.snapshot().scene)


def render_slide(slide_number: int, data_url: Optional[str] = None) -> str:
    """Render a slide (chart + annotations) and return it as an <svg> string.

    Args:
        slide_number: 1, 2 or 3.
        data_url: Base URL or directory holding scene1.csv..scene3.csv.
            Defaults to NARRATIVE_DATA_URL or the published data.
    """
    config = NarrativeConfig.from_env()
    if data_url:
        config.data_url = data_url
    return asyncio.run(_render(slide_number, config))
