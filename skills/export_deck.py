"""
skills/export_deck.py — Export the whole narrative to svg, html or pptx.

Wraps src.renderer.format_plugins.get_exporter.
"""

import asyncio
from pathlib import Path
from typing import Optional

from src.narrative.config import NarrativeConfig
from src.renderer.format_plugins import get_exporter
from src.services.slide_controller import SlideController


def export(
    output_dir: str,
    target_format: str = "pptx",
    data_url: Optional[str] = None,
    title: str = "Time Use Narrative",
) -> list[Path]:
    """Render every slide and write it in the requested format.

    Args:
        output_dir: Directory to write the output file(s).
        target_format: "svg", "html" or "pptx".
        data_url: Base URL or directory holding the datasets.
        title: Deck / page title.

    Returns:
        Paths of the written files.
    """
    exporter = get_exporter(target_format)
    config = NarrativeConfig.from_env()
    if data_url:
        config.data_url = data_url
    controller = SlideController.from_config(config)
    snapshots = asyncio.run(controller.collect())
    return exporter.export(snapshots, Path(output_dir), title)
