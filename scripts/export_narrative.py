#!/usr/bin/env python3
"""
scripts/export_narrative.py — Render the time-use narrative to files.

Walks the slides in order (chart, caption, annotations) and writes them as
SVG, a single HTML page, or a PowerPoint deck.

Usage:
    python scripts/export_narrative.py --format html
    python scripts/export_narrative.py --format pptx --data-url ./data/
    python scripts/export_narrative.py --format svg --slide 2

Options:
    --data-url URL_OR_DIR  Where scene1.csv..scene3.csv live
                           (default: $NARRATIVE_DATA_URL or the published data)
    --output-dir DIR       Where to write output files (default: ./output)
    --format FORMAT        "svg" | "html" | "pptx" (default: html)
    --slide N              Only this slide (default: all three)
    --title TITLE          Page / deck title
    --verbose              Show debug logging
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def main():
    from src.narrative.config import NarrativeConfig
    from src.narrative.errors import NarrativeError
    from src.narrative.slides import SLIDE_NUMBERS
    from src.renderer.format_plugins import FORMATS, get_exporter
    from src.services.slide_controller import SlideController

    ap = argparse.ArgumentParser(
        description="Render the time-use narrative slides to files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    ap.add_argument("--data-url", default=None, help="Base URL or directory of the datasets")
    ap.add_argument("--output-dir", default=None, help="Output directory (default: ./output)")
    ap.add_argument("--format", default="html", choices=FORMATS, help="Output format (default: html)")
    ap.add_argument("--slide", type=int, default=None, help="Render only this slide number")
    ap.add_argument("--title", default="Time Use Narrative", help="Page / deck title")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = NarrativeConfig.from_env()
    if args.data_url:
        config.data_url = args.data_url
    if args.output_dir:
        config.output_dir = args.output_dir

    slides = SLIDE_NUMBERS if args.slide is None else (args.slide,)

    print("\nTime-Use Narrative Export")
    print(f"{'─' * 50}")
    print(f"Data    : {config.data_url}")
    print(f"Output  : {config.output_dir}")
    print(f"Format  : {args.format}")
    print(f"Slides  : {', '.join(str(s) for s in slides)}")
    print(f"{'─' * 50}\n")

    controller = SlideController.from_config(config)
    try:
        snapshots = asyncio.run(controller.collect(slides))
    except NarrativeError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    paths = get_exporter(args.format).export(snapshots, Path(config.output_dir), args.title)
    for path in paths:
        print(f"Output: {path}")


if __name__ == "__main__":
    main()
