"""
src/narrative/slides.py — The fixed three-slide storyline

Dataset, chart title, caption and the two callouts for every slide.
Annotation coordinates are in the 450x350 chart viewbox.
"""

from __future__ import annotations

from .errors import UnrecognizedSlideError
from .models import AnnotationSpec, SlideSpec

SLIDES: dict[int, SlideSpec] = {
    1: SlideSpec(
        slide_number=1,
        dataset_ref="scene1.csv",
        chart_title="Time Spent by Activity",
        caption_text=(
            "Are we becoming more selfish? People are spending more time on "
            "personal care and leisure -- and less time on caring for others and work."
        ),
        annotations=(
            AnnotationSpec(
                title="Personal Care",
                label="Time caring for ourselves is up 1.24%",
                x=425,
                y=72,
                dx=-30,
                dy=30,
            ),
            AnnotationSpec(
                title="Care for Non-Household Members",
                label="Time caring for other people outside household down 37.5%",
                x=142,
                y=131,
                dx=50,
                dy=40,
            ),
        ),
    ),
    2: SlideSpec(
        slide_number=2,
        dataset_ref="scene2.csv",
        chart_title="Time Worked by Gender",
        caption_text="Men are working less and women are working more.",
        annotations=(
            AnnotationSpec(
                title="Men",
                label="Men are working 0.5% less",
                x=425,
                y=126,
                dx=-30,
                dy=-70,
            ),
            AnnotationSpec(
                title="Women",
                label="Women are working 3.07% more",
                x=398,
                y=235,
                dx=-50,
                dy=20,
            ),
        ),
    ),
    3: SlideSpec(
        slide_number=3,
        dataset_ref="scene3.csv",
        chart_title="Time Spent by Leisure Activity",
        caption_text=(
            "Are we getting more isolated? People are socializing less and "
            "spending more time on solitary activities."
        ),
        annotations=(
            AnnotationSpec(
                title="Relaxing and Thinking",
                label="Spending time with our own thoughts and relaxing is up 80%",
                x=163,
                y=78,
                dx=30,
                dy=30,
            ),
            AnnotationSpec(
                title="Socializing/Communicating",
                label="Spending time with and talking with others is down 21%",
                x=193,
                y=253,
                dx=50,
                dy=-30,
            ),
        ),
    ),
}

SLIDE_NUMBERS = tuple(sorted(SLIDES))


def get_slide(slide_number: int) -> SlideSpec:
    """Look up a slide, raising UnrecognizedSlideError for anything else."""
    # bool is an int subclass; True must not select slide 1
    if isinstance(slide_number, bool) or slide_number not in SLIDES:
        raise UnrecognizedSlideError(slide_number)
    return SLIDES[slide_number]
