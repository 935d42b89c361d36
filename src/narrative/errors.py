"""
src/narrative/errors.py — Exception hierarchy for the time-use narrative.

Every failure surfaced to callers derives from NarrativeError so the CLI
and the slide controller can report them uniformly.
"""


class NarrativeError(Exception):
    """Base class for all narrative errors."""


class DataLoadError(NarrativeError):
    """Dataset could not be fetched, parsed, or contained no rows."""


class UnrecognizedSlideError(NarrativeError):
    """A slide number outside the fixed slide table was requested."""

    def __init__(self, slide_number):
        self.slide_number = slide_number
        super().__init__(f"No slide with number {slide_number!r}")


class InconsistentDomainError(NarrativeError):
    """Groups disagree on their subgroup keys, or a subgroup has no style."""


class RenderStateError(NarrativeError):
    """An operation needed a mounted drawing surface that is not there."""
