"""
src/narrative/config.py — Runtime configuration

Defaults point at the published narrative data; environment variables
override them, command-line flags override the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_DATA_URL = "https://leoncho.github.io/cs416-narrative/data/"


@dataclass
class NarrativeConfig:
    """Configuration for loading datasets and writing exports."""

    # Data
    data_url: str = DEFAULT_DATA_URL  # base URL or local directory
    fetch_timeout: float = 30.0

    # Output
    output_dir: str = "./output"

    @classmethod
    def from_env(cls) -> "NarrativeConfig":
        return cls(
            data_url=os.environ.get("NARRATIVE_DATA_URL", DEFAULT_DATA_URL),
            output_dir=os.environ.get("NARRATIVE_OUTPUT_DIR", "./output"),
        )
