"""Settings carried on every classification call."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)

DEFAULT_CONFIDENCE_THRESHOLD = 0.6


def _default_scratch_dir() -> Path:
    return Path(tempfile.gettempdir()) / "pagetype-images"


@dataclass
class ClassifierConfig:
    """Knobs for one classification run.

    ``scratch_dir`` is owned by the run: it is emptied when the run starts,
    so concurrent classifications must each be given their own directory.
    """

    scratch_dir: Path = field(default_factory=_default_scratch_dir)
    download_timeout: float = 10.0
    max_concurrent_downloads: int = 8
    max_image_bytes: int = 10 * 1024 * 1024
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    parallel_extractors: bool = False
    user_agent: str = DEFAULT_USER_AGENT
