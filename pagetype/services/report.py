"""Append per-page metrics to a JSON array file."""

import json
import logging
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)


def _load_entries(path: Path) -> List[dict]:
    if not path.exists() or path.stat().st_size == 0:
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Error reading existing metrics file %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.warning("Metrics file %s does not hold a JSON array; starting a new one", path)
        return []
    return data


def append_metrics_report(path: Path, report: Dict[str, Dict[str, dict]]) -> int:
    """Append *report* (``{url: {extractorID: metrics}}``) to the array in *path*.

    Prior entries are preserved.  A missing, empty or unreadable file starts
    a new array.

    Returns:
        The number of entries now in the file.
    """
    entries = _load_entries(path)
    entries.append(report)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding="utf-8")
    return len(entries)
