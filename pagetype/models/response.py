from typing import Dict, List

from pydantic import BaseModel

from pagetype.models.category import EvidenceSource, PageCategory
from pagetype.models.metrics import Metrics


class ClassifyResponse(BaseModel):
    url: str
    categories: Dict[PageCategory, List[EvidenceSource]]
    """Each voted category with its evidence sources (``URL_MATCH`` and/or extractor ids)."""
    labels: Dict[EvidenceSource, PageCategory]
    scores: Dict[EvidenceSource, Dict[PageCategory, float]]
    metrics: Dict[EvidenceSource, Metrics]
    fetched: bool
    """True when the HTML was fetched by the service rather than supplied by the caller."""
