from typing import Dict, List

from pydantic import BaseModel, Field

from pagetype.models.category import EvidenceSource, PageCategory
from pagetype.models.metrics import Metrics


class ClassificationResult(BaseModel):
    """Everything one classification produced.

    ``categories`` maps each voted category to its evidence sources: URL
    matches first, then extractor votes in the fixed extractor order.
    Extractors that failed appear in none of the per-extractor maps.
    """

    url: str
    categories: Dict[PageCategory, List[EvidenceSource]] = Field(default_factory=dict)
    labels: Dict[EvidenceSource, PageCategory] = Field(default_factory=dict)
    metrics: Dict[EvidenceSource, Metrics] = Field(default_factory=dict)
    # Only extractors whose document had content blocks were scored
    scores: Dict[EvidenceSource, Dict[PageCategory, float]] = Field(default_factory=dict)

    def add_vote(self, category: PageCategory, source: EvidenceSource) -> None:
        self.categories.setdefault(category, []).append(source)

    def metrics_report(self) -> Dict[str, Dict[str, dict]]:
        """Return ``{url: {extractorID: metrics}}`` ready for JSON."""
        return {
            self.url: {
                source.value: metrics.model_dump(mode="json")
                for source, metrics in self.metrics.items()
            }
        }

    def summary(self) -> str:
        """One line per category: ``CATEGORY: SOURCE, SOURCE``."""
        if not self.categories:
            return f"{self.url}: no classification"
        lines = [f"Classification for {self.url}:"]
        for category, sources in self.categories.items():
            lines.append(f"  {category.value}: {', '.join(s.value for s in sources)}")
        return "\n".join(lines)
