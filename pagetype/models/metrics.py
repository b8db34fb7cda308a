from typing import List

from pydantic import BaseModel, Field

from pagetype.models.media import Image, Video

# Sums of decimal weights are rounded so 0.3 + 0.2 - 0.1 compares equal to 0.4
SCORE_PRECISION = 6


class Metrics(BaseModel):
    """Text-block, image and video statistics for one (page, extractor) pair.

    Counters are filled by :func:`pagetype.services.features.compute_metrics`;
    ratios and the content-quality score are derived afterwards by
    :meth:`calculate_derived_metrics`.  The record is not modified after that.
    """

    # Block counts
    total_blocks: int = 0
    content_blocks: int = 0
    total_words: int = 0
    content_words: int = 0

    # Content blocks by size: >60, 15-60, 1-14 words
    large_content_blocks: int = 0
    medium_content_blocks: int = 0
    small_content_blocks: int = 0
    largest_block_words: int = 0

    # Structure
    very_small_blocks: int = 0
    empty_blocks: int = 0
    consecutive_large_blocks: int = 0

    # Density
    total_link_density: float = 0.0
    avg_link_density: float = 0.0
    avg_words_per_content_block: float = 0.0
    block_size_variance: float = 0.0

    # Media
    total_images: int = 0
    large_images: int = 0
    total_videos: int = 0

    # Ratios
    content_ratio: float = 0.0
    image_to_text_ratio: float = 0.0
    large_block_ratio: float = 0.0
    media_to_text_ratio: float = 0.0
    content_quality_score: float = 0.0

    # Kept for scorers that look at individual media; never serialised
    images: List[Image] = Field(default_factory=list, exclude=True)
    videos: List[Video] = Field(default_factory=list, exclude=True)

    def calculate_derived_metrics(self) -> None:
        """Fill in the ratios and the content-quality score."""
        self.content_ratio = _ratio(self.content_blocks, self.total_blocks)
        self.image_to_text_ratio = _ratio(self.total_images, self.content_words)
        self.large_block_ratio = _ratio(self.large_content_blocks, self.content_blocks)
        self.media_to_text_ratio = _ratio(
            self.total_images + self.total_videos, self.content_words
        )
        self.content_quality_score = self._content_quality_score()

    def _content_quality_score(self) -> float:
        score = 0.0

        if self.large_content_blocks > 0:
            score += 0.3
        if self.avg_words_per_content_block > 30:
            score += 0.2
        if self.avg_link_density < 0.3:
            score += 0.2
        if self.content_ratio > 0.3:
            score += 0.2
        if self.consecutive_large_blocks > 0:
            score += 0.1

        if self.avg_link_density > 0.7:
            score -= 0.3
        if self.very_small_blocks > self.content_blocks * 0.5:
            score -= 0.2
        if self.empty_blocks > 0:
            score -= 0.1

        return round(max(0.0, min(1.0, score)), SCORE_PRECISION)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0
