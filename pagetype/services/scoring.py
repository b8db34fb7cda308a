"""Per-category scores over a :class:`Metrics` record, and the final label.

Every scorer starts with a hard gate (score 0 when it fails), then adds a
fixed weight for each condition that holds.  The sum is clamped to [0, 1].
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from pagetype.config import DEFAULT_CONFIDENCE_THRESHOLD
from pagetype.models.category import PageCategory
from pagetype.models.metrics import SCORE_PRECISION, Metrics

logger = logging.getLogger(__name__)

# Side length (px) of the square a comic panel must reach
COMIC_PANEL_SIZE = 500


def _clamp(score: float) -> float:
    return round(max(0.0, min(1.0, score)), SCORE_PRECISION)


# ---------------------------------------------------------------------------
# Scorers
# ---------------------------------------------------------------------------

def photo_gallery_score(m: Metrics) -> float:
    """Image-heavy page with little text and a simple structure."""
    if m.total_images == 0:
        return 0.0

    score = 0.0
    if m.total_images >= 6:
        score += 0.3
    if m.large_images >= 1:
        score += 0.2
    if m.total_images >= 12:
        score += 0.1
    if 0.05 <= m.image_to_text_ratio <= 4.0:
        score += 0.2
    # large images are weighted twice on purpose
    if m.large_images >= 1:
        score += 0.1

    if m.content_blocks <= 50:
        score += 0.1
    if m.total_blocks <= 100:
        score += 0.1
    if m.avg_words_per_content_block < 25:
        score += 0.1
    if m.avg_link_density < 0.3:
        score += 0.1
    if m.content_ratio >= 0.1:
        score += 0.1

    return _clamp(score)


def comic_score(m: Metrics) -> float:
    """A few large images and almost no text."""
    if m.total_images == 0:
        return 0.0

    score = 0.0
    panel_area = COMIC_PANEL_SIZE * COMIC_PANEL_SIZE
    if any(image.area >= panel_area for image in m.images):
        score += 0.2
    if 1 <= m.total_images <= 30:
        score += 0.2
    if m.content_words < 200:
        score += 0.2
    if m.total_blocks < 30:
        score += 0.1
    if m.content_blocks < 10:
        score += 0.1
    if m.avg_words_per_content_block < 20:
        score += 0.1
    if m.image_to_text_ratio >= 0.02:
        score += 0.1
    if m.avg_link_density < 0.2:
        score += 0.1
    if m.large_images / m.total_images >= 0.3:
        score += 0.1

    return _clamp(score)


def video_player_score(m: Metrics) -> float:
    """An embedded player surrounded by short text."""
    if m.total_videos == 0:
        return 0.0

    score = 0.3
    if m.content_ratio <= 0.3:
        score += 0.1
    if m.content_words < 200:
        score += 0.2
    if 0.1 <= m.avg_link_density <= 0.7:
        score += 0.1
    if m.large_block_ratio < 0.3:
        score += 0.1
    if m.media_to_text_ratio >= 0.01:
        score += 0.2
    if m.large_content_blocks <= 2:
        score += 0.1

    return _clamp(score)


def article_score(m: Metrics) -> float:
    """Long, contiguous, link-poor text."""
    if m.total_words < 100:
        return 0.0

    score = 0.0
    if m.content_quality_score >= 0.4:
        score += 0.2
    if m.large_content_blocks >= 1:
        score += 0.2
    if m.large_block_ratio >= 0.2:
        score += 0.2
    if m.content_ratio >= 0.3:
        score += 0.2
    if m.avg_link_density <= 0.2:
        score += 0.1
    if m.largest_block_words >= 60:
        score += 0.1
    if m.avg_words_per_content_block >= 25:
        score += 0.1
    if m.content_words >= 100:
        score += 0.1
    if m.consecutive_large_blocks >= 1:
        score += 0.1

    return _clamp(score)


def forum_score(m: Metrics) -> float:
    """Many medium-sized posts of varying length, few images."""
    if m.total_words < 100:
        return 0.0

    score = 0.0
    if 6 <= m.content_blocks <= 80:
        score += 0.15
    if m.total_blocks >= 15:
        score += 0.1
    if 0.1 <= m.content_ratio <= 0.4:
        score += 0.25
    if m.medium_content_blocks >= 3:
        score += 0.1
    if m.large_block_ratio < 0.3:
        score += 0.1
    if 0.0 <= m.avg_link_density <= 0.4:
        score += 0.1
    if m.avg_words_per_content_block < 40:
        score += 0.05
    if 25 <= m.block_size_variance <= 150:
        score += 0.05

    if m.total_images <= 10:
        score += 0.2
    else:
        score -= 0.2

    return _clamp(score)


def homepage_score(m: Metrics) -> float:
    """Portal layout: lots of short, link-heavy teaser blocks."""
    score = 0.0
    if 10 <= m.content_blocks <= 300:
        score += 0.3
    if m.total_blocks >= 40:
        score += 0.2
    if 0.02 <= m.content_ratio <= 0.3:
        score += 0.2

    if 1 <= m.total_images <= 50:
        score += 0.1
    if m.small_content_blocks >= 5:
        score += 0.1
    if m.medium_content_blocks >= 5:
        score += 0.1
    if 0.1 <= m.avg_link_density <= 1.0:
        score += 0.1
    if m.large_block_ratio <= 0.2:
        score += 0.1

    return _clamp(score)


# Iteration order doubles as the tie-break order
SCORERS: Dict[PageCategory, Callable[[Metrics], float]] = {
    PageCategory.PHOTO_GALLERY: photo_gallery_score,
    PageCategory.COMIC: comic_score,
    PageCategory.VIDEO_PLAYER: video_player_score,
    PageCategory.FORUM: forum_score,
    PageCategory.ARTICLE: article_score,
    PageCategory.HOMEPAGE: homepage_score,
}


def score_all(metrics: Metrics) -> Dict[PageCategory, float]:
    """Return every category's score, in tie-break order."""
    return {category: scorer(metrics) for category, scorer in SCORERS.items()}


def choose_category(
    metrics: Metrics,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> Tuple[PageCategory, Optional[Dict[PageCategory, float]]]:
    """Label a page from its metrics.

    Returns:
        ``(category, scores)``.  ``scores`` is None when the document has no
        content blocks (the scorers are not run and the label is UNKNOWN).
        Otherwise the highest-scoring category is returned if its score is
        strictly above *threshold*, else UNKNOWN.  Equal scores resolve to
        the category that comes first in :data:`SCORERS`.
    """
    if metrics.content_blocks == 0:
        return PageCategory.UNKNOWN, None

    scores = score_all(metrics)
    best: Optional[PageCategory] = None
    best_score = -1.0
    for category, score in scores.items():
        if score > best_score:
            best, best_score = category, score

    if best is not None and best_score > threshold:
        return best, scores
    return PageCategory.UNKNOWN, scores
