"""Classification orchestration: URL hints plus one vote per extractor strategy."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import httpx

from pagetype.config import ClassifierConfig
from pagetype.models.category import EvidenceSource, PageCategory
from pagetype.models.media import Video
from pagetype.models.metrics import Metrics
from pagetype.models.result import ClassificationResult
from pagetype.services.dimensions import prepare_scratch_dir, resolve_dimensions
from pagetype.services.extractors import DEFAULT_STRATEGIES, ExtractorStrategy
from pagetype.services.features import compute_metrics
from pagetype.services.images import extract_image_refs
from pagetype.services.scoring import choose_category
from pagetype.services.url_matcher import match_url
from pagetype.services.video_scanner import scan_videos

logger = logging.getLogger(__name__)


@dataclass
class _ExtractorVote:
    source: EvidenceSource
    category: PageCategory
    metrics: Metrics
    scores: Optional[Dict[PageCategory, float]]


async def _run_strategy(
    strategy: ExtractorStrategy,
    url: str,
    html: str,
    videos: List[Video],
    config: ClassifierConfig,
    client: Optional[httpx.AsyncClient],
) -> Optional[_ExtractorVote]:
    """Label *html* with one strategy and score the result.

    Returns None when the extractor itself fails; the page is then simply
    not voted on by that strategy.
    """
    try:
        document = await asyncio.to_thread(strategy.label, html)
    except Exception as exc:
        logger.warning("Extractor %s failed: %s", strategy.id.value, exc)
        return None

    images = extract_image_refs(document, html)
    images = await resolve_dimensions(
        images,
        url,
        config.scratch_dir / strategy.id.value.lower(),
        config=config,
        client=client,
    )

    metrics = compute_metrics(document.text_blocks, images, videos)
    category, scores = choose_category(metrics, config.confidence_threshold)
    logger.info(
        "Extractor %s labelled %s as %s (best score %.2f)",
        strategy.id.value,
        url,
        category.value,
        max(scores.values()) if scores else 0.0,
    )
    return _ExtractorVote(strategy.id, category, metrics, scores)


async def classify_page(
    url: str,
    html: str,
    config: Optional[ClassifierConfig] = None,
    strategies: Sequence[ExtractorStrategy] = DEFAULT_STRATEGIES,
    client: Optional[httpx.AsyncClient] = None,
) -> ClassificationResult:
    """Classify the page at *url* whose markup is *html*.

    Steps:
    1. URL patterns – each matching category gets a ``URL_MATCH`` vote.
    2. Video scan over the raw HTML (once, shared by every strategy).
    3. For each strategy: label the blocks, collect and size the content
       images, compute metrics and vote for the best-scoring category
       (UNKNOWN when nothing clears the confidence threshold).

    Args:
        url: Page URL.  Also the base for relative image sources.
        html: Raw, already decoded page HTML.
        config: Run settings; see :class:`ClassifierConfig`.
        strategies: Extractor strategies, in the order their votes are recorded.
        client: Optional shared HTTP client for image downloads.

    Raises:
        OSError: if the scratch directory cannot be prepared.
    """
    config = config or ClassifierConfig()
    result = ClassificationResult(url=url)

    for category in match_url(url):
        result.add_vote(category, EvidenceSource.URL_MATCH)

    videos = scan_videos(html)
    logger.debug("Found %d video candidates on %s", len(videos), url)

    prepare_scratch_dir(config.scratch_dir)

    if config.parallel_extractors:
        votes = await asyncio.gather(
            *(_run_strategy(s, url, html, videos, config, client) for s in strategies)
        )
    else:
        votes = [await _run_strategy(s, url, html, videos, config, client) for s in strategies]

    for vote in votes:
        if vote is None:
            continue
        result.add_vote(vote.category, vote.source)
        result.labels[vote.source] = vote.category
        result.metrics[vote.source] = vote.metrics
        if vote.scores is not None:
            result.scores[vote.source] = vote.scores

    return result


def classify(
    url: str,
    html: str,
    config: Optional[ClassifierConfig] = None,
    strategies: Sequence[ExtractorStrategy] = DEFAULT_STRATEGIES,
) -> ClassificationResult:
    """Blocking wrapper around :func:`classify_page`."""
    return asyncio.run(classify_page(url, html, config=config, strategies=strategies))
