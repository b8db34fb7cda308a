"""Aggregate text-block, image and video statistics into a :class:`Metrics` record."""

from typing import Iterable, List

from pagetype.models.media import Image, Video
from pagetype.models.metrics import Metrics

# Word-count thresholds for block size buckets
WORDS_LARGE_BLOCK = 60
WORDS_MEDIUM_BLOCK = 15
WORDS_SMALL_BLOCK = 5

# Side length (px) of the square an image must exceed to count as large
LARGE_IMAGE_SIZE = 700


def _population_variance(values: List[int]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def compute_metrics(blocks: Iterable, images: List[Image], videos: List[Video]) -> Metrics:
    """Walk *blocks* once, in document order, and build the metrics record.

    Args:
        blocks: Labelled text blocks.  Each must expose ``num_words``,
            ``link_density`` and ``is_content``.
        images: Images whose dimensions have already been resolved.
        videos: Videos found on the page; only those with a positive width
            and height are counted.

    Returns:
        A fully derived :class:`Metrics`.
    """
    metrics = Metrics()
    block_sizes: List[int] = []
    consecutive_large = 0

    for block in blocks:
        num_words = block.num_words
        block_sizes.append(num_words)

        if num_words == 0:
            metrics.empty_blocks += 1
            consecutive_large = 0
        elif num_words < WORDS_SMALL_BLOCK:
            metrics.very_small_blocks += 1
            consecutive_large = 0

        if block.is_content:
            metrics.content_blocks += 1
            metrics.content_words += num_words

            if num_words > WORDS_LARGE_BLOCK:
                metrics.large_content_blocks += 1
                consecutive_large += 1
                metrics.consecutive_large_blocks = max(
                    metrics.consecutive_large_blocks, consecutive_large
                )
            else:
                consecutive_large = 0
                if num_words >= WORDS_MEDIUM_BLOCK:
                    metrics.medium_content_blocks += 1
                elif num_words > 0:
                    # empty content blocks are only counted under empty_blocks
                    metrics.small_content_blocks += 1

            metrics.largest_block_words = max(metrics.largest_block_words, num_words)
            metrics.total_link_density += block.link_density
        else:
            consecutive_large = 0

        metrics.total_words += num_words

    metrics.total_blocks = len(block_sizes)

    # Link density is summed over content blocks only, so it is averaged over them too
    if metrics.content_blocks:
        metrics.avg_link_density = metrics.total_link_density / metrics.content_blocks
        metrics.avg_words_per_content_block = metrics.content_words / metrics.content_blocks

    metrics.block_size_variance = _population_variance(block_sizes)

    large_area = LARGE_IMAGE_SIZE * LARGE_IMAGE_SIZE
    metrics.images = list(images)
    metrics.total_images = len(metrics.images)
    metrics.large_images = sum(1 for image in metrics.images if image.area > large_area)

    metrics.videos = [video for video in videos if video.has_dimensions]
    metrics.total_videos = len(metrics.videos)

    metrics.calculate_derived_metrics()
    return metrics
