"""Tests for pagetype.services.features.compute_metrics and the Metrics model."""

import random
from types import SimpleNamespace

import pytest

from pagetype.models.media import Image, Video
from pagetype.services.features import compute_metrics


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _block(num_words: int, link_density: float = 0.0, is_content: bool = True):
    return SimpleNamespace(num_words=num_words, link_density=link_density, is_content=is_content)


def _random_blocks(rng: random.Random, n: int):
    return [
        _block(rng.randint(0, 150), round(rng.random(), 2), rng.random() < 0.6)
        for _ in range(n)
    ]


_MIXED = [
    _block(0, is_content=False),
    _block(3, 0.5, is_content=False),
    _block(70, 0.1),
    _block(80, 0.0),
    _block(20, 0.2),
    _block(4, 0.0),
    _block(61, 0.3),
]


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------

class TestBlockCounters:
    def setup_method(self):
        self.m = compute_metrics(_MIXED, [], [])

    def test_totals(self):
        assert self.m.total_blocks == 7
        assert self.m.content_blocks == 5
        assert self.m.total_words == 238
        assert self.m.content_words == 235

    def test_size_buckets(self):
        assert self.m.large_content_blocks == 3
        assert self.m.medium_content_blocks == 1
        assert self.m.small_content_blocks == 1
        assert self.m.largest_block_words == 80

    def test_structure(self):
        assert self.m.very_small_blocks == 2
        assert self.m.empty_blocks == 1
        assert self.m.consecutive_large_blocks == 2

    def test_density(self):
        assert self.m.total_link_density == pytest.approx(0.6)
        assert self.m.avg_link_density == pytest.approx(0.12)
        assert self.m.avg_words_per_content_block == pytest.approx(47.0)
        assert self.m.block_size_variance == pytest.approx(7354 / 7)

    def test_ratios(self):
        assert self.m.content_ratio == pytest.approx(5 / 7)
        assert self.m.large_block_ratio == pytest.approx(0.6)
        assert self.m.image_to_text_ratio == 0.0
        assert self.m.media_to_text_ratio == 0.0

    def test_quality_score(self):
        # every bonus applies; the empty block costs 0.1
        assert self.m.content_quality_score == 0.9

    def test_boundary_sizes(self):
        m = compute_metrics([_block(60), _block(15), _block(14), _block(5)], [], [])
        assert m.large_content_blocks == 0
        assert m.medium_content_blocks == 2
        assert m.small_content_blocks == 2
        assert m.very_small_blocks == 0

    def test_empty_content_block_not_bucketed(self):
        m = compute_metrics([_block(0), _block(20)], [], [])
        assert m.empty_blocks == 1
        assert m.content_blocks == 2
        assert m.small_content_blocks + m.medium_content_blocks + m.large_content_blocks == 1

    def test_non_content_block_breaks_large_run(self):
        blocks = [_block(70), _block(70, is_content=False), _block(70), _block(70), _block(70)]
        assert compute_metrics(blocks, [], []).consecutive_large_blocks == 3

    def test_tiny_blocks_penalise_quality(self):
        blocks = [_block(2), _block(3), _block(1), _block(100, 0.8)]
        m = compute_metrics(blocks, [], [])
        # large +0.3, link density 0.2 +0.2, ratio +0.2, consecutive +0.1;
        # 3 very small blocks out of 4 cost 0.2
        assert m.content_quality_score == 0.6


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

class TestMedia:
    def test_large_images_strictly_above_threshold(self):
        images = [
            Image(src="/a.jpg", width=800, height=800),
            Image(src="/b.jpg", width=700, height=700),
            Image(src="/c.jpg"),
        ]
        m = compute_metrics(_MIXED, images, [])
        assert m.total_images == 3
        assert m.large_images == 1
        assert m.image_to_text_ratio == pytest.approx(3 / 235)

    def test_videos_need_dimensions(self):
        videos = [
            Video(src="/a", width=640, height=360),
            Video(src="/b"),
            Video(src="/c", width=0, height=100),
        ]
        m = compute_metrics(_MIXED, [Image(src="/x.jpg")], videos)
        assert m.total_videos == 1
        assert [v.src for v in m.videos] == ["/a"]
        assert m.media_to_text_ratio == pytest.approx(2 / 235)

    def test_media_lists_are_not_serialised(self):
        m = compute_metrics(_MIXED, [Image(src="/x.jpg")], [Video(src="/v", width=1, height=1)])
        dumped = m.model_dump(mode="json")
        assert "images" not in dumped
        assert "videos" not in dumped
        assert dumped["total_images"] == 1


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------

class TestEmptyDocument:
    def test_all_zero(self):
        m = compute_metrics([], [], [])
        assert m.total_blocks == 0
        assert m.content_ratio == 0.0
        assert m.avg_words_per_content_block == 0.0
        assert m.block_size_variance == 0.0
        # average link density 0 is below 0.3, so the link-density bonus still applies
        assert m.content_quality_score == 0.2

    def test_boilerplate_only(self):
        m = compute_metrics([_block(10, 0.9, is_content=False)] * 3, [], [])
        assert m.content_blocks == 0
        assert m.avg_link_density == 0.0
        assert m.content_ratio == 0.0

    def test_single_block_has_no_variance(self):
        assert compute_metrics([_block(500)], [], []).block_size_variance == 0.0


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

class TestInvariants:
    @pytest.mark.parametrize("seed", range(20))
    def test_random_documents(self, seed):
        rng = random.Random(seed)
        m = compute_metrics(_random_blocks(rng, rng.randint(0, 60)), [], [])

        assert m.content_blocks <= m.total_blocks
        assert m.content_words <= m.total_words
        assert (
            m.large_content_blocks + m.medium_content_blocks + m.small_content_blocks
            <= m.content_blocks
        )
        assert m.consecutive_large_blocks <= m.large_content_blocks
        assert m.largest_block_words <= m.content_words
        assert 0.0 <= m.content_ratio <= 1.0
        assert 0.0 <= m.large_block_ratio <= 1.0
        assert 0.0 <= m.content_quality_score <= 1.0
        assert m.block_size_variance >= 0.0

    def test_derivation_is_idempotent(self):
        m = compute_metrics(_MIXED, [Image(src="/a.jpg", width=900, height=900)], [])
        before = m.model_dump()
        m.calculate_derived_metrics()
        assert m.model_dump() == before
