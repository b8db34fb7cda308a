"""Tests for pagetype.services.extractors against the real boilerpy3 extractors."""

from pagetype.models.category import EvidenceSource
from pagetype.services.extractors import DEFAULT_STRATEGIES

_PARAGRAPH = " ".join(
    "The committee met on Tuesday to discuss the new budget for the city library."
    for _ in range(10)
)

_HTML = f"""
<html>
  <head><title>Budget news</title></head>
  <body>
    <h1>Library budget approved</h1>
    <p>{_PARAGRAPH}</p>
  </body>
</html>
"""


class TestStrategies:
    def test_fixed_order(self):
        assert [s.id for s in DEFAULT_STRATEGIES] == [
            EvidenceSource.ARTICLE,
            EvidenceSource.DEFAULT,
            EvidenceSource.CANOLA,
            EvidenceSource.ARTICLE_SENTENCES,
            EvidenceSource.LARGEST_CONTENT,
            EvidenceSource.KEEP_EVERYTHING,
        ]

    def test_url_match_is_not_an_extractor(self):
        assert EvidenceSource.URL_MATCH not in {s.id for s in DEFAULT_STRATEGIES}

    def test_every_strategy_labels_blocks(self):
        for strategy in DEFAULT_STRATEGIES:
            document = strategy.label(_HTML)
            assert document.text_blocks, strategy.id
            for block in document.text_blocks:
                assert block.num_words >= 0
                assert 0.0 <= block.link_density <= 1.0

    def test_keep_everything_marks_all_blocks_content(self):
        keep_everything = DEFAULT_STRATEGIES[-1]
        document = keep_everything.label(_HTML)
        assert all(block.is_content for block in document.text_blocks)
        assert max(block.num_words for block in document.text_blocks) > 60

    def test_documents_are_not_shared(self):
        article = DEFAULT_STRATEGIES[0]
        assert article.label(_HTML) is not article.label(_HTML)
