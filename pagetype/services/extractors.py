"""The boilerplate-removal strategies a page is run through.

Each strategy wraps one boilerpy3 extractor.  ``label`` parses the raw HTML
into a fresh text document and marks its blocks as content or boilerplate;
documents are never shared between strategies.
"""

from dataclasses import dataclass
from typing import Callable, List

from boilerpy3 import extractors
from boilerpy3.document import TextDocument

from pagetype.models.category import EvidenceSource


@dataclass(frozen=True)
class ExtractorStrategy:
    id: EvidenceSource
    factory: Callable[[], "extractors.Extractor"]

    def label(self, html: str):
        """Return the labelled text document for *html*.

        Blank input yields an empty document (no blocks).  Otherwise raises
        whatever the underlying extractor raises on unparsable input.
        """
        if not html or not html.strip():
            return TextDocument([])
        return self.factory().get_doc(html)


DEFAULT_STRATEGIES: List[ExtractorStrategy] = [
    ExtractorStrategy(EvidenceSource.ARTICLE, extractors.ArticleExtractor),
    ExtractorStrategy(EvidenceSource.DEFAULT, extractors.DefaultExtractor),
    ExtractorStrategy(EvidenceSource.CANOLA, extractors.CanolaExtractor),
    ExtractorStrategy(EvidenceSource.ARTICLE_SENTENCES, extractors.ArticleSentencesExtractor),
    ExtractorStrategy(EvidenceSource.LARGEST_CONTENT, extractors.LargestContentExtractor),
    ExtractorStrategy(EvidenceSource.KEEP_EVERYTHING, extractors.KeepEverythingExtractor),
]
