from enum import Enum


class PageCategory(str, Enum):
    """Semantic category a page can be classified into."""

    ARTICLE = "ARTICLE"
    HOMEPAGE = "HOMEPAGE"
    FORUM = "FORUM"
    PHOTO_GALLERY = "PHOTO_GALLERY"
    COMIC = "COMIC"
    VIDEO_PLAYER = "VIDEO_PLAYER"
    UNKNOWN = "UNKNOWN"


class EvidenceSource(str, Enum):
    """Where a category vote came from: a URL pattern or one extractor pass."""

    ARTICLE = "ARTICLE"
    DEFAULT = "DEFAULT"
    CANOLA = "CANOLA"
    ARTICLE_SENTENCES = "ARTICLE_SENTENCES"
    LARGEST_CONTENT = "LARGEST_CONTENT"
    KEEP_EVERYTHING = "KEEP_EVERYTHING"
    URL_MATCH = "URL_MATCH"
