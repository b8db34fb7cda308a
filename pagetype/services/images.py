"""Image references that sit inside the content regions of a labelled document.

The boilerplate extractors label text blocks but do not keep track of images,
so images are recovered from the raw HTML: an ``<img>`` belongs to the
content when one of its nearest ancestors contains the opening words of a
block the extractor marked as content.
"""

import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from pagetype.models.media import Image

# How far up the tree an <img> may be from the text it illustrates
_MAX_ANCESTOR_DEPTH = 4

# Number of leading words of a content block used to recognise it in the DOM
_PROBE_WORDS = 6

_WORD_RE = re.compile(r"\w+", re.UNICODE)

_STOP_TAGS = {"body", "html", "[document]"}


def _normalise_text(text: str) -> str:
    """Lower-case word tokens joined by single spaces; punctuation dropped."""
    return " ".join(_WORD_RE.findall(text.lower()))


def _content_probes(document) -> List[str]:
    probes: List[str] = []
    for block in document.text_blocks:
        if not block.is_content:
            continue
        words = _normalise_text(block.text or "").split()
        if words:
            probes.append(" ".join(words[:_PROBE_WORDS]))
    return probes


def _in_content_region(img: Tag, probes: List[str], text_cache: Dict[int, str]) -> bool:
    node = img.parent
    for _ in range(_MAX_ANCESTOR_DEPTH):
        if node is None or node.name in _STOP_TAGS:
            return False
        key = id(node)
        if key not in text_cache:
            text_cache[key] = _normalise_text(node.get_text(" "))
        text = text_cache[key]
        if any(probe in text for probe in probes):
            return True
        node = node.parent
    return False


def _image_src(img: Tag) -> Optional[str]:
    src = img.get("src") or img.get("data-src")
    if not src:
        return None
    src = str(src).strip()
    if not src or src.startswith("data:"):
        return None
    return src


def extract_image_refs(document, html: str) -> List[Image]:
    """Return the images enclosed by the content blocks of *document*.

    Args:
        document: A text document already labelled by an extractor; only
            ``text_blocks`` and each block's ``text`` / ``is_content`` are read.
        html: The raw HTML the document was parsed from.

    Returns:
        :class:`Image` records in document order.  ``width``/``height`` come
        from the tag attributes when they are plain integers.
    """
    probes = _content_probes(document)
    if not probes or not html:
        return []

    soup = BeautifulSoup(html, "lxml")
    text_cache: Dict[int, str] = {}
    images: List[Image] = []
    for img in soup.find_all("img"):
        src = _image_src(img)
        if src is None or not _in_content_region(img, probes, text_cache):
            continue
        alt = (img.get("alt") or "").strip() or None
        images.append(
            Image.from_attributes(src, img.get("width"), img.get("height"), alt=alt)
        )
    return images
