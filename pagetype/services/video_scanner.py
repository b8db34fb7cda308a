"""Regex-based detection of embedded video players in raw HTML.

Three element shapes are recognised, scanned in this order:

* ``<video src="…">…</video>`` or ``<video>…<source src="…">…</video>``
  (the element-level ``src`` wins when both are present);
* ``<iframe src="…">``;
* ``<object data="…">`` / ``<embed src="…">``.

No DOM is built and nothing is deduplicated. ``width`` and ``height``
are read from the element's own attributes.
"""

import re
from typing import List, Optional

from pagetype.models.media import Video

# Attribute names must not be the tail of a longer name (data-src, data-width)
_ATTR_PREFIX = r"(?<![-\w])"

_VIDEO_TAG_PATTERN = re.compile(
    r"<video\b([^>]*)>(.*?)</video\s*>",
    re.IGNORECASE | re.DOTALL,
)

_SOURCE_TAG_PATTERN = re.compile(
    rf"<source\b[^>]*?{_ATTR_PREFIX}src\s*=\s*[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)

_IFRAME_PATTERN = re.compile(
    rf"<iframe\b[^>]*?{_ATTR_PREFIX}src\s*=\s*[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)

_OBJECT_EMBED_PATTERN = re.compile(
    rf"<(?:object|embed)\b[^>]*?{_ATTR_PREFIX}(?:data|src)\s*=\s*[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)


def _attribute(tag: str, name: str) -> Optional[str]:
    match = re.search(
        rf"{_ATTR_PREFIX}{name}\s*=\s*[\"']([^\"']*)[\"']", tag, re.IGNORECASE
    )
    return match.group(1) if match else None


def _video_tags(html: str) -> List[Video]:
    videos: List[Video] = []
    for match in _VIDEO_TAG_PATTERN.finditer(html):
        attrs, body = match.group(1), match.group(2)
        src = _attribute(attrs, "src")
        if not src:
            source = _SOURCE_TAG_PATTERN.search(body)
            src = source.group(1) if source else None
        if src:
            videos.append(
                Video.from_attributes(src, _attribute(attrs, "width"), _attribute(attrs, "height"))
            )
    return videos


def _single_tags(html: str, pattern: re.Pattern) -> List[Video]:
    videos: List[Video] = []
    for match in pattern.finditer(html):
        src = match.group(1)
        if src:
            tag = match.group(0)
            videos.append(
                Video.from_attributes(src, _attribute(tag, "width"), _attribute(tag, "height"))
            )
    return videos


def scan_videos(html: str) -> List[Video]:
    """Return every video-like element found in *html*.

    Args:
        html: Raw page HTML.

    Returns:
        Video records in scan order (``<video>``, then ``<iframe>``, then
        ``<object>``/``<embed>``).  Empty when nothing matches.
    """
    if not html:
        return []
    return (
        _video_tags(html)
        + _single_tags(html, _IFRAME_PATTERN)
        + _single_tags(html, _OBJECT_EMBED_PATTERN)
    )

