"""Page category hints from the URL alone.

Each category has one case-insensitive pattern with two alternatives:

``path form``
    A path segment that names the kind of page (``/forum/…``, ``/gallery/…``,
    ``/watch/…``).  The segment may be followed by a file name and/or one
    more path segment; anything after that is accepted as well.

``host form``
    A well-known site for the category, followed by a non-empty path.

The homepage pattern is different: it matches a bare domain (optional scheme,
optional ``www.``, optional trailing slash) with no path at all.

Every pattern is tested against the full URL independently, so a URL can
vote for several categories at once.
"""

import logging
import re
from typing import Dict, List

from pagetype.models.category import PageCategory

logger = logging.getLogger(__name__)

# Shared tail for the path alternative: "/<segment>", an optional "/file.ext",
# an optional further "/segment", then anything.
_PATH_TAIL = r"(?:/[^/]+\.[a-z0-9]+)?(?:/[^/]+)?.*$"


def _pattern(segments: str, hosts: str) -> re.Pattern:
    return re.compile(
        rf".*?/(?:{segments}){_PATH_TAIL}"
        rf"|.*(?:{hosts})\.com/.+.*",
        re.IGNORECASE,
    )


# ---------------------------------------------------------------------------
# Per-category patterns
# ---------------------------------------------------------------------------
_ARTICLE_PATTERN = _pattern(
    r"article|articles|art|blog",
    r"quora|medium|substack|huffpost|ezine-articles|hubpages|businessinsider|vocal\.media",
)

_FORUM_PATTERN = _pattern(
    r"forum|forums|community|board|discussion|discuss|thread|threads|topic|topics"
    r"|viewtopic|post|reply|comment|comments",
    r"reddit|stackoverflow|quora|discourse|phpbb|vbulletin|xenforo|invision",
)

_PHOTO_GALLERY_PATTERN = _pattern(
    r"gallery|galleries|photo|photos|album|albums|pictures|slideshow|portfolio",
    r"flickr|imgur|500px|unsplash|pinterest|smugmug|deviantart|pexels",
)

_COMIC_PATTERN = _pattern(
    r"comic|comics|strip|strips|webcomic|webcomics|manga",
    r"xkcd|smbc-comics|webtoons|gocomics|explosm|tapas|dilbert|questionablecontent",
)

_VIDEO_PLAYER_PATTERN = _pattern(
    r"video|videos|watch|embed|player|clip|clips",
    r"youtube|vimeo|dailymotion|twitch|tiktok|ted|rumble|bitchute",
)

# Bare domain: optional scheme and www., at least one dot, no path
_HOMEPAGE_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:[^/]+\.)+[^/]+/?$",
    re.IGNORECASE,
)

URL_PATTERNS: Dict[PageCategory, re.Pattern] = {
    PageCategory.ARTICLE: _ARTICLE_PATTERN,
    PageCategory.FORUM: _FORUM_PATTERN,
    PageCategory.HOMEPAGE: _HOMEPAGE_PATTERN,
    PageCategory.PHOTO_GALLERY: _PHOTO_GALLERY_PATTERN,
    PageCategory.COMIC: _COMIC_PATTERN,
    PageCategory.VIDEO_PLAYER: _VIDEO_PLAYER_PATTERN,
}


def match_url(url: str) -> List[PageCategory]:
    """Return every category whose URL pattern matches *url*.

    Args:
        url: Page URL as given by the caller.  It is not validated; anything
            that is not a string, or matches nothing, yields an empty list.

    Returns:
        The matching categories, in the fixed order of :data:`URL_PATTERNS`.
    """
    if not isinstance(url, str) or not url.strip():
        return []

    url = url.strip()
    matches = [category for category, pattern in URL_PATTERNS.items() if pattern.fullmatch(url)]
    if matches:
        logger.debug("URL %s matched %s", url, [m.value for m in matches])
    return matches
