"""Pixel dimensions for the images a page references.

Resolution happens in three steps:

1. **Extension filter** – only ``.jpg .jpeg .png .svg .webp .bmp`` sources
   (query string ignored) are kept; everything else is dropped.
2. **URL hints** – CDN resizers usually put the rendered size in the query
   string (``?w=800&h=600``, ``?width=…&height=…``).  When both are present
   and numeric they are used as-is and the image is never downloaded.
3. **Download** – the remaining images are fetched into a scratch directory
   and their headers decoded with Pillow.  Any failure leaves the image with
   whatever dimensions it already had.
"""

import asyncio
import logging
import re
import shutil
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urljoin, urlsplit

import httpx
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from pagetype.config import ClassifierConfig
from pagetype.models.media import Image

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".svg", ".webp", ".bmp")

_WIDTH_KEYS = {"w", "width"}
_HEIGHT_KEYS = {"h", "height"}
_DIGITS_RE = re.compile(r"^\d+$")


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def has_supported_extension(src: str) -> bool:
    """Return True when *src*, minus its query string, ends in a known image extension."""
    if not src:
        return False
    path = src.split("?", 1)[0].lower()
    return path.endswith(ALLOWED_IMAGE_EXTENSIONS)


def dimensions_from_url(src: str) -> Optional[Tuple[int, int]]:
    """Return ``(width, height)`` encoded in the query string of *src*, if both are present.

    Keys are matched case-insensitively; non-numeric values are ignored and a
    later parameter overrides an earlier one.
    """
    if not src or "?" not in src:
        return None

    width: Optional[int] = None
    height: Optional[int] = None
    for key, value in parse_qsl(urlsplit(src).query, keep_blank_values=True):
        key = key.lower()
        value = value.strip()
        if not _DIGITS_RE.match(value):
            continue
        if key in _WIDTH_KEYS:
            width = int(value)
        elif key in _HEIGHT_KEYS:
            height = int(value)

    if width is None or height is None:
        return None
    return width, height


def absolute_image_url(src: str, page_url: str) -> str:
    """Resolve *src* against *page_url* with :func:`urllib.parse.urljoin`.

    Relative sources resolve against the page's directory the way a browser
    does, not by appending them to the full page URL: ``img/a.jpg`` on
    ``https://site/news/story`` becomes ``https://site/news/img/a.jpg`` and
    ``/img/a.jpg`` becomes ``https://site/img/a.jpg``.  A page URL without a
    scheme is treated as ``https://``.  Protocol-relative sources (``//cdn…``)
    inherit the page scheme.
    """
    src = src.strip()
    if src.lower().startswith(("http://", "https://")):
        return src

    base = page_url.strip()
    if not base.lower().startswith(("http://", "https://")):
        base = "https://" + base.lstrip("/")
    if not urlsplit(base).path:
        base += "/"
    return urljoin(base, src)


def prepare_scratch_dir(path: Path) -> Path:
    """Empty *path* (creating it if needed) and return it.

    Raises:
        OSError: if the directory cannot be removed or created.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path


def _file_extension(url: str) -> str:
    path = urlsplit(url).path.lower()
    for ext in ALLOWED_IMAGE_EXTENSIONS:
        if path.endswith(ext):
            return ext
    return ".jpg"


def read_image_size(path: Path) -> Optional[Tuple[int, int]]:
    """Decode the header of the image at *path*; None when Pillow cannot read it."""
    try:
        with PILImage.open(path) as img:
            return img.size
    except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Failed to decode image %s: %s", path, exc)
        return None


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------

async def _download_image(
    client: httpx.AsyncClient,
    url: str,
    destination: Path,
    max_bytes: int,
) -> bool:
    """Stream *url* into *destination*; return False (and log) on any failure."""
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            chunks = []
            total = 0
            async for chunk in response.aiter_bytes():
                total += len(chunk)
                if total > max_bytes:
                    logger.warning("Skipping %s: image larger than %s bytes", url, max_bytes)
                    return False
                chunks.append(chunk)
        destination.write_bytes(b"".join(chunks))
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        logger.warning("Failed to fetch image %s: %s", url, exc)
        return False
    return True


async def _fetch_dimensions(
    images: List[Image],
    scratch_dir: Path,
    client: httpx.AsyncClient,
    config: ClassifierConfig,
) -> None:
    semaphore = asyncio.Semaphore(max(1, config.max_concurrent_downloads))

    async def _one(index: int, image: Image) -> None:
        destination = scratch_dir / f"image_{index}{_file_extension(image.src)}"
        async with semaphore:
            ok = await _download_image(client, image.src, destination, config.max_image_bytes)
        if not ok:
            return
        size = read_image_size(destination)
        if size is None:
            return
        image.set_dimensions(*size)
        logger.debug("Updated dimensions: %s -> %dx%d (area: %d)", image.src, size[0], size[1], image.area)

    await asyncio.gather(*(_one(i, image) for i, image in enumerate(images)))


async def resolve_dimensions(
    images: List[Image],
    page_url: str,
    scratch_dir: Path,
    config: Optional[ClassifierConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Image]:
    """Filter *images* and fill in their pixel dimensions.

    Args:
        images: Image references from the extractor pipeline.  Kept records
            are updated in place (``src`` made absolute for downloaded ones,
            ``width``/``height`` set when resolved).
        page_url: URL of the page, used to absolutise relative sources.
        scratch_dir: Directory the downloads are written to.  It is purged
            before the first download; untouched when nothing is downloaded.
        config: Timeouts and limits; defaults to :class:`ClassifierConfig`.
        client: Optional shared HTTP client.  When omitted a client is
            created for the duration of the call.

    Returns:
        The images that passed the extension filter, in input order.

    Raises:
        OSError: if the scratch directory cannot be prepared.
    """
    config = config or ClassifierConfig()
    kept = [image for image in images if has_supported_extension(image.src)]

    pending: List[Image] = []
    for image in kept:
        hint = dimensions_from_url(image.src)
        if hint is not None:
            image.set_dimensions(*hint)
        else:
            pending.append(image)

    if not pending:
        return kept

    for image in pending:
        image.src = absolute_image_url(image.src, page_url)

    prepare_scratch_dir(scratch_dir)
    if client is not None:
        await _fetch_dimensions(pending, scratch_dir, client, config)
    else:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=config.download_timeout,
            headers={"User-Agent": config.user_agent},
        ) as own_client:
            await _fetch_dimensions(pending, scratch_dir, own_client, config)

    return kept
