import logging
import tempfile
from pathlib import Path

import httpx
from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from pagetype.config import ClassifierConfig
from pagetype.models.request import ClassifyRequest
from pagetype.models.response import ClassifyResponse
from pagetype.services.classifier import classify_page
from pagetype.services.fetcher import TooManyRequestsError, UnsupportedContentTypeError, fetch_page

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse, summary="Classify a web page")
@limiter.limit("10/minute")
async def classify(request: Request, body: ClassifyRequest) -> ClassifyResponse:
    """Classify *url* as article, homepage, forum, photo gallery, comic or video player.

    When ``html`` is supplied it is classified as-is; otherwise the page is
    fetched first.  Every extractor pass gets its own vote, so a page may
    appear under several categories.
    """
    url = str(body.url)
    logger.info("Classify request received", extra={"url": url, "fetch": body.html is None})

    fetched = body.html is None
    html = await _fetch(url) if fetched else body.html

    # Each request owns its scratch directory for image downloads
    with tempfile.TemporaryDirectory(prefix="pagetype-") as tmp:
        config = ClassifierConfig(
            scratch_dir=Path(tmp) / "images",
            parallel_extractors=body.parallel,
        )
        result = await classify_page(url, html, config=config)

    return ClassifyResponse(
        url=result.url,
        categories=result.categories,
        labels=result.labels,
        scores=result.scores,
        metrics=result.metrics,
        fetched=fetched,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

async def _fetch(url: str) -> str:
    """Fetch *url* and propagate errors as HTTP exceptions."""
    try:
        return await fetch_page(url)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except TooManyRequestsError as exc:
        logger.error("Rate limited by target %s: %s", url, exc)
        raise HTTPException(status_code=429, detail=str(exc))
    except UnsupportedContentTypeError as exc:
        logger.warning("Not an HTML page: %s – %s", url, exc)
        raise HTTPException(status_code=415, detail=str(exc))
    except httpx.TimeoutException:
        logger.error("Timeout fetching URL: %s", url)
        raise HTTPException(status_code=504, detail="The target URL timed out.")
    except httpx.HTTPStatusError as exc:
        logger.error("HTTP error fetching URL %s: %s", url, exc)
        raise HTTPException(
            status_code=502, detail=f"Target URL returned HTTP {exc.response.status_code}."
        )
    except (httpx.RequestError, RuntimeError, OSError) as exc:
        logger.error("Error fetching URL %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))
