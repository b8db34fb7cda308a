import codecs
import ipaddress
import re
import socket
from urllib.parse import urljoin, urlparse

import httpx

from pagetype.config import DEFAULT_USER_AGENT

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
TIMEOUT = 30  # seconds
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}

# Charset assumed when the Content-Type header does not declare one
DEFAULT_CHARSET = "cp1252"

_CHARSET_RE = re.compile(r"charset=([^; ]+)$", re.IGNORECASE)

# Pre-accepted consent state for the common cookie-banner frameworks
CONSENT_COOKIES = {
    "cookieConsent": "true",
    "cookie-consent": "accepted",
    "cookiesAccepted": "true",
    "acceptCookies": "true",
    "gdpr-consent": "accepted",
    "privacy-consent": "true",
    "cookie_notice_accepted": "true",
    "cookies_policy": "accepted",
    # Cookiebot
    "CookieConsent": "{necessary:true,preferences:true,statistics:true,marketing:false}",
    "CookieConsentBulkTicket": "accepted",
}

REQUEST_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}


class UnsupportedContentTypeError(OSError):
    """The response is not an HTML document."""


class TooManyRequestsError(OSError):
    """The server answered HTTP 429."""


def consent_cookie_header() -> str:
    """Return the consent cookies as a single ``Cookie`` header value."""
    return "; ".join(f"{key}={value}" for key, value in CONSENT_COOKIES.items())


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        raw_ip = info[4][0]
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = raw_ip.split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* fails SSRF / scheme validation."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


def _check_content_type(content_type: str) -> None:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "text/html":
        raise UnsupportedContentTypeError(f"Unsupported content type: {content_type or None}")


def _charset(content_type: str) -> str:
    match = _CHARSET_RE.search(content_type.strip())
    if match:
        charset = match.group(1).strip("\"'")
        try:
            codecs.lookup(charset)
            return charset
        except LookupError:
            pass
    return DEFAULT_CHARSET


async def fetch_page(url: str) -> str:
    """Fetch the HTML page at *url* and return it decoded.

    Redirects are followed manually so that every redirect destination is
    validated against the SSRF rules before the next request is made.  gzip
    and deflate bodies are decompressed by httpx.

    Raises:
        ValueError: if the URL fails SSRF / scheme validation.
        TooManyRequestsError: on HTTP 429.
        UnsupportedContentTypeError: if the response is not ``text/html``.
        httpx.HTTPError: on other network or HTTP errors.
        RuntimeError: if the body exceeds MAX_CONTENT_SIZE or there are too many redirects.
    """
    _validate_url(url)

    headers = {**REQUEST_HEADERS, "Cookie": consent_cookie_header()}
    current_url = url
    async with httpx.AsyncClient(follow_redirects=False, timeout=TIMEOUT, headers=headers) as client:
        for _ in range(MAX_REDIRECTS + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    next_url = urljoin(current_url, location)
                    _validate_url(next_url)
                    current_url = next_url
                    continue

                if response.status_code == 429:
                    raise TooManyRequestsError(f"Error 429: Too Many Requests for {current_url}")
                response.raise_for_status()

                content_type = response.headers.get("content-type", "")
                _check_content_type(content_type)

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > MAX_CONTENT_SIZE:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > MAX_CONTENT_SIZE:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                return b"".join(chunks).decode(_charset(content_type), errors="replace")

    raise RuntimeError("Too many redirects.")
