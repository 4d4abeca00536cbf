import re
import time
from typing import NamedTuple, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from seo_scanner.config import ACCEPT, FETCH_TIMEOUT, USER_AGENT

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


class FetchError(Exception):
    """A request could not be completed (DNS, TLS, connection reset, ...)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class FetchTimeout(FetchError):
    """No response arrived within the timeout."""


class TextResult(NamedTuple):
    status: int
    text: str


class FetchResult:
    def __init__(
        self,
        url: str,
        status_code: int,
        html: str,
        elapsed_ms: int = 0,
        redirected: bool = False,
    ):
        self.url = url
        self.status_code = status_code
        self.html = html
        self.elapsed_ms = elapsed_ms
        self.redirected = redirected
        self.soup = BeautifulSoup(html, "lxml")
        parsed = urlparse(url)
        self.scheme = parsed.scheme
        self.host = parsed.hostname or ""
        self.base_url = f"{parsed.scheme}://{parsed.netloc}"


def normalize_url(value: str) -> str:
    url = value.strip().rstrip("/")
    if _SCHEME_RE.match(url):
        return url
    return f"https://{url}"


def fetch_with_timeout(
    url: str,
    method: str = "GET",
    allow_redirects: bool = True,
    timeout: float = FETCH_TIMEOUT,
) -> requests.Response:
    headers = {"User-Agent": USER_AGENT, "Accept": ACCEPT}
    try:
        return requests.request(
            method,
            url,
            headers=headers,
            timeout=timeout,
            allow_redirects=allow_redirects,
        )
    except requests.Timeout as e:
        raise FetchTimeout(url, f"timed out after {timeout:g}s") from e
    except requests.RequestException as e:
        raise FetchError(url, str(e)[:200]) from e


def fetch_text(url: str) -> Optional[TextResult]:
    """GET a small auxiliary resource; any network failure yields None."""
    try:
        resp = fetch_with_timeout(url)
    except FetchError:
        return None
    return TextResult(status=resp.status_code, text=resp.text)


def fetch_page(url: str) -> FetchResult:
    start = time.perf_counter()
    resp = fetch_with_timeout(url)
    html = resp.text
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    return FetchResult(
        url=url,
        status_code=resp.status_code,
        html=html,
        elapsed_ms=elapsed_ms,
        redirected=bool(resp.history),
    )
