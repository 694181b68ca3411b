# src/propeval/adapters/og_scraper.py
from __future__ import annotations

import re
import time
from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests
from bs4 import BeautifulSoup

from propeval.adapters.config import config
from propeval.adapters.logging_utils import get_logger
from propeval.domain.ports import OgCache

logger = get_logger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# "scheme://" at the very start; a URL inside the query string does not count
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


class ScrapeError(RuntimeError):
    pass


@dataclass(frozen=True)
class OgMetadata:
    url: str
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    site_name: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def with_scheme(url: str) -> str:
    """The URL as typed, with https:// added when it has no scheme."""
    raw = (url or "").strip()
    if not raw:
        raise ValueError("url must be a non-empty string")
    if not _SCHEME_RE.match(raw):
        raw = "https://" + raw
    return raw


def normalize_url(url: str) -> str:
    """
    Cache key for a listing URL.

    "Example.com/house/?b=2&a=1#photos" -> "https://example.com/house?a=1&b=2"
    """
    parts = urlsplit(with_scheme(url))
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not host:
        raise ValueError(f"url has no host: {url!r}")

    netloc = host
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"

    path = parts.path or "/"
    if len(path) > 1:
        path = path.rstrip("/") or "/"

    query = urlencode(sorted(parse_qsl(parts.query, keep_blank_values=True)))
    return urlunsplit((scheme, netloc, path, query, ""))


def _meta(soup: BeautifulSoup, *keys: str) -> str | None:
    # og:* uses property=, dc/twitter/description use name=
    for key in keys:
        tag = soup.find("meta", property=key) or soup.find("meta", attrs={"name": key})
        if tag and tag.get("content"):
            return str(tag["content"]).strip()
    return None


def parse_og_html(html: str, url: str) -> OgMetadata:
    soup = BeautifulSoup(html, "html.parser")

    title = _meta(soup, "og:title", "dc.title", "DC.title", "twitter:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()

    description = _meta(
        soup,
        "og:description",
        "dc.description",
        "DC.description",
        "twitter:description",
        "description",
    )

    return OgMetadata(
        url=url,
        title=title or None,
        description=description,
        image_url=_meta(soup, "og:image", "og:image:url", "twitter:image"),
        site_name=_meta(soup, "og:site_name"),
    )


@dataclass
class OgScraper:
    cache: OgCache | None = None
    timeout_s: float = 12.0
    max_retries: int = 2
    backoff_base_s: float = 0.5
    cache_ttl_s: float = 86_400.0
    user_agent: str = "Mozilla/5.0 (PropertyEvaluator preview)"

    def fetch_html(self, url: str) -> str:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

        last_err: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = requests.get(url, headers=headers, timeout=self.timeout_s)
            except requests.RequestException as e:
                last_err = e
                if attempt < self.max_retries:
                    time.sleep(self.backoff_base_s * (2**attempt))
                    continue
                break

            # rate limiting / transient gateway errors
            if resp.status_code in (429, 500, 502, 503, 504):
                last_err = ScrapeError(f"HTTP {resp.status_code} for {url}")
                if attempt < self.max_retries:
                    wait = self.backoff_base_s * (2**attempt)
                    ra = resp.headers.get("Retry-After")
                    if ra:
                        try:
                            wait = max(wait, float(ra))
                        except ValueError:
                            pass
                    time.sleep(wait)
                    continue
                break

            if resp.status_code >= 400:
                raise ScrapeError(f"HTTP {resp.status_code} for {url}")

            return resp.text

        raise ScrapeError(f"fetch failed after retries: {last_err!r}")

    def scrape(self, url: str) -> OgMetadata:
        """
        Preview metadata for a listing URL.

        The page is fetched as given (slash and query untouched); only the
        cache is keyed by normalize_url.
        """
        key = normalize_url(url)
        target = with_scheme(url)

        if self.cache is not None:
            hit = self.cache.get(key, max_age_s=self.cache_ttl_s)
            if hit is not None:
                logger.debug("og cache hit", extra={"context": {"url": key}})
                return OgMetadata(**hit)

        html = self.fetch_html(target)
        meta = parse_og_html(html, key)
        logger.info(
            "scraped url preview",
            extra={"context": {"url": key, "has_title": meta.title is not None}},
        )

        if self.cache is not None:
            self.cache.put(key, meta.as_dict())
        return meta


def make_og_scraper(cache: OgCache | None = None) -> OgScraper:
    return OgScraper(
        cache=cache,
        timeout_s=config.SCRAPE_TIMEOUT_S,
        max_retries=config.SCRAPE_MAX_RETRIES,
        backoff_base_s=config.SCRAPE_BACKOFF_BASE_S,
        cache_ttl_s=config.OG_CACHE_TTL_S,
        user_agent=config.SCRAPE_USER_AGENT,
    )
