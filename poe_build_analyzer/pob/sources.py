"""Resolve paste links into PoB build codes.

Players usually share builds as pastebin.com or pobb.in links rather than raw
codes.  Both hosts expose the code verbatim on a "raw" URL, which is what gets
fetched here before handing the code to the decoder.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from ..errors import PasteFetchError
from ..models import NormalizedBuild
from .importer import decode_build_code
from .party import build_from_party_json

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": "poe-build-analyzer/0.1"}
REQUEST_TIMEOUT = 10
PASTEBIN_RAW = "https://pastebin.com/raw/{paste_id}"
POBB_RAW = "https://pobb.in/{paste_id}/raw"
POB_PARTY_API = "https://pob.party/api/v2/pastebin/{paste_id}"


def _paste_id(url: str) -> str:
    parts = [part for part in urlparse(url).path.split("/") if part]
    if not parts:
        raise ValueError(f"Could not extract a paste id from {url!r}")
    if parts[-1] == "raw" and len(parts) > 1:
        return parts[-2]
    return parts[-1]


def raw_paste_url(url: str) -> str:
    """Return the URL serving the raw build code behind a paste link."""

    cleaned = url.strip()
    parsed = urlparse(cleaned)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Unsupported paste URL: {url!r}")

    host = parsed.netloc.lower()
    if host.startswith("www."):
        host = host[4:]
    if host == "pastebin.com":
        return PASTEBIN_RAW.format(paste_id=_paste_id(cleaned))
    if host == "pobb.in":
        return POBB_RAW.format(paste_id=_paste_id(cleaned))
    return cleaned


def _get(url: str, session: Optional[requests.Session], timeout: float) -> requests.Response:
    getter = session.get if session is not None else requests.get
    logger.debug("GET %s", url)
    try:
        response = getter(url, headers=HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Failed to fetch %s: %s", url, exc)
        raise PasteFetchError(f"Could not fetch {url}: {exc}") from exc
    return response


def fetch_build_code(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> str:
    """Download the raw build code behind ``url``."""

    response = _get(raw_paste_url(url), session, timeout)
    code = response.text.strip()
    if not code:
        raise PasteFetchError(f"Paste at {url} is empty")
    return code


def fetch_party_build(
    url_or_id: str,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> NormalizedBuild:
    """Fetch a build through the pob.party API, which parses it server side."""

    cleaned = url_or_id.strip().rstrip("/")
    paste_id = cleaned.split("/")[-1]
    if not paste_id:
        raise ValueError("Could not extract POB code from URL.")

    response = _get(POB_PARTY_API.format(paste_id=paste_id), session, timeout)
    try:
        payload = response.json()
    except ValueError as exc:
        raise PasteFetchError("Invalid response from pob.party API.") from exc
    return build_from_party_json(payload)


def load_build(source: str, session: Optional[requests.Session] = None) -> NormalizedBuild:
    """Decode ``source``, fetching it first when it is a paste URL."""

    cleaned = source.strip()
    if cleaned.startswith(("http://", "https://")):
        cleaned = fetch_build_code(cleaned, session=session)
    return decode_build_code(cleaned)


__all__ = [
    "raw_paste_url",
    "fetch_build_code",
    "fetch_party_build",
    "load_build",
]
