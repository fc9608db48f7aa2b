"""Recover URLs passed as query-string values (redirect targets and the like)."""

from __future__ import annotations

import logging
from typing import List
from urllib.parse import parse_qsl, urlsplit

from .config import DEFAULT_MATCH_TIMEOUT
from .matcher import has_explicit_scheme, is_url
from .models import OrderedUrlSet

logger = logging.getLogger(__name__)


def _absolute(url: str) -> str:
    url = url.strip()
    if url.startswith("//"):
        return "http:" + url
    if not has_explicit_scheme(url):
        return "http://" + url
    return url


def find_urls_in_query(url: str, timeout: float = DEFAULT_MATCH_TIMEOUT) -> List[str]:
    """Return the query parameter values of *url* that are themselves URLs.

    Values are returned as decoded from the query string, in order of first
    appearance. A *url* that cannot be parsed yields no values.
    """
    try:
        query = urlsplit(_absolute(url)).query
    except ValueError as exc:
        logger.debug("Cannot parse query string of %s: %s", url, exc)
        return []

    found = OrderedUrlSet()
    for _, value in parse_qsl(query, keep_blank_values=True):
        if value and is_url(value, timeout=timeout):
            found.add(value)
    return found.to_list()
