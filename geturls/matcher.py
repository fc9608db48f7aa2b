"""URL matching with a per-attempt time bound."""

from __future__ import annotations

import logging
from typing import List, Optional

import regex
import tldextract

from .config import DEFAULT_MATCH_TIMEOUT
from .models import RawMatch

logger = logging.getLogger(__name__)

_IPV4_OCTET = r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
_IPV4 = rf"(?:{_IPV4_OCTET}\.){{3}}{_IPV4_OCTET}(?![\w-])"
_IPV6 = r"\[[0-9a-f.]*:[0-9a-f:.]*\]"

_LABEL = r"[a-z0-9\u00a1-\uffff](?:[a-z0-9\u00a1-\uffff_-]{0,61}[a-z0-9\u00a1-\uffff])?"
_TLD = r"(?:[a-z\u00a1-\uffff]{2,63}|xn--[a-z0-9-]{1,59})"
_HOSTNAME = rf"(?:{_LABEL}\.)+{_TLD}(?![a-z0-9\u00a1-\uffff_-])\.?"

_SCHEME = r"(?P<scheme>(?:[a-z][a-z0-9+.-]*:)?//)"
_AUTH = r"(?:[^\s/?#@:]+(?::[^\s/?#@]*)?@)?"
_PREFIX = rf"(?:{_SCHEME}{_AUTH}|(?P<www>www\.))"

_PORT = r"(?::\d{2,5})?"
# Parentheses are allowed in the path only when balanced
_PATH = r"""(?:[/?#](?:[^\s"'<>()]|\([^\s"'<>()]*\))*(?<![,;:!]))?"""

_HOST = rf"(?P<host>localhost|{_IPV4}|{_IPV6}|{_HOSTNAME})"


def _build(strict: bool) -> regex.Pattern:
    prefix = _PREFIX if strict else f"{_PREFIX}?"
    return regex.compile(rf"(?<![\w@.-]){prefix}{_HOST}{_PORT}{_PATH}", regex.IGNORECASE)


_WHITESPACE_RE = regex.compile(r"\s")
# Characters searched per timed attempt; windows end at whitespace, which no URL contains
_WINDOW = 64 * 1024

_EXPLICIT_SCHEME_RE = regex.compile(r"^[a-z][a-z0-9+.-]*://", regex.IGNORECASE)
_STRICT_RE = _build(strict=True)
_LOOSE_RE = _build(strict=False)

# Offline extractor: bundled Public Suffix List snapshot, no cache on disk
_suffixes = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def has_explicit_scheme(url: str) -> bool:
    """Return True if *url* starts with `scheme://`."""
    return _EXPLICIT_SCHEME_RE.match(url) is not None


def url_pattern(strict: bool) -> regex.Pattern:
    """Return the compiled URL grammar for the given mode."""
    return _STRICT_RE if strict else _LOOSE_RE


def has_public_suffix(host: str) -> bool:
    """Return True if *host* ends in a known public suffix under a registrable name."""
    parts = _suffixes(host.rstrip("."))
    return bool(parts.suffix and parts.domain)


def _accept(match: regex.Match, strict: bool) -> bool:
    if strict or match.group("scheme") is not None or match.group("www") is not None:
        return True
    host = match.group("host")
    if host.lower() == "localhost" or host.startswith("["):
        return False
    if regex.fullmatch(_IPV4, host):
        return True
    return has_public_suffix(host)


def _window_end(text: str, pos: int) -> int:
    end = pos + _WINDOW
    if end >= len(text):
        return len(text)
    ws = _WHITESPACE_RE.search(text, end)
    return ws.start() if ws else len(text)


def find_matches(
    text: str,
    strict: bool = False,
    timeout: float = DEFAULT_MATCH_TIMEOUT,
) -> List[RawMatch]:
    """Scan *text* left to right and return every URL-shaped substring.

    With *strict* a match must start with a scheme (or ``//``) or ``www.``;
    otherwise bare hostnames count too when they end in a public suffix.
    The text is searched in whitespace-delimited windows of bounded size.
    A search attempt is abandoned after *timeout* seconds; the scan then
    stops and the matches found so far are returned.
    """
    pattern = url_pattern(strict)
    matches: List[RawMatch] = []
    pos = 0
    while pos < len(text):
        end = _window_end(text, pos)
        try:
            m = pattern.search(text, pos, end, timeout=timeout)
        except TimeoutError:
            logger.warning("URL match timed out in window %d-%d; stopping scan", pos, end)
            break
        if m is None:
            pos = end
            continue
        pos = m.end() if m.end() > m.start() else m.start() + 1
        if not _accept(m, strict):
            logger.debug("Rejected candidate without known suffix: %s", m.group(0))
            continue
        matches.append(RawMatch(m.group(0), m.start(), m.group("scheme") is not None))
    return matches


def is_url(value: str, strict: bool = False, timeout: float = DEFAULT_MATCH_TIMEOUT) -> bool:
    """Return True if the whole of *value* is a URL."""
    try:
        m: Optional[regex.Match] = url_pattern(strict).fullmatch(value, timeout=timeout)
    except TimeoutError:
        logger.warning("Exact URL match timed out for value of length %d", len(value))
        return False
    return m is not None and _accept(m, strict)
