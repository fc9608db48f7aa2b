"""URL filtering: drop candidates matching exclusion patterns."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence

import regex

from .config import DEFAULT_MATCH_TIMEOUT, PatternLike
from .errors import InvalidPattern
from .models import OrderedUrlSet

logger = logging.getLogger(__name__)

_SHARED_FLAGS = ("IGNORECASE", "MULTILINE", "DOTALL", "VERBOSE", "ASCII")


def compile_pattern(pattern: PatternLike) -> regex.Pattern:
    """Compile *pattern* with the regex engine so searches can be time-bounded.

    Patterns already compiled with ``re`` are recompiled with their flags.
    """
    if isinstance(pattern, regex.Pattern):
        return pattern
    if isinstance(pattern, str):
        source, flags = pattern, 0
    elif not isinstance(pattern, re.Pattern):
        raise InvalidPattern(
            repr(pattern), f"expected a string or compiled pattern, got {type(pattern).__name__}"
        )
    else:
        source, flags = pattern.pattern, 0
        for name in _SHARED_FLAGS:
            if pattern.flags & getattr(re, name):
                flags |= getattr(regex, name)
    try:
        return regex.compile(source, flags)
    except (regex.error, TypeError) as exc:
        raise InvalidPattern(str(source), str(exc)) from exc


class URLFilter:
    """Remove URLs that match any of a list of exclusion patterns."""

    def __init__(
        self,
        patterns: Optional[Sequence[PatternLike]] = None,
        timeout: float = DEFAULT_MATCH_TIMEOUT,
    ) -> None:
        self._patterns = [compile_pattern(p) for p in (patterns or [])]
        self._timeout = timeout

    def filter(self, urls: Iterable[str]) -> List[str]:
        """Return the URLs no pattern matches, in their original order."""
        result = OrderedUrlSet(urls)
        for pattern in self._patterns:
            for url in result:
                if self._matches(pattern, url):
                    logger.debug("Excluded %s (pattern %r)", url, pattern.pattern)
                    result.discard(url)
        return result.to_list()

    def _matches(self, pattern: regex.Pattern, url: str) -> bool:
        try:
            return pattern.search(url, timeout=self._timeout) is not None
        except TimeoutError:
            logger.warning("Exclusion pattern %r timed out on %s; keeping it", pattern.pattern, url)
            return False


def exclude(
    urls: Iterable[str],
    patterns: Sequence[PatternLike],
    timeout: float = DEFAULT_MATCH_TIMEOUT,
) -> List[str]:
    """Drop every URL matched by any of *patterns* (substring search).

    Raises InvalidPattern if a pattern string is not a valid regular
    expression.
    """
    return URLFilter(patterns, timeout).filter(urls)
