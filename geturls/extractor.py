"""Extraction pipeline: match, canonicalize, expand query values, exclude."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, List, Optional

from .config import Options
from .filters import URLFilter
from .matcher import find_matches
from .models import OrderedUrlSet, RawMatch
from .normalizer import clean_match, try_canonicalize
from .query import find_urls_in_query

logger = logging.getLogger(__name__)


class URLExtractor:
    """Pull URLs out of free-form text according to a fixed set of options."""

    def __init__(self, options: Optional[Options] = None) -> None:
        self._options = options or Options()
        # Invalid patterns raise here, before any matching
        self._filter: Optional[URLFilter] = None
        if self._options.exclude:
            self._filter = URLFilter(self._options.exclude, self._options.match_timeout)

    @property
    def options(self) -> Options:
        return self._options

    def extract(self, text: str) -> List[str]:
        opts = self._options
        matches = find_matches(text, strict=opts.require_scheme_or_www, timeout=opts.match_timeout)
        logger.debug("Found %d raw matches", len(matches))

        if opts.normalize:
            urls = self._normalized(matches)
        else:
            urls = self._trimmed(matches)

        if self._filter is None:
            return urls.to_list()
        return self._filter.filter(urls)

    def _candidates(self, match: RawMatch) -> Iterable[str]:
        yield match.text
        if self._options.extract_from_query_string:
            yield from find_urls_in_query(match.text, timeout=self._options.match_timeout)

    def _normalized(self, matches: List[RawMatch]) -> OrderedUrlSet:
        result = OrderedUrlSet()
        for match in matches:
            for candidate in self._candidates(match):
                url = try_canonicalize(candidate, self._options.normalize_options)
                if url is not None:
                    result.add(url)
        return result

    def _trimmed(self, matches: List[RawMatch]) -> OrderedUrlSet:
        result = OrderedUrlSet()
        for match in matches:
            for candidate in self._candidates(match):
                url = clean_match(candidate)
                if url:
                    result.add(url)
        return result


def get_urls(text: str, options: Optional[Options] = None, **overrides: Any) -> List[str]:
    """Return the unique URLs found in *text*, in order of first appearance.

    Keyword arguments override individual fields of *options*, e.g.
    ``get_urls(text, normalize=False, exclude=[r"example\\.com"])``.

    Raises InvalidPattern if an exclusion pattern is not a valid regular
    expression. Malformed candidates are dropped silently.
    """
    options = options or Options()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return URLExtractor(options).extract(text)
