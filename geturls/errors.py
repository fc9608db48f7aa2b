"""Exceptions raised by the extraction pipeline."""

from __future__ import annotations


class GetUrlsError(Exception):
    """Base class for all geturls errors."""


class MalformedUrl(GetUrlsError, ValueError):
    """A matched substring could not be parsed as a URL."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        msg = f"Malformed URL: {url!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class InvalidPattern(GetUrlsError, ValueError):
    """An exclusion pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str = "") -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid exclusion pattern {pattern!r}: {reason}")
