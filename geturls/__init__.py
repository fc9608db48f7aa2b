"""Extract, canonicalize and filter URLs found in free-form text."""

from .config import NormalizeOptions, Options
from .errors import GetUrlsError, InvalidPattern, MalformedUrl
from .extractor import URLExtractor, get_urls
from .filters import exclude
from .matcher import find_matches, is_url
from .normalizer import canonicalize, try_canonicalize
from .query import find_urls_in_query

__version__ = "1.0.0"

__all__ = [
    "GetUrlsError",
    "InvalidPattern",
    "MalformedUrl",
    "NormalizeOptions",
    "Options",
    "URLExtractor",
    "canonicalize",
    "exclude",
    "find_matches",
    "find_urls_in_query",
    "get_urls",
    "is_url",
    "try_canonicalize",
]
