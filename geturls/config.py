"""Extraction configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

# Compiled patterns may come from either re or regex
PatternLike = Union[str, re.Pattern]

# Seconds a single match attempt may run before it is abandoned
DEFAULT_MATCH_TIMEOUT = 0.5


@dataclass(frozen=True)
class NormalizeOptions:
    """Canonicalization rules applied to each extracted URL."""

    default_protocol: str = "http"
    normalize_protocol: bool = True
    force_http: bool = False
    force_https: bool = False
    strip_authentication: bool = True
    strip_hash: bool = False
    strip_text_fragment: bool = True
    strip_www: bool = True
    # Strings name a parameter exactly, compiled patterns are searched.
    # True drops the whole query string.
    remove_query_parameters: Union[bool, Tuple[PatternLike, ...]] = (re.compile(r"^utm_\w+", re.IGNORECASE),)
    keep_query_parameters: Optional[Tuple[PatternLike, ...]] = None
    remove_trailing_slash: bool = False
    remove_single_slash: bool = False
    # True uses the default index pattern
    remove_directory_index: Union[bool, Tuple[PatternLike, ...]] = False
    remove_explicit_port: bool = False
    sort_query_parameters: bool = True
    strip_protocol: bool = False

    def __post_init__(self) -> None:
        if self.force_http and self.force_https:
            raise ValueError("The force_http and force_https options cannot be used together")
        for name in ("remove_query_parameters", "keep_query_parameters", "remove_directory_index"):
            value = getattr(self, name)
            if isinstance(value, list):
                object.__setattr__(self, name, tuple(value))


@dataclass(frozen=True)
class Options:
    """Configuration for a single get_urls call."""

    require_scheme_or_www: bool = False
    extract_from_query_string: bool = False
    exclude: Tuple[PatternLike, ...] = ()
    normalize: bool = True
    normalize_options: NormalizeOptions = field(default_factory=NormalizeOptions)
    match_timeout: float = DEFAULT_MATCH_TIMEOUT

    def __post_init__(self) -> None:
        if isinstance(self.exclude, str) or hasattr(self.exclude, "pattern"):
            object.__setattr__(self, "exclude", (self.exclude,))
        elif not isinstance(self.exclude, tuple):
            object.__setattr__(self, "exclude", tuple(self.exclude or ()))
        if isinstance(self.normalize_options, dict):
            object.__setattr__(self, "normalize_options", NormalizeOptions(**self.normalize_options))
        if self.match_timeout <= 0:
            raise ValueError("match_timeout must be positive")
