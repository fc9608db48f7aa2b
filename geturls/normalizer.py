"""URL canonicalization: scheme and host casing, ports, slashes, query cleanup."""

from __future__ import annotations

import ipaddress
import logging
from typing import List, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, quote, quote_plus, urlencode, urlsplit, urlunsplit

import regex

from .config import NormalizeOptions, PatternLike
from .errors import MalformedUrl
from .matcher import has_explicit_scheme

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21, "ws": 80, "wss": 443}
_SPECIAL_SCHEMES = frozenset(_DEFAULT_PORTS)

_UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")

_VIEW_SOURCE_RE = regex.compile(r"^view-source:", regex.IGNORECASE)
_RELATIVE_PATH_RE = regex.compile(r"^\.*/(?!/)")
_FORBIDDEN_HOST_RE = regex.compile(r"[\s#%/:<>?@\[\\\]^|]")
# Slashes following an embedded scheme (e.g. /redirect/https://x) are kept
_DUPLICATE_SLASHES_RE = regex.compile(r"(?<!\b[a-z][a-z\d+\-.]{1,50}:)/{2,}", regex.IGNORECASE)
_PERCENT_RE = regex.compile(r"%([0-9a-fA-F]{2})")
_TEXT_FRAGMENT_RE = regex.compile(r":~:text.*$", regex.IGNORECASE)
_WWW_RE = regex.compile(r"^www\.(?!www\.)[a-z\-\d]{1,63}\.[a-z.\-\d]{2,63}$")
_DIRECTORY_INDEX_RE = regex.compile(r"^index\.[a-z]+$")

_PATH_SAFE = "/:@!$&'()*+,;=%[]^|~\\"
_QUERY_SAFE = "/?:@!$&'()*+,;=%[]^|~\\`{}"
_FRAGMENT_SAFE = "/?:@!$&'()*+,;=%[]^|~\\#{}"


def clean_match(raw: str) -> str:
    """Trim whitespace and sentence-ending dots from a matched substring."""
    return raw.strip().rstrip(".")


def _test_name(name: str, filters: Sequence[PatternLike]) -> bool:
    for f in filters:
        if isinstance(f, str):
            if f == name:
                return True
        elif f.search(name):
            return True
    return False


def _normalize_escapes(part: str) -> str:
    def repl(m: regex.Match) -> str:
        ch = chr(int(m.group(1), 16))
        return ch if ch in _UNRESERVED else "%" + m.group(1).upper()

    return _PERCENT_RE.sub(repl, part)


def _encode_host(host: str, url: str) -> str:
    host = host.rstrip(".")
    if not host or ".." in host:
        raise MalformedUrl(url, "empty host label")
    if host.startswith("[") or ":" in host:
        try:
            return "[" + ipaddress.IPv6Address(host.strip("[]")).compressed + "]"
        except ValueError as exc:
            raise MalformedUrl(url, str(exc)) from exc
    if _FORBIDDEN_HOST_RE.search(host):
        raise MalformedUrl(url, "forbidden host character")
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise MalformedUrl(url, f"invalid international hostname: {exc}") from exc
    return host.lower()


def _clean_query(query: str, options: NormalizeOptions) -> str:
    if options.remove_query_parameters is True:
        return ""
    pairs: List[Tuple[str, str]] = parse_qsl(query, keep_blank_values=True)
    changed = False
    if options.remove_query_parameters:
        kept = [(k, v) for k, v in pairs if not _test_name(k, options.remove_query_parameters)]
        changed = len(kept) != len(pairs)
        pairs = kept
    if options.keep_query_parameters is not None:
        kept = [(k, v) for k, v in pairs if _test_name(k, options.keep_query_parameters)]
        changed = changed or len(kept) != len(pairs)
        pairs = kept
    if options.sort_query_parameters:
        pairs = sorted(pairs, key=lambda kv: kv[0])
        changed = True
    if not changed:
        return _normalize_escapes(quote(query, safe=_QUERY_SAFE))
    return urlencode(pairs, quote_via=quote_plus, safe="*")


def _remove_dot_segments(path: str) -> str:
    output: List[str] = []
    for segment in path.split("/"):
        if segment == "..":
            if len(output) > 1:
                output.pop()
        elif segment != ".":
            output.append(segment)
    if path.endswith(("/.", "/..")):
        output.append("")
    return "/".join(output)


def _remove_directory_index(path: str, index: Union[bool, Tuple[PatternLike, ...]]) -> str:
    filters: Sequence[PatternLike] = (_DIRECTORY_INDEX_RE,) if index is True else index
    components = path.split("/")
    if len(components) > 1 and _test_name(components[-1], filters):
        return "/".join(components[:-1]) + "/"
    return path


def canonicalize(raw: str, options: Optional[NormalizeOptions] = None) -> str:
    """Return the canonical form of a matched URL.

    Raises MalformedUrl if the trimmed input cannot be parsed as an
    absolute URL.
    """
    options = options or NormalizeOptions()
    url = clean_match(raw)
    if not url:
        raise MalformedUrl(raw, "empty")
    if _VIEW_SOURCE_RE.match(url):
        raise MalformedUrl(url, "view-source URLs are not supported")
    if _RELATIVE_PATH_RE.match(url):
        raise MalformedUrl(url, "relative path")

    default_protocol = options.default_protocol.rstrip(":").lower()
    keep_relative = url.startswith("//") and not options.normalize_protocol
    if url.startswith("//"):
        url = f"{default_protocol}:{url}"
    elif not has_explicit_scheme(url):
        url = f"{default_protocol}://{url}"

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise MalformedUrl(url, str(exc)) from exc
    if not parts.hostname:
        raise MalformedUrl(url, "missing host")

    scheme = parts.scheme
    if options.force_http and scheme == "https":
        scheme = "http"
    elif options.force_https and scheme == "http":
        scheme = "https"

    userinfo, at, hostport = parts.netloc.rpartition("@")
    if hostport.startswith("["):
        host = hostport[:hostport.find("]") + 1]
    else:
        host = hostport.split(":", 1)[0]
    host = _encode_host(host, url)
    if options.strip_www and _WWW_RE.match(host):
        host = host[4:]
    if options.remove_explicit_port or port == _DEFAULT_PORTS.get(scheme):
        port = None

    netloc = host if port is None else f"{host}:{port}"
    if at and userinfo and not options.strip_authentication:
        netloc = f"{userinfo}@{netloc}"

    path = _DUPLICATE_SLASHES_RE.sub("/", parts.path)
    path = _normalize_escapes(quote(path, safe=_PATH_SAFE))
    if path.startswith("/"):
        path = _remove_dot_segments(path)
    if options.remove_directory_index:
        path = _remove_directory_index(path, options.remove_directory_index)
    if options.remove_trailing_slash:
        path = path[:-1] if path.endswith("/") else path
    if not path and scheme in _SPECIAL_SCHEMES:
        path = "/"

    query = _clean_query(parts.query, options) if parts.query else ""

    fragment = parts.fragment
    if options.strip_hash:
        fragment = ""
    elif options.strip_text_fragment:
        fragment = _TEXT_FRAGMENT_RE.sub("", fragment)
    fragment = _normalize_escapes(quote(fragment, safe=_FRAGMENT_SAFE))

    result = urlunsplit((scheme, netloc, path, query, fragment))
    if options.remove_single_slash and not fragment and path == "/" and not query:
        result = result[:-1]
    if options.strip_protocol:
        result = regex.sub(r"^(?:https?:)?//", "", result)
    elif keep_relative:
        result = result[len(scheme) + 1:]
    # A final literal dot stays escaped so clean_match leaves the result intact
    if result.endswith("."):
        result = result[:-1] + "%2E"
    return result


def try_canonicalize(raw: str, options: Optional[NormalizeOptions] = None) -> Optional[str]:
    """Like canonicalize, but return None for malformed input."""
    try:
        return canonicalize(raw, options)
    except MalformedUrl as exc:
        logger.debug("Dropping candidate: %s", exc)
        return None
