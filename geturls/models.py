"""Data models for extraction results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List


@dataclass(frozen=True)
class RawMatch:
    """A URL-shaped substring found in the source text."""

    text: str
    position: int
    has_scheme: bool = False

    @property
    def end(self) -> int:
        return self.position + len(self.text)


class OrderedUrlSet:
    """Duplicate-free collection of URL strings that keeps insertion order."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._items: Dict[str, None] = {}
        self.update(urls)

    def add(self, url: str) -> None:
        self._items.setdefault(url, None)

    def update(self, urls: Iterable[str]) -> None:
        for url in urls:
            self.add(url)

    def discard(self, url: str) -> None:
        self._items.pop(url, None)

    def to_list(self) -> List[str]:
        return list(self._items)

    def __contains__(self, url: object) -> bool:
        return url in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"OrderedUrlSet({self.to_list()!r})"
