"""Tests for the ordered candidate set."""

from geturls.models import OrderedUrlSet


def test_keeps_first_insertion_order():
    urls = OrderedUrlSet(["b", "a", "b", "c", "a"])
    assert urls.to_list() == ["b", "a", "c"]
    assert len(urls) == 3
    assert "c" in urls


def test_discard_while_iterating():
    urls = OrderedUrlSet(["a", "b", "c"])
    for url in urls:
        if url != "b":
            urls.discard(url)
    assert urls.to_list() == ["b"]
    urls.discard("missing")
    assert list(urls) == ["b"]
