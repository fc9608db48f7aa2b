"""End-to-end tests for get_urls."""

import pytest

from geturls import InvalidPattern, NormalizeOptions, Options, URLExtractor, canonicalize, get_urls


class TestSchemeUrls:
    @pytest.mark.parametrize("strict", [False, True])
    def test_absolute_url_is_canonicalized(self, strict):
        text = "Check https://Example.com/Path out"
        assert get_urls(text, require_scheme_or_www=strict) == ["https://example.com/Path"]

    def test_bare_domain_depends_on_strictness(self):
        text = "go to example.com now"
        assert get_urls(text) == ["http://example.com/"]
        assert get_urls(text, require_scheme_or_www=True) == []

    def test_www_prefix_counts_in_strict_mode(self):
        assert get_urls("go to www.example.com now", require_scheme_or_www=True) == ["http://example.com/"]

    def test_www_prefix_without_known_suffix(self):
        assert get_urls("see www.example.notatld") == ["http://example.notatld/"]

    def test_strict_results_are_found_without_strictness(self):
        text = "a http://x.corp b www.portal.corp/login c example.com d //cdn.example.net/x"
        strict = get_urls(text, require_scheme_or_www=True)
        assert strict
        assert set(strict) <= set(get_urls(text))


class TestNormalization:
    def test_output_is_already_canonical(self):
        text = "HTTP://WWW.Example.com:80/a?b=2&a=1 and example.org/x#y and //cdn.example.net/lib.js"
        urls = get_urls(text)
        assert urls
        assert [canonicalize(u) for u in urls] == urls

    def test_differently_cased_duplicates_collapse(self):
        assert get_urls("HTTP://EXAMPLE.COM and http://example.com/") == ["http://example.com/"]

    def test_trailing_period(self):
        assert get_urls("Visit http://example.com.") == ["http://example.com/"]

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("see http://a.com/x%2e here", "http://a.com/x%2E"),
            ("see http://a.com/?q=a%2E here", "http://a.com/?q=a%2E"),
            ("see http://a.com/#top%2E here", "http://a.com/#top%2E"),
        ],
    )
    def test_escaped_final_dot_survives_recanonicalization(self, text, expected):
        urls = get_urls(text)
        assert urls == [expected]
        assert [canonicalize(u) for u in urls] == urls

    def test_malformed_candidate_is_dropped(self):
        text = "bad http://example.com:99999/ good http://ok.com"
        assert get_urls(text) == ["http://ok.com/"]

    def test_normalize_options_as_dict(self):
        urls = get_urls(
            "http://www.example.com/a/",
            normalize_options={"strip_www": False, "remove_trailing_slash": True},
        )
        assert urls == ["http://www.example.com/a"]


class TestRawMode:
    def test_trailing_period_is_trimmed(self):
        assert get_urls("Visit http://example.com.", normalize=False) == ["http://example.com"]

    def test_exact_duplicates_collapse_but_case_variants_do_not(self):
        text = "http://a.com http://a.com HTTP://A.COM"
        assert get_urls(text, normalize=False) == ["http://a.com", "HTTP://A.COM"]


class TestQueryString:
    def test_nested_url_is_extracted(self):
        urls = get_urls("https://x.com/go?url=https://y.com", extract_from_query_string=True)
        assert urls == ["https://x.com/go?url=https%3A%2F%2Fy.com", "https://y.com/"]

    def test_nested_url_raw_mode(self):
        urls = get_urls("https://x.com/go?url=https://y.com", extract_from_query_string=True, normalize=False)
        assert urls == ["https://x.com/go?url=https://y.com", "https://y.com"]

    def test_disabled_by_default(self):
        assert get_urls("https://x.com/go?url=https://y.com") == ["https://x.com/go?url=https%3A%2F%2Fy.com"]


class TestExclusion:
    def test_matching_urls_are_removed(self):
        assert get_urls("https://a.com https://b.com", exclude=[r"b\.com"]) == ["https://a.com/"]

    def test_raw_mode_exclusion(self):
        assert get_urls("https://a.com https://b.com", exclude=[r"b\.com"], normalize=False) == ["https://a.com"]

    def test_single_string_pattern(self):
        assert Options(exclude=r"b\.com").exclude == (r"b\.com",)

    def test_invalid_pattern_fails_the_call(self):
        with pytest.raises(InvalidPattern):
            get_urls("https://a.com", exclude=["[a-"])

    def test_invalid_pattern_fails_even_without_matches(self):
        with pytest.raises(InvalidPattern):
            get_urls("no links here", exclude=["("])


class TestOptions:
    def test_empty_text(self):
        assert get_urls("") == []

    def test_options_object(self):
        options = Options(normalize=False, normalize_options=NormalizeOptions(strip_www=False))
        assert get_urls("www.example.com.", options) == ["www.example.com"]

    def test_overrides_do_not_mutate_options(self):
        options = Options()
        get_urls("https://a.com", options, normalize=False)
        assert options.normalize is True

    def test_extractor_is_reusable(self):
        extractor = URLExtractor(Options(require_scheme_or_www=True))
        assert extractor.extract("http://a.com") == ["http://a.com/"]
        assert extractor.extract("b.com") == []

    def test_non_positive_timeout_is_rejected(self):
        with pytest.raises(ValueError):
            Options(match_timeout=0)

    def test_long_plain_text_before_url(self):
        text = "The quick brown fox jumps over the lazy dog. " * 25000 + " http://tail.com"
        assert get_urls(text) == ["http://tail.com/"]
