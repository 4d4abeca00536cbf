"""Tests for the on-page HTML checks."""

from __future__ import annotations

import pytest

from conftest import build_page, make_page
from seo_scanner.analyzers import (
    HTML_CHECKS,
    check_canonical,
    check_content_length,
    check_h1,
    check_image_alts,
    check_links,
    check_meta_description,
    check_open_graph,
    check_structured_data,
    check_title,
    check_viewport,
)
from seo_scanner.analyzers.content import visible_text, word_count
from seo_scanner.analyzers.links import is_internal_link


def _only(issues):
    assert len(issues) == 1
    return issues[0]


class TestTitle:
    def test_missing(self):
        issue = _only(check_title(make_page(build_page(title=None))))
        assert issue.severity == "critical"
        assert issue.title == "Missing page title"
        assert issue.url == "https://example.com"

    def test_empty_counts_as_missing(self):
        assert _only(check_title(make_page(build_page(title="   ")))).severity == "critical"

    @pytest.mark.parametrize("length", [30, 55, 70])
    def test_in_range_passes(self, length):
        assert check_title(make_page(build_page(title="A" * length))) == []

    def test_29_chars_is_too_short(self):
        issue = _only(check_title(make_page(build_page(title="A" * 29))))
        assert issue.severity == "medium"
        assert issue.title == "Page title too short"
        assert issue.evidence["length"] == 29

    def test_71_chars_is_too_long(self):
        issue = _only(check_title(make_page(build_page(title="A" * 71))))
        assert issue.severity == "low"
        assert issue.title == "Page title too long"


class TestMetaDescription:
    def test_missing(self):
        issue = _only(check_meta_description(make_page(build_page(description=None))))
        assert issue.severity == "high"
        assert issue.title == "Missing meta description"

    def test_boundaries(self):
        assert check_meta_description(make_page(build_page(description="d" * 70))) == []
        assert check_meta_description(make_page(build_page(description="d" * 170))) == []
        assert _only(check_meta_description(make_page(build_page(description="d" * 69)))).severity == "medium"
        assert _only(check_meta_description(make_page(build_page(description="d" * 171)))).severity == "low"

    def test_content_before_name(self):
        html = '<html><head><meta content="' + "d" * 100 + '" name="description"></head></html>'
        assert check_meta_description(make_page(html)) == []


class TestViewportAndCanonical:
    def test_viewport_missing(self):
        issue = _only(check_viewport(make_page(build_page(viewport=False))))
        assert issue.severity == "high"
        assert issue.category == "mobile"

    def test_canonical_missing(self):
        issue = _only(check_canonical(make_page(build_page(canonical=False))))
        assert issue.severity == "medium"
        assert issue.title == "Missing canonical URL"

    def test_canonical_with_href_first(self):
        html = '<html><head><link href="https://example.com/" rel="canonical"></head></html>'
        assert check_canonical(make_page(html)) == []


class TestOpenGraph:
    def test_all_present(self):
        assert check_open_graph(make_page(build_page())) == []

    def test_missing_title_is_medium(self):
        issue = _only(check_open_graph(make_page(build_page(og=("og:description", "og:image")))))
        assert issue.severity == "medium"
        assert issue.evidence["missing"] == ["og:title"]

    def test_missing_image_only_is_low(self):
        issue = _only(check_open_graph(make_page(build_page(og=("og:title", "og:description")))))
        assert issue.severity == "low"
        assert issue.evidence["missing"] == ["og:image"]


class TestH1:
    def test_none(self):
        issue = _only(check_h1(make_page(build_page(h1_count=0))))
        assert issue.severity == "high"

    def test_exactly_one(self):
        assert check_h1(make_page(build_page(h1_count=1))) == []

    def test_three(self):
        issue = _only(check_h1(make_page(build_page(h1_count=3))))
        assert issue.severity == "medium"
        assert issue.title == "Multiple H1 headings found"
        assert issue.evidence == {"h1Count": 3}


class TestStructuredData:
    def test_jsonld(self):
        assert check_structured_data(make_page(build_page(jsonld=True))) == []

    def test_microdata(self):
        html = build_page(jsonld=False).replace("<body>", '<body><div itemscope itemtype="https://schema.org/Organization">')
        assert check_structured_data(make_page(html)) == []

    def test_none(self):
        issue = _only(check_structured_data(make_page(build_page(jsonld=False))))
        assert issue.category == "schema"
        assert issue.severity == "medium"


class TestContentLength:
    @staticmethod
    def _page(words: int, extra: str = "") -> str:
        return f"<html><body>{extra}<p>{' '.join(['word'] * words)}</p></body></html>"

    def test_99_words_is_very_thin(self):
        issue = _only(check_content_length(make_page(self._page(99))))
        assert issue.severity == "high"
        assert issue.evidence["wordCount"] == 99

    def test_100_words_is_not_high(self):
        issue = _only(check_content_length(make_page(self._page(100))))
        assert issue.severity == "medium"

    def test_300_words_passes(self):
        assert check_content_length(make_page(self._page(300))) == []

    def test_script_and_style_are_ignored(self):
        extra = "<script>var a = 'one two three four';</script><style>p { color: red; }</style><!-- a b c -->"
        issue = _only(check_content_length(make_page(self._page(10, extra))))
        assert issue.evidence["wordCount"] == 10

    def test_word_count_helpers(self):
        page = make_page("<html><body><p>alpha\n beta</p><div>gamma</div></body></html>")
        assert word_count(visible_text(page.soup)) == 3
        assert word_count("   ") == 0


class TestImageAlts:
    def test_no_images(self):
        assert check_image_alts(make_page(build_page(images=""))) == []

    def test_empty_alt_is_not_missing(self):
        assert check_image_alts(make_page(build_page(images='<img src="a.png" alt="">'))) == []

    def test_five_missing_is_medium(self):
        issue = _only(check_image_alts(make_page(build_page(images='<img src="a.png">' * 5))))
        assert issue.severity == "medium"
        assert issue.evidence["missingAlt"] == 5

    def test_six_missing_is_high(self):
        images = '<img src="a.png">' * 6 + '<img src="b.png" alt="b">'
        issue = _only(check_image_alts(make_page(build_page(images=images))))
        assert issue.severity == "high"
        assert issue.evidence == {"totalImages": 7, "missingAlt": 6, "emptyAlt": 0}


class TestLinks:
    @pytest.mark.parametrize("href", [
        "/about",
        "about.html",
        "#top",
        "mailto:hi@example.com",
        "tel:+15551234",
        "https://example.com/contact",
        "https://www.example.com/blog",
        "http://[broken",
    ])
    def test_internal(self, href):
        assert is_internal_link(href, "https://example.com")

    @pytest.mark.parametrize("href", [
        "https://google.com/",
        "//cdn.other.net/x",
        "https://sub.example.com/",
    ])
    def test_external(self, href):
        assert not is_internal_link(href, "https://example.com")

    def test_www_page_host_matches_bare_links(self):
        assert is_internal_link("https://example.com/x", "https://www.example.com")

    def test_balanced_links_pass(self):
        assert check_links(make_page(build_page())) == []

    def test_only_external_links(self):
        links = '<a href="https://google.com">g</a><a href="https://bing.com">b</a>'
        issue = _only(check_links(make_page(build_page(links=links))))
        assert issue.severity == "medium"
        assert issue.evidence["totalLinks"] == 2

    def test_only_internal_links(self):
        issue = _only(check_links(make_page(build_page(links='<a href="/a">a</a><a href="/b">b</a>'))))
        assert issue.severity == "info"
        assert issue.title == "No external links found"

    def test_no_links(self):
        assert check_links(make_page(build_page(links=""))) == []


def test_checks_are_idempotent():
    html = build_page(title="short", description=None, h1_count=2, images='<img src="x.png">', jsonld=False)
    page = make_page(html)
    first = [check(page) for check in HTML_CHECKS]
    second = [check(make_page(html)) for check in HTML_CHECKS]
    assert first == second
    assert first == [check(page) for check in HTML_CHECKS]


def test_healthy_page_passes_every_check():
    page = make_page(build_page())
    assert [issue for check in HTML_CHECKS for issue in check(page)] == []


class TestAttributeCase:
    HEAD = (
        "<title>" + "T" * 40 + "</title>"
        '<meta NAME="Description" content="' + "d" * 100 + '">'
        '<meta name="Viewport" content="width=device-width, initial-scale=1">'
        '<meta property="OG:title" content="Acme">'
        '<meta property="OG:Description" content="Acme">'
        '<meta property="og:IMAGE" content="https://example.com/og.png">'
        '<link rel="Canonical" href="https://example.com/">'
        '<script type="application/LD+JSON">{"@type": "Organization"}</script>'
    )

    def _page(self):
        return make_page(f"<html><head>{self.HEAD}</head><body><h1>Acme</h1></body></html>")

    @pytest.mark.parametrize("check", [
        check_meta_description,
        check_viewport,
        check_open_graph,
        check_canonical,
        check_structured_data,
    ])
    def test_mixed_case_attributes_are_recognised(self, check):
        assert check(self._page()) == []

    def test_missing_og_is_reported_lower_case(self):
        page = make_page('<html><head><meta property="OG:Title" content="Acme"></head></html>')
        issue = _only(check_open_graph(page))
        assert issue.evidence["missing"] == ["og:description", "og:image"]
