"""
Tests for feed orchestration.
"""

import pytest

import tripmate.feed
from tripmate.feed import RecommendationFeed
from tripmate.logger import StructuredLogger


class StubClient:
    """Stands in for TripmateClient; records which endpoints were used."""

    def __init__(self, posts=None, matches=None, posts_error=None, matches_error=None, detail=None):
        self.posts = posts or []
        self.matches = matches or []
        self.posts_error = posts_error
        self.matches_error = matches_error
        self.detail = detail or []
        self.calls = []

    def get_posts(self):
        self.calls.append("posts")
        if self.posts_error:
            raise self.posts_error
        return self.posts

    def search_matches(self, limit=15):
        self.calls.append(("matches", limit))
        if self.matches_error:
            raise self.matches_error
        return self.matches

    def detail_search(self, location=None, start_date=None, end_date=None, keywords=None):
        self.calls.append(("detail", location, start_date, end_date, keywords))
        if not (location or start_date or end_date or keywords):
            raise ValueError("Provide at least one search condition")
        return self.detail


class TestRefresh:
    """Test the home feed refresh."""

    def test_reconciles_against_recruiting_catalog(self, post_catalog, candidates):
        client = StubClient(posts=post_catalog, matches=candidates)
        result = RecommendationFeed(client, match_limit=6).refresh("me")
        # p3 (모집완료) is not in the catalog; u1's posts come newest first
        assert [e["post"]["id"] for e in result["entries"]] == ["p2", "p1", "p4"]
        assert ("matches", 6) in client.calls

    def test_unauthenticated_skips_matching(self, post_catalog):
        client = StubClient(posts=post_catalog)
        result = RecommendationFeed(client).refresh(None)
        assert result["entries"] == []
        assert client.calls == []

    def test_failed_matches_give_empty_feed(self, post_catalog):
        client = StubClient(posts=post_catalog, matches_error=ValueError("matching request failed (500)"))
        result = RecommendationFeed(client).refresh("me")
        assert result["entries"] == []

    def test_failed_posts_still_use_embedded(self, embedded_candidates):
        client = StubClient(matches=embedded_candidates, posts_error=ValueError("posts request timed out"))
        result = RecommendationFeed(client).refresh("me")
        assert [e["post"]["id"] for e in result["entries"]] == ["p1"]
        assert result["entries"][0]["info"]["score"] == 90

    def test_display_limit(self, post_catalog, candidates):
        client = StubClient(posts=post_catalog, matches=candidates)
        result = RecommendationFeed(client, display_limit=1).refresh("me")
        assert len(result["entries"]) == 1

    def test_list_keyword_format(self, post_catalog, candidates):
        client = StubClient(posts=post_catalog, matches=candidates)
        result = RecommendationFeed(client, keyword_format="list").refresh("me")
        assert result["entries"][0]["info"]["tendency"] == ["외향적"]

    def test_records_reconciliation_metrics(self, monkeypatch, post_catalog, candidates):
        quiet = StructuredLogger(name="test-feed", enable_file=False, enable_console=False)
        monkeypatch.setattr(tripmate.feed, "logger", quiet)
        client = StubClient(posts=post_catalog, matches=candidates + candidates[:1])
        RecommendationFeed(client).refresh("me")
        assert quiet.metrics["candidates_processed"] == 4
        assert quiet.metrics["entries_emitted"] == 3
        assert quiet.metrics["duplicates_dropped"] == 1


class TestGenerations:
    """Test stale-result detection."""

    def test_latest_generation_is_current(self, post_catalog, candidates):
        feed = RecommendationFeed(StubClient(posts=post_catalog, matches=candidates))
        first = feed.refresh("me")
        second = feed.refresh("me")
        assert second["generation"] == first["generation"] + 1
        assert feed.is_current(second["generation"])
        assert not feed.is_current(first["generation"])

    def test_search_bumps_generation(self):
        feed = RecommendationFeed(StubClient(detail=[]))
        refreshed = feed.refresh(None)
        searched = feed.search("me", location="부산")
        assert not feed.is_current(refreshed["generation"])
        assert feed.is_current(searched["generation"])


class TestSearch:
    """Test detail search."""

    def test_embedded_results(self, embedded_candidates):
        client = StubClient(detail=embedded_candidates)
        result = RecommendationFeed(client).search("me", keywords=["FOOD_TOUR"])
        assert [e["post"]["id"] for e in result["entries"]] == ["p1"]
        assert "posts" not in client.calls

    def test_requires_condition(self):
        with pytest.raises(ValueError):
            RecommendationFeed(StubClient()).search("me")

    def test_unauthenticated(self):
        client = StubClient()
        assert RecommendationFeed(client).search(None, location="부산")["entries"] == []
        assert client.calls == []
