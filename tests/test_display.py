"""
Tests for card view-models.
"""

from tripmate.display import (
    build_card,
    build_cards,
    date_range_text,
    head_count,
    image_ids_for,
)
from tripmate.reconcile import reconcile


class TestDateRangeText:
    """Test schedule text."""

    def test_inclusive_day_count(self):
        assert date_range_text("2025-06-01", "2025-06-04") == "2025-06-01 ~ 2025-06-04 (4일)"

    def test_same_day(self):
        assert date_range_text("2025-06-01", "2025-06-01") == "2025-06-01 ~ 2025-06-01 (1일)"

    def test_missing_date(self):
        assert date_range_text("2025-06-01", "") == "일정 미정"
        assert date_range_text(None, "2025-06-01") == "일정 미정"

    def test_reversed_range(self):
        assert date_range_text("2025-06-05", "2025-06-01") == "2025-06-05 ~ 2025-06-01"

    def test_timestamps(self):
        text = date_range_text("2025-06-01T00:00:00.000Z", "2025-06-02T00:00:00.000Z")
        assert text.endswith("(2일)")


class TestBuildCard:
    """Test single card construction."""

    def test_head_count(self, post_catalog):
        assert head_count(post_catalog[0]) == 2
        assert head_count({"participations": None}) == 1

    def test_card_fields(self, candidates, post_catalog):
        entries = reconcile(candidates, post_catalog)
        card = build_card(entries[1], 2, {"img-p1": "https://cdn/p1.jpg"})
        assert card["rank"] == 2
        assert card["post_id"] == "p1"
        assert card["keywords"] == ["맛집/먹방 중심", "여유로운 일정"]
        assert card["date_text"] == "2025-06-01 ~ 2025-06-04 (4일)"
        assert card["head_count"] == 2
        assert card["max_participants"] == 4
        assert card["cover_image_url"] == "https://cdn/p1.jpg"
        assert card["writer_image_url"] is None
        assert card["score"] == 64
        assert card["show_keywords"] is True

    def test_no_keywords_section_without_overlap(self):
        entry = {"post": {"id": "p"}, "info": {"score": 50, "tendency": None, "style": None}}
        card = build_card(entry, 1)
        assert card["show_keywords"] is False
        assert card["vector_score"] is None

    def test_empty_list_overlap_hides_section(self):
        entry = {"post": {"id": "p"}, "info": {"score": 50, "tendency": [], "style": []}}
        assert build_card(entry, 1)["show_keywords"] is False

    def test_display_clamp(self):
        entry = {"post": {"id": "p"}, "info": {"score": 340, "vector_score": -12}}
        card = build_card(entry, 1)
        assert card["score"] == 100
        assert card["vector_score"] == 0


class TestBuildCards:
    """Test card lists."""

    def test_ranks_follow_entry_order(self, candidates, post_catalog):
        cards = build_cards(reconcile(candidates, post_catalog))
        assert [(c["rank"], c["post_id"]) for c in cards] == [(1, "p2"), (2, "p1"), (3, "p4")]

    def test_image_ids(self):
        entries = [
            {"post": {"id": "a", "imageId": "i1", "writer": {"profile": {"profileImageId": "w1"}}}, "info": {}},
            {"post": {"id": "b", "imageId": "i1"}, "info": {}},
            {"post": {"id": "c", "writer": {"profile": {"profileImageId": "w2"}}}, "info": {}},
        ]
        assert image_ids_for(entries) == ["i1", "w1", "w2"]
