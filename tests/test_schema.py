"""
Tests for defensive record validation.
"""

from tripmate.schema import validate_candidate, validate_post


class TestValidateCandidate:
    """Test candidate problem reports."""

    def test_clean_candidate(self, candidates):
        assert validate_candidate(candidates[0]) == []

    def test_not_an_object(self):
        errors = validate_candidate("u1")
        assert len(errors) == 1
        assert "object" in errors[0]

    def test_missing_user_id(self):
        errors = validate_candidate({"score": 0.5})
        assert any("userId" in e for e in errors)

    def test_blank_user_id(self):
        errors = validate_candidate({"userId": "  ", "score": 0.5})
        assert any("userId" in e for e in errors)

    def test_missing_score(self):
        errors = validate_candidate({"userId": "u1"})
        assert any("score" in e.lower() for e in errors)

    def test_non_numeric_score(self):
        errors = validate_candidate({"userId": "u1", "score": 0.5, "vectorScore": "high"})
        assert any("vectorScore" in e for e in errors)

    def test_overlap_type(self):
        errors = validate_candidate({"userId": "u1", "score": 1, "overlappingTendencies": 7})
        assert any("overlappingTendencies" in e for e in errors)

    def test_embedded_posts_type(self):
        errors = validate_candidate({"userId": "u1", "score": 1, "recruitingPosts": {"id": "p"}})
        assert any("recruitingPosts" in e for e in errors)


class TestValidatePost:
    """Test post problem reports."""

    def test_catalog_posts_valid(self, post_catalog):
        for post in post_catalog:
            assert validate_post(post) == []

    def test_missing_id(self):
        errors = validate_post({"writerId": "u1"})
        assert any("id" in e for e in errors)

    def test_no_writer_identity(self):
        errors = validate_post({"id": "p1", "writer": {"email": "x"}})
        assert any("writer" in e for e in errors)

    def test_unknown_status(self):
        errors = validate_post({"id": "p1", "writerId": "u1", "status": "open"})
        assert any("status" in e.lower() for e in errors)

    def test_non_string_title(self):
        errors = validate_post({"id": "p1", "writerId": "u1", "title": 5})
        assert any("title" in e for e in errors)
