"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest


@pytest.fixture
def post_catalog() -> List[Dict[str, Any]]:
    """Posts exposing their writer through different identity fields."""
    return [
        {
            "id": "p1",
            "writerId": "u1",
            "title": "제주 3박 4일 동행",
            "location": "제주",
            "status": "모집중",
            "createdAt": "2025-05-01T09:00:00Z",
            "startDate": "2025-06-01",
            "endDate": "2025-06-04",
            "keywords": ["FOOD_TOUR", "PACE_CHILL"],
            "maxParticipants": 4,
            "participations": [
                {"id": "r1", "status": "승인"},
                {"id": "r2", "status": "대기중"},
            ],
            "imageId": "img-p1",
        },
        {
            "id": "p2",
            "writer": {"id": "u2", "email": "u2@example.com"},
            "title": "부산 맛집 투어",
            "location": "부산",
            "status": "모집중",
            "createdAt": "2025-05-03T09:00:00Z",
        },
        {
            "id": "p3",
            "writerProfile": {"id": "u3", "nickname": "여행자"},
            "title": "강릉 바다",
            "location": "강릉",
            "status": "모집완료",
            "createdAt": "2025-05-02T09:00:00Z",
        },
        {
            "id": "p4",
            "writerId": "u1",
            "title": "제주 한라산",
            "location": "제주",
            "status": "모집중",
            "createdAt": "2025-04-20T09:00:00Z",
        },
    ]


@pytest.fixture
def candidates() -> List[Dict[str, Any]]:
    """Candidates resolved through the catalog (no embedded posts)."""
    return [
        {
            "userId": "u2",
            "score": 0.82,
            "vectorScore": 0.61,
            "overlappingTendencies": ["외향적"],
            "overlappingTravelStyles": [{"label": "FOODIE"}, "NATURE"],
        },
        {
            "userId": "u1",
            "score": 64,
            "overlappingTendencies": "내향적",
        },
        {
            "userId": "u9",
            "score": 0.99,
        },
    ]


@pytest.fixture
def embedded_candidates() -> List[Dict[str, Any]]:
    return [
        {"userId": "u1", "score": 0.9, "recruitingPosts": [{"id": "p1"}]},
        {"userId": "u2", "score": 85, "recruitingPosts": [{"id": "p1"}]},
    ]


@pytest.fixture
def candidates_file(tmp_path, candidates) -> Path:
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps({"matches": candidates}, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def posts_file(tmp_path, post_catalog) -> Path:
    path = tmp_path / "posts.json"
    path.write_text(json.dumps(post_catalog, ensure_ascii=False), encoding="utf-8")
    return path
