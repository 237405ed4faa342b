"""
Overlap keyword normalization.

The matching backend sends overlap keywords as a bare string, a keyword
object, an array mixing both, or nothing at all. Everything that inspects
that raw shape lives here.
"""

from typing import Any, List, Optional

TEXT_FIELDS = ("label", "value", "name")

# Backend keyword enum -> Korean display label
KEYWORD_MAP = {
    "CITY_NIGHT_VIBE": "도심/야경 위주",
    "NATURE_VIBE": "자연 위주",
    "BEACH_RESORT": "바다/리조트 휴양",
    "LOCAL_TOWN_SLOW": "로컬 동네/시골 감성",
    "FOOD_TOUR": "맛집/먹방 중심",
    "CAFE_PHOTO": "카페/포토 스팟 탐방",
    "LIGHT_OUTDOOR": "가벼운 야외활동",
    "HARD_OUTDOOR": "강한 액티비티",
    "CULTURE_FESTIVAL": "전시/유적/축제/공연 중심",
    "PACE_CHILL": "여유로운 일정",
    "PACE_TIGHT": "빡빡한 일정",
    "BUDGET_FRIENDLY_TRIP": "가성비 중시",
    "COMFORT_HEALING_TRIP": "편안한 휴양/힐링 중시",
    "SMALL_CHILL_CREW": "소수/조용한 동행 선호",
    "ACTIVE_SOCIAL_CREW": "활발/수다 많은 동행 선호",
}


def _to_text(element: Any) -> str:
    if not element:
        return ""
    if isinstance(element, str):
        return element
    if isinstance(element, dict):
        for field in TEXT_FIELDS:
            if isinstance(element.get(field), str):
                return element[field]
        return str(element)
    if isinstance(element, bool):
        return "true"
    if isinstance(element, float) and element.is_integer():
        return str(int(element))
    return str(element)


def normalize_overlap(value: Any) -> List[str]:
    """
    Canonicalize an overlap value into an ordered list of display strings.

    A non-list value counts as a single element. Objects contribute their
    first string among label/value/name. Results are trimmed and empties
    dropped; order and duplicates are kept as received.
    """
    if not value:
        return []
    elements = value if isinstance(value, (list, tuple)) else [value]
    texts = (_to_text(element).strip() for element in elements)
    return [text for text in texts if text]


def join_overlap(value: Any) -> Optional[str]:
    """Comma-joined overlap text, or None when there is nothing to show."""
    texts = normalize_overlap(value)
    if not texts:
        return None
    return ", ".join(texts)


def translate_keyword(keyword: str) -> str:
    return KEYWORD_MAP.get(keyword.upper(), keyword)


def translate_keywords(value: Any) -> List[str]:
    """Normalize a keyword value, then map known enum names to labels."""
    return [translate_keyword(keyword) for keyword in normalize_overlap(value)]
