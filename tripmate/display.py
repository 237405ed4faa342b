"""Card view-models for reconciled entries."""

from datetime import date
from typing import Any, Dict, List, Optional

from .normalize import translate_keywords
from .resolver import identity_of
from .scoring import clamp_percent

UNSCHEDULED_TEXT = "일정 미정"
APPROVED = "승인"


def _parse_day(value: Any) -> Optional[date]:
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def date_range_text(start_date: Any, end_date: Any) -> str:
    """'start ~ end (N일)' with an inclusive day count; no count for a reversed or unreadable range."""
    if not start_date or not end_date:
        return UNSCHEDULED_TEXT
    start = _parse_day(start_date)
    end = _parse_day(end_date)
    if start is None or end is None or start > end:
        return f"{start_date} ~ {end_date}"
    days = (end - start).days + 1
    return f"{start_date} ~ {end_date} ({days}일)"


def head_count(post: Dict[str, Any]) -> int:
    """Writer plus approved participants."""
    participations = post.get("participations") or []
    approved = [p for p in participations if isinstance(p, dict) and p.get("status") == APPROVED]
    return 1 + len(approved)


def writer_image_id(post: Dict[str, Any]) -> Optional[str]:
    writer = post.get("writer")
    if not isinstance(writer, dict) or not isinstance(writer.get("profile"), dict):
        return None
    return identity_of(writer["profile"].get("profileImageId"))


def _optional_clamp(value: Any) -> Optional[int]:
    return None if value is None else clamp_percent(value)


def build_card(
    entry: Dict[str, Any],
    rank: int,
    image_urls: Optional[Dict[str, Optional[str]]] = None,
) -> Dict[str, Any]:
    post = entry["post"]
    info = entry["info"]
    image_urls = image_urls or {}
    image_id = identity_of(post.get("imageId"))
    profile_image_id = writer_image_id(post)
    tendency = info.get("tendency")
    style = info.get("style")
    return {
        "rank": rank,
        "post_id": identity_of(post.get("id")),
        "title": post.get("title") or "",
        "location": post.get("location") or "",
        "status": post.get("status"),
        "date_text": date_range_text(post.get("startDate"), post.get("endDate")),
        "head_count": head_count(post),
        "max_participants": post.get("maxParticipants"),
        "keywords": translate_keywords(post.get("keywords")),
        "score": clamp_percent(info.get("score")),
        "vector_score": _optional_clamp(info.get("vector_score")),
        "tendency": tendency,
        "style": style,
        "show_keywords": bool(tendency) or bool(style),
        "cover_image_url": image_urls.get(image_id) if image_id else None,
        "writer_image_url": image_urls.get(profile_image_id) if profile_image_id else None,
    }


def build_cards(
    entries: List[Dict[str, Any]],
    image_urls: Optional[Dict[str, Optional[str]]] = None,
) -> List[Dict[str, Any]]:
    return [build_card(entry, rank, image_urls) for rank, entry in enumerate(entries, start=1)]


def image_ids_for(entries: List[Dict[str, Any]]) -> List[str]:
    """Unique cover and writer-profile image ids, in display order."""
    ids: List[str] = []
    for entry in entries:
        post = entry["post"]
        for image_id in (identity_of(post.get("imageId")), writer_image_id(post)):
            if image_id and image_id not in ids:
                ids.append(image_id)
    return ids
