"""Post catalog helpers: status filtering and newest-first ordering."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

STATUS_RECRUITING = "모집중"
STATUS_FILLED = "모집완료"
STATUS_COMPLETED = "완료"
POST_STATUSES = (STATUS_RECRUITING, STATUS_FILLED, STATUS_COMPLETED)


def parse_created_at(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted)."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        # Compare everything as naive UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def filter_by_status(posts: List[Dict[str, Any]], status: str) -> List[Dict[str, Any]]:
    return [p for p in posts if isinstance(p, dict) and p.get("status") == status]


def sort_newest_first(posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort by createdAt descending. Posts without a readable date go last, in input order."""
    dated = []
    undated = []
    for post in posts:
        created = parse_created_at(post.get("createdAt")) if isinstance(post, dict) else None
        if created is None:
            undated.append(post)
        else:
            dated.append((created, post))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [post for _, post in dated] + undated


def recruiting_catalog(posts: Any) -> List[Dict[str, Any]]:
    """Newest-first recruiting posts: the catalog the home feed matches against."""
    if not isinstance(posts, list):
        return []
    return filter_by_status(sort_newest_first(posts), STATUS_RECRUITING)
