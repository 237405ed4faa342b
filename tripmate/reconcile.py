"""
Reconciliation of match candidates against recruiting posts.

Given the candidate list from the matching service and the post catalog,
produce one (post, matching info) entry per distinct post. The first
candidate that resolves to a post owns it; later references to the same
post are dropped, never merged.

This module does no I/O and holds no state between calls.
"""

from typing import Any, Dict, List, Optional, Tuple

from .logger import get_logger
from .normalize import join_overlap, normalize_overlap
from .resolver import post_identity, resolve_posts_for_candidate
from .schema import validate_candidate
from .scoring import display_percent, optional_display_percent

logger = get_logger()

KEYWORD_FORMATS = ("joined", "list")


def coerce_candidates(payload: Any) -> List[Any]:
    """Accept either a bare candidate array or a {"matches": [...]} wrapper."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("matches"), list):
        return payload["matches"]
    return []


def _coerce_catalog(post_catalog: Any) -> List[Dict[str, Any]]:
    if not isinstance(post_catalog, list):
        return []
    return [post for post in post_catalog if isinstance(post, dict)]


def build_matching_info(candidate: Dict[str, Any], keyword_format: str = "joined") -> Dict[str, Any]:
    """
    Display-ready matching info for one candidate.

    With keyword_format="joined" tendency/style are comma-joined strings or
    None; with "list" they are ordered lists (possibly empty).
    """
    if keyword_format not in KEYWORD_FORMATS:
        raise ValueError(f"Unknown keyword format: {keyword_format!r}")
    overlap = join_overlap if keyword_format == "joined" else normalize_overlap
    return {
        "score": display_percent(candidate.get("score")),
        "vector_score": optional_display_percent(candidate.get("vectorScore")),
        "tendency": overlap(candidate.get("overlappingTendencies")),
        "style": overlap(candidate.get("overlappingTravelStyles")),
        "style_score": optional_display_percent(candidate.get("styleScore")),
        "tendency_score": optional_display_percent(candidate.get("tendencyScore")),
        "mbti_score": optional_display_percent(candidate.get("mbtiMatchScore")),
    }


def reconcile_with_stats(
    candidates: Any,
    post_catalog: Any,
    keyword_format: str = "joined",
    limit: Optional[int] = None,
) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    """
    Build the deduplicated, ordered list of {"post", "info"} entries.

    Args:
        candidates: Candidate list, or the {"matches": [...]} wrapper
        post_catalog: Posts to match candidates against by writer identity
        keyword_format: "joined" or "list" rendering of overlap keywords
        limit: Stop after this many entries (None = no limit)

    Returns:
        (entries, stats): entries in the order their posts were first
        discovered, and candidate/entry/duplicate counts for the caller
        to record.
    """
    if keyword_format not in KEYWORD_FORMATS:
        raise ValueError(f"Unknown keyword format: {keyword_format!r}")

    candidate_list = coerce_candidates(candidates)
    catalog = _coerce_catalog(post_catalog)

    entries: List[Dict[str, Any]] = []
    seen_post_ids = set()
    duplicates = 0

    for index, candidate in enumerate(candidate_list):
        if limit is not None and len(entries) >= limit:
            break

        problems = validate_candidate(candidate)
        if problems:
            logger.debug("Defaulting malformed candidate", index=index, problems=problems)
        if not isinstance(candidate, dict):
            continue

        for post in resolve_posts_for_candidate(candidate, catalog):
            post_id = post_identity(post)
            if post_id is None:
                continue
            if post_id in seen_post_ids:
                duplicates += 1
                continue
            if limit is not None and len(entries) >= limit:
                break
            seen_post_ids.add(post_id)
            entries.append({"post": post, "info": build_matching_info(candidate, keyword_format)})

    logger.debug(
        "Reconciled candidates",
        candidates=len(candidate_list),
        catalog=len(catalog),
        entries=len(entries),
        duplicates=duplicates,
    )
    stats = {"candidates": len(candidate_list), "entries": len(entries), "duplicates": duplicates}
    return entries, stats


def reconcile(
    candidates: Any,
    post_catalog: Any,
    keyword_format: str = "joined",
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Entries only; see reconcile_with_stats."""
    entries, _ = reconcile_with_stats(candidates, post_catalog, keyword_format, limit)
    return entries


def posts_of(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [entry["post"] for entry in entries]


def index_by_post_id(entries: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Matching info keyed by post id, as consumed by card lists and carousels."""
    return {post_identity(entry["post"]): entry["info"] for entry in entries}
