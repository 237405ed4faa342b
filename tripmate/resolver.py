"""
Candidate-to-post resolution.

A candidate either carries its recruiting posts inline or has to be
matched against the fetched catalog by writer identity. A post may expose
its writer under writerId, writer.id or writerProfile.id; any of them
counts.
"""

from typing import Any, Dict, List, Optional, Tuple

from .normalize import normalize_overlap
from .posts import STATUS_RECRUITING

DEFAULT_NICKNAME = "작성자"


def identity_of(value: Any) -> Optional[str]:
    """String form of an id field, or None when the field is unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def post_identity(post: Any) -> Optional[str]:
    if not isinstance(post, dict):
        return None
    return identity_of(post.get("id"))


def _nested_id(post: Dict[str, Any], field: str) -> Any:
    nested = post.get(field)
    return nested.get("id") if isinstance(nested, dict) else None


def writer_identity_set(post: Any) -> Tuple[str, ...]:
    """All usable writer ids of a post, in writerId, writer.id, writerProfile.id order."""
    if not isinstance(post, dict):
        return ()
    raw = (post.get("writerId"), _nested_id(post, "writer"), _nested_id(post, "writerProfile"))
    ids: List[str] = []
    for value in raw:
        ident = identity_of(value)
        if ident is not None and ident not in ids:
            ids.append(ident)
    return tuple(ids)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def build_writer(candidate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Writer record synthesized from the candidate's own profile, if it sent one."""
    profile = candidate.get("profile")
    if not isinstance(profile, dict):
        return None
    user_id = identity_of(candidate.get("userId"))
    return {
        "id": user_id,
        "email": "",
        "profile": {
            "id": profile.get("id") or user_id,
            "nickname": profile.get("nickname") or DEFAULT_NICKNAME,
            "gender": profile.get("gender") or "",
            "description": profile.get("description") or "",
            "intro": profile.get("intro") or "",
            "mbtiTypes": profile.get("mbtiTypes") or "",
            "travelStyles": _string_list(profile.get("travelStyles")),
            "tendency": _string_list(profile.get("tendency")),
            "profileImageId": profile.get("profileImageId") or candidate.get("profileImageId"),
        },
    }


def convert_recruiting_post(
    recruiting_post: Dict[str, Any],
    candidate: Dict[str, Any],
    writer: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Lift an embedded recruiting post into the full post shape used by the catalog."""
    return {
        "id": recruiting_post.get("id"),
        "writerId": recruiting_post.get("writerId") or identity_of(candidate.get("userId")),
        "writerProfile": recruiting_post.get("writerProfile"),
        "writer": recruiting_post.get("writer") or writer,
        "createdAt": recruiting_post.get("createdAt"),
        "title": recruiting_post.get("title") or "",
        "content": recruiting_post.get("content") or "",
        "status": recruiting_post.get("status") or STATUS_RECRUITING,
        "location": recruiting_post.get("location") or "",
        "maxParticipants": recruiting_post.get("maxParticipants"),
        "keywords": normalize_overlap(recruiting_post.get("keywords")),
        "startDate": recruiting_post.get("startDate") or "",
        "endDate": recruiting_post.get("endDate") or "",
        "participations": recruiting_post.get("participations") or [],
        "imageId": recruiting_post.get("imageId"),
    }


def _inline_posts(candidate: Dict[str, Any]) -> List[Dict[str, Any]]:
    posts = candidate.get("recruitingPosts")
    if isinstance(posts, list):
        found = [p for p in posts if isinstance(p, dict)]
    else:
        found = []
    single = candidate.get("recruitingPost")
    if not found and isinstance(single, dict):
        found = [single]
    return found


def embedded_posts(candidate: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Recruiting posts carried inline by the candidate (plural or legacy singular field)."""
    return [p for p in _inline_posts(candidate) if post_identity(p) is not None]


def resolve_posts_for_candidate(
    candidate: Dict[str, Any],
    post_catalog: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Posts associated with one candidate.

    Embedded posts win and skip the catalog entirely. Otherwise every catalog
    post whose writer identity set contains the candidate's userId is
    returned, in catalog order. No match is a normal outcome.

    A candidate whose inline posts all lack an id resolves to nothing;
    it never falls back to the catalog.
    """
    if _inline_posts(candidate):
        writer = build_writer(candidate)
        return [convert_recruiting_post(post, candidate, writer) for post in embedded_posts(candidate)]

    user_id = identity_of(candidate.get("userId"))
    if user_id is None:
        return []
    return [post for post in post_catalog if user_id in writer_identity_set(post)]
