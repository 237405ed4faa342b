from typing import Any, Dict, List

from .posts import POST_STATUSES

SCORE_FIELDS = ["score", "vectorScore", "styleScore", "tendencyScore", "mbtiMatchScore"]
OVERLAP_FIELDS = ["overlappingTravelStyles", "overlappingTendencies"]
WRITER_ID_PATHS = ["writerId", "writer.id", "writerProfile.id"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_identity(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    return _is_non_empty_str(v) or isinstance(v, int)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _lookup(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def validate_candidate(data: Any) -> List[str]:
    """
    Returns a list of problems found in a match candidate. Empty list means clean.
    Problems are informational: reconciliation defaults around all of them.
    """
    if not isinstance(data, dict):
        return [f"Candidate must be an object, got {type(data).__name__}"]

    errors: List[str] = []

    if "userId" not in data:
        errors.append("Missing required field: userId")
    elif not _is_identity(data["userId"]):
        errors.append("Field 'userId' must be a non-empty string")

    if data.get("score") is None:
        errors.append("Missing score (treated as 0)")

    for f in SCORE_FIELDS:
        v = data.get(f)
        if v is not None and not _is_number(v):
            errors.append(f"Field '{f}' must be a number if provided")

    for f in OVERLAP_FIELDS:
        v = data.get(f)
        if v is not None and not isinstance(v, (str, dict, list)):
            errors.append(f"Field '{f}' has unexpected type {type(v).__name__}")

    embedded = data.get("recruitingPosts")
    if embedded is not None and not isinstance(embedded, list):
        errors.append("Field 'recruitingPosts' must be an array if provided")
    single = data.get("recruitingPost")
    if single is not None and not isinstance(single, dict):
        errors.append("Field 'recruitingPost' must be an object if provided")

    return errors


def validate_post(data: Any) -> List[str]:
    """Returns a list of problems found in a post record."""
    if not isinstance(data, dict):
        return [f"Post must be an object, got {type(data).__name__}"]

    errors: List[str] = []

    if not _is_identity(data.get("id")):
        errors.append("Missing required field: id")

    if not any(_is_identity(_lookup(data, path)) for path in WRITER_ID_PATHS):
        errors.append("Post has no writer identity (writerId, writer.id, writerProfile.id)")

    status = data.get("status")
    if status is not None and status not in POST_STATUSES:
        errors.append(f"Unknown status: {status}")

    for f in ("title", "location", "startDate", "endDate"):
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    return errors
