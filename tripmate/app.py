import argparse
from pathlib import Path

from . import __version__
from .client import TripmateClient
from .display import build_cards, image_ids_for
from .env import load_env, load_settings
from .feed import RecommendationFeed
from .logger import get_logger
from .posts import recruiting_catalog
from .reconcile import KEYWORD_FORMATS, coerce_candidates, reconcile_with_stats
from .schema import validate_candidate, validate_post
from .scoring import display_percent, to_percent
from .storage import dumps, load_json, save_json


def _read_json(path_arg: str, what: str):
    path = Path(path_arg)
    if not path.exists():
        raise SystemExit(f"{what} file not found: {path}")
    data = load_json(path)
    if data is None:
        raise SystemExit(f"{what} file is empty or not valid JSON: {path}")
    return data


def _emit(data, output: str = None) -> None:
    if output:
        save_json(Path(output), data)
        print(f"Wrote {output}")
    else:
        print(dumps(data))


def cmd_reconcile(args: argparse.Namespace) -> None:
    candidates = _read_json(args.candidates, "Candidates")
    posts = _read_json(args.posts, "Posts") if args.posts else []
    if args.recruiting_only:
        posts = recruiting_catalog(posts)
    entries, stats = reconcile_with_stats(candidates, posts, keyword_format=args.format, limit=args.limit)
    get_logger().record_reconciliation(**stats)
    _emit(build_cards(entries) if args.cards else entries, args.output)


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_json(args.input, "Input")
    if args.kind == "candidates":
        records, check = coerce_candidates(data), validate_candidate
    else:
        records, check = (data if isinstance(data, list) else []), validate_post
    if not records:
        print(f"No {args.kind} found.")
        raise SystemExit(2)
    problems = 0
    for index, record in enumerate(records):
        errors = check(record)
        if errors:
            problems += 1
            print(f"[{index}]")
            for e in errors:
                print(f" - {e}")
    if problems:
        print(f"{problems}/{len(records)} {args.kind} have problems")
        raise SystemExit(2)
    print(f"Valid ({len(records)} {args.kind})")


def cmd_percent(args: argparse.Namespace) -> None:
    for raw in args.values:
        print(f"{raw} -> {to_percent(raw)} (display {display_percent(raw)})")


def cmd_feed(args: argparse.Namespace) -> None:
    settings = load_settings()
    client = TripmateClient(settings["api_url"], timeout=settings["timeout"], token=settings["api_token"])
    feed = RecommendationFeed(
        client,
        match_limit=args.limit or settings["match_limit"],
        keyword_format=args.format,
        display_limit=settings["display_limit"],
    )

    viewer_id = args.viewer
    if not viewer_id:
        try:
            profile = client.get_my_profile()
        except ValueError as e:
            raise SystemExit(str(e))
        viewer_id = profile["userId"] if profile else None
    if not viewer_id:
        print("Not logged in: no recommendations.")
        return

    if args.location or args.start_date or args.end_date or args.keywords:
        keywords = [k.strip() for k in args.keywords.split(",") if k.strip()] if args.keywords else None
        try:
            result = feed.search(
                viewer_id,
                location=args.location,
                start_date=args.start_date,
                end_date=args.end_date,
                keywords=keywords,
            )
        except ValueError as e:
            raise SystemExit(str(e))
    else:
        result = feed.refresh(viewer_id)

    entries = result["entries"]
    if not entries:
        print("No matching posts found.")
        return
    image_urls = client.get_presigned_urls(image_ids_for(entries)) if args.images else None
    _emit(build_cards(entries, image_urls) if args.cards else entries, args.output)
    get_logger().log_metrics_summary()


def main():
    load_env()
    settings = load_settings()
    get_logger().configure(level=settings["log_level"], log_dir=settings["log_dir"])
    parser = argparse.ArgumentParser(prog="tripmate", description="Travel companion matching client")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    rec = subparsers.add_parser("reconcile", help="Reconcile match candidates with a post catalog from JSON files")
    rec.add_argument("--candidates", required=True, help="Candidates JSON (array or {\"matches\": [...]})")
    rec.add_argument("--posts", help="Post catalog JSON array (optional when candidates embed posts)")
    rec.add_argument("--format", choices=KEYWORD_FORMATS, default="joined", help="Overlap keyword rendering (default: joined)")
    rec.add_argument("--limit", type=int, help="Maximum number of entries")
    rec.add_argument("--recruiting-only", action="store_true", help="Keep only recruiting posts, newest first")
    rec.add_argument("--cards", action="store_true", help="Output display cards instead of raw entries")
    rec.add_argument("--output", help="Write JSON to this file instead of stdout")
    rec.set_defaults(func=cmd_reconcile)

    val = subparsers.add_parser("validate", help="Report malformed candidates or posts in a JSON file")
    val.add_argument("--input", required=True, help="Path to JSON input")
    val.add_argument("--kind", choices=["candidates", "posts"], default="candidates", help="Record type (default: candidates)")
    val.set_defaults(func=cmd_validate)

    pct = subparsers.add_parser("percent", help="Show how raw scores are converted to percentages")
    pct.add_argument("values", nargs="+", help="Raw score values, e.g. 0.73 85 1")
    pct.set_defaults(func=cmd_percent)

    fd = subparsers.add_parser("feed", help="Fetch and reconcile recommendations from the API (TRIPMATE_API_URL)")
    fd.add_argument("--viewer", help="Viewer user id (default: from /profile/my/info)")
    fd.add_argument("--limit", type=int, help="Candidates to request (default: TRIPMATE_MATCH_LIMIT)")
    fd.add_argument("--format", choices=KEYWORD_FORMATS, default="joined", help="Overlap keyword rendering")
    fd.add_argument("--location", help="Detail search: location query")
    fd.add_argument("--start-date", help="Detail search: YYYY-MM-DD")
    fd.add_argument("--end-date", help="Detail search: YYYY-MM-DD")
    fd.add_argument("--keywords", help="Detail search: comma-separated keywords")
    fd.add_argument("--cards", action="store_true", help="Output display cards")
    fd.add_argument("--images", action="store_true", help="Resolve cover/profile image URLs for cards")
    fd.add_argument("--output", help="Write JSON to this file instead of stdout")
    fd.set_defaults(func=cmd_feed)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
