"""
Recommendation feed orchestration.

Fetches the post catalog and the viewer's match candidates concurrently,
waits for both, and reconciles them. Each refresh is tagged with a
generation number; a caller that fired several refreshes keeps only the
result whose generation is still current.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from .client import TripmateClient
from .logger import get_logger
from .posts import recruiting_catalog
from .reconcile import reconcile_with_stats
from .retry import is_transient_error

logger = get_logger()


class RecommendationFeed:
    """Runs feed refreshes and detail searches for one client."""

    def __init__(
        self,
        client: TripmateClient,
        match_limit: int = 15,
        keyword_format: str = "joined",
        display_limit: Optional[int] = None,
    ):
        self.client = client
        self.match_limit = match_limit
        self.keyword_format = keyword_format
        self.display_limit = display_limit
        self._generation = 0
        self._lock = threading.Lock()

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    @staticmethod
    def _fetch_or_empty(label: str, fetch: Callable[[], List[Any]]) -> List[Any]:
        try:
            return fetch()
        except ValueError as e:
            logger.warning(f"{label} fetch failed, using empty list", error=str(e), transient=is_transient_error(e))
            return []

    def refresh(self, viewer_id: Optional[str]) -> Dict[str, Any]:
        """
        Fetch and reconcile the home feed for a viewer.

        Without a viewer id the matching service is not called and the
        feed is empty.

        Returns:
            {"generation": int, "entries": [...]}
        """
        generation = self._next_generation()
        if not viewer_id:
            logger.info("No viewer, skipping match search", generation=generation)
            return {"generation": generation, "entries": []}

        with ThreadPoolExecutor(max_workers=2) as pool:
            posts_future = pool.submit(self._fetch_or_empty, "posts", self.client.get_posts)
            matches_future = pool.submit(
                self._fetch_or_empty,
                "matches",
                lambda: self.client.search_matches(limit=self.match_limit),
            )
            posts = posts_future.result()
            candidates = matches_future.result()

        entries, stats = reconcile_with_stats(
            candidates,
            recruiting_catalog(posts),
            keyword_format=self.keyword_format,
            limit=self.display_limit,
        )
        logger.record_reconciliation(**stats)
        logger.info(
            "Feed refreshed",
            generation=generation,
            posts=len(posts),
            candidates=len(candidates),
            entries=len(entries),
        )
        return {"generation": generation, "entries": entries}

    def search(
        self,
        viewer_id: Optional[str],
        location: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        keywords: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Detail search. Results carry their posts inline, so no catalog is needed.

        Raises ValueError when no search condition is given.
        """
        generation = self._next_generation()
        if not viewer_id:
            return {"generation": generation, "entries": []}
        candidates = self.client.detail_search(
            location=location,
            start_date=start_date,
            end_date=end_date,
            keywords=keywords,
        )
        entries, stats = reconcile_with_stats(candidates, [], keyword_format=self.keyword_format)
        logger.record_reconciliation(**stats)
        logger.info("Detail search done", generation=generation, entries=len(entries))
        return {"generation": generation, "entries": entries}
