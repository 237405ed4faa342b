"""HTTP client for the travel-companion backend."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

import requests
from requests.utils import quote

from . import __version__
from .logger import get_logger
from .reconcile import coerce_candidates
from .retry import RetryError, exponential_backoff, should_retry_http_status

logger = get_logger()

MAX_IMAGE_WORKERS = 8


class RetryableStatusError(requests.exceptions.HTTPError):
    """HTTP status worth asking for again (5xx gateway errors, 429, 408)."""


def _describe_failure(exc: BaseException) -> str:
    if isinstance(exc, requests.exceptions.HTTPError):
        status = exc.response.status_code if exc.response is not None else "HTTPError"
        return f"HTTPError_{status}"
    if isinstance(exc, requests.exceptions.Timeout):
        return "Timeout"
    if isinstance(exc, requests.exceptions.ConnectionError):
        return "ConnectionError"
    return type(exc).__name__


class TripmateClient:
    """
    Thin wrapper over the backend REST API.

    Every public call raises ValueError with a readable message when the
    request ultimately fails, except the presigned URL lookups, which
    degrade to None.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        max_retries: int = 2,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": f"tripmate/{__version__}",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        self._send = exponential_backoff(
            max_retries=max_retries,
            base_delay=0.5,
            exceptions=(
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
                RetryableStatusError,
            ),
            on_retry=self._log_retry,
        )(self._send_once)

    @staticmethod
    def _log_retry(attempt: int, exc: Exception, delay: float):
        logger.debug("Retrying request", attempt=attempt, error=str(exc), delay=delay)

    def _send_once(self, method: str, path: str, **kwargs) -> requests.Response:
        logger.record_api_call()
        resp = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if should_retry_http_status(resp.status_code):
            raise RetryableStatusError(f"{resp.status_code} from {path}", response=resp)
        return resp

    def _request(self, method: str, path: str, endpoint: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP verb
            path: Path relative to base_url
            endpoint: Short label for metrics and messages (e.g. 'posts')

        Raises:
            ValueError: On HTTP errors, exhausted retries or a non-JSON body
        """
        logger.record_request_attempt(endpoint)
        try:
            resp = self._send(method, path, **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except RetryError as e:
            cause = e.__cause__ or e
            failure = _describe_failure(cause)
            logger.record_request_failure(endpoint, failure)
            logger.warning(f"{endpoint} request gave up after retries", path=path, error=failure)
            raise ValueError(f"{endpoint} request failed after retries ({failure}): {path}")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            logger.record_request_failure(endpoint, f"HTTPError_{status}")
            if status in (401, 403):
                logger.warning(f"{endpoint} request not authorized", path=path, status=status)
                raise ValueError(f"Not authorized for {endpoint} ({status}). Log in again.")
            logger.error(f"{endpoint} request failed", path=path, status=status)
            raise ValueError(f"{endpoint} request failed ({status}): {path}")
        except requests.exceptions.JSONDecodeError as e:
            logger.record_request_failure(endpoint, "InvalidJSON")
            logger.error(f"{endpoint} returned invalid JSON", path=path)
            raise ValueError(f"{endpoint} returned invalid JSON: {e}")
        except requests.exceptions.RequestException as e:
            logger.record_request_failure(endpoint, "RequestException")
            logger.error(f"{endpoint} request error", path=path, error=str(e))
            raise ValueError(f"{endpoint} request error: {e}")
        logger.record_request_success(endpoint)
        return data

    def get_posts(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/posts", "posts")
        if not isinstance(data, list):
            logger.warning("Unexpected posts payload shape", type=type(data).__name__)
            return []
        return data

    def search_matches(self, limit: int = 15) -> List[Any]:
        """Recommended candidates for the logged-in viewer."""
        data = self._request("POST", "/profile/matching/search", "matching", json={"limit": limit})
        return coerce_candidates(data)

    def detail_search(
        self,
        location: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        keywords: Optional[List[str]] = None,
    ) -> List[Any]:
        """
        Filtered candidate search. Candidates come back with their
        recruiting posts embedded.

        Raises ValueError if no search condition is given.
        """
        params: Dict[str, Any] = {}
        if location and location.strip():
            params["locationQuery"] = location.strip()
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        if keywords:
            params["keywords"] = [k for k in keywords if k is not None]
        if not params:
            raise ValueError("Provide at least one search condition (location, dates or keywords).")
        data = self._request("GET", "/profile/matching/detailsearch", "detailsearch", params=params)
        return coerce_candidates(data)

    def get_my_profile(self) -> Optional[Dict[str, Any]]:
        """The viewer's own user record, or None when the session is not logged in."""
        data = self._request("GET", "/profile/my/info", "profile")
        if isinstance(data, dict) and data.get("userId") and data.get("profile"):
            return data
        return None

    def get_presigned_url(self, image_id: str) -> Optional[str]:
        try:
            path = f"/binary-content/{quote(str(image_id), safe='')}/presigned-url"
            data = self._request("GET", path, "binary-content")
        except ValueError as e:
            logger.warning("Failed to load image URL", image_id=image_id, error=str(e))
            return None
        url = data.get("url") if isinstance(data, dict) else None
        return url if isinstance(url, str) and url else None

    def get_presigned_urls(self, image_ids: Iterable[str]) -> Dict[str, Optional[str]]:
        """Resolve many image ids concurrently; failed ones map to None."""
        unique: List[str] = []
        for image_id in image_ids:
            if image_id and image_id not in unique:
                unique.append(image_id)
        if not unique:
            return {}
        workers = min(MAX_IMAGE_WORKERS, len(unique))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            urls = list(pool.map(self.get_presigned_url, unique))
        return dict(zip(unique, urls))
