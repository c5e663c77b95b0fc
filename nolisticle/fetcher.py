"""Download the reference article list from a paginated articles API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import requests

from .config import FetchConfig
from .errors import ErrorCode, HTTPError, RetryConfig, retry_with_backoff

logger = logging.getLogger("nolisticle.fetcher")


class ArticleFetcher:
    """Fetches article pages, retrying each page on failure."""

    def __init__(self, config: FetchConfig | None = None, session: requests.Session | None = None):
        self.config = config or FetchConfig()
        self._session = session or requests.Session()
        self._retry_config = RetryConfig(
            max_attempts=self.config.max_attempts,
            retryable_exceptions=(HTTPError,),
        )

    def _get_page(self, page: int) -> list[dict[str, Any]]:
        try:
            response = self._session.get(
                self.config.api_url,
                params={"page": page},
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise HTTPError(
                code=ErrorCode.HTTP_TIMEOUT,
                message=f"Request for page {page} timed out",
                details={"page": page},
                cause=e,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise HTTPError(
                code=ErrorCode.HTTP_CONNECTION_ERROR,
                message=f"Cannot connect to {self.config.api_url}",
                details={"page": page},
                cause=e,
            ) from e

        if not response.ok:
            raise HTTPError(
                code=ErrorCode.HTTP_ERROR_RESPONSE,
                message=f"Server returned {response.status_code}",
                details={"page": page, "status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise HTTPError(
                code=ErrorCode.HTTP_ERROR_RESPONSE,
                message="Response body is not valid JSON",
                details={"page": page, "status": response.status_code},
                cause=e,
            ) from e

        if not isinstance(data, list):
            raise HTTPError(
                code=ErrorCode.HTTP_ERROR_RESPONSE,
                message="Expected a JSON array of articles",
                details={"page": page},
            )
        return data

    def fetch_page(self, page: int) -> list[dict[str, Any]]:
        """Fetch one page of articles (1-based)."""

        @retry_with_backoff(
            config=self._retry_config,
            on_retry=lambda e, attempt, delay: logger.warning(
                "Fetching page %d failed (attempt %d), retrying in %.1fs: %s",
                page,
                attempt,
                delay,
                e,
            ),
        )
        def _fetch() -> list[dict[str, Any]]:
            return self._get_page(page)

        articles = _fetch()
        logger.debug(
            "Fetched page %d: %d articles",
            page,
            len(articles),
            extra={"page": page, "count": len(articles)},
        )
        return articles

    def fetch_all(
        self,
        pages: int | None = None,
        on_page: Callable[[int], None] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch pages 1..pages and concatenate them in page order."""
        pages = pages or self.config.pages
        articles: list[dict[str, Any]] = []
        for page in range(1, pages + 1):
            articles.extend(self.fetch_page(page))
            if on_page:
                on_page(page)
        return articles


def save_articles(path: Path, articles: list[dict[str, Any]]) -> None:
    """Write the fetched articles as a JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(articles, f, indent=2, ensure_ascii=False)
