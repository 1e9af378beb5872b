"""
Catalog Service

Read-only proxy to the Open Library search API.

This service:
1. Forwards free-text searches and normalizes the results
2. Builds the landing-page showcase from a curated list of titles
3. Turns catalog outages into UpstreamError for searches, while the
   showcase substitutes placeholders for individual failed lookups

Open Library search docs look like:
    {"key": "/works/OL1168083W", "title": "1984",
     "author_name": ["George Orwell"], "first_publish_year": 1949,
     "cover_i": 12345}
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Request

from app.config import Settings, get_settings
from app.exceptions import UpstreamError
from app.schemas.book import CatalogBook

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search.json"
SEARCH_FIELDS = "title,author_name,first_publish_year,cover_i,key"

UNKNOWN_AUTHOR = "Unknown Author"
PLACEHOLDER_AUTHOR = "Unknown"
# Open Library omits first_publish_year for some works
FALLBACK_PUBLISH_YEAR = 2024

CURATED_TITLES = [
    "The Great Gatsby",
    "To Kill a Mockingbird",
    "1984",
    "Pride and Prejudice",
    "The Catcher in the Rye",
    "Lord of the Flies",
    "Animal Farm",
    "The Hobbit",
    "Brave New World",
    "The Alchemist",
    "The Little Prince",
    "The Book Thief",
    "The Kite Runner",
    "Life of Pi",
    "The Road",
    "The Help",
    "Gone Girl",
    "The Fault in Our Stars",
    "The Hunger Games",
    "Harry Potter",
]


@dataclass
class CatalogSearchResult:
    books: list[CatalogBook]
    total: int


class CatalogClient:
    """
    Thin async client for Open Library.

    A new httpx.AsyncClient is opened per call, the same way the app talks
    to any other third-party API. Pass a transport (httpx.MockTransport)
    to run without network access.

    Usage:
        catalog = CatalogClient.from_settings(get_settings())
        result = await catalog.search("orwell", limit=5)
        showcase = await catalog.sample(10)
    """

    def __init__(
        self,
        base_url: str = "https://openlibrary.org",
        covers_url: str = "https://covers.openlibrary.org",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        titles: list[str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.covers_url = covers_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.titles = list(titles or CURATED_TITLES)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CatalogClient":
        return cls(
            base_url=settings.catalog_base_url,
            covers_url=settings.catalog_covers_url,
            timeout=settings.catalog_timeout,
            **kwargs,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={"Accept": "application/json"},
        )

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------
    def cover_url(self, cover_id: int | str | None) -> str | None:
        """Medium-size cover URL for a numeric Open Library cover id."""
        if cover_id in (None, ""):
            return None
        return f"{self.covers_url}/b/id/{cover_id}-M.jpg"

    def normalize_doc(self, doc: dict, fallback_id: str | None = None) -> CatalogBook:
        """
        Map one Open Library search doc to a CatalogBook.

        Args:
            doc: A single entry of the "docs" array
            fallback_id: Used when the doc has no "key"
        """
        authors = doc.get("author_name") or []

        return CatalogBook(
            id=doc.get("key") or fallback_id or "",
            title=doc.get("title") or "Untitled",
            author=", ".join(authors) if authors else UNKNOWN_AUTHOR,
            year=doc.get("first_publish_year") or FALLBACK_PUBLISH_YEAR,
            cover=self.cover_url(doc.get("cover_i")),
        )

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------
    async def _search_docs(
        self,
        client: httpx.AsyncClient,
        query: str,
        limit: int,
    ) -> dict:
        response = await client.get(
            SEARCH_PATH,
            params={"q": query, "limit": limit, "fields": SEARCH_FIELDS},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Unexpected catalog response shape")
        return data

    async def search(self, query: str, limit: int = 20) -> CatalogSearchResult:
        """
        Forward a free-text search to the catalog.

        Raises:
            UpstreamError: Catalog unreachable, non-2xx, or a body that does
                not read as search results
        """
        try:
            async with self._client() as client:
                data = await self._search_docs(client, query, limit)

            docs = data.get("docs") or []
            books = [self.normalize_doc(doc) for doc in docs]
            total = int(data.get("numFound", data.get("num_found", len(books))))
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.error(f"Catalog search failed for {query!r}: {e}")
            raise UpstreamError(
                "Failed to search books",
                field="q",
                detail="Please try again later",
            ) from e

        return CatalogSearchResult(books=books, total=total)

    async def _lookup_title(
        self,
        client: httpx.AsyncClient,
        title: str,
        index: int,
    ) -> CatalogBook | None:
        """First catalog hit for a title; a placeholder if the lookup fails."""
        try:
            data = await self._search_docs(client, title, limit=1)
            docs = data.get("docs") or []
            if not docs:
                return None
            return self.normalize_doc(docs[0], fallback_id=f"book-{index}")
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning(f"Showcase lookup failed for {title!r}: {e}")
            return CatalogBook(
                id=f"fallback-{index}",
                title=title,
                author=PLACEHOLDER_AUTHOR,
                year=FALLBACK_PUBLISH_YEAR,
                cover=None,
            )

    async def sample(self, n: int = 10) -> list[CatalogBook]:
        """
        Look up n random titles from the curated list.

        Never raises because of a single failed lookup; those come back as
        placeholders. Titles with no catalog hit are left out.
        """
        n = max(0, min(n, len(self.titles)))
        chosen = random.sample(self.titles, n)

        async with self._client() as client:
            results = await asyncio.gather(
                *(self._lookup_title(client, title, i) for i, title in enumerate(chosen))
            )

        return [book for book in results if book is not None]


# =============================================================================
# Dependency Injection
# =============================================================================
def get_catalog(request: Request) -> CatalogClient:
    """
    Catalog client dependency.

    Returns the client the application factory attached to app.state,
    falling back to one built from settings.
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = CatalogClient.from_settings(get_settings())
    return catalog
