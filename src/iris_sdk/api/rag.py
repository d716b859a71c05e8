"""RAG API - Vector storage and semantic search over indexed content."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TYPE_CHECKING

from ..models.rag import Document, IndexResult, SearchResult, SearchResultCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class RAGAPI:
    """RAG (retrieval) API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # Index content
            result = await iris.rag.index("Refunds take 5 days.", {"bloq_id": 40})

            # Query
            hits = await iris.rag.query("how long do refunds take?", top_k=3)
            for hit in hits.relevant():
                print(hit.score_percentage, hit.content)
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    async def query(self, text: str, top_k: int = 5, **filters) -> SearchResultCollection:
        """Semantic search over stored vectors.

        Args:
            text: Natural language query
            top_k: Maximum results
            **filters: bloq_id, agent_id, min_score, ...

        Returns:
            SearchResultCollection, best match first
        """
        response = await self._client._post(
            "/api/v1/vector/search",
            {"query": text, "top_k": top_k, **filters},
        )
        return SearchResultCollection.from_items(
            extract_list(response, "results", "data.results", "data"),
            SearchResult.from_dict,
            extract_meta(response),
        )

    async def index(self, content: str, metadata: dict[str, Any] | None = None) -> IndexResult:
        """Embed and store a piece of text."""
        response = await self._client._post(
            "/api/v1/vector/store",
            {"content": content, "metadata": metadata or {}},
        )
        return IndexResult.from_dict(extract_payload(response, "data"))

    async def index_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> IndexResult:
        """Upload a file to be chunked, embedded and stored.

        Raises:
            FileNotFoundError: file_path does not exist
        """
        response = await self._client._upload("/api/v1/vector/store", file_path, metadata or {})
        return IndexResult.from_dict(extract_payload(response, "data"))

    async def search_similar(self, text: str, limit: int = 10) -> SearchResultCollection:
        response = await self._client._post("/api/v1/search/", {"query": text, "limit": limit})
        return SearchResultCollection.from_items(
            extract_list(response, "results", "data.results", "data"),
            SearchResult.from_dict,
        )

    async def get_vector(self, vector_id: str) -> Document:
        response = await self._client._get(f"/api/v1/vector/{vector_id}")
        return Document.from_dict(extract_payload(response, "data.vector", "data", "vector"))

    async def delete(self, vector_id: str) -> dict[str, Any]:
        return await self._client._delete(f"/api/v1/vector/{vector_id}")

    async def suggestions(self, prefix: str) -> list[str]:
        """Query completions for a partial search string."""
        response = await self._client._get("/api/v1/search/suggestions", q=prefix)
        return extract_list(response, "suggestions", "data.suggestions", "data")
