"""RAG / vector search models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_dict, as_float, as_int

HIGHLY_RELEVANT_SCORE = 0.8
RELEVANT_SCORE = 0.6


@dataclass
class SearchResult(IRISModel):
    id: str | None = None
    content: str = ""
    score: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)
    title: str | None = None
    source: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchResult":
        metadata = as_dict(data.get("metadata"))
        ident = data.get("id", data.get("vector_id"))
        return cls(
            attributes=cls._copy(data),
            id=str(ident) if ident is not None else None,
            content=data.get("content") or data.get("text") or "",
            score=as_float(data.get("score", data.get("similarity")), 0.0),
            metadata=metadata,
            title=data.get("title") or metadata.get("title"),
            source=data.get("source") or metadata.get("source"),
        )

    @property
    def is_highly_relevant(self) -> bool:
        return self.score >= HIGHLY_RELEVANT_SCORE

    @property
    def is_relevant(self) -> bool:
        return self.score >= RELEVANT_SCORE

    @property
    def score_percentage(self) -> float:
        return round(self.score * 100, 1)


class SearchResultCollection(ModelCollection[SearchResult]):
    def relevant(self) -> "SearchResultCollection":
        return self.filter(lambda r: r.is_relevant)

    def contents(self) -> list[str]:
        return [r.content for r in self.items]


@dataclass
class IndexResult(IRISModel):
    vector_id: str | None = None
    success: bool = True
    tokens_used: int = 0
    message: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexResult":
        vector_id = data.get("vector_id", data.get("id"))
        return cls(
            attributes=cls._copy(data),
            vector_id=str(vector_id) if vector_id is not None else None,
            success=bool(data.get("success", True)),
            tokens_used=as_int(data.get("tokens_used"), 0),
            message=data.get("message"),
        )

    @property
    def is_failed(self) -> bool:
        return not self.success


@dataclass
class Document(IRISModel):
    id: str | None = None
    content: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    embedding: list[float] | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        ident = data.get("id", data.get("vector_id"))
        embedding = data.get("embedding")
        return cls(
            attributes=cls._copy(data),
            id=str(ident) if ident is not None else None,
            content=data.get("content") or "",
            metadata=as_dict(data.get("metadata")),
            embedding=embedding if isinstance(embedding, list) else None,
            created_at=data.get("created_at"),
        )
