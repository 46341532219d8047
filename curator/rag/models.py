"""
Data models for the RAG module.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass
class RetrievedChunk:
    """One passage returned by the vector-search backend."""
    id: Optional[str]
    content: str
    similarity: float
    kb_id: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Dict[str, Any], kb_id: str) -> "RetrievedChunk":
        """Build a chunk from a backend row; the row must carry a finite numeric similarity."""
        similarity = row.get("similarity")
        if isinstance(similarity, bool) or not isinstance(similarity, (int, float)):
            raise ValueError(f"Row similarity is not numeric: {similarity!r}")
        if not math.isfinite(similarity):
            raise ValueError(f"Row similarity is not finite: {similarity!r}")

        row_id = row.get("id")
        return cls(
            id=str(row_id) if row_id is not None else None,
            content=row.get("content") or "",
            similarity=float(similarity),
            kb_id=kb_id,
            metadata=row.get("metadata") or {},
            raw=dict(row)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {**self.raw, "similarity": self.similarity}


@dataclass
class KBQueryOutcome:
    """Outcome of querying a single knowledge base."""
    kb_id: str
    chunks: List[RetrievedChunk]
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class RagResult:
    """Result of a RAG query."""
    chunks: List[RetrievedChunk]
    relevant_kbs: List[str]
    total_results: int
    failed_kbs: List[str] = field(default_factory=list)
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Public response shape consumed by the agents."""
        return {
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "relevantKBs": list(self.relevant_kbs),
            "totalResults": self.total_results,
        }
