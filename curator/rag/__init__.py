"""
Retrieval and ranking over the knowledge base vector index.
"""

from .rag_system import ResultAggregator
from .models import RetrievedChunk, KBQueryOutcome, RagResult
from .vector_store import VectorStore, SupabaseVectorStore

__all__ = [
    "ResultAggregator",
    "RetrievedChunk",
    "KBQueryOutcome",
    "RagResult",
    "VectorStore",
    "SupabaseVectorStore",
]
