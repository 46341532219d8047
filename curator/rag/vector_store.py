"""
Vector-search backend used for knowledge base retrieval.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Any

from supabase import Client

logger = logging.getLogger(__name__)


class VectorStore(ABC):
    """Approximate nearest-neighbor search with a threshold and a document-type filter."""

    @abstractmethod
    async def match(
        self,
        query_embedding: List[float],
        match_threshold: float,
        match_count: int,
        filter_doc_type: str,
        provider: str
    ) -> List[Dict[str, Any]]:
        """
        Return rows scoring at least ``match_threshold``, best first.

        Each row carries the document payload and a ``similarity`` score. Only
        embeddings produced by ``provider`` are compared.
        """
        pass


class SupabaseVectorStore(VectorStore):
    """Vector search through a pgvector match function exposed as a Supabase RPC."""

    def __init__(self, client: Client, function_name: str = "match_documents"):
        self.client = client
        self.function_name = function_name

    def _rpc(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = self.client.rpc(self.function_name, params).execute()
        return response.data or []

    async def match(
        self,
        query_embedding: List[float],
        match_threshold: float,
        match_count: int,
        filter_doc_type: str,
        provider: str
    ) -> List[Dict[str, Any]]:
        params = {
            "query_embedding": query_embedding,
            "match_threshold": match_threshold,
            "match_count": match_count,
            "filter_doc_type": filter_doc_type,
            "provider": provider,
        }
        rows = await asyncio.to_thread(self._rpc, params)
        logger.debug(f"{self.function_name}({filter_doc_type}) returned {len(rows)} rows")
        return rows
