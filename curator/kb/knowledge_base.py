"""
Knowledge base querier for retrieving chunks from a single knowledge base.
"""

import logging
from typing import Dict, Any, List

from ..models.llm_manager import ProviderName
from ..rag.models import KBQueryOutcome, RetrievedChunk
from ..rag.vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.7


class KnowledgeBaseQuerier:
    """Runs one nearest-neighbor search per knowledge base.

    A failing knowledge base never fails the caller: the error is logged and
    kept on the outcome, and the outcome carries no chunks.
    """

    def __init__(self, config: Dict[str, Any], vector_store: VectorStore):
        self.config = config
        self.vector_store = vector_store
        self.match_threshold = config.get("match_threshold", DEFAULT_MATCH_THRESHOLD)

    async def query_kb(
        self,
        embedding: List[float],
        kb_id: str,
        limit: int,
        provider: ProviderName
    ) -> KBQueryOutcome:
        """
        Query a single knowledge base.

        Args:
            embedding: The query embedding
            kb_id: Document type the candidates are restricted to
            limit: Maximum number of chunks to return
            provider: Provider that produced the embedding

        Returns:
            KBQueryOutcome with the matching chunks, or an empty outcome
            holding the error if the backend failed
        """
        try:
            rows = await self.vector_store.match(
                query_embedding=embedding,
                match_threshold=self.match_threshold,
                match_count=limit,
                filter_doc_type=kb_id,
                provider=provider.value
            )
        except Exception as e:
            logger.error(f"Error querying {kb_id} KB: {e}")
            return KBQueryOutcome(kb_id=kb_id, chunks=[], error=e)

        chunks = []
        for row in rows:
            try:
                chunks.append(RetrievedChunk.from_row(row, kb_id))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed row from {kb_id} KB: {e}")

        logger.info(f"{kb_id} KB returned {len(chunks)} chunks (limit {limit})")
        return KBQueryOutcome(kb_id=kb_id, chunks=chunks)
