"""
Result aggregation across knowledge bases.
"""

import asyncio
import logging
from typing import List, TYPE_CHECKING

from ..models.llm_manager import ProviderName
from .models import KBQueryOutcome, RagResult, RetrievedChunk

if TYPE_CHECKING:
    from ..kb.knowledge_base import KnowledgeBaseQuerier

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Fans a query embedding out to knowledge bases and merges the results."""

    def __init__(self, querier: "KnowledgeBaseQuerier"):
        self.querier = querier

    async def aggregate(
        self,
        embedding: List[float],
        kb_ids: List[str],
        per_kb_limit: int,
        max_chunks: int,
        provider: ProviderName
    ) -> RagResult:
        """
        Query every knowledge base concurrently and rank the combined chunks.

        Every query runs to completion; a failed knowledge base contributes no
        chunks but stays listed in ``relevant_kbs``.
        """
        results = await asyncio.gather(
            *[self.querier.query_kb(embedding, kb_id, per_kb_limit, provider) for kb_id in kb_ids],
            return_exceptions=True
        )

        outcomes: List[KBQueryOutcome] = []
        for kb_id, result in zip(kb_ids, results):
            if isinstance(result, Exception):
                logger.error(f"Query task for {kb_id} KB failed: {result}")
                outcomes.append(KBQueryOutcome(kb_id=kb_id, chunks=[], error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)

        all_chunks: List[RetrievedChunk] = [chunk for outcome in outcomes for chunk in outcome.chunks]

        # sorted() is stable, so ties keep fan-out order
        ranked_chunks = sorted(all_chunks, key=lambda chunk: chunk.similarity, reverse=True)[:max_chunks]

        failed_kbs = [outcome.kb_id for outcome in outcomes if not outcome.succeeded]
        if failed_kbs:
            logger.warning(f"Degraded knowledge bases: {', '.join(failed_kbs)}")

        logger.info(
            f"Merged {len(all_chunks)} chunks from {len(kb_ids)} KBs, returning {len(ranked_chunks)}"
        )

        return RagResult(
            chunks=ranked_chunks,
            relevant_kbs=list(kb_ids),
            total_results=len(all_chunks),
            failed_kbs=failed_kbs,
            provider=provider.value
        )
