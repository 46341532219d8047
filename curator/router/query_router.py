"""
Query Router: the retrieval entry point for the rest of the application.
"""

import logging
import math
from typing import Dict, Any, Optional

from ..kb.knowledge_base import KnowledgeBaseQuerier
from ..models.llm_manager import LLMManager
from ..rag.models import RagResult
from ..rag.rag_system import ResultAggregator
from ..rag.vector_store import VectorStore
from ..settings.provider_selector import ProviderSelector
from .intent_classifier import IntentClassifier

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNKS = 10


class QueryRouter:
    """Routes a query to the relevant knowledge bases and ranks what they return."""

    def __init__(
        self,
        config: Dict[str, Any],
        llm_manager: LLMManager,
        provider_selector: ProviderSelector,
        vector_store: VectorStore
    ):
        self.config = config
        self.llm_manager = llm_manager
        self.provider_selector = provider_selector
        self.default_max_chunks = config.get("default_max_chunks", DEFAULT_MAX_CHUNKS)

        self.classifier = IntentClassifier(llm_manager)
        self.querier = KnowledgeBaseQuerier(config, vector_store)
        self.aggregator = ResultAggregator(self.querier)

    def resolve_max_chunks(self, max_chunks: Optional[int]) -> int:
        if not max_chunks or max_chunks <= 0:
            return self.default_max_chunks
        return max_chunks

    async def rag_query(self, user_query: str, max_chunks: Optional[int] = None) -> RagResult:
        """
        Retrieve the best chunks for a query across the relevant knowledge bases.

        Args:
            user_query: The user's natural language query
            max_chunks: Total result budget; unset or non-positive uses the default

        Returns:
            RagResult with chunks ranked by similarity

        Raises:
            Errors from the classification or embedding provider calls. No
            partial result is produced in that case.
        """
        max_chunks = self.resolve_max_chunks(max_chunks)
        logger.info(f"RAG query: {user_query}")

        # One provider snapshot for the whole call
        provider = await self.provider_selector.get_active_provider()

        # Step 1: Classify intent
        relevant_kbs = await self.classifier.classify_intent(user_query, provider)

        # Step 2: Generate embedding
        query_embedding = await self.llm_manager.embed(user_query, provider)

        # Step 3: Query relevant KBs in parallel
        per_kb_limit = math.ceil(max_chunks / len(relevant_kbs))
        logger.info(
            f"Querying {len(relevant_kbs)} KBs with {provider.value} embeddings, {per_kb_limit} chunks each"
        )

        # Step 4: Flatten and rank results
        return await self.aggregator.aggregate(
            query_embedding,
            relevant_kbs,
            per_kb_limit=per_kb_limit,
            max_chunks=max_chunks,
            provider=provider
        )
