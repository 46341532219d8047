"""
Intent Classifier for mapping queries to knowledge bases.
"""

import json
import logging
import re
from typing import List

from ..kb.models import KB_DESCRIPTIONS, DEFAULT_KB, KNOWN_KB_IDS
from ..models.llm_manager import LLMManager, ProviderName

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```json|```")


def build_classifier_prompt() -> str:
    """Build the system instruction listing every knowledge base."""
    kb_lines = "\n".join(f"- {kb.value}: {description}" for kb, description in KB_DESCRIPTIONS.items())

    return f"""You are a query classifier for a rural healthcare knowledge base system.

Available knowledge bases:
{kb_lines}

Classify the query into one or more relevant knowledge bases.
Return ONLY a JSON array of KB names, e.g., ["fhir", "it_security"]"""


class IntentClassifier:
    """LLM-backed classifier selecting the knowledge bases for a query."""

    def __init__(self, llm_manager: LLMManager):
        self.llm_manager = llm_manager
        self.system_prompt = build_classifier_prompt()

    async def classify_intent(self, query: str, provider: ProviderName) -> List[str]:
        """
        Classify a query into knowledge base ids.

        Args:
            query: The user's natural language query
            provider: Provider backing the completion call

        Returns:
            Non-empty list of knowledge base ids in the order the model gave
            them. Unparsable output falls back to the default knowledge base.
        """
        content = await self.llm_manager.complete(
            self.system_prompt, query, provider=provider, temperature=0.0
        )

        kb_ids = self.parse_response(content or "[]")

        unknown = [kb_id for kb_id in kb_ids if kb_id not in KNOWN_KB_IDS]
        if unknown:
            logger.warning(f"Classifier returned unknown knowledge bases: {unknown}")

        logger.info(f"Classified query into {kb_ids}")
        return kb_ids

    @staticmethod
    def parse_response(content: str) -> List[str]:
        """Parse a JSON array of KB names, tolerating Markdown code fences."""
        cleaned = CODE_FENCE_PATTERN.sub("", content).strip()

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing intent classification: {e}")
            return [DEFAULT_KB.value]

        if not isinstance(parsed, list):
            logger.warning(f"Intent classification is not a list: {cleaned[:100]}")
            return [DEFAULT_KB.value]

        kb_ids: List[str] = []
        for item in parsed:
            if isinstance(item, str) and item.strip() and item.strip() not in kb_ids:
                kb_ids.append(item.strip())

        return kb_ids or [DEFAULT_KB.value]
