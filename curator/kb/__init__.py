"""
Knowledge base taxonomy and per-knowledge-base retrieval.
"""

from .knowledge_base import KnowledgeBaseQuerier
from .models import KnowledgeBaseId, KB_DESCRIPTIONS, DEFAULT_KB

__all__ = ["KnowledgeBaseQuerier", "KnowledgeBaseId", "KB_DESCRIPTIONS", "DEFAULT_KB"]
