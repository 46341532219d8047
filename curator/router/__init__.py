"""
Query routing logic for the Curator query router.
"""

from .query_router import QueryRouter
from .intent_classifier import IntentClassifier

__all__ = ["QueryRouter", "IntentClassifier"]
