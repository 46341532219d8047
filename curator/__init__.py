"""
Curator RAG Query Router

Retrieval-augmented query routing for the rural healthcare knowledge base:
intent classification, query embedding, parallel knowledge-base retrieval and
similarity-ranked merging of the results.
"""

__version__ = "1.0.0"
__author__ = "Curator Team"
