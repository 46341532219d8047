"""
Database clients for the Curator query router.
"""

from .supabase_client import create_supabase_client

__all__ = ["create_supabase_client"]
