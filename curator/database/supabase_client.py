"""
Supabase client factory shared by the settings store and the vector store.
"""

import logging
import os
from typing import Dict, Any

from supabase import create_client, Client

from ..models.llm_manager import resolve_env_vars

logger = logging.getLogger(__name__)


def create_supabase_client(config: Dict[str, Any]) -> Client:
    """
    Create a Supabase client from the ``supabase`` config section.

    ``${VAR}`` placeholders are resolved from the environment; when the section
    is missing, SUPABASE_URL and SUPABASE_ANON_KEY are used directly.
    """
    supabase_config = config.get("supabase", {}) or {}
    url = resolve_env_vars(supabase_config.get("url", "")) or os.getenv("SUPABASE_URL")
    key = resolve_env_vars(supabase_config.get("key", "")) or os.getenv("SUPABASE_ANON_KEY")

    if not url or not key or url.startswith("${") or key.startswith("${"):
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

    client = create_client(url, key)
    logger.info("Supabase client initialized")
    return client
