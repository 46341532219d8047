"""
Provider selection from the persisted application settings.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from supabase import Client

from ..models.llm_manager import ProviderName

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_KEY = "ai_provider"


class SettingsStore(ABC):
    """Read-only view of the key/value settings table."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored value for key, or None if absent."""
        pass


class SupabaseSettingsStore(SettingsStore):
    """Settings store backed by the Supabase ``settings`` table."""

    def __init__(self, client: Client, table: str = "settings"):
        self.client = client
        self.table = table

    def _fetch(self, key: str) -> Optional[Dict[str, Any]]:
        response = self.client.table(self.table).select("value").eq("key", key).maybe_single().execute()
        if response is None or not response.data:
            return None
        return response.data.get("value")

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        # supabase-py is synchronous
        return await asyncio.to_thread(self._fetch, key)


class ProviderSelector:
    """Resolves the active model provider.

    The setting is read on every call, so a change made through the settings
    page applies to the next query without a restart. Any failure to read or
    interpret the setting resolves to the default provider.
    """

    def __init__(
        self,
        store: SettingsStore,
        key: str = DEFAULT_PROVIDER_KEY,
        default: ProviderName = ProviderName.GEMINI
    ):
        self.store = store
        self.key = key
        self.default = default

    async def get_active_provider(self) -> ProviderName:
        try:
            value = await self.store.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read {self.key} setting: {e}, using {self.default.value}")
            return self.default

        if not isinstance(value, dict) or not value.get("provider"):
            logger.debug(f"No usable {self.key} setting, using {self.default.value}")
            return self.default

        try:
            return ProviderName(value["provider"])
        except ValueError:
            logger.warning(f"Unknown provider {value['provider']!r} in settings, using {self.default.value}")
            return self.default

    @classmethod
    def from_config(cls, config: Dict[str, Any], store: SettingsStore) -> "ProviderSelector":
        """Build a selector from the ``settings`` config section."""
        settings_config = config.get("settings", {}) or {}
        return cls(
            store,
            key=settings_config.get("provider_key", DEFAULT_PROVIDER_KEY),
            default=ProviderName(settings_config.get("default_provider", ProviderName.GEMINI.value))
        )
