"""
Runtime settings lookups for the Curator query router.
"""

from .provider_selector import ProviderSelector, SettingsStore, SupabaseSettingsStore

__all__ = ["ProviderSelector", "SettingsStore", "SupabaseSettingsStore"]
