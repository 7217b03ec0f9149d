"""Supabase Client Configuration.

This module provides a centralized configuration for Supabase client initialization.
The dashboard talks to the backend with the anon key; row-level security on the
backend decides what the signed-in user may read or write.
"""

import logging
from typing import Optional

from supabase import create_client, Client

from animedash.config.settings import Settings, load_settings

logger = logging.getLogger(__name__)


class SupabaseConfig:
    """Supabase configuration singleton."""
    _instance = None
    _client: Optional[Client] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def client(self) -> Optional[Client]:
        """Get the Supabase client instance."""
        return self._client

    def initialize(self, settings: Optional[Settings] = None) -> Client:
        """Create the client from settings, loading them from the environment if needed.

        Raises:
            ConfigurationError: If the endpoint or key is missing.
        """
        settings = settings or load_settings()
        logger.info(f"Initializing Supabase client with URL: {settings.supabase_url}")
        try:
            self._client = create_client(settings.supabase_url, settings.supabase_anon_key)
        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {str(e)}")
            self._client = None
            raise
        logger.info("Supabase client initialized successfully")
        return self._client

    def reset(self):
        """Drop the cached client."""
        self._client = None


supabase_config = SupabaseConfig()


def get_client(settings: Optional[Settings] = None) -> Client:
    """Get the shared Supabase client, creating it on first use.

    Args:
        settings: Optional settings to initialize with instead of the environment.

    Returns:
        Client: The Supabase client instance.
    """
    client = supabase_config.client
    if client is None:
        client = supabase_config.initialize(settings)
    return client


def reset_client():
    """Forget the shared client so the next get_client() builds a new one."""
    supabase_config.reset()
