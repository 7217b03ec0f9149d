"""Configuration package: environment settings, logging, Supabase client, form limits."""

from .form_config import FormConfig
from .settings import Settings, load_settings

__all__ = ['FormConfig', 'Settings', 'load_settings']
