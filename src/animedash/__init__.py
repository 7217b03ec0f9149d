"""Anime catalog data entry.

Draft state, bulk episode tools, and the Supabase write/read pipeline for the
anime dashboard.
"""

__version__ = "0.3.0"
