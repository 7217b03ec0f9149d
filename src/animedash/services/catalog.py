"""
Read model for the signed-in user's anime catalog.

Every fetch pulls the whole anime → episodes → links → subtitles tree. Writes
never patch the cached list; they call refetch() instead.
"""

import logging
from typing import List, Optional

import pandas as pd
from postgrest import APIError
from pydantic import ValidationError
from supabase import Client

from animedash.auth.auth_state import AuthSession, AuthUser
from animedash.services.models import AnimeWithDetails

logger = logging.getLogger(__name__)

ANIME_TREE_SELECT = '*, episodes(*, episode_links(*, subtitles(*)))'

FRAME_COLUMNS = ['id', 'title', 'status', 'release_year', 'rating',
                 'episodes', 'links', 'subtitles', 'created_at']


class AnimeCatalog:
    """Anime owned by the current user, newest first."""

    def __init__(self, client: Client, auth: AuthSession):
        self.client = client
        self.auth = auth
        self.items: List[AnimeWithDetails] = []
        self.loading = False
        self._unsubscribe = auth.subscribe(self._on_auth_change)
        if auth.user is not None:
            self.fetch()

    def _on_auth_change(self, user: Optional[AuthUser]) -> None:
        if user is not None:
            self.fetch()
        else:
            self.items = []
            self.loading = False

    def close(self) -> None:
        """Stop following auth changes."""
        self._unsubscribe()

    def fetch(self) -> List[AnimeWithDetails]:
        """Load the full tree for the current user.

        A failed query is logged and the previous items are kept.
        """
        user = self.auth.user
        if user is None:
            return self.items

        self.loading = True
        try:
            response = self.client.table('anime') \
                .select(ANIME_TREE_SELECT) \
                .eq('added_by', user.id) \
                .eq('is_archived', False) \
                .order('created_at', desc=True) \
                .execute()
            self.items = [AnimeWithDetails.model_validate(row) for row in response.data or []]
        except APIError as e:
            logger.error(f"Error fetching anime: {e.message}")
        except ValidationError as e:
            logger.error(f"Unexpected anime row shape: {str(e)}")
        except Exception as e:
            logger.error(f"Error fetching anime: {str(e)}")
        finally:
            self.loading = False
        return self.items

    def refetch(self) -> List[AnimeWithDetails]:
        return self.fetch()

    def get(self, anime_id: str) -> Optional[AnimeWithDetails]:
        return next((anime for anime in self.items if anime.id == anime_id), None)

    def to_frame(self) -> pd.DataFrame:
        """Summary table of the catalog for display."""
        rows = [{
            'id': anime.id,
            'title': anime.title,
            'status': anime.status,
            'release_year': anime.release_year,
            'rating': anime.rating,
            'episodes': len(anime.episodes),
            'links': anime.link_count,
            'subtitles': anime.subtitle_count,
            'created_at': anime.created_at,
        } for anime in self.items]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)
