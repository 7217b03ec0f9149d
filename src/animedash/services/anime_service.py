"""
Anime write services for interacting with Supabase.

Submitting a draft is a sequence of single-row inserts in dependency order:
anime, then each episode, then each episode's links, then each link's
subtitles. It is not transactional. The anime row must succeed or nothing is
written; after that every nested failure is logged, recorded in the report,
and skipped.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from postgrest import APIError
from supabase import Client

from animedash.auth.auth_state import AuthSession
from animedash.data_entry.validation import validate_draft
from animedash.errors import BackendError, FormValidationError
from animedash.services.catalog import AnimeCatalog
from animedash.state.anime_state import AnimeDraft, EpisodeDraft, LinkDraft, SubtitleDraft

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    'title', 'description', 'synopsis', 'release_year', 'episode_count',
    'studio_id', 'studio_name', 'rating', 'status', 'thumbnail_url',
    'is_archived', 'genres',
}


class RowStatus(Enum):
    """Outcome of one nested row."""
    INSERTED = "inserted"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RowResult:
    table: str
    label: str  # e.g. "episode 2 link 1"
    status: RowStatus
    row_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class WriteReport:
    """Per-row results of a best-effort nested write."""
    rows: List[RowResult] = field(default_factory=list)

    def record(self, table: str, label: str, status: RowStatus,
               row_id: Optional[str] = None, reason: Optional[str] = None) -> None:
        self.rows.append(RowResult(table, label, status, row_id, reason))

    def _with_status(self, status: RowStatus, table: Optional[str]) -> List[RowResult]:
        return [r for r in self.rows if r.status == status and (table is None or r.table == table)]

    def inserted(self, table: Optional[str] = None) -> List[RowResult]:
        return self._with_status(RowStatus.INSERTED, table)

    def failed(self, table: Optional[str] = None) -> List[RowResult]:
        return self._with_status(RowStatus.FAILED, table)

    def skipped(self, table: Optional[str] = None) -> List[RowResult]:
        return self._with_status(RowStatus.SKIPPED, table)

    @property
    def complete(self) -> bool:
        """True when no nested row failed."""
        return not self.failed()


@dataclass
class SubmissionReport(WriteReport):
    """Result of submitting a draft. The anime row always exists."""
    anime: Dict[str, Any] = field(default_factory=dict)

    @property
    def anime_id(self) -> str:
        return self.anime['id']

    @property
    def succeeded(self) -> bool:
        return bool(self.anime)


def failure_reason(error: Exception) -> str:
    """Backend message for an APIError, the exception text for anything else."""
    if isinstance(error, APIError):
        return error.message or str(error)
    return str(error) or type(error).__name__


def anime_row(draft: AnimeDraft, user_id: str) -> Dict[str, Any]:
    return {
        'title': draft.title,
        'description': draft.description or '',
        'synopsis': draft.synopsis or draft.description or '',
        'release_year': draft.release_year,
        'episode_count': draft.episode_count,
        'studio_name': draft.studio_name or None,
        'rating': draft.rating,
        'status': draft.status,
        'thumbnail_url': draft.thumbnail_url or None,
        'added_by': user_id,
        'genres': list(draft.genres),
    }


def episode_row(anime_id: str, episode: EpisodeDraft) -> Dict[str, Any]:
    return {
        'anime_id': anime_id,
        'episode_number': episode.episode_number,
        'title': episode.title or None,
        'description': episode.description or None,
        'duration': episode.duration or None,
        'thumbnail_url': episode.thumbnail_url or None,
    }


def link_row(episode_id: str, link: LinkDraft) -> Dict[str, Any]:
    return {
        'episode_id': episode_id,
        'platform': link.platform,
        'url': link.url,
        'quality': link.quality or None,
        'file_size': link.file_size or None,
    }


def subtitle_row(link_id: str, subtitle: SubtitleDraft) -> Dict[str, Any]:
    return {
        'link_id': link_id,
        'language': subtitle.language,
        'url': subtitle.url or None,
        'file_path': subtitle.file_path or None,
        'file_name': subtitle.file_name or None,
    }


class AnimeService:
    """Writes for the signed-in user's catalog. Every successful write re-fetches the catalog."""

    def __init__(self, client: Client, auth: AuthSession, catalog: Optional[AnimeCatalog] = None):
        self.client = client
        self.auth = auth
        self.catalog = catalog

    def _refresh(self) -> None:
        if self.catalog is not None:
            self.catalog.refetch()

    def _insert_row(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        response = self.client.table(table).insert(row).execute()
        if not response.data:
            raise BackendError(f"No data returned from {table} insert")
        return response.data[0]

    def submit(self, draft: AnimeDraft) -> SubmissionReport:
        """Insert a draft's anime row and, best-effort, its nested rows.

        Raises:
            FormValidationError: The draft breaks a submit rule; nothing is sent.
            AuthRequired: No signed-in user; nothing is sent.
            BackendError: The anime row could not be inserted; nothing else is sent.
        """
        issue = validate_draft(draft)
        if issue is not None:
            raise FormValidationError(issue)
        user = self.auth.require_user()

        try:
            anime = self._insert_row('anime', anime_row(draft, user.id))
        except Exception as e:
            reason = failure_reason(e)
            logger.error(f"Error inserting anime: {reason}")
            raise BackendError("Failed to add anime", reason) from e

        report = SubmissionReport(anime=anime)
        for episode in sorted(draft.episodes, key=lambda ep: ep.episode_number):
            self._insert_episode(anime['id'], episode, report)

        failed = report.failed()
        if failed:
            logger.warning(f"Anime {anime['id']} saved with {len(failed)} failed nested rows")
        else:
            logger.info(f"Anime {anime['id']} saved with {len(draft.episodes)} episodes")

        self._refresh()
        return report

    def _insert_episode(self, anime_id: str, episode: EpisodeDraft, report: WriteReport) -> None:
        label = f"episode {episode.episode_number}"
        try:
            row = self._insert_row('episodes', episode_row(anime_id, episode))
        except Exception as e:
            reason = failure_reason(e)
            logger.error(f"Error inserting {label} of anime {anime_id}: {reason}")
            report.record('episodes', label, RowStatus.FAILED, reason=reason)
            for i, _ in enumerate(episode.links, start=1):
                report.record('episode_links', f"{label} link {i}", RowStatus.SKIPPED,
                              reason="episode not inserted")
            return

        report.record('episodes', label, RowStatus.INSERTED, row_id=row['id'])
        self._insert_links(row['id'], episode.links, report, label)

    def _insert_links(self, episode_id: str, links: List[LinkDraft], report: WriteReport,
                      episode_label: str) -> None:
        for i, link in enumerate(links, start=1):
            label = f"{episode_label} link {i}"
            if not link.is_valid:
                report.record('episode_links', label, RowStatus.SKIPPED, reason="missing platform or url")
                continue

            try:
                row = self._insert_row('episode_links', link_row(episode_id, link))
            except Exception as e:
                reason = failure_reason(e)
                logger.error(f"Error inserting {label}: {reason}")
                report.record('episode_links', label, RowStatus.FAILED, reason=reason)
                continue

            report.record('episode_links', label, RowStatus.INSERTED, row_id=row['id'])
            self._insert_subtitles(row['id'], link.subtitles, report, label)

    def _insert_subtitles(self, link_id: str, subtitles: List[SubtitleDraft], report: WriteReport,
                          link_label: str) -> None:
        for i, subtitle in enumerate(subtitles, start=1):
            label = f"{link_label} subtitle {i}"
            if not subtitle.is_submittable:
                report.record('subtitles', label, RowStatus.SKIPPED, reason="missing language or source")
                continue

            try:
                row = self._insert_row('subtitles', subtitle_row(link_id, subtitle))
            except Exception as e:
                reason = failure_reason(e)
                logger.error(f"Error inserting {label}: {reason}")
                report.record('subtitles', label, RowStatus.FAILED, reason=reason)
                continue

            report.record('subtitles', label, RowStatus.INSERTED, row_id=row['id'])

    def update_anime(self, anime_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Update anime columns, scoped to the current owner.

        Raises:
            ValueError: ``updates`` names a column that cannot be updated.
            AuthRequired: No signed-in user.
            BackendError: The update failed or matched no row.
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update anime fields: {', '.join(sorted(unknown))}")
        user = self.auth.require_user()

        data = dict(updates)
        data['updated_at'] = datetime.now(timezone.utc).isoformat()
        try:
            response = self.client.table('anime') \
                .update(data) \
                .eq('id', anime_id) \
                .eq('added_by', user.id) \
                .execute()
        except Exception as e:
            reason = failure_reason(e)
            logger.error(f"Error updating anime {anime_id}: {reason}")
            raise BackendError("Failed to update anime", reason) from e

        if not response.data:
            raise BackendError("Anime not found")

        self._refresh()
        return response.data[0]

    def delete_anime(self, anime_id: str) -> None:
        """Delete an anime owned by the current user."""
        user = self.auth.require_user()
        try:
            self.client.table('anime') \
                .delete() \
                .eq('id', anime_id) \
                .eq('added_by', user.id) \
                .execute()
        except Exception as e:
            reason = failure_reason(e)
            logger.error(f"Error deleting anime {anime_id}: {reason}")
            raise BackendError("Failed to delete anime", reason) from e

        self._refresh()

    def add_links_to_anime(self, anime_id: str, episode_number: int, links: List[LinkDraft]) -> WriteReport:
        """Attach links (and their subtitles) to an existing episode, best-effort.

        Raises:
            AuthRequired: No signed-in user.
            BackendError: The episode does not exist or the lookup failed.
        """
        self.auth.require_user()
        try:
            response = self.client.table('episodes') \
                .select('id') \
                .eq('anime_id', anime_id) \
                .eq('episode_number', episode_number) \
                .single() \
                .execute()
        except APIError as e:
            logger.error(f"Error finding episode {episode_number} of anime {anime_id}: {e.message}")
            raise BackendError("Episode not found", e.message) from e
        except Exception as e:
            reason = failure_reason(e)
            logger.error(f"Error looking up episode {episode_number} of anime {anime_id}: {reason}")
            raise BackendError("Failed to look up episode", reason) from e

        if not response.data:
            raise BackendError("Episode not found")

        report = WriteReport()
        self._insert_links(response.data['id'], links, report, f"episode {episode_number}")
        self._refresh()
        return report
