"""Form state controller for the add-anime flow.

The controller owns one AnimeDraft and is the only thing that mutates it.
Each operation either applies its change and bumps ``version`` or rejects the
input, queues a notice for the page, and leaves the draft untouched.
Operations addressed by index return False when the index is out of range.
"""

import logging
from typing import List, Optional

from animedash.config.form_config import FormConfig
from animedash.data_entry import messages
from animedash.data_entry.messages import MessageCategory, MessageType, Notice
from animedash.data_entry.validation import ValidationIssue, url_warning, validate_draft
from animedash.state.anime_state import AnimeDraft, EpisodeDraft, LinkDraft, SubtitleDraft

logger = logging.getLogger(__name__)


class AnimeFormController:
    """Holds the current draft and the closed set of edits allowed on it."""

    ANIME_FIELDS = ('title', 'description', 'synopsis', 'thumbnail_url',
                    'studio_name', 'rating', 'release_year', 'status')
    EPISODE_FIELDS = ('title', 'description', 'duration', 'thumbnail_url')
    LINK_FIELDS = ('platform', 'url', 'quality', 'file_size')
    SUBTITLE_FIELDS = ('language', 'url')
    URL_FIELDS = ('url', 'thumbnail_url')

    def __init__(self, draft: Optional[AnimeDraft] = None, version: int = 0):
        self.draft = draft if draft is not None else AnimeDraft()
        self.version = version
        self.notices: List[Notice] = []

    # Notices

    def notify(self, text: str, msg_type: MessageType = MessageType.ERROR,
               category: MessageCategory = MessageCategory.DATA_ENTRY) -> None:
        self.notices.append(Notice(text, msg_type, category))

    def drain_notices(self) -> List[Notice]:
        """Return queued notices and clear the queue."""
        notices, self.notices = self.notices, []
        return notices

    def _touch(self) -> None:
        self.version += 1

    def _check_url(self, field_name: str, value) -> None:
        if field_name in self.URL_FIELDS and isinstance(value, str):
            warning = url_warning(value)
            if warning:
                self.notify(warning, MessageType.WARNING, MessageCategory.VALIDATION)

    # Lookups

    def episode(self, index: int) -> Optional[EpisodeDraft]:
        if 0 <= index < len(self.draft.episodes):
            return self.draft.episodes[index]
        return None

    def link(self, episode_index: int, link_index: int) -> Optional[LinkDraft]:
        episode = self.episode(episode_index)
        if episode is None or not 0 <= link_index < len(episode.links):
            return None
        return episode.links[link_index]

    def subtitle(self, episode_index: int, link_index: int, subtitle_index: int) -> Optional[SubtitleDraft]:
        link = self.link(episode_index, link_index)
        if link is None or not 0 <= subtitle_index < len(link.subtitles):
            return None
        return link.subtitles[subtitle_index]

    # Anime fields

    def set_field(self, name: str, value) -> bool:
        """Update a scalar anime field. Only URL fields get an advisory check."""
        if name == 'episode_count':
            return self.set_episode_count(int(value))
        if name not in self.ANIME_FIELDS:
            raise ValueError(f"Unknown anime field: {name}")

        self._check_url(name, value)
        setattr(self.draft, name, value)
        self._touch()
        return True

    def toggle_genre(self, name: str) -> bool:
        """Add the genre if absent, remove it if present."""
        if name in self.draft.genres:
            self.draft.genres = [g for g in self.draft.genres if g != name]
        else:
            self.draft.genres = self.draft.genres + [name]
        self._touch()
        return True

    # Episodes

    def renumber_episodes(self) -> None:
        for number, episode in enumerate(self.draft.episodes, start=1):
            episode.episode_number = number

    def set_episode_count(self, count: int) -> bool:
        """Grow or shrink the episode list to exactly ``count`` episodes.

        New episodes continue the numbering from the end; shrinking drops
        episodes from the tail.
        """
        if count < FormConfig.MIN_EPISODES:
            self.notify(messages.EPISODE_COUNT_TOO_LOW.format(low=FormConfig.MIN_EPISODES),
                        category=MessageCategory.VALIDATION)
            return False
        if count > FormConfig.MAX_EPISODES:
            self.notify(messages.EPISODE_COUNT_TOO_HIGH.format(high=FormConfig.MAX_EPISODES),
                        category=MessageCategory.VALIDATION)
            return False

        episodes = self.draft.episodes
        if count == len(episodes):
            return True
        if count > len(episodes):
            start = len(episodes)
            self.draft.episodes = episodes + [
                EpisodeDraft(episode_number=number) for number in range(start + 1, count + 1)
            ]
        else:
            self.draft.episodes = episodes[:count]
        self._touch()
        return True

    def update_episode(self, index: int, field_name: str, value: str) -> bool:
        if field_name not in self.EPISODE_FIELDS:
            raise ValueError(f"Unknown episode field: {field_name}")
        episode = self.episode(index)
        if episode is None:
            return False

        self._check_url(field_name, value)
        setattr(episode, field_name, value)
        self._touch()
        return True

    def remove_episode(self, index: int) -> bool:
        """Remove one episode and renumber the rest."""
        if self.episode(index) is None:
            return False
        if len(self.draft.episodes) <= FormConfig.MIN_EPISODES:
            self.notify(messages.CANNOT_REMOVE_LAST_EPISODE)
            return False

        self.draft.episodes = [ep for i, ep in enumerate(self.draft.episodes) if i != index]
        self.renumber_episodes()
        self._touch()
        return True

    # Links

    def add_link(self, episode_index: int) -> bool:
        episode = self.episode(episode_index)
        if episode is None:
            return False
        if len(episode.links) >= FormConfig.MAX_LINKS_PER_EPISODE:
            self.notify(messages.MAX_LINKS_REACHED.format(high=FormConfig.MAX_LINKS_PER_EPISODE))
            return False

        episode.links = episode.links + [LinkDraft()]
        self._touch()
        self.notify("Link added to episode", MessageType.SUCCESS)
        return True

    def update_link(self, episode_index: int, link_index: int, field_name: str, value: str) -> bool:
        if field_name not in self.LINK_FIELDS:
            raise ValueError(f"Unknown link field: {field_name}")
        link = self.link(episode_index, link_index)
        if link is None:
            return False

        self._check_url(field_name, value)
        setattr(link, field_name, value)
        self._touch()
        return True

    def remove_link(self, episode_index: int, link_index: int) -> bool:
        if self.link(episode_index, link_index) is None:
            return False
        episode = self.draft.episodes[episode_index]
        episode.links = [link for i, link in enumerate(episode.links) if i != link_index]
        self._touch()
        self.notify("Link removed", MessageType.SUCCESS)
        return True

    # Subtitles

    def add_subtitle(self, episode_index: int, link_index: int) -> bool:
        link = self.link(episode_index, link_index)
        if link is None:
            return False
        if len(link.subtitles) >= FormConfig.MAX_SUBTITLES_PER_LINK:
            self.notify(messages.MAX_SUBTITLES_REACHED.format(high=FormConfig.MAX_SUBTITLES_PER_LINK))
            return False

        link.subtitles = link.subtitles + [SubtitleDraft()]
        self._touch()
        self.notify("Subtitle option added", MessageType.SUCCESS)
        return True

    def update_subtitle(self, episode_index: int, link_index: int, subtitle_index: int,
                        field_name: str, value: str) -> bool:
        if field_name not in self.SUBTITLE_FIELDS:
            raise ValueError(f"Unknown subtitle field: {field_name}")
        subtitle = self.subtitle(episode_index, link_index, subtitle_index)
        if subtitle is None:
            return False

        self._check_url(field_name, value)
        setattr(subtitle, field_name, value)
        self._touch()
        return True

    def attach_subtitle_file(self, episode_index: int, link_index: int, subtitle_index: int,
                             file_name: Optional[str]) -> bool:
        """Record an uploaded subtitle file; None clears the upload."""
        subtitle = self.subtitle(episode_index, link_index, subtitle_index)
        if subtitle is None:
            return False

        if file_name and not file_name.lower().endswith(FormConfig.SUBTITLE_FILE_EXTENSIONS):
            self.notify(messages.SUBTITLE_FILE_TYPE.format(
                extensions=', '.join(FormConfig.SUBTITLE_FILE_EXTENSIONS)),
                MessageType.WARNING, MessageCategory.VALIDATION)
        subtitle.attach_file(file_name)
        self._touch()
        return True

    def remove_subtitle(self, episode_index: int, link_index: int, subtitle_index: int) -> bool:
        if self.subtitle(episode_index, link_index, subtitle_index) is None:
            return False
        link = self.draft.episodes[episode_index].links[link_index]
        link.subtitles = [s for i, s in enumerate(link.subtitles) if i != subtitle_index]
        self._touch()
        return True

    # Submit

    def validate_for_submit(self) -> Optional[ValidationIssue]:
        """Return the first violated rule, queueing it as an error notice."""
        issue = validate_draft(self.draft)
        if issue is not None:
            logger.debug(f"Draft failed validation on {issue.rule}: {issue.message}")
            self.notify(issue.message, MessageType.ERROR, MessageCategory.VALIDATION)
        return issue

    def reset(self) -> None:
        """Replace the draft with a fresh one (after submit or cancel)."""
        self.draft = AnimeDraft()
        self._touch()
