"""Bulk episode tools layered on the form controller."""

import copy
from dataclasses import dataclass
from typing import List

from animedash.config.form_config import FormConfig
from animedash.data_entry import messages
from animedash.data_entry.form_controller import AnimeFormController
from animedash.data_entry.messages import MessageCategory, MessageType
from animedash.data_entry.validation import is_valid_duration
from animedash.state.anime_state import EpisodeDraft, LinkDraft, new_form_key


@dataclass(frozen=True)
class EpisodeStatistics:
    """Counts shown under the episode list."""
    episodes: int
    total_links: int
    episodes_with_links: int
    total_subtitles: int


class BulkEpisodeGenerator:
    """Higher-throughput edits on the controller's episode list."""

    def __init__(self, controller: AnimeFormController):
        self.controller = controller

    @property
    def episodes(self) -> List[EpisodeDraft]:
        return self.controller.draft.episodes

    def _reject(self, text: str, category: MessageCategory = MessageCategory.VALIDATION) -> bool:
        self.controller.notify(text, MessageType.ERROR, category)
        return False

    def _check_append(self, count: int) -> bool:
        if count <= 0:
            return self._reject(messages.BULK_COUNT_INVALID)
        if count > FormConfig.MAX_BULK_APPEND:
            return self._reject(messages.BULK_COUNT_TOO_HIGH.format(high=FormConfig.MAX_BULK_APPEND))
        if len(self.episodes) + count > FormConfig.MAX_EPISODES:
            return self._reject(messages.BULK_TOTAL_TOO_HIGH.format(high=FormConfig.MAX_EPISODES))
        return True

    def _append(self, new_episodes: List[EpisodeDraft]) -> None:
        self.controller.draft.episodes = self.episodes + new_episodes
        self.controller._touch()

    def append_episode(self) -> bool:
        if len(self.episodes) >= FormConfig.MAX_EPISODES:
            return self._reject(messages.MAX_EPISODES_REACHED.format(high=FormConfig.MAX_EPISODES))

        number = len(self.episodes) + 1
        self._append([EpisodeDraft(episode_number=number)])
        self.controller.notify(f"Episode {number} added", MessageType.SUCCESS)
        return True

    def append_episodes(self, count: int) -> bool:
        """Append ``count`` empty, sequentially numbered episodes."""
        if not self._check_append(count):
            return False

        start = len(self.episodes)
        self._append([EpisodeDraft(episode_number=start + i + 1) for i in range(count)])
        self.controller.notify(f"Added {count} episodes", MessageType.SUCCESS)
        return True

    def quick_setup(self, count: int) -> bool:
        """Append ``count`` episodes pre-filled with the default title, duration and link."""
        if not self._check_append(count):
            return False

        start = len(self.episodes)
        new_episodes = []
        for i in range(count):
            number = start + i + 1
            new_episodes.append(EpisodeDraft(
                episode_number=number,
                title=f"Episode {number}",
                duration=FormConfig.QUICK_SETUP_DURATION,
                links=[LinkDraft(platform=FormConfig.QUICK_SETUP_PLATFORM,
                                 quality=FormConfig.QUICK_SETUP_QUALITY)],
            ))
        self._append(new_episodes)
        self.controller.notify(f"Quick setup: Added {count} episodes with default settings", MessageType.SUCCESS)
        return True

    def duplicate_episode(self, template_index: int) -> bool:
        """Append a copy of an existing episode with every link url cleared."""
        template = self.controller.episode(template_index)
        if template is None:
            return self._reject(messages.INVALID_EPISODE_NUMBER)
        if len(self.episodes) >= FormConfig.MAX_EPISODES:
            return self._reject(messages.MAX_EPISODES_REACHED.format(high=FormConfig.MAX_EPISODES))

        links = copy.deepcopy(template.links)
        for link in links:
            link.url = ""
            link.form_key = new_form_key()
            for subtitle in link.subtitles:
                subtitle.form_key = new_form_key()
        number = len(self.episodes) + 1
        self._append([EpisodeDraft(
            episode_number=number,
            title=f"{template.title} (Copy)" if template.title else "",
            description=template.description,
            duration=template.duration,
            thumbnail_url=template.thumbnail_url,
            links=links,
        )])
        self.controller.notify(
            f"Duplicated episode {template_index + 1} as episode {number}", MessageType.SUCCESS)
        return True

    def remove_last_episode(self) -> bool:
        if len(self.episodes) <= FormConfig.MIN_EPISODES:
            return self._reject(messages.CANNOT_REMOVE_LAST_EPISODE, MessageCategory.DATA_ENTRY)

        self.controller.draft.episodes = self.episodes[:-1]
        self.controller._touch()
        self.controller.notify("Removed last episode", MessageType.SUCCESS)
        return True

    def set_all_durations(self, duration: str) -> bool:
        if not duration:
            return False
        if not is_valid_duration(duration):
            return self._reject(messages.DURATION_FORMAT)

        for episode in self.episodes:
            episode.duration = duration
            episode.form_key = new_form_key()
        self.controller._touch()
        self.controller.notify(f'Set duration "{duration}" for all episodes', MessageType.SUCCESS)
        return True

    def _apply_to_links(self, field_name: str, value: str) -> None:
        for episode in self.episodes:
            if not episode.links:
                episode.links = [LinkDraft(**{field_name: value})]
            else:
                # Rewritten rows get a new form key so widgets bound to them reload
                for link in episode.links:
                    setattr(link, field_name, value)
                    link.form_key = new_form_key()
        self.controller._touch()

    def set_all_quality(self, quality: str) -> bool:
        """Set quality on every link, giving link-less episodes one link to hold it."""
        if not quality:
            return False
        self._apply_to_links('quality', quality)
        self.controller.notify(f'Set quality "{quality}" for all episodes', MessageType.SUCCESS)
        return True

    def set_all_platform(self, platform: str) -> bool:
        """Set platform on every link; the platform must be a supported one."""
        if not platform:
            return False
        if not FormConfig.is_supported_platform(platform):
            return self._reject(messages.UNSUPPORTED_PLATFORM.format(
                platforms=', '.join(FormConfig.SUPPORTED_PLATFORMS)))

        self._apply_to_links('platform', platform)
        self.controller.notify(f'Set platform "{platform}" for all episodes', MessageType.SUCCESS)
        return True

    def clear_all_links(self, confirmed: bool = False) -> bool:
        """Empty every episode's link list. Irreversible, so the caller must confirm."""
        if not confirmed:
            return self._reject(messages.CLEAR_LINKS_UNCONFIRMED, MessageCategory.DATA_ENTRY)

        for episode in self.episodes:
            episode.links = []
        self.controller._touch()
        self.controller.notify("Cleared all episode links", MessageType.SUCCESS)
        return True

    def statistics(self) -> EpisodeStatistics:
        return EpisodeStatistics(
            episodes=len(self.episodes),
            total_links=sum(len(ep.links) for ep in self.episodes),
            episodes_with_links=sum(1 for ep in self.episodes if ep.links),
            total_subtitles=sum(len(link.subtitles) for ep in self.episodes for link in ep.links),
        )
