"""
Add-anime draft state.

Nothing here is persisted; a draft lives in memory until it is submitted or
cancelled.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from animedash.config.form_config import FormConfig


def new_form_key() -> str:
    """Identity for one row of the form, stable across reorders and removals."""
    return uuid.uuid4().hex


@dataclass
class SubtitleDraft:
    """Subtitle option for one link. Either a URL or an uploaded file."""
    language: str = ""
    url: str = ""
    file_path: str = ""
    file_name: str = ""
    form_key: str = field(default_factory=new_form_key, compare=False)

    @property
    def has_source(self) -> bool:
        return bool(self.url or self.file_path)

    @property
    def is_submittable(self) -> bool:
        return bool(self.language) and self.has_source

    def attach_file(self, file_name: Optional[str]) -> None:
        """Record an uploaded subtitle file, or clear it when file_name is None."""
        if file_name:
            self.file_path = f"{FormConfig.UPLOAD_PREFIX}{file_name}"
            self.file_name = file_name
        else:
            self.file_path = ""
            self.file_name = ""


@dataclass
class LinkDraft:
    """Streaming or download link for an episode."""
    platform: str = ""
    url: str = ""
    quality: str = ""
    file_size: str = ""
    subtitles: List[SubtitleDraft] = field(default_factory=list)
    form_key: str = field(default_factory=new_form_key, compare=False)

    @property
    def is_valid(self) -> bool:
        return bool(self.platform and self.url)


@dataclass
class EpisodeDraft:
    """Episode entry. episode_number is 1-based and kept sequential by the controller."""
    episode_number: int
    title: str = ""
    description: str = ""
    duration: str = ""
    thumbnail_url: str = ""
    links: List[LinkDraft] = field(default_factory=list)
    form_key: str = field(default_factory=new_form_key, compare=False)

    @property
    def has_valid_link(self) -> bool:
        return any(link.is_valid for link in self.links)


def _current_year() -> int:
    return date.today().year


@dataclass
class AnimeDraft:
    """Anime entry with its ordered episodes."""
    title: str = ""
    description: str = ""
    synopsis: str = ""
    thumbnail_url: str = ""
    studio_name: str = ""
    rating: float = FormConfig.DEFAULT_RATING
    release_year: int = field(default_factory=_current_year)
    status: str = FormConfig.DEFAULT_STATUS
    genres: List[str] = field(default_factory=list)
    episodes: List[EpisodeDraft] = field(default_factory=lambda: [EpisodeDraft(episode_number=1)])
    # A new draft gets a new key, so widgets bound to the old one start empty
    form_key: str = field(default_factory=new_form_key, compare=False)

    @property
    def episode_count(self) -> int:
        # Derived so it can never drift from the episode list
        return len(self.episodes)


@dataclass
class AddAnimeState:
    """Page state for the add-anime flow."""
    draft: AnimeDraft = field(default_factory=AnimeDraft)
    version: int = 0
    form_error: Optional[str] = None  # Inline error shown above the form
    success_message: Optional[str] = None  # Shown after a successful submit
