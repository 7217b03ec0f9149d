"""Persisted anime data models for read-model validation."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

AnimeStatus = Literal['ongoing', 'completed', 'upcoming']


class Subtitle(BaseModel):
    """Subtitle row attached to an episode link."""
    id: str
    link_id: Optional[str] = None
    language: str
    url: Optional[str] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None


class EpisodeLink(BaseModel):
    """Streaming or download link row."""
    id: str
    episode_id: Optional[str] = None
    platform: str
    url: str
    quality: Optional[str] = None
    file_size: Optional[str] = None
    subtitles: List[Subtitle] = Field(default_factory=list)

    @field_validator('subtitles', mode='before')
    @classmethod
    def validate_subtitles(cls, v):
        """Embedded relations come back as null when empty."""
        return v or []


class Episode(BaseModel):
    """Episode row with its links."""
    id: str
    anime_id: str
    episode_number: int
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[EpisodeLink] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def rename_links(cls, data):
        """The backend relation is called episode_links."""
        if isinstance(data, dict) and 'episode_links' in data:
            data = dict(data)
            data['links'] = data.pop('episode_links') or []
        return data


class AnimeWithDetails(BaseModel):
    """Anime row with the full episode tree."""
    id: str
    title: str
    description: str = ""
    synopsis: str = ""
    release_year: int
    episode_count: int = 0
    studio_id: Optional[str] = None
    studio_name: Optional[str] = None
    rating: float
    status: AnimeStatus
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    added_by: str
    is_archived: bool = False
    genres: List[str] = Field(default_factory=list)
    episodes: List[Episode] = Field(default_factory=list)

    @field_validator('description', 'synopsis', mode='before')
    @classmethod
    def validate_text(cls, v: Optional[str]) -> str:
        """Convert null text columns to empty strings."""
        return v or ""

    @field_validator('episodes', mode='before')
    @classmethod
    def validate_episodes(cls, v):
        """Sort episodes by number; embedded order is not guaranteed."""
        if not v:
            return []
        return sorted(v, key=lambda ep: ep['episode_number'] if isinstance(ep, dict) else ep.episode_number)

    @property
    def link_count(self) -> int:
        return sum(len(ep.links) for ep in self.episodes)

    @property
    def subtitle_count(self) -> int:
        return sum(len(link.subtitles) for ep in self.episodes for link in ep.links)
