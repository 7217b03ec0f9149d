"""Draft and page state for the add-anime flow."""

from .anime_state import AnimeDraft, EpisodeDraft, LinkDraft, SubtitleDraft, AddAnimeState

__all__ = ['AnimeDraft', 'EpisodeDraft', 'LinkDraft', 'SubtitleDraft', 'AddAnimeState']
