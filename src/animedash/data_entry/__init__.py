"""Add-anime form logic: draft controller, bulk episode tools, validation."""

from .form_controller import AnimeFormController
from .episode_generator import BulkEpisodeGenerator, EpisodeStatistics
from .validation import ValidationIssue, validate_draft

__all__ = ['AnimeFormController', 'BulkEpisodeGenerator', 'EpisodeStatistics',
           'ValidationIssue', 'validate_draft']
