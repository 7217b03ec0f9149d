"""Backend services: submission pipeline, read model, persisted models."""

from .anime_service import AnimeService, RowResult, RowStatus, SubmissionReport, WriteReport
from .catalog import AnimeCatalog
from .models import AnimeWithDetails, Episode, EpisodeLink, Subtitle

__all__ = ['AnimeService', 'RowResult', 'RowStatus', 'SubmissionReport', 'WriteReport',
           'AnimeCatalog', 'AnimeWithDetails', 'Episode', 'EpisodeLink', 'Subtitle']
