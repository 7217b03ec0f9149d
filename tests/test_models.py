"""Tests for the persisted anime models."""

import pytest
from pydantic import ValidationError

from animedash.services.models import AnimeWithDetails, Episode, EpisodeLink


def anime_row(**overrides):
    row = {
        'id': 'a1',
        'title': 'Cowboy Bebop',
        'description': None,
        'synopsis': None,
        'release_year': 1998,
        'rating': 9.0,
        'status': 'completed',
        'added_by': 'user-1',
        'created_at': '2024-01-01T00:00:00+00:00',
        'episodes': [
            {'id': 'e2', 'anime_id': 'a1', 'episode_number': 2, 'episode_links': None},
            {'id': 'e1', 'anime_id': 'a1', 'episode_number': 1, 'episode_links': [
                {'id': 'l1', 'episode_id': 'e1', 'platform': 'Crunchyroll',
                 'url': 'https://cr.example.com/1', 'subtitles': None},
                {'id': 'l2', 'episode_id': 'e1', 'platform': 'Netflix',
                 'url': 'https://netflix.example.com/1', 'subtitles': [
                     {'id': 's1', 'link_id': 'l2', 'language': 'English', 'file_path': 'uploads/1.srt'},
                 ]},
            ]},
        ],
    }
    row.update(overrides)
    return row


def test_anime_tree_is_normalized():
    anime = AnimeWithDetails.model_validate(anime_row())

    assert anime.description == ''
    assert anime.synopsis == ''
    assert [ep.episode_number for ep in anime.episodes] == [1, 2]
    assert anime.episodes[1].links == []
    assert anime.episodes[0].links[0].subtitles == []
    assert anime.link_count == 2
    assert anime.subtitle_count == 1
    assert anime.created_at.year == 2024


def test_unknown_status_rejected():
    with pytest.raises(ValidationError):
        AnimeWithDetails.model_validate(anime_row(status='cancelled'))


def test_episode_accepts_links_key():
    episode = Episode.model_validate({
        'id': 'e1', 'anime_id': 'a1', 'episode_number': 1,
        'links': [{'id': 'l1', 'platform': 'Mega', 'url': 'https://mega.example.com/1'}],
    })
    assert episode.links[0].platform == 'Mega'


def test_link_requires_url():
    with pytest.raises(ValidationError):
        EpisodeLink.model_validate({'id': 'l1', 'platform': 'Mega'})
