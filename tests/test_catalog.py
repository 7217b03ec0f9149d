"""Tests for the anime catalog read model."""

import httpx
import pandas as pd

from animedash.services.catalog import AnimeCatalog, FRAME_COLUMNS

from conftest import BASE_TIME, sign_in_as


def seed_anime(client, anime_id, title, created_offset, added_by='user-1', archived=False):
    client.tables.setdefault('anime', []).append({
        'id': anime_id,
        'title': title,
        'description': None,
        'synopsis': None,
        'release_year': 2023,
        'episode_count': 2,
        'rating': 8.5,
        'status': 'ongoing',
        'added_by': added_by,
        'is_archived': archived,
        'genres': ['Drama'],
        'created_at': f"2024-03-0{created_offset}T00:00:00+00:00",
    })


def seed_episode(client, episode_id, anime_id, number):
    client.tables.setdefault('episodes', []).append({
        'id': episode_id, 'anime_id': anime_id, 'episode_number': number,
        'created_at': BASE_TIME.isoformat(),
    })


def test_fetch_orders_newest_first_and_scopes_to_owner(fake_client, auth):
    seed_anime(fake_client, 'a1', 'Oldest', 1)
    seed_anime(fake_client, 'a2', 'Newest', 3)
    seed_anime(fake_client, 'a3', 'Middle', 2)
    seed_anime(fake_client, 'a4', 'Someone else', 4, added_by='user-2')
    seed_anime(fake_client, 'a5', 'Archived', 5, archived=True)

    catalog = AnimeCatalog(fake_client, auth)

    assert [anime.title for anime in catalog.items] == ['Newest', 'Middle', 'Oldest']
    assert catalog.loading is False


def test_fetch_builds_nested_tree(fake_client, auth):
    seed_anime(fake_client, 'a1', 'Monster', 1)
    seed_episode(fake_client, 'e2', 'a1', 2)
    seed_episode(fake_client, 'e1', 'a1', 1)
    fake_client.tables['episode_links'] = [{
        'id': 'l1', 'episode_id': 'e1', 'platform': 'Netflix', 'url': 'https://netflix.example.com/1',
    }]
    fake_client.tables['subtitles'] = [{
        'id': 's1', 'link_id': 'l1', 'language': 'English', 'url': 'https://subs.example.com/en.vtt',
    }]

    anime = AnimeCatalog(fake_client, auth).get('a1')

    assert anime.description == ''
    assert [ep.episode_number for ep in anime.episodes] == [1, 2]
    assert anime.episodes[0].links[0].subtitles[0].language == 'English'
    assert anime.episodes[1].links == []


def test_no_fetch_without_user(fake_client, anonymous):
    seed_anime(fake_client, 'a1', 'Monster', 1)
    catalog = AnimeCatalog(fake_client, anonymous)
    assert catalog.items == []
    assert not any(table == 'anime' for table, *_ in fake_client.calls)


def test_follows_auth_changes(fake_client, anonymous):
    seed_anime(fake_client, 'a1', 'Haikyu!!', 1)
    catalog = AnimeCatalog(fake_client, anonymous)

    sign_in_as(fake_client)
    anonymous.restore()
    assert [anime.title for anime in catalog.items] == ['Haikyu!!']

    fake_client.auth.get_session.return_value = None
    anonymous.restore()
    assert catalog.items == []
    assert catalog.loading is False


def test_close_stops_following_auth(fake_client, anonymous):
    seed_anime(fake_client, 'a1', 'Haikyu!!', 1)
    catalog = AnimeCatalog(fake_client, anonymous)
    catalog.close()

    sign_in_as(fake_client)
    anonymous.restore()
    assert catalog.items == []


def test_failed_fetch_keeps_previous_items(fake_client, auth):
    seed_anime(fake_client, 'a1', 'Vinland Saga', 1)
    catalog = AnimeCatalog(fake_client, auth)
    fake_client.fail_on('anime', action='select', message='timeout')
    seed_anime(fake_client, 'a2', 'Ghost', 2)

    items = catalog.refetch()

    assert [anime.title for anime in items] == ['Vinland Saga']
    assert catalog.loading is False


def test_to_frame(fake_client, auth):
    seed_anime(fake_client, 'a1', 'Mob Psycho', 1)
    seed_episode(fake_client, 'e1', 'a1', 1)
    fake_client.tables['episode_links'] = [
        {'id': 'l1', 'episode_id': 'e1', 'platform': 'Crunchyroll', 'url': 'https://cr.example.com/1'},
        {'id': 'l2', 'episode_id': 'e1', 'platform': 'Mega', 'url': 'https://mega.example.com/1'},
    ]

    frame = AnimeCatalog(fake_client, auth).to_frame()

    assert list(frame.columns) == FRAME_COLUMNS
    row = frame.iloc[0]
    assert row['title'] == 'Mob Psycho'
    assert row['episodes'] == 1
    assert row['links'] == 2
    assert row['subtitles'] == 0


def test_to_frame_empty(fake_client, anonymous):
    frame = AnimeCatalog(fake_client, anonymous).to_frame()
    assert isinstance(frame, pd.DataFrame)
    assert frame.empty
    assert list(frame.columns) == FRAME_COLUMNS


def test_transport_error_keeps_previous_items(fake_client, auth):
    seed_anime(fake_client, 'a1', 'Vinland Saga', 1)
    catalog = AnimeCatalog(fake_client, auth)
    fake_client.fail_on('anime', action='select', error=httpx.ReadTimeout('timed out'))

    assert [anime.title for anime in catalog.refetch()] == ['Vinland Saga']
    assert catalog.loading is False
