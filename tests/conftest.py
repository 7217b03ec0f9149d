"""Shared fixtures: an in-memory stand-in for the Supabase table client."""

import copy
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from postgrest import APIError

from animedash.auth.auth_state import AuthSession
from animedash.state.anime_state import AnimeDraft, EpisodeDraft, LinkDraft, SubtitleDraft

# parent table -> (embedded relation, foreign key on the child)
RELATIONS = {
    'anime': ('episodes', 'anime_id'),
    'episodes': ('episode_links', 'episode_id'),
    'episode_links': ('subtitles', 'link_id'),
}

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def api_error(message):
    return APIError({'message': message, 'code': '500', 'hint': None, 'details': None})


class FakeQuery:
    """Chainable query recording filters until execute()."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = 'select'
        self.columns = '*'
        self.payload = None
        self.filters = []
        self.ordering = None
        self.want_single = False

    def select(self, columns='*'):
        self.columns = columns
        return self

    def insert(self, row):
        self.action = 'insert'
        self.payload = row
        return self

    def update(self, data):
        self.action = 'update'
        self.payload = data
        return self

    def delete(self):
        self.action = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def single(self):
        self.want_single = True
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.action, self.payload, list(self.filters)))
        self.db.check_failure(self.table, self.action, self.payload)
        rows = self.db.tables.setdefault(self.table, [])

        if self.action == 'insert':
            return SimpleNamespace(data=[self.db.store(self.table, self.payload)])

        matched = [row for row in rows if self._matches(row)]
        if self.action == 'update':
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched))
        if self.action == 'delete':
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched))

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: row[column], reverse=desc)
        result = [self.db.embed(self.table, row) if '(' in self.columns else copy.deepcopy(row)
                  for row in matched]
        if self.want_single:
            if len(result) != 1:
                raise api_error('JSON object requested, multiple (or no) rows returned')
            return SimpleNamespace(data=result[0])
        return SimpleNamespace(data=result)


class FakeSupabase:
    """Tables kept in dicts; failures injected per table with a row predicate."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = []
        self._counter = 0
        self.auth = MagicMock()

    def table(self, name):
        return FakeQuery(self, name)

    def fail_on(self, table, action='insert', when=lambda row: True, message='boom', error=None):
        """Make matching requests raise ``error``, or an APIError carrying ``message``."""
        self.failures.append((table, action, when, error or api_error(message)))

    def check_failure(self, table, action, payload):
        for f_table, f_action, when, error in self.failures:
            if f_table == table and f_action == action and when(payload or {}):
                raise error

    def store(self, table, row):
        self._counter += 1
        stored = dict(row)
        stored.setdefault('id', f"{table}-{self._counter}")
        stored.setdefault('created_at', (BASE_TIME + timedelta(seconds=self._counter)).isoformat())
        if table == 'anime':
            stored.setdefault('is_archived', False)
        self.tables.setdefault(table, []).append(stored)
        return copy.deepcopy(stored)

    def embed(self, table, row):
        row = copy.deepcopy(row)
        if table in RELATIONS:
            child, key = RELATIONS[table]
            row[child] = [self.embed(child, c) for c in self.tables.get(child, []) if c[key] == row['id']]
        return row

    def inserts(self, table):
        return [payload for t, action, payload, _ in self.calls if t == table and action == 'insert']


@pytest.fixture
def fake_client():
    client = FakeSupabase()
    client.tables['profiles'] = [{
        'id': 'user-1',
        'email': 'rin@example.com',
        'name': 'rin',
        'created_at': BASE_TIME.isoformat(),
    }]
    return client


def sign_in_as(client, user_id='user-1'):
    client.auth.get_session.return_value = SimpleNamespace(user=SimpleNamespace(id=user_id))


@pytest.fixture
def auth(fake_client):
    session = AuthSession(fake_client)
    sign_in_as(fake_client)
    session.restore()
    return session


@pytest.fixture
def anonymous(fake_client):
    fake_client.auth.get_session.return_value = None
    session = AuthSession(fake_client)
    session.restore()
    return session


def make_draft(episodes=3, links_per_episode=1, subtitles_per_link=0, title='Frieren'):
    """A draft that passes validation."""
    draft = AnimeDraft(title=title, genres=['Fantasy', 'Adventure'])
    draft.episodes = []
    for number in range(1, episodes + 1):
        links = []
        for i in range(links_per_episode):
            subtitles = [SubtitleDraft(language='English', url=f"https://subs.example.com/{number}/{i}/{s}.vtt")
                         for s in range(subtitles_per_link)]
            links.append(LinkDraft(platform='Crunchyroll', url=f"https://cr.example.com/ep{number}/{i}",
                                   quality='1080p', subtitles=subtitles))
        draft.episodes.append(EpisodeDraft(episode_number=number, title=f"Episode {number}", links=links))
    return draft
