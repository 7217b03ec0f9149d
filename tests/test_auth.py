"""Tests for the auth session wrapper."""

from types import SimpleNamespace

import pytest

from animedash.auth.auth_state import AuthSession, AuthUser
from animedash.errors import AuthRequired

from conftest import sign_in_as


def backend_response(user_id='user-1', with_session=True):
    user = SimpleNamespace(id=user_id)
    return SimpleNamespace(user=user, session=SimpleNamespace(user=user) if with_session else None)


def test_restore_loads_profile(fake_client, auth):
    assert auth.authenticated
    assert auth.user == AuthUser(id='user-1', email='rin@example.com', name='rin',
                                 created_at='2024-01-01T00:00:00+00:00')


def test_restore_without_session(anonymous):
    assert anonymous.user is None
    assert not anonymous.authenticated


def test_restore_survives_backend_error(fake_client):
    fake_client.auth.get_session.side_effect = RuntimeError('network down')
    session = AuthSession(fake_client)
    assert session.restore() is None


def test_sign_in(fake_client, anonymous):
    fake_client.auth.sign_in_with_password.return_value = backend_response()

    result = anonymous.sign_in('rin@example.com', 'hunter22')

    assert result.ok
    assert result.user.email == 'rin@example.com'
    assert anonymous.user == result.user
    fake_client.auth.sign_in_with_password.assert_called_once_with(
        {"email": "rin@example.com", "password": "hunter22"})


def test_sign_in_rejected(fake_client, anonymous):
    fake_client.auth.sign_in_with_password.side_effect = Exception('Invalid login credentials')

    result = anonymous.sign_in('rin@example.com', 'wrong')

    assert not result.ok
    assert result.error == 'Invalid login credentials'
    assert anonymous.user is None


def test_sign_in_without_session(fake_client, anonymous):
    fake_client.auth.sign_in_with_password.return_value = backend_response(with_session=False)
    result = anonymous.sign_in('rin@example.com', 'hunter22')
    assert result.error == 'No session returned from authentication'


def test_sign_in_missing_profile(fake_client, anonymous):
    fake_client.auth.sign_in_with_password.return_value = backend_response(user_id='ghost')
    result = anonymous.sign_in('ghost@example.com', 'hunter22')
    assert result.error == 'User profile not found'
    assert anonymous.user is None


def test_sign_up_needs_confirmation(fake_client, anonymous):
    fake_client.auth.sign_up.return_value = backend_response(user_id='user-2', with_session=False)

    result = anonymous.sign_up('yor@example.com', 'hunter22')

    assert result.ok
    assert result.message == 'Please check your email for confirmation link'
    assert anonymous.user is None
    payload = fake_client.auth.sign_up.call_args.args[0]
    assert payload['options'] == {"data": {"name": "yor"}}


def test_sign_up_with_session(fake_client, anonymous):
    fake_client.auth.sign_up.return_value = backend_response()
    result = anonymous.sign_up('rin@example.com', 'hunter22')
    assert result.user.id == 'user-1'
    assert anonymous.authenticated


def test_sign_out_notifies_listeners(fake_client, auth):
    seen = []
    auth.subscribe(seen.append)

    result = auth.sign_out()

    assert result.ok
    assert auth.user is None
    assert seen == [None]


def test_sign_out_error_keeps_user(fake_client, auth):
    fake_client.auth.sign_out.side_effect = Exception('offline')
    result = auth.sign_out()
    assert result.error == 'offline'
    assert auth.authenticated


def test_listeners_only_fire_on_change(fake_client, auth):
    seen = []
    unsubscribe = auth.subscribe(seen.append)

    auth.restore()
    assert seen == []

    unsubscribe()
    auth.sign_out()
    assert seen == []


def test_require_user(auth, anonymous):
    assert auth.require_user().id == 'user-1'
    with pytest.raises(AuthRequired, match='User not authenticated'):
        anonymous.require_user()


def test_reset_password_uses_redirect(fake_client):
    session = AuthSession(fake_client, reset_redirect='https://anime.example.com/reset')

    result = session.reset_password('rin@example.com')

    assert result.ok
    fake_client.auth.reset_password_for_email.assert_called_once_with(
        'rin@example.com', {"redirect_to": "https://anime.example.com/reset"})


def test_reset_password_failure(fake_client, anonymous):
    fake_client.auth.reset_password_for_email.side_effect = Exception('rate limited')
    assert anonymous.reset_password('rin@example.com').error == 'rate limited'


def test_sign_in_as_other_user_switches_identity(fake_client, auth):
    fake_client.tables['profiles'].append({'id': 'user-2', 'email': 'yor@example.com', 'name': None})
    sign_in_as(fake_client, 'user-2')
    auth.restore()
    assert auth.user.name == 'yor'
