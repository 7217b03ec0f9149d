"""Authentication state for the dashboard.

Wraps the Supabase auth API and the ``profiles`` table. Backend auth failures
are returned as AuthResult errors rather than raised; only require_user()
raises, for callers that are about to write.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from supabase import Client

from animedash.errors import AuthRequired

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Signed-in user, from the profiles table."""
    id: str
    email: str
    name: str
    created_at: Optional[str] = None


@dataclass
class AuthResult:
    """Outcome of a sign-up/sign-in/sign-out call."""
    user: Optional[AuthUser] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


AuthListener = Callable[[Optional[AuthUser]], None]


class AuthSession:
    """Current identity plus the calls that change it."""

    def __init__(self, client: Client, reset_redirect: Optional[str] = None):
        self.client = client
        self.reset_redirect = reset_redirect
        self._user: Optional[AuthUser] = None
        self._listeners: List[AuthListener] = []

    @property
    def user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Call ``listener`` with the new user whenever the identity changes.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _set_user(self, user: Optional[AuthUser]) -> None:
        if user == self._user:
            return
        self._user = user
        logger.info(f"Auth state changed: {user.email if user else 'signed out'}")
        for listener in list(self._listeners):
            listener(user)

    def require_user(self) -> AuthUser:
        """Return the signed-in user or raise AuthRequired."""
        if self._user is None:
            raise AuthRequired()
        return self._user

    def _load_profile(self, user_id: str) -> Optional[AuthUser]:
        """Fetch the profile row for a backend user id."""
        try:
            response = self.client.table('profiles') \
                .select('*') \
                .eq('id', user_id) \
                .single() \
                .execute()
        except Exception as e:
            logger.error(f"Error fetching profile: {str(e)}")
            return None

        profile = response.data
        if not profile:
            logger.error(f"No profile found for user {user_id}")
            return None
        return AuthUser(
            id=profile['id'],
            email=profile['email'],
            name=profile.get('name') or profile['email'].split('@')[0],
            created_at=profile.get('created_at'),
        )

    def restore(self) -> Optional[AuthUser]:
        """Pick up an existing backend session, if any."""
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            logger.error(f"Session restoration failed: {str(e)}")
            session = None

        if session and session.user:
            self._set_user(self._load_profile(session.user.id))
        else:
            self._set_user(None)
        return self._user

    def sign_up(self, email: str, password: str) -> AuthResult:
        """Register a user. The display name defaults to the email prefix."""
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": email.split('@')[0]}},
            })
        except Exception as e:
            logger.error(f"Sign up error: {str(e)}")
            return AuthResult(error=str(e) or "Sign up failed")

        if response.user and not response.session:
            # Email confirmation is on; no session until the link is clicked
            return AuthResult(message="Please check your email for confirmation link")

        if response.user:
            self._set_user(self._load_profile(response.user.id))
        return AuthResult(user=self._user)

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            response = self.client.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.error(f"Sign in error: {str(e)}")
            return AuthResult(error=str(e) or "Sign in failed")

        if not response or not response.session:
            return AuthResult(error="No session returned from authentication")

        user = self._load_profile(response.user.id)
        if user is None:
            self._set_user(None)
            return AuthResult(error="User profile not found")
        self._set_user(user)
        return AuthResult(user=user)

    def sign_out(self) -> AuthResult:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            logger.error(f"Sign out error: {str(e)}")
            return AuthResult(error=str(e) or "Sign out failed")

        self._set_user(None)
        return AuthResult()

    def reset_password(self, email: str) -> AuthResult:
        options = {"redirect_to": self.reset_redirect} if self.reset_redirect else {}
        try:
            self.client.auth.reset_password_for_email(email, options)
        except Exception as e:
            logger.error(f"Reset password error: {str(e)}")
            return AuthResult(error=str(e) or "Password reset failed")
        return AuthResult(message="Password reset email sent")
