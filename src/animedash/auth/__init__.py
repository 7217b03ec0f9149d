"""Authentication against the Supabase backend."""

from .auth_state import AuthResult, AuthSession, AuthUser

__all__ = ['AuthResult', 'AuthSession', 'AuthUser']
