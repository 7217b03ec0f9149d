"""Exception hierarchy for the anime dashboard."""

from typing import Optional


class AnimeDashError(Exception):
    """Base exception for all dashboard errors."""


# Configuration
class ConfigurationError(AnimeDashError):
    """Raised when required environment configuration is missing or malformed."""


# Form
class FormValidationError(AnimeDashError):
    """Raised when a draft fails pre-submit validation."""

    def __init__(self, issue):
        super().__init__(issue.message)
        self.issue = issue


# Auth
class AuthRequired(AnimeDashError):
    """Raised when a write is attempted without a signed-in user."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


# Backend
class BackendError(AnimeDashError):
    """Raised when a top-level backend request fails."""

    def __init__(self, message: str, backend_message: Optional[str] = None):
        super().__init__(message)
        self.backend_message = backend_message
