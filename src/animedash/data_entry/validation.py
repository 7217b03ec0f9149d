"""Pre-submit validation for anime drafts."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from animedash.config.form_config import FormConfig
from animedash.data_entry import messages
from animedash.state.anime_state import AnimeDraft


@dataclass(frozen=True)
class ValidationIssue:
    """First rule a draft violates."""
    rule: str
    message: str


def validate_draft(draft: AnimeDraft) -> Optional[ValidationIssue]:
    """Check a draft against the submit rules, stopping at the first failure.

    Order: title, genres, episodes present, every episode has a valid link,
    rating range, release year range, status.
    """
    if not draft.title.strip():
        return ValidationIssue('title', messages.TITLE_REQUIRED)

    if not draft.genres:
        return ValidationIssue('genres', messages.GENRE_REQUIRED)

    if not draft.episodes:
        return ValidationIssue('episodes', messages.EPISODE_REQUIRED)

    without_links = [ep.episode_number for ep in draft.episodes if not ep.has_valid_link]
    if without_links:
        numbers = ', '.join(str(n) for n in without_links)
        return ValidationIssue('links', messages.EPISODES_NEED_LINKS.format(numbers=numbers))

    if not FormConfig.MIN_RATING <= draft.rating <= FormConfig.MAX_RATING:
        return ValidationIssue('rating', messages.RATING_OUT_OF_RANGE.format(
            low=FormConfig.MIN_RATING, high=FormConfig.MAX_RATING))

    max_year = FormConfig.max_release_year()
    if not FormConfig.MIN_RELEASE_YEAR <= draft.release_year <= max_year:
        return ValidationIssue('release_year', messages.RELEASE_YEAR_OUT_OF_RANGE.format(
            low=FormConfig.MIN_RELEASE_YEAR, high=max_year))

    if draft.status not in FormConfig.STATUSES:
        return ValidationIssue('status', messages.INVALID_STATUS.format(
            statuses=', '.join(FormConfig.STATUSES)))

    return None


def is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def url_warning(value: str) -> Optional[str]:
    """Advisory message for a URL that is being typed, or None.

    Short values are left alone since the user is probably still typing.
    """
    if not value or is_http_url(value):
        return None
    if len(value) > FormConfig.URL_WARNING_MIN_LENGTH and not value.startswith('http'):
        return messages.URL_SCHEME_WARNING
    return None


def is_valid_duration(value: str) -> bool:
    return bool(FormConfig.DURATION_PATTERN.match(value))
