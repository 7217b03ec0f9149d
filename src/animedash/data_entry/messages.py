"""User messaging system for the add-anime flow."""
from dataclasses import dataclass
from enum import Enum
import streamlit as st


class MessageType(Enum):
    """Types of messages that can be displayed to users."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class MessageCategory(Enum):
    """Categories of messages for different parts of the application."""
    VALIDATION = "validation"
    AUTH = "auth"
    DATA_ENTRY = "data_entry"
    DATABASE = "database"


class UserMessage:
    """Handle consistent user messaging throughout the application."""

    @staticmethod
    def format(message: str, category: MessageCategory) -> str:
        prefix = {
            MessageCategory.VALIDATION: "🔍 Validation",
            MessageCategory.AUTH: "🔐 Authentication",
            MessageCategory.DATA_ENTRY: "📝 Data Entry",
            MessageCategory.DATABASE: "💾 Database"
        }
        return f"{prefix[category]}: {message}"

    @staticmethod
    def show(message: str, msg_type: MessageType, category: MessageCategory) -> None:
        """Display a message to the user with consistent styling.

        Args:
            message: The message to display
            msg_type: Type of message (error, warning, info, success)
            category: Category the message belongs to
        """
        formatted_msg = UserMessage.format(message, category)

        if msg_type == MessageType.ERROR:
            st.error(formatted_msg)
        elif msg_type == MessageType.WARNING:
            st.warning(formatted_msg)
        elif msg_type == MessageType.INFO:
            st.info(formatted_msg)
        elif msg_type == MessageType.SUCCESS:
            st.success(formatted_msg)


@dataclass(frozen=True)
class Notice:
    """A message queued by the form logic, rendered later by the page."""
    text: str
    msg_type: MessageType
    category: MessageCategory = MessageCategory.DATA_ENTRY

    def show(self) -> None:
        UserMessage.show(self.text, self.msg_type, self.category)


# Validation messages
TITLE_REQUIRED = "Title is required"
GENRE_REQUIRED = "At least one genre must be selected"
EPISODE_REQUIRED = "At least one episode is required"
EPISODES_NEED_LINKS = "Episodes {numbers} need at least one valid link"
RATING_OUT_OF_RANGE = "Rating must be between {low} and {high}"
RELEASE_YEAR_OUT_OF_RANGE = "Release year must be between {low} and {high}"
INVALID_STATUS = "Status must be one of: {statuses}"

# Structural limits
EPISODE_COUNT_TOO_LOW = "Episode count must be at least {low}"
EPISODE_COUNT_TOO_HIGH = "Episode count cannot exceed {high}"
MAX_EPISODES_REACHED = "Maximum {high} episodes allowed"
MAX_LINKS_REACHED = "Maximum {high} links allowed per episode"
MAX_SUBTITLES_REACHED = "Maximum {high} subtitles allowed per link"
BULK_COUNT_INVALID = "Please enter a valid number"
BULK_COUNT_TOO_HIGH = "Cannot add more than {high} episodes at once"
BULK_TOTAL_TOO_HIGH = "Total episodes cannot exceed {high}"
CANNOT_REMOVE_LAST_EPISODE = "Cannot remove the last episode"
INVALID_EPISODE_NUMBER = "Invalid episode number"

# Advisory
URL_SCHEME_WARNING = "URL should start with http:// or https://"
DURATION_FORMAT = "Duration must be in format MM:SS or HH:MM"
UNSUPPORTED_PLATFORM = "Platform must be one of: {platforms}"
SUBTITLE_FILE_TYPE = "Subtitle files should be one of: {extensions}"
CLEAR_LINKS_UNCONFIRMED = "Clearing all links needs confirmation"

# Submission
AUTH_ISSUE = "Authentication issue. Please sign out and sign in again."
