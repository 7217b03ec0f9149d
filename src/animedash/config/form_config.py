"""Limits and lookup values for the add-anime form.

Key configuration categories:

1. Structural limits (episodes, links, subtitles, bulk append size)
2. Field ranges (rating, release year) and formats (duration, subtitle files)
3. Lookup lists (statuses, genres, platforms, subtitle languages)
4. Quick setup defaults
"""

import re
from datetime import date


class FormConfig:
    """Configuration for the add-anime form."""

    # Structural limits
    MIN_EPISODES = 1
    MAX_EPISODES = 1000
    MAX_LINKS_PER_EPISODE = 10
    MAX_SUBTITLES_PER_LINK = 5
    MAX_BULK_APPEND = 50

    # Field ranges
    MIN_RATING = 0.0
    MAX_RATING = 10.0
    DEFAULT_RATING = 5.0
    MIN_RELEASE_YEAR = 1900
    RELEASE_YEAR_LOOKAHEAD = 5

    # Formats
    DURATION_PATTERN = re.compile(r'^\d{1,2}:\d{2}$')
    SUBTITLE_FILE_EXTENSIONS = ('.srt', '.vtt', '.ass', '.ssa', '.sub')
    UPLOAD_PREFIX = 'uploads/'
    # Shorter values are treated as still being typed
    URL_WARNING_MIN_LENGTH = 10

    STATUSES = ('ongoing', 'completed', 'upcoming')
    DEFAULT_STATUS = 'upcoming'

    ANIME_GENRES = [
        'Action', 'Adventure', 'Comedy', 'Drama', 'Ecchi', 'Fantasy',
        'Horror', 'Isekai', 'Josei', 'Mecha', 'Music', 'Mystery',
        'Psychological', 'Romance', 'Sci-Fi', 'Seinen', 'Shoujo',
        'Shounen', 'Slice of Life', 'Sports', 'Supernatural', 'Thriller',
    ]

    SUPPORTED_PLATFORMS = [
        'WatchDT', 'Crunchyroll', 'Funimation', 'Netflix', 'Hulu',
        'Amazon Prime Video', 'Disney+', 'HIDIVE', 'YouTube',
        'Google Drive', 'Mega', 'MediaFire', 'Direct Download', 'Other',
    ]

    SUBTITLE_LANGUAGES = [
        'English', 'Japanese', 'Spanish', 'Portuguese', 'French', 'German',
        'Italian', 'Russian', 'Arabic', 'Indonesian', 'Vietnamese', 'Thai',
        'Korean', 'Chinese (Simplified)', 'Chinese (Traditional)',
    ]

    # Quick setup defaults
    QUICK_SETUP_DURATION = '24:00'
    QUICK_SETUP_PLATFORM = 'WatchDT'
    QUICK_SETUP_QUALITY = '1080p'

    @classmethod
    def max_release_year(cls) -> int:
        """Latest release year accepted by the form."""
        return date.today().year + cls.RELEASE_YEAR_LOOKAHEAD

    @classmethod
    def is_supported_platform(cls, platform: str) -> bool:
        return platform in cls.SUPPORTED_PLATFORMS
