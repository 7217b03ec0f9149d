"""Initialize environment and configuration for the dashboard."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from animedash.errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parents[3]

REQUIRED_VARS = ['SUPABASE_URL', 'SUPABASE_ANON_KEY']


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""
    supabase_url: str
    supabase_anon_key: str
    log_level: str = "INFO"
    log_dir: Path = PROJECT_ROOT / 'logs'
    reset_redirect: Optional[str] = None


def normalize_supabase_url(url: str) -> str:
    """Turn a project ref or partial URL into a full https URL."""
    url = url.strip()

    # If it's just the subdomain, append .supabase.co
    if '.' not in url and not url.startswith('http'):
        url = f"{url}.supabase.co"

    if url.startswith('http://'):
        url = url[len('http://'):]
    if not url.startswith('https://'):
        url = f"https://{url}"
    url = url.rstrip('/')

    if len(url) < 12 or ' ' in url:
        raise ConfigurationError("Invalid Supabase URL format")
    return url


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load environment variables and validate the required ones.

    Args:
        env_file: Explicit .env path. Defaults to the project root .env if present.

    Returns:
        Settings built from the environment.

    Raises:
        ConfigurationError: If a required variable is missing or malformed.
    """
    env_path = env_file or PROJECT_ROOT / '.env'
    if env_path.exists():
        load_dotenv(env_path)

    missing = [var for var in REQUIRED_VARS if not os.getenv(var, '').strip()]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    key = os.environ['SUPABASE_ANON_KEY'].strip()
    if len(key) < 20:  # Supabase keys are typically long
        raise ConfigurationError("Invalid Supabase anon key format")

    log_dir = os.getenv('ANIMEDASH_LOG_DIR')
    return Settings(
        supabase_url=normalize_supabase_url(os.environ['SUPABASE_URL']),
        supabase_anon_key=key,
        log_level=os.getenv('ANIMEDASH_LOG_LEVEL', 'INFO').upper(),
        log_dir=Path(log_dir) if log_dir else PROJECT_ROOT / 'logs',
        reset_redirect=os.getenv('ANIMEDASH_RESET_REDIRECT') or None,
    )
