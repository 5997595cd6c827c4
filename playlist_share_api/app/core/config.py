"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service can start without any environment at all; in a deployment you
should at least override ``SECRET_KEY`` and ``DATABASE_URL``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Playlist Share API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    # The log file rolls over at this size; this many old files are kept.
    log_max_bytes: int = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
    log_backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "5"))
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Path to the SQLite database file.  A relative path is resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "playlist_share.db")

    # Seconds a statement waits on a locked database before failing.
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))

    # Comma-separated accounts allowed to toggle the ban flag of other users.
    admin_accounts: str = os.getenv("ADMIN_ACCOUNTS", "adminuser")

    # Rows created after this instant are removed by ``POST /initialize``.
    initialize_cutoff: str = os.getenv("INITIALIZE_CUTOFF", "2022-05-13 09:00:00.000")

    listing_limit: int = int(os.getenv("LISTING_LIMIT", "100"))
    max_playlist_songs: int = int(os.getenv("MAX_PLAYLIST_SONGS", "80"))

    # Placeholder account used for viewers without a valid token.  Must
    # never match a real account: signup refuses it.
    anonymous_account: str = os.getenv("ANONYMOUS_ACCOUNT", "<anonymous>")

    def admin_account_set(self) -> set[str]:
        return {a.strip() for a in self.admin_accounts.split(",") if a.strip()}


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
