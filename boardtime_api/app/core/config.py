"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts with no configuration at all; in a deployment you override
them via environment variables (or a ``.env`` file loaded by your
process manager).
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "BoardTime API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database.  A relative path is resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "boardtime.db")

    # Seconds a writer waits for the database lock before giving up.
    # Vote submissions take the write lock for the whole
    # read‑check‑write sequence, so this bounds how long a concurrent
    # submission may queue.
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "10"))

    # PBKDF2 rounds for meeting and participant passwords.
    password_iterations: int = int(os.getenv("PASSWORD_ITERATIONS", "100000"))

    # Comma‑separated list of origins allowed to call the API from a
    # browser.  The Next.js front‑end normally goes through its rewrite
    # proxy, but the meeting page also calls the API directly.
    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    # Maximum number of rows returned by the title search.
    search_limit: int = int(os.getenv("SEARCH_LIMIT", "20"))

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# must therefore be set before importing this module.
settings = Settings()
