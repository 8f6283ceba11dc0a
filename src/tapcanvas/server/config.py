from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime config (server).

    - Loaded from environment variables
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TAPCANVAS_", extra="ignore")

    # Marker store
    db_path: str = "database.db"

    # Bind address for `tapcanvas-server`
    host: str = "0.0.0.0"
    port: int = 3000

    # Only used by /snapshot.png; the store itself never expires markers.
    marker_lifespan_s: int = 60
    marker_radius: int = 40

    # Debugging
    debug_log_msgs: bool = False
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
