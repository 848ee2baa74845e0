"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///mudmatch.db"

    # Matching
    # Room whose exits are global (matched with the GLOBAL flag)
    master_room: int = 2
    # Sigil marking an explicit player lookup ("*bob")
    lookup_token: str = "*"
    # Preset used by the CLI when no --preset/--flag is given
    default_preset: str = "everything"

    # Debug
    debug: bool = False
    trace: bool = False  # Attach the console observer to CLI resolutions


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
