"""
Application settings with environment variable support.

All settings can be overridden via GCAL_MCP_* environment variables
or a local .env file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Google Calendar MCP configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GCAL_MCP_",
        env_file=".env",
        extra="ignore",
    )

    # Root for settings, tokens and OAuth client secrets
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".mcp" / "google-calendar"
    )

    log_level: str = "INFO"

    # Where Google sends the operator after consent; the code is copied from there
    oauth_redirect_uri: str = "http://localhost"

    @property
    def tokens_dir(self) -> Path:
        """Directory holding one token file per account."""
        return self.data_dir / "tokens"

    @property
    def settings_path(self) -> Path:
        """Default account / calendar record."""
        return self.data_dir / "settings.json"

    @property
    def oauth_client_path(self) -> Path:
        """OAuth client credentials from Google Cloud Console."""
        return self.data_dir / "oauth_client.json"

    def ensure_dirs(self) -> None:
        """Create directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.tokens_dir.mkdir(parents=True, exist_ok=True)

    def get_token_path(self, account_id: str) -> Path:
        """Get token file path for account."""
        return self.tokens_dir / f"{account_id}.json"


# Global settings instance
settings = Settings()
