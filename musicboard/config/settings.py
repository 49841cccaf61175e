"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority
# order):
#
#   1. **Environment variables**, e.g. SPOTIFY_CLIENT_ID=abc123
#   2. **.env file**, key=value lines in the project root .env file
#
# Field ``spotify_client_id`` maps to env var ``SPOTIFY_CLIENT_ID``.
#
# An empty string means "not configured".  Each adapter checks its own
# credentials through ``is_available()``; what happens when they are
# missing (soft 200 or hard 500) is decided by the function route, not
# here.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Musicboard application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Catalog (Spotify client-credentials flow) ===
    spotify_client_id: str = ""
    spotify_client_secret: str = ""

    # === Events ===
    bandsintown_app_id: str = "vinyl_social_music_app"

    # === Vinyl marketplace ===
    discogs_token: str = ""

    # === Lyrics ===
    genius_api_token: str = ""

    # === AI chat ===
    # Any OpenAI-compatible chat-completions gateway.
    llm_api_key: str = ""
    llm_base_url: str = "https://ai.gateway.lovable.dev/v1"
    llm_model: str = "google/gemini-2.5-flash"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    llm_timeout: float = 25.0

    # === Upstream HTTP ===
    upstream_timeout: float = 15.0
    # Client-credential tokens may be reused across requests until they
    # expire.  Disable to exchange a fresh token on every invocation.
    token_cache_enabled: bool = True
    token_cache_ttl: int = 3000

    # === Store ===
    database_path: str = "data/musicboard.db"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"

    def get_cors_origins(self) -> list[str]:
        """Split the comma-separated ``cors_origins`` value."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_configured_upstreams(self) -> dict[str, bool]:
        """Return which upstream services have credentials configured.

        AudioDB (public key) and Bandsintown (app id only) never need a
        secret, so they are always reported as configured.
        """
        return {
            "audiodb": True,
            "bandsintown": bool(self.bandsintown_app_id),
            "spotify": bool(self.spotify_client_id and self.spotify_client_secret),
            "discogs": bool(self.discogs_token),
            "genius": bool(self.genius_api_token),
            "llm": bool(self.llm_api_key or self.anthropic_api_key),
        }
