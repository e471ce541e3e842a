"""Application config from environment."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Directory served as the site root; relative paths resolve against the project root
    STATIC_ROOT: str = "public"
    # Served for directory requests and as the catch-all for missing HTML-like paths
    DEFAULT_DOCUMENT: str = "index.html"
    MAX_BODY_BYTES: int = 1_000_000

    TRANSCRIPT_UPSTREAM_URL: str = "https://youtubetranscript.com/"
    TRANSCRIPT_LANG: str = "en"
    # The upstream rejects requests without a browser-like User-Agent
    TRANSCRIPT_USER_AGENT: str = "Mozilla/5.0 (compatible; TranscriptFetcher/1.0)"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    LOG_LEVEL: str = "INFO"
    ENV: str | None = None
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    def static_root_path(self) -> Path:
        """Absolute, symlink-resolved static root."""
        root = Path(self.STATIC_ROOT.strip())
        if not root.is_absolute():
            root = PROJECT_ROOT / root
        return root.resolve()


settings = Settings()
