import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "ChatAlchemy API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # OpenRouter configuration
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_app_name: str = "ChatAlchemy"

    # Chat
    chat_model: str = "openai/gpt-3.5-turbo"
    chat_temperature: float = 0.7
    history_window: int = 5
    assistant_name: str = "Chat Alchemy"

    # Knowledge base — backend dataset (relative to backend directory)
    data_dir: str = "data"
    preload_file: str = "ttd_drug_disease.csv"
    preloaded_source_name: str = "PharmAlchemy"
    use_sample_fallback: bool = True

    # Uploads & ingestion
    max_upload_size_mb: int = 20
    ingest_timeout_seconds: float | None = 60.0

    # Query parsing & projection
    min_term_length: int = 3
    chart_triggers: list[str] = ["graph", "chart", "plot"]
    table_triggers: list[str] = ["table", "show", "list", "display"]
    chart_label_fields: list[str] = ["month", "Product Name", "Date", "date", "year"]

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_ingestion: str = "INFO"        # KnowledgeIngestion pipeline
    log_level_openrouter: str = "INFO"       # OpenRouter LLM client

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Resolve a relative data_dir against the backend directory."""
        data_dir = Path(self.data_dir)
        if not data_dir.is_absolute():
            object.__setattr__(self, "data_dir", str(_BACKEND_DIR / data_dir))
        if self.min_term_length < 1:
            _config_logger.warning(
                "min_term_length=%d is not positive; using 1", self.min_term_length
            )
            object.__setattr__(self, "min_term_length", 1)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
