"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./lendmatch.db"

    # Service
    service_name: str = "lendmatch"
    log_level: str = "INFO"

    # Matching
    scoring_variant: Literal["A", "B"] = "B"
    match_reply_top_n: int = 3

    # Assistant backend: "llm" tries the remote model first, "rule_based" never does
    assistant_backend: Literal["rule_based", "llm"] = "rule_based"
    llm_api_base: str = "https://api.openai.com/v1"
    llm_api_key: str = ""
    llm_model: str = "gpt-4o"
    llm_timeout_seconds: float = 8.0
    llm_max_retries: int = 2  # Retries after the first attempt
    llm_backoff_base: float = 1.5  # Exponential backoff base in seconds

    # Google Sheets import
    sheets_api_base: str = "https://sheets.googleapis.com/v4"

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
