from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    classifier_provider: str = "rules"
    classifier_timeout_seconds: float = 20.0
    gazetteer_names: list[str] = []
    gazetteer_locations: list[str] = []
    gazetteer_organizations: list[str] = []

    question_provider: str = "static"
    feedback_provider: str = "none"

    history_backend: str = "memory"
    history_page_size: int = 20

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "rehearsal"
    db_username: str = "rehearsal"
    db_password: str = "secret"

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 30
    openai_temperature: float = Field(default=0.0, ge=0.0, le=2.0)

    openai_compatible_base_url: str = ""
    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""
