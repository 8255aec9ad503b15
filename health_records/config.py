from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    records_api_base_url: str = "http://localhost:5000/api"
    records_api_timeout_seconds: int = 120
    report_type_fuzzy_threshold: int = 85
    default_language: str = "en"
    default_sort_order: str = "newest"
    default_window_days: int = 30
    recent_items_limit: int = 5
    allowed_origins: str = "http://localhost:3000"


settings = Settings()
