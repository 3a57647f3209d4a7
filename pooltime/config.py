"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the pool-time service."""
    model_config = SettingsConfigDict(env_prefix="POOLTIME_", extra="ignore")

    forecast_source: str = "open_meteo"  # options: open_meteo
    timezone: str = "auto"
    http_timeout_seconds: float = 10.0
    http_cache_seconds: int = 3600
    http_retries: int = 5
    http_backoff_factor: float = 0.2
    log_level: str = "INFO"
    chart_width: float = 600.0
    chart_height: float = 160.0

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(v).strip().upper()

    @field_validator("chart_width", "chart_height", mode="after")
    @classmethod
    def positive_chart_size(cls, v: float) -> float:
        """Chart dimensions must leave room for a plot area."""
        if v <= 0:
            raise ValueError("chart dimensions must be positive")
        return v


settings = Settings()
