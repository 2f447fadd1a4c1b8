"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class NavigatorSettings(BaseSettings):
    """Navigator configuration."""

    connect_timeout: float = 10.0
    read_timeout: float | None = 60.0
    max_response_bytes: int | None = None
    verify_certificates: bool = False
    search_host: str = "kennedy.gemi.dev"
    search_port: int = 1965

    model_config = {"env_prefix": "HOLLOWAY_"}


settings = NavigatorSettings()
