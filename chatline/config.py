"""Application configuration via pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    debug: bool = False

    # Credential: required at startup, sent as a bearer token
    openai_api_key: str = ""

    # Completion endpoint
    api_url: str = "https://api.openai.com/v1/chat/completions"
    chat_model: str = "gpt-4.1"
    request_timeout: float = 60.0  # seconds, per attempt

    # Retry policy
    max_attempts: int = 3
    retry_delay_ms: int = 1000

    # Input validation
    max_message_length: int = 500


settings = Settings()
