from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    gateway_base_url: str = Field("http://localhost:8080/api", validation_alias="GATEWAY_BASE_URL")

    # Retries after the first failed call; delays grow as base * 2^(n-1), capped.
    max_retries: int = Field(3, ge=0, validation_alias="CLIENT_MAX_RETRIES")
    retry_base_delay_seconds: float = Field(1.0, validation_alias="CLIENT_RETRY_BASE_DELAY_SECONDS")
    retry_max_delay_seconds: float = Field(10.0, validation_alias="CLIENT_RETRY_MAX_DELAY_SECONDS")

    connection_check_interval_seconds: float = Field(30.0, validation_alias="CONNECTION_CHECK_INTERVAL_SECONDS")
    request_timeout_seconds: float = Field(30.0, validation_alias="CLIENT_REQUEST_TIMEOUT_SECONDS")
