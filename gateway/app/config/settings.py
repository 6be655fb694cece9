"""Settings for the gateway."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT_ENVIRONMENT = "development"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional at load time: a missing value only fails connect attempts, the server still starts.
    database_url: str | None = Field(
        None,
        validation_alias=AliasChoices("DATABASE_URL", "AZURE_POSTGRESQL_CONNECTIONSTRING"),
    )
    database_backend: str = Field("postgres", validation_alias="DATABASE_BACKEND")
    database_ssl_mode: str = Field("require", validation_alias="DATABASE_SSL_MODE")
    database_connect_timeout_seconds: float = Field(10.0, validation_alias="DATABASE_CONNECT_TIMEOUT_SECONDS")

    db_max_retries: int = Field(5, ge=0, validation_alias="DB_MAX_RETRIES")
    db_retry_delay_ms: int = Field(5000, ge=0, validation_alias="DB_RETRY_DELAY")

    liveness_timeout_seconds: float = Field(5.0, validation_alias="LIVENESS_TIMEOUT_SECONDS")

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")
    environment: str = Field("production", validation_alias="APP_ENV")
    static_dir: str = Field("dist", validation_alias="STATIC_DIR")

    @property
    def db_retry_delay_seconds(self) -> float:
        return self.db_retry_delay_ms / 1000.0

    @property
    def expose_error_detail(self) -> bool:
        """Tracebacks are only returned to callers in development."""
        return self.environment.strip().lower() == DEVELOPMENT_ENVIRONMENT
