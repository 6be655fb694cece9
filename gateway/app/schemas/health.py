from pydantic import BaseModel, ConfigDict, Field

from gateway.app.constants import HealthStatus


class EnvironmentInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    has_connection_string: bool = Field(alias="hasConnectionString")


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = HealthStatus.HEALTHY
    uptime: float
    timestamp: str
    database: str
    database_error: str | None = Field(default=None, alias="databaseError")
    environment: EnvironmentInfo | None = None


class HealthDegradedResponse(BaseModel):
    status: str = HealthStatus.DEGRADED
    error: str
    timestamp: str
