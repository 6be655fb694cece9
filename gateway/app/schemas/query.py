from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryPostRequest(BaseModel):
    # Loose types: a missing or non-string text maps to 400, never a validation error.
    text: Any = None
    params: Any = None


class QueryField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    data_type: int = Field(alias="dataType")


class QuerySuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rows: list[dict[str, Any]]
    row_count: int = Field(alias="rowCount")
    fields: list[QueryField]


class QueryErrorResponse(BaseModel):
    error: bool = True
    message: str
    code: str | None = None
    detail: str | None = None
