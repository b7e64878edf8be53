"""Error bodies returned by the API exception handlers."""

from pydantic import BaseModel, Field


class ValidationErrorDetail(BaseModel):
    field: str = Field(..., description="Request field that was rejected, e.g. 'amount'")
    message: str
    code: str | None = Field(None, description="Stable machine-readable code")


class ValidationErrorResponse(BaseModel):
    """400 body listing every rejected field of a donation, event or schema edit."""

    error: str = "Validation error"
    details: list[ValidationErrorDetail]


class ErrorResponse(BaseModel):
    """Body of 404, 403 and 503 responses."""

    error: str
    message: str


class ConflictResponse(ErrorResponse):
    """409 body for a schema edit made against a stale version."""

    expected_version: int = Field(..., alias="expectedVersion")
    actual_version: int = Field(..., alias="actualVersion")

    model_config = {"populate_by_name": True}
