"""
Schemas shared by every router.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(CamelModel):
    """Response schema for the liveness endpoint."""

    status: str
    version: str
    storage: Literal["memory", "sql"]
    fantasy402_configured: bool


class ErrorDetail(CamelModel):
    code: str
    message: str


class ErrorResponse(CamelModel):
    """Standard error envelope returned by all error handlers."""

    success: bool = False
    error: ErrorDetail
