"""Pydantic request/response models for the REST API.

Option fields accept both snake_case and the camelCase names used by
browser clients (``inferDependencies``, ``includeRaw``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FileSchema(BaseModel):
    """One submitted configuration file."""

    name: str = Field(min_length=1)
    content: str = Field(min_length=1)


class OptionsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    infer_dependencies: bool | None = Field(default=None, alias="inferDependencies")
    include_raw: bool | None = Field(default=None, alias="includeRaw")


class AnalyzeRequest(BaseModel):
    files: list[FileSchema] = Field(min_length=1)
    options: OptionsSchema | None = None


class AnalyzeResponse(BaseModel):
    id: str
    status: str
    result: dict[str, Any]


class ValidateRequest(BaseModel):
    files: list[FileSchema] = Field(min_length=1)


class ValidationIssueSchema(BaseModel):
    file: str
    message: str
    line: int | None = None


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[ValidationIssueSchema]
    warnings: list[ValidationIssueSchema]


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every non-2xx response."""

    error: str
    detail: str
