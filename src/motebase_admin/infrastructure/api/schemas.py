"""Pydantic schemas for MoteBase API responses and requests."""

from typing import Any

from pydantic import BaseModel, Field


class ListPage(BaseModel):
    """One page of a paginated listing (records, logs, jobs)."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    page: int = 1
    per_page: int | None = Field(default=None, alias="perPage")
    total_items: int | None = Field(default=None, alias="totalItems")
    total_pages: int | None = Field(default=None, alias="totalPages")

    model_config = {"populate_by_name": True, "extra": "allow"}


class LoginRequest(BaseModel):
    """Credentials for the authentication exchange."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Token and operator profile returned by a successful login."""

    token: str
    user: dict[str, Any] = Field(default_factory=dict)


class ImportRequest(BaseModel):
    """Batch import of collection definitions."""

    collections: list[dict[str, Any]]
    delete_missing: bool = Field(default=False, serialization_alias="deleteMissing")

    model_config = {"populate_by_name": True}


class RetryAllResponse(BaseModel):
    """Result of re-queueing all failed jobs."""

    retried: int = 0

    model_config = {"extra": "allow"}
