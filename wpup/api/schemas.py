"""Pydantic models for API responses that are not package metadata."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    status: str                         # "ok" | "degraded"
    version: str
    services: dict[str, bool]
    packages: Optional[int] = None      # ZIPs in the package directory
