"""Response envelopes shared by every endpoint."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class StandardResponse(BaseModel, Generic[DataT]):
    """Successful response wrapper."""

    success: bool = True
    message: str = ""
    data: DataT | None = None


class ErrorDetail(BaseModel):
    code: str
    message: str
    timestamp: str
    path: str | None = None


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    error: ErrorDetail


__all__ = ["ErrorDetail", "ErrorResponse", "StandardResponse"]
