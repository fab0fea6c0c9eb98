from typing import Optional

from pydantic import BaseModel


class ClientErrorResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class HealthStatus(BaseModel):
    status: str
    message: Optional[str] = None
