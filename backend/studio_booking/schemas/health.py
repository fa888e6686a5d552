"""Health check responses."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: str


class ReadyResponse(BaseModel):
    status: str
    database: str
