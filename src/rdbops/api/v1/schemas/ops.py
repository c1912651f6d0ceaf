from typing import Any

from pydantic import BaseModel, Field


class AnomaliesResponse(BaseModel):
    critical: list[dict[str, Any]]
    warning: list[dict[str, Any]]
    info: list[dict[str, Any]]
    total: int
    health_score: int = Field(..., ge=0, le=100)


class RecommendationsResponse(BaseModel):
    recommendations: list[dict[str, Any]]
    total: int


class HealthResponse(BaseModel):
    health_score: int = Field(..., ge=0, le=100)
    health_status: str = Field(..., description="excellent, good, fair, poor or critical")
    critical_issues: int
    warnings: int
    total_anomalies: int
    recommendations: int


class SnapshotRegistered(BaseModel):
    name: str
    total_keys: int
    total_bytes: int


class SnapshotList(BaseModel):
    instances: list[str]


class HistoryResponse(BaseModel):
    history: list[dict[str, Any]]


class ProgressResponse(BaseModel):
    filename: str
    status: str
    progress: int
    currentStep: str
    duration: float
    error: str
