"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"


class PixelOut(BaseModel):
    x: int
    y: int
    value: float


class BlobSummary(BaseModel):
    index: int
    pixel_count: int
    bbox: tuple[int, int, int, int]  # xmin, xmax, ymin, ymax
    value_range: tuple[float, float]
    sum: float
    centroid: tuple[float, float]
    pixels: list[PixelOut] | None = None


class LabelResponse(BaseModel):
    width: int
    height: int
    threshold: float
    min_pixels: int
    blob_count: int = 0
    discarded_count: int = 0
    blobs: list[BlobSummary] = Field(default_factory=list)
    ascii: str | None = None
    processing_time_ms: float = 0.0
