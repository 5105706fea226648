"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LabelRequest(BaseModel):
    grid: list[list[float]] = Field(..., description="Grid rows, each a list of sample values")
    threshold: float | None = Field(
        default=None,
        description="Foreground iff value > threshold (server default when omitted)",
    )
    min_pixels: int | None = Field(
        default=None,
        ge=0,
        description="Drop blobs smaller than this (server default when omitted)",
    )
    weighted_centroid: bool = Field(default=True, description="Weight centroids by pixel value")
    include_pixels: bool = Field(default=False, description="Return every pixel of every blob")
    include_ascii: bool = Field(default=False, description="Return an ASCII map of the blobs")
