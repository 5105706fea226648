"""POST /api/label: run one row scan over a submitted grid."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from blobstream.config import Settings
from blobstream.dependencies import get_settings
from blobstream.engine import Blob, ConfigurationError, RowScanLabeler, ScanConfig
from blobstream.models.requests import LabelRequest
from blobstream.models.responses import BlobSummary, LabelResponse, PixelOut
from blobstream.utils.ascii import blobs_to_ascii

logger = logging.getLogger(__name__)

router = APIRouter()


def _reject(detail: str) -> HTTPException:
    logger.warning("Label request rejected: %s", detail)
    return HTTPException(status_code=422, detail=detail)


def _summarize(index: int, blob: Blob, weighted: bool, include_pixels: bool) -> BlobSummary:
    return BlobSummary(
        index=index,
        pixel_count=blob.pixel_count(),
        bbox=blob.bounding_box(),
        value_range=blob.value_range(),
        sum=blob.sum(),
        centroid=blob.centroid(weighted=weighted),
        pixels=[PixelOut(x=p.x, y=p.y, value=p.value) for p in blob] if include_pixels else None,
    )


@router.post("/label", response_model=LabelResponse)
async def label(req: LabelRequest, settings: Settings = Depends(get_settings)) -> LabelResponse:
    start = time.perf_counter()

    height = len(req.grid)
    width = len(req.grid[0]) if height else 0
    if height == 0 or width == 0:
        raise _reject("Grid must have at least one row and one column")
    if any(len(row) != width for row in req.grid):
        raise _reject("All grid rows must have the same length")
    if width * height > settings.max_grid_cells:
        raise _reject(f"Grid has {width * height} cells, limit is {settings.max_grid_cells}")

    config = ScanConfig(
        width=width,
        height=height,
        threshold=settings.default_threshold if req.threshold is None else req.threshold,
        min_pixels=settings.default_min_pixels if req.min_pixels is None else req.min_pixels,
    )
    try:
        labeler = RowScanLabeler(req.grid, config)
        blobs = labeler.run()
    except ConfigurationError as e:
        raise _reject(str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000

    return LabelResponse(
        width=width,
        height=height,
        threshold=config.threshold,
        min_pixels=config.min_pixels,
        blob_count=len(blobs),
        discarded_count=labeler.discarded_count,
        blobs=[
            _summarize(i, blob, req.weighted_centroid, req.include_pixels)
            for i, blob in enumerate(blobs)
        ],
        ascii=blobs_to_ascii(blobs, width, height) if req.include_ascii else None,
        processing_time_ms=round(elapsed, 1),
    )
