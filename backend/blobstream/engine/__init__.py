"""blobstream row-scan labeling engine."""

from blobstream.engine.blob import Blob, Pixel
from blobstream.engine.classifier import PixelClassifier, as_classifier
from blobstream.engine.config import ScanConfig
from blobstream.engine.errors import ConfigurationError, InvariantViolation
from blobstream.engine.labeler import RowScanLabeler, label_grid
from blobstream.engine.markers import Marker, Status

__all__ = [
    "Blob",
    "Pixel",
    "PixelClassifier",
    "as_classifier",
    "ScanConfig",
    "ConfigurationError",
    "InvariantViolation",
    "RowScanLabeler",
    "label_grid",
    "Marker",
    "Status",
]
