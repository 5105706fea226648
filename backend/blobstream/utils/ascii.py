"""ASCII rendering of finished blobs for debugging and API previews."""

from __future__ import annotations

from collections.abc import Sequence

from blobstream.engine.blob import Blob

# Background is always '.'; blobs get these in order of decreasing size.
_CHAR_PALETTE = "#@%&*+=-~:;!?/\\|<>^vXOQWMBZS0123456789abcdef"


def build_char_map(blobs: Sequence[Blob]) -> dict[int, str]:
    """Map blob index to a character, largest blobs first."""
    by_size = sorted(range(len(blobs)), key=lambda i: len(blobs[i]), reverse=True)
    return {i: _CHAR_PALETTE[rank % len(_CHAR_PALETTE)] for rank, i in enumerate(by_size)}


def blobs_to_ascii(blobs: Sequence[Blob], width: int, height: int) -> str:
    """Render blobs on a width x height canvas, one text line per row."""
    canvas = [["."] * width for _ in range(height)]
    for i, ch in build_char_map(blobs).items():
        for p in blobs[i]:
            if 0 <= p.x < width and 0 <= p.y < height:
                canvas[p.y][p.x] = ch
    return "\n".join("".join(row) for row in canvas)
