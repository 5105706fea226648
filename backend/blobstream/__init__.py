"""blobstream: single-pass streaming blob finding over 2-D scalar grids."""

__version__ = "0.1.0"
