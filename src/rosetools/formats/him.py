"""
HIM Heightmap - ROSE Online terrain height grid (read-only)

Structure:
  - Width (int32)
  - Height (int32)
  - Grid count (int32)
  - Scale (float)
  - Samples: width * height floats, row by row

Only the grid is read; the patch data that follows it is ignored.
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from ..utils.binary import IoBuffer
from .base import RoseFile


logger = logging.getLogger(__name__)


@dataclass
class Heightmap(RoseFile):
    """Height samples for one map tile."""
    width: int = 0
    height: int = 0
    grid_count: int = 0
    scale: float = 0.0

    # Shape (height, width), float32
    heights: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.float32))

    min_height: float = math.nan
    max_height: float = math.nan

    def read(self, io: IoBuffer):
        self.width = io.read_int32()
        self.height = io.read_int32()
        self.grid_count = io.read_int32()
        self.scale = io.read_float()

        rows = max(self.height, 0)
        cols = max(self.width, 0)
        raw = io.read_bytes(rows * cols * 4)
        self.heights = np.frombuffer(raw, dtype='<f4').astype(np.float32).reshape(rows, cols)

        valid = self.heights[~np.isnan(self.heights)]
        if valid.size:
            self.min_height = float(valid.min())
            self.max_height = float(valid.max())
        else:
            self.min_height = math.nan
            self.max_height = math.nan

        logger.debug(
            f"HIM: {self.width}x{self.height}, scale={self.scale}, "
            f"range=({self.min_height}, {self.max_height})"
        )

    def get_height(self, x: int, y: int) -> float:
        """Sample at column x, row y. Out-of-grid coordinates raise IndexError."""
        rows, cols = self.heights.shape
        if not (0 <= x < cols and 0 <= y < rows):
            raise IndexError(f"HIM: ({x}, {y}) is outside the {cols}x{rows} grid")
        return float(self.heights[y, x])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Heightmap):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.grid_count == other.grid_count
            and self.scale == other.scale
            and np.array_equal(self.heights, other.heights, equal_nan=True)
        )


# Short alias matching the file extension
HIM = Heightmap
