# Copyright 2025 The Numeralscope Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Mapping between viewport pixels and the cells of a centered grid.

The viewport is partitioned into `rows x cols` equally sized cells separated
by a uniform padding. The derived dimensions are recomputed in full whenever
the viewport size or padding changes. Cell occupancy is not tracked here.

A single mapper must not be resized while being queried from another thread.
"""

import dataclasses
import math
import numbers
from typing import Optional

from absl import logging


class InvalidCellError(ValueError):
  """Cell outside of the grid or with non-integer indices."""


@dataclasses.dataclass(frozen=True)
class CellCoord:
  row: int
  col: int


@dataclasses.dataclass(frozen=True)
class Point:
  x: float
  y: float


def _as_index(value) -> Optional[int]:
  """Returns value as an integer index or None if it is not integral."""
  if isinstance(value, bool) or not isinstance(value, numbers.Real):
    return None
  if isinstance(value, numbers.Integral):
    return int(value)
  if math.isfinite(value) and float(value).is_integer():
    return int(value)
  return None


class GridCoordinateMapper:
  """Partition of a viewport into a centered grid of cells."""

  def __init__(
      self,
      rows: int,
      cols: int,
      viewport_width: float,
      viewport_height: float,
      cell_padding: float = 0.,
  ):
    if _as_index(rows) is None or rows < 1:
      raise ValueError(f"Invalid number of rows: {rows}")
    if _as_index(cols) is None or cols < 1:
      raise ValueError(f"Invalid number of columns: {cols}")
    if cell_padding < 0:
      raise ValueError(f"Negative cell padding: {cell_padding}")
    self._rows = int(rows)
    self._cols = int(cols)
    self._cell_padding = cell_padding
    self.update_dimensions(viewport_width, viewport_height)

  @property
  def rows(self) -> int:
    return self._rows

  @property
  def cols(self) -> int:
    return self._cols

  @property
  def cell_padding(self) -> float:
    return self._cell_padding

  @property
  def cell_width(self) -> float:
    return self._cell_width

  @property
  def cell_height(self) -> float:
    return self._cell_height

  @property
  def actual_grid_width(self) -> float:
    return self._actual_grid_width

  @property
  def actual_grid_height(self) -> float:
    return self._actual_grid_height

  @property
  def offset_x(self) -> float:
    return self._offset_x

  @property
  def offset_y(self) -> float:
    return self._offset_y

  def update_dimensions(
      self, viewport_width: float, viewport_height: float
  ) -> None:
    """Recomputes all the derived dimensions for a new viewport size."""
    self._viewport_width = viewport_width
    self._viewport_height = viewport_height

    total_padding_x = self._cell_padding * (self._cols - 1)
    total_padding_y = self._cell_padding * (self._rows - 1)
    self._cell_width = max(0., (viewport_width - total_padding_x) / self._cols)
    self._cell_height = max(
        0., (viewport_height - total_padding_y) / self._rows
    )

    # Cells plus the padding between them.
    self._actual_grid_width = self._cols * self._cell_width + total_padding_x
    self._actual_grid_height = self._rows * self._cell_height + total_padding_y
    self._offset_x = (viewport_width - self._actual_grid_width) / 2
    self._offset_y = (viewport_height - self._actual_grid_height) / 2
    logging.debug(
        "Grid %dx%d in %sx%s viewport: cell %.2fx%.2f, offset (%.2f, %.2f)",
        self._rows, self._cols, viewport_width, viewport_height,
        self._cell_width, self._cell_height, self._offset_x, self._offset_y,
    )

  def set_padding(self, cell_padding: float) -> None:
    if cell_padding < 0:
      raise ValueError(f"Negative cell padding: {cell_padding}")
    self._cell_padding = cell_padding
    self.update_dimensions(self._viewport_width, self._viewport_height)

  def is_valid_cell(self, row, col) -> bool:
    """Checks that both indices are integers inside the grid."""
    row, col = _as_index(row), _as_index(col)
    if row is None or col is None:
      return False
    return 0 <= row < self._rows and 0 <= col < self._cols

  def get_cell_position(self, row, col) -> Optional[Point]:
    """Returns pixel center of the cell or None for an invalid cell."""
    if not self.is_valid_cell(row, col):
      return None
    row, col = int(row), int(col)
    cell_x = self._offset_x + col * (self._cell_width + self._cell_padding)
    cell_y = self._offset_y + row * (self._cell_height + self._cell_padding)
    return Point(cell_x + self._cell_width / 2, cell_y + self._cell_height / 2)

  def require_cell_position(self, row, col) -> Point:
    """Same as `get_cell_position`, but raises for an invalid cell."""
    position = self.get_cell_position(row, col)
    if position is None:
      raise InvalidCellError(
          f"Invalid cell ({row}, {col}) for {self._rows}x{self._cols} grid"
      )
    return position

  def get_grid_cell(self, x: float, y: float) -> Optional[CellCoord]:
    """Converts a viewport point to the cell containing it.

    Points inside the padding between two cells are assigned to the cell
    before the gutter.

    Args:
      x: Horizontal viewport coordinate.
      y: Vertical viewport coordinate.

    Returns:
      Cell coordinate or None if the point is outside the grid.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
      return None
    relative_x = x - self._offset_x
    relative_y = y - self._offset_y
    if (relative_x < 0 or relative_x > self._actual_grid_width or
        relative_y < 0 or relative_y > self._actual_grid_height):
      return None

    pitch_x = self._cell_width + self._cell_padding
    pitch_y = self._cell_height + self._cell_padding
    if pitch_x <= 0 or pitch_y <= 0:
      return None  # Degenerate grid.
    col = math.floor(relative_x / pitch_x)
    row = math.floor(relative_y / pitch_y)
    if not self.is_valid_cell(row, col):
      return None
    return CellCoord(row=row, col=col)
