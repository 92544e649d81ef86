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

"""Icon grid layouts for visualizing quantities.

Small counts follow the arrangements used in early-math teaching: a single
row for counts that can be recognized at a glance (up to five), a ten-frame
(2x5) for counts up to ten and a double ten-frame (4x5) up to twenty. Larger
counts use a square-ish grid bounded by the available horizontal space.

A whole number is shown as one group of icons per non-zero place value (apples
for ones, shopping bags for tens, boxes for hundreds and trucks for
thousands). Groups are placed either side by side or stacked on top of each
other like building blocks.
"""

import dataclasses
import math
import numbers
from typing import Optional

from absl import flags
from absl import logging
import numpy as np
from numeralscope.glyphs import numbers_to_glyphs as number_lib

_ICON_SIZE = flags.DEFINE_float(
    "icon_size", 32.,
    "Size of a single counting icon in pixels."
)

_ICON_ROW_PITCH = flags.DEFINE_float(
    "icon_row_pitch", 36.,
    "Vertical distance between the centers of two icon rows in pixels."
)

_ICON_GAP_X = flags.DEFINE_float(
    "icon_gap_x", 4.,
    "Horizontal gap between two icons of the same row in pixels."
)

_GROUP_GAP_X = flags.DEFINE_float(
    "group_gap_x", 40.,
    "Horizontal gap between place-value columns laid out side by side."
)

_LAYER_GAP_Y = flags.DEFINE_float(
    "layer_gap_y", 36.,
    "Vertical gap between place-value layers stacked on top of each other."
)

_MAX_WIDTH_FRACTION = flags.DEFINE_float(
    "max_width_fraction", 0.2,
    "Fraction of the viewport width a large counting grid may occupy."
)

_MAX_COUNTED_OBJECTS = flags.DEFINE_integer(
    "max_counted_objects", 100,
    "Maximum number of icons drawn for a single counted quantity. Larger "
    "quantities are truncated and flagged as overflowing."
)

# Arrangements of the place-value groups.
HORIZONTAL = "horizontal"
VERTICAL = "vertical"
ARRANGEMENTS = (HORIZONTAL, VERTICAL)

# Horizontal shift of each stacked layer, in icon sizes.
_LAYER_OFFSETS = {
    "thousands": 0.,
    "hundreds": 0.25,
    "tens": 0.5,
    "ones": 0.75,
}

DEFAULT_VIEWPORT_WIDTH = 800.


@dataclasses.dataclass(frozen=True)
class LayoutParams:
  """Icon metrics and spacing in pixels."""

  icon_size: float = 32.
  row_pitch: float = 36.
  icon_gap_x: float = 4.
  group_gap_x: float = 40.
  layer_gap_y: float = 36.
  max_width_fraction: float = 0.2
  max_counted_objects: int = 100

  @classmethod
  def from_flags(cls) -> "LayoutParams":
    return cls(
        icon_size=_ICON_SIZE.value,
        row_pitch=_ICON_ROW_PITCH.value,
        icon_gap_x=_ICON_GAP_X.value,
        group_gap_x=_GROUP_GAP_X.value,
        layer_gap_y=_LAYER_GAP_Y.value,
        max_width_fraction=_MAX_WIDTH_FRACTION.value,
        max_counted_objects=_MAX_COUNTED_OBJECTS.value,
    )


@dataclasses.dataclass(frozen=True)
class GridLayout:
  """Arrangement of items in rows and columns."""

  rows: int = 0
  columns: int = 0

  @property
  def capacity(self) -> int:
    return self.rows * self.columns

  @property
  def aspect_ratio(self) -> float:
    return self.rows / self.columns if self.columns else 0.

  def cells(self, count: int) -> list[tuple[int, int]]:
    """Returns `(row, col)` of the first `count` cells in row-major order."""
    if count > self.capacity:
      raise ValueError(
          f"Cannot fit {count} items into {self.rows}x{self.columns} grid"
      )
    return [divmod(idx, self.columns) for idx in range(count)]


def _truncate_count(count: number_lib.Number) -> int:
  if isinstance(count, bool) or not isinstance(count, numbers.Real):
    raise number_lib.InvalidNumberError(f"Not a number: {count!r}")
  if not math.isfinite(count):
    raise number_lib.InvalidNumberError(f"Not a finite number: {count}")
  return int(count)


def calculate_optimal_stacking_layout(
    count: number_lib.Number,
    viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
    params: Optional[LayoutParams] = None,
) -> GridLayout:
  """Computes the grid for `count` identical icons.

  Args:
    count: Number of icons. Fractions are truncated.
    viewport_width: Width of the viewport in pixels. Only used for counts
      above twenty to bound the number of columns.
    params: Icon metrics. Defaults to the values configured by flags.

  Returns:
    Grid layout with enough cells for all the icons.
  """
  count = _truncate_count(count)
  if count <= 0:
    return GridLayout(0, 0)
  if count <= 5:
    return GridLayout(1, count)
  if count <= 10:
    return GridLayout(2, 5)  # Ten-frame.
  if count <= 20:
    return GridLayout(4, 5)  # Double ten-frame.

  params = params or LayoutParams.from_flags()
  columns = math.ceil(math.sqrt(count))
  rows = math.ceil(count / columns)

  max_columns = max(
      1, math.floor(params.max_width_fraction * viewport_width / params.icon_size)
  )
  if columns > max_columns:
    columns = max_columns
    rows = math.ceil(count / columns)

  # Too tall, redistribute towards a wider grid.
  if rows > columns * 1.5:
    columns = min(max_columns, math.ceil(math.sqrt(count * 1.3)))
    rows = math.ceil(count / columns)

  logging.debug("Layout for %d icons: %dx%d", count, rows, columns)
  return GridLayout(rows, columns)


def square_grid_layout(count: number_lib.Number) -> GridLayout:
  """Makes the grid as square as possible."""
  count = _truncate_count(count)
  if count <= 0:
    return GridLayout(0, 0)
  columns = math.ceil(math.sqrt(count))
  return GridLayout(math.ceil(count / columns), columns)


def grid_width(grid: GridLayout, params: LayoutParams) -> float:
  if grid.columns == 0:
    return 0.
  return grid.columns * params.icon_size + (grid.columns - 1) * params.icon_gap_x


def grid_height(grid: GridLayout, count: int, params: LayoutParams) -> float:
  if count <= 0:
    return 0.
  if count == 1:
    return params.icon_size
  return grid.rows * params.row_pitch


def _icon_centers(
    grid: GridLayout,
    count: int,
    center_x: float,
    top: float,
    params: LayoutParams,
) -> np.ndarray:
  """Centers of the filled cells as `(count, 2)` array of `(x, y)`."""
  centers = np.zeros((count, 2), dtype=np.float64)
  if count == 0:
    return centers
  cells = np.array(grid.cells(count), dtype=np.float64)
  start_x = center_x - grid_width(grid, params) / 2 + params.icon_size / 2
  centers[:, 0] = start_x + cells[:, 1] * (params.icon_size + params.icon_gap_x)
  centers[:, 1] = top + cells[:, 0] * params.row_pitch + params.icon_size / 2
  return centers


@dataclasses.dataclass(frozen=True, eq=False)
class PlaceValueColumn:
  """Icons of a single place value."""

  place: str
  count: int
  icon: str
  grid: GridLayout
  center_x: float
  top: float
  width: float
  height: float
  icon_centers: np.ndarray

  @property
  def left(self) -> float:
    return self.center_x - self.width / 2


@dataclasses.dataclass(frozen=True, eq=False)
class PlaceValueComposite:
  """All place-value groups of a number."""

  number: int
  arrangement: str
  center_x: float
  center_y: float
  width: float
  height: float
  columns: tuple[PlaceValueColumn, ...] = ()

  def icons(self) -> list[str]:
    """Icon names in drawing order, matching `all_icon_centers()`."""
    return [column.icon for column in self.columns for _ in range(column.count)]

  def all_icon_centers(self) -> np.ndarray:
    if not self.columns:
      return np.zeros((0, 2), dtype=np.float64)
    return np.concatenate([column.icon_centers for column in self.columns])


def _place_grid(place: str, count: int) -> GridLayout:
  # Only the apples are packed into a grid, higher place values are stacked
  # in a single column.
  if place == "ones":
    return square_grid_layout(count)
  return GridLayout(count, 1)


def layout_place_values(
    number: number_lib.Number,
    x: float = 0.,
    y: float = 0.,
    arrangement: str = VERTICAL,
    params: Optional[LayoutParams] = None,
) -> PlaceValueComposite:
  """Lays out one icon group per non-zero place value around `(x, y)`.

  Args:
    number: Integer in [0, 9999].
    x: Horizontal center of the composite.
    y: Vertical center of the composite.
    arrangement: Either `horizontal` (groups side by side, thousands on the
      left) or `vertical` (groups stacked with thousands at the bottom).
    params: Icon metrics. Defaults to the values configured by flags.

  Returns:
    Composite layout.

  Raises:
    ValueError: If the arrangement is unknown or the number is invalid.
  """
  if arrangement not in ARRANGEMENTS:
    raise ValueError(f"Unknown arrangement: {arrangement}")
  params = params or LayoutParams.from_flags()
  place_values = number_lib.decompose_place_values(number)
  places = place_values.nonzero_places()
  if not places:
    return PlaceValueComposite(
        number=place_values.value(), arrangement=arrangement,
        center_x=x, center_y=y, width=0., height=0.
    )

  grids = {}
  sizes = {}
  for place in places:
    count = place_values.count(place)
    grids[place] = _place_grid(place, count)
    sizes[place] = (
        grid_width(grids[place], params),
        grid_height(grids[place], count, params),
    )

  centers = {}
  tops = {}
  if arrangement == HORIZONTAL:
    width = (
        sum(w for w, _ in sizes.values()) + params.group_gap_x * (len(places) - 1)
    )
    height = max(h for _, h in sizes.values())
    left = x - width / 2
    for place in places:
      column_width, _ = sizes[place]
      centers[place] = left + column_width / 2
      tops[place] = y - height / 2
      left += column_width + params.group_gap_x
  else:
    height = (
        sum(h for _, h in sizes.values()) + params.layer_gap_y * (len(places) - 1)
    )
    bottom = y + height / 2
    for place in places:  # Bottom to top.
      _, layer_height = sizes[place]
      tops[place] = bottom - layer_height
      centers[place] = x + _LAYER_OFFSETS[place] * params.icon_size
      bottom = tops[place] - params.layer_gap_y
    # Layers are shifted against each other, re-center their union on `x`.
    left = min(centers[p] - sizes[p][0] / 2 for p in places)
    right = max(centers[p] + sizes[p][0] / 2 for p in places)
    width = right - left
    shift = x - (left + right) / 2
    centers = {place: cx + shift for place, cx in centers.items()}

  columns = []
  for place in places:
    count = place_values.count(place)
    column_width, column_height = sizes[place]
    columns.append(PlaceValueColumn(
        place=place,
        count=count,
        icon=number_lib.PLACE_VALUE_ICONS[place],
        grid=grids[place],
        center_x=centers[place],
        top=tops[place],
        width=column_width,
        height=column_height,
        icon_centers=_icon_centers(
            grids[place], count, centers[place], tops[place], params
        ),
    ))
  return PlaceValueComposite(
      number=place_values.value(),
      arrangement=arrangement,
      center_x=x,
      center_y=y,
      width=width,
      height=height,
      columns=tuple(columns),
  )


@dataclasses.dataclass(frozen=True, eq=False)
class CountedObjects:
  """A single grid of identical icons for a whole quantity."""

  total: int
  displayed: int
  icon: str
  grid: GridLayout
  center_x: float
  center_y: float
  width: float
  height: float
  icon_centers: np.ndarray

  @property
  def overflow(self) -> bool:
    return self.displayed < self.total

  def icons(self) -> list[str]:
    return [self.icon] * self.displayed

  def all_icon_centers(self) -> np.ndarray:
    return self.icon_centers


def layout_counted_objects(
    count: number_lib.Number,
    x: float = 0.,
    y: float = 0.,
    viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
    params: Optional[LayoutParams] = None,
) -> CountedObjects:
  """Lays out up to `max_counted_objects` apples centered on `(x, y)`."""
  params = params or LayoutParams.from_flags()
  total = number_lib.validate_number(
      _truncate_count(count), max_value=number_lib.MAX_NUMBER
  )
  displayed = min(total, params.max_counted_objects)
  if displayed < total:
    logging.info(
        "Showing %d of %d objects (capped at %d).",
        displayed, total, params.max_counted_objects,
    )
  grid = calculate_optimal_stacking_layout(displayed, viewport_width, params)
  width = grid_width(grid, params)
  height = grid.rows * params.row_pitch
  return CountedObjects(
      total=total,
      displayed=displayed,
      icon=number_lib.PLACE_VALUE_ICONS["ones"],
      grid=grid,
      center_x=x,
      center_y=y,
      width=width,
      height=height,
      icon_centers=_icon_centers(grid, displayed, x, y - height / 2, params),
  )
