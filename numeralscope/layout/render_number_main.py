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

r"""Dumps the resolved layout of all representations of a number as JSON.

Example:
--------
python numeralscope/layout/render_number_main.py \
  --number 4239 \
  --modes binary,kaktovik,cistercian,object_counting \
  --grid_rows 3 --grid_cols 3 --tap_x 410 --tap_y 290 \
  --output_json_file /tmp/layout.json \
  --logtostderr
"""

import json

from absl import app
from absl import flags
from absl import logging
from numeralscope.layout import grid_coordinates
from numeralscope.layout import overlap_resolver
from numeralscope.layout import quantity_grid
from numeralscope.layout import render_number as render_lib

_NUMBER = flags.DEFINE_integer(
    "number", None,
    "Number in [0, 9999] to lay out.",
    required=True
)

_MODES = flags.DEFINE_list(
    "modes", ["binary", "kaktovik", "cistercian"],
    "Enabled representations, e.g. `binary,object_counting`."
)

_VIEWPORT_WIDTH = flags.DEFINE_float(
    "viewport_width", 800.,
    "Viewport width in pixels."
)

_VIEWPORT_HEIGHT = flags.DEFINE_float(
    "viewport_height", 600.,
    "Viewport height in pixels."
)

_ANCHOR_X = flags.DEFINE_float(
    "anchor_x", None,
    "Horizontal anchor position. Defaults to the viewport center."
)

_ANCHOR_Y = flags.DEFINE_float(
    "anchor_y", None,
    "Vertical anchor position. Defaults to the viewport center."
)

_QUANTITY_STYLE = flags.DEFINE_enum(
    "quantity_style", render_lib.PLACE_VALUE, render_lib.QUANTITY_STYLES,
    "Visualization used for the `object_counting` mode."
)

_ARRANGEMENT = flags.DEFINE_enum(
    "arrangement", quantity_grid.VERTICAL, quantity_grid.ARRANGEMENTS,
    "Arrangement of the place-value groups."
)

_GRID_ROWS = flags.DEFINE_integer(
    "grid_rows", 0,
    "Number of grid rows. When positive together with `--grid_cols`, the "
    "anchor is the center of the cell hit by `--tap_x` and `--tap_y`."
)

_GRID_COLS = flags.DEFINE_integer(
    "grid_cols", 0,
    "Number of grid columns."
)

_GRID_PADDING = flags.DEFINE_float(
    "grid_padding", 0.,
    "Padding between grid cells in pixels."
)

_TAP_X = flags.DEFINE_float("tap_x", 0., "Horizontal tap position.")

_TAP_Y = flags.DEFINE_float("tap_y", 0., "Vertical tap position.")

_OUTPUT_JSON_FILE = flags.DEFINE_string(
    "output_json_file", None,
    "Output file for the layout. If not given, the layout is printed."
)


def _anchor() -> grid_coordinates.Point:
  """Figures out the anchor from the flags."""
  width, height = _VIEWPORT_WIDTH.value, _VIEWPORT_HEIGHT.value
  if _GRID_ROWS.value > 0 and _GRID_COLS.value > 0:
    grid = grid_coordinates.GridCoordinateMapper(
        _GRID_ROWS.value, _GRID_COLS.value, width, height,
        cell_padding=_GRID_PADDING.value,
    )
    anchor = render_lib.anchor_from_tap(grid, _TAP_X.value, _TAP_Y.value)
    if anchor is None:
      raise grid_coordinates.InvalidCellError(
          f"Tap ({_TAP_X.value}, {_TAP_Y.value}) is outside of the grid"
      )
    logging.info("Tap resolved to anchor (%.2f, %.2f).", anchor.x, anchor.y)
    return anchor

  x = width / 2 if _ANCHOR_X.value is None else _ANCHOR_X.value
  y = height / 2 if _ANCHOR_Y.value is None else _ANCHOR_Y.value
  return grid_coordinates.Point(x, y)


def main(unused_argv):
  result = render_lib.render_number(
      _NUMBER.value,
      _MODES.value,
      _anchor(),
      viewport_size=(_VIEWPORT_WIDTH.value, _VIEWPORT_HEIGHT.value),
      resolver=overlap_resolver.OverlapResolver(),
      quantity_style=_QUANTITY_STYLE.value,
      arrangement=_ARRANGEMENT.value,
  )
  json_data = json.dumps(render_lib.result_to_dict(result), indent=2)
  if _OUTPUT_JSON_FILE.value:
    logging.info("Saving layout to %s ...", _OUTPUT_JSON_FILE.value)
    with open(_OUTPUT_JSON_FILE.value, mode="w") as f:
      f.write(json_data)
  else:
    print(json_data)


if __name__ == "__main__":
  app.run(main)
