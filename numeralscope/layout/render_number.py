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

"""Places all enabled representations of a number around an anchor.

The main (decimal) numeral is drawn at the anchor. Every enabled alternate
representation is encoded, sized, seeded above the anchor in a fixed stacking
order and then moved by the overlap resolver until nothing overlaps.
"""

import dataclasses
import enum
from typing import Any, Iterable, Optional, Union

from absl import logging
from numeralscope.glyphs import footprints
from numeralscope.glyphs import numbers_to_glyphs as number_lib
from numeralscope.glyphs import symbol_vocab as vocab_lib
from numeralscope.layout import grid_coordinates
from numeralscope.layout import overlap_resolver
from numeralscope.layout import quantity_grid

Point = grid_coordinates.Point

ANCHOR_ID = "main"


class Mode(str, enum.Enum):
  BINARY = "binary"
  KAKTOVIK = "kaktovik"
  CISTERCIAN = "cistercian"
  OBJECT_COUNTING = "object_counting"


# Quantity visualizations.
PLACE_VALUE = "place_value"
COUNTED_OBJECTS = "counted_objects"
QUANTITY_STYLES = (PLACE_VALUE, COUNTED_OBJECTS)


@dataclasses.dataclass(frozen=True)
class _Seed:
  priority: int
  offset_y: float


# Default stacking from the nearest to the farthest from the anchor. The
# priorities follow the same order, so the relaxation keeps it.
_SEEDS = {
    Mode.BINARY: _Seed(priority=1, offset_y=-50.),
    Mode.KAKTOVIK: _Seed(priority=2, offset_y=-80.),
    Mode.CISTERCIAN: _Seed(priority=3, offset_y=-120.),
    Mode.OBJECT_COUNTING: _Seed(priority=4, offset_y=-180.),
}

Quantity = Union[
    quantity_grid.PlaceValueComposite, quantity_grid.CountedObjects
]


@dataclasses.dataclass(frozen=True, eq=False)
class RenderedMode:
  """Symbols of a single representation and where to draw them."""

  mode: Mode
  glyphs: tuple[str, ...]
  symbol_ids: tuple[int, ...]
  x: float
  y: float
  offset_x: float
  offset_y: float
  width: float
  height: float
  quantity: Optional[Quantity] = None


@dataclasses.dataclass(frozen=True, eq=False)
class RenderResult:
  number: int
  anchor: Point
  anchor_glyphs: tuple[str, ...]
  anchor_width: float
  anchor_height: float
  modes: dict[Mode, RenderedMode]
  converged: bool


def parse_modes(modes: Iterable[Union[Mode, str]]) -> list[Mode]:
  """Converts mode names to modes in the default stacking order."""
  parsed = set()
  for mode in modes:
    try:
      parsed.add(Mode(mode))
    except ValueError as e:
      raise ValueError(f"Unknown mode: {mode}") from e
  return [mode for mode in _SEEDS if mode in parsed]


def _layout_quantity(
    number: int,
    x: float,
    y: float,
    quantity_style: str,
    arrangement: str,
    viewport_width: float,
    params: quantity_grid.LayoutParams,
) -> Quantity:
  if quantity_style == PLACE_VALUE:
    return quantity_grid.layout_place_values(
        number, x, y, arrangement=arrangement, params=params
    )
  return quantity_grid.layout_counted_objects(
      number, x, y, viewport_width=viewport_width, params=params
  )


def render_number(
    number: number_lib.Number,
    enabled_modes: Iterable[Union[Mode, str]],
    anchor: Point,
    viewport_size: tuple[float, float] = (800., 600.),
    resolver: Optional[overlap_resolver.OverlapResolver] = None,
    params: Optional[quantity_grid.LayoutParams] = None,
    quantity_style: str = PLACE_VALUE,
    arrangement: str = quantity_grid.VERTICAL,
    vocab: Optional[vocab_lib.SymbolVocab] = None,
) -> RenderResult:
  """Encodes the number in every enabled mode and resolves their positions.

  Args:
    number: Integer in [0, 9999].
    enabled_modes: Representations to show next to the main numeral.
    anchor: Center of the main numeral.
    viewport_size: Viewport `(width, height)` in pixels.
    resolver: Overlap resolver. Defaults to one configured by flags.
    params: Icon metrics for the quantity visualization.
    quantity_style: Either `place_value` or `counted_objects`.
    arrangement: Arrangement of the place-value groups.
    vocab: Symbol vocabulary used to produce symbol IDs.

  Returns:
    Symbols and resolved positions for every enabled mode.
  """
  if quantity_style not in QUANTITY_STYLES:
    raise ValueError(f"Unknown quantity style: {quantity_style}")
  n = number_lib.validate_number(number, max_value=number_lib.MAX_NUMBER)
  modes = parse_modes(enabled_modes)
  resolver = resolver or overlap_resolver.OverlapResolver()
  params = params or quantity_grid.LayoutParams.from_flags()
  vocab = vocab or vocab_lib.default_symbol_vocab()
  viewport_width, viewport_height = viewport_size
  scale = footprints.responsive_scale(viewport_width, viewport_height)

  main_size = footprints.main_number_footprint(n, scale)
  anchor_component = overlap_resolver.LayoutComponent(
      id=ANCHOR_ID, x=anchor.x, y=anchor.y,
      width=main_size.width, height=main_size.height,
      priority=overlap_resolver.ANCHOR_PRIORITY,
  )

  glyphs = {}
  sizes = {}
  for mode in modes:
    if mode == Mode.BINARY:
      glyphs[mode] = number_lib.encode_binary_icons(n)
      sizes[mode] = footprints.binary_footprint(glyphs[mode], scale)
    elif mode == Mode.KAKTOVIK:
      glyphs[mode] = number_lib.encode_base20(n)
      sizes[mode] = footprints.base20_footprint(glyphs[mode], scale)
    elif mode == Mode.CISTERCIAN:
      glyphs[mode] = number_lib.encode_positional_compound(n)
      sizes[mode] = footprints.compound_footprint(scale)
    else:
      quantity = _layout_quantity(
          n, 0., 0., quantity_style, arrangement, viewport_width, params
      )
      glyphs[mode] = quantity.icons()
      sizes[mode] = footprints.Footprint(quantity.width, quantity.height)

  candidates = [
      overlap_resolver.LayoutComponent(
          id=mode.value,
          x=anchor.x,
          y=anchor.y + _SEEDS[mode].offset_y,
          width=sizes[mode].width,
          height=sizes[mode].height,
          priority=_SEEDS[mode].priority,
      ) for mode in modes
  ]
  resolution = resolver.resolve(anchor_component, candidates)
  if not resolution.converged:
    logging.info("Forced layout used for number %d.", n)
  positions = resolution.positions()

  rendered = {}
  for mode in modes:
    position = positions[mode.value]
    quantity = None
    if mode == Mode.OBJECT_COUNTING:
      quantity = _layout_quantity(
          n, position.x, position.y, quantity_style, arrangement,
          viewport_width, params,
      )
    rendered[mode] = RenderedMode(
        mode=mode,
        glyphs=tuple(glyphs[mode]),
        symbol_ids=tuple(vocab.encode(glyphs[mode])),
        x=position.x,
        y=position.y,
        offset_x=position.offset_x,
        offset_y=position.offset_y,
        width=sizes[mode].width,
        height=sizes[mode].height,
        quantity=quantity,
    )
  return RenderResult(
      number=n,
      anchor=anchor,
      anchor_glyphs=tuple(number_lib.encode_decimal(n)),
      anchor_width=main_size.width,
      anchor_height=main_size.height,
      modes=rendered,
      converged=resolution.converged,
  )


def anchor_from_tap(
    grid: grid_coordinates.GridCoordinateMapper, x: float, y: float
) -> Optional[Point]:
  """Returns center of the tapped cell or None if no cell was hit."""
  cell = grid.get_grid_cell(x, y)
  if cell is None:
    return None
  return grid.get_cell_position(cell.row, cell.col)


def result_to_dict(result: RenderResult) -> dict[str, Any]:
  """Converts render result to a JSON-serializable dictionary."""
  modes = {}
  for mode, rendered in result.modes.items():
    entry = {
        "glyphs": list(rendered.glyphs),
        "symbol_ids": list(rendered.symbol_ids),
        "x": rendered.x,
        "y": rendered.y,
        "offset_x": rendered.offset_x,
        "offset_y": rendered.offset_y,
        "width": rendered.width,
        "height": rendered.height,
    }
    if rendered.quantity is not None:
      entry["icons"] = rendered.quantity.icons()
      entry["icon_centers"] = rendered.quantity.all_icon_centers().tolist()
    modes[mode.value] = entry
  return {
      "number": result.number,
      "anchor": {"x": result.anchor.x, "y": result.anchor.y},
      "anchor_glyphs": list(result.anchor_glyphs),
      "anchor_width": result.anchor_width,
      "anchor_height": result.anchor_height,
      "converged": result.converged,
      "modes": modes,
  }
