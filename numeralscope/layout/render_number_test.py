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

"""Tests for placing all the representations of a number."""

import json

from absl.testing import absltest
from absl.testing import parameterized
from numeralscope.glyphs import numbers_to_glyphs as number_lib
from numeralscope.glyphs import symbol_vocab as vocab_lib
from numeralscope.layout import grid_coordinates
from numeralscope.layout import overlap_resolver
from numeralscope.layout import quantity_grid
from numeralscope.layout import render_number as lib

Mode = lib.Mode

_SPACING = 15.
_ANCHOR = grid_coordinates.Point(400., 300.)
_NUMERAL_MODES = (Mode.BINARY, Mode.KAKTOVIK, Mode.CISTERCIAN)
_ALL_MODES = (*_NUMERAL_MODES, Mode.OBJECT_COUNTING)


def _render(number, modes, **kwargs) -> lib.RenderResult:
  return lib.render_number(
      number, modes, _ANCHOR,
      resolver=overlap_resolver.OverlapResolver(
          min_spacing=_SPACING, max_iterations=20
      ),
      params=quantity_grid.LayoutParams(),
      **kwargs
  )


def _components(result: lib.RenderResult) -> list[
    overlap_resolver.LayoutComponent]:
  """Rebuilds the rectangles of the anchor and every rendered mode."""
  components = [overlap_resolver.LayoutComponent(
      lib.ANCHOR_ID, result.anchor.x, result.anchor.y,
      result.anchor_width, result.anchor_height, 0,
  )]
  for idx, rendered in enumerate(result.modes.values()):
    components.append(overlap_resolver.LayoutComponent(
        rendered.mode.value, rendered.x, rendered.y,
        rendered.width, rendered.height, idx + 1,
    ))
  return components


class RenderNumberTest(parameterized.TestCase):

  def test_numeral_modes_keep_stacking_order(self) -> None:
    result = _render(4239, _NUMERAL_MODES)
    self.assertTrue(result.converged)
    self.assertCountEqual(result.modes.keys(), _NUMERAL_MODES)
    self.assertEmpty(overlap_resolver.find_overlaps(_components(result),
                                                    _SPACING))
    binary = result.modes[Mode.BINARY]
    kaktovik = result.modes[Mode.KAKTOVIK]
    cistercian = result.modes[Mode.CISTERCIAN]
    # All above the anchor, binary nearest and the compound glyph farthest.
    self.assertLess(cistercian.y, kaktovik.y)
    self.assertLess(kaktovik.y, binary.y)
    self.assertLess(binary.y, _ANCHOR.y)
    self.assertAlmostEqual(binary.offset_y, -50.)
    self.assertAlmostEqual(kaktovik.offset_y, -95.)
    self.assertAlmostEqual(cistercian.offset_y, -157.5)
    for rendered in result.modes.values():
      self.assertEqual(rendered.x, _ANCHOR.x)
      self.assertEqual(rendered.offset_x, 0.)
      self.assertAlmostEqual(rendered.y - _ANCHOR.y, rendered.offset_y)

  def test_all_modes(self) -> None:
    result = _render(4239, _ALL_MODES)
    self.assertTrue(result.converged)
    self.assertEmpty(overlap_resolver.find_overlaps(_components(result),
                                                    _SPACING))
    ys = {mode: result.modes[mode].y for mode in _ALL_MODES}
    self.assertEqual(max(ys, key=ys.get), Mode.BINARY)
    self.assertEqual(min(ys, key=ys.get), Mode.OBJECT_COUNTING)
    self.assertLess(ys[Mode.CISTERCIAN], ys[Mode.KAKTOVIK])

    counting = result.modes[Mode.OBJECT_COUNTING]
    self.assertAlmostEqual(counting.height, 540.)
    self.assertLen(counting.glyphs, 4 + 2 + 3 + 9)
    # Icons are laid out at the resolved position.
    self.assertAlmostEqual(counting.quantity.center_x, counting.x)
    self.assertAlmostEqual(counting.quantity.center_y, counting.y)
    centers = counting.quantity.all_icon_centers()
    self.assertEqual(centers.shape, (len(counting.glyphs), 2))
    half = quantity_grid.LayoutParams().icon_size / 2
    self.assertGreaterEqual(centers[:, 1].min() - half,
                            counting.y - counting.height / 2 - 1e-9)
    self.assertLessEqual(centers[:, 1].max() + half,
                         counting.y + counting.height / 2 + 1e-9)

  def test_glyphs_and_symbol_ids(self) -> None:
    result = _render(4239, _ALL_MODES)
    vocab = vocab_lib.build_symbol_vocab()
    self.assertEqual(
        list(result.modes[Mode.CISTERCIAN].glyphs),
        number_lib.encode_positional_compound(4239)
    )
    self.assertEqual(
        list(result.modes[Mode.KAKTOVIK].glyphs), number_lib.encode_base20(4239)
    )
    self.assertEqual(
        list(result.modes[Mode.BINARY].glyphs),
        number_lib.encode_binary_icons(4239)
    )
    for rendered in result.modes.values():
      self.assertEqual(
          vocab.decode(list(rendered.symbol_ids)), list(rendered.glyphs)
      )
    self.assertEqual(
        result.anchor_glyphs,
        ("decimal_4", "decimal_2", "decimal_3", "decimal_9")
    )

  def test_default_vocab_is_built_once(self) -> None:
    _render(4239, _NUMERAL_MODES)
    misses = vocab_lib.default_symbol_vocab.cache_info().misses
    for number in (7, 512, 9999):
      _render(number, _ALL_MODES)
    self.assertEqual(
        vocab_lib.default_symbol_vocab.cache_info().misses, misses
    )

  def test_zero(self) -> None:
    result = _render(0, ["binary", "cistercian", "object_counting"])
    self.assertEqual(result.modes[Mode.BINARY].glyphs,
                     (number_lib.BINARY_ZERO_ICON,))
    self.assertEqual(result.modes[Mode.CISTERCIAN].glyphs,
                     (number_lib.CISTERCIAN_ZERO,))
    counting = result.modes[Mode.OBJECT_COUNTING]
    self.assertEmpty(counting.glyphs)
    self.assertEqual((counting.width, counting.height), (0., 0.))

  def test_counted_objects(self) -> None:
    result = _render(
        4239, [Mode.OBJECT_COUNTING], quantity_style=lib.COUNTED_OBJECTS
    )
    counting = result.modes[Mode.OBJECT_COUNTING]
    self.assertLen(counting.glyphs, 100)
    self.assertTrue(counting.quantity.overflow)
    self.assertEqual(counting.quantity.total, 4239)

  def test_responsive_sizes(self) -> None:
    result = _render(4239, [Mode.BINARY], viewport_size=(300., 300.))
    self.assertAlmostEqual(result.modes[Mode.BINARY].width, 13 * 18. * 0.5)
    self.assertAlmostEqual(result.anchor_width, 40.)

  def test_no_modes(self) -> None:
    result = _render(12, [])
    self.assertEmpty(result.modes)
    self.assertTrue(result.converged)

  def test_parse_modes(self) -> None:
    self.assertListEqual(
        lib.parse_modes(["object_counting", Mode.BINARY, "binary"]),
        [Mode.BINARY, Mode.OBJECT_COUNTING]
    )
    with self.assertRaises(ValueError):
      lib.parse_modes(["roman"])

  def test_invalid_input(self) -> None:
    with self.assertRaises(number_lib.NumberOutOfRangeError):
      _render(10_000, _NUMERAL_MODES)
    with self.assertRaises(number_lib.InvalidNumberError):
      _render(-1, _NUMERAL_MODES)
    with self.assertRaises(ValueError):
      _render(12, _NUMERAL_MODES, quantity_style="pyramid")

  def test_anchor_from_tap(self) -> None:
    grid = grid_coordinates.GridCoordinateMapper(3, 3, 600., 600.)
    self.assertEqual(
        lib.anchor_from_tap(grid, 310., 290.), grid_coordinates.Point(300., 300.)
    )
    self.assertIsNone(lib.anchor_from_tap(grid, 700., 290.))

  def test_result_to_dict(self) -> None:
    result = _render(4239, _ALL_MODES)
    json_data = json.loads(json.dumps(lib.result_to_dict(result)))
    self.assertEqual(json_data["number"], 4239)
    self.assertTrue(json_data["converged"])
    self.assertCountEqual(
        json_data["modes"].keys(),
        ["binary", "kaktovik", "cistercian", "object_counting"]
    )
    counting = json_data["modes"]["object_counting"]
    self.assertLen(counting["icon_centers"], len(counting["glyphs"]))
    self.assertLen(counting["icons"], len(counting["glyphs"]))
    self.assertNotIn("icon_centers", json_data["modes"]["binary"])


if __name__ == "__main__":
  absltest.main()
