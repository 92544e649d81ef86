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

from absl.testing import absltest
from absl.testing import parameterized
from numeralscope.layout import grid_coordinates as lib


class GridCoordinateMapperTest(parameterized.TestCase):

  def test_center_cell(self) -> None:
    grid = lib.GridCoordinateMapper(3, 3, 600., 600.)
    position = grid.get_cell_position(1, 1)
    self.assertAlmostEqual(position.x, 300.)
    self.assertAlmostEqual(position.y, 300.)
    self.assertEqual(grid.get_grid_cell(300., 300.), lib.CellCoord(1, 1))

  def test_dimensions_with_padding(self) -> None:
    grid = lib.GridCoordinateMapper(2, 4, 830., 410., cell_padding=10.)
    self.assertAlmostEqual(grid.cell_width, (830. - 30.) / 4)
    self.assertAlmostEqual(grid.cell_height, (410. - 10.) / 2)
    self.assertAlmostEqual(grid.actual_grid_width, 830.)
    self.assertAlmostEqual(grid.actual_grid_height, 410.)
    self.assertAlmostEqual(grid.offset_x, 0.)
    self.assertAlmostEqual(grid.offset_y, 0.)
    position = grid.get_cell_position(1, 2)
    self.assertAlmostEqual(position.x, 2 * 210. + 100.)
    self.assertAlmostEqual(position.y, 210. + 100.)

  def test_negative_cell_size_is_clamped(self) -> None:
    grid = lib.GridCoordinateMapper(3, 3, 10., 10., cell_padding=20.)
    self.assertEqual(grid.cell_width, 0.)
    self.assertEqual(grid.cell_height, 0.)
    # Padding alone exceeds the viewport, the grid is centered regardless.
    self.assertAlmostEqual(grid.actual_grid_width, 40.)
    self.assertAlmostEqual(grid.offset_x, -15.)

  @parameterized.parameters(
      (3, 3, 600., 600., 0.),
      (4, 7, 1024., 768., 12.),
      (1, 1, 320., 200., 5.),
      (10, 10, 999., 777., 3.),
  )
  def test_round_trip(
      self, rows: int, cols: int, width: float, height: float, padding: float
  ) -> None:
    grid = lib.GridCoordinateMapper(rows, cols, width, height, padding)
    for row in range(rows):
      for col in range(cols):
        position = grid.get_cell_position(row, col)
        self.assertIsNotNone(position)
        self.assertEqual(
            grid.get_grid_cell(position.x, position.y), lib.CellCoord(row, col)
        )

  @parameterized.parameters(
      (-1, 0), (0, -1), (3, 0), (0, 3), (1.5, 1), (1, 0.5), (True, 1),
      ("1", 1), (None, 0),
  )
  def test_invalid_cells(self, row, col) -> None:
    grid = lib.GridCoordinateMapper(3, 3, 600., 600.)
    self.assertFalse(grid.is_valid_cell(row, col))
    self.assertIsNone(grid.get_cell_position(row, col))
    with self.assertRaises(lib.InvalidCellError):
      grid.require_cell_position(row, col)

  def test_integral_floats_are_valid(self) -> None:
    grid = lib.GridCoordinateMapper(3, 3, 600., 600.)
    self.assertTrue(grid.is_valid_cell(2.0, 0))
    self.assertEqual(grid.get_cell_position(2.0, 0), lib.Point(100., 500.))
    self.assertEqual(grid.require_cell_position(0, 0), lib.Point(100., 100.))

  def test_points_outside_grid(self) -> None:
    grid = lib.GridCoordinateMapper(2, 2, 400., 200., cell_padding=0.)
    self.assertIsNone(grid.get_grid_cell(-0.1, 50.))
    self.assertIsNone(grid.get_grid_cell(50., 200.1))
    self.assertIsNone(grid.get_grid_cell(401., 10.))
    # The far edge is inside the drawn area, but maps past the last cell.
    self.assertIsNone(grid.get_grid_cell(400., 100.))
    self.assertEqual(grid.get_grid_cell(0., 0.), lib.CellCoord(0, 0))
    self.assertEqual(grid.get_grid_cell(399.9, 199.9), lib.CellCoord(1, 1))

  @parameterized.parameters(
      (float("nan"), 100.), (100., float("nan")), (float("inf"), 100.),
      (100., float("-inf")),
  )
  def test_non_finite_points(self, x: float, y: float) -> None:
    grid = lib.GridCoordinateMapper(2, 2, 400., 200.)
    self.assertIsNone(grid.get_grid_cell(x, y))

  def test_gutter_maps_to_preceding_cell(self) -> None:
    grid = lib.GridCoordinateMapper(1, 2, 210., 100., cell_padding=10.)
    self.assertAlmostEqual(grid.cell_width, 100.)
    # The gutter spans [100, 110).
    self.assertEqual(grid.get_grid_cell(105., 50.), lib.CellCoord(0, 0))
    self.assertEqual(grid.get_grid_cell(110., 50.), lib.CellCoord(0, 1))

  def test_update_dimensions(self) -> None:
    grid = lib.GridCoordinateMapper(3, 3, 600., 600.)
    grid.update_dimensions(900., 300.)
    self.assertAlmostEqual(grid.cell_width, 300.)
    self.assertAlmostEqual(grid.cell_height, 100.)
    self.assertEqual(grid.get_cell_position(1, 1), lib.Point(450., 150.))
    grid.set_padding(30.)
    self.assertAlmostEqual(grid.cell_width, 280.)
    self.assertAlmostEqual(grid.cell_height, 80.)
    self.assertEqual(grid.get_grid_cell(450., 150.), lib.CellCoord(1, 1))

  def test_invalid_construction(self) -> None:
    with self.assertRaises(ValueError):
      lib.GridCoordinateMapper(0, 3, 600., 600.)
    with self.assertRaises(ValueError):
      lib.GridCoordinateMapper(3, 2.5, 600., 600.)
    with self.assertRaises(ValueError):
      lib.GridCoordinateMapper(3, 3, 600., 600., cell_padding=-1.)
    grid = lib.GridCoordinateMapper(3, 3, 600., 600.)
    with self.assertRaises(ValueError):
      grid.set_padding(-2.)


if __name__ == "__main__":
  absltest.main()
