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

"""Estimated on-screen sizes of encoded numerals.

The estimates are only used for collision sizing before anything is drawn, the
renderer measures the actual glyphs itself.
"""

import dataclasses

from numeralscope.glyphs import numbers_to_glyphs as number_lib

# Sizes in pixels at scale 1.0.
MAIN_DIGIT_WIDTH = 20.
MAIN_MIN_WIDTH = 40.
MAIN_HEIGHT = 40.
BINARY_ICON_WIDTH = 18.
BINARY_HEIGHT = 25.
BASE20_GLYPH_WIDTH = 30.
BASE20_HEIGHT = 35.
COMPOUND_WIDTH = 50.
COMPOUND_HEIGHT = 60.

# Viewport size at which text renders at scale 1.0.
_REFERENCE_DIMENSION = 600.
_MIN_SCALE = 0.4
_MAX_SCALE = 1.2


@dataclasses.dataclass(frozen=True)
class Footprint:
  width: float
  height: float


def responsive_scale(viewport_width: float, viewport_height: float) -> float:
  """Returns text scaling factor for the given viewport."""
  min_dimension = min(viewport_width, viewport_height)
  return max(_MIN_SCALE, min(_MAX_SCALE, min_dimension / _REFERENCE_DIMENSION))


def main_number_footprint(
    number: number_lib.Number, scale: float = 1.
) -> Footprint:
  num_digits = len(number_lib.encode_decimal(number))
  width = max(MAIN_MIN_WIDTH, num_digits * MAIN_DIGIT_WIDTH)
  return Footprint(width * scale, MAIN_HEIGHT * scale)


def binary_footprint(glyphs: list[str], scale: float = 1.) -> Footprint:
  return Footprint(
      len(glyphs) * BINARY_ICON_WIDTH * scale, BINARY_HEIGHT * scale
  )


def base20_footprint(glyphs: list[str], scale: float = 1.) -> Footprint:
  return Footprint(
      len(glyphs) * BASE20_GLYPH_WIDTH * scale, BASE20_HEIGHT * scale
  )


def compound_footprint(scale: float = 1.) -> Footprint:
  """All strokes share a single glyph frame, so the size is fixed."""
  return Footprint(COMPOUND_WIDTH * scale, COMPOUND_HEIGHT * scale)
