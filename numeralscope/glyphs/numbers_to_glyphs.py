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

"""Produces various glyph representations of numerals.

All encoders return sequences of symbol names. Symbol names are resolved to
integer IDs by `symbol_vocab` and to drawable glyphs by the rendering backend.
"""

import dataclasses
import numbers
from typing import Optional, Union

# Largest number accepted by the place-value based representations.
MAX_NUMBER = 9999

# Positions of the decimal digits, least significant first.
PLACES = ("ones", "tens", "hundreds", "thousands")

# Compound glyph positions. The units stroke is always present, the remaining
# positions are overlaid on the same glyph frame only when non-zero.
COMPOUND_POSITIONS = ("units", "tens", "hundreds", "thousands")

# Special symbol for the compound glyph of zero (a bare stave).
CISTERCIAN_ZERO = "cistercian_zero"

# Per-position `digit -> symbol` tables for the compound glyph.
CISTERCIAN_SYMBOLS = {
    position: {digit: f"cistercian_{position}_{digit}" for digit in range(10)}
    for position in COMPOUND_POSITIONS
}

BASE20_RADIX = 20
KAKTOVIK_SYMBOLS = tuple(f"kaktovik_{digit}" for digit in range(BASE20_RADIX))

BINARY_ONE_ICON = "heart_red"
BINARY_ZERO_ICON = "heart_white"

DECIMAL_SYMBOLS = tuple(f"decimal_{digit}" for digit in range(10))

# One icon type per place value.
PLACE_VALUE_ICONS = {
    "ones": "apple",
    "tens": "shopping_bag",
    "hundreds": "box",
    "thousands": "truck",
}

Number = Union[int, float]


class InvalidNumberError(ValueError):
  """Negative, non-integer or non-numeric input to an encoder."""


class NumberOutOfRangeError(ValueError):
  """Number exceeds the range supported by a representation."""


@dataclasses.dataclass(frozen=True)
class PlaceValues:
  """Decimal place-value decomposition of a number in [0, 9999]."""

  thousands: int = 0
  hundreds: int = 0
  tens: int = 0
  ones: int = 0

  def count(self, place: str) -> int:
    if place not in PLACES:
      raise ValueError(f"Unknown place value: {place}")
    return getattr(self, place)

  def value(self) -> int:
    return (
        self.thousands * 1000 + self.hundreds * 100 + self.tens * 10 + self.ones
    )

  def nonzero_places(self) -> list[str]:
    """Returns places with non-zero counts, highest place value first."""
    return [place for place in reversed(PLACES) if self.count(place) > 0]


def validate_number(number: Number, max_value: Optional[int] = None) -> int:
  """Checks the number and returns it as a Python integer.

  Args:
    number: Number to check. Floats are accepted if they hold integral values.
    max_value: Optional inclusive upper bound.

  Returns:
    Validated integer.

  Raises:
    InvalidNumberError: If the number is negative or not an integer.
    NumberOutOfRangeError: If the number exceeds `max_value`.
  """
  if isinstance(number, bool) or not isinstance(number, numbers.Real):
    raise InvalidNumberError(f"Not a number: {number!r}")
  if not isinstance(number, numbers.Integral):
    if not float(number).is_integer():
      raise InvalidNumberError(f"Not an integer: {number}")
  value = int(number)
  if value < 0:
    raise InvalidNumberError(f"Negative number: {value}")
  if max_value is not None and value > max_value:
    raise NumberOutOfRangeError(
        f"Number {value} is out of range [0, {max_value}]"
    )
  return value


def decompose_place_values(number: Number) -> PlaceValues:
  """Splits the number into thousands, hundreds, tens and ones."""
  n = validate_number(number, max_value=MAX_NUMBER)
  return PlaceValues(
      thousands=n // 1000,
      hundreds=(n % 1000) // 100,
      tens=(n % 100) // 10,
      ones=n % 10,
  )


def encode_decimal(number: Number) -> list[str]:
  """Encodes the number as its decimal digit symbols."""
  n = validate_number(number)
  return [DECIMAL_SYMBOLS[int(digit)] for digit in str(n)]


def encode_positional_compound(number: Number) -> list[str]:
  """Converts number to the symbols of a Cistercian compound glyph.

  The symbols are ordered from the least to the most significant position,
  which is the order in which the strokes have to be overlaid. The units symbol
  is always emitted, even for a zero digit, the other positions are omitted
  when zero.

  Args:
    number: Integer in [0, 9999].

  Returns:
    List of symbol names.
  """
  places = decompose_place_values(number)
  if places.value() == 0:
    return [CISTERCIAN_ZERO]

  symbols = [CISTERCIAN_SYMBOLS["units"][places.ones]]
  for position, digit in (
      ("tens", places.tens),
      ("hundreds", places.hundreds),
      ("thousands", places.thousands),
  ):
    if digit > 0:
      symbols.append(CISTERCIAN_SYMBOLS[position][digit])
  return symbols


def base20_digits(number: Number) -> list[int]:
  """Converts number to base-20 digits, most significant first."""
  r = validate_number(number)
  if r == 0:
    return [0]
  digits = []
  while r > 0:
    digits.append(r % BASE20_RADIX)
    r //= BASE20_RADIX
  return digits[::-1]


def encode_base20(number: Number) -> list[str]:
  """Converts number to a sequence of Kaktovik glyph names."""
  return [KAKTOVIK_SYMBOLS[digit] for digit in base20_digits(number)]


def decode_base20(glyphs: list[str]) -> int:
  """Reads a sequence of Kaktovik glyph names back as an integer."""
  if not glyphs:
    raise ValueError("Empty glyph sequence!")
  value = 0
  for glyph in glyphs:
    if glyph not in KAKTOVIK_SYMBOLS:
      raise ValueError(f"Unknown base-20 glyph: {glyph}")
    value = value * BASE20_RADIX + KAKTOVIK_SYMBOLS.index(glyph)
  return value


def binary_string(number: Number) -> str:
  n = validate_number(number)
  return format(n, "b")


def encode_binary_icons(number: Number) -> list[str]:
  """Converts number to binary, one icon per bit."""
  return [
      BINARY_ONE_ICON if bit == "1" else BINARY_ZERO_ICON
      for bit in binary_string(number)
  ]


def decode_binary_icons(icons: list[str]) -> int:
  """Reads a sequence of binary icons back as an integer."""
  if not icons:
    raise ValueError("Empty icon sequence!")
  bits = []
  for icon in icons:
    if icon == BINARY_ONE_ICON:
      bits.append("1")
    elif icon == BINARY_ZERO_ICON:
      bits.append("0")
    else:
      raise ValueError(f"Unknown binary icon: {icon}")
  return int("".join(bits), 2)
