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

"""Symbol vocabulary shared between the encoders and the renderer."""

import dataclasses
import functools
from typing import Optional

from absl import logging
from numeralscope.glyphs import numbers_to_glyphs as number_lib

# Special symbol IDs.
SYMBOL_PAD = 0
SYMBOL_UNK = 1

# First code point of the Kaktovik numerals block (digit zero).
KAKTOVIK_BASE_CODE_POINT = 0x1D2C0


def special_symbol_names() -> list[str]:
  return ["<pad>", "</unk>"]


def all_symbol_names() -> list[str]:
  """Returns every symbol the encoders can produce in a stable order."""
  names = [*number_lib.DECIMAL_SYMBOLS, number_lib.CISTERCIAN_ZERO]
  for position in number_lib.COMPOUND_POSITIONS:
    names.extend(
        number_lib.CISTERCIAN_SYMBOLS[position][digit] for digit in range(10)
    )
  names.extend(number_lib.KAKTOVIK_SYMBOLS)
  names.extend([number_lib.BINARY_ZERO_ICON, number_lib.BINARY_ONE_ICON])
  names.extend(
      number_lib.PLACE_VALUE_ICONS[place] for place in number_lib.PLACES
  )
  return names


def kaktovik_code_point(digit: int) -> int:
  """Returns Unicode code point of the Kaktovik numeral for `digit`."""
  if not 0 <= digit < number_lib.BASE20_RADIX:
    raise ValueError(f"Invalid base-20 digit: {digit}")
  return KAKTOVIK_BASE_CODE_POINT + digit


@dataclasses.dataclass
class SymbolVocab:
  """One-to-one mapping between symbol names and integer IDs."""

  vocab: Optional[dict[str, int]] = None
  _symbol_names: Optional[list[str]] = None

  def init(self) -> None:
    """Builds the vocabulary."""
    self._symbol_names = special_symbol_names()
    for name in all_symbol_names():
      if name in self._symbol_names:
        raise ValueError(f"Duplicate symbol name: {name}")
      self._symbol_names.append(name)
    self.vocab = {name: idx for idx, name in enumerate(self._symbol_names)}
    logging.info("Initialized symbol vocab with %d entries.", len(self.vocab))

  def encode(self, names: list[str]) -> list[int]:
    """Converts a list of symbol names to a list of integer IDs."""
    if not self.vocab:
      raise ValueError("Vocabulary is empty!")
    ids = []
    for name in names:
      if name not in self.vocab:
        raise ValueError(f"Symbol {name} not found in the vocabulary!")
      ids.append(self.vocab[name])
    return ids

  def decode(self, symbol_ids: list[int]) -> list[str]:
    """Converts list of symbol IDs to list of symbol names."""
    return [self.id_to_name(idx) for idx in symbol_ids]

  def __len__(self):
    return len(self.vocab) if self.vocab is not None else 0

  def id_to_name(self, idx: int) -> str:
    if not self._symbol_names:
      raise ValueError("Vocabulary is empty!")
    if idx < 0 or idx >= len(self._symbol_names):
      raise ValueError(f"Invalid symbol ID {idx}!")
    return self._symbol_names[idx]

  def name_to_id(self, name: str) -> int:
    if not self.vocab:
      raise ValueError("Vocabulary is empty!")
    if name not in self.vocab:
      raise ValueError(f"Symbol {name} not found in the vocabulary!")
    return self.vocab[name]


def build_symbol_vocab() -> SymbolVocab:
  vocab = SymbolVocab()
  vocab.init()
  return vocab


@functools.lru_cache(maxsize=None)
def default_symbol_vocab() -> SymbolVocab:
  """Returns the vocabulary built once and shared between renders."""
  return build_symbol_vocab()
