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

"""Pytest fixture for reading flag-configured layout defaults in tests."""

import sys

from absl import flags
import pytest


@pytest.fixture(scope='session', autouse=True)
def parse_flags() -> None:
  # Only pass the program name, pytest flags are not absl flags. The layout
  # modules read their defaults from flags, which must be parsed first.
  if not flags.FLAGS.is_parsed():
    flags.FLAGS(sys.argv[:1])
