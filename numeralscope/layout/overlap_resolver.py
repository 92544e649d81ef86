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

"""Collision resolution for numeral representations placed around an anchor.

Every representation is a rectangle anchored at its center. The anchor (the
main numeral, priority 0) never moves. The remaining rectangles are shuffled
vertically by a bounded number of pairwise relaxation passes. Whenever the
passes fail to separate everything, the rectangles are stacked above the
anchor, topmost rectangle first, which always succeeds.
"""

import dataclasses
from typing import Optional, Sequence

from absl import flags
from absl import logging
import numpy as np

_LAYOUT_MIN_SPACING = flags.DEFINE_float(
    "layout_min_spacing", 15.,
    "Minimum distance in pixels between two rendered representations."
)

_LAYOUT_MAX_ITERATIONS = flags.DEFINE_integer(
    "layout_max_iterations", 20,
    "Maximum number of relaxation passes before falling back to forced "
    "vertical stacking."
)

ANCHOR_PRIORITY = 0

# Extra distance added when pushing a component away from the anchor.
_ANCHOR_BUFFER = 5.

# Distance between the anchor's top edge and the first stacked component in
# the forced layout.
_FALLBACK_ANCHOR_CLEARANCE = 40.

# Overlaps smaller than this are treated as touching.
_EPSILON = 1e-6


@dataclasses.dataclass(frozen=True)
class BoundingBox:
  left: float
  top: float
  right: float
  bottom: float

  def padded(self, padding: float) -> "BoundingBox":
    return BoundingBox(
        self.left - padding, self.top - padding,
        self.right + padding, self.bottom + padding,
    )


@dataclasses.dataclass(frozen=True)
class LayoutComponent:
  """Rectangle of a single representation, anchored at its center."""

  id: str
  x: float
  y: float
  width: float
  height: float
  priority: int

  @property
  def is_anchor(self) -> bool:
    return self.priority == ANCHOR_PRIORITY

  def bounding_box(self) -> BoundingBox:
    left = self.x - self.width / 2
    top = self.y - self.height / 2
    return BoundingBox(left, top, left + self.width, top + self.height)

  def moved_to(self, y: float) -> "LayoutComponent":
    return dataclasses.replace(self, y=y)


@dataclasses.dataclass(frozen=True)
class ResolvedPosition:
  x: float
  y: float
  offset_x: float
  offset_y: float


@dataclasses.dataclass(frozen=True)
class Resolution:
  """Outcome of the overlap resolution.

  Attributes:
    anchor: The anchor component, unchanged.
    components: Non-anchor components at their resolved positions, in input
      order.
    iterations: Number of relaxation passes performed.
    converged: False if the passes hit the iteration cap with overlaps
      remaining and the forced layout was used instead.
  """

  anchor: LayoutComponent
  components: tuple[LayoutComponent, ...]
  iterations: int
  converged: bool

  def positions(self) -> dict[str, ResolvedPosition]:
    """Resolved centers and their offsets from the anchor center."""
    return {
        c.id: ResolvedPosition(
            x=c.x, y=c.y,
            offset_x=c.x - self.anchor.x,
            offset_y=c.y - self.anchor.y,
        ) for c in self.components
    }


def _boxes_array(
    components: Sequence[LayoutComponent], padding: float
) -> np.ndarray:
  """Padded boxes as `(N, 4)` array of `(left, top, right, bottom)`."""
  boxes = np.array(
      [[c.x - c.width / 2, c.y - c.height / 2,
        c.x + c.width / 2, c.y + c.height / 2] for c in components],
      dtype=np.float64,
  ).reshape(-1, 4)
  boxes[:, :2] -= padding
  boxes[:, 2:] += padding
  return boxes


def overlap_matrix(
    components: Sequence[LayoutComponent], min_spacing: float
) -> np.ndarray:
  """Pairwise `(N, N)` overlap matrix of the padded boxes (diagonal unset)."""
  boxes = _boxes_array(components, min_spacing / 2)
  left, top, right, bottom = (boxes[:, i] for i in range(4))
  overlap_x = (
      np.minimum(right[:, None], right[None, :])
      - np.maximum(left[:, None], left[None, :])
  ) > _EPSILON
  overlap_y = (
      np.minimum(bottom[:, None], bottom[None, :])
      - np.maximum(top[:, None], top[None, :])
  ) > _EPSILON
  result = overlap_x & overlap_y
  np.fill_diagonal(result, False)
  return result


def find_overlaps(
    components: Sequence[LayoutComponent], min_spacing: float
) -> list[tuple[str, str]]:
  """Returns IDs of all pairs of overlapping components."""
  if len(components) < 2:
    return []
  matrix = overlap_matrix(components, min_spacing)
  rows, cols = np.nonzero(np.triu(matrix))
  return [(components[i].id, components[j].id) for i, j in zip(rows, cols)]


class OverlapResolver:
  """Moves representations vertically until no two of them overlap."""

  def __init__(
      self,
      min_spacing: Optional[float] = None,
      max_iterations: Optional[int] = None,
  ):
    self._min_spacing = (
        _LAYOUT_MIN_SPACING.value if min_spacing is None else min_spacing
    )
    self._max_iterations = (
        _LAYOUT_MAX_ITERATIONS.value if max_iterations is None
        else max_iterations
    )
    if self._min_spacing < 0:
      raise ValueError(f"Negative spacing: {self._min_spacing}")
    if self._max_iterations < 0:
      raise ValueError(f"Negative iteration cap: {self._max_iterations}")

  @property
  def min_spacing(self) -> float:
    return self._min_spacing

  @property
  def max_iterations(self) -> int:
    return self._max_iterations

  def check_overlap(
      self, first: LayoutComponent, second: LayoutComponent
  ) -> bool:
    """Checks whether padded bounding boxes of two components intersect."""
    padding = self._min_spacing / 2
    box1 = first.bounding_box().padded(padding)
    box2 = second.bounding_box().padded(padding)
    overlap_x = min(box1.right, box2.right) - max(box1.left, box2.left)
    overlap_y = min(box1.bottom, box2.bottom) - max(box1.top, box2.top)
    return overlap_x > _EPSILON and overlap_y > _EPSILON

  def _move_away_from_anchor(
      self, component: LayoutComponent, anchor: LayoutComponent
  ) -> LayoutComponent:
    box = component.bounding_box()
    anchor_box = anchor.bounding_box()
    if component.y <= anchor.y:
      spacing = anchor_box.top - box.bottom
      if spacing < self._min_spacing:
        distance = self._min_spacing - spacing + _ANCHOR_BUFFER
        return component.moved_to(component.y - distance)
    else:
      spacing = box.top - anchor_box.bottom
      if spacing < self._min_spacing:
        distance = self._min_spacing - spacing + _ANCHOR_BUFFER
        return component.moved_to(component.y + distance)
    return component

  def _move_above(
      self, component: LayoutComponent, other: LayoutComponent
  ) -> LayoutComponent:
    """Moves component up so its bottom edge clears the other's top edge."""
    required_y = (
        other.bounding_box().top - component.height / 2 - self._min_spacing
    )
    if component.y > required_y:
      return component.moved_to(required_y)
    return component

  def _resolve_pair(
      self, first: LayoutComponent, second: LayoutComponent
  ) -> tuple[LayoutComponent, LayoutComponent]:
    """Moves one of the two overlapping components."""
    if first.is_anchor:
      return first, self._move_away_from_anchor(second, first)
    if second.is_anchor:
      return self._move_away_from_anchor(first, second), second

    # The component with the larger priority value gives way.
    if first.priority <= second.priority:
      return first, self._move_above(second, first)
    return self._move_above(first, second), second

  def _force_vertical_spacing(
      self,
      anchor: LayoutComponent,
      components: list[LayoutComponent],
  ) -> list[LayoutComponent]:
    """Stacks all components above the anchor, topmost component first."""
    order = sorted(range(len(components)), key=lambda i: components[i].y)
    result = list(components)
    clearance = max(_FALLBACK_ANCHOR_CLEARANCE, self._min_spacing)
    current_y = anchor.bounding_box().top - clearance
    # The relative order is reversed: the topmost component ends up right
    # above the anchor.
    for idx in order:
      component = components[idx]
      y = current_y - component.height / 2
      result[idx] = component.moved_to(y)
      current_y = y - component.height / 2 - self._min_spacing
    return result

  def resolve(
      self,
      anchor: LayoutComponent,
      components: Sequence[LayoutComponent],
  ) -> Resolution:
    """Resolves overlaps between the anchor and the candidate components.

    Args:
      anchor: Component of the main numeral. Must have priority 0.
      components: Candidate components with positive priorities at their
        preferred initial positions.

    Returns:
      Resolution with the final component positions.
    """
    if not anchor.is_anchor:
      raise ValueError(f"Anchor `{anchor.id}` must have priority 0")
    ids = [anchor.id]
    for component in [anchor, *components]:
      if component.width < 0 or component.height < 0:
        raise ValueError(f"Negative size of component `{component.id}`")
    for component in components:
      if component.is_anchor:
        raise ValueError(f"Only the anchor may have priority 0: {component.id}")
      if component.id in ids:
        raise ValueError(f"Duplicate component ID: {component.id}")
      ids.append(component.id)

    # Index 0 is the anchor.
    state = [anchor, *components]
    order = sorted(range(len(state)), key=lambda i: state[i].priority)
    iterations = 0
    overlaps_found = True
    while overlaps_found and iterations < self._max_iterations:
      overlaps_found = False
      iterations += 1
      for a in range(len(order)):
        for b in range(a + 1, len(order)):
          i, j = order[a], order[b]
          if self.check_overlap(state[i], state[j]):
            overlaps_found = True
            state[i], state[j] = self._resolve_pair(state[i], state[j])

    resolved = state[1:]
    converged = not find_overlaps(state, self._min_spacing)
    if not converged:
      logging.warning(
          "Could not resolve all overlaps within %d iterations, forcing "
          "vertical spacing.", self._max_iterations,
      )
      resolved = self._force_vertical_spacing(anchor, resolved)
    else:
      logging.debug("Resolved %d components in %d iterations.",
                    len(resolved), iterations)
    return Resolution(
        anchor=anchor,
        components=tuple(resolved),
        iterations=iterations,
        converged=converged,
    )
