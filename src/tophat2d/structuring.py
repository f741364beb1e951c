"""
Flat disk ("ball") structuring elements.

The element is stored as a tuple of integer (dx, dy) offsets so that the
morphology code can shift-and-reduce over it directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Tuple

import numpy as np

from .errors import InvalidParameter


Offset = Tuple[int, int]


def _disk_offsets(radius: int) -> Tuple[Offset, ...]:
    y, x = np.ogrid[-radius : radius + 1, -radius : radius + 1]
    mask = (x ** 2 + y ** 2) <= radius ** 2
    dys, dxs = np.nonzero(mask)
    return tuple((int(dx) - radius, int(dy) - radius) for dy, dx in zip(dys, dxs))


@dataclass(frozen=True)
class StructuringElement:
    """
    Disk of all offsets with dx² + dy² <= radius².

    Args:
        radius: Disk radius in pixels, must be >= 0
    """

    radius: int
    offsets: Tuple[Offset, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.radius, bool) or not isinstance(self.radius, (int, np.integer)):
            raise InvalidParameter(f"Radius must be an integer, got {self.radius!r}")
        if self.radius < 0:
            raise InvalidParameter(f"Radius must be >= 0, got {self.radius}")
        object.__setattr__(self, "radius", int(self.radius))
        object.__setattr__(self, "offsets", _disk_offsets(self.radius))

    @property
    def size(self) -> int:
        """Side length of the bounding square."""
        return 2 * self.radius + 1

    def mask(self) -> np.ndarray:
        """Return the element as a (size, size) uint8 array of 0 and 1."""
        element = np.zeros((self.size, self.size), dtype=np.uint8)
        for dx, dy in self.offsets:
            element[dy + self.radius, dx + self.radius] = 1
        return element

    def __iter__(self) -> Iterator[Offset]:
        return iter(self.offsets)

    def __len__(self) -> int:
        return len(self.offsets)


def ball(radius: int) -> StructuringElement:
    """Shorthand for ``StructuringElement(radius)``."""
    return StructuringElement(radius)
