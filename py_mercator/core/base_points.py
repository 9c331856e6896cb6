"""Sparse storage of the control points that drive terrain shape."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class BasePoint:
    """Height and shape character of one lattice vertex."""

    height: float = 8.0
    roughness: float = 1.25
    falloff: float = 0.25


class BasePointGrid:
    """
    Control points keyed by integer lattice column and row.

    Storage is a column -> (row -> BasePoint) mapping that only ever grows;
    writing an existing vertex overwrites it.
    """

    def __init__(self):
        self._points: Dict[int, Dict[int, BasePoint]] = {}
        self._count = 0

    def set(self, x: int, z: int, point: BasePoint) -> None:
        column = self._points.setdefault(x, {})
        if z not in column:
            self._count += 1
        column[z] = point

    def get(self, x: int, z: int) -> Optional[BasePoint]:
        column = self._points.get(x)
        if column is None:
            return None
        return column.get(z)

    def corners_present(self, i: int, j: int) -> Tuple[bool, List[List[Optional[BasePoint]]]]:
        """
        Fetch the four corners of segment slot (i, j).

        Returns:
            ``(complete, corners)`` where ``corners[k][l]`` is the point at
            lattice ``(i + k, j + l)`` or None when unset
        """
        corners = [[self.get(i + k, j + l) for l in range(2)] for k in range(2)]
        complete = all(p is not None for row in corners for p in row)
        return complete, corners

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return self.get(*key) is not None

    def __len__(self) -> int:
        return self._count

    def items(self):
        """Yield ``((x, z), point)`` for every stored control point."""
        for x, column in self._points.items():
            for z, point in column.items():
                yield (x, z), point
