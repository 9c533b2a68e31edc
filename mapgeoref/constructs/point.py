from __future__ import annotations

import math
from typing import List, NamedTuple, Sequence


class PointF(NamedTuple):
    """
    Represents a point in a planar coordinate space.

    PointF is used for both planar spaces of a georeferencing: map coordinates
    (drawing units, y pointing down) and projected coordinates (CRS units,
    typically meters, easting/northing).

    Attributes:
        x: The x-coordinate (map x or easting)
        y: The y-coordinate (map y or northing)

    Examples:
        >>> from mapgeoref.constructs.point import PointF
        >>> ref = PointF(398125.0, 5579523.0)
        >>> east = ref.offset(500.0, 0.0)
        >>> ref.distance_to(east)
        500.0
    """

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> PointF:
        return PointF(self.x + dx, self.y + dy)

    def distance_to(self, other: Sequence[float]) -> float:
        return math.hypot(other[0] - self.x, other[1] - self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_list(self) -> List[float]:
        return [self.x, self.y]

    @classmethod
    def from_list(cls, values: Sequence[float]) -> PointF:
        """
        Create a point from an [x, y] sequence, as stored in documents.

        Raises:
            ValueError: If the sequence does not hold exactly two values
        """
        if len(values) != 2:
            raise ValueError(f"expected [x, y] but found {list(values)}")
        return cls(float(values[0]), float(values[1]))
