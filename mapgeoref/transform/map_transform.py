from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from mapgeoref.constructs.point import PointF


class MapTransform(NamedTuple):
    """
    The affine relationship between map coordinates and projected coordinates.

    Map coordinates are drawing units with y pointing down; projected coordinates
    are CRS units with y pointing north. The map's "up" direction points to the
    grid bearing given by the grivation, and one map unit covers ``scale``
    projected units.

    The transform is purely algebraic: it never calls the transformation engine
    and cannot fail.

    Attributes:
        to_projected: The 3x3 homogeneous matrix from map to projected coordinates
        to_map: Its inverse
    """

    to_projected: np.ndarray
    to_map: np.ndarray

    @classmethod
    def build(
        cls,
        map_ref_point: PointF,
        projected_ref_point: PointF,
        grivation: float,
        scale: float,
    ) -> MapTransform:
        """
        Build the transform from the reference point pair, rotation and scale.

        Args:
            map_ref_point: The anchor point in map coordinates
            projected_ref_point: The same anchor in projected coordinates
            grivation: The grid bearing of the map's up direction, in degrees
            scale: Projected units per map unit; must be positive

        Returns:
            A new MapTransform

        Raises:
            ValueError: If the scale is not a positive finite number
        """
        if not (math.isfinite(scale) and scale > 0.0):
            raise ValueError(f"map scale must be positive but found {scale}")

        g = math.radians(grivation)
        cos_g = math.cos(g)
        sin_g = math.sin(g)

        # columns: images of map +x (grid bearing g + 90) and map +y (bearing g + 180)
        rotate_scale = np.array(
            [
                [scale * cos_g, -scale * sin_g, 0.0],
                [-scale * sin_g, -scale * cos_g, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )
        from_map_ref = np.array(
            [
                [1.0, 0.0, -map_ref_point.x],
                [0.0, 1.0, -map_ref_point.y],
                [0.0, 0.0, 1.0],
            ]
        )
        to_projected_ref = np.array(
            [
                [1.0, 0.0, projected_ref_point.x],
                [0.0, 1.0, projected_ref_point.y],
                [0.0, 0.0, 1.0],
            ]
        )

        to_projected = to_projected_ref @ rotate_scale @ from_map_ref
        return cls(to_projected, np.linalg.inv(to_projected))

    @staticmethod
    def _apply(matrix: np.ndarray, point: PointF) -> PointF:
        x, y, _ = matrix @ np.array([point.x, point.y, 1.0])
        return PointF(float(x), float(y))

    @staticmethod
    def _apply_array(matrix: np.ndarray, points) -> np.ndarray:
        points = np.asarray(points, dtype=float)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"expected an (n, 2) array of points but found shape {points.shape}")
        return points @ matrix[:2, :2].T + matrix[:2, 2]

    def map_to_projected(self, point: PointF) -> PointF:
        return self._apply(self.to_projected, point)

    def projected_to_map(self, point: PointF) -> PointF:
        return self._apply(self.to_map, point)

    def map_to_projected_array(self, points) -> np.ndarray:
        """Transform an (n, 2) array of map coordinates to projected coordinates."""
        return self._apply_array(self.to_projected, points)

    def projected_to_map_array(self, points) -> np.ndarray:
        """Transform an (n, 2) array of projected coordinates to map coordinates."""
        return self._apply_array(self.to_map, points)
