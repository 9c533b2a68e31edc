"""Convergence and grid scale factor of a projection at a reference point.

Both quantities are estimated by finite differences through the transform
itself, so they work for any CRS the engine accepts:

- convergence: a short geodesic along the meridian through the reference point
  is projected, and the bearing of its image in the grid gives the angle between
  grid north and true north;
- grid scale factor: two grid baselines along the diagonals through the
  projected reference point are converted back to geographic coordinates, and
  their grid lengths are compared with the WGS84 geodesic lengths.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

from mapgeoref.constructs.latlon import LatLon
from mapgeoref.constructs.point import PointF
from mapgeoref.transform.proj_transform import ProjTransform, TransformError
from mapgeoref.utils.crs import WGS84_GEOD
from mapgeoref.utils.geo import geodetic_distance

log = logging.getLogger(__name__)

# half length, in meters, of the meridian segment used for the convergence
CONVERGENCE_HALF_BASELINE = 500.0

# length, in meters, of each diagonal baseline used for the grid scale factor
SCALE_FACTOR_BASELINE = 1000.0


class GridCompensation(NamedTuple):
    """
    The projection's local distortion at a point.

    Attributes:
        convergence: The true bearing of grid north, in degrees (the angle from
            true north to grid north, positive clockwise)
        grid_scale_factor: The ratio of grid distance to geodesic distance
    """

    convergence: float = 0.0
    grid_scale_factor: float = 1.0


def meridian_convergence(transform: ProjTransform, latlon: LatLon) -> float:
    """
    Estimate the convergence at a geographic position.

    Args:
        transform: The transform of the projected CRS
        latlon: The position

    Returns:
        The convergence in degrees

    Raises:
        TransformError: If the sample points cannot be projected
    """
    lon_n, lat_n, _ = WGS84_GEOD.fwd(
        latlon.longitude, latlon.latitude, 0.0, CONVERGENCE_HALF_BASELINE
    )
    lon_s, lat_s, _ = WGS84_GEOD.fwd(
        latlon.longitude, latlon.latitude, 180.0, CONVERGENCE_HALF_BASELINE
    )
    north = transform.forward(LatLon(lat_n, lon_n))
    south = transform.forward(LatLon(lat_s, lon_s))

    # grid bearing of true north is atan2(dx, dy); convergence is its negative
    return -math.degrees(math.atan2(north.x - south.x, north.y - south.y))


def grid_scale_factor(transform: ProjTransform, projected: PointF) -> float:
    """
    Estimate the grid scale factor around a projected point.

    Args:
        transform: The transform of the projected CRS
        projected: The point, in projected coordinates

    Returns:
        The mean ratio of grid distance to geodesic distance along both diagonals

    Raises:
        TransformError: If the CRS has no linear unit, or the sample points cannot
            be converted
    """
    unit = transform.linear_unit_factor()
    if not unit:
        raise TransformError(f"{transform.crs.name} has no linear unit")

    half = SCALE_FACTOR_BASELINE / 2.0 / math.sqrt(2.0) / unit
    ratios = []
    for sx, sy in ((1.0, 1.0), (-1.0, 1.0)):
        first = transform.inverse(projected.offset(-sx * half, -sy * half))
        second = transform.inverse(projected.offset(sx * half, sy * half))
        distance = geodetic_distance(first, second)
        if not (math.isfinite(distance) and distance > 0.0):
            raise TransformError(f"degenerate transform near {projected}")
        ratios.append(SCALE_FACTOR_BASELINE / distance)

    return sum(ratios) / len(ratios)


def compute_grid_compensation(
    transform: ProjTransform, latlon: LatLon, projected: PointF
) -> GridCompensation:
    """
    Compute convergence and grid scale factor at a reference point.

    CRSs without linear axes (e.g. geographic CRSs) have no meaningful grid
    distortion; for these, the neutral compensation is returned.

    Args:
        transform: The transform of the projected CRS
        latlon: The reference point in geographic coordinates
        projected: The same point in projected coordinates

    Returns:
        The grid compensation at the point

    Raises:
        TransformError: If the neighborhood of the point cannot be transformed
    """
    if transform.linear_unit_factor() is None:
        log.debug(f"{transform.crs.name} is not a projected CRS; no grid compensation")
        return GridCompensation()

    compensation = GridCompensation(
        convergence=meridian_convergence(transform, latlon),
        grid_scale_factor=grid_scale_factor(transform, projected),
    )
    log.debug(f"grid compensation at {latlon}: {compensation}")
    return compensation
