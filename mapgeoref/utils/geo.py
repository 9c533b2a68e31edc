from __future__ import annotations

from typing import Tuple

from mapgeoref.constructs.latlon import LatLon
from mapgeoref.utils.crs import WGS84_GEOD


def deg_from_dms(degrees: float, minutes: float = 0.0, seconds: float = 0.0) -> float:
    """
    Convert a degree/minute/second angle to decimal degrees.

    The sign of ``degrees`` is applied to the minutes and seconds as well, so
    that ``deg_from_dms(-3, 27, 6)`` is -3.4516...

    Args:
        degrees: The whole degrees (may be negative)
        minutes: The arc minutes
        seconds: The arc seconds

    Returns:
        The angle in decimal degrees

    Examples:
        >>> round(deg_from_dms(50, 21, 32.2), 6)
        50.358944
    """
    sign = -1.0 if degrees < 0 else 1.0
    return sign * (abs(degrees) + minutes / 60.0 + seconds / 3600.0)


def geodetic_inverse(first: LatLon, second: LatLon) -> Tuple[float, float]:
    """
    Solve the inverse geodesic problem on the WGS84 ellipsoid.

    Args:
        first: The start position
        second: The end position

    Returns:
        A tuple of (forward azimuth in degrees, distance in meters)
    """
    azimuth, _, distance = WGS84_GEOD.inv(
        first.longitude, first.latitude, second.longitude, second.latitude
    )
    return azimuth, distance


def geodetic_distance(first: LatLon, second: LatLon) -> float:
    """
    Calculate the geodesic distance between two geographic positions.

    This uses the WGS84 ellipsoid (pyproj's GeographicLib binding), not a
    spherical approximation.

    Args:
        first: The first position
        second: The second position

    Returns:
        The distance in meters

    Examples:
        >>> a = LatLon(50.0, 6.48)
        >>> b = LatLon(50.0, 6.49)
        >>> round(geodetic_distance(a, b))
        717
    """
    return geodetic_inverse(first, second)[1]
