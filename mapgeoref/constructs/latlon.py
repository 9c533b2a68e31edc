from __future__ import annotations

import math
from typing import NamedTuple


class LatLon(NamedTuple):
    """
    Represents a geographic position on the WGS84 ellipsoid.

    A LatLon is an immutable pair of decimal degrees. It is the value type of the
    geographic coordinate space of a georeferencing: geographic reference points,
    the input of forward projections and the output of inverse projections.

    Attributes:
        latitude: The latitude in decimal degrees (range: -90 to 90)
        longitude: The longitude in decimal degrees (range: -180 to 180)

    Examples:
        >>> from mapgeoref.constructs.latlon import LatLon
        >>> koblenz = LatLon(50.358944, 7.567778)
        >>> koblenz.longitude
        7.567778

        >>> # Degrees, minutes and seconds
        >>> koblenz = LatLon.from_dms((50, 21, 32.2), (7, 34, 4.0))
    """

    latitude: float = 0.0
    longitude: float = 0.0

    def __repr__(self):
        return f"LatLon(latitude={self.latitude}, longitude={self.longitude})"

    @classmethod
    def from_dms(cls, latitude: tuple, longitude: tuple) -> LatLon:
        """
        Create a position from degree/minute/second tuples.

        Each tuple may hold one to three values; missing minutes and seconds are
        taken as zero. The sign of the degrees applies to the whole value.

        Args:
            latitude: (degrees, minutes, seconds) of the latitude
            longitude: (degrees, minutes, seconds) of the longitude

        Returns:
            A new LatLon in decimal degrees
        """
        from mapgeoref.utils.geo import deg_from_dms

        return cls(deg_from_dms(*latitude), deg_from_dms(*longitude))

    def is_finite(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)

    def is_valid(self) -> bool:
        """Whether the position is finite and within the latitude/longitude ranges."""
        return (
            self.is_finite()
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )
