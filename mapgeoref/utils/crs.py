"""Coordinate Reference System (CRS) constants used throughout mapgeoref.

This module defines the reference objects that every georeferencing relies on:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326), the geographic space
- WGS84_GEOD: the WGS84 ellipsoid, used for geodesic distances
"""

from pyproj import CRS, Geod

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Geographic reference points are always expressed in this system
# Range: latitude [-90, 90], longitude [-180, 180]
LATLON_CRS = CRS(4326)

# WGS84 ellipsoid (a = 6378137 m, f = 1/298.257223563)
WGS84_GEOD = Geod(ellps="WGS84")
