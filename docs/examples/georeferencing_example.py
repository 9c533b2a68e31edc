"""
# Georeferencing Example

An example of tying a map's drawing coordinates to a projected coordinate reference system and to geographic coordinates
"""


def main():
    """
    First, we build a georeferencing.
    Without a coordinate reference system, a new georeferencing is "local": it only knows the map scale and how map coordinates relate to a planar projected space.
    """

    from mapgeoref.georeferencing import Georeferencing

    georef = Georeferencing()
    georef.set_scale_denominator(10000)

    print(georef.is_local())

    """
    Map coordinates are drawing units (1/1000 of a meter at a scale of 1:1) with y pointing down.
    At 1:10000, one map unit corresponds to 10 meters in the projected space.

    Now, let's pick a coordinate reference system.
    The simplest way is to use one of the built-in templates. Each template takes a few parameter values, here the UTM zone:
    """

    from mapgeoref.registry.crs_template_registry import default_registry, utm_zone_for
    from mapgeoref.constructs.latlon import LatLon

    koblenz = LatLon.from_dms((50, 21, 32.2), (7, 34, 4.0))
    zone = utm_zone_for(koblenz)

    print(default_registry().ids())

    georef.set_projected_crs_from_template("UTM", [zone])

    print(georef.projected_crs_spec)
    print(georef.projected_coordinates_name())

    """
    Any specification string pyproj understands works too, for example `georef.set_projected_crs("EPSG", "EPSG:25832", ["25832"])`.
    If the specification is rejected, the georeferencing becomes invalid and the reason is available from `error_text()`.

    Next, we anchor the map: a point on the map and its geographic position.
    Setting the geographic reference point also computes the grid convergence and the grid scale factor at that point:
    """

    from mapgeoref.constructs.point import PointF

    georef.set_map_ref_point(PointF(0.0, 0.0))
    georef.set_geographic_ref_point(koblenz)

    print(georef.projected_ref_point)
    print(georef.convergence, georef.combined_scale_factor)

    """
    Most maps are aligned to magnetic north. Setting the declination rotates the map by the grivation, which is declination minus convergence:
    """

    georef.set_declination(2.5)

    print(georef.grivation)

    """
    With that, we can convert points between all three coordinate spaces.
    Conversions involving geographic coordinates return a flag, since the projection may not be able to convert every point:
    """

    map_point, ok = georef.geographic_to_map(LatLon(50.36, 7.57))
    latlon, ok = georef.map_to_geographic(map_point)

    print(map_point, latlon, ok)

    """
    Whole geometries can be converted with shapely:
    """

    from shapely.geometry import LineString

    from mapgeoref.georeferencing import CoordinateSpace

    course_leg = LineString([(0.0, 0.0), (120.0, -80.0), (250.0, -40.0)])
    leg_lonlat = georef.transform_geometry(
        course_leg, CoordinateSpace.MAP, CoordinateSpace.GEOGRAPHIC
    )

    print(leg_lonlat.wkt)

    """
    Lastly, we can store the georeferencing as plain fields and load it again:
    """

    s = georef.to_json()
    loaded = Georeferencing.from_json(s)

    print(loaded == georef)


if __name__ == "__main__":
    main()
