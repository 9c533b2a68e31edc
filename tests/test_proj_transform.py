import os
import tempfile
from unittest import TestCase
from unittest.mock import Mock, patch

from mapgeoref.constructs.latlon import LatLon
from mapgeoref.constructs.point import PointF
from mapgeoref.georeferencing import Georeferencing
from mapgeoref.transform.proj_transform import (
    BuildError,
    ProjTransform,
    TransformError,
    referenced_resources,
    set_resource_finder,
)

UTM32_SPEC = "+proj=utm +zone=32 +datum=WGS84"


class TestProjTransform(TestCase):
    def test_build_and_convert(self):
        transform = ProjTransform.build(UTM32_SPEC)

        self.assertTrue(transform.is_valid)
        self.assertTrue(transform.crs.is_projected)

        # central meridian of zone 32, on the equator
        point = transform.forward(LatLon(0.0, 9.0))
        self.assertAlmostEqual(point.x, 500000.0, places=3)
        self.assertAlmostEqual(point.y, 0.0, places=3)

        latlon = transform.inverse(PointF(500000.0, 0.0))
        self.assertAlmostEqual(latlon.latitude, 0.0, places=9)
        self.assertAlmostEqual(latlon.longitude, 9.0, places=9)

    def test_round_trip(self):
        with ProjTransform.build(UTM32_SPEC) as transform:
            for latlon in [LatLon(50.0, 9.0), LatLon(49.2, 8.13), LatLon(54.5, 6.1)]:
                back = transform.inverse(transform.forward(latlon))
                self.assertAlmostEqual(back.latitude, latlon.latitude, delta=1e-5)
                self.assertAlmostEqual(back.longitude, latlon.longitude, delta=1e-5)

            for point in [PointF(398125.0, 5579523.0), PointF(436705.0, 5450182.0)]:
                back = transform.forward(transform.inverse(point))
                self.assertAlmostEqual(back.x, point.x, delta=1e-3)
                self.assertAlmostEqual(back.y, point.y, delta=1e-3)

    def test_build_rejects_malformed_specifications(self):
        for spec in ["", "   ", "+proj=no_such_projection", "this is not a CRS", "EPSG:0"]:
            with self.subTest(spec=spec):
                with self.assertRaises(BuildError) as context:
                    ProjTransform.build(spec)
                self.assertTrue(str(context.exception))

    def test_build_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            ProjTransform.build("+proj=no_such_projection")

    def test_release(self):
        transform = ProjTransform.build(UTM32_SPEC)
        transform.release()
        transform.release()

        self.assertFalse(transform.is_valid)
        with self.assertRaises(TransformError):
            transform.forward(LatLon(50.0, 9.0))
        with self.assertRaises(TransformError):
            transform.inverse(PointF(500000.0, 5500000.0))

    def test_context_manager_releases(self):
        with ProjTransform.build(UTM32_SPEC) as transform:
            self.assertTrue(transform.is_valid)
        self.assertFalse(transform.is_valid)

    def test_out_of_domain_point(self):
        with ProjTransform.build("+proj=ortho +lat_0=50 +lon_0=9 +datum=WGS84") as transform:
            # the far side of the globe is not visible in an orthographic projection
            with self.assertRaises(TransformError):
                transform.forward(LatLon(-50.0, -171.0))
            with self.assertRaises(TransformError):
                transform.inverse(PointF(1.0e8, 1.0e8))

    def test_vectorized_conversion(self):
        with ProjTransform.build(UTM32_SPEC) as transform:
            xs, ys = transform.forward_xy([9.0, 9.0], [0.0, 50.0])
            lons, lats = transform.inverse_xy(xs, ys)

        self.assertAlmostEqual(xs[0], 500000.0, places=3)
        self.assertAlmostEqual(lons[1], 9.0, places=9)
        self.assertAlmostEqual(lats[1], 50.0, places=9)

    def test_linear_unit_factor(self):
        with ProjTransform.build(UTM32_SPEC) as transform:
            self.assertEqual(transform.linear_unit_factor(), 1.0)
        with ProjTransform.build("EPSG:4326") as transform:
            self.assertIsNone(transform.linear_unit_factor())
        with ProjTransform.build("+proj=tmerc +lon_0=9 +datum=WGS84 +units=us-ft") as transform:
            self.assertAlmostEqual(transform.linear_unit_factor(), 0.3048006096, places=9)


class TestResourceFinder(TestCase):
    def tearDown(self):
        set_resource_finder(None)

    def test_referenced_resources(self):
        self.assertEqual(referenced_resources(UTM32_SPEC), [])
        self.assertEqual(referenced_resources("+init=fake_crs:123"), ["fake_crs"])
        self.assertEqual(
            referenced_resources("+proj=longlat +nadgrids=@a.gsb,b.gsb +geoidgrids=c.gtx"),
            ["a.gsb", "b.gsb", "c.gtx"],
        )

    def test_finder_is_consulted(self):
        finder = Mock(return_value=None)

        with self.assertRaises(BuildError):
            ProjTransform.build("+init=fake_crs:123", resource_finder=finder)

        finder.assert_called_once_with("fake_crs")

    def test_finder_is_not_consulted_without_resources(self):
        finder = Mock(return_value=None)
        ProjTransform.build(UTM32_SPEC, resource_finder=finder).release()
        finder.assert_not_called()

    def test_builtin_init_files_need_no_finder(self):
        finder = Mock(return_value=None)

        with self.assertLogs("mapgeoref.transform.proj_transform", level="DEBUG") as logs:
            ProjTransform.build("+init=epsg:3857", resource_finder=finder).release()

        finder.assert_called_once_with("epsg")
        self.assertTrue(all(record.levelname == "DEBUG" for record in logs.records))
        self.assertTrue(any("epsg" in record.getMessage() for record in logs.records))

    def test_default_finder_routes_through_georeferencing(self):
        finder = Mock(return_value=None)
        set_resource_finder(finder)

        fake_georef = Georeferencing()
        self.assertFalse(fake_georef.set_projected_crs("Fake CRS", "+init=fake_crs:123"))

        finder.assert_called_once_with("fake_crs")
        self.assertFalse(fake_georef.is_valid())

    def test_georeferencing_finder(self):
        finder = Mock(return_value=None)

        fake_georef = Georeferencing(resource_finder=finder)
        fake_georef.set_projected_crs("Fake CRS", "+init=fake_crs:123")

        finder.assert_called_once_with("fake_crs")

    def test_found_resources_extend_the_search_path(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "fake_crs")
            finder = Mock(return_value=path)

            with patch("mapgeoref.transform.proj_transform.append_data_dir") as append:
                with self.assertRaises(BuildError):
                    ProjTransform.build("+init=fake_crs:123", resource_finder=finder)
                # a directory is added once
                with self.assertRaises(BuildError):
                    ProjTransform.build("+init=fake_crs:456", resource_finder=finder)

            self.assertEqual(finder.call_count, 2)
            append.assert_called_once_with(directory)
