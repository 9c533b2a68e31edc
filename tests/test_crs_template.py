from unittest import TestCase

from mapgeoref.constructs.crs_template import (
    CRSTemplate,
    CRSTemplateParameter,
    ordinal_placeholders,
    substitute,
)
from mapgeoref.constructs.latlon import LatLon
from mapgeoref.georeferencing import Georeferencing
from mapgeoref.registry.crs_template_registry import (
    CRSTemplateRegistry,
    default_registry,
    parse_utm_zone,
    utm_zone_for,
)


class TestSubstitute(TestCase):
    def test_substitutes_by_position(self):
        result = substitute("%1 and %2", ordinal_placeholders(2), ["a", "b"])
        self.assertEqual(result, "a and b")

    def test_missing_values_keep_placeholders(self):
        result = substitute("@zone@ / @code@", ["@zone@", "@code@"], ["32"])
        self.assertEqual(result, "32 / @code@")

    def test_surplus_values_are_rejected(self):
        with self.assertRaises(ValueError):
            substitute("%1", ["%1"], ["a", "b"])

    def test_values_are_not_rescanned(self):
        result = substitute("%1 %2", ordinal_placeholders(2), ["%2", "x"])
        self.assertEqual(result, "%2 x")

    def test_two_digit_placeholders(self):
        values = [str(i) for i in range(1, 11)]
        result = substitute("%10-%1", ordinal_placeholders(10), values)
        self.assertEqual(result, "10-1")


class TestCRSTemplates(TestCase):
    def test_epsg_template(self):
        epsg_template = CRSTemplateRegistry().find("EPSG")

        self.assertIsNotNone(epsg_template)
        self.assertEqual(len(epsg_template.parameters), 1)
        self.assertEqual(epsg_template.coordinates_name(), "EPSG @code@ coordinates")
        self.assertEqual(epsg_template.coordinates_name(["4326"]), "EPSG 4326 coordinates")

        georef = Georeferencing()
        georef.set_projected_crs("EPSG", epsg_template.specification(["5514"]), ["5514"])
        self.assertTrue(georef.is_valid(), georef.error_text())
        self.assertEqual(georef.projected_crs_spec, "EPSG:5514")
        self.assertEqual(georef.projected_coordinates_name(), "EPSG 5514 coordinates")

    def test_find_unknown_template(self):
        registry = CRSTemplateRegistry()
        self.assertIsNone(registry.find("UTM zone"))
        self.assertIsNone(registry.find("epsg"))
        self.assertNotIn("epsg", registry)

    def test_builtin_catalog(self):
        registry = default_registry()
        self.assertEqual(registry.ids(), ["UTM", "Gauss-Krueger, datum: Potsdam", "EPSG"])
        self.assertEqual(len(registry), 3)
        self.assertIs(default_registry(), registry)

    def test_custom_catalog(self):
        template = CRSTemplate(
            id="Local grid",
            name="Local grid",
            parameters=(CRSTemplateParameter("code", "code"),),
            specification_template="+init=grid:%1",
            coordinates_name_template="Grid @code@",
        )
        registry = CRSTemplateRegistry([template])

        self.assertIs(registry.find("Local grid"), template)
        self.assertIsNone(registry.find("EPSG"))
        self.assertEqual(template.specification(["7"]), "+init=grid:7")

    def test_duplicate_ids_are_rejected(self):
        template = default_registry().find("EPSG")
        with self.assertRaises(ValueError):
            CRSTemplateRegistry([template, template])

    def test_wrong_number_of_values(self):
        template = default_registry().find("EPSG")
        with self.assertRaises(ValueError):
            template.specification([])
        with self.assertRaises(ValueError):
            template.specification(["4326", "3857"])

    def test_utm_template(self):
        template = default_registry().find("UTM")

        self.assertEqual(template.specification(["32"]), "+proj=utm +zone=32 +datum=WGS84")
        self.assertEqual(template.specification(["32 N"]), "+proj=utm +zone=32 +datum=WGS84")
        self.assertEqual(
            template.specification(["33 S"]), "+proj=utm +zone=33 +south +datum=WGS84"
        )
        self.assertEqual(template.coordinates_name(["32 N"]), "UTM coordinates")

        with self.assertRaises(ValueError):
            template.specification(["61"])
        with self.assertRaises(ValueError):
            template.specification(["north"])

    def test_gauss_krueger_template(self):
        template = default_registry().find("Gauss-Krueger, datum: Potsdam")
        spec = template.specification(["3"])

        self.assertIn("+lon_0=9 ", spec)
        self.assertIn("+x_0=3500000 ", spec)

        with self.assertRaises(ValueError):
            template.specification(["0"])


class TestUtmZones(TestCase):
    def test_parse_utm_zone(self):
        self.assertEqual(parse_utm_zone("32"), (32, True))
        self.assertEqual(parse_utm_zone("32 N"), (32, True))
        self.assertEqual(parse_utm_zone("33s"), (33, False))

    def test_utm_zone_for(self):
        self.assertEqual(utm_zone_for(LatLon(50.0, 7.5)), "32 N")
        self.assertEqual(utm_zone_for(LatLon(-33.9, 18.4)), "34 S")
        self.assertEqual(utm_zone_for(LatLon(-10.0, 180.0)), "60 S")

    def test_utm_zone_for_special_zones(self):
        # south-western Norway
        self.assertEqual(utm_zone_for(LatLon(60.0, 5.0)), "32 N")
        # Svalbard
        self.assertEqual(utm_zone_for(LatLon(78.0, 15.0)), "33 N")

    def test_utm_zone_for_invalid_position(self):
        with self.assertRaises(ValueError):
            utm_zone_for(LatLon(91.0, 0.0))
