from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from mapgeoref.constructs.crs_template import CRSTemplate, CRSTemplateParameter
from mapgeoref.constructs.latlon import LatLon

_UTM_ZONE_PATTERN = re.compile(r"^\s*(\d{1,2})\s*([NS]?)\s*$", re.IGNORECASE)


def parse_utm_zone(zone: str) -> Tuple[int, bool]:
    """
    Parse a UTM zone string such as "32", "32 N" or "33S".

    Args:
        zone: The zone number, optionally followed by the hemisphere letter

    Returns:
        A tuple of (zone number, is_northern). A missing letter means north.

    Raises:
        ValueError: If the string is not a UTM zone or the number is not in 1..60
    """
    m = _UTM_ZONE_PATTERN.match(zone)
    if not m:
        raise ValueError(f"cannot parse UTM zone: '{zone}'")

    zone_number = int(m.group(1))
    if not 1 <= zone_number <= 60:
        raise ValueError(f"invalid UTM zone number: {zone_number}")

    return zone_number, m.group(2).upper() != "S"


def utm_zone_specification(zone: str) -> Tuple[str, ...]:
    """The value substituted for the zone in the UTM specification template."""
    zone_number, is_northern = parse_utm_zone(zone)
    if is_northern:
        return (f"{zone_number}",)
    return (f"{zone_number} +south",)


def utm_zone_for(latlon: LatLon) -> str:
    """
    Determine the UTM zone for a geographic position.

    Includes the special zones of Norway and Svalbard.

    Args:
        latlon: The geographic position

    Returns:
        The zone as "<number> <N|S>", e.g. "32 N"

    Raises:
        ValueError: If the position is outside the valid latitude/longitude range
    """
    if not latlon.is_valid():
        raise ValueError(f"invalid geographic position: {latlon}")

    lat, lon = latlon.latitude, latlon.longitude
    zone_number = min(int((lon + 180.0) / 6.0) + 1, 60)

    if 56.0 <= lat < 64.0 and 3.0 <= lon < 12.0:
        zone_number = 32
    elif 72.0 <= lat < 84.0:
        if 0.0 <= lon < 9.0:
            zone_number = 31
        elif 9.0 <= lon < 21.0:
            zone_number = 33
        elif 21.0 <= lon < 33.0:
            zone_number = 35
        elif 33.0 <= lon < 42.0:
            zone_number = 37

    return f"{zone_number} {'N' if lat >= 0.0 else 'S'}"


def gauss_krueger_zone_specification(zone: str) -> Tuple[str, ...]:
    """Central meridian and false easting of a 3-degree Gauss-Krueger zone."""
    try:
        zone_number = int(zone)
    except ValueError as e:
        raise ValueError(f"cannot parse Gauss-Krueger zone: '{zone}'") from e
    if not 1 <= zone_number <= 119:
        raise ValueError(f"invalid Gauss-Krueger zone number: {zone_number}")
    return (f"{zone_number * 3}", f"{zone_number * 1000000 + 500000}")


DEFAULT_TEMPLATES: Tuple[CRSTemplate, ...] = (
    CRSTemplate(
        id="UTM",
        name="UTM",
        parameters=(
            CRSTemplateParameter(
                "zone",
                "UTM Zone (number north/south)",
                "e.g. '32 N'; the hemisphere defaults to north",
                utm_zone_specification,
            ),
        ),
        specification_template="+proj=utm +zone=%1 +datum=WGS84",
        coordinates_name_template="UTM coordinates",
    ),
    CRSTemplate(
        id="Gauss-Krueger, datum: Potsdam",
        name="Gauss-Krueger, datum: Potsdam",
        parameters=(
            CRSTemplateParameter(
                "zone",
                "Zone number (1 to 119)",
                "the zone's central meridian is 3 degrees times the zone number",
                gauss_krueger_zone_specification,
            ),
        ),
        specification_template=(
            "+proj=tmerc +lat_0=0 +lon_0=%1 +k=1.000000 +x_0=%2 +y_0=0 "
            "+ellps=bessel +datum=potsdam +units=m +no_defs"
        ),
        coordinates_name_template="Gauss-Krueger coordinates",
    ),
    CRSTemplate(
        id="EPSG",
        name="by EPSG code",
        parameters=(CRSTemplateParameter("code", "EPSG code"),),
        specification_template="EPSG:%1",
        coordinates_name_template="EPSG @code@ coordinates",
    ),
)


class CRSTemplateRegistry:
    """
    A read-only catalog of CRS templates, looked up by template id.

    The registry is populated once, at construction, and never changes afterwards,
    so a single instance may be shared and queried from multiple threads.

    Args:
        templates: The catalog content. Defaults to the built-in templates (UTM,
            Gauss-Krueger and EPSG).

    Examples:
        >>> registry = CRSTemplateRegistry()
        >>> registry.find("UTM").specification(["32 N"])
        '+proj=utm +zone=32 +datum=WGS84'
        >>> registry.find("no such template") is None
        True
    """

    def __init__(self, templates: Optional[Iterable[CRSTemplate]] = None):
        if templates is None:
            templates = DEFAULT_TEMPLATES

        catalog: Dict[str, CRSTemplate] = {}
        for template in templates:
            if template.id in catalog:
                raise ValueError(f"duplicate CRS template id: {template.id}")
            catalog[template.id] = template

        self._templates = catalog

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self):
        return len(self._templates)

    def __repr__(self):
        return f"CRSTemplateRegistry(ids={self.ids()})"

    def find(self, template_id: str) -> Optional[CRSTemplate]:
        """
        Get a template by its id

        Args:
            template_id: The exact id of the template

        Returns:
            The template with the given id, or None if it does not exist
        """
        return self._templates.get(template_id)

    def ids(self) -> List[str]:
        return list(self._templates)

    def templates(self) -> List[CRSTemplate]:
        return list(self._templates.values())


_default_registry = CRSTemplateRegistry()


def default_registry() -> CRSTemplateRegistry:
    """The shared registry holding the built-in templates."""
    return _default_registry
