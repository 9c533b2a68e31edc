"""Transformation engine adapter: geographic (WGS84) <-> projected coordinates via pyproj.

A ProjTransform owns exactly one pyproj Transformer. It is built from an opaque
specification string (anything pyproj.CRS.from_user_input accepts: PROJ strings,
"EPSG:<code>", WKT, PROJJSON) and released exactly once, either explicitly or at
the end of a ``with`` block.

Note: always_xy=True is used so that geographic input is always ordered
(longitude, latitude) and projected output (easting, northing), regardless of the
axis order a CRS definition declares.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Callable, List, Optional, Set, Tuple

import numpy as np
from pyproj import CRS, Transformer
from pyproj.datadir import append_data_dir
from pyproj.exceptions import CRSError, ProjError

from mapgeoref.constructs.latlon import LatLon
from mapgeoref.constructs.point import PointF
from mapgeoref.utils.crs import LATLON_CRS

log = logging.getLogger(__name__)

ResourceFinder = Callable[[str], Optional[str]]

_INIT_PATTERN = re.compile(r"\+init=@?([^:\s]+):")
_GRID_PATTERN = re.compile(r"\+(?:nadgrids|geoidgrids)=(\S+)")

_default_resource_finder: Optional[ResourceFinder] = None
_appended_data_dirs: Set[str] = set()


class BuildError(ValueError):
    """A specification string could not be turned into a transform."""


class TransformError(ValueError):
    """A point could not be transformed (outside the CRS domain, degenerate, or released)."""


def set_resource_finder(finder: Optional[ResourceFinder]) -> Optional[ResourceFinder]:
    """
    Install the process-wide resource finder used when a build gets none.

    The finder is called with the name of each auxiliary resource a specification
    refers to (init files and grid files) and returns a path to that resource, or
    None when it cannot locate it.

    Args:
        finder: The lookup-by-name callback, or None to remove it

    Returns:
        The previously installed finder
    """
    global _default_resource_finder
    previous = _default_resource_finder
    _default_resource_finder = finder
    return previous


def referenced_resources(spec: str) -> List[str]:
    """
    List the names of auxiliary resource files a specification refers to.

    Examples:
        >>> referenced_resources("+init=fake_crs:123")
        ['fake_crs']
        >>> referenced_resources("+proj=tmerc +nadgrids=@BETA2007.gsb,null")
        ['BETA2007.gsb', 'null']
    """
    names = [m.group(1) for m in _INIT_PATTERN.finditer(spec)]
    for m in _GRID_PATTERN.finditer(spec):
        names.extend(name.lstrip("@") for name in m.group(1).split(",") if name)
    return names


def _locate_resources(spec: str, finder: Optional[ResourceFinder]):
    """Ask the finder for each resource and make the found locations searchable."""
    if finder is None:
        return

    for name in referenced_resources(spec):
        path = finder(name)
        if not path:
            log.debug(f"resource '{name}' not found by the resource finder, leaving it to PROJ")
            continue

        directory = path if os.path.isdir(path) else os.path.dirname(path)
        if directory and directory not in _appended_data_dirs:
            append_data_dir(directory)
            _appended_data_dirs.add(directory)
            log.debug(f"added {directory} to the PROJ search path for '{name}'")


class ProjTransform:
    """
    Forward and inverse transform between WGS84 geographic coordinates and a CRS.

    Instances are created with ``ProjTransform.build``; the constructor is not meant
    to be called directly. The transform exclusively owns its engine resources:
    after ``release`` (or leaving a ``with`` block) every use raises TransformError.

    Attributes:
        spec: The specification string the transform was built from
        crs: The parsed pyproj CRS of the projected space

    Examples:
        >>> from mapgeoref.constructs.latlon import LatLon
        >>> with ProjTransform.build("+proj=utm +zone=32 +datum=WGS84") as t:
        ...     point = t.forward(LatLon(50.0, 9.0))
        ...     latlon = t.inverse(point)
    """

    def __init__(self, spec: str, crs: CRS, transformer: Transformer):
        self.spec = spec
        self.crs = crs
        self._transformer: Optional[Transformer] = transformer

    def __enter__(self) -> ProjTransform:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def __repr__(self):
        state = "valid" if self.is_valid else "released"
        return f"ProjTransform(spec='{self.spec}', {state})"

    @classmethod
    def build(
        cls,
        spec: str,
        resource_finder: Optional[ResourceFinder] = None,
    ) -> ProjTransform:
        """
        Build a transform from a specification string.

        Args:
            spec: The opaque CRS specification understood by PROJ
            resource_finder: An optional lookup-by-name callback for auxiliary resource
                files. Defaults to the finder installed with ``set_resource_finder``.

        Returns:
            A new, valid ProjTransform

        Raises:
            BuildError: If the specification is empty, malformed or unsupported
        """
        if not spec or not spec.strip():
            raise BuildError("the CRS specification is empty")

        finder = resource_finder if resource_finder is not None else _default_resource_finder
        _locate_resources(spec, finder)

        try:
            crs = CRS.from_user_input(spec)
        except CRSError as e:
            raise BuildError(f"Could not parse CRS specification '{spec}': {e}") from e

        try:
            transformer = Transformer.from_crs(LATLON_CRS, crs, always_xy=True)
        except ProjError as e:
            raise BuildError(
                f"Could not create a transformation for '{spec}': {e}"
            ) from e

        log.debug(f"built transform for '{spec}' ({crs.name})")
        return cls(spec, crs, transformer)

    @property
    def is_valid(self) -> bool:
        return self._transformer is not None

    def release(self):
        """Release the engine resources. Releasing twice is harmless."""
        if self._transformer is not None:
            log.debug(f"released transform for '{self.spec}'")
        self._transformer = None

    def _get_transformer(self) -> Transformer:
        if self._transformer is None:
            raise TransformError(f"the transform for '{self.spec}' has been released")
        return self._transformer

    def forward(self, latlon: LatLon) -> PointF:
        """
        Transform a geographic position to projected coordinates.

        Raises:
            TransformError: If the position is outside the CRS's domain or the
                engine cannot transform it
        """
        transformer = self._get_transformer()
        try:
            x, y = transformer.transform(latlon.longitude, latlon.latitude, errcheck=True)
        except ProjError as e:
            raise TransformError(f"Unable to project {latlon}: {e}") from e

        point = PointF(x, y)
        if not point.is_finite():
            raise TransformError(f"Unable to project {latlon}: got {point}")
        return point

    def inverse(self, point: PointF) -> LatLon:
        """
        Transform projected coordinates to a geographic position.

        Raises:
            TransformError: If the point is outside the CRS's domain or the
                engine cannot transform it
        """
        transformer = self._get_transformer()
        try:
            lon, lat = transformer.transform(
                point.x, point.y, direction="INVERSE", errcheck=True
            )
        except ProjError as e:
            raise TransformError(f"Unable to unproject {point}: {e}") from e

        latlon = LatLon(lat, lon)
        if not latlon.is_finite():
            raise TransformError(f"Unable to unproject {point}: got {latlon}")
        return latlon

    def forward_xy(self, lons, lats) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized ``forward``: longitudes and latitudes to eastings and northings."""
        transformer = self._get_transformer()
        try:
            xs, ys = transformer.transform(
                np.asarray(lons, dtype=float), np.asarray(lats, dtype=float), errcheck=True
            )
        except ProjError as e:
            raise TransformError(f"Unable to project coordinates: {e}") from e
        return self._check_finite(xs, ys)

    def inverse_xy(self, xs, ys) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized ``inverse``: eastings and northings to longitudes and latitudes."""
        transformer = self._get_transformer()
        try:
            lons, lats = transformer.transform(
                np.asarray(xs, dtype=float),
                np.asarray(ys, dtype=float),
                direction="INVERSE",
                errcheck=True,
            )
        except ProjError as e:
            raise TransformError(f"Unable to unproject coordinates: {e}") from e
        return self._check_finite(lons, lats)

    @staticmethod
    def _check_finite(a, b) -> Tuple[np.ndarray, np.ndarray]:
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
        if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
            raise TransformError("transformation produced non-finite coordinates")
        return a, b

    def linear_unit_factor(self) -> Optional[float]:
        """
        Meters per unit of the projected axes.

        Returns:
            The conversion factor, or None when the CRS is not a projected CRS with
            linear axes (e.g. a geographic CRS in degrees)
        """
        if not self.crs.is_projected:
            return None

        crs = self.crs.source_crs if self.crs.is_bound else self.crs
        if not crs.axis_info:
            return None
        return crs.axis_info[0].unit_conversion_factor
