from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import numpy as np
from pyproj import CRS
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform as transform_geom

from mapgeoref.constructs.latlon import LatLon
from mapgeoref.constructs.point import PointF
from mapgeoref.georeferencing.scale_parameters import ScaleParameters
from mapgeoref.registry.crs_template_registry import (
    CRSTemplateRegistry,
    default_registry,
)
from mapgeoref.transform.grid_compensation import compute_grid_compensation
from mapgeoref.transform.map_transform import MapTransform
from mapgeoref.transform.proj_transform import (
    BuildError,
    ProjTransform,
    ResourceFinder,
    TransformError,
)
from mapgeoref.utils.keys import (
    AUXILIARY_SCALE_FACTOR_KEY,
    COMBINED_SCALE_FACTOR_KEY,
    DECLINATION_KEY,
    GRIVATION_KEY,
    MAP_REF_POINT_KEY,
    PROJECTED_CRS_ID_KEY,
    PROJECTED_CRS_SPEC_KEY,
    PROJECTED_REF_POINT_KEY,
    SCALE_DENOMINATOR_KEY,
)

log = logging.getLogger(__name__)

DEFAULT_SCALE_DENOMINATOR = 1000


class GeoreferencingState(Enum):
    """
    The state of a georeferencing.

    LOCAL: no CRS is configured; map coordinates are the only real space
    GEOSPATIAL: a valid CRS and transform are present
    INVALID: the last CRS assignment failed; there is no transform
    """

    LOCAL = "local"
    GEOSPATIAL = "geospatial"
    INVALID = "invalid"


class ErrorKind(Enum):
    """Why a georeferencing is invalid."""

    BUILD_FAILED = "build_failed"
    BAD_TEMPLATE_VALUES = "bad_template_values"
    MISSING_SPECIFICATION = "missing_specification"


class CoordinateSpace(Enum):
    """The coordinate spaces a georeferencing connects."""

    MAP = "map"
    PROJECTED = "projected"
    GEOGRAPHIC = "geographic"


class Georeferencing:
    """
    Ties a map's drawing coordinates to a projected CRS and to geographic coordinates.

    A Georeferencing maintains three linked coordinate spaces:

    - map coordinates: unit-less drawing coordinates, y pointing down
    - projected coordinates: the coordinates of the projected CRS (typically meters)
    - geographic coordinates: WGS84 latitude/longitude

    Map and projected coordinates are related by an affine transform anchored at
    the reference point pair (map_ref_point, projected_ref_point), rotated by the
    grivation and scaled by scale_denominator * combined_scale_factor *
    auxiliary_scale_factor / 1000. Projected and geographic coordinates are related
    by the transform built from the CRS specification.

    Without a CRS the georeferencing is "local": only the affine part exists, and
    conversions from or to geographic coordinates report failure.

    The entity is meant for single-owner use (one per document); it is not
    synchronized for concurrent use.

    Args:
        resource_finder: An optional lookup-by-name callback passed to the
            transformation engine for locating auxiliary CRS resource files
        registry: The CRS template catalog used for template lookups. Defaults to
            the shared built-in registry.

    Examples:
        >>> from mapgeoref.georeferencing import Georeferencing
        >>> from mapgeoref.constructs.latlon import LatLon
        >>> georef = Georeferencing()
        >>> georef.is_local()
        True
        >>> georef.set_projected_crs("UTM", "+proj=utm +zone=32 +datum=WGS84", ["32 N"])
        True
        >>> georef.set_geographic_ref_point(LatLon(50.0, 6.48))
        True
        >>> projected, ok = georef.to_projected_coords(LatLon(50.001, 6.481))
        >>> map_point = georef.to_map_coord(projected)
    """

    def __init__(
        self,
        resource_finder: Optional[ResourceFinder] = None,
        registry: Optional[CRSTemplateRegistry] = None,
    ):
        self._resource_finder = resource_finder
        self._registry = registry if registry is not None else default_registry()

        self._state = GeoreferencingState.LOCAL
        self._error_kind: Optional[ErrorKind] = None
        self._error_text = ""

        self._scale_denominator = DEFAULT_SCALE_DENOMINATOR
        self._params = ScaleParameters()

        self._map_ref_point = PointF()
        self._projected_ref_point = PointF()
        self._geographic_ref_point: Optional[LatLon] = None

        self._crs_id = ""
        self._crs_spec = ""
        self._crs_parameters: Tuple[str, ...] = ()
        self._transform: Optional[ProjTransform] = None

        self._update_map_transform()

    def __str__(self):
        output_lines = [
            "Mapgeoref Georeferencing object",
            f"state: {self._state.value}",
            f"crs: {self._crs_id} ({self._crs_spec})",
            f"scale: 1:{self._scale_denominator}",
            f"parameters: {self._params}",
            f"map ref point: {self._map_ref_point}",
            f"projected ref point: {self._projected_ref_point}",
            f"geographic ref point: {self._geographic_ref_point}",
        ]
        return "\n".join(output_lines)

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        if not isinstance(other, Georeferencing):
            return NotImplemented
        return self._state == other._state and self.to_dict() == other.to_dict()

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------

    @property
    def state(self) -> GeoreferencingState:
        return self._state

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self._error_kind

    def is_valid(self) -> bool:
        return self._state != GeoreferencingState.INVALID

    def is_local(self) -> bool:
        return self._state == GeoreferencingState.LOCAL

    def error_text(self) -> str:
        """The diagnostic of the last failed CRS assignment; empty while valid."""
        return self._error_text

    # ------------------------------------------------------------------
    # parameters
    # ------------------------------------------------------------------

    @property
    def scale_denominator(self) -> int:
        return self._scale_denominator

    @property
    def scale_parameters(self) -> ScaleParameters:
        return self._params

    @property
    def combined_scale_factor(self) -> float:
        return self._params.combined_scale_factor

    @property
    def auxiliary_scale_factor(self) -> float:
        return self._params.auxiliary_scale_factor

    @property
    def effective_scale_factor(self) -> float:
        return self._params.effective_scale_factor

    @property
    def declination(self) -> float:
        return self._params.declination

    @property
    def convergence(self) -> float:
        return self._params.convergence

    @property
    def grivation(self) -> float:
        return self._params.grivation

    @property
    def grivation_error(self) -> float:
        return self._params.grivation_error

    @property
    def map_ref_point(self) -> PointF:
        return self._map_ref_point

    @property
    def projected_ref_point(self) -> PointF:
        return self._projected_ref_point

    @property
    def geographic_ref_point(self) -> Optional[LatLon]:
        return self._geographic_ref_point

    @property
    def projected_crs_id(self) -> str:
        return self._crs_id

    @property
    def projected_crs_spec(self) -> str:
        return self._crs_spec

    @property
    def projected_crs_parameters(self) -> Tuple[str, ...]:
        return self._crs_parameters

    @property
    def projected_crs(self) -> Optional[CRS]:
        """The parsed CRS, or None unless the georeferencing is geospatial."""
        if self._transform is None:
            return None
        return self._transform.crs

    def set_scale_denominator(self, value: int):
        """
        Set the map scale denominator (e.g. 1000 for a 1:1000 map).

        Raises:
            ValueError: If the value is not a positive integer
        """
        if isinstance(value, bool) or int(value) != value or value <= 0:
            raise ValueError(f"scale denominator must be a positive integer but found {value}")
        self._scale_denominator = int(value)
        self._update_map_transform()

    def set_combined_scale_factor(self, value: float):
        """
        Set the combined scale factor explicitly.

        The value is pinned: it is no longer recomputed when the reference point or
        the CRS changes, until ``unpin_combined_scale_factor`` is called.
        A local georeferencing accepts it too, as a plain map scale correction;
        ``clear_projected_crs`` resets it to 1.
        """
        self._params = self._params.with_combined_scale_factor(value)
        self._update_map_transform()

    def unpin_combined_scale_factor(self):
        """Let the combined scale factor follow the projection again, and recompute it."""
        self._params = self._params.unpinned()
        if (
            self._state == GeoreferencingState.GEOSPATIAL
            and self._geographic_ref_point is not None
        ):
            self._update_grid_compensation(update_grivation=False, update_scale_factor=True)
        self._update_map_transform()

    def set_auxiliary_scale_factor(self, value: float):
        self._params = self._params.with_auxiliary_scale_factor(value)
        self._update_map_transform()

    def set_declination(self, value: float):
        self._params = self._params.with_declination(value)
        self._update_map_transform()

    def set_convergence(self, value: float):
        self._params = self._params.with_convergence(value)
        self._update_map_transform()

    def set_grivation(self, value: float):
        """
        Set the grivation directly.

        Declination and convergence stay unchanged; the difference between the new
        grivation and declination - convergence is kept as ``grivation_error``.
        """
        self._params = self._params.with_grivation(value)
        self._update_map_transform()

    # ------------------------------------------------------------------
    # CRS
    # ------------------------------------------------------------------

    def set_projected_crs(
        self,
        crs_id: str,
        spec: str,
        params: Sequence[str] = (),
    ) -> bool:
        """
        Set the projected CRS from a specification string.

        On success, the georeferencing becomes geospatial: the projected reference
        point is recomputed from the geographic reference point (or, when there is
        none yet, the geographic reference point is derived from the projected one),
        and the convergence and, unless pinned, the combined scale factor are
        recomputed. On failure, any previous transform is discarded and the
        georeferencing becomes invalid, with the engine's diagnostic available from
        ``error_text``. The auxiliary scale factor is never changed.

        An empty specification clears the CRS, like ``clear_projected_crs``.

        Args:
            crs_id: The identifier of the CRS, e.g. a template id
            spec: The concrete specification string for the transformation engine
            params: The template parameter values the specification was built from

        Returns:
            True if the transform could be built, False otherwise
        """
        if not spec or not spec.strip():
            self.clear_projected_crs()
            return True

        self._crs_id = crs_id
        self._crs_spec = spec
        self._crs_parameters = tuple(params)
        self._release_transform()

        try:
            self._transform = ProjTransform.build(spec, self._resource_finder)
        except BuildError as e:
            self._set_invalid(ErrorKind.BUILD_FAILED, str(e))
            return False

        self._state = GeoreferencingState.GEOSPATIAL
        self._error_kind = None
        self._error_text = ""

        if self._geographic_ref_point is not None:
            self._anchor_at_geographic(
                self._geographic_ref_point, update_grivation=True, update_scale_factor=True
            )
        else:
            self._anchor_at_projected(
                self._projected_ref_point, update_grivation=True, update_scale_factor=True
            )

        self._update_map_transform()
        return True

    def set_projected_crs_from_template(
        self,
        template_id: str,
        values: Sequence[str],
        registry: Optional[CRSTemplateRegistry] = None,
    ) -> bool:
        """
        Set the projected CRS from a catalog template and its parameter values.

        Args:
            template_id: The id of the template
            values: One value per template parameter
            registry: The catalog to use; defaults to this georeferencing's registry

        Returns:
            True if the CRS was set; False if the template does not exist (the
            georeferencing is left unchanged), or if the values or the resulting
            specification are rejected (the georeferencing becomes invalid)
        """
        registry = registry if registry is not None else self._registry
        template = registry.find(template_id)
        if template is None:
            log.warning(f"CRS template '{template_id}' not found")
            return False

        try:
            spec = template.specification(values)
        except ValueError as e:
            self._crs_id = template_id
            self._crs_spec = ""
            self._crs_parameters = tuple(values)
            self._release_transform()
            self._set_invalid(ErrorKind.BAD_TEMPLATE_VALUES, str(e))
            return False

        return self.set_projected_crs(template_id, spec, values)

    def clear_projected_crs(self):
        """Return to the local state, keeping the scale denominator and auxiliary scale factor."""
        self._release_transform()
        self._crs_id = ""
        self._crs_spec = ""
        self._crs_parameters = ()
        self._state = GeoreferencingState.LOCAL
        self._error_kind = None
        self._error_text = ""
        self._params = self._params.reset()
        self._geographic_ref_point = None
        self._projected_ref_point = self._map_ref_point
        self._update_map_transform()

    def projected_coordinates_name(self) -> str:
        """
        The display name of the projected coordinates, e.g. "EPSG 5514 coordinates".

        Returns:
            The name built from the originating template and the stored parameter
            values, or an empty string if the CRS was not set from a template
        """
        template = self._registry.find(self._crs_id)
        if template is None or len(self._crs_parameters) != len(template.parameters):
            return ""
        return template.coordinates_name(self._crs_parameters)

    # ------------------------------------------------------------------
    # reference points
    # ------------------------------------------------------------------

    def set_map_ref_point(self, point: PointF):
        self._map_ref_point = PointF(*point)
        self._update_map_transform()

    def set_projected_ref_point(
        self,
        point: PointF,
        update_grivation: bool = True,
        update_scale_factor: bool = True,
    ) -> bool:
        """
        Set the projected reference point.

        When geospatial, the geographic reference point is derived from it, and
        convergence and scale factor are recomputed as in ``set_geographic_ref_point``.

        Returns:
            False if the point could not be converted to geographic coordinates; both
            reference points are then left unchanged
        """
        point = PointF(*point)
        ok = True
        if self._state == GeoreferencingState.GEOSPATIAL:
            ok = self._anchor_at_projected(point, update_grivation, update_scale_factor)
        else:
            self._projected_ref_point = point
        self._update_map_transform()
        return ok

    def set_geographic_ref_point(
        self,
        latlon: LatLon,
        update_grivation: bool = True,
        update_scale_factor: bool = True,
    ) -> bool:
        """
        Set the geographic reference point.

        When geospatial, the projected reference point is recomputed from it, and the
        convergence is recomputed at that point. With ``update_grivation``, the
        declination is kept and the grivation follows the new convergence; otherwise
        the grivation is kept and the declination follows. With
        ``update_scale_factor``, the combined scale factor is recomputed as the grid
        scale factor at that point, unless it is pinned.

        In other states, only the value is stored.

        Args:
            latlon: The geographic reference point
            update_grivation: Whether to keep the declination (True) or the grivation (False)
            update_scale_factor: Whether to recompute the combined scale factor

        Returns:
            False if the point could not be projected; both reference points are
            then left unchanged
        """
        latlon = LatLon(*latlon)
        ok = True
        if self._state == GeoreferencingState.GEOSPATIAL:
            ok = self._anchor_at_geographic(latlon, update_grivation, update_scale_factor)
        else:
            self._geographic_ref_point = latlon
        self._update_map_transform()
        return ok

    # ------------------------------------------------------------------
    # coordinate conversions
    # ------------------------------------------------------------------

    def to_projected_coords(self, latlon: LatLon) -> Tuple[PointF, bool]:
        """
        Convert geographic coordinates to projected coordinates.

        Returns:
            A tuple of (point, ok). When the georeferencing is not geospatial or the
            engine cannot convert the position, ok is False and the point is (0, 0).
        """
        if self._transform is None:
            return PointF(), False
        try:
            return self._transform.forward(LatLon(*latlon)), True
        except TransformError as e:
            log.debug(e)
            return PointF(), False

    def to_geographic_coords(self, point: PointF) -> Tuple[LatLon, bool]:
        """
        Convert projected coordinates to geographic coordinates.

        Returns:
            A tuple of (latlon, ok). When the georeferencing is not geospatial or the
            engine cannot convert the point, ok is False and the position is (0, 0).
        """
        if self._transform is None:
            return LatLon(), False
        try:
            return self._transform.inverse(PointF(*point)), True
        except TransformError as e:
            log.debug(e)
            return LatLon(), False

    def to_map_coord(self, projected: PointF) -> PointF:
        """Convert projected coordinates to map coordinates. Never fails."""
        return self._map_transform.projected_to_map(PointF(*projected))

    def map_to_projected(self, map_point: PointF) -> PointF:
        """Convert map coordinates to projected coordinates. Never fails."""
        return self._map_transform.map_to_projected(PointF(*map_point))

    def map_to_geographic(self, map_point: PointF) -> Tuple[LatLon, bool]:
        return self.to_geographic_coords(self.map_to_projected(map_point))

    def geographic_to_map(self, latlon: LatLon) -> Tuple[PointF, bool]:
        projected, ok = self.to_projected_coords(latlon)
        if not ok:
            return PointF(), False
        return self.to_map_coord(projected), True

    def map_to_projected_array(self, points) -> np.ndarray:
        """Convert an (n, 2) array of map coordinates to projected coordinates."""
        return self._map_transform.map_to_projected_array(points)

    def projected_to_map_array(self, points) -> np.ndarray:
        """Convert an (n, 2) array of projected coordinates to map coordinates."""
        return self._map_transform.projected_to_map_array(points)

    def transform_geometry(
        self,
        geom: BaseGeometry,
        source: CoordinateSpace,
        target: CoordinateSpace,
    ) -> BaseGeometry:
        """
        Convert a shapely geometry between coordinate spaces.

        Geographic geometries use x for the longitude and y for the latitude.

        Args:
            geom: The geometry to convert
            source: The coordinate space of the geometry
            target: The coordinate space of the result

        Returns:
            A new geometry in the target space

        Raises:
            TransformError: If geographic coordinates are involved and the
                georeferencing is not geospatial, or a vertex cannot be converted

        Examples:
            >>> from shapely.geometry import LineString
            >>> line = LineString([(0, 0), (100, 0)])
            >>> georef.transform_geometry(line, CoordinateSpace.MAP, CoordinateSpace.PROJECTED)
        """
        return transform_geom(self._space_function(source, target), geom)

    def _space_function(
        self, source: CoordinateSpace, target: CoordinateSpace
    ) -> Callable[[Any, Any], Tuple[np.ndarray, np.ndarray]]:
        def identity(xs, ys):
            return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)

        def map_to_projected(xs, ys):
            points = np.column_stack([np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)])
            result = self._map_transform.map_to_projected_array(points)
            return result[:, 0], result[:, 1]

        def projected_to_map(xs, ys):
            points = np.column_stack([np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)])
            result = self._map_transform.projected_to_map_array(points)
            return result[:, 0], result[:, 1]

        def projected_to_geographic(xs, ys):
            return self._require_transform().inverse_xy(xs, ys)

        def geographic_to_projected(xs, ys):
            return self._require_transform().forward_xy(xs, ys)

        if source == target:
            return identity

        to_projected = {
            CoordinateSpace.MAP: map_to_projected,
            CoordinateSpace.PROJECTED: identity,
            CoordinateSpace.GEOGRAPHIC: geographic_to_projected,
        }[source]
        from_projected = {
            CoordinateSpace.MAP: projected_to_map,
            CoordinateSpace.PROJECTED: identity,
            CoordinateSpace.GEOGRAPHIC: projected_to_geographic,
        }[target]

        def convert(xs, ys):
            return from_projected(*to_projected(xs, ys))

        return convert

    def _require_transform(self) -> ProjTransform:
        if self._transform is None:
            raise TransformError(
                f"georeferencing is {self._state.value}; there are no geographic coordinates"
            )
        return self._transform

    # ------------------------------------------------------------------
    # serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the georeferencing to the plain fields stored in documents.

        Returns:
            A dictionary with the projected CRS id and specification, the scale
            denominator, the combined and auxiliary scale factors, declination,
            grivation and the map and projected reference points (as [x, y])
        """
        return {
            PROJECTED_CRS_ID_KEY: self._crs_id,
            PROJECTED_CRS_SPEC_KEY: self._crs_spec,
            SCALE_DENOMINATOR_KEY: self._scale_denominator,
            COMBINED_SCALE_FACTOR_KEY: self._params.combined_scale_factor,
            AUXILIARY_SCALE_FACTOR_KEY: self._params.auxiliary_scale_factor,
            DECLINATION_KEY: self._params.declination,
            GRIVATION_KEY: self._params.grivation,
            MAP_REF_POINT_KEY: self._map_ref_point.to_list(),
            PROJECTED_REF_POINT_KEY: self._projected_ref_point.to_list(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(
        cls,
        d: Dict[str, Any],
        resource_finder: Optional[ResourceFinder] = None,
        registry: Optional[CRSTemplateRegistry] = None,
    ) -> Georeferencing:
        """
        Create a georeferencing from the plain fields stored in documents.

        The stored combined scale factor is restored as pinned. When the CRS can be
        built, the geographic reference point is derived from the projected one and
        the convergence is recomputed; a stored grivation that deviates from
        declination - convergence is kept, with the deviation in ``grivation_error``.
        A CRS that cannot be built, or a CRS id without a specification, leaves the
        georeferencing invalid rather than raising.

        Args:
            d: The stored fields; missing fields take their defaults
            resource_finder: Passed to the new georeferencing
            registry: Passed to the new georeferencing

        Returns:
            A new Georeferencing

        Raises:
            ValueError: If a field holds an invalid value
        """
        georef = cls(resource_finder=resource_finder, registry=registry)
        georef.set_scale_denominator(d.get(SCALE_DENOMINATOR_KEY, DEFAULT_SCALE_DENOMINATOR))

        params = (
            ScaleParameters()
            .with_auxiliary_scale_factor(d.get(AUXILIARY_SCALE_FACTOR_KEY, 1.0))
            .with_declination(d.get(DECLINATION_KEY, 0.0))
        )
        if COMBINED_SCALE_FACTOR_KEY in d:
            params = params.with_combined_scale_factor(d[COMBINED_SCALE_FACTOR_KEY])
        georef._params = params

        georef._map_ref_point = PointF.from_list(d.get(MAP_REF_POINT_KEY, [0.0, 0.0]))
        georef._projected_ref_point = PointF.from_list(
            d.get(PROJECTED_REF_POINT_KEY, [0.0, 0.0])
        )

        crs_id = d.get(PROJECTED_CRS_ID_KEY, "")
        spec = d.get(PROJECTED_CRS_SPEC_KEY, "")
        if spec:
            georef.set_projected_crs(crs_id, spec)
        elif crs_id:
            # e.g. saved after the template values were rejected
            georef._crs_id = crs_id
            georef._set_invalid(
                ErrorKind.MISSING_SPECIFICATION,
                f"there is no specification for the projected CRS '{crs_id}'",
            )

        if GRIVATION_KEY in d:
            georef._params = georef._params.with_grivation(d[GRIVATION_KEY])

        georef._update_map_transform()
        return georef

    @classmethod
    def from_json(cls, s: str, **kwargs) -> Georeferencing:
        return cls.from_dict(json.loads(s), **kwargs)

    def copy(self) -> Georeferencing:
        """
        Create an independent copy, with its own transform.

        Returns:
            A new Georeferencing equal to this one
        """
        other = Georeferencing(resource_finder=self._resource_finder, registry=self._registry)
        other._state = self._state
        other._error_kind = self._error_kind
        other._error_text = self._error_text
        other._scale_denominator = self._scale_denominator
        other._params = self._params
        other._map_ref_point = self._map_ref_point
        other._projected_ref_point = self._projected_ref_point
        other._geographic_ref_point = self._geographic_ref_point
        other._crs_id = self._crs_id
        other._crs_spec = self._crs_spec
        other._crs_parameters = self._crs_parameters
        if self._transform is not None:
            other._transform = ProjTransform.build(self._crs_spec, self._resource_finder)
        other._update_map_transform()
        return other

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _set_invalid(self, kind: ErrorKind, text: str):
        log.warning(f"invalid projected CRS '{self._crs_id}': {text}")
        self._state = GeoreferencingState.INVALID
        self._error_kind = kind
        self._error_text = text
        self._update_map_transform()

    def _release_transform(self):
        if self._transform is not None:
            self._transform.release()
            self._transform = None

    def _anchor_at_geographic(
        self, latlon: LatLon, update_grivation: bool, update_scale_factor: bool
    ) -> bool:
        """Move both reference points to a geographic position; no change if it cannot be projected."""
        try:
            projected = self._transform.forward(latlon)
        except TransformError as e:
            log.warning(f"cannot project the geographic reference point: {e}")
            return False
        self._geographic_ref_point = latlon
        self._projected_ref_point = projected
        return self._update_grid_compensation(update_grivation, update_scale_factor)

    def _anchor_at_projected(
        self, point: PointF, update_grivation: bool, update_scale_factor: bool
    ) -> bool:
        """Move both reference points to a projected point; no change if it cannot be unprojected."""
        try:
            latlon = self._transform.inverse(point)
        except TransformError as e:
            log.warning(f"cannot unproject the projected reference point: {e}")
            return False
        self._projected_ref_point = point
        self._geographic_ref_point = latlon
        return self._update_grid_compensation(update_grivation, update_scale_factor)

    def _update_grid_compensation(self, update_grivation: bool, update_scale_factor: bool) -> bool:
        try:
            compensation = compute_grid_compensation(
                self._transform, self._geographic_ref_point, self._projected_ref_point
            )
        except TransformError as e:
            log.warning(f"cannot compute the grid compensation: {e}")
            return False

        params = self._params
        if update_grivation:
            params = params.with_convergence(compensation.convergence)
        else:
            grivation = params.grivation
            params = params.with_convergence(compensation.convergence).with_declination(
                grivation + compensation.convergence
            )
        if update_scale_factor:
            params = params.with_automatic_scale_factor(compensation.grid_scale_factor)

        self._params = params
        return True

    def _update_map_transform(self):
        self._map_transform = MapTransform.build(
            self._map_ref_point,
            self._projected_ref_point,
            self._params.grivation,
            self._params.map_scale(self._scale_denominator),
        )
