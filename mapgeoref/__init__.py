from mapgeoref.constructs.crs_template import CRSTemplate, CRSTemplateParameter
from mapgeoref.constructs.latlon import LatLon
from mapgeoref.constructs.point import PointF
from mapgeoref.georeferencing import (
    CoordinateSpace,
    Georeferencing,
    GeoreferencingState,
)
from mapgeoref.registry.crs_template_registry import CRSTemplateRegistry
from mapgeoref.transform.proj_transform import (
    BuildError,
    ProjTransform,
    TransformError,
    set_resource_finder,
)

__all__ = [
    "BuildError",
    "CRSTemplate",
    "CRSTemplateParameter",
    "CRSTemplateRegistry",
    "CoordinateSpace",
    "Georeferencing",
    "GeoreferencingState",
    "LatLon",
    "PointF",
    "ProjTransform",
    "TransformError",
    "set_resource_finder",
]
