from mapgeoref.georeferencing.georeferencing import (
    CoordinateSpace,
    ErrorKind,
    Georeferencing,
    GeoreferencingState,
)
from mapgeoref.georeferencing.scale_parameters import ScaleParameters

__all__ = [
    "CoordinateSpace",
    "ErrorKind",
    "Georeferencing",
    "GeoreferencingState",
    "ScaleParameters",
]
