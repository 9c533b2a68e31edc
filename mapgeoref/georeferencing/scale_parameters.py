from __future__ import annotations

import math
from dataclasses import dataclass, replace

# map drawing units per meter at a scale denominator of 1
MAP_UNITS_PER_METER = 1000.0


def _check_scale_factor(name: str, value: float) -> float:
    value = float(value)
    if not (math.isfinite(value) and value > 0.0):
        raise ValueError(f"{name} must be a positive number but found {value}")
    return value


def _check_angle(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number but found {value}")
    return value


@dataclass(frozen=True)
class ScaleParameters:
    """
    The scale and rotation parameters of a georeferencing, with their rules.

    The fields depend on each other; instead of setting them directly, use the
    ``with_*`` methods, which return a new object where the dependent fields are
    recomputed:

    - grivation is declination minus convergence, unless it was set explicitly
      with ``with_grivation``; then ``grivation_error`` holds the deviation.
    - the combined scale factor follows the projection (``with_automatic_scale_factor``)
      until it is set explicitly with ``with_combined_scale_factor``, which pins it.
    - the auxiliary scale factor is independent of everything else.

    Attributes:
        combined_scale_factor: The grid scale factor, grid distance per geodesic distance
        auxiliary_scale_factor: An additional factor, e.g. for elevation
        declination: The angle from true north to magnetic north, in degrees
        convergence: The angle from true north to grid north, in degrees
        grivation: The angle from grid north to magnetic north, in degrees
        grivation_error: The deviation of grivation from declination - convergence
        scale_factor_pinned: Whether the combined scale factor was set explicitly

    Examples:
        >>> p = ScaleParameters().with_convergence(1.5).with_declination(2.0)
        >>> p.grivation
        0.5
        >>> p.with_grivation(1.0).grivation_error
        0.5
    """

    combined_scale_factor: float = 1.0
    auxiliary_scale_factor: float = 1.0
    declination: float = 0.0
    convergence: float = 0.0
    grivation: float = 0.0
    grivation_error: float = 0.0
    scale_factor_pinned: bool = False

    @property
    def effective_scale_factor(self) -> float:
        """The total factor from geodesic distance to projected distance."""
        return self.combined_scale_factor * self.auxiliary_scale_factor

    def map_scale(self, scale_denominator: int) -> float:
        """Projected units per map unit, for the given scale denominator."""
        return scale_denominator * self.effective_scale_factor / MAP_UNITS_PER_METER

    def with_declination(self, declination: float) -> ScaleParameters:
        declination = _check_angle("declination", declination)
        return replace(
            self,
            declination=declination,
            grivation=declination - self.convergence,
            grivation_error=0.0,
        )

    def with_convergence(self, convergence: float) -> ScaleParameters:
        convergence = _check_angle("convergence", convergence)
        return replace(
            self,
            convergence=convergence,
            grivation=self.declination - convergence,
            grivation_error=0.0,
        )

    def with_grivation(self, grivation: float) -> ScaleParameters:
        grivation = _check_angle("grivation", grivation)
        return replace(
            self,
            grivation=grivation,
            grivation_error=grivation - (self.declination - self.convergence),
        )

    def with_combined_scale_factor(self, factor: float) -> ScaleParameters:
        factor = _check_scale_factor("combined scale factor", factor)
        return replace(self, combined_scale_factor=factor, scale_factor_pinned=True)

    def with_automatic_scale_factor(self, factor: float) -> ScaleParameters:
        """Update the combined scale factor, unless it is pinned."""
        if self.scale_factor_pinned:
            return self
        factor = _check_scale_factor("combined scale factor", factor)
        return replace(self, combined_scale_factor=factor)

    def unpinned(self) -> ScaleParameters:
        return replace(self, scale_factor_pinned=False)

    def with_auxiliary_scale_factor(self, factor: float) -> ScaleParameters:
        factor = _check_scale_factor("auxiliary scale factor", factor)
        return replace(self, auxiliary_scale_factor=factor)

    def reset(self) -> ScaleParameters:
        """The parameters of a local georeferencing; only the auxiliary factor survives."""
        return ScaleParameters(auxiliary_scale_factor=self.auxiliary_scale_factor)
