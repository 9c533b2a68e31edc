from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional, Sequence, Tuple


def substitute(template: str, placeholders: Sequence[str], values: Sequence[str]) -> str:
    """
    Replace placeholders in a template with values, by position.

    The n-th value replaces every occurrence of the n-th placeholder. Placeholders
    without a value stay in the output literally. The template is scanned once, so
    a substituted value is never itself treated as a placeholder.

    Args:
        template: The text containing the placeholders
        placeholders: The placeholder strings, in order (e.g. ["%1", "%2"])
        values: The replacement values, in the same order

    Returns:
        The template with the placeholders replaced

    Raises:
        ValueError: If there are more values than placeholders

    Examples:
        >>> substitute("EPSG:%1", ["%1"], ["5514"])
        'EPSG:5514'
        >>> substitute("EPSG @code@ coordinates", ["@code@"], [])
        'EPSG @code@ coordinates'
    """
    if len(values) > len(placeholders):
        raise ValueError(
            f"got {len(values)} values for {len(placeholders)} placeholders in '{template}'"
        )

    mapping = dict(zip(placeholders, values))
    if not mapping:
        return template

    # longest first, so that "%10" is not taken for "%1"
    alternatives = sorted(mapping, key=len, reverse=True)
    pattern = "|".join(re.escape(p) for p in alternatives)
    return re.sub(pattern, lambda m: mapping[m.group(0)], template)


def ordinal_placeholders(count: int) -> Tuple[str, ...]:
    """The placeholders "%1" ... "%<count>" used by specification templates."""
    return tuple(f"%{i}" for i in range(1, count + 1))


class CRSTemplateParameter(NamedTuple):
    """
    Describes one parameter of a CRS template.

    Attributes:
        key: The parameter's identifier; the coordinates name template refers to it as "@key@"
        name: A human-readable name of the parameter
        description: An optional longer explanation
        spec_converter: An optional function turning the stored value into the values
            substituted into the specification template. Without it, the stored value
            is used as the single specification value.
    """

    key: str
    name: str
    description: str = ""
    spec_converter: Optional[Callable[[str], Sequence[str]]] = None

    def spec_values(self, value: str) -> Tuple[str, ...]:
        if self.spec_converter is None:
            return (value,)
        return tuple(self.spec_converter(value))


class CRSTemplate(NamedTuple):
    """
    A parametrized CRS specification, as offered by a CRS catalog.

    A template couples an ordered list of parameters with two placeholder strings:
    the specification template, which becomes a concrete specification string for
    the transformation engine, and the coordinates name template, which becomes
    a display name for the resulting projected coordinates.

    Attributes:
        id: The unique identifier of the template (e.g. "UTM", "EPSG")
        name: A human-readable name of the template
        parameters: The ordered parameter descriptors
        specification_template: The specification string with ordinal placeholders %1, %2, ...
        coordinates_name_template: The display name with placeholders @key@ for each parameter

    Examples:
        >>> from mapgeoref.registry.crs_template_registry import CRSTemplateRegistry
        >>> epsg = CRSTemplateRegistry().find("EPSG")
        >>> epsg.specification(["5514"])
        'EPSG:5514'
        >>> epsg.coordinates_name(["5514"])
        'EPSG 5514 coordinates'
        >>> epsg.coordinates_name()
        'EPSG @code@ coordinates'
    """

    id: str
    name: str
    parameters: Tuple[CRSTemplateParameter, ...]
    specification_template: str
    coordinates_name_template: str

    def specification(self, values: Sequence[str]) -> str:
        """
        Build the concrete specification string for the given parameter values.

        Args:
            values: One value per parameter, in parameter order

        Returns:
            The specification string consumable by the transformation engine

        Raises:
            ValueError: If the number of values does not match the number of parameters
        """
        if len(values) != len(self.parameters):
            raise ValueError(
                f"template {self.id} takes {len(self.parameters)} parameters "
                f"but got {len(values)}"
            )

        spec_values = [
            v for param, value in zip(self.parameters, values)
            for v in param.spec_values(value)
        ]
        return substitute(
            self.specification_template,
            ordinal_placeholders(len(spec_values)),
            spec_values,
        )

    def coordinates_name(self, values: Sequence[str] = ()) -> str:
        """
        Build the display name of the projected coordinates.

        With no values, the placeholders are kept literally, which is useful for a
        generic description of the template.
        """
        placeholders = [f"@{param.key}@" for param in self.parameters]
        return substitute(self.coordinates_name_template, placeholders, list(values))
