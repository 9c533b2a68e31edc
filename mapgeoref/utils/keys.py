"""Standard field names used when (de)serializing a georeferencing.

The surrounding application stores a georeferencing as plain fields in its own
document format. Using these keys keeps every reader and writer compatible.
"""

# Identifier and concrete specification string of the projected CRS
PROJECTED_CRS_ID_KEY = "projected_crs_id"
PROJECTED_CRS_SPEC_KEY = "projected_crs_spec"

# Map scale (e.g. 1000 for 1:1000) and scale compensation factors
SCALE_DENOMINATOR_KEY = "scale_denominator"
COMBINED_SCALE_FACTOR_KEY = "combined_scale_factor"
AUXILIARY_SCALE_FACTOR_KEY = "auxiliary_scale_factor"

# Rotation angles, in degrees
DECLINATION_KEY = "declination"
GRIVATION_KEY = "grivation"

# Reference points, stored as [x, y]
MAP_REF_POINT_KEY = "map_ref_point"
PROJECTED_REF_POINT_KEY = "projected_ref_point"

ALL_KEYS = (
    PROJECTED_CRS_ID_KEY,
    PROJECTED_CRS_SPEC_KEY,
    SCALE_DENOMINATOR_KEY,
    COMBINED_SCALE_FACTOR_KEY,
    AUXILIARY_SCALE_FACTOR_KEY,
    DECLINATION_KEY,
    GRIVATION_KEY,
    MAP_REF_POINT_KEY,
    PROJECTED_REF_POINT_KEY,
)
