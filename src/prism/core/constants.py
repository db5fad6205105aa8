"""Numeric tolerances and rendering limits shared by host and device code."""

# Tolerance for zero tests (discriminant, plane denominator, determinant),
# approximate equality and the over-point / shadow-ray bias.
EPSILON = 1e-5

# Default number of mirror bounces followed by World.color_at.
REFLECTION_LIMIT = 5

# Upper bound for the unrolled reflection loop in the render kernel.
MAX_REFLECTION_DEPTH = 16

# Color returned for rays that hit nothing.
BACKGROUND = (0.0, 0.0, 0.0)
