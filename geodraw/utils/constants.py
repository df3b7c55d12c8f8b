"""
Constants used throughout the geodesic and geometry core.
"""

# WGS84 ellipsoid (meters)
WGS84_A = 6378137.0
WGS84_B = 6356752.314245
WGS84_F = 1 / 298.257223563

# Authalic sphere radius (meters), used for destination-point projection
EARTH_RADIUS_METERS = 6_371_008.8

# Fixed-scale rounding applied to degree inputs and distance outputs
MAGIC_SCALE = 1_000_000_000

# Vincenty inverse iteration limits
VINCENTY_MAX_ITERATIONS = 200
VINCENTY_TOLERANCE = 1e-12

# Circle approximation
DEFAULT_RING_STEPS = 64
MIN_RING_STEPS = 4

# Layer-cake editing
CAKE_RING_GROWTH = 1.5
MAX_CAKE_LAYERS = 10

# Ruler conversion (km -> mi)
KM_TO_MILES = 0.621371
