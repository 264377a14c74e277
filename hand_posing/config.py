"""
Global constants for hand_posing.

Values here may be overridden at runtime by
``hand_posing.project_config.apply_config_to_globals``.
"""

# Squared length below which a vector is treated as zero-length
EPSILON = 1e-12

# Angular sweep of a full turn, degrees
FULL_TURN_DEG = 360.0

# Rotation applied by SnapSurface.inverted_pose, degrees
INVERSION_ANGLE_DEG = 180.0

# Version stamped on freshly created surface payloads
DEFAULT_SURFACE_VERSION = 1

# Angular distances closer than this count as a tie between sweep boundaries
ANGLE_TIE_TOLERANCE_DEG = 1e-6
