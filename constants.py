# constants.py
"""
Application-level constants.

These values are static and do not change between generation runs.
They are the defaults every caller falls back to when the configuration
omits an option, plus the fixed factors that turn `scale` into the
integrator's step count, step length and noise frequency.
"""
import math

# Field defaults (used when the config file leaves an option out)
DEFAULT_COUNT = 1000
DEFAULT_AMPLITUDE = 5.0
DEFAULT_DAMPING = 0.1
DEFAULT_MARGIN = 0.1
DEFAULT_SCALE = 1.0

# --- Scale derivation ---
# max_steps = STEPS_PER_SCALE * scale
STEPS_PER_SCALE = 30
# step_length = STEP_LENGTH_PER_SCALE * scale
STEP_LENGTH_PER_SCALE = 5.0
# frequency = BASE_FREQUENCY / scale
BASE_FREQUENCY = 0.001

# --- Simplex noise ---
# Skew/unskew factors for the 2D simplex lattice.
SIMPLEX_F2 = 0.5 * (math.sqrt(3.0) - 1.0)
SIMPLEX_G2 = (3.0 - math.sqrt(3.0)) / 6.0
# Brings the summed corner contributions into roughly [-1, 1].
SIMPLEX_SCALE = 70.0
PERMUTATION_SIZE = 256

# The 12 gradient directions of the 3D cube edges, projected to 2D.
GRADIENTS_2D = [
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (1, 0), (-1, 0), (1, 0), (-1, 0),
    (0, 1), (0, -1), (0, 1), (0, -1),
]
