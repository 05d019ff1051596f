"""
Test matrices for the complex QR factorization.

Small matrices (fewer than 5 rows and 5 columns) are cut from a fixed 4x4 pattern so
results are reproducible. Larger matrices are filled with random entries in [-1, 1)
with 1/32768 granularity.
"""
import numpy as np

SCALE = 32768.0
RANDOM_MIN = -32767
RANDOM_MAX = 32767
SMALL_LIMIT = 5

FIXED_REAL = np.array([[1, 2, 3, -3],
                       [2, 3, 2, -6],
                       [1, 2, 3, 1],
                       [3, 4, 4, 2]], dtype=np.float64)
FIXED_IMAG = np.array([[2, -3, 4, 1],
                       [-3, 1, -2, -7],
                       [-1, -4, 2, 2],
                       [-1, 3, -2, 4]], dtype=np.float64)


def fixed_matrix(rows=4, cols=4):
    """
    Returns the top left rows x cols block of the fixed 4x4 test matrix
    """
    if rows > FIXED_REAL.shape[0] or cols > FIXED_REAL.shape[1]:
        raise ValueError("fixed test matrix is 4x4, asked for %dx%d" % (rows, cols))
    return FIXED_REAL[:rows, :cols] + 1j * FIXED_IMAG[:rows, :cols]


def random_matrix(rows, cols, seed=None):
    """
    Returns a rows x cols complex matrix with entries drawn on a 1/SCALE grid
    """
    rng = np.random.default_rng(seed)
    re = rng.integers(RANDOM_MIN, RANDOM_MAX, size=(rows, cols)) / SCALE
    im = rng.integers(RANDOM_MIN, RANDOM_MAX, size=(rows, cols)) / SCALE
    return re + 1j * im


def create_complex_matrix(rows, cols, seed=None):
    if rows < SMALL_LIMIT and cols < SMALL_LIMIT:
        return fixed_matrix(rows, cols)
    return random_matrix(rows, cols, seed)
