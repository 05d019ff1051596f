"""
Complex scalar backends for the Householder QR factorization.

Both backends expose the same small capability set used by the factorization:
building an owned working matrix, zero matrices, the reflection constant, the
magnitude of a complex scalar, the Euclidean norm of a complex vector and conversion
back to machine precision. Magnitudes and norms are computed without squaring the
double values, so tiny or huge entries are not flushed to zero or inf. Addition,
subtraction, multiplication and conjugation are the element operations of the numpy
arrays holding the values, and the in-place accumulation of the trailing submatrix
update is numpy's in-place subtraction.

DoubleComplex keeps the matrix in a complex128 array.
ExtendedComplex keeps mpmath mpc values in an object array; every value is created
through a private mpmath context whose decimal precision is fixed when the backend
is built, so two backends with different precision can run side by side.
"""
import logging

import numpy as np
import scipy.linalg as la
from mpmath import MPContext

logger = logging.getLogger(__name__)

EXTENDED_PRECISION = 100  # significant decimal digits of the reference backend
BETA = 2


class DoubleComplex:
    """
    Machine double precision complex values in a complex128 array
    """
    name = "double"

    def __init__(self):
        self.one = 1.0
        self.beta = float(BETA)

    def array(self, A):
        """
        Returns an owned complex128 copy of A
        """
        return np.array(A, dtype=np.complex128)

    def zeros(self, shape):
        return np.zeros(shape, dtype=np.complex128)

    def magnitude(self, z):
        # hypot based, |z| neither underflows nor overflows through z * conj(z)
        return np.abs(z)

    def norm(self, x):
        """
        Returns the Euclidean norm of complex vector x (scaled BLAS nrm2)
        """
        return la.norm(x)

    def to_complex(self, A):
        return np.array(A, dtype=np.complex128)


class ExtendedComplex:
    """
    Arbitrary precision complex values (mpmath mpc) in an object array.

    The number of significant decimal digits is set once here and used for every
    operation on values produced by this backend.
    """
    name = "extended"

    def __init__(self, precision=EXTENDED_PRECISION):
        if int(precision) < 1:
            raise ValueError("precision must be a positive number of digits, got %r" % (precision,))
        self.ctx = MPContext()
        self.ctx.dps = int(precision)
        self.precision = int(precision)
        self.zero = self.ctx.mpc(0)
        self.one = self.ctx.mpf(1)
        self.beta = self.ctx.mpf(BETA)
        logger.debug("extended backend with %d significant digits", self.precision)

    def scalar(self, z):
        # doubles convert exactly, so the extended copy holds the same logical matrix
        return self.ctx.mpc(z.real, z.imag)

    def array(self, A):
        """
        Returns an object array of mpc values converted from A
        """
        A = np.asarray(A)
        if A.dtype != object:
            A = A.astype(np.complex128)
        out = np.empty(A.shape, dtype=object)
        for index, z in np.ndenumerate(A):
            out[index] = self.scalar(z)
        return out

    def zeros(self, shape):
        return np.full(shape, self.zero, dtype=object)

    def sqrt(self, x):
        return self.ctx.sqrt(x)

    def magnitude(self, z):
        return self.ctx.fabs(z)

    def norm(self, x):
        """
        Returns sqrt(sum x_i * conj(x_i)); mpf exponents do not overflow or underflow
        """
        return self.sqrt(np.sum(x * np.conj(x)).real)

    def to_complex(self, A):
        """
        Rounds every entry of A to complex128
        """
        return np.vectorize(complex, otypes=[np.complex128])(A)
