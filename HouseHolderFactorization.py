"""
This is the code for QR factorization of a complex matrix using Householder Transformation.
We used numpy library for matrix manipulation.
The algorithm is written once over a complex backend (see ComplexArithmetic.py), so the
machine double precision engine and the extended precision engine run exactly the same
steps and differ only in the arithmetic of the values.
QR factorization can be done for both square and non-square (tall) matrices. Only R is
returned, Q stays implicit in the Householder vectors.
The Householder vector follows the definition given in:
    http://arith.cs.ucla.edu/publications/House-Asil06.pdf
To run the demo write ** python3 HouseHolderFactorization.py ** on terminal.
"""
import logging
import time
from collections import namedtuple

import numpy as np

from ComplexArithmetic import DoubleComplex
from CreateComplexMatrix import fixed_matrix

logger = logging.getLogger(__name__)

QRResult = namedtuple("QRResult", ["R", "elapsed_ms", "singular_columns", "backend"])


class InvalidDimension(ValueError):
    """
    Raised when the matrix is not m x n with m >= n >= 1
    """


class SingularColumn(ArithmeticError):
    """
    Leading entry of the column slice at step k has zero magnitude
    """

    def __init__(self, k):
        super().__init__("zero leading entry in column slice at step %d" % k)
        self.k = k


def check_dimensions(A):
    """
    Returns (m, n) of A or raises InvalidDimension
    """
    shape = np.shape(A)
    if len(shape) != 2:
        raise InvalidDimension("expected a 2-D matrix, got shape %s" % (shape,))
    m, n = shape
    if n == 0:
        raise InvalidDimension("matrix has no columns")
    if m < n:
        raise InvalidDimension("matrix is %dx%d, need at least as many rows as columns" % (m, n))
    return m, n


def get_norm(x, backend):
    """
    Returns Norm of complex vector x, sqrt(sum x_i * conj(x_i))
    """
    return backend.norm(x)


def householder_vector(x, backend):
    """
    Returns the unit Householder vector for column slice x and whether x[0] was zero.

    The leading entry is scaled by (1 + |x| / |x[0]|). When |x[0]| is zero that scaling
    is skipped and the vector is x normalized. When x is entirely zero there is nothing
    to reflect and None is returned in place of the vector.
    """
    xnorm = get_norm(x, backend)
    x0mag = backend.magnitude(x[0])
    singular = x0mag == 0
    if not singular:
        x[0] = x[0] * (backend.one + xnorm / x0mag)
    elif xnorm == 0:
        return None, singular
    w = x * (backend.one / get_norm(x, backend))
    return w, singular


def qr_step_factorization(QR, w, k, beta):
    """
    Applies the reflection I - beta * w w^H to columns k.. of QR, rows k.. in place.
    """
    trailing = QR[k:, k:]
    # s_j = sum_i A[i, j] * conj(w_i); conjugate on w only
    s = np.sum(trailing * np.conj(w)[:, np.newaxis], axis=0)
    alpha = s * beta
    trailing -= np.outer(w, alpha)
    return QR


def extract_r(QR, n, backend):
    """
    Returns a new n x n matrix holding the upper triangle of QR and zeros below
    """
    R = backend.zeros((n, n))
    upper = np.triu_indices(n)
    R[upper] = QR[:n, :n][upper]
    return R


class HouseholderQR:
    """
    Householder QR factorization of an m x n complex matrix, m >= n >= 1.

    The input is copied into a working matrix owned by the engine and the factorization
    runs during construction. For a square matrix the last column is not reflected since
    the trailing 1x1 block is already triangular.

    Calling sequence:
        qr = HouseholderQR(A)                             # double precision
        qr = HouseholderQR(A, ExtendedComplex(100))       # 100 significant digits
        R = qr.getR()                                     # n x n
    """

    def __init__(self, A, backend=None, strict=False):
        self.m, self.n = check_dimensions(A)
        self.backend = backend if backend is not None else DoubleComplex()
        self.strict = strict
        if self.m == self.n:
            self.p = self.n - 1
        else:
            self.p = self.n
        self.QR = self.backend.array(A)
        # Householder vector of step k is kept in rows k.. of column k
        self.Reflectors = self.backend.zeros((self.m, self.p))
        self.singular_columns = []
        self.elapsed_ms = None
        self.factorize()

    def factorize(self):
        logger.debug("%s factorization of %dx%d matrix", self.backend.name, self.m, self.n)
        start = time.perf_counter()
        for k in range(self.p):
            x = self.QR[k:, k].copy()
            w, singular = householder_vector(x, self.backend)
            if singular:
                if self.strict:
                    raise SingularColumn(k)
                logger.warning("%s backend: zero leading entry at step %d of %dx%d matrix, "
                               "leading entry left unscaled", self.backend.name, k, self.m, self.n)
                self.singular_columns.append(k)
            if w is None:
                continue
            self.Reflectors[k:, k] = w
            qr_step_factorization(self.QR, w, k, self.backend.beta)
        self.elapsed_ms = (time.perf_counter() - start) * 1e3
        logger.info("%s factorization of %dx%d matrix finished in %.3f ms",
                    self.backend.name, self.m, self.n, self.elapsed_ms)

    def getR(self):
        return extract_r(self.QR, self.n, self.backend)


def QR_Factorization(A, backend=None, strict=False):
    """
    Returns R, the Householder vectors and the steps with a zero leading entry
    """
    qr = HouseholderQR(A, backend, strict=strict)
    return qr.getR(), qr.Reflectors, qr.singular_columns


def householder_qr(A, backend=None, strict=False):
    """
    Factorizes A and returns a QRResult with R and the elapsed time in milliseconds
    """
    qr = HouseholderQR(A, backend, strict=strict)
    return QRResult(qr.getR(), qr.elapsed_ms, list(qr.singular_columns), qr.backend.name)


def main():
    A = fixed_matrix(4, 4)
    print('The test matrix is \n', A)
    R, Reflectors, singular_columns = QR_Factorization(A)
    np.set_printoptions(precision=6, suppress=True)
    print('A after QR factorization')
    print('R matrix')
    print(R, '\n')
    print('Reflector')
    print(Reflectors)
    if singular_columns:
        print('Zero leading entry at steps', singular_columns)


if __name__ == "__main__":
    main()
