"""
Compares the double precision Householder QR against the extended precision one.

Both engines factorize the same matrix, each on its own copy, and may run on two
worker threads. The report holds the time taken by each engine and the squared
Frobenius norm of the difference between the two R matrices.

Running the extended precision version on a 192x120 matrix takes far longer than the
double precision version; that time is reported, not bounded.
To run the comparison write ** python3 CompareQR.py ** on terminal.
"""
import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import scipy.linalg as la

from ComplexArithmetic import EXTENDED_PRECISION, DoubleComplex, ExtendedComplex
from CreateComplexMatrix import create_complex_matrix
from HouseHolderFactorization import check_dimensions, householder_qr

logger = logging.getLogger(__name__)

ROWS = 192
COLS = 120
TOL = 1e-6

ComparisonReport = namedtuple("ComparisonReport", [
    "rows", "cols", "precision",
    "double_ms", "extended_ms", "difference_norm",
    "R_double", "R_extended",
    "singular_columns", "lapack_error",
])


def format_duration(seconds):
    if seconds < 1e-6:
        return "{:7.2f} ns".format(seconds * 1e9)
    elif seconds < 1e-3:
        return "{:7.2f} us".format(seconds * 1e6)
    elif seconds < 1e-0:
        return "{:7.2f} ms".format(seconds * 1e3)
    else:
        return "{:7.2f} s".format(seconds * 1e0)


def difference_norm(R_fast, R_reference):
    """
    Returns sum of squared real and imaginary differences over all entries
    """
    diff = np.asarray(R_fast, dtype=np.complex128) - np.asarray(R_reference, dtype=np.complex128)
    return float(np.sum(np.square(diff.real) + np.square(diff.imag)))


def lapack_diagonal_error(A, R):
    """
    Returns the largest difference between |diag R| and |diag R| from LAPACK.

    The diagonal magnitudes of R do not depend on the phase convention of the
    reflectors, so they can be checked against an independent factorization.
    """
    R_lapack = la.qr(np.asarray(A, dtype=np.complex128), mode='r')[0]
    return float(np.max(np.abs(np.abs(np.diag(R)) - np.abs(np.diag(R_lapack)))))


def log_matrix(M, header="matrix"):
    """
    Writes the first four columns of each row of M to the debug log
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(header)
    for i, row in enumerate(np.asarray(M, dtype=np.complex128)):
        entries = "   ".join("%s +i*%s" % (z.real, z.imag) for z in row[:4])
        logger.debug("row = %d   %s", i, entries)


def compare_qr(A, precision=EXTENDED_PRECISION, concurrent=True):
    """
    Factorizes A with both engines and returns a ComparisonReport.

    With concurrent=True the engines run on two worker threads and are joined before
    the difference is computed. Dimension errors are raised before either engine starts.
    """
    m, n = check_dimensions(A)
    A = np.array(A, dtype=np.complex128)
    double = DoubleComplex()
    extended = ExtendedComplex(precision)

    if concurrent:
        with ThreadPoolExecutor(max_workers=2) as pool:
            extended_future = pool.submit(householder_qr, A, extended)
            double_future = pool.submit(householder_qr, A, double)
            fast = double_future.result()
            reference = extended_future.result()
    else:
        fast = householder_qr(A, double)
        reference = householder_qr(A, extended)

    R_fast = double.to_complex(fast.R)
    R_reference = extended.to_complex(reference.R)
    norm = difference_norm(R_fast, R_reference)
    log_matrix(R_fast, "results of double precision QR:")
    log_matrix(R_reference, "results of extended precision QR:")

    singular = {"double": fast.singular_columns, "extended": reference.singular_columns}
    return ComparisonReport(m, n, extended.precision,
                            fast.elapsed_ms, reference.elapsed_ms, norm,
                            R_fast, R_reference,
                            singular, lapack_diagonal_error(A, R_fast))


def format_report(report):
    lines = [
        "Matrix size is %dx%d complex elements." % (report.rows, report.cols),
        "%s for double precision." % format_duration(report.double_ms / 1e3),
        "%s using extended precision (%d digits)." % (format_duration(report.extended_ms / 1e3),
                                                      report.precision),
        "norm of difference from double version is %g" % report.difference_norm,
        "largest |diag R| difference from LAPACK is %g" % report.lapack_error,
    ]
    for name, steps in sorted(report.singular_columns.items()):
        if steps:
            lines.append("%s: zero leading entry at steps %s" % (name, steps))
    return lines


def main(rows=ROWS, cols=COLS, precision=EXTENDED_PRECISION, seed=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    A = create_complex_matrix(rows, cols, seed)
    report = compare_qr(A, precision)
    for line in format_report(report):
        print(line)
    if report.difference_norm >= TOL:
        logger.warning("double and extended precision R differ by %g", report.difference_norm)
    return report


if __name__ == "__main__":
    main()
