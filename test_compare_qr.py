# test_compare_qr.py
import numpy as np
import pytest

from CompareQR import (
    TOL,
    compare_qr,
    difference_norm,
    format_duration,
    format_report,
    lapack_diagonal_error,
    main,
)
from CreateComplexMatrix import fixed_matrix, random_matrix
from HouseHolderFactorization import InvalidDimension, householder_qr


def test_fixed_matrix_engines_agree():
    report = compare_qr(fixed_matrix(4, 4))
    assert report.rows == 4 and report.cols == 4
    assert report.precision == 100
    assert 0 <= report.difference_norm < TOL
    assert report.double_ms >= 0
    assert report.extended_ms >= 0
    assert report.R_double.shape == (4, 4)
    assert report.R_double.dtype == np.complex128
    assert report.R_extended.dtype == np.complex128
    assert report.singular_columns == {"double": [], "extended": []}
    assert report.lapack_error < 1e-10


def test_random_tall_matrix_engines_agree():
    report = compare_qr(random_matrix(12, 8, seed=11), precision=50)
    assert report.difference_norm < 1e-20
    assert np.allclose(report.R_double, report.R_extended, atol=1e-12)


def test_concurrent_and_sequential_runs_match():
    A = random_matrix(6, 5, seed=12)
    together = compare_qr(A, precision=30, concurrent=True)
    apart = compare_qr(A, precision=30, concurrent=False)
    assert np.array_equal(together.R_double, apart.R_double)
    assert np.array_equal(together.R_extended, apart.R_extended)
    assert together.difference_norm == apart.difference_norm


def test_difference_norm():
    R1 = np.array([[1 + 1j, 2], [0, 3j]])
    R2 = np.array([[1, 2 - 2j], [0, 3j]])
    assert difference_norm(R1, R2) == 1 + 4
    assert difference_norm(R1, R1) == 0


def test_lapack_diagonal_error():
    A = random_matrix(9, 4, seed=13)
    assert lapack_diagonal_error(A, householder_qr(A).R) < 1e-12


def test_compare_rejects_bad_dimensions():
    with pytest.raises(InvalidDimension):
        compare_qr(np.ones((2, 3), dtype=complex))


def test_zero_leading_entry_still_reports():
    A = np.array([[0, 1], [1, 2], [1, 5]], dtype=complex)
    report = compare_qr(A, precision=30)
    assert report.singular_columns == {"double": [0], "extended": [0]}
    assert np.isfinite(report.difference_norm)
    assert any("zero leading entry" in line for line in format_report(report))


def test_format_duration():
    assert format_duration(5e-9).strip() == "5.00 ns"
    assert format_duration(2.5e-5).strip() == "25.00 us"
    assert format_duration(0.125).strip() == "125.00 ms"
    assert format_duration(3.0).strip() == "3.00 s"


def test_format_report():
    lines = format_report(compare_qr(fixed_matrix(4, 4), precision=40))
    assert lines[0] == "Matrix size is 4x4 complex elements."
    assert "double precision" in lines[1]
    assert "(40 digits)" in lines[2]
    assert lines[3].startswith("norm of difference")


def test_main_small(capsys):
    report = main(rows=4, cols=3, precision=30)
    out = capsys.readouterr().out
    assert "Matrix size is 4x3 complex elements." in out
    assert report.difference_norm < TOL
