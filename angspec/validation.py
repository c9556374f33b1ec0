"""Comparison of kernel output with the reference propagation, plus timing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

__all__ = [
    "ValidationReport",
    "TimingStats",
    "approx_equal",
    "validate_results",
    "save_outputs",
]

STR_PASSED = "PASSED:   "
STR_FAILED = "FAILED:   "
STR_INFO = "INFO:     "
STR_RESULTS = "RESULTS:  "

_ERROR_MESSAGE = (
    "Error:\tResults Mismatch:\n"
    "\tIndex i = {index}; CPU Results ({er:f}, {ei:f}); Device Result ({ar:f}, {ai:f})\n"
    "\tRelative error in real component = {rr:f}\n"
    "\tRelative error in imag component = {ri:f}"
)


def _component_close(expected, actual, tolerance: float):
    """Per-component check: both below tolerance, or relative error below it."""
    expected = np.asarray(expected, dtype=np.float64)
    actual = np.asarray(actual, dtype=np.float64)
    both_small = (expected < tolerance) & (actual < tolerance)
    denom = np.maximum(np.abs(expected), np.abs(actual))
    with np.errstate(divide="ignore", invalid="ignore"):
        relative = np.abs((expected - actual) / denom)
    return both_small | (relative < tolerance)


def approx_equal(a, b, tolerance: float) -> bool:
    """Return True if complex numbers ``a`` and ``b`` agree within ``tolerance``.

    Each component matches when both values are below the tolerance, or when
    their difference relative to the larger magnitude is below it.
    """
    a = complex(a)
    b = complex(b)
    return bool(
        _component_close(a.real, b.real, tolerance)
        and _component_close(a.imag, b.imag, tolerance)
    )


@dataclass
class ValidationReport:
    """Outcome of comparing an output against the expected values."""

    size: int
    failed_count: int
    avg_real_relative_error: float
    avg_imag_relative_error: float
    mismatches: list[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when every element matched."""
        return self.failed_count == 0


def _flat_pair(expected, actual) -> tuple[np.ndarray, np.ndarray]:
    exp = np.asarray(expected, dtype=np.complex128)
    act = np.asarray(actual, dtype=np.complex128)
    if exp.shape != act.shape:
        raise ValueError(
            f"expected and actual shapes differ: {exp.shape} vs {act.shape}"
        )
    return exp.ravel(), act.ravel()


def _average_relative_error(expected: np.ndarray, actual: np.ndarray, size: int) -> float:
    nonzero = expected != 0
    if size == 0 or not nonzero.any():
        return 0.0
    rel = np.abs((expected[nonzero] - actual[nonzero]) / expected[nonzero])
    return float(np.sum(rel / size))


def validate_results(
    expected, actual, tolerance: float = 1e-2, print_errors: bool = False
) -> ValidationReport:
    """Compare ``actual`` with ``expected`` element by element and report.

    Prints a summary; with ``print_errors`` every mismatch is printed too.
    """
    exp, act = _flat_pair(expected, actual)
    size = exp.shape[0]
    print(f"{STR_INFO}Start Validation")

    ok = _component_close(exp.real, act.real, tolerance) & _component_close(
        exp.imag, act.imag, tolerance
    )
    mismatches = [int(i) for i in np.flatnonzero(~ok)]

    if print_errors:
        with np.errstate(divide="ignore", invalid="ignore"):
            for i in mismatches:
                e, a = exp[i], act[i]
                print(
                    _ERROR_MESSAGE.format(
                        index=i,
                        er=e.real,
                        ei=e.imag,
                        ar=a.real,
                        ai=a.imag,
                        rr=float(np.abs(np.float64(e.real - a.real) / np.float64(e.real))),
                        ri=float(np.abs(np.float64(e.imag - a.imag) / np.float64(e.imag))),
                    )
                )

    report = ValidationReport(
        size=size,
        failed_count=len(mismatches),
        avg_real_relative_error=_average_relative_error(exp.real, act.real, size),
        avg_imag_relative_error=_average_relative_error(exp.imag, act.imag, size),
        mismatches=mismatches,
    )

    print(
        f"{STR_RESULTS}Average Relative Error in the Real Component Across All Indices = "
        f"{report.avg_real_relative_error:g}"
    )
    print(
        f"{STR_RESULTS}Average Relative Error in the Imag Component Across All Indices = "
        f"{report.avg_imag_relative_error:g}"
    )
    if report.passed:
        print(f"{STR_PASSED}Validation; data at all indices match")
    else:
        print(
            f"{STR_FAILED}Validation; test failed at {report.failed_count} "
            f"indices out of {size}"
        )
    return report


def _row_count(arr: np.ndarray) -> int:
    if arr.ndim == 2:
        return arr.shape[0]
    return math.isqrt(arr.size)


def _write_matrix(path: Path, rows: int, values: np.ndarray) -> None:
    with path.open("w", encoding="ascii") as handle:
        handle.write(f"{rows}\n")
        for v in values:
            handle.write(f"{format(float(v.real), 'g')} {format(float(v.imag), 'g')}\n")


def save_outputs(expected, actual, directory=".") -> tuple[Path, Path]:
    """Write ``hardware_output.txt`` (actual) and ``software_output.txt`` (expected).

    Each file starts with the row count, then one ``real imag`` line per
    element in row-major order. Returns the two paths.
    """
    exp_arr = np.asarray(expected, dtype=np.complex128)
    act_arr = np.asarray(actual, dtype=np.complex128)
    exp, act = _flat_pair(exp_arr, act_arr)
    rows = _row_count(act_arr)
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    hardware = folder / "hardware_output.txt"
    software = folder / "software_output.txt"
    _write_matrix(hardware, rows, act)
    _write_matrix(software, rows, exp)
    return hardware, software


@dataclass
class TimingStats:
    """Collected run times in seconds."""

    samples: list[float] = field(default_factory=list)

    def add(self, seconds: float) -> None:
        """Record one run time."""
        self.samples.append(float(seconds))

    def _require_samples(self) -> None:
        if not self.samples:
            raise ValueError("no timings recorded")

    def arithmetic_mean(self) -> float:
        """Mean of the recorded times."""
        self._require_samples()
        return sum(self.samples) / len(self.samples)

    def geometric_mean(self) -> float:
        """Geometric mean of the recorded times."""
        self._require_samples()
        return math.prod(self.samples) ** (1.0 / len(self.samples))