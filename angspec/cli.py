"""Command that checks the streaming kernel against the reference propagation."""

from __future__ import annotations

import argparse
import math
import time

import numpy as np

from .fft import is_power_of_two
from .kernel import angular_spectrum
from .propagation import angular_spectrum_propagation, generate_star_gaussian
from .streams import KernelGeometry
from .validation import (
    STR_INFO,
    STR_PASSED,
    TimingStats,
    save_outputs,
    validate_results,
)

__all__ = ["main"]

_MIN_SIZE = 16

_FINAL_RESULTS = (
    "\n\n**************************      Timing Summary   ****************************\n"
    "Kernel name                          = Angular Spectrum Propagation\n"
    "Input Data Size                      = ({rows}, {cols})\n"
    "Number of Run Rounds                 = {rounds}\n"
    "Kernel Geometric Mean Run Time       = {kg:f}\n"
    "Reference Geometric Mean Run Time    = {cg:f}\n"
    "Kernel Arithmetic Mean Run Time      = {ka:f}\n"
    "Reference Arithmetic Mean Run Time   = {ca:f}\n"
    "**********************************************************************************"
)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="angspec",
        description="Propagate a star image with the streaming kernel and "
        "validate it against the reference angular spectrum method.",
    )
    parser.add_argument("--size", type=int, default=1024, help="grid side length")
    parser.add_argument("--sigma", type=float, default=10.0)
    parser.add_argument("--intensity", type=float, default=1e5)
    parser.add_argument("--noise-stddev", type=float, default=0.01)
    parser.add_argument("--no-noise", action="store_true")
    parser.add_argument("--wavelength", type=float, default=500e-9)
    parser.add_argument("--distance", type=float, default=1000e-3)
    parser.add_argument("--tolerance", type=float, default=1e-2)
    parser.add_argument("--print-errors", action="store_true")
    parser.add_argument("--output-dir", default=".")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--rounds", type=int, default=0, help="extra timed rounds")
    return parser


def main(argv=None) -> int:
    """Run the check; return 0 when every comparison passed, 1 otherwise."""
    parser = _parser()
    args = parser.parse_args(argv)
    if not is_power_of_two(args.size) or args.size < _MIN_SIZE:
        parser.error(f"--size must be a power of 2 of at least {_MIN_SIZE}")
    if args.rounds < 0:
        parser.error("--rounds must not be negative")

    n = args.size
    geometry = KernelGeometry(rows=n, cols=n)
    rng = np.random.default_rng(args.seed)

    pixel_scale = 10e-3 / (n / 2)
    delkx = 2.0 * math.pi / (pixel_scale * n)
    k = 2.0 * math.pi / args.wavelength
    k_2 = k * k

    def sample() -> np.ndarray:
        return generate_star_gaussian(
            n, args.sigma, args.intensity, args.noise_stddev, not args.no_noise, rng
        )

    def reference(data: np.ndarray) -> np.ndarray:
        return angular_spectrum_propagation(data, args.wavelength, args.distance, pixel_scale)

    def kernel(data: np.ndarray) -> np.ndarray:
        return angular_spectrum(True, args.distance, k_2, delkx, data, geometry)

    print(f"{STR_INFO}starting angular spectrum propagation kernel check")
    data = sample()
    print(f"{STR_PASSED}generate_star_gaussian")
    expected = reference(data)
    print(f"{STR_INFO}Testing data generated")
    actual = kernel(data)
    print(f"{STR_PASSED}kernel run")

    hardware, software = save_outputs(expected, actual, args.output_dir)
    print(f"{STR_INFO}Saved results to {software} and {hardware}")
    all_passed = validate_results(
        expected, actual, args.tolerance, args.print_errors
    ).passed

    if args.rounds == 0:
        return 0 if all_passed else 1

    kernel_times = TimingStats()
    reference_times = TimingStats()
    print(f"{STR_INFO}RUN KERNEL NUMBER OF TIMES = {args.rounds}")
    for r in range(args.rounds):
        print(f"{STR_INFO}STARTING ROUND : {r}")
        data = sample()

        start = time.perf_counter()
        expected = reference(data)
        reference_times.add(time.perf_counter() - start)

        start = time.perf_counter()
        actual = kernel(data)
        kernel_times.add(time.perf_counter() - start)

        print(
            f"Round {r + 1} Run Time:\n"
            "-------------------------\n"
            f"Matrix Dimension Size =   ({n}, {n})\n"
            f"Reference Time        =   {reference_times.samples[-1]:f}\n"
            f"Kernel Time           =   {kernel_times.samples[-1]:f}"
        )
        report = validate_results(expected, actual, args.tolerance, args.print_errors)
        all_passed = all_passed and report.passed

    print(
        _FINAL_RESULTS.format(
            rows=n,
            cols=n,
            rounds=args.rounds,
            kg=kernel_times.geometric_mean(),
            cg=reference_times.geometric_mean(),
            ka=kernel_times.arithmetic_mean(),
            ca=reference_times.arithmetic_mean(),
        )
    )
    return 0 if all_passed else 1


if __name__ == "__main__":
    raise SystemExit(main())