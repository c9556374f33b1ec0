# angspec

Propagate a sampled square 2D complex wavefront through free space with the
angular spectrum method, and check a streaming model of a tiled, vectorised
FFT pipeline against that reference.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `angspec.fft`: radix-2 Cooley–Tukey transforms `fft`, `fft_recursive` and
  `fft2d` (forward uses `exp(-2πik/n)` twiddles; the inverse is unnormalised
  unless `scale` is set), the quadrant swaps `fftshift2d` and `ifftshift2d`,
  and test-signal generators that return `(data, transform)` pairs:
  `fft_data_generator` (sum of sines), `fft_random_data_generator` and
  `fft2d_random_data_generator` (uniform on [100, 1000)). Lengths must be
  powers of two, otherwise `ValueError` is raised; `is_power_of_two` tells
  whether a length qualifies.
- `angspec.propagation`: `angular_spectrum_propagation` (returns a new
  array), the transfer-function builders `construct_transform_function` and
  `construct_ishifted_transform_function`, `propagate` and
  `propagate_ishifted`, which return the spectrum multiplied by the centred or
  quadrant-swapped transfer function, `centered_frequencies` for the bin-centred
  frequency grid, and `generate_star_gaussian`, which builds a bright central
  Gaussian with a faint offset companion and optional Gaussian noise.
  Evanescent frequencies (`kx² + ky² > k²`) are zeroed; the `1/n²` FFT
  normalisation is carried by the transfer function.
- `angspec.streams`: how the pipeline moves a matrix between memory and its
  FFT stages — row-major bursts, column-vector tiles, and the shifted orders
  that fold the quadrant swap into the read and the write. Matrix size and
  stream widths live in the frozen dataclass `KernelGeometry` (defaults
  1024 × 1024, bursts of 8, column vectors of 4).
- `angspec.kernel`: the three-stage pipeline `f1` (shifted read, row FFT),
  `f2` (column FFT, multiplication by the phase factors of
  `compute_tf_phase_element` in `propagate_wave`, inverse column FFT) and
  `f3` (inverse row FFT, shifted write), built from `fft_row_top` and
  `fft_col_top`. `angular_spectrum` runs all three.
- `angspec.validation`: `approx_equal` and `validate_results` (prints a
  summary and returns a `ValidationReport` with the failure count, mismatch
  indices and average relative errors), `save_outputs`, which writes
  `hardware_output.txt` and `software_output.txt`, and `TimingStats` for
  arithmetic and geometric means of run times.

## Example

```python
import math

from angspec.kernel import angular_spectrum
from angspec.propagation import angular_spectrum_propagation, generate_star_gaussian
from angspec.streams import KernelGeometry
from angspec.validation import validate_results

n = 256
wavelength = 500e-9
distance = 1.0
pixel_scale = 10e-3 / (n / 2)

field = generate_star_gaussian(n, 10.0, 1e5, 0.01, True, None)
expected = angular_spectrum_propagation(field, wavelength, distance, pixel_scale)

k = 2 * math.pi / wavelength
delkx = 2 * math.pi / (pixel_scale * n)
result = angular_spectrum(True, distance, k * k, delkx, field, KernelGeometry(rows=n, cols=n))

report = validate_results(expected, result, 1e-2, False)
print(report.passed, report.failed_count)
```

## Command line

```
angspec
```

generates a star scene, propagates it with both the reference and the
pipeline model, writes the two results to `software_output.txt` and
`hardware_output.txt` in the output directory, and prints the validation
summary. The exit status is 0 when every comparison passed and 1 otherwise.

Options: `--size` (power of two, at least 16; default 1024), `--sigma`,
`--intensity`, `--noise-stddev`, `--no-noise`, `--wavelength`, `--distance`,
`--tolerance`, `--print-errors`, `--output-dir`, `--seed`, and `--rounds`
(extra timed rounds, followed by a summary of arithmetic and geometric mean
run times).

## What it does not do

The pipeline in `angspec.kernel` is a numpy model of the data flow: it runs
on the CPU and reproduces the orderings and arithmetic of the stages. The
package does not drive an accelerator device, load a compiled kernel image,
or measure device transfer times.