"""Angular spectrum propagation of square complex wavefronts.

The transfer function is ``H(kx, ky) = exp(i * kz * distance) / n**2`` with
``kz = sqrt(k**2 - kx**2 - ky**2)`` and ``k = 2*pi / wavelength``. Spatial
frequencies where ``kx**2 + ky**2 > k**2`` (evanescent waves) are zeroed.
The ``1 / n**2`` factor carries the normalisation of the 2D FFT pair, so the
transforms themselves are applied unscaled.
"""

from __future__ import annotations

import math

import numpy as np

from .fft import fft2d, fftshift2d

__all__ = [
    "centered_frequencies",
    "angular_spectrum_propagation",
    "propagate_ishifted",
    "propagate",
    "construct_transform_function",
    "construct_ishifted_transform_function",
    "generate_star_gaussian",
]

_TWO_PI = 2.0 * math.pi


def centered_frequencies(n: int, delkx: float) -> np.ndarray:
    """Return the ``n`` bin-centred spatial frequencies spaced by ``delkx``."""
    if n < 0:
        raise ValueError("n must not be negative")
    return ((-n / 2.0 + np.arange(n)) + 0.5) * delkx


def _square(wavefront) -> np.ndarray:
    arr = np.asarray(wavefront, dtype=np.complex128)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError("wavefront must be a square two-dimensional array")
    return arr


def _transfer(
    n: int, wavelength: float, distance: float, pixel_scale: float, mod: bool
) -> tuple[np.ndarray, np.ndarray]:
    """Return the centred transfer function and its evanescent mask."""
    delkx = _TWO_PI / (pixel_scale * n)
    k = _TWO_PI / wavelength
    k_2 = k * k
    scale = 1.0 / (float(n) * float(n))

    kxy = centered_frequencies(n, delkx)
    kxy_sum = kxy[:, None] ** 2 + kxy[None, :] ** 2
    evanescent = kxy_sum > k_2

    kz = np.sqrt(np.where(evanescent, 0.0, k_2 - kxy_sum))
    kz_d = kz * distance
    if mod:
        kz_d = np.fmod(kz_d, _TWO_PI)
    tf = scale * np.exp(1j * kz_d)
    tf[evanescent] = 0.0
    return tf, evanescent


def _ishifted_transfer(
    n: int, wavelength: float, distance: float, pixel_scale: float, mod: bool
) -> tuple[np.ndarray, np.ndarray]:
    """Return the quadrant-swapped transfer function and the untouched mask.

    The quadrants are filled in pairs (top-left then top-right, bottom-left
    then bottom-right); an evanescent first element of a pair leaves the
    second element of that pair untouched. Rows and columns beyond the even
    part of an odd-sized grid are never visited either.
    """
    tf, evanescent = _transfer(n, wavelength, distance, pixel_scale, mod)
    shifted = fftshift2d(tf)
    shifted_ev = fftshift2d(evanescent.astype(np.complex128)).real != 0

    h = n // 2
    untouched = np.ones((n, n), dtype=bool)
    untouched[: 2 * h, : 2 * h] = False
    untouched[:h, h : 2 * h] = shifted_ev[:h, :h]
    untouched[h : 2 * h, h : 2 * h] = shifted_ev[h : 2 * h, :h]
    return shifted, untouched


def construct_transform_function(
    n: int,
    wavelength: float,
    distance: float,
    pixel_scale: float,
    mod: bool = False,
) -> np.ndarray:
    """Build the centred ``n x n`` transfer function.

    With ``mod`` the phase is reduced modulo ``2*pi`` before exponentiation.
    """
    tf, _ = _transfer(n, wavelength, distance, pixel_scale, mod)
    return tf


def construct_ishifted_transform_function(
    n: int,
    wavelength: float,
    distance: float,
    pixel_scale: float,
    mod: bool = False,
) -> np.ndarray:
    """Build the transfer function with its quadrants already swapped.

    Entries the fill order never reaches are left at zero.
    """
    shifted, untouched = _ishifted_transfer(n, wavelength, distance, pixel_scale, mod)
    shifted[untouched] = 0.0
    return shifted


def propagate(
    wavefront,
    wavelength: float,
    distance: float,
    pixel_scale: float,
    mod: bool = False,
) -> np.ndarray:
    """Multiply a centred spectrum by the centred transfer function."""
    arr = _square(wavefront)
    tf, _ = _transfer(arr.shape[0], wavelength, distance, pixel_scale, mod)
    return arr * tf


def propagate_ishifted(
    wavefront,
    wavelength: float,
    distance: float,
    pixel_scale: float,
    mod: bool = False,
) -> np.ndarray:
    """Multiply an unshifted spectrum by the quadrant-swapped transfer function.

    Entries the fill order never reaches keep their input value.
    """
    arr = _square(wavefront)
    shifted, untouched = _ishifted_transfer(
        arr.shape[0], wavelength, distance, pixel_scale, mod
    )
    return np.where(untouched, arr, arr * shifted)


def angular_spectrum_propagation(
    wavefront,
    wavelength: float,
    distance: float,
    pixel_scale: float,
) -> np.ndarray:
    """Propagate a square wavefront over ``distance`` in free space.

    The side length must be a power of two. Returns a new array.
    """
    arr = _square(wavefront)
    spectrum = fft2d(fftshift2d(arr), invert=False, scale=False)
    spectrum = propagate_ishifted(spectrum, wavelength, distance, pixel_scale, False)
    return fftshift2d(fft2d(spectrum, invert=True, scale=False))


def generate_star_gaussian(
    size: int,
    sigma: float,
    intensity: float,
    noise_stddev: float,
    noise: bool = True,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Return a ``size x size`` image of a bright star with a faint companion.

    The main Gaussian (``sigma``, ``intensity``) sits at the centre; the
    companion (``sigma / 2``, ``intensity / 8``) is offset by ``size // 8``
    on both axes. With ``noise`` Gaussian noise of ``noise_stddev`` is added
    to the real and imaginary parts.
    """
    if size < 0:
        raise ValueError("size must not be negative")
    center = size // 2
    x = np.arange(size)[:, None]
    y = np.arange(size)[None, :]

    def gaussian(offset: int, local_sigma: float, local_intensity: float) -> np.ndarray:
        dist_sq = (x - center + offset) ** 2 + (y - center + offset) ** 2
        return local_intensity * np.exp(-dist_sq / (2.0 * local_sigma * local_sigma))

    image = gaussian(0, sigma, intensity) + gaussian(size // 8, sigma / 2, intensity / 8)
    arr = image.astype(np.complex128)

    if noise:
        gen = rng if rng is not None else np.random.default_rng()
        shape = (size, size)
        arr = arr + gen.normal(0.0, noise_stddev, shape) + 1j * gen.normal(
            0.0, noise_stddev, shape
        )
    return arr