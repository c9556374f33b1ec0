"""Reference FFT routines used to check the propagation kernels.

All transforms follow the sign convention of the iterative Cooley-Tukey
implementation: the forward transform uses ``exp(-2*pi*i*k/n)`` twiddles and
the inverse transform uses ``exp(+2*pi*i*k/n)``. The inverse transform is left
unnormalised unless ``scale`` is set.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

__all__ = [
    "is_power_of_two",
    "fft",
    "fft_recursive",
    "fft2d",
    "fftshift2d",
    "ifftshift2d",
    "fft_data_generator",
    "fft_random_data_generator",
    "fft2d_random_data_generator",
]


def is_power_of_two(n: int) -> bool:
    """Return True if ``n`` is a positive integral power of two (1 included)."""
    n = int(n)
    return n >= 1 and (n & (n - 1)) == 0


def _bit_reversal_indices(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def _butterflies(x: np.ndarray, invert: bool) -> np.ndarray:
    """Iterative radix-2 transform along the last axis of ``x``."""
    n = x.shape[-1]
    lead = x.shape[:-1]
    x = x[..., _bit_reversal_indices(n)]
    sign = 1.0 if invert else -1.0
    length = 2
    while length <= n:
        half = length // 2
        w = np.exp(sign * 2j * np.pi * np.arange(half) / length)
        blocks = x.reshape(*lead, n // length, length)
        u = blocks[..., :half]
        v = blocks[..., half:] * w
        x = np.concatenate([u + v, u - v], axis=-1).reshape(*lead, n)
        length *= 2
    return x


def _as_vector(a) -> np.ndarray:
    arr = np.asarray(a, dtype=np.complex128)
    if arr.ndim != 1:
        raise ValueError("data must be one-dimensional")
    return arr


def _as_matrix(a) -> np.ndarray:
    arr = np.asarray(a, dtype=np.complex128)
    if arr.ndim != 2:
        raise ValueError("data must be two-dimensional")
    return arr


def fft(a, invert: bool = False, scale: bool = False) -> np.ndarray:
    """Iterative 1D Cooley-Tukey FFT; returns a new complex array.

    With ``invert`` the inverse transform is computed, divided by the length
    only if ``scale`` is also set.
    """
    arr = _as_vector(a)
    n = arr.shape[0]
    if not is_power_of_two(n):
        raise ValueError("Data array length must be a power of 2")
    out = _butterflies(arr, invert)
    if invert and scale:
        out = out / n
    return out


def fft_recursive(a, invert: bool = False, scale: bool = False) -> np.ndarray:
    """Recursive radix-2 FFT; same conventions as :func:`fft`."""
    arr = _as_vector(a)
    n = arr.shape[0]
    if not is_power_of_two(n):
        raise ValueError("Data vector length must be a power of 2")
    if n == 1:
        return arr.copy()

    even = fft_recursive(arr[0::2], invert, scale)
    odd = fft_recursive(arr[1::2], invert, scale)
    ang = -2.0 * np.pi / n * (-1.0 if invert else 1.0)
    w = np.exp(1j * ang * np.arange(n // 2))
    out = np.concatenate([even + w * odd, even - w * odd])
    if invert and scale:
        out = out / 2
    return out


def fft2d(a, invert: bool = False, scale: bool = False) -> np.ndarray:
    """2D FFT of a matrix: row-wise transforms, then column-wise transforms.

    With ``invert`` and ``scale`` the result is divided by ``m * n``.
    """
    arr = _as_matrix(a)
    m, n = arr.shape
    if not is_power_of_two(n):
        raise ValueError("n must be a power of 2")
    if not is_power_of_two(m):
        raise ValueError("m must be a power of 2")
    rows_done = _butterflies(arr, invert)
    out = _butterflies(rows_done.T, invert).T.copy()
    if invert and scale:
        out = out / (m * n)
    return out


def _swap_quadrants(a) -> np.ndarray:
    arr = np.array(a, dtype=np.complex128, copy=True)
    if arr.ndim != 2:
        raise ValueError("data must be two-dimensional")
    m, n = arr.shape
    hm, hn = m // 2, n // 2
    top_left = arr[:hm, :hn].copy()
    top_right = arr[:hm, hn:2 * hn].copy()
    arr[:hm, :hn] = arr[hm:2 * hm, hn:2 * hn]
    arr[hm:2 * hm, hn:2 * hn] = top_left
    arr[:hm, hn:2 * hn] = arr[hm:2 * hm, :hn]
    arr[hm:2 * hm, :hn] = top_right
    return arr


def fftshift2d(a) -> np.ndarray:
    """Swap diagonal quadrants, moving the zero frequency to the centre."""
    return _swap_quadrants(a)


def ifftshift2d(a) -> np.ndarray:
    """Undo :func:`fftshift2d`; for even dimensions it is the same swap."""
    return _swap_quadrants(a)


def _check_signal_spec(
    frequencies: Sequence[float],
    amplitudes: Sequence[float],
    time_range: Sequence[float],
) -> None:
    if len(frequencies) != len(amplitudes):
        raise ValueError("frequencies vector size must match vector amplitudes")
    if len(time_range) != 2:
        raise ValueError(
            "time_range vector must have only two elements, "
            "starting point and an ending point"
        )


def fft_data_generator(
    size: int,
    frequencies: Sequence[float],
    amplitudes: Sequence[float],
    time_range: Sequence[float],
    invert: bool = False,
    scale: bool = False,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample a sum of sines and return ``(samples, transform_of_samples)``.

    Sample ``i`` is taken at ``start + i * (end - start) / size``.
    """
    if not is_power_of_two(size):
        raise ValueError("Data vector length must be a power of 2")
    _check_signal_spec(frequencies, amplitudes, time_range)

    start, end = float(time_range[0]), float(time_range[1])
    t = start + np.arange(size) * ((end - start) / size)
    freqs = np.asarray(frequencies, dtype=np.float64)
    amps = np.asarray(amplitudes, dtype=np.float64)
    signal = np.zeros(size, dtype=np.float64)
    for f, amp in zip(freqs, amps):
        signal += amp * np.sin(2.0 * np.pi * f * t)
    samples = signal.astype(np.complex128)
    return samples, fft(samples, invert, scale)


def _generator(rng) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def fft_random_data_generator(
    n: int,
    invert: bool = False,
    scale: bool = False,
    rng: np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Random complex data ~ U(100, 1000) and its 1D transform."""
    if not is_power_of_two(n):
        raise ValueError("n must be a power of 2")
    gen = _generator(rng)
    data = gen.uniform(100.0, 1000.0, n) + 1j * gen.uniform(100.0, 1000.0, n)
    return data, fft(data, invert, scale)


def fft2d_random_data_generator(
    m: int,
    n: int,
    invert: bool = False,
    scale: bool = False,
    rng: np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Random complex ``m x n`` matrix ~ U(100, 1000) and its 2D transform."""
    if not is_power_of_two(n):
        raise ValueError("n must be a power of 2")
    if not is_power_of_two(m):
        raise ValueError("m must be a power of 2")
    gen = _generator(rng)
    shape = (m, n)
    data = gen.uniform(100.0, 1000.0, shape) + 1j * gen.uniform(100.0, 1000.0, shape)
    return data, fft2d(data, invert, scale)