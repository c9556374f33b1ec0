"""Streaming model of the angular spectrum propagation kernel.

The kernel runs in three stages over a square complex matrix:

* ``f1`` streams the matrix with its quadrants swapped and applies a
  row-wise FFT;
* ``f2`` applies a column-wise FFT, multiplies each element by the
  quadrant-swapped transfer function and applies the inverse column FFT;
* ``f3`` applies the inverse row FFT and writes the result back with the
  quadrant swap undone.

``direction`` selects a forward transform when true; the second transform of
each axis runs in the opposite direction. The FFT stages are unscaled: the
factor ``1 / (rows * cols)`` is carried by the transfer function.
"""

from __future__ import annotations

import math

import numpy as np

from .fft import fft
from .propagation import centered_frequencies
from .streams import (
    KernelGeometry,
    shifted_resolve_stream_from_second_fft_optimized,
    shifted_stream_to_first_fft_optimized,
    stream_from_fft_col,
    stream_from_fft_row,
    stream_to_fft_col,
    stream_to_fft_row,
)

__all__ = [
    "compute_tf_phase_element",
    "propagate_wave",
    "fft_row_top",
    "fft_col_top",
    "f1",
    "f2",
    "f3",
    "angular_spectrum",
]

_TWO_PI = 2.0 * math.pi
_DEFAULT_SCALE = 1.0 / KernelGeometry().size


def compute_tf_phase_element(kx, ky, k_2, distance, scale=_DEFAULT_SCALE):
    """Return ``scale * exp(i * (kz * distance mod 2*pi))``.

    ``kz = sqrt(k_2 - kx**2 - ky**2)``. Accepts scalars or broadcastable
    arrays. Evanescent frequencies (``kx**2 + ky**2 > k_2``) are not masked
    and yield NaN.
    """
    kx = np.asarray(kx, dtype=np.float64)
    ky = np.asarray(ky, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        kz = np.sqrt(k_2 - (kx * kx + ky * ky))
        kzd = np.fmod(kz * distance, _TWO_PI)
        result = scale * (np.cos(kzd) + 1j * np.sin(kzd))
    return result[()] if result.ndim == 0 else result


def _stream(items, count: int, width: int, kind: str) -> np.ndarray:
    arr = np.asarray(items, dtype=np.complex128)
    if arr.shape != (count, width):
        raise ValueError(
            f"{kind} stream must have shape ({count}, {width}), got {arr.shape}"
        )
    return arr


def _geometry_for(matrix, geometry: KernelGeometry | None) -> KernelGeometry:
    if geometry is not None:
        return geometry
    shape = np.shape(matrix)
    if len(shape) != 2:
        raise ValueError("matrix must be two-dimensional")
    return KernelGeometry(rows=shape[0], cols=shape[1])


def propagate_wave(distance, k_2, kxy, vectors, geometry: KernelGeometry) -> np.ndarray:
    """Multiply a column-vector stream by the quadrant-swapped transfer function.

    ``kxy`` holds the spatial frequencies used for both axes. Element
    ``(row, col)`` of the stream is paired with the frequencies of
    ``((row + rows/2) % rows, (col + cols/2) % cols)``.
    """
    width = geometry.vector_size_col
    if geometry.cols % (2 * width):
        raise ValueError("half a row must hold a whole number of column vectors")
    freqs = np.asarray(kxy, dtype=np.float64)
    if freqs.ndim != 1:
        raise ValueError("kxy must be one-dimensional")
    if freqs.shape[0] < max(geometry.rows, geometry.cols):
        raise ValueError("kxy must hold a frequency for every row and column")
    incoming = _stream(vectors, geometry.size // width, width, "column vector")

    tiles = geometry.cols // width
    half_tiles = tiles // 2
    half_rows = geometry.rows // 2
    tile_order = np.concatenate([np.arange(half_tiles, tiles), np.arange(half_tiles)])
    row_order = np.concatenate(
        [np.arange(half_rows, geometry.rows), np.arange(half_rows)]
    )
    col_index = tile_order[:, None] * width + np.arange(width)

    kx = freqs[row_order][None, :, None]
    ky = freqs[col_index][:, None, :]
    coeff = compute_tf_phase_element(kx, ky, k_2, distance, 1.0 / geometry.size)
    return coeff.reshape(-1, width) * incoming


def fft_row_top(direction: bool, bursts, geometry: KernelGeometry) -> np.ndarray:
    """Transform every row of a row-major burst stream; bursts stay in order."""
    incoming = _stream(
        bursts, geometry.burst_count(), geometry.burst_size, "burst"
    )
    matrix = incoming.reshape(geometry.rows, geometry.cols)
    done = np.array([fft(row, invert=not direction) for row in matrix])
    return done.reshape(-1, geometry.burst_size)


def fft_col_top(direction: bool, vectors, geometry: KernelGeometry) -> np.ndarray:
    """Transform every column carried by a column-vector stream."""
    width = geometry.vector_size_col
    incoming = _stream(vectors, geometry.size // width, width, "column vector")
    tiles = geometry.cols // width
    columns = (
        incoming.reshape(tiles, geometry.rows, width)
        .transpose(0, 2, 1)
        .reshape(-1, geometry.rows)
    )
    done = np.array([fft(column, invert=not direction) for column in columns])
    return (
        done.reshape(tiles, width, geometry.rows)
        .transpose(0, 2, 1)
        .reshape(-1, width)
    )


def f1(direction: bool, input_mat, geometry: KernelGeometry | None = None) -> np.ndarray:
    """Quadrant-swapped read followed by the row-wise FFT; returns a matrix."""
    geometry = _geometry_for(input_mat, geometry)
    bursts = shifted_stream_to_first_fft_optimized(input_mat, geometry)
    return stream_from_fft_row(fft_row_top(direction, bursts, geometry), geometry)


def f2(
    direction: bool,
    row_transformed,
    distance,
    k_2,
    kxy,
    geometry: KernelGeometry | None = None,
) -> np.ndarray:
    """Column FFT, propagation and inverse column FFT; returns a matrix."""
    geometry = _geometry_for(row_transformed, geometry)
    vectors = stream_to_fft_col(row_transformed, geometry)
    spectrum = fft_col_top(direction, vectors, geometry)
    propagated = propagate_wave(distance, k_2, kxy, spectrum, geometry)
    back = fft_col_top(not direction, propagated, geometry)
    return stream_from_fft_col(back, geometry)


def f3(
    direction: bool, col_transformed, geometry: KernelGeometry | None = None
) -> np.ndarray:
    """Inverse row FFT and a write that undoes the quadrant swap."""
    geometry = _geometry_for(col_transformed, geometry)
    bursts = stream_to_fft_row(col_transformed, geometry)
    done = fft_row_top(not direction, bursts, geometry)
    return shifted_resolve_stream_from_second_fft_optimized(done, geometry)


def angular_spectrum(
    direction: bool,
    distance,
    k_2,
    delkx,
    input_mat,
    geometry: KernelGeometry | None = None,
) -> np.ndarray:
    """Propagate ``input_mat`` over ``distance``; ``direction`` should be forward.

    ``k_2`` is the squared wavenumber and ``delkx`` the spacing of the
    spatial frequency bins. Returns the propagated matrix.
    """
    geometry = _geometry_for(input_mat, geometry)
    kxy = centered_frequencies(geometry.rows, delkx)
    stage1 = f1(direction, input_mat, geometry)
    stage2 = f2(direction, stage1, distance, k_2, kxy, geometry)
    return f3(direction, stage2, geometry)