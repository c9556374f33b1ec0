"""Data movement between memory and the FFT stages of the kernel.

A matrix lives in memory in row-major order. The row-wise FFT stage reads it
as *bursts*: runs of ``burst_size`` consecutive elements. The column-wise
stage reads it as *column vectors*: ``vector_size_col`` neighbouring columns
of one row, sent tile by tile, top to bottom. Streams are modelled as 2D
arrays with one burst or vector per row, in stream order.

The shifted streams read and write the matrix with its diagonal quadrants
swapped, so the quadrant shift costs no extra pass over memory.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

__all__ = [
    "KernelGeometry",
    "shifted_stream_to_first_fft",
    "shifted_stream_to_first_fft_optimized",
    "shifted_resolve_stream_from_second_fft",
    "shifted_resolve_stream_from_second_fft_optimized",
    "stream_to_fft_row",
    "stream_from_fft_row",
    "stream_to_fft_col",
    "stream_from_fft_col",
    "stream_from_fft_row_to_fft_col",
    "stream_from_fft_col_to_fft_row",
]


@dataclass(frozen=True)
class KernelGeometry:
    """Matrix dimensions and the widths of the two stream kinds."""

    rows: int = 1024
    cols: int = 1024
    burst_size: int = 8
    vector_size_col: int = 4

    def __post_init__(self) -> None:
        for name in ("rows", "cols", "burst_size", "vector_size_col"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.rows % 2:
            raise ValueError("rows must be even")
        if self.cols % (2 * self.burst_size):
            raise ValueError("half a row must hold a whole number of bursts")
        if self.cols % self.vector_size_col:
            raise ValueError("cols must be a multiple of vector_size_col")

    @property
    def size(self) -> int:
        """Number of elements in the matrix."""
        return self.rows * self.cols

    def burst_count(self) -> int:
        """Number of bursts needed to carry the whole matrix."""
        return self.size // self.burst_size


def _row_bursts(geometry: KernelGeometry) -> int:
    return geometry.cols // geometry.burst_size


def _as_matrix(matrix, geometry: KernelGeometry) -> np.ndarray:
    arr = np.asarray(matrix, dtype=np.complex128)
    if arr.shape != (geometry.rows, geometry.cols):
        raise ValueError(
            f"matrix must have shape ({geometry.rows}, {geometry.cols}), got {arr.shape}"
        )
    return arr


def _as_stream(items, count: int, width: int, kind: str) -> np.ndarray:
    arr = np.asarray(items, dtype=np.complex128)
    if arr.shape != (count, width):
        raise ValueError(
            f"{kind} stream must have shape ({count}, {width}), got {arr.shape}"
        )
    return arr


def _memory_bursts(matrix, geometry: KernelGeometry) -> np.ndarray:
    return _as_matrix(matrix, geometry).reshape(-1, geometry.burst_size)


def _shifted_burst_order(geometry: KernelGeometry) -> Iterator[int]:
    """Burst addresses of the quadrant-swapped matrix, row by row."""
    row_bursts = _row_bursts(geometry)
    half = row_bursts // 2
    half_rows = geometry.rows // 2
    for row in (*range(half_rows, geometry.rows), *range(half_rows)):
        base = row * row_bursts
        yield from range(base + half, base + row_bursts)
        yield from range(base, base + half)


def _shifted_burst_order_optimized(geometry: KernelGeometry) -> Iterator[int]:
    """The same addresses, walked with a single running address per half."""
    row_bursts = _row_bursts(geometry)
    half = row_bursts // 2
    half_matrix = geometry.burst_count() // 2
    for start in (half_matrix + half, half):
        address = start
        step_back = True
        count = 0
        half_rows_done = 0
        while half_rows_done < geometry.rows:
            yield address
            address += 1
            count += 1
            if count == half:
                count = 0
                half_rows_done += 1
                address += -row_bursts if step_back else row_bursts
                step_back = not step_back


def _read_in_order(matrix, geometry: KernelGeometry, order: Iterator[int]) -> np.ndarray:
    bursts = _memory_bursts(matrix, geometry)
    return bursts[np.fromiter(order, dtype=np.int64)]


def _write_in_order(bursts, geometry: KernelGeometry, order: Iterator[int]) -> np.ndarray:
    incoming = _as_stream(bursts, geometry.burst_count(), geometry.burst_size, "burst")
    memory = np.empty_like(incoming)
    memory[np.fromiter(order, dtype=np.int64)] = incoming
    return memory.reshape(geometry.rows, geometry.cols)


def shifted_stream_to_first_fft(matrix, geometry: KernelGeometry) -> np.ndarray:
    """Stream the matrix as bursts with its diagonal quadrants swapped."""
    return _read_in_order(matrix, geometry, _shifted_burst_order(geometry))


def shifted_stream_to_first_fft_optimized(matrix, geometry: KernelGeometry) -> np.ndarray:
    """Single-loop form of :func:`shifted_stream_to_first_fft`; same output."""
    return _read_in_order(matrix, geometry, _shifted_burst_order_optimized(geometry))


def shifted_resolve_stream_from_second_fft(bursts, geometry: KernelGeometry) -> np.ndarray:
    """Write a shifted burst stream back to memory, undoing the quadrant swap."""
    return _write_in_order(bursts, geometry, _shifted_burst_order(geometry))


def shifted_resolve_stream_from_second_fft_optimized(
    bursts, geometry: KernelGeometry
) -> np.ndarray:
    """Single-loop form of :func:`shifted_resolve_stream_from_second_fft`."""
    return _write_in_order(bursts, geometry, _shifted_burst_order_optimized(geometry))


def stream_to_fft_row(matrix, geometry: KernelGeometry) -> np.ndarray:
    """Stream the matrix as bursts in plain row-major order."""
    return _memory_bursts(matrix, geometry).copy()


def stream_from_fft_row(bursts, geometry: KernelGeometry) -> np.ndarray:
    """Store a row-major burst stream as a matrix."""
    incoming = _as_stream(bursts, geometry.burst_count(), geometry.burst_size, "burst")
    return incoming.reshape(geometry.rows, geometry.cols).copy()


def stream_to_fft_col(matrix, geometry: KernelGeometry) -> np.ndarray:
    """Stream the matrix as column vectors, tile by tile, top to bottom."""
    arr = _as_matrix(matrix, geometry)
    width = geometry.vector_size_col
    tiles = arr.reshape(geometry.rows, geometry.cols // width, width)
    return tiles.transpose(1, 0, 2).reshape(-1, width).copy()


def stream_from_fft_col(vectors, geometry: KernelGeometry) -> np.ndarray:
    """Store a column-vector stream back as a matrix."""
    width = geometry.vector_size_col
    incoming = _as_stream(vectors, geometry.size // width, width, "column vector")
    tiles = incoming.reshape(geometry.cols // width, geometry.rows, width)
    return tiles.transpose(1, 0, 2).reshape(geometry.rows, geometry.cols).copy()


def stream_from_fft_row_to_fft_col(bursts, geometry: KernelGeometry) -> np.ndarray:
    """Turn a row-major burst stream into a column-vector stream."""
    return stream_to_fft_col(stream_from_fft_row(bursts, geometry), geometry)


def stream_from_fft_col_to_fft_row(vectors, geometry: KernelGeometry) -> np.ndarray:
    """Turn a column-vector stream into a row-major burst stream."""
    return stream_to_fft_row(stream_from_fft_col(vectors, geometry), geometry)