"""Angular spectrum propagation of 2D complex wavefronts and a streaming pipeline model."""

__version__ = "0.1.0"
__all__ = ["cli", "fft", "kernel", "propagation", "streams", "validation"]