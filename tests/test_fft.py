import numpy as np
import pytest

from angspec.fft import (
    fft,
    fft2d,
    fft2d_random_data_generator,
    fft_data_generator,
    fft_random_data_generator,
    fft_recursive,
    fftshift2d,
    ifftshift2d,
    is_power_of_two,
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def _random_vector(rng, n):
    return rng.normal(size=n) + 1j * rng.normal(size=n)


@pytest.mark.parametrize("n", [1, 2, 4, 8, 1024])
def test_is_power_of_two_true(n):
    assert is_power_of_two(n) is True


@pytest.mark.parametrize("n", [0, -4, 3, 6, 12, 1000])
def test_is_power_of_two_false(n):
    assert is_power_of_two(n) is False


@pytest.mark.parametrize("n", [1, 2, 8, 64])
def test_fft_matches_numpy_forward(rng, n):
    data = _random_vector(rng, n)
    np.testing.assert_allclose(fft(data), np.fft.fft(data), atol=1e-9)


def test_fft_inverse_unscaled_is_n_times_ifft(rng):
    data = _random_vector(rng, 16)
    np.testing.assert_allclose(
        fft(data, invert=True), 16 * np.fft.ifft(data), atol=1e-9
    )


def test_fft_round_trip_with_scale(rng):
    data = _random_vector(rng, 32)
    back = fft(fft(data), invert=True, scale=True)
    np.testing.assert_allclose(back, data, atol=1e-9)


def test_fft_scale_ignored_for_forward(rng):
    data = _random_vector(rng, 8)
    np.testing.assert_allclose(fft(data, scale=True), fft(data), atol=1e-12)


def test_fft_impulse_gives_flat_spectrum():
    out = fft([1, 0, 0, 0, 0, 0, 0, 0])
    np.testing.assert_allclose(out, np.ones(8), atol=1e-12)


def test_fft_does_not_modify_input(rng):
    data = _random_vector(rng, 8)
    original = data.copy()
    fft(data)
    np.testing.assert_array_equal(data, original)


def test_fft_rejects_non_power_of_two():
    with pytest.raises(ValueError, match="power of 2"):
        fft(np.ones(6))


def test_fft_rejects_empty():
    with pytest.raises(ValueError):
        fft([])


@pytest.mark.parametrize("invert", [False, True])
@pytest.mark.parametrize("scale", [False, True])
def test_fft_recursive_matches_iterative(rng, invert, scale):
    data = _random_vector(rng, 32)
    np.testing.assert_allclose(
        fft_recursive(data, invert, scale), fft(data, invert, scale), atol=1e-9
    )


def test_fft_recursive_rejects_non_power_of_two():
    with pytest.raises(ValueError, match="power of 2"):
        fft_recursive(np.ones(5))


def test_fft2d_matches_numpy(rng):
    data = rng.normal(size=(8, 16)) + 1j * rng.normal(size=(8, 16))
    np.testing.assert_allclose(fft2d(data), np.fft.fft2(data), atol=1e-9)


def test_fft2d_inverse_unscaled(rng):
    data = rng.normal(size=(4, 8)) + 1j * rng.normal(size=(4, 8))
    np.testing.assert_allclose(
        fft2d(data, invert=True), 32 * np.fft.ifft2(data), atol=1e-9
    )


def test_fft2d_round_trip(rng):
    data = rng.normal(size=(16, 16)) + 1j * rng.normal(size=(16, 16))
    back = fft2d(fft2d(data), invert=True, scale=True)
    np.testing.assert_allclose(back, data, atol=1e-9)


def test_fft2d_rejects_bad_columns():
    with pytest.raises(ValueError, match="n must be a power of 2"):
        fft2d(np.ones((4, 6)))


def test_fft2d_rejects_bad_rows():
    with pytest.raises(ValueError, match="m must be a power of 2"):
        fft2d(np.ones((6, 4)))


def test_fftshift2d_matches_numpy_for_even_shape(rng):
    data = rng.normal(size=(4, 8)) + 0j
    np.testing.assert_array_equal(fftshift2d(data), np.fft.fftshift(data))


def test_fftshift2d_moves_origin_to_centre():
    data = np.zeros((4, 4), dtype=complex)
    data[0, 0] = 1
    shifted = fftshift2d(data)
    assert shifted[2, 2] == 1
    assert np.count_nonzero(shifted) == 1


def test_ifftshift2d_undoes_fftshift2d(rng):
    data = rng.normal(size=(8, 8)) + 1j * rng.normal(size=(8, 8))
    np.testing.assert_array_equal(ifftshift2d(fftshift2d(data)), data)


def test_fftshift2d_returns_copy(rng):
    data = rng.normal(size=(4, 4)) + 0j
    original = data.copy()
    fftshift2d(data)
    np.testing.assert_array_equal(data, original)


def test_fft_data_generator_single_tone():
    samples, spectrum = fft_data_generator(64, [4.0], [2.0], [0.0, 1.0])
    t = np.arange(64) / 64
    np.testing.assert_allclose(samples.real, 2.0 * np.sin(2 * np.pi * 4 * t), atol=1e-12)
    np.testing.assert_allclose(samples.imag, 0.0)
    np.testing.assert_allclose(spectrum, np.fft.fft(samples), atol=1e-9)
    peak = int(np.argmax(np.abs(spectrum[:32])))
    assert peak == 4


def test_fft_data_generator_inverse_scaled():
    samples, out = fft_data_generator(
        16, [1.0, 3.0], [1.0, 0.5], [0.0, 2.0], invert=True, scale=True
    )
    np.testing.assert_allclose(out, np.fft.ifft(samples), atol=1e-12)


def test_fft_data_generator_errors():
    with pytest.raises(ValueError, match="power of 2"):
        fft_data_generator(10, [1.0], [1.0], [0.0, 1.0])
    with pytest.raises(ValueError, match="amplitudes"):
        fft_data_generator(8, [1.0, 2.0], [1.0], [0.0, 1.0])
    with pytest.raises(ValueError, match="time_range"):
        fft_data_generator(8, [1.0], [1.0], [0.0, 1.0, 2.0])


def test_fft_random_data_generator(rng):
    data, out = fft_random_data_generator(32, rng=rng)
    assert data.shape == (32,)
    assert np.all((data.real >= 100) & (data.real <= 1000))
    assert np.all((data.imag >= 100) & (data.imag <= 1000))
    np.testing.assert_allclose(out, np.fft.fft(data), rtol=1e-9)


def test_fft_random_data_generator_is_reproducible():
    a, _ = fft_random_data_generator(8, rng=np.random.default_rng(7))
    b, _ = fft_random_data_generator(8, rng=np.random.default_rng(7))
    np.testing.assert_array_equal(a, b)


def test_fft_random_data_generator_rejects_bad_size():
    with pytest.raises(ValueError, match="power of 2"):
        fft_random_data_generator(12)


def test_fft2d_random_data_generator(rng):
    data, out = fft2d_random_data_generator(4, 8, invert=True, scale=True, rng=rng)
    assert data.shape == (4, 8)
    assert np.all((data.real >= 100) & (data.real <= 1000))
    np.testing.assert_allclose(out, np.fft.ifft2(data), rtol=1e-9)


def test_fft2d_random_data_generator_errors():
    with pytest.raises(ValueError, match="n must be a power of 2"):
        fft2d_random_data_generator(4, 3)
    with pytest.raises(ValueError, match="m must be a power of 2"):
        fft2d_random_data_generator(3, 4)