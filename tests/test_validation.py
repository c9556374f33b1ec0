import numpy as np
import pytest

from angspec.validation import (
    TimingStats,
    ValidationReport,
    approx_equal,
    save_outputs,
    validate_results,
)


def test_approx_equal_identical():
    assert approx_equal(3.5 + 2.0j, 3.5 + 2.0j, 1e-2) is True


def test_approx_equal_small_values_pass():
    assert approx_equal(-5.0 - 7.0j, -9.0 - 1.0j, 1e-2) is True


def test_approx_equal_real_mismatch():
    assert approx_equal(100.0 + 0j, 105.0 + 0j, 1e-2) is False


def test_approx_equal_imag_mismatch():
    assert approx_equal(1.0 + 100.0j, 1.0 + 110.0j, 1e-2) is False


def test_approx_equal_close_values():
    assert approx_equal(1000.0 + 1000.0j, 1000.5 + 1000.5j, 1e-2) is True


def test_validate_identical_passes(capsys):
    data = np.array([[1 + 2j, 3 + 4j], [5 + 6j, 7 + 8j]])
    report = validate_results(data, data.copy(), 1e-2)
    assert isinstance(report, ValidationReport)
    assert report.passed
    assert report.failed_count == 0
    assert report.size == 4
    assert report.avg_real_relative_error == 0.0
    assert report.avg_imag_relative_error == 0.0
    assert "PASSED" in capsys.readouterr().out


def test_validate_reports_mismatch(capsys):
    expected = np.array([10 + 10j, 20 + 20j, 30 + 30j, 40 + 40j])
    actual = expected.copy()
    actual[2] = 60 + 30j
    report = validate_results(expected, actual, 1e-2, print_errors=True)
    assert not report.passed
    assert report.failed_count == 1
    assert report.mismatches == [2]
    assert report.avg_real_relative_error > 0
    assert report.avg_imag_relative_error == 0.0
    out = capsys.readouterr().out
    assert "Index i = 2" in out
    assert "FAILED" in out


def test_validate_quiet_without_print_errors(capsys):
    expected = np.array([10 + 10j, 20 + 20j])
    actual = np.array([50 + 10j, 20 + 20j])
    report = validate_results(expected, actual, 1e-2, print_errors=False)
    assert report.mismatches == [0]
    assert "Index i =" not in capsys.readouterr().out


def test_validate_shape_mismatch():
    with pytest.raises(ValueError):
        validate_results(np.zeros(4), np.zeros(5), 1e-2)


def test_save_outputs_round_trip(tmp_path):
    rng = np.random.default_rng(3)
    expected = rng.normal(size=(4, 4)) + 1j * rng.normal(size=(4, 4))
    actual = expected * 2
    hardware, software = save_outputs(expected, actual, tmp_path)
    assert hardware.name == "hardware_output.txt"
    assert software.name == "software_output.txt"

    for path, source in ((hardware, actual), (software, expected)):
        lines = path.read_text().splitlines()
        assert lines[0] == "4"
        assert len(lines) == 1 + source.size
        values = np.array(
            [complex(float(r), float(i)) for r, i in (ln.split() for ln in lines[1:])]
        )
        np.testing.assert_allclose(values, source.ravel(), rtol=1e-5, atol=1e-5)


def test_timing_stats_means():
    stats = TimingStats()
    stats.add(2.0)
    stats.add(8.0)
    assert stats.arithmetic_mean() == pytest.approx(5.0)
    assert stats.geometric_mean() == pytest.approx(4.0)


def test_timing_geometric_not_above_arithmetic():
    stats = TimingStats()
    for s in (0.1, 0.5, 2.0, 3.0):
        stats.add(s)
    assert stats.geometric_mean() <= stats.arithmetic_mean()


def test_timing_stats_empty():
    with pytest.raises(ValueError):
        TimingStats().arithmetic_mean()
    with pytest.raises(ValueError):
        TimingStats().geometric_mean()