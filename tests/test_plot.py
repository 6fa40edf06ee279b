"""Tests for sampling a function and writing its plot image."""

import math

import pytest

from fnplot.core.axis import Ln, LnScaled, Std
from fnplot.core.errors import AxisDomainError, PlotError, SamplingError
from fnplot.sampling.fn import Fn
from fnplot.sampling.generators import alpha_string, float64_range, int_range
from fnplot.sampling.plot import FnPlot


def test_save_writes_image(tmp_path, log_messages):
    filename = str(tmp_path / "sin.png")
    plot = FnPlot("sin", filename, Fn(math.sin, float64_range(-3, 3)), 200, Std(), Std(), seed=3)

    assert plot.save() == filename
    assert (tmp_path / "sin.png").stat().st_size > 0
    assert plot.fig.axes[0].get_title() == "sin"
    assert f"Plot saved to {filename}" in log_messages


def test_points_are_sorted_and_axes_reusable(tmp_path):
    plot = FnPlot(
        "upper",
        str(tmp_path / "upper.svg"),
        Fn(str.upper, alpha_string()),
        50,
        LnScaled(100),
        LnScaled(100),
        seed=11,
    )
    points = plot.points()
    assert [p[0] for p in points] == sorted(p[0] for p in points)
    assert not plot.x.calibrated

    plot.save()
    assert len(plot.fn.sample_set) == 100
    assert (tmp_path / "upper.svg").exists()


def test_sampling_errors_become_plot_errors(tmp_path):
    fn = Fn(lambda x: 1 / 0, int_range(0, 1))
    plot = FnPlot("boom", str(tmp_path / "boom.png"), fn, 5, Std(), Std())
    with pytest.raises(PlotError, match="error running function") as excinfo:
        plot.save()
    assert isinstance(excinfo.value.__cause__, SamplingError)


def test_projection_errors_become_plot_errors(tmp_path):
    fn = Fn(lambda x: -1.5, int_range(1, 5))
    plot = FnPlot("neg", str(tmp_path / "neg.png"), fn, 5, Std(), Ln())
    with pytest.raises(PlotError, match="error generating X,Y points") as excinfo:
        plot.save()
    assert isinstance(excinfo.value.__cause__, AxisDomainError)


def test_unwritable_path_is_a_plot_error(tmp_path):
    filename = str(tmp_path / "missing" / "plot.png")
    plot = FnPlot("abs", filename, Fn(abs, int_range(0, 10)), 10, Std(), Std())
    with pytest.raises(PlotError, match="error writing plot image"):
        plot.save()
