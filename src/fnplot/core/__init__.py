"""
Core components of fnplot.

This package turns arbitrary values into scalars, collects samples with their
bounds, and projects them onto calibrated plot axes.
"""

from fnplot.core.axis import Axis, Ln, LnScaled, Scaled, Std
from fnplot.core.errors import (
    AxisAlreadyCalibrated,
    AxisDomainError,
    AxisError,
    AxisNotCalibrated,
    CalibrationError,
    ConversionFailure,
    EncodingFailure,
    FnplotError,
    PlotError,
    SamplingError,
    UnsupportedType,
)
from fnplot.core.sample_set import Bounds, Sample, SampleSet
from fnplot.core.scalar import DEFAULT_PRECISION, decimal_context, scalar
from fnplot.core.values import Byte, Ref, Rune, ValueEncoder, Values, encode

__all__ = [
    # Values and scalars
    "Byte",
    "Ref",
    "Rune",
    "Values",
    "ValueEncoder",
    "encode",
    "scalar",
    "decimal_context",
    "DEFAULT_PRECISION",
    # Samples
    "Sample",
    "Bounds",
    "SampleSet",
    # Axes
    "Axis",
    "Std",
    "Scaled",
    "Ln",
    "LnScaled",
    # Errors
    "FnplotError",
    "UnsupportedType",
    "ConversionFailure",
    "EncodingFailure",
    "AxisError",
    "AxisNotCalibrated",
    "AxisAlreadyCalibrated",
    "CalibrationError",
    "AxisDomainError",
    "SamplingError",
    "PlotError",
]
