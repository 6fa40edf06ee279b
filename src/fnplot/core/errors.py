"""
Error types raised by fnplot.

Every error derives from FnplotError so callers can catch the whole family.
"""


class FnplotError(Exception):
    """Base class for all fnplot errors."""


class UnsupportedType(FnplotError, TypeError):
    """A value could not be classified into any encodable shape."""

    def __init__(self, value):
        self.type_name = type(value).__qualname__
        super().__init__(f"unsupported value type: {self.type_name} ({value!r})")


class ConversionFailure(FnplotError):
    """An element of a compound value failed to encode."""


class EncodingFailure(FnplotError):
    """The byte sink rejected a write."""


class AxisError(FnplotError):
    """Base class for axis calibration and projection errors."""


class AxisNotCalibrated(AxisError, RuntimeError):
    pass


class AxisAlreadyCalibrated(AxisError, RuntimeError):
    pass


class CalibrationError(AxisError, ValueError):
    """The observed maximum cannot calibrate this axis."""


class AxisDomainError(AxisError, ValueError):
    """A scalar lies outside the domain of the axis transform."""


class SamplingError(FnplotError):
    """The function under test or the sample insertion failed."""


class PlotError(FnplotError):
    """Rendering or saving a plot failed."""
