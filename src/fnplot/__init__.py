"""
fnplot: Function Plotting Library

Samples a function's input/output pairs, reduces arbitrarily shaped values to
scalars and plots them on calibrated axes.
"""

# Import from core subpackage
from fnplot.core.axis import Axis, Ln, LnScaled, Scaled, Std
from fnplot.core.errors import FnplotError
from fnplot.core.sample_set import Bounds, SampleSet
from fnplot.core.scalar import scalar
from fnplot.core.values import Byte, Ref, Rune, Values, encode

# Import from sampling subpackage
from fnplot.sampling.fn import Fn, configure_logging
from fnplot.sampling.plot import FnPlot

__all__ = [
    # Scalar conversion
    "Values",
    "Byte",
    "Rune",
    "Ref",
    "encode",
    "scalar",
    # Sample collection and projection
    "SampleSet",
    "Bounds",
    "Axis",
    "Std",
    "Scaled",
    "Ln",
    "LnScaled",
    "FnplotError",
    # Sampling driver
    "Fn",
    "FnPlot",
    "configure_logging",
]
