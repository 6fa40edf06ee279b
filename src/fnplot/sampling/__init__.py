"""
Sampling driver and rendering for fnplot.

This package draws arguments for a function under test, feeds the observed
input/output pairs into a SampleSet and renders the projected points.
"""

from fnplot.sampling.fn import Fn, configure_logging
from fnplot.sampling.generators import (
    CYRILLIC,
    GREEK,
    LATIN,
    Generator,
    alpha_char,
    alpha_lower_char,
    alpha_num_char,
    alpha_string,
    alpha_upper_char,
    any_string,
    float32,
    float32_range,
    float64,
    float64_range,
    identifier,
    int_range,
    num_char,
    num_string,
    one_of,
    rune,
    rune_no_control,
    rune_range,
    unicode_char,
    unicode_string,
)
from fnplot.sampling.plot import FnPlot

__all__ = [
    "Fn",
    "FnPlot",
    "configure_logging",
    "Generator",
    "float64",
    "float64_range",
    "float32",
    "float32_range",
    "int_range",
    "one_of",
    "rune",
    "rune_range",
    "rune_no_control",
    "num_char",
    "alpha_upper_char",
    "alpha_lower_char",
    "alpha_char",
    "alpha_num_char",
    "unicode_char",
    "any_string",
    "alpha_string",
    "num_string",
    "identifier",
    "unicode_string",
    "LATIN",
    "GREEK",
    "CYRILLIC",
]
