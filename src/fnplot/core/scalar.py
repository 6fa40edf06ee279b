import decimal
from decimal import Decimal
from typing import Any, Sequence

import numpy as np

from fnplot.core.errors import ConversionFailure, EncodingFailure, UnsupportedType
from fnplot.core.values import ValueEncoder, deref

# Significant digits used for arithmetic on scalars (axis scaling, logarithms)
DEFAULT_PRECISION = 64

_FLOAT_TYPES = (float, np.float32, np.float64)


def decimal_context(precision: int = DEFAULT_PRECISION) -> decimal.Context:
    """
    Build a decimal context for scalar arithmetic.

    The exponent range is the widest decimal supports, so integers built from
    long byte sequences never overflow before being narrowed to float.
    """
    return decimal.Context(
        prec=precision, Emax=decimal.MAX_EMAX, Emin=decimal.MIN_EMIN
    )


def scalar(values: Sequence[Any], sort_keys: bool = False) -> Decimal:
    """
    Convert an ordered collection of values to one arbitrary-precision number.

    A single floating-point value (possibly behind references) is returned as
    is, converted exactly. Everything else is encoded into one byte buffer,
    element after element, and the buffer is read as a big-endian unsigned
    integer.

    Parameters
    ----------
    values : Sequence[Any]
        Argument or result tuple of one function invocation.
    sort_keys : bool, default=False
        Encode mapping entries in encoded-key order.

    Returns
    -------
    Decimal
        The scalar; 0 for an empty collection.

    Raises
    ------
    ConversionFailure
        If any element cannot be encoded, or a float element is NaN.
    """
    if len(values) == 0:
        return Decimal(0)

    if len(values) == 1:
        only = deref(values[0])
        if isinstance(only, _FLOAT_TYPES):
            if np.isnan(only):
                raise ConversionFailure("error converting value 0: NaN has no scalar")
            return Decimal(float(only))

    encoder = ValueEncoder(sort_keys=sort_keys)
    for i, value in enumerate(values):
        try:
            encoder.encode(value)
        except (UnsupportedType, ConversionFailure, EncodingFailure) as e:
            raise ConversionFailure(f"error converting value {i}: {e}") from e
    return Decimal(int.from_bytes(encoder.getvalue(), "big"))
