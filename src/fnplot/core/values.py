import io
from collections.abc import Mapping, Sequence
from typing import Any, BinaryIO, Iterable, Optional

import numpy as np
from loguru import logger

from fnplot.core.errors import ConversionFailure, EncodingFailure, UnsupportedType

# Fixed-width candidates for narrowing variable-width Python ints, smallest first
_UNSIGNED_WIDTHS = (np.uint8, np.uint16, np.uint32, np.uint64)
_SIGNED_WIDTHS = (np.int8, np.int16, np.int32, np.int64)

# numpy dtype kinds with a fixed-width binary representation
_NUMERIC_KINDS = "biufc"


class Byte(int):
    """A single raw byte (0..255)."""

    def __new__(cls, value: int):
        value = int(value)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Byte({int(self)})"


class Rune(str):
    """A single character, encoded as its UTF-8 bytes."""

    def __new__(cls, value: str):
        if len(value) != 1:
            raise ValueError(f"Rune must be a single character, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Rune({str(self)!r})"


class Ref:
    """
    A reference to another value.

    References are followed (repeatedly) before a value is classified, so
    ``Ref(Ref(1.5))`` encodes exactly like ``1.5``.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


class Values(tuple):
    """
    An ordered, immutable collection of values of any supported shape.

    One Values holds the full argument tuple or result tuple of a single
    function invocation.
    """

    @classmethod
    def of(cls, *items: Any) -> "Values":
        return cls(items)

    def __repr__(self) -> str:
        return f"Values{tuple.__repr__(self)}"


def deref(value: Any) -> Any:
    """Follow Ref indirections until a non-reference value is reached."""
    while isinstance(value, Ref):
        value = value.value
    return value


def smallest_int(x: int) -> Optional[np.integer]:
    """
    Narrow a variable-width integer to the smallest fixed-width numpy integer.

    Non-negative values become unsigned, negative values become signed.

    Parameters
    ----------
    x : int
        Integer of any size.

    Returns
    -------
    Optional[np.integer]
        The narrowed value, or None if it does not fit in 64 bits.
    """
    if x >= 0:
        for width in _UNSIGNED_WIDTHS:
            if x <= np.iinfo(width).max:
                return width(x)
    else:
        for width in _SIGNED_WIDTHS:
            if x >= np.iinfo(width).min:
                return width(x)
    return None


def _big_endian(value: Any) -> bytes:
    """Return the big-endian bytes of a fixed-width numpy scalar or array."""
    arr = np.asarray(value)
    return arr.astype(arr.dtype.newbyteorder(">"), copy=False).tobytes()


def _wide_int_bytes(x: int) -> bytes:
    # Minimal big-endian form for integers beyond 64 bits
    if x >= 0:
        return x.to_bytes((x.bit_length() + 7) // 8, "big")
    return x.to_bytes((x.bit_length() + 8) // 8, "big", signed=True)


class ValueEncoder:
    """
    Serializes values into one canonical byte sequence.

    Each call to :meth:`encode` appends to the same sink, so several values
    can be concatenated into a single buffer. The encoding is lossy and
    deliberately untagged: it preserves relative magnitude for same-shaped
    values, not the original value.

    Parameters
    ----------
    sink : Optional[BinaryIO], default=None
        Writable binary stream. A fresh in-memory buffer is used if None.
    sort_keys : bool, default=False
        If True, mapping entries are written in order of their encoded keys
        instead of iteration order.
    """

    def __init__(self, sink: Optional[BinaryIO] = None, sort_keys: bool = False):
        self.sink = sink if sink is not None else io.BytesIO()
        self.sort_keys = sort_keys

    def getvalue(self) -> bytes:
        """Return everything written so far (in-memory sinks only)."""
        return self.sink.getvalue()

    def encode(self, value: Any) -> None:
        """
        Append the encoding of ``value`` to the sink.

        Raises
        ------
        UnsupportedType
            If ``value`` (at the top level) has no encoding.
        ConversionFailure
            If an element of a compound value fails to encode.
        EncodingFailure
            If the sink rejects a write.
        """
        value = deref(value)
        if value is None:
            return

        if isinstance(value, Byte):
            self._write(bytes((int(value),)))
        elif isinstance(value, (str, bytes, bytearray, memoryview)):
            # Lone surrogates are written as their raw UTF-8 form
            self._write(
                value.encode("utf-8", "surrogatepass")
                if isinstance(value, str)
                else value
            )
        elif isinstance(value, bool):
            self._write(b"\x01" if value else b"\x00")
        elif isinstance(value, np.generic) and value.dtype.kind in _NUMERIC_KINDS:
            self._write(_big_endian(value))
        elif isinstance(value, int):
            narrowed = smallest_int(value)
            self._write(
                _wide_int_bytes(value) if narrowed is None else _big_endian(narrowed)
            )
        elif isinstance(value, float):
            self._write(_big_endian(np.float64(value)))
        elif isinstance(value, complex):
            self._write(_big_endian(np.complex128(value)))
        elif isinstance(value, np.ndarray):
            self._encode_array(value)
        elif isinstance(value, Mapping):
            self._encode_mapping(value)
        elif isinstance(value, (set, frozenset)):
            self._encode_set(value)
        elif isinstance(value, Sequence):
            self._encode_items(value)
        else:
            raise UnsupportedType(value)

    def _write(self, data: bytes) -> None:
        try:
            self.sink.write(data)
        except (OSError, ValueError) as e:
            raise EncodingFailure(f"error writing {len(data)} bytes: {e}") from e

    def _encode_items(self, items: Iterable[Any]) -> None:
        for i, item in enumerate(items):
            try:
                self.encode(item)
            except (UnsupportedType, ConversionFailure, EncodingFailure) as e:
                raise ConversionFailure(
                    f"error encoding sequence element {i}: {e}"
                ) from e

    def _encode_array(self, arr: np.ndarray) -> None:
        if arr.dtype.kind in _NUMERIC_KINDS:
            # C-order bytes equal the element-by-element concatenation
            self._write(_big_endian(arr))
        elif arr.ndim == 0:
            self.encode(arr[()])
        else:
            self._encode_items(arr)

    def _encode_mapping(self, mapping: Mapping) -> None:
        entries = list(mapping.items())
        if self.sort_keys:
            entries.sort(key=lambda entry: self._encode_detached(entry[0]))
        for key, item in entries:
            try:
                self.encode(key)
                self.encode(item)
            except (UnsupportedType, ConversionFailure, EncodingFailure) as e:
                raise ConversionFailure(
                    f"error encoding mapping entry {key!r}: {e}"
                ) from e

    def _encode_set(self, members: Iterable[Any]) -> None:
        try:
            encoded = sorted(self._encode_detached(member) for member in members)
        except (UnsupportedType, ConversionFailure, EncodingFailure) as e:
            raise ConversionFailure(f"error encoding set member: {e}") from e
        logger.trace(f"Encoded {len(encoded)} set members in sorted order")
        for chunk in encoded:
            self._write(chunk)

    def _encode_detached(self, value: Any) -> bytes:
        encoder = ValueEncoder(sort_keys=self.sort_keys)
        encoder.encode(value)
        return encoder.getvalue()


def encode(value: Any, sort_keys: bool = False) -> bytes:
    """
    Encode a single value into its canonical byte sequence.

    Parameters
    ----------
    value : Any
        Value of any supported shape.
    sort_keys : bool, default=False
        Write mapping entries in encoded-key order.

    Returns
    -------
    bytes
        The encoded bytes; empty for None and empty collections.
    """
    encoder = ValueEncoder(sort_keys=sort_keys)
    encoder.encode(value)
    return encoder.getvalue()
