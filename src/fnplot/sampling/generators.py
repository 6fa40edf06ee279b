import string
import unicodedata
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np

from fnplot.core.values import Rune

# Size hint used when a generator is called directly
DEFAULT_SIZE = 100

# Highest Unicode code point and the surrogate block, which holds no characters
MAX_CODE_POINT = 0x10FFFF
SURROGATES = (0xD800, 0xDFFF)

# Code point tables for unicode_char / unicode_string, as inclusive ranges
LATIN = ((0x0020, 0x007E), (0x00A0, 0x024F))
GREEK = ((0x0370, 0x03FF),)
CYRILLIC = ((0x0400, 0x04FF),)

CodePointTable = Sequence[Tuple[int, int]]

# Every Unicode scalar value
ANY_CODE_POINT = ((0, SURROGATES[0] - 1), (SURROGATES[1] + 1, MAX_CODE_POINT))


class Generator:
    """
    Draws sample values for one argument of the function under test.

    Parameters
    ----------
    draw : Callable[[np.random.Generator, int], Any]
        Function producing one value from a random generator and a size hint.
        The size hint bounds the length of variable-size values.
    name : Optional[str], default=None
        Name shown in the repr.
    """

    def __init__(
        self,
        draw: Callable[[np.random.Generator, int], Any],
        name: Optional[str] = None,
    ):
        self.draw = draw
        self.name = name or getattr(draw, "__name__", "generator")

    def __call__(self, rng: np.random.Generator, size: int = DEFAULT_SIZE) -> Any:
        return self.draw(rng, size)

    def map(self, fn: Callable[[Any], Any]) -> "Generator":
        """Return a generator applying ``fn`` to every drawn value."""
        return Generator(lambda rng, size: fn(self.draw(rng, size)), f"{self.name}.map")

    def __repr__(self) -> str:
        return f"Generator({self.name})"


# Numeric generators.
# ===================


def float64_range(min: float, max: float) -> Generator:
    return Generator(lambda rng, size: float(rng.uniform(min, max)), "float64_range")


def float64() -> Generator:
    """Any finite float64, drawn uniformly over bit patterns."""

    def draw(rng: np.random.Generator, size: int) -> float:
        while True:
            bits = rng.integers(0, 2**64, dtype=np.uint64, size=1)
            value = bits.view(np.float64)[0]
            if np.isfinite(value):
                return float(value)

    return Generator(draw, "float64")


def float32_range(min: float, max: float) -> Generator:
    return Generator(
        lambda rng, size: np.float32(rng.uniform(min, max)), "float32_range"
    )


def float32() -> Generator:
    """Any finite float32, drawn uniformly over bit patterns."""

    def draw(rng: np.random.Generator, size: int) -> np.float32:
        while True:
            bits = rng.integers(0, 2**32, dtype=np.uint32, size=1)
            value = bits.view(np.float32)[0]
            if np.isfinite(value):
                return value

    return Generator(draw, "float32")


def int_range(min: int, max: int) -> Generator:
    """Integers in the inclusive range [min, max]."""
    return Generator(
        lambda rng, size: int(rng.integers(min, max, endpoint=True)), "int_range"
    )


def one_of(*values: Any) -> Generator:
    """One of the given values, picked uniformly."""
    if not values:
        raise ValueError("one_of needs at least one value")
    return Generator(lambda rng, size: values[rng.integers(len(values))], "one_of")


# Rune generators.
# ================


def _code_points(rng: np.random.Generator, table: CodePointTable, n: int) -> np.ndarray:
    # Pick ranges weighted by their size, then a code point inside each
    bounds = np.array(table, dtype=np.int64).reshape(-1, 2)
    sizes = (bounds[:, 1] - bounds[:, 0] + 1).astype(np.float64)
    picks = rng.choice(len(bounds), size=n, p=sizes / sizes.sum())
    return rng.integers(bounds[picks, 0], bounds[picks, 1], endpoint=True)


def _code_point(rng: np.random.Generator, table: CodePointTable) -> int:
    return int(_code_points(rng, table, 1)[0])


def rune_range(min: str, max: str) -> Generator:
    lo, hi = ord(min), ord(max)
    if lo > hi:
        raise ValueError(f"Empty rune range: {min!r} > {max!r}")
    return Generator(
        lambda rng, size: Rune(chr(rng.integers(lo, hi, endpoint=True))), "rune_range"
    )


def rune() -> Generator:
    """Any Unicode scalar value."""
    return Generator(lambda rng, size: Rune(chr(_code_point(rng, ANY_CODE_POINT))), "rune")


def rune_no_control() -> Generator:
    """Any Unicode scalar value outside the control category."""

    def draw(rng: np.random.Generator, size: int) -> Rune:
        while True:
            char = chr(_code_point(rng, ANY_CODE_POINT))
            if unicodedata.category(char) != "Cc":
                return Rune(char)

    return Generator(draw, "rune_no_control")


# Character generators.
# =====================


def _char_from(alphabet: str, name: str) -> Generator:
    return Generator(lambda rng, size: Rune(alphabet[rng.integers(len(alphabet))]), name)


def num_char() -> Generator:
    return _char_from(string.digits, "num_char")


def alpha_upper_char() -> Generator:
    return _char_from(string.ascii_uppercase, "alpha_upper_char")


def alpha_lower_char() -> Generator:
    return _char_from(string.ascii_lowercase, "alpha_lower_char")


def alpha_char() -> Generator:
    return _char_from(string.ascii_letters, "alpha_char")


def alpha_num_char() -> Generator:
    return _char_from(string.ascii_letters + string.digits, "alpha_num_char")


def unicode_char(table: CodePointTable) -> Generator:
    """Characters from a table of inclusive code point ranges."""
    if not table:
        raise ValueError("unicode_char needs a non-empty code point table")
    return Generator(lambda rng, size: Rune(chr(_code_point(rng, table))), "unicode_char")


# String generators.
# ==================


def _length(rng: np.random.Generator, size: int) -> int:
    return int(rng.integers(0, size, endpoint=True))


def _alphabet_string(alphabet: str, name: str) -> Generator:
    letters = np.array(list(alphabet))

    def draw(rng: np.random.Generator, size: int) -> str:
        return "".join(letters[rng.integers(len(letters), size=_length(rng, size))])

    return Generator(draw, name)


def _table_string(table: CodePointTable, name: str) -> Generator:
    def draw(rng: np.random.Generator, size: int) -> str:
        return "".join(map(chr, _code_points(rng, table, _length(rng, size)).tolist()))

    return Generator(draw, name)


def any_string() -> Generator:
    return _table_string(ANY_CODE_POINT, "any_string")


def alpha_string() -> Generator:
    return _alphabet_string(string.ascii_letters, "alpha_string")


def num_string() -> Generator:
    return _alphabet_string(string.digits, "num_string")


def identifier() -> Generator:
    """A lowercase letter followed by letters and digits."""
    first = alpha_lower_char()
    rest = _alphabet_string(string.ascii_letters + string.digits, "identifier_rest")
    return Generator(
        lambda rng, size: first(rng, size) + rest(rng, max(size - 1, 0)), "identifier"
    )


def unicode_string(table: CodePointTable) -> Generator:
    if not table:
        raise ValueError("unicode_string needs a non-empty code point table")
    return _table_string(table, "unicode_string")
