import copy
import math
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from loguru import logger

from fnplot.core.axis import Axis, calibrate_pair
from fnplot.core.errors import ConversionFailure
from fnplot.core.scalar import scalar
from fnplot.core.values import Values


@dataclass(frozen=True)
class Sample:
    """
    One observed (input, output) pair of the function under test.

    ``input`` and ``output`` are deep copies taken at insertion, and the
    scalars are the ones the bounds were widened with, so later changes to
    the caller's objects never reach a recorded sample.
    """

    input: Values
    output: Values
    input_scalar: Decimal
    output_scalar: Decimal


@dataclass(frozen=True)
class Bounds:
    """Extrema of the input and output scalars; None until the first insert."""

    min_input: Optional[Decimal] = None
    max_input: Optional[Decimal] = None
    min_output: Optional[Decimal] = None
    max_output: Optional[Decimal] = None


def _widen(
    low: Optional[Decimal], high: Optional[Decimal], value: Decimal
) -> Tuple[Decimal, Decimal]:
    # Ties keep the first-seen extremum
    if low is None or value < low:
        low = value
    if high is None or value > high:
        high = value
    return low, high


class SampleSet:
    """
    Collects samples from concurrent workers and tracks their scalar bounds.

    Samples and bounds only ever grow. Inserts and projections are serialized
    by one lock, so any interleaving of concurrent inserts leaves the same
    final bounds.

    Parameters
    ----------
    sort_keys : bool, default=False
        Encode mapping entries in encoded-key order when computing scalars.
    """

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys
        self._samples: List[Sample] = []
        self._bounds = Bounds()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    @property
    def samples(self) -> Tuple[Sample, ...]:
        with self._lock:
            return tuple(self._samples)

    @property
    def bounds(self) -> Bounds:
        with self._lock:
            return self._bounds

    def insert(self, input: Sequence[Any], output: Sequence[Any]) -> None:
        """
        Record one sample and widen the bounds with its scalars.

        Nothing is recorded if either side fails to convert.

        Parameters
        ----------
        input : Sequence[Any]
            Argument tuple of the invocation.
        output : Sequence[Any]
            Result tuple of the invocation.

        Raises
        ------
        ConversionFailure
            If the input or output cannot be converted to a scalar.
        """
        input, output = tuple(input), tuple(output)
        with self._lock:
            try:
                in_scalar = scalar(input, self.sort_keys)
            except ConversionFailure as e:
                raise ConversionFailure(f"error converting input to scalar: {e}") from e
            try:
                out_scalar = scalar(output, self.sort_keys)
            except ConversionFailure as e:
                raise ConversionFailure(
                    f"error converting output to scalar: {e}"
                ) from e

            sample = Sample(
                Values(copy.deepcopy(input)),
                Values(copy.deepcopy(output)),
                in_scalar,
                out_scalar,
            )
            bounds = self._bounds
            min_input, max_input = _widen(bounds.min_input, bounds.max_input, in_scalar)
            min_output, max_output = _widen(
                bounds.min_output, bounds.max_output, out_scalar
            )
            self._samples.append(sample)
            self._bounds = Bounds(min_input, max_input, min_output, max_output)

    def points_on(self, x: Axis, y: Axis) -> List[Tuple[float, float]]:
        """
        Project every sample onto a pair of axes.

        Both axes are calibrated here, ``x`` with the largest input scalar and
        ``y`` with the largest output scalar, so each call needs its own
        uncalibrated axes. If either calibration fails, both axes are left
        uncalibrated.

        Parameters
        ----------
        x : Axis
            Axis for the input scalars.
        y : Axis
            Axis for the output scalars.

        Returns
        -------
        List[Tuple[float, float]]
            Points sorted by x.

        Raises
        ------
        AxisError
            If an axis cannot be calibrated or cannot project a scalar.
        """
        with self._lock:
            if not self._samples:
                logger.warning("No samples to project")
                return []

            calibrate_pair(x, self._bounds.max_input, y, self._bounds.max_output)

            points = []
            for i, sample in enumerate(self._samples):
                in_scalar, out_scalar = sample.input_scalar, sample.output_scalar
                pt = (x.point(in_scalar), y.point(out_scalar))
                if math.isinf(pt[0]) or math.isinf(pt[1]):
                    logger.warning(
                        f"Infinity found at value {i}. Input: {in_scalar}, output: {out_scalar}, scaled X: {pt[0]}, scaled Y: {pt[1]}"
                    )
                points.append(pt)

        points.sort(key=lambda pt: pt[0])
        logger.debug(f"Projected {len(points)} points")
        return points
