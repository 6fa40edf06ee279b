import copy
import decimal
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from loguru import logger

from fnplot.core.errors import (
    AxisAlreadyCalibrated,
    AxisDomainError,
    AxisNotCalibrated,
    CalibrationError,
)
from fnplot.core.scalar import DEFAULT_PRECISION, decimal_context

_ZERO = Decimal(0)


class Axis(ABC):
    """
    Maps scalars onto a bounded plot coordinate.

    An axis goes through two phases: it is calibrated exactly once with the
    largest scalar observed for its dimension, then projects any number of
    scalars. Calibration state is not synchronized, so an instance must not
    be shared between concurrent projections; use :meth:`fresh` to get an
    independent, uncalibrated copy.

    Parameters
    ----------
    precision : int, default=DEFAULT_PRECISION
        Significant digits used for the transform arithmetic.
    """

    def __init__(self, precision: int = DEFAULT_PRECISION):
        self.precision = precision
        self._calibrated = False
        self._ratio: Optional[Decimal] = None

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    @property
    def ratio(self) -> Optional[Decimal]:
        """Scale ratio fixed by calibration; None for unscaled axes."""
        return self._ratio

    def calibrate(self, max_value) -> None:
        """
        Fix the axis scale from the final observed maximum.

        Parameters
        ----------
        max_value : Decimal
            Largest scalar observed for this axis.

        Raises
        ------
        AxisAlreadyCalibrated
            If the axis has been calibrated before.
        CalibrationError
            If ``max_value`` cannot calibrate this axis.
        """
        if self._calibrated:
            raise AxisAlreadyCalibrated(f"{self!r} is already calibrated")
        try:
            self._calibrate(Decimal(max_value), decimal_context(self.precision))
        except decimal.DecimalException as e:
            raise CalibrationError(
                f"cannot calibrate {self!r} with maximum {max_value}: {e!r}"
            ) from e
        self._calibrated = True

    def point(self, value) -> float:
        """
        Project a scalar onto the axis.

        Raises
        ------
        AxisNotCalibrated
            If :meth:`calibrate` has not been called.
        AxisDomainError
            If the scalar is outside the domain of the transform.
        """
        if not self._calibrated:
            raise AxisNotCalibrated(f"{self!r} must be calibrated before use")
        try:
            return self._point(Decimal(value), decimal_context(self.precision))
        except decimal.DecimalException as e:
            raise AxisDomainError(f"cannot project {value} on {self!r}: {e!r}") from e

    def fresh(self) -> "Axis":
        """Return an uncalibrated copy with the same configuration."""
        clone = copy.copy(self)
        clone._calibrated = False
        clone._ratio = None
        return clone

    def _calibrate(self, max_value: Decimal, ctx: decimal.Context) -> None:
        pass

    @abstractmethod
    def _point(self, value: Decimal, ctx: decimal.Context) -> float:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def calibrate_pair(x: Axis, max_x, y: Axis, max_y) -> None:
    """
    Calibrate two axes together; neither stays calibrated if either fails.
    """
    x.calibrate(max_x)
    try:
        y.calibrate(max_y)
    except Exception:
        if isinstance(x, Axis):
            x._calibrated = False
            x._ratio = None
        raise


class Std(Axis):
    """Identity axis: the scalar itself, narrowed to float."""

    def _point(self, value: Decimal, ctx: decimal.Context) -> float:
        return float(value)


class Scaled(Axis):
    """
    Linear axis scaled so the observed maximum lands on ``target``.

    Parameters
    ----------
    target : float
        Coordinate assigned to the largest observed scalar.
    """

    def __init__(self, target: float, precision: int = DEFAULT_PRECISION):
        super().__init__(precision)
        self.target = target

    def _calibrate(self, max_value: Decimal, ctx: decimal.Context) -> None:
        if max_value == _ZERO:
            raise CalibrationError(f"cannot scale {self!r} to a maximum of zero")
        self._ratio = ctx.divide(Decimal(self.target), max_value)
        logger.info(f"Scaling ratio: {self._ratio}")

    def _point(self, value: Decimal, ctx: decimal.Context) -> float:
        return float(ctx.multiply(value, self._ratio))

    def __repr__(self) -> str:
        return f"Scaled(target={self.target})"


def _ln(value: Decimal, ctx: decimal.Context, axis: Axis) -> Decimal:
    if value < _ZERO:
        raise AxisDomainError(f"{axis!r} cannot project negative scalar {value}")
    return ctx.ln(value)


class Ln(Axis):
    """Natural-log axis; zero maps to zero instead of negative infinity."""

    def _point(self, value: Decimal, ctx: decimal.Context) -> float:
        if value == _ZERO:
            return 0.0
        return float(_ln(value, ctx, self))


class LnScaled(Axis):
    """
    Natural-log axis scaled so ln of the observed maximum lands on ``target``.

    Parameters
    ----------
    target : float
        Coordinate assigned to the largest observed scalar.
    """

    def __init__(self, target: float, precision: int = DEFAULT_PRECISION):
        super().__init__(precision)
        self.target = target

    def _calibrate(self, max_value: Decimal, ctx: decimal.Context) -> None:
        if max_value <= _ZERO:
            raise CalibrationError(
                f"{self!r} needs a positive maximum, got {max_value}"
            )
        ln_max = ctx.ln(max_value)
        if ln_max == _ZERO:
            raise CalibrationError(f"cannot scale {self!r} when ln(maximum) is zero")
        self._ratio = ctx.divide(Decimal(self.target), ln_max)
        logger.info(f"Ln scaling ratio: {self._ratio}")

    def _point(self, value: Decimal, ctx: decimal.Context) -> float:
        if value == _ZERO:
            return 0.0
        return float(ctx.multiply(_ln(value, ctx, self), self._ratio))

    def __repr__(self) -> str:
        return f"LnScaled(target={self.target})"
