from typing import List, Optional, Tuple

import matplotlib.figure
import numpy as np
from loguru import logger

from fnplot.core.axis import Axis
from fnplot.core.errors import FnplotError, PlotError
from fnplot.sampling.fn import Fn

FIGURE_SIZE_INCHES = (20, 4)


class FnPlot:
    """
    Samples a function and saves its input/output plot as an image.

    Parameters
    ----------
    title : str
        Plot title.
    filename : str
        Output path. The image format is determined by the file extension.
    fn : Fn
        Function under test with its argument generators.
    samples : int
        Number of samples drawn per :meth:`save`.
    x : Axis
        Axis for the input scalars. Each save projects on a fresh copy.
    y : Axis
        Axis for the output scalars. Each save projects on a fresh copy.
    seed : Optional[int], default=None
        Seed passed to :meth:`Fn.run`.
    """

    def __init__(
        self,
        title: str,
        filename: str,
        fn: Fn,
        samples: int,
        x: Axis,
        y: Axis,
        seed: Optional[int] = None,
    ):
        self.title = title
        self.filename = filename
        self.fn = fn
        self.samples = samples
        self.x = x
        self.y = y
        self.seed = seed
        self.fig: Optional[matplotlib.figure.Figure] = None

    def points(self) -> List[Tuple[float, float]]:
        """Sample the function and project the samples onto the axes."""
        try:
            self.fn.run(self.samples, seed=self.seed)
        except FnplotError as e:
            raise PlotError(f"error running function: {e}") from e
        try:
            return self.fn.sample_set.points_on(self.x.fresh(), self.y.fresh())
        except FnplotError as e:
            raise PlotError(f"error generating X,Y points: {e}") from e

    def save(self) -> str:
        """
        Sample, project and write the plot image.

        Returns
        -------
        str
            Path of the written image.

        Raises
        ------
        PlotError
            If sampling, projection or writing the image fails.
        """
        points = self.points()
        xy = np.asarray(points, dtype=np.float64).reshape(-1, 2)

        fig = matplotlib.figure.Figure(figsize=FIGURE_SIZE_INCHES)
        ax = fig.add_subplot()
        ax.plot(xy[:, 0], xy[:, 1], marker="o", markersize=3, linewidth=1, label="Fn")
        ax.set_title(self.title)
        ax.set_xlabel(" ")
        ax.set_ylabel(" ")
        ax.legend(loc="upper left")
        self.fig = fig

        try:
            fig.savefig(self.filename)
        except (OSError, ValueError) as e:
            raise PlotError(f"error writing plot image {self.filename}: {e}") from e
        logger.success(f"Plot saved to {self.filename}")
        return self.filename
