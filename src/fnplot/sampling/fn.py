import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Optional

import numpy as np
from loguru import logger

from fnplot.core.errors import FnplotError, SamplingError
from fnplot.core.sample_set import SampleSet
from fnplot.sampling.generators import Generator

DEFAULT_WORKERS = 10
DEFAULT_MIN_SIZE = 100
DEFAULT_MAX_SIZE = 10000

# Worker thread names tell apart samples drawn concurrently
LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{thread.name: <24}</cyan> | <level>{message}</level>"
)


def configure_logging(log_level: str = "INFO", sink: Any = sys.stderr) -> None:
    """
    Route fnplot's loguru output to a single sink.

    Records carry the worker thread name, since samples are inserted from a
    thread pool.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL.
    sink : Any, default=sys.stderr
        Any loguru sink: a stream, a path or a callable.
    """
    logger.remove()
    logger.add(
        sink,
        level=log_level.upper(),
        format=LOG_FORMAT,
        colorize=sink in (sys.stderr, sys.stdout),
    )


def _size_hint(index: int, samples: int, min_size: int, max_size: int) -> int:
    # Grows linearly from min_size on the first sample to max_size on the last
    if samples <= 1:
        return min_size
    return min_size + (max_size - min_size) * index // (samples - 1)


class Fn:
    """
    A function under test together with the generators for its arguments.

    Every sample draws one value per generator, calls the function with
    them and records ``(args, (result,))`` in the sample set. A function
    returning a tuple has that tuple recorded as its output.

    Parameters
    ----------
    func : Callable[..., Any]
        Function to sample.
    *generators : Generator
        One generator per positional argument of ``func``.
    sort_keys : bool, default=False
        Encode mapping entries in encoded-key order when computing scalars.
    """

    def __init__(
        self, func: Callable[..., Any], *generators: Generator, sort_keys: bool = False
    ):
        self.func = func
        self.generators = generators
        self.sample_set = SampleSet(sort_keys=sort_keys)

    def run(
        self,
        samples: int,
        workers: int = DEFAULT_WORKERS,
        seed: Optional[int] = None,
        min_size: int = DEFAULT_MIN_SIZE,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> SampleSet:
        """
        Sample the function concurrently.

        Each sample gets its own random stream spawned from ``seed``, so a
        seeded run produces the same samples whatever the thread scheduling.

        Parameters
        ----------
        samples : int
            Number of invocations.
        workers : int, default=DEFAULT_WORKERS
            Number of worker threads.
        seed : Optional[int], default=None
            Seed for reproducible runs. A fresh seed is used if None.
        min_size : int, default=DEFAULT_MIN_SIZE
            Size hint passed to generators for the first sample.
        max_size : int, default=DEFAULT_MAX_SIZE
            Size hint passed to generators for the last sample.

        Returns
        -------
        SampleSet
            The sample set, holding every sample recorded so far.

        Raises
        ------
        SamplingError
            If the function raises or a sample cannot be recorded.
        """
        if samples < 0:
            raise ValueError(f"samples must be non-negative, got {samples}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if min_size > max_size:
            raise ValueError(f"min_size ({min_size}) exceeds max_size ({max_size})")

        start = time.perf_counter()
        streams = np.random.SeedSequence(seed).spawn(samples)
        name = getattr(self.func, "__name__", repr(self.func))
        logger.info(f"Sampling {name} {samples} times with {workers} workers")

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="fnplot-sample"
        ) as pool:
            futures = [
                pool.submit(
                    self._sample,
                    i,
                    stream,
                    _size_hint(i, samples, min_size, max_size),
                )
                for i, stream in enumerate(streams)
            ]
            try:
                for future in as_completed(futures):
                    future.result()
            except Exception:
                for future in futures:
                    future.cancel()
                raise

        logger.info(
            f"Collected {len(self.sample_set)} samples in {time.perf_counter() - start:.3f}s"
        )
        return self.sample_set

    def _sample(self, index: int, stream: np.random.SeedSequence, size: int) -> None:
        rng = np.random.default_rng(stream)
        try:
            args = tuple(generator(rng, size) for generator in self.generators)
        except Exception as e:
            raise SamplingError(f"generator failed on sample {index}: {e}") from e
        try:
            result = self.func(*args)
        except Exception as e:
            raise SamplingError(
                f"function failed on sample {index} with input {args!r}: {e}"
            ) from e

        output = result if isinstance(result, tuple) else (result,)
        try:
            self.sample_set.insert(args, output)
        except FnplotError as e:
            raise SamplingError(f"error inserting sample {index}: {e}") from e
        logger.trace(f"Sample {index}: {args!r} -> {output!r}")
