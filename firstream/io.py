"""
Raw float64 stream I/O.

Files are flat sequences of native-byte-order IEEE-754 doubles with no
header; the sample count is the file size divided by 8.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import numpy as np

from firstream.errors import ShortRead, StreamOpenFailure, WriteFailure
from firstream.weights import ArrayF

logger = logging.getLogger(__name__)

DTYPE = np.dtype(np.float64)
ITEMSIZE = DTYPE.itemsize


def _count_samples(path: Path, size: int) -> int:
    if size % ITEMSIZE:
        raise ValueError(
            f"{path} holds {size} bytes, not a whole number of {ITEMSIZE}-byte samples"
        )
    return size // ITEMSIZE


class RawFloat64Reader:
    """
    Sequential reader that fills caller-owned float64 regions in place.

    Usage:
        with RawFloat64Reader(path) as reader:
            count = reader.read_into(filt.block_region)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.n_samples = 0
        self.samples_read = 0
        self._file = None

    def open(self) -> RawFloat64Reader:
        try:
            self._file = open(self.path, "rb")
        except OSError as exc:
            raise StreamOpenFailure(self.path, "reading", exc.strerror or str(exc)) from exc
        try:
            self.n_samples = _count_samples(self.path, os.fstat(self._file.fileno()).st_size)
        except ValueError:
            self.close()
            raise
        logger.debug("Opened %s for reading (%d samples)", self.path, self.n_samples)
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> RawFloat64Reader:
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def remaining(self) -> int:
        return self.n_samples - self.samples_read

    def read_into(self, region: ArrayF) -> int:
        """
        Fill ``region`` with the next samples of the stream.

        Args:
            region: Writable, contiguous float64 array (typically a view into
                the filter's working buffer)

        Returns:
            Number of samples read; less than ``len(region)`` only at end of
            stream
        """
        if self._file is None:
            raise ValueError(f"{self.path} is not open")
        if region.dtype != DTYPE or not region.flags.c_contiguous:
            raise ValueError("region must be a contiguous float64 array")

        view = memoryview(region).cast("B")
        total = 0
        while total < view.nbytes:
            n = self._file.readinto(view[total:])
            if not n:
                break
            total += n

        if total % ITEMSIZE:
            raise ShortRead(self.path, region.shape[0], total // ITEMSIZE)
        count = total // ITEMSIZE
        self.samples_read += count
        return count


class RawFloat64Writer:
    """Sequential writer appending float64 samples to a file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.samples_written = 0
        self._file = None

    def open(self) -> RawFloat64Writer:
        try:
            self._file = open(self.path, "wb")
        except OSError as exc:
            raise StreamOpenFailure(self.path, "writing", exc.strerror or str(exc)) from exc
        logger.debug("Opened %s for writing", self.path)
        return self

    def close(self):
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            f.close()
        except OSError as exc:
            raise WriteFailure(self.path, exc.strerror or str(exc)) from exc

    def __enter__(self) -> RawFloat64Writer:
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def write(self, values: ArrayF) -> int:
        """Append samples; returns the number written."""
        if self._file is None:
            raise ValueError(f"{self.path} is not open")
        data = np.ascontiguousarray(values, dtype=DTYPE)
        try:
            n = self._file.write(data.tobytes())
        except OSError as exc:
            raise WriteFailure(self.path, exc.strerror or str(exc)) from exc
        if n != data.nbytes:
            raise WriteFailure(self.path, f"wrote {n} of {data.nbytes} bytes")
        self.samples_written += data.size
        return data.size


def read_raw(path: str | Path) -> ArrayF:
    """Read a whole raw float64 file into memory."""
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise StreamOpenFailure(path, "reading", exc.strerror or str(exc)) from exc
    _count_samples(path, size)
    return np.fromfile(path, dtype=DTYPE)


def write_raw(path: str | Path, values: ArrayF) -> None:
    """Write samples as a raw float64 file, replacing any existing file."""
    with RawFloat64Writer(path) as writer:
        writer.write(values)


def write_test_file(path: str | Path, n: int, seed: int | None = None) -> ArrayF:
    """
    Write n uniform [0, 1) samples for testing.

    Returns the generated samples so callers can compare against them.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    data = np.random.default_rng(seed).random(n)
    write_raw(path, data)
    return data
