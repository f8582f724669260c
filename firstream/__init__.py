"""
Block streaming FIR filtering for large float64 sequences.

This package filters sequences that do not fit in memory by reading them in
fixed-size blocks and carrying a halo of trailing samples from one block to
the next, so the result is identical to filtering the whole sequence at once.

Features:
---------
- Immutable filter weights with seeded random generation
- Halo-plus-block working buffer, allocated once and reused in place
- Interchangeable engines (NumPy, sliding window, SciPy correlate, Numba)
- Raw float64 file streaming with explicit tail handling

Typical usage:
--------------
    from firstream import WeightVector, BlockStreamFilter

    weights = WeightVector.random(10, seed=0)
    filt = BlockStreamFilter(weights, block_size=100, halo_size=10)
    y = filt.process(x)

    # Or stream file to file
    from firstream import filter_file, StreamConfig
    report = filter_file("test_in.dat", "test_out.dat", weights, StreamConfig())
"""

from firstream.weights import WeightVector, ArrayF
from firstream.engines import (
    FirWindowEngine,
    DirectNumpyEngine,
    SlidingWindowEngine,
    CorrelateEngine,
    NumbaEngine,
    make_engine,
)
from firstream.config import StreamConfig, TailPolicy
from firstream.errors import FirStreamError, StreamOpenFailure, ShortRead, WriteFailure
from firstream.processor import BlockStreamFilter
from firstream.io import (
    RawFloat64Reader,
    RawFloat64Writer,
    read_raw,
    write_raw,
    write_test_file,
)
from firstream.session import SessionReport, build_filter, filter_file, run_session

__version__ = "0.1.0"

__all__ = [
    # Core types
    "WeightVector",
    "ArrayF",
    # Engines
    "FirWindowEngine",
    "DirectNumpyEngine",
    "SlidingWindowEngine",
    "CorrelateEngine",
    "NumbaEngine",
    "make_engine",
    # Filter
    "BlockStreamFilter",
    "StreamConfig",
    "TailPolicy",
    # I/O
    "RawFloat64Reader",
    "RawFloat64Writer",
    "read_raw",
    "write_raw",
    "write_test_file",
    # Sessions
    "SessionReport",
    "build_filter",
    "filter_file",
    "run_session",
    # Errors
    "FirStreamError",
    "StreamOpenFailure",
    "ShortRead",
    "WriteFailure",
]
