"""
Read → filter → write loop for one stream.

A session reads whole blocks straight into the filter's block region, so the
only memory in use is the working buffer plus one output block. Blocks are
processed strictly in order; each depends on the halo left by the previous
one.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from firstream.config import StreamConfig, TailPolicy
from firstream.engines import make_engine
from firstream.errors import ShortRead
from firstream.io import RawFloat64Reader, RawFloat64Writer
from firstream.processor import BlockStreamFilter
from firstream.utils.signals import block_layout
from firstream.weights import WeightVector

logger = logging.getLogger(__name__)


@dataclass
class SessionReport:
    """Summary of a finished session."""

    n_input: int
    n_blocks: int
    block_size: int
    samples_written: int
    samples_dropped: int
    padded: bool
    elapsed_s: float

    def to_dict(self) -> dict:
        return {
            "n_input": self.n_input,
            "n_blocks": self.n_blocks,
            "block_size": self.block_size,
            "samples_written": self.samples_written,
            "samples_dropped": self.samples_dropped,
            "padded": self.padded,
            "elapsed_s": self.elapsed_s,
        }


def run_session(
    reader: RawFloat64Reader,
    writer: RawFloat64Writer,
    filt: BlockStreamFilter,
    tail_policy: TailPolicy | str = TailPolicy.TRUNCATE,
) -> SessionReport:
    """
    Stream every block of an open reader through the filter into a writer.

    Args:
        reader: Open reader; its sample count fixes the number of blocks
        writer: Open writer
        filt: Filter to drive; reset before the first block
        tail_policy: Handling of the final N % B samples

    Returns:
        SessionReport

    Raises:
        ShortRead: The stream ended before a full block could be read
        WriteFailure: The writer rejected a block
    """
    policy = TailPolicy.parse(tail_policy)
    B = filt.block_size
    n_input = reader.n_samples
    n_blocks, remainder = block_layout(n_input, B)

    logger.info(
        "Filtering %d samples from %s: %d blocks of %d, halo %d, %d taps",
        n_input, reader.path, n_blocks, B, filt.halo_size, filt.filter_length,
    )
    start = time.perf_counter()
    filt.reset()
    region = filt.block_region

    for b in range(n_blocks):
        count = reader.read_into(region)
        if count != B:
            raise ShortRead(reader.path, B, count)
        writer.write(filt.process_block())
        logger.debug("Block %d/%d done", b + 1, n_blocks)

    padded = False
    dropped = 0
    if remainder:
        if policy is TailPolicy.PAD:
            count = reader.read_into(region[:remainder])
            if count != remainder:
                raise ShortRead(reader.path, remainder, count)
            writer.write(filt.process_final_block(remainder))
            padded = True
            logger.info("Zero-padded final block of %d samples", remainder)
        else:
            dropped = remainder
            logger.warning(
                "Dropping %d trailing samples that do not fill a block of %d", remainder, B
            )

    report = SessionReport(
        n_input=n_input,
        n_blocks=n_blocks,
        block_size=B,
        samples_written=writer.samples_written,
        samples_dropped=dropped,
        padded=padded,
        elapsed_s=time.perf_counter() - start,
    )
    logger.info(
        "Wrote %d samples to %s in %.3f s",
        report.samples_written, writer.path, report.elapsed_s,
    )
    return report


def build_filter(config: StreamConfig, weights: Optional[WeightVector] = None) -> BlockStreamFilter:
    """Create a BlockStreamFilter from a config, generating weights if none given."""
    if weights is None:
        weights = WeightVector.random(config.filter_length, seed=config.weights_seed)
    engine = make_engine(config.engine, filter_length=weights.L, use_numba=config.use_numba)
    return BlockStreamFilter(
        weights,
        block_size=config.block_size,
        halo_size=config.halo_size,
        engine=engine,
        include_current=config.include_current,
    )


def filter_file(
    input_path: str | Path,
    output_path: str | Path,
    weights: Optional[WeightVector] = None,
    config: Optional[StreamConfig] = None,
) -> SessionReport:
    """
    Filter a raw float64 file into another raw float64 file.

    Both streams are opened before any processing starts; a failure to open
    either aborts the run with StreamOpenFailure.
    """
    config = config or StreamConfig()
    filt = build_filter(config, weights)
    with RawFloat64Reader(input_path) as reader, RawFloat64Writer(output_path) as writer:
        return run_session(reader, writer, filt, config.tail_policy)
