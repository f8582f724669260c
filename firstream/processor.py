"""
Block streaming FIR filter with halo management.

The filter owns one working buffer of H + B samples:

    [0, H)      halo: last H samples of the previous buffer (zeros at start)
    [H, H + B)  block: the samples being filtered now

After each block the last H samples are copied to the front, so the next
block sees the history it needs and the block-wise result equals filtering
the whole sequence at once.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from firstream.config import TailPolicy
from firstream.engines import FirWindowEngine, make_engine
from firstream.utils.signals import block_layout, canonicalize_signal
from firstream.weights import ArrayF, WeightVector

logger = logging.getLogger(__name__)


@dataclass
class BlockStreamFilter:
    """
    Streaming FIR filter over a fixed halo-plus-block working buffer.

    Callers either read the next B samples straight into ``block_region``
    and call ``process_block()``, or hand the block to
    ``process_block(x_block)`` which copies it in.

    Example:
        >>> filt = BlockStreamFilter(WeightVector.random(10, seed=0),
        ...                          block_size=100, halo_size=10)
        >>> for block in blocks:
        ...     y = filt.process_block(block)
    """

    weights: WeightVector
    block_size: int
    halo_size: Optional[int] = None
    engine: Optional[FirWindowEngine] = None
    include_current: bool = True
    use_numba: bool = False

    def __post_init__(self):
        """Validate sizes, select engine and allocate the working buffer."""
        if not isinstance(self.weights, WeightVector):
            self.weights = WeightVector(self.weights)
        if self.block_size < 1:
            raise ValueError("block_size must be at least 1")

        L = self.weights.L
        required = self.required_halo(L, self.include_current)
        if self.halo_size is None:
            self.halo_size = required
        if self.halo_size < required:
            raise ValueError(
                f"halo_size={self.halo_size} too small for filter length {L}: "
                f"need at least {required}"
            )

        if self.engine is None:
            self.engine = make_engine("auto", filter_length=L, use_numba=self.use_numba)
        logger.debug(
            "Using %s (L=%d, B=%d, H=%d)",
            self.engine.__class__.__name__, L, self.block_size, self.halo_size,
        )

        self._buffer = np.zeros(self.halo_size + self.block_size, dtype=np.float64)
        self.reset()

    @staticmethod
    def required_halo(filter_length: int, include_current: bool = True) -> int:
        """Smallest halo that gives every output a full window."""
        return filter_length - 1 if include_current else filter_length

    @property
    def filter_length(self) -> int:
        return self.weights.L

    @property
    def offset(self) -> int:
        """Buffer index where the window of block sample 0 starts."""
        start = self.halo_size - self.weights.L
        return start + 1 if self.include_current else start

    @property
    def buffer(self) -> ArrayF:
        """Read-only view of the whole working buffer."""
        view = self._buffer.view()
        view.setflags(write=False)
        return view

    @property
    def halo(self) -> ArrayF:
        """Read-only view of the halo region."""
        return self.buffer[:self.halo_size]

    @property
    def block_region(self) -> ArrayF:
        """Writable view of the block region; readers fill it in place."""
        return self._buffer[self.halo_size:]

    def reset(self):
        """Zero the working buffer and forget all history."""
        self._buffer[:] = 0.0
        self.blocks_processed = 0

    def process_block(self, x_block: Optional[ArrayF] = None) -> ArrayF:
        """
        Filter one block and rotate the halo.

        Args:
            x_block: Next B input samples. If omitted, the block region must
                already hold them.

        Returns:
            Filtered block (B,)
        """
        if x_block is not None:
            x_block = canonicalize_signal(x_block, "x_block")
            if x_block.shape[0] != self.block_size:
                raise ValueError(
                    f"x_block must have {self.block_size} samples, got {x_block.shape[0]}"
                )
            self._buffer[self.halo_size:] = x_block

        y = self.engine.correlate(
            self._buffer, self.offset, self.block_size, self.weights.values
        )

        # Rotation overwrites the halo, so it must follow the reads above
        self._rotate_halo()
        self.blocks_processed += 1
        return y

    def process_final_block(self, count: int) -> ArrayF:
        """
        Filter a partial block whose first ``count`` samples are valid.

        The rest of the block region is zeroed before filtering; only the
        ``count`` real outputs are returned.
        """
        if not 0 < count <= self.block_size:
            raise ValueError(f"count must be in [1, {self.block_size}], got {count}")
        self._buffer[self.halo_size + count:] = 0.0
        return self.process_block()[:count]

    def _rotate_halo(self):
        H = self.halo_size
        if H == 0:
            return
        # Source [B, B+H) overlaps the destination [0, H) when H > B
        tail = self._buffer[self.block_size:].copy()
        self._buffer[:H] = tail

    def process(self, x: ArrayF, tail_policy: TailPolicy | str = TailPolicy.TRUNCATE) -> ArrayF:
        """
        Filter a complete signal offline, block by block.

        Args:
            x: Input signal (N,)
            tail_policy: 'truncate' returns (N // B) * B samples, 'pad'
                zero-pads the last partial block and returns N samples

        Returns:
            Filtered signal
        """
        x = canonicalize_signal(x)
        policy = TailPolicy.parse(tail_policy)
        B = self.block_size
        n_blocks, remainder = block_layout(x.shape[0], B)
        self.reset()

        n_out = n_blocks * B
        if policy is TailPolicy.PAD:
            n_out += remainder
        y = np.empty(n_out, dtype=np.float64)

        region = self.block_region
        for b in range(n_blocks):
            start = b * B
            region[:] = x[start:start + B]
            y[start:start + B] = self.process_block()

        if remainder:
            start = n_blocks * B
            if policy is TailPolicy.PAD:
                region[:remainder] = x[start:]
                y[start:] = self.process_final_block(remainder)
            else:
                warnings.warn(
                    f"{remainder} trailing samples do not fill a block of {B} "
                    f"and were dropped (tail_policy='truncate')",
                    RuntimeWarning,
                    stacklevel=2,
                )

        return y

    def get_info(self) -> dict:
        """Get filter configuration info."""
        return {
            'filter_length': self.weights.L,
            'block_size': self.block_size,
            'halo_size': self.halo_size,
            'include_current': self.include_current,
            'engine': self.engine.__class__.__name__,
            'buffer_bytes': self._buffer.nbytes,
            'blocks_processed': self.blocks_processed,
        }
