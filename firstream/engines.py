"""
Inner-product engines for block FIR filtering.

Every engine computes, for n in [0, block_len):

    y[n] = Σₖ w[k]·buffer[offset + n + k]

reading only buffer[offset : offset + block_len + L - 1]. The filter passes
its working buffer and an explicit offset; engines never hold on to either.

Engines:
- DirectNumpyEngine: reference, one np.dot per output sample
- SlidingWindowEngine: strided (B, L) window view times the weights
- CorrelateEngine: scipy.signal.correlate, FFT for long filters
- NumbaEngine: JIT-compiled loop
"""

from typing import Protocol

import numpy as np
from numba import njit, prange
from numpy.lib.stride_tricks import sliding_window_view
from scipy.signal import correlate

from firstream.weights import ArrayF


class FirWindowEngine(Protocol):
    """Strategy interface for the sliding inner product of one block."""

    def correlate(
        self,
        buffer: ArrayF,
        offset: int,
        block_len: int,
        weights: ArrayF
    ) -> ArrayF:
        """
        Args:
            buffer: Working buffer (halo + block)
            offset: Index of the first sample of the first window
            block_len: Number of outputs to produce (B)
            weights: Filter coefficients (L,)

        Returns:
            Output block (B,)
        """
        ...


def _window_span(buffer: ArrayF, offset: int, block_len: int, L: int) -> ArrayF:
    """Slice covering every window of the block; rejects out-of-range reads."""
    end = offset + block_len + L - 1
    if offset < 0 or end > buffer.shape[0]:
        raise ValueError(
            f"windows [{offset}, {end}) fall outside buffer of length {buffer.shape[0]}"
        )
    return buffer[offset:end]


class DirectNumpyEngine:
    """Reference implementation: y[n] = wᵀ·x[offset+n : offset+n+L]"""

    def correlate(
        self,
        buffer: ArrayF,
        offset: int,
        block_len: int,
        weights: ArrayF
    ) -> ArrayF:
        L = weights.shape[0]
        span = _window_span(buffer, offset, block_len, L)
        y = np.empty(block_len, dtype=np.float64)

        for n in range(block_len):
            y[n] = np.dot(weights, span[n:n + L])

        return y


class SlidingWindowEngine:
    """
    Vectorized engine: one GEMV over a zero-copy window matrix.

    sliding_window_view gives X[n, k] = span[n + k], shape (B, L), so the
    whole block is X @ w with no Python loop over samples.
    """

    def correlate(
        self,
        buffer: ArrayF,
        offset: int,
        block_len: int,
        weights: ArrayF
    ) -> ArrayF:
        L = weights.shape[0]
        span = _window_span(buffer, offset, block_len, L)
        X = sliding_window_view(span, L)  # (B, L)
        return X @ weights


class CorrelateEngine:
    """
    SciPy correlation engine.

    scipy.signal.correlate in 'valid' mode computes exactly the unreversed
    inner products above. With method='auto' SciPy switches to FFT when it
    is cheaper, which pays off for long filters (L >= ~128).
    """

    def __init__(self, method: str = "auto"):
        if method not in ("auto", "direct", "fft"):
            raise ValueError(f"method must be 'auto', 'direct' or 'fft', got '{method}'")
        self.method = method

    def correlate(
        self,
        buffer: ArrayF,
        offset: int,
        block_len: int,
        weights: ArrayF
    ) -> ArrayF:
        L = weights.shape[0]
        span = _window_span(buffer, offset, block_len, L)
        y = correlate(span, weights, mode="valid", method=self.method)
        return np.ascontiguousarray(y, dtype=np.float64)


@njit(parallel=True, cache=True)
def _numba_correlate(
    buffer: np.ndarray,
    weights: np.ndarray,
    offset: int,
    block_len: int
) -> np.ndarray:
    """Numba-optimized sliding inner product."""
    L = weights.shape[0]
    y = np.zeros(block_len, dtype=np.float64)

    for n in prange(block_len):
        accum = 0.0
        base = offset + n
        for k in range(L):
            accum += weights[k] * buffer[base + k]
        y[n] = accum

    return y


class NumbaEngine:
    """
    Numba JIT engine.

    First call compiles (cached on disk afterwards). Parallel over output
    samples; each sample is an independent inner product.
    """

    def correlate(
        self,
        buffer: ArrayF,
        offset: int,
        block_len: int,
        weights: ArrayF
    ) -> ArrayF:
        _window_span(buffer, offset, block_len, weights.shape[0])
        return _numba_correlate(
            np.ascontiguousarray(buffer, dtype=np.float64),
            np.ascontiguousarray(weights, dtype=np.float64),
            offset,
            block_len,
        )


ENGINES = {
    "direct": DirectNumpyEngine,
    "sliding": SlidingWindowEngine,
    "correlate": CorrelateEngine,
    "numba": NumbaEngine,
}


def make_engine(name: str, filter_length: int = 1, use_numba: bool = False) -> FirWindowEngine:
    """
    Build an engine by name.

    'auto' picks by filter length: CorrelateEngine from L=128 up (FFT
    crossover), NumbaEngine if requested, SlidingWindowEngine otherwise.
    """
    name = name.lower()
    if name == "auto":
        if filter_length >= 128:
            return CorrelateEngine()
        if use_numba:
            return NumbaEngine()
        return SlidingWindowEngine()
    try:
        return ENGINES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown engine '{name}'. Available: {['auto'] + sorted(ENGINES)}"
        ) from None
