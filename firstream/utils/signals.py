"""
Signal validation and block arithmetic.

Single-channel conventions
--------------------------
All streams are 1D float64 sequences of shape (N,). Multi-channel input is
rejected rather than flattened.

Block layout for a sequence of N samples and block size B:
    - n_blocks = N // B full blocks
    - remainder = N % B trailing samples
"""

import numpy as np


def canonicalize_signal(x, name: str = "x") -> np.ndarray:
    """
    Convert a signal to a contiguous 1D float64 array.

    Parameters
    ----------
    x : array_like
        Input samples, shape (N,)
    name : str
        Name used in error messages

    Returns
    -------
    x_canon : np.ndarray
        Contiguous float64 array, shape (N,)

    Raises
    ------
    ValueError
        If the input is not 1D

    Examples
    --------
    >>> canonicalize_signal([1, 2, 3]).dtype
    dtype('float64')
    """
    x = np.ascontiguousarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"{name} must be 1D (N,), got shape {x.shape}")
    return x


def block_layout(n_samples: int, block_size: int) -> tuple[int, int]:
    """
    Split a sequence length into full blocks and a remainder.

    Parameters
    ----------
    n_samples : int
        Sequence length N
    block_size : int
        Block size B

    Returns
    -------
    n_blocks : int
        Number of full blocks, N // B
    remainder : int
        Samples left over, N % B

    Examples
    --------
    >>> block_layout(1000, 100)
    (10, 0)
    >>> block_layout(1050, 100)
    (10, 50)
    """
    if n_samples < 0:
        raise ValueError(f"n_samples must be non-negative, got {n_samples}")
    if block_size < 1:
        raise ValueError(f"block_size must be at least 1, got {block_size}")
    return divmod(n_samples, block_size)
