"""
FIR filter coefficients.

A WeightVector is the impulse response applied by the block filter. The
coefficients are supplied by the caller (designed elsewhere) or drawn from a
seeded uniform generator for tests and demos.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

ArrayF = npt.NDArray[np.floating]


@dataclass(frozen=True, eq=False)
class WeightVector:
    """
    Immutable ordered sequence of L filter coefficients.

    Convention (default alignment):
        y[n] = Σₖ w[k]·x[n - L + 1 + k]

    i.e. w[0] multiplies the oldest sample of the window and w[L-1] the
    newest. The weights are applied in stored order, without reversal.
    """

    values: ArrayF

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64, copy=True)

        if values.ndim != 1:
            raise ValueError("weights must be 1D")
        if values.shape[0] < 1:
            raise ValueError("weights must contain at least one coefficient")
        if not np.all(np.isfinite(values)):
            raise ValueError("weights must be finite")

        values = np.ascontiguousarray(values)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def L(self) -> int:
        """Filter length."""
        return int(self.values.shape[0])

    def __len__(self) -> int:
        return self.L

    @staticmethod
    def random(length: int, seed: int | None = None) -> WeightVector:
        """
        Draw L independent coefficients from uniform [0, 1).

        Pass a seed for reproducible weights; the same seed always yields
        the same vector.
        """
        if length < 1:
            raise ValueError("length must be at least 1")
        rng = np.random.default_rng(seed)
        return WeightVector(rng.random(length))

    def to_npz(self, path: Path) -> None:
        """Save weights to compressed NPZ file."""
        np.savez_compressed(path, weights=self.values)

    @staticmethod
    def from_npz(path: Path) -> WeightVector:
        """Load weights from NPZ file."""
        with np.load(path) as data:
            if "weights" not in data:
                raise ValueError(f"{path} has no 'weights' array")
            return WeightVector(data["weights"])

    @staticmethod
    def load(path: Path) -> WeightVector:
        """Load weights from a .npz archive or a plain .npy array."""
        path = Path(path)
        if path.suffix == ".npz":
            return WeightVector.from_npz(path)
        if path.suffix == ".npy":
            return WeightVector(np.load(path))
        raise ValueError(f"Unsupported weights file '{path.name}', expected .npz or .npy")

    def to_dict(self) -> dict[str, object]:
        return {"length": self.L, "weights": self.values.tolist()}
