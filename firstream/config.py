"""Stream filtering configuration."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TailPolicy(str, Enum):
    """What to do with the final N % B samples that do not fill a block."""

    TRUNCATE = "truncate"
    PAD = "pad"

    @classmethod
    def parse(cls, value: "TailPolicy | str") -> "TailPolicy":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"tail_policy must be one of {[p.value for p in cls]}, got '{value}'"
            ) from None


@dataclass
class StreamConfig:
    """Configuration for a block streaming session.

    Defaults reproduce the classic setup: 100-sample blocks, a 10-sample halo
    and a 10-tap filter.

    Attributes:
        block_size: Samples read, filtered and written per step (B).
        halo_size: Trailing samples carried into the next block (H). None
            means the minimum the filter needs.
        filter_length: Number of taps (L) when weights are generated.
        weights_seed: Seed for generated weights.
        tail_policy: 'truncate' drops a trailing partial block, 'pad'
            zero-pads it and writes only its real samples.
        include_current: Window ends at and includes the current sample.
            False uses the L samples strictly before it (needs H >= L).
        engine: Engine name, see firstream.engines.make_engine.
        use_numba: Let 'auto' pick the Numba engine for short filters.
    """
    block_size: int = 100
    halo_size: Optional[int] = 10
    filter_length: int = 10
    weights_seed: Optional[int] = None
    tail_policy: TailPolicy = TailPolicy.TRUNCATE
    include_current: bool = True
    engine: str = "auto"
    use_numba: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.block_size < 1:
            raise ValueError("block_size must be at least 1")
        if self.halo_size is not None and self.halo_size < 0:
            raise ValueError("halo_size must be non-negative")
        if self.filter_length < 1:
            raise ValueError("filter_length must be at least 1")
        self.tail_policy = TailPolicy.parse(self.tail_policy)
