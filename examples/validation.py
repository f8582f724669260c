import numpy as np
import matplotlib.pyplot as plt
from scipy.signal import freqz, lfilter


def test_passthrough():
    """Test 1: L=1, w=1 should be identity."""
    from firstream import BlockStreamFilter, WeightVector

    proc = BlockStreamFilter(WeightVector([1.0]), block_size=512)
    x = np.random.randn(10240)
    y = proc.process(x)

    error = np.max(np.abs(y - x))
    assert error == 0.0, f"Passthrough test failed: error={error}"
    print("✓ Passthrough test passed")


def test_block_boundaries():
    """Test 2: block-wise output must not depend on block size."""
    from firstream import BlockStreamFilter, WeightVector

    weights = WeightVector.random(64, seed=0)
    x = np.random.randn(48000)
    reference = lfilter(weights.values[::-1], [1.0], x)

    for block_size in (1, 17, 64, 500, 4800, 48000):
        proc = BlockStreamFilter(weights, block_size=block_size, halo_size=63)
        y = proc.process(x, tail_policy="pad")
        error = np.max(np.abs(y - reference))
        print(f"  B={block_size:>5}: max error {error:.2e}")
        assert error < 1e-10, f"Block size {block_size} broke continuity"
    print("✓ Block boundary continuity verified")


def plot_moving_average(fs: int = 1000, L: int = 25):
    """Test 3: a boxcar smooths a noisy tone; plot input, output and response."""
    from firstream import BlockStreamFilter, WeightVector

    weights = WeightVector(np.ones(L) / L)
    t = np.arange(2 * fs) / fs
    x = np.sin(2 * np.pi * 3 * t) + 0.3 * np.random.randn(len(t))

    proc = BlockStreamFilter(weights, block_size=100)
    y = proc.process(x)

    w, h = freqz(weights.values, worN=1024, fs=fs)

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7))
    ax1.plot(t, x, alpha=0.4, label="input")
    ax1.plot(t[:len(y)], y, label=f"{L}-tap moving average")
    ax1.set_xlabel("Time [s]")
    ax1.legend()
    ax2.plot(w, 20 * np.log10(np.abs(h) + 1e-12))
    ax2.set_xlabel("Frequency [Hz]")
    ax2.set_ylabel("Magnitude [dB]")
    fig.tight_layout()
    fig.savefig("moving_average.png", dpi=120)
    print("✓ Saved moving_average.png")


if __name__ == "__main__":
    test_passthrough()
    test_block_boundaries()
    plot_moving_average()
