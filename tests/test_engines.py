"""
Engine equivalence tests.

These tests verify:
1. All engines compute the same sliding inner products
2. Engines never read outside the working buffer
3. Auto-selection by filter length
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from firstream.engines import (
    CorrelateEngine,
    DirectNumpyEngine,
    NumbaEngine,
    SlidingWindowEngine,
    make_engine,
)

ALL_ENGINES = [DirectNumpyEngine, SlidingWindowEngine, CorrelateEngine, NumbaEngine]


class TestEngineCorrectness:
    """All engines agree with an explicit per-sample dot product."""

    @pytest.mark.parametrize("engine_cls", ALL_ENGINES)
    @pytest.mark.parametrize("L", [1, 3, 10, 200])
    def test_matches_explicit_sum(self, engine_cls, L):
        rng = np.random.default_rng(L)
        B = 64
        buffer = rng.standard_normal(L - 1 + B + 5)
        weights = rng.random(L)
        offset = 3

        y = engine_cls().correlate(buffer, offset, B, weights)

        expected = np.array([
            sum(weights[k] * buffer[offset + n + k] for k in range(L)) for n in range(B)
        ])
        assert y.shape == (B,)
        assert y.dtype == np.float64
        assert_allclose(y, expected, rtol=1e-10, atol=1e-10)

    @pytest.mark.parametrize("engine_cls", ALL_ENGINES)
    def test_weights_not_reversed(self, engine_cls):
        """w[0] multiplies the oldest sample of the window."""
        buffer = np.array([1.0, 0.0, 0.0, 0.0])
        weights = np.array([1.0, 2.0, 3.0])

        y = engine_cls().correlate(buffer, 0, 2, weights)

        assert_allclose(y, [1.0, 0.0], atol=1e-12)

    @pytest.mark.parametrize("engine_cls", ALL_ENGINES)
    def test_out_of_range_windows_rejected(self, engine_cls):
        buffer = np.zeros(10)
        weights = np.ones(4)
        with pytest.raises(ValueError, match="outside buffer"):
            engine_cls().correlate(buffer, 0, 8, weights)
        with pytest.raises(ValueError, match="outside buffer"):
            engine_cls().correlate(buffer, -1, 2, weights)

    def test_engines_agree_on_long_filter(self):
        rng = np.random.default_rng(0)
        L, B = 512, 1024
        buffer = rng.standard_normal(L - 1 + B)
        weights = rng.random(L)

        reference = DirectNumpyEngine().correlate(buffer, 0, B, weights)
        for engine in (SlidingWindowEngine(), CorrelateEngine("fft"), NumbaEngine()):
            assert_allclose(
                engine.correlate(buffer, 0, B, weights), reference, rtol=1e-9, atol=1e-9,
                err_msg=engine.__class__.__name__,
            )


class TestEngineSelection:
    """make_engine resolves names and auto-selects by filter length."""

    def test_auto_short_filter(self):
        assert isinstance(make_engine("auto", filter_length=10), SlidingWindowEngine)

    def test_auto_short_filter_numba(self):
        assert isinstance(make_engine("auto", filter_length=10, use_numba=True), NumbaEngine)

    def test_auto_long_filter(self):
        assert isinstance(make_engine("auto", filter_length=128), CorrelateEngine)

    @pytest.mark.parametrize("name,cls", [
        ("direct", DirectNumpyEngine),
        ("sliding", SlidingWindowEngine),
        ("correlate", CorrelateEngine),
        ("NUMBA", NumbaEngine),
    ])
    def test_by_name(self, name, cls):
        assert isinstance(make_engine(name), cls)

    def test_unknown_engine(self):
        with pytest.raises(ValueError, match="Unknown engine 'gpu'"):
            make_engine("gpu")

    def test_correlate_method_validated(self):
        with pytest.raises(ValueError, match="method"):
            CorrelateEngine(method="overlap")
