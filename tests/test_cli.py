"""Tests for the firstream command-line interface."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from firstream import WeightVector, read_raw
from firstream.cli import build_parser, main


class TestCLI:

    def test_generate_then_filter(self, tmp_path):
        src, dst = tmp_path / "test_in.dat", tmp_path / "test_out.dat"

        assert main(["generate", str(src), "--count", "1000", "--seed", "1"]) == 0
        assert read_raw(src).shape == (1000,)

        assert main(["filter", str(src), str(dst), "--seed", "2"]) == 0
        assert read_raw(dst).shape == (1000,)

    def test_filter_with_weights_file(self, tmp_path):
        src, dst, weights_path = tmp_path / "in.dat", tmp_path / "out.dat", tmp_path / "w.npy"
        np.save(weights_path, np.array([1.0]))
        main(["generate", str(src), "--count", "250", "--seed", "3"])

        code = main([
            "filter", str(src), str(dst), "--weights", str(weights_path),
            "--block-size", "50", "--halo-size", "0", "--engine", "direct",
        ])

        assert code == 0
        assert_allclose(read_raw(dst), read_raw(src))

    def test_pad_tail(self, tmp_path):
        src, dst = tmp_path / "in.dat", tmp_path / "out.dat"
        main(["generate", str(src), "--count", "1050", "--seed", "3"])

        assert main(["filter", str(src), str(dst), "--tail", "pad"]) == 0
        assert read_raw(dst).shape == (1050,)

    def test_missing_input_exits_nonzero(self, tmp_path, caplog):
        code = main(["filter", str(tmp_path / "missing.dat"), str(tmp_path / "out.dat")])
        assert code == 1
        assert "missing.dat" in caplog.text

    def test_halo_too_small_exits_nonzero(self, tmp_path):
        src = tmp_path / "in.dat"
        main(["generate", str(src), "--count", "100"])
        code = main(["filter", str(src), str(tmp_path / "out.dat"), "--filter-length", "20"])
        assert code == 2

    def test_reference_alignment_flag(self, tmp_path):
        src, dst = tmp_path / "in.dat", tmp_path / "out.dat"
        main(["generate", str(src), "--count", "200", "--seed", "0"])
        WeightVector([1.0]).to_npz(tmp_path / "w.npz")

        code = main([
            "filter", str(src), str(dst), "--weights", str(tmp_path / "w.npz"),
            "--halo-size", "1", "--reference-alignment",
        ])

        x = read_raw(src)
        assert code == 0
        assert_allclose(read_raw(dst), np.concatenate([[0.0], x[:-1]]))

    def test_unknown_engine_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["filter", "a", "b", "--engine", "gpu"])
