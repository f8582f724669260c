"""Command-line interface for firstream."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from firstream.config import StreamConfig, TailPolicy
from firstream.engines import ENGINES
from firstream.errors import FirStreamError
from firstream.io import write_test_file
from firstream.session import filter_file
from firstream.weights import WeightVector

logger = logging.getLogger("firstream")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def cmd_generate(args: argparse.Namespace) -> None:
    data = write_test_file(args.output, args.count, seed=args.seed)
    logger.info("[generate] wrote %d samples to %s", data.size, args.output)


def cmd_filter(args: argparse.Namespace) -> None:
    config = StreamConfig(
        block_size=args.block_size,
        halo_size=args.halo_size,
        filter_length=args.filter_length,
        weights_seed=args.seed,
        tail_policy=args.tail,
        include_current=not args.reference_alignment,
        engine=args.engine,
        use_numba=args.numba,
    )
    weights = WeightVector.load(Path(args.weights)) if args.weights else None
    report = filter_file(args.input, args.output, weights=weights, config=config)
    logger.info(
        "[filter] blocks=%d written=%d dropped=%d",
        report.n_blocks, report.samples_written, report.samples_dropped,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firstream", description="Block streaming FIR filter for raw float64 files"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every block")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Write uniform [0, 1) test samples")
    generate.add_argument("output", help="Destination raw float64 file")
    generate.add_argument("--count", type=int, default=1000, help="Number of samples")
    generate.add_argument("--seed", type=int, default=None, help="Generator seed")
    generate.set_defaults(func=cmd_generate)

    filt = sub.add_parser("filter", help="Filter a raw float64 file block by block")
    filt.add_argument("input", help="Input raw float64 file")
    filt.add_argument("output", help="Output raw float64 file")
    filt.add_argument("--block-size", type=int, default=100, help="Samples per block")
    filt.add_argument("--halo-size", type=int, default=10, help="Samples carried between blocks")
    filt.add_argument("--filter-length", type=int, default=10, help="Taps of generated weights")
    filt.add_argument("--seed", type=int, default=None, help="Seed for generated weights")
    filt.add_argument("--weights", help="Weights file (.npz with 'weights' or .npy)")
    filt.add_argument(
        "--tail",
        choices=[p.value for p in TailPolicy],
        default=TailPolicy.TRUNCATE.value,
        help="Handling of a final partial block",
    )
    filt.add_argument(
        "--reference-alignment",
        action="store_true",
        help="Use the L samples strictly before each output (needs halo >= L)",
    )
    filt.add_argument(
        "--engine", choices=["auto"] + sorted(ENGINES), default="auto", help="Inner-product engine"
    )
    filt.add_argument("--numba", action="store_true", help="Prefer the Numba engine in auto mode")
    filt.set_defaults(func=cmd_filter)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        args.func(args)
    except FirStreamError as exc:
        logger.error("Error: %s", exc)
        return 1
    except OSError as exc:
        logger.error("Error: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
