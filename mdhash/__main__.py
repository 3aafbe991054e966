import argparse
import logging
import sys
from pathlib import Path

from .codec import BIT, bytes_to_bits
from .config import BYTE_PROFILE, FILE_PROFILE
from .diffusion import length_diffusion, measure_diffusion
from .engine import HashEngine, to_hex
from .errors import HashError

MESSAGE_1 = "01111010011111110100101111111011"
MESSAGE_2 = "11111010011111110100101111111011"


def describe(engine) -> str:
    unit = "bits" if engine.config.mode == BIT else "bytes"
    return (
        f"{engine.config.digest_width} {unit} digest, "
        f"{engine.config.block_width} {unit} blocks, {engine.config.rounds} rounds"
    )


def run_demo(args) -> None:
    """Hash two bit strings one bit apart and compare inputs and digests."""
    config = BYTE_PROFILE.model_copy(update={"iv_source": "fixed" if args.fixed_iv else "random"})
    engine = HashEngine(config)
    print(f"Construction: {describe(engine)}")
    print(f"IV:       {bytes_to_bits(engine.initial_state)}")

    digests = []
    for label, message in (("1", args.first), ("2", args.second)):
        digest = engine.hash(message)
        digests.append(digest)
        print(f"Message{label}: {message}")
        print(f"Digest{label}:  {bytes_to_bits(digest)}")

    print("\nComparing input messages:")
    print(measure_diffusion(args.first, args.second).render())
    print("\nComparing output digests:")
    print(measure_diffusion(*digests).render())


def run_file(args) -> None:
    """Hash a file with the 160-bit construction and flip its length field."""
    config = FILE_PROFILE
    if args.fixed_iv:
        config = config.model_copy(update={"iv_source": "fixed"})
    engine = HashEngine(config)
    print(f"Initialization Vector: {to_hex(engine.initial_state)}")

    digest = engine.hash_file(args.path)
    print(f"Digest: {to_hex(digest)}")

    report = length_diffusion(engine, Path(args.path).read_bytes())
    print("\nDiffusion Analysis (changing only file length by 1 byte):")
    print(report.render(visual=False))


def run_stats(args) -> None:
    from .analysis import plot_results, run_all_tests

    stats = run_all_tests(num_samples=args.samples, seed=args.seed)
    print(f"Collisions found: {stats['collisions']}")
    print(f"Avalanche bit differences (sample): {stats['avalanche_diffs'][:5]}")
    for path in plot_results(stats, args.out):
        print(f"wrote {path}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="mdhash", description="Merkle-Damgard teaching hash")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every absorbed block")
    parser.add_argument("--fixed-iv", action="store_true", help="use the well-known IV instead of a random one")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="hash two bit strings and measure diffusion")
    demo.add_argument("first", nargs="?", default=MESSAGE_1)
    demo.add_argument("second", nargs="?", default=MESSAGE_2)
    demo.set_defaults(func=run_demo)

    file_cmd = sub.add_parser("file", help="hash a file with 160-bit blocks")
    file_cmd.add_argument("path")
    file_cmd.set_defaults(func=run_file)

    stats = sub.add_parser("stats", help="collision, uniformity and avalanche statistics")
    stats.add_argument("--samples", type=int, default=1000)
    stats.add_argument("--seed", type=int, default=None)
    stats.add_argument("--out", default=".")
    stats.set_defaults(func=run_stats)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        args.func(args)
    except HashError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
