import random
import string
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .config import FILE_PROFILE, HashConfig
from .diffusion import measure_diffusion
from .engine import HashEngine, fixed_iv


def random_string(rng: random.Random, min_length: int = 120, max_length: int = 1300) -> str:
    length = rng.randint(min_length, max_length)
    return ''.join(rng.choices(string.ascii_letters + string.digits, k=length))


def run_all_tests(num_samples: int = 1000, num_buckets: int = 64,
                  config: Optional[HashConfig] = None, seed: Optional[int] = None,
                  min_length: int = 120, max_length: int = 1300) -> dict:
    """
    Hash ``num_samples`` random alphanumeric strings and collect:

      - the number of repeated digests (collisions),
      - a histogram of ``digest mod num_buckets`` (uniformity),
      - the bit difference between each digest and the digest of the
        same string with its first character changed (avalanche).

    All samples share one IV so that the runs are comparable.
    """
    config = config or FILE_PROFILE.model_copy(update={"iv_source": "fixed"})
    rng = random.Random(seed)
    engine = HashEngine(config, iv=fixed_iv(config))

    hashes = set()
    collisions = 0
    buckets = [0] * num_buckets
    avalanche_diffs = []

    for _ in range(num_samples):
        s = random_string(rng, min_length, max_length)
        digest = engine.hash(s.encode())
        hex_digest = engine.hexdigest()

        # Collision
        if hex_digest in hashes:
            collisions += 1
        else:
            hashes.add(hex_digest)

        # Uniformity
        buckets[int(hex_digest, 16) % num_buckets] += 1

        # Avalanche
        modified = list(s)
        modified[0] = chr((ord(modified[0]) + 1) % 128)
        mod_digest = engine.hash(''.join(modified).encode())
        avalanche_diffs.append(measure_diffusion(digest, mod_digest).different_bits)

    return {
        "samples": num_samples,
        "digestBits": config.digest_bits,
        "collisions": collisions,
        "buckets": buckets,
        "avalanche_diffs": avalanche_diffs,
    }


def plot_results(stats: dict, out_dir=".") -> list[Path]:
    """Write the uniformity histogram and the avalanche boxplot as PNG files."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    buckets = stats["buckets"]

    # Uniformity Plot
    uniformity = out_dir / "uniformity_distribution.png"
    plt.bar(range(len(buckets)), buckets)
    plt.title("Hash Output Distribution (Uniformity)")
    plt.xlabel("Bucket")
    plt.ylabel("Count")
    plt.tight_layout()
    plt.savefig(uniformity)
    plt.close()

    # Avalanche Boxplot
    avalanche = out_dir / "avalanche_boxplot.png"
    plt.boxplot(stats["avalanche_diffs"])
    plt.title("Avalanche Effect - Bit Differences")
    plt.ylabel("Bit Differences")
    plt.grid(True)
    plt.savefig(avalanche)
    plt.close()

    return [uniformity, avalanche]


if __name__ == "__main__":
    stats = run_all_tests(num_samples=10000)
    print(f"\nCollisions found: {stats['collisions']}")
    print(f"Avalanche bit differences (sample): {stats['avalanche_diffs'][:5]}")
    plot_results(stats)
