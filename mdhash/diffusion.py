"""
Empirical diffusion measurement.

Two values (messages or digests) are rendered to bits, the shorter one
is right-padded with zero bits for the comparison only, and the number
of disagreeing positions is reported.
"""

from dataclasses import dataclass

from .codec import as_unit, bytes_to_bits, check_bits
from .errors import InvalidInput


def to_bits(value) -> str:
    if isinstance(value, str):
        return check_bits(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes_to_bits(bytes(value))
    raise InvalidInput(f"cannot compare a value of type {type(value).__name__}")


@dataclass(frozen=True)
class DiffusionReport:
    bits1: str
    bits2: str
    different_bits: int

    @property
    def total_bits(self) -> int:
        return len(self.bits1)

    @property
    def percentage(self) -> float:
        if not self.total_bits:
            return 0.0
        return self.different_bits / self.total_bits * 100

    @property
    def markers(self) -> str:
        """'^' under every differing bit, ' ' elsewhere."""
        return "".join("^" if a != b else " " for a, b in zip(self.bits1, self.bits2))

    def render(self, visual: bool = True) -> str:
        lines = [
            f"Total bits compared: {self.total_bits}",
            f"Different bits: {self.different_bits}",
            f"Diffusion percentage: {self.percentage:.2f}%",
        ]
        if visual:
            lines += [
                "Bit differences (^ marks different bits):",
                f"1: {self.bits1}",
                f"2: {self.bits2}",
                f"   {self.markers}",
            ]
        return "\n".join(lines)

    def as_dict(self) -> dict:
        return {
            "totalBits": self.total_bits,
            "differentBits": self.different_bits,
            "percentage": round(self.percentage, 2),
            "bits1": self.bits1,
            "bits2": self.bits2,
            "markers": self.markers,
        }


def measure_diffusion(first, second) -> DiffusionReport:
    """
    Compare two byte strings or bit strings bit by bit.

    Never fails on length mismatch: the shorter side is padded with
    zeros, which biases the percentage towards similarity.
    """
    bits1 = to_bits(first)
    bits2 = to_bits(second)
    max_length = max(len(bits1), len(bits2))
    bits1 = bits1.ljust(max_length, "0")
    bits2 = bits2.ljust(max_length, "0")
    different = sum(a != b for a, b in zip(bits1, bits2))
    return DiffusionReport(bits1, bits2, different)


###############################
# Experiments
###############################

def flip_bit(message, index: int):
    """
    Copy of ``message`` with bit ``index`` inverted (bit 0 is the most
    significant bit of the first byte).
    """
    bits = to_bits(message)
    if not 0 <= index < len(bits):
        raise InvalidInput(f"bit index {index} outside message of {len(bits)} bits")
    flipped = bits[:index] + ("1" if bits[index] == "0" else "0") + bits[index + 1:]
    if isinstance(message, str):
        return flipped
    return bytes(int(flipped[i:i + 8], 2) for i in range(0, len(flipped), 8))


def message_diffusion(first, second, engine) -> DiffusionReport:
    """Hash two messages from the engine's initial state and compare the digests."""
    digest1 = engine.fork().hash(first)
    digest2 = engine.fork().hash(second)
    return measure_diffusion(digest1, digest2)


def length_diffusion(engine, message, delta: int = 1) -> DiffusionReport:
    """
    Digest ``message`` twice from the engine's initial state: once
    normally, once with the final length field encoding ``n + delta``.

    Both runs absorb the same content blocks, so they differ only in the
    closing block(s). The returned report compares the two digests.
    """
    codec = engine.codec
    data = as_unit(message, engine.config.mode)
    blocks = codec.blocks(data)

    original = engine.fork()
    original.absorb_all(blocks)

    # Rebuild the closing blocks around a shifted length.
    size = codec.block_width
    full = len(data) - len(data) % size
    content, tail = data[:full], data[full:]
    closing = codec.final_blocks(tail, len(data) + delta)

    modified = engine.fork()
    modified.absorb_all(content[i:i + size] for i in range(0, len(content), size))
    modified.absorb_all(closing)
    return measure_diffusion(original.digest, modified.digest)

