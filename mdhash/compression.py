"""
Compression step: fold one block into the running state.

Two mixing strategies share the same contract: given the current state
(digest width W) and a block (width B, which may be larger or smaller
than W), return a new state of exactly W units. Block position i always
lands on state position i mod W.
"""


def right_rotate(value: int, bits: int) -> int:
    """
    Right rotate an 8-bit integer.
    """
    bits %= 8
    return ((value >> bits) | (value << (8 - bits))) & 0xFF


class Mixer:
    """Base class for the per-block mixing function."""

    unit = None

    def compress(self, state, block):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class XorMixer(Mixer):
    """
    Bit mixing: ``new[k mod W] = state[k mod W] XOR block[k]``.

    Every write reads the state as it was before the step, so when the
    block is wider than the state the last block bit mapped to a position
    wins.
    """

    unit = "bit"

    def compress(self, state: str, block: str) -> str:
        result = list(state)
        width = len(state)
        for k, bit in enumerate(block):
            position = k % width
            result[position] = "1" if state[position] != bit else "0"
        return "".join(result)


class RotateXorAddMixer(Mixer):
    """
    Byte mixing with rotation, XOR and addition.

    For each block byte: rotate the working state byte right, XOR it with
    the block byte, then add the byte the state held before this step
    (mod 256).
    """

    unit = "byte"

    def __init__(self, rotation: int = 3):
        self.rotation = rotation

    def compress(self, state: bytes, block: bytes) -> bytes:
        # Start from a copy of the current state
        result = bytearray(state)
        width = len(state)
        for i, value in enumerate(block):
            position = i % width
            rotated = right_rotate(result[position], self.rotation)
            mixed = rotated ^ value
            # Wraparound is intended
            result[position] = (mixed + state[position]) & 0xFF
        return bytes(result)

    def __repr__(self):
        return f"{type(self).__name__}(rotation={self.rotation})"


def mixer_for(config) -> Mixer:
    """Pick the mixing strategy matching ``config.mode``."""
    if config.mode == "bit":
        return XorMixer()
    return RotateXorAddMixer(config.rotation)
