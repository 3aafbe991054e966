"""
Message to block conversion, including the length padding rule.

Messages are either bit strings ('0'/'1' characters) or byte strings.
Both go through the same slicing and padding logic; only the zero
symbol and the length field representation differ.
"""

from typing import Iterable, Iterator, Union

from .errors import InvalidInput

Message = Union[str, bytes]

BIT = "bit"
BYTE = "byte"


###############################
# Bit / byte helpers
###############################

def check_bits(bits: str) -> str:
    """
    Return ``bits`` unchanged if it only holds '0' and '1', else raise
    InvalidInput.
    """
    if not isinstance(bits, str):
        raise InvalidInput(f"expected a bit string, got {type(bits).__name__}")
    bad = set(bits) - {"0", "1"}
    if bad:
        raise InvalidInput(f"bit string contains invalid symbols: {''.join(sorted(bad))!r}")
    return bits


def bits_to_bytes(bits: str) -> bytes:
    """
    Pack a bit string MSB-first into bytes. A trailing partial byte is
    right-padded with zero bits.
    """
    check_bits(bits)
    if len(bits) % 8:
        bits += "0" * (8 - len(bits) % 8)
    return bytes(int(bits[i:i + 8], 2) for i in range(0, len(bits), 8))


def bytes_to_bits(data: bytes) -> str:
    """Render each byte as 8 bits, most significant first."""
    return "".join(format(b, "08b") for b in data)


def as_unit(message, unit: str) -> Message:
    """
    Coerce a message to the representation used by ``unit``: bit strings
    for ``"bit"``, bytes for ``"byte"``.
    """
    if isinstance(message, str):
        check_bits(message)
        return message if unit == BIT else bits_to_bytes(message)
    if isinstance(message, (bytes, bytearray, memoryview)):
        data = bytes(message)
        return bytes_to_bits(data) if unit == BIT else data
    raise InvalidInput(f"cannot hash a value of type {type(message).__name__}")


###############################
# Block codec
###############################

class BlockCodec:
    """
    Splits messages into blocks of ``block_width`` symbols and appends
    the message length.

    The length field goes right after the content of the last block when
    it fits in the remaining space, and into a new zero-left-padded block
    otherwise (or when the last block is already full).

    A dedicated length block keeps the field at its right end, also in
    byte mode, so byte digests differ from layouts that put it first.
    """

    def __init__(self, block_width: int, unit: str = BYTE, length_width: int = 1):
        self.block_width = block_width
        self.unit = unit
        self.length_width = length_width
        self.zero = "0" if unit == BIT else b"\x00"

    @classmethod
    def from_config(cls, config) -> "BlockCodec":
        return cls(config.block_width, config.mode, config.length_width)

    def encode_length(self, length: int) -> Message:
        """
        Length field for a message of ``length`` symbols.

        Bit mode uses the shortest binary representation; byte mode a
        big-endian integer of ``length_width`` bytes. Either is cut down to
        its low-order ``block_width`` symbols, and byte mode wraps modulo
        ``256 ** length_width``.
        """
        if self.unit == BIT:
            field = format(length, "b")
        else:
            field = (length % (256 ** self.length_width)).to_bytes(self.length_width, "big")
        return field[-self.block_width:]

    def decode_length(self, block: Message) -> int:
        """Read the length back out of a dedicated length block."""
        if self.unit == BIT:
            return int(check_bits(block) or "0", 2)
        return int.from_bytes(block, "big")

    def length_block(self, length: int) -> Message:
        field = self.encode_length(length)
        return self.zero * (self.block_width - len(field)) + field

    def final_blocks(self, tail: Message, length: int) -> list:
        """
        Blocks closing a message of ``length`` symbols whose unconsumed
        remainder is ``tail``. An empty tail after a non-empty message
        means the last chunk was full, so the length gets its own block.
        """
        if length and not tail:
            return [self.length_block(length)]
        field = self.encode_length(length)
        if len(tail) + len(field) > self.block_width:
            return [tail + self.zero * (self.block_width - len(tail)), self.length_block(length)]
        block = tail + field
        return [block + self.zero * (self.block_width - len(block))]

    def blocks(self, message) -> list:
        """Split a whole in-memory message into padded blocks."""
        return list(self.stream_blocks([as_unit(message, self.unit)]))

    def stream_blocks(self, chunks: Iterable[Message]) -> Iterator[Message]:
        """
        Lazily re-chunk an iterable of message pieces into blocks.

        Full blocks are yielded as soon as they are available; the length
        is counted on the way, so the input is consumed exactly once.

        In byte mode every chunk must be bytes: bit-string chunks would be
        packed (and zero-padded) one at a time.
        """
        size = self.block_width
        buffer = self.zero[:0]
        length = 0
        for chunk in chunks:
            if self.unit == BYTE and isinstance(chunk, str):
                raise InvalidInput("byte-mode streams take bytes chunks, not bit strings")
            chunk = as_unit(chunk, self.unit)
            length += len(chunk)
            buffer += chunk
            while len(buffer) >= size:
                yield buffer[:size]
                buffer = buffer[size:]

        yield from self.final_blocks(buffer, length)
