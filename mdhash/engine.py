import logging
import secrets
import struct
from functools import partial
from typing import Callable, Iterable, Optional, Union

from .codec import BIT, BlockCodec, as_unit, bits_to_bytes, bytes_to_bits, check_bits
from .compression import mixer_for
from .config import HashConfig, load_config
from .errors import InvalidConfiguration, InvalidInput

logger = logging.getLogger(__name__)

###############################
# Step 1: Initialization Vector
###############################

# Well-known starting constant (the SHA-256 initial hash words), cycled
# or cut to the digest width.
default_iv = [
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19
]
DEFAULT_IV_BYTES = struct.pack(">8I", *default_iv)


def fixed_iv(config: HashConfig):
    """
    Reproducible IV of the configured width. In bit mode this is the
    leading bits of the constant, so an 8-bit digest starts at '01101010'.
    """
    if config.mode == BIT:
        nbytes = -(-config.digest_width // 8)
        repeated = DEFAULT_IV_BYTES * (nbytes // len(DEFAULT_IV_BYTES) + 1)
        return bytes_to_bits(repeated[:nbytes])[:config.digest_width]
    repeated = DEFAULT_IV_BYTES * (config.digest_width // len(DEFAULT_IV_BYTES) + 1)
    return repeated[:config.digest_width]


def random_iv(config: HashConfig):
    """Fresh IV from the OS random source."""
    if config.mode == BIT:
        return "".join(secrets.choice("01") for _ in range(config.digest_width))
    return secrets.token_bytes(config.digest_width)


def make_iv(config: HashConfig):
    if config.iv_source == "random":
        return random_iv(config)
    return fixed_iv(config)


def to_hex(value) -> str:
    """
    Lowercase hexadecimal rendering of a digest, two characters per
    (started) byte. Bit strings are packed MSB-first first.
    """
    if isinstance(value, str):
        value = bits_to_bytes(value)
    return bytes(value).hex()


###############################
# Step 2: The Hash Engine
###############################

class HashEngine:
    """
    Merkle-Damgard iteration over the blocks of one message.

    The state starts as a copy of the IV; every block is folded in
    ``config.rounds`` times with the configured mixing strategy. The
    state after the last (length-carrying) block is the digest.

    A copy of the IV is kept as ``initial_state`` so a second run can be
    started from the same point with :meth:`fork`.
    """

    def __init__(self, config: Optional[HashConfig] = None, iv=None, **options):
        # model_copy(update=...) skips validation, so check every config here
        if config is None:
            config = load_config(**options)
        else:
            config = load_config(**{**config.model_dump(), **options})

        self.config = config
        self.codec = BlockCodec.from_config(config)
        self.mixer = mixer_for(config)

        if iv is None:
            iv = make_iv(config)
        self._initial_state = self._check_iv(iv)
        self._state = self._initial_state
        logger.debug("engine created: %s iv=%s", config, to_hex(self._initial_state))

    def _check_iv(self, iv):
        try:
            iv = as_unit(iv, self.config.mode)
        except InvalidInput as exc:
            raise InvalidConfiguration(f"unusable IV: {exc}") from exc
        if len(iv) != self.config.digest_width:
            raise InvalidConfiguration(
                f"IV width {len(iv)} does not match digest width {self.config.digest_width}"
            )
        return iv

    @property
    def state(self):
        return self._state

    @property
    def initial_state(self):
        return self._initial_state

    def fork(self) -> "HashEngine":
        """New engine with the same configuration, started from the captured IV."""
        return HashEngine(self.config, iv=self._initial_state)

    def reset(self) -> None:
        self._state = self._initial_state

    def absorb(self, block):
        """
        Apply the compression step ``rounds`` times, feeding the same
        block against the progressively updated state.
        """
        if len(block) != self.config.block_width:
            raise InvalidInput(
                f"block width {len(block)} does not match configured width {self.config.block_width}"
            )
        if self.config.mode == BIT:
            check_bits(block)
        state = self._state
        for _ in range(self.config.rounds):
            state = self.mixer.compress(state, block)
        self._state = state
        logger.debug("absorbed block %s -> state %s", to_hex(block), to_hex(state))
        return state

    def absorb_all(self, blocks: Iterable):
        for block in blocks:
            self.absorb(block)
        return self._state

    def update(self, message):
        """
        Absorb the padded blocks of ``message`` into the live state and
        return it. Successive calls chain messages onto one state.
        """
        return self.absorb_all(self.codec.blocks(message))

    def hash(self, message):
        """
        Digest of an in-memory message (bit string or bytes), computed
        from the initial state.
        """
        self.reset()
        return self.update(message)

    def hash_stream(self, source: Union[Callable, Iterable]):
        """
        Digest of a message delivered in chunks.

        ``source`` is either an iterable of chunks or a zero-argument
        callable returning the next chunk and ``None`` (or an empty
        chunk) once exhausted.
        """
        self.reset()
        if callable(source):
            source = iter(source, None)
        return self.absorb_all(self.codec.stream_blocks(_until_empty(source)))

    def hash_file(self, path):
        """
        Digest of a file read sequentially in block-sized chunks. Read
        errors propagate to the caller.
        """
        chunk_size = self.config.block_width
        if self.config.mode == BIT:
            chunk_size = max(1, chunk_size // 8)
        with open(path, "rb") as f:
            return self.hash_stream(iter(partial(f.read, chunk_size), b""))

    @property
    def digest(self):
        return self._state

    def hexdigest(self) -> str:
        return to_hex(self._state)


def _until_empty(chunks: Iterable):
    for chunk in chunks:
        if chunk is None or len(chunk) == 0:
            return
        yield chunk


###############################
# Step 3: Convenience wrappers
###############################

def hash_message(message, config: Optional[HashConfig] = None, iv=None):
    """
    Hash ``message`` from a fresh engine and return the digest in the
    configured unit (bit string or bytes).
    """
    return HashEngine(config or HashConfig(), iv=iv).hash(message)


def hash_trace(message, config: Optional[HashConfig] = None, iv=None) -> dict:
    """
    Hash ``message`` and record every intermediate state for display.
    """
    engine = HashEngine(config or HashConfig(), iv=iv)
    trace = {}
    trace["config"] = engine.config.model_dump()
    trace["message"] = to_hex(as_unit(message, engine.config.mode))
    trace["iv"] = to_hex(engine.initial_state)

    steps = []
    for index, block in enumerate(engine.codec.blocks(message)):
        state = engine.absorb(block)
        steps.append({"block": index, "input": to_hex(block), "state": to_hex(state)})
    trace["blocks"] = steps

    digest = engine.digest
    trace["finalDigest"] = to_hex(digest)
    if engine.config.mode == BIT:
        trace["finalBits"] = digest
    else:
        trace["finalBits"] = bytes_to_bits(digest)
    return {"finalDigest": trace["finalDigest"], "trace": trace}
