"""
Teaching implementation of an iterated (Merkle-Damgard) hash function.

Not a secure hash: the construction exists to show block padding,
per-block compression and diffusion measurement.
"""

from .codec import BlockCodec, bits_to_bytes, bytes_to_bits
from .compression import RotateXorAddMixer, XorMixer
from .config import BIT_PROFILE, BYTE_PROFILE, FILE_PROFILE, HashConfig, load_config
from .diffusion import DiffusionReport, flip_bit, length_diffusion, measure_diffusion, message_diffusion
from .engine import HashEngine, fixed_iv, hash_message, hash_trace, make_iv, random_iv, to_hex
from .errors import HashError, InvalidConfiguration, InvalidInput

__all__ = [
    'BlockCodec', 'bits_to_bytes', 'bytes_to_bits',
    'RotateXorAddMixer', 'XorMixer',
    'HashConfig', 'load_config', 'BIT_PROFILE', 'BYTE_PROFILE', 'FILE_PROFILE',
    'DiffusionReport', 'measure_diffusion', 'message_diffusion', 'length_diffusion', 'flip_bit',
    'HashEngine', 'hash_message', 'hash_trace', 'fixed_iv', 'random_iv', 'make_iv', 'to_hex',
    'HashError', 'InvalidConfiguration', 'InvalidInput',
]
