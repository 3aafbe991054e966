from typing import Literal

from pydantic import BaseModel, ValidationError, model_validator

from .errors import InvalidConfiguration


class HashConfig(BaseModel):
    """
    Parameters of one Merkle-Damgard construction.

    Widths are counted in the configured unit: bits when ``mode`` is
    ``"bit"``, bytes when it is ``"byte"``.
    """

    mode: Literal["bit", "byte"] = "byte"
    digest_width: int = 1
    block_width: int = 2
    rounds: int = 3
    rotation: int = 3
    # Bytes used for the length field in byte mode (bit mode uses the
    # shortest binary representation).
    length_width: int = 1
    iv_source: Literal["fixed", "random"] = "fixed"

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def check_widths(self) -> "HashConfig":
        # InvalidConfiguration is not a ValueError, so pydantic lets it through.
        for name in ("digest_width", "block_width", "rounds", "length_width"):
            if getattr(self, name) < 1:
                raise InvalidConfiguration(f"{name} must be positive, got {getattr(self, name)}")
        if self.rotation < 0:
            raise InvalidConfiguration(f"rotation must not be negative, got {self.rotation}")
        return self

    @property
    def digest_bits(self) -> int:
        return self.digest_width if self.mode == "bit" else self.digest_width * 8


def load_config(**options) -> HashConfig:
    """
    Build a HashConfig from keyword options, reporting every problem as
    InvalidConfiguration (including type errors caught by pydantic).
    """
    try:
        return HashConfig(**options)
    except ValidationError as exc:
        raise InvalidConfiguration(str(exc)) from exc


###############################
# Presets
###############################

# 2-byte blocks into a 1-byte digest, length carried in one byte.
BYTE_PROFILE = HashConfig(mode="byte", digest_width=1, block_width=2)

# 16-bit blocks into an 8-bit digest, pure XOR mixing.
BIT_PROFILE = HashConfig(mode="bit", digest_width=8, block_width=16)

# 160-bit blocks into a 160-bit digest with a 64-bit length field.
FILE_PROFILE = HashConfig(
    mode="byte", digest_width=20, block_width=20, length_width=8, iv_source="random"
)
