"""
Error types raised by the hash construction.
"""


class HashError(Exception):
    """Base class for every error raised by mdhash."""


class InvalidInput(HashError):
    """
    A message could not be interpreted, e.g. a bit string holding
    characters other than '0' and '1'.
    """


class InvalidConfiguration(HashError):
    """
    Degenerate engine configuration (non-positive widths, zero rounds,
    an IV of the wrong width). Raised at construction, never mid-run.
    """
