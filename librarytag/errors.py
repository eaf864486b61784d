"""
Error types for the codec and tag layout layers.

Every error here is recoverable: callers are expected to show a placeholder
or reject the edit and leave the underlying buffers untouched.
"""


class TagError(ValueError):
    """Base class for all recoverable codec and layout failures."""


class InvalidCharacter(TagError):
    """A symbol (or decoded value) has no entry in the Code 40 alphabet."""


class InvalidLength(TagError):
    """A packed byte sequence has an odd number of bytes."""


class InvalidWord(TagError):
    """A packed 16-bit word exceeds the largest value the alphabet can produce."""


class OutOfRange(TagError):
    """A byte index or sub-field window lies outside its block."""


class InvalidByteValue(TagError):
    """A byte write with a value outside 0-255 (or not a byte at all)."""


class BlockNotEditable(TagError):
    """A user edit was attempted on a fixed or computed block."""


class UnknownFormat(TagError):
    """No tag format is registered under the requested key."""
