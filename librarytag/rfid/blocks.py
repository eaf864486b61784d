"""
Tag memory blocks — named, fixed-size byte regions and the windows into them.

A tag is described as an ordered sequence of blocks. Each block has a
mutability:

- FIXED: never edited by the user (CRC, PC word)
- EDITABLE: raw bytes edited one index at a time (the EPC data block)
- COMPUTED: derived from other blocks (the RES block)

A block's buffer length is size_bits // 8 for its whole lifetime. Buffers
are only ever updated in place.
"""

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from librarytag.errors import BlockNotEditable, InvalidByteValue, OutOfRange

BITS_PER_BYTE = 8
MAX_BYTE = 0xFF


class Mutability(str, Enum):
    FIXED = "fixed"
    EDITABLE = "editable"
    COMPUTED = "computed"


# ──────────────────────────────────────────────
# Byte ranges and block views
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ByteRange:
    """Half-open byte range [start, stop)."""
    start: int
    stop: int

    @property
    def length(self) -> int:
        return self.stop - self.start

    def as_slice(self) -> slice:
        return slice(self.start, self.stop)

    def to_dict(self) -> dict:
        return {"start": self.start, "stop": self.stop, "length": self.length}


@dataclass(frozen=True)
class BlockView:
    """Where a block sits in the full tag memory map."""
    name: str
    mutability: Mutability
    byte_range: ByteRange

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "mutability": self.mutability.value,
            "byte_range": self.byte_range.to_dict(),
        }


# ──────────────────────────────────────────────
# Blocks
# ──────────────────────────────────────────────

@dataclass
class TagBlock:
    """A named region of tag memory owning its byte buffer."""

    name: str
    size_bits: int
    mutability: Mutability
    buffer: bytearray = field(default_factory=bytearray)
    description: str = ""

    def __post_init__(self):
        if self.size_bits <= 0 or self.size_bits % BITS_PER_BYTE:
            raise ValueError(
                f"Block {self.name} size must be a positive multiple of 8 bits, got {self.size_bits}"
            )
        if not self.buffer:
            self.buffer = bytearray(self.size_bytes)
        else:
            self.buffer = bytearray(self.buffer)
        if len(self.buffer) != self.size_bytes:
            raise ValueError(
                f"Block {self.name} must hold {self.size_bytes} bytes, got {len(self.buffer)}"
            )

    @property
    def size_bytes(self) -> int:
        return self.size_bits // BITS_PER_BYTE

    @property
    def value(self) -> bytes:
        """Snapshot of the current buffer contents."""
        return bytes(self.buffer)

    def __len__(self) -> int:
        return self.size_bytes


@dataclass(frozen=True)
class BlockSpec:
    """Immutable block template; build() creates a TagBlock with its own buffer."""

    name: str
    size_bits: int
    mutability: Mutability
    initial: bytes = b""
    description: str = ""

    def __post_init__(self):
        # validates size and initial contents
        block = self.build()
        object.__setattr__(self, "initial", block.value)

    @property
    def size_bytes(self) -> int:
        return self.size_bits // BITS_PER_BYTE

    @property
    def value(self) -> bytes:
        return self.initial

    def build(self) -> TagBlock:
        return TagBlock(
            name=self.name,
            size_bits=self.size_bits,
            mutability=self.mutability,
            buffer=bytearray(self.initial),
            description=self.description,
        )


def _check_byte(value) -> int:
    # bool is an int subclass but never a meaningful byte value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidByteValue(f"Byte value must be an integer, got {value!r}")
    if not 0 <= value <= MAX_BYTE:
        raise InvalidByteValue(f"Byte value {value} outside 0-{MAX_BYTE}")
    return value


def set_byte(block: TagBlock, index: int, value: int) -> None:
    """
    Write a single byte of an editable block.

    Validation happens before the write, so on any failure the previous byte
    value (and every sibling byte) is left unchanged.

    Raises:
        BlockNotEditable: If the block is fixed or computed.
        OutOfRange: If index is outside the block.
        InvalidByteValue: If value is not an integer in 0-255.
    """
    if block.mutability is not Mutability.EDITABLE:
        raise BlockNotEditable(f"Block {block.name} is {block.mutability.value}")
    if not 0 <= index < block.size_bytes:
        raise OutOfRange(f"Index {index} outside block {block.name} (0-{block.size_bytes - 1})")
    block.buffer[index] = _check_byte(value)


def parse_hex_byte(text: str) -> int:
    """Parse a 1-2 digit hex string as typed into a byte editor."""
    clean = text.strip()
    if not 1 <= len(clean) <= 2 or not all(c in string.hexdigits for c in clean):
        raise InvalidByteValue(f"Expected 1-2 hex digits, got {text!r}")
    return int(clean, 16)


def set_byte_hex(block: TagBlock, index: int, text: str) -> None:
    """Parse text as a hex byte and write it with set_byte."""
    set_byte(block, index, parse_hex_byte(text))


# ──────────────────────────────────────────────
# Sub-field windows
# ──────────────────────────────────────────────

class Subfield:
    """A read/write window onto part of a block's buffer."""

    def __init__(self, block: TagBlock, offset: int, length: int):
        if offset < 0 or length < 0 or offset + length > block.size_bytes:
            raise OutOfRange(
                f"Window {offset}+{length} exceeds block {block.name} ({block.size_bytes} bytes)"
            )
        self.block = block
        self.offset = offset
        self.length = length

    @property
    def byte_range(self) -> ByteRange:
        return ByteRange(self.offset, self.offset + self.length)

    def read(self) -> bytes:
        return bytes(self.block.buffer[self.byte_range.as_slice()])

    def write(self, data: Union[bytes, Iterable[int]], at: int = 0) -> None:
        """
        Write data into the window starting at relative offset `at`.

        All bounds and values are checked before the first byte is written.
        """
        values = [_check_byte(v) for v in data]
        if at < 0 or at + len(values) > self.length:
            raise OutOfRange(
                f"Write of {len(values)} bytes at {at} exceeds {self.length}-byte window"
            )
        for i, v in enumerate(values):
            self.block.buffer[self.offset + at + i] = v

    def __bytes__(self) -> bytes:
        return self.read()

    def __len__(self) -> int:
        return self.length


def subfield(block: TagBlock, offset: int, length: int) -> Subfield:
    """Open a window of `length` bytes at `offset` inside `block`."""
    return Subfield(block, offset, length)
