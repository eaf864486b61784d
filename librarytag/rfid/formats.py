"""
Library tag formats — block layout and data block sub-field sizing.

Both shipped formats use a 128-bit EPC memory bank:

    EPC-CRC   16 bits  fixed
    EPC-PC    16 bits  fixed
    EPC-DATA 128 bits  editable   identifier | number | status
    RES       64 bits  computed   kill password || access password

They differ in how the 16 data bytes are split and in how many leading data
bytes feed the password derivation.
"""

from dataclasses import dataclass

from librarytag.errors import UnknownFormat
from librarytag.rfid.blocks import BlockSpec, BlockView, ByteRange, Mutability

# Block names shared by the shipped formats
CRC_BLOCK = "EPC-CRC"
PC_BLOCK = "EPC-PC"
DATA_BLOCK = "EPC-DATA"
RESULT_BLOCK = "RES"


# ──────────────────────────────────────────────
# Data block sub-field sizing
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class SubfieldSizes:
    """Byte sizes of the identifier, number and status fields, in that order."""
    identifier: int
    number: int
    status: int

    def __post_init__(self):
        for name in ("identifier", "number", "status"):
            if getattr(self, name) <= 0:
                raise ValueError(f"Sub-field {name} must be at least 1 byte")

    @property
    def total(self) -> int:
        return self.identifier + self.number + self.status

    @property
    def identifier_range(self) -> ByteRange:
        return ByteRange(0, self.identifier)

    @property
    def number_range(self) -> ByteRange:
        start = self.identifier
        return ByteRange(start, start + self.number)

    @property
    def status_range(self) -> ByteRange:
        start = self.identifier + self.number
        return ByteRange(start, start + self.status)

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier_range.to_dict(),
            "number": self.number_range.to_dict(),
            "status": self.status_range.to_dict(),
        }


# ──────────────────────────────────────────────
# Tag formats
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class TagFormat:
    """
    A tag format: ordered block templates plus data block parameters.

    Block templates are immutable; each Tag builds its own buffers from them.
    """

    key: str
    name: str
    blocks: tuple[BlockSpec, ...]
    subfields: SubfieldSizes
    password_bytes: int
    data_block: str = DATA_BLOCK
    result_block: str = RESULT_BLOCK

    def __post_init__(self):
        names = [b.name for b in self.blocks]
        if len(set(names)) != len(names):
            raise ValueError(f"Format {self.key} has duplicate block names")
        data = self.block(self.data_block)
        if data.mutability is not Mutability.EDITABLE:
            raise ValueError(f"Data block {data.name} of format {self.key} must be editable")
        if self.block(self.result_block).mutability is not Mutability.COMPUTED:
            raise ValueError(f"Result block of format {self.key} must be computed")
        if self.subfields.total != data.size_bytes:
            raise ValueError(
                f"Sub-fields of format {self.key} sum to {self.subfields.total} bytes, "
                f"data block holds {data.size_bytes}"
            )
        if not 0 < self.password_bytes <= data.size_bytes:
            raise ValueError(
                f"password_bytes {self.password_bytes} outside 1-{data.size_bytes}"
            )

    def block(self, name: str) -> BlockSpec:
        for b in self.blocks:
            if b.name == name:
                return b
        raise KeyError(f"Format {self.key} has no block {name!r}")

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "blocks": [v.to_dict() for v in resolve_format(self)],
            "subfields": self.subfields.to_dict(),
            "password_bytes": self.password_bytes,
        }


def resolve_format(fmt: TagFormat) -> list[BlockView]:
    """
    Lay the format's blocks out end to end.

    Returns:
        One BlockView per block, in order, with contiguous non-overlapping
        byte ranges covering the whole tag.
    """
    views = []
    offset = 0
    for b in fmt.blocks:
        views.append(BlockView(b.name, b.mutability, ByteRange(offset, offset + b.size_bytes)))
        offset += b.size_bytes
    return views


def _epc_128_blocks(data: bytes) -> tuple[BlockSpec, ...]:
    return (
        BlockSpec(CRC_BLOCK, 16, Mutability.FIXED, bytes([0xF8, 0xD4]), "CRC (fixed)"),
        BlockSpec(PC_BLOCK, 16, Mutability.FIXED, bytes([0x40, 0x00]), "RFID Meta Info (fixed)"),
        BlockSpec(DATA_BLOCK, 128, Mutability.EDITABLE, bytes(data), "Library/Media Data"),
        BlockSpec(RESULT_BLOCK, 64, Mutability.COMPUTED, bytes(8), "RES (auto-calculated)"),
    )


UB_DORTMUND = TagFormat(
    key="ub-dortmund",
    name="UB Dortmund 128-bit EPC",
    blocks=_epc_128_blocks(bytes.fromhex("19E9F87100000000075BCD1500000001")),
    subfields=SubfieldSizes(identifier=4, number=8, status=4),
    password_bytes=12,
)

BOOKWAVES = TagFormat(
    key="bookwaves",
    name="Generic BookWaves 128-bit EPC",
    blocks=_epc_128_blocks(bytes.fromhex("19E9F871202122232425262728290001")),
    subfields=SubfieldSizes(identifier=4, number=10, status=2),
    password_bytes=14,
)

FORMATS: dict[str, TagFormat] = {f.key: f for f in (UB_DORTMUND, BOOKWAVES)}


def get_format(key: str) -> TagFormat:
    """Look up a shipped format by its key."""
    try:
        return FORMATS[key]
    except KeyError:
        raise UnknownFormat(f"Unknown tag format {key!r}") from None
