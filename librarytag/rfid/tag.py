"""
A library tag instance — one format's blocks with live buffers.

The tag builds its own buffers from the format's block templates. Every edit of the
data block goes through set_byte (or a Subfield write) and is followed by a
recomputation of the RES block, so RES always matches the current data.
"""

from typing import Optional

from librarytag import config
from librarytag.codec import code40
from librarytag.crypto.passwords import Credential, compute_result, derive_passwords
from librarytag.errors import InvalidLength, OutOfRange
from librarytag.rfid.blocks import (
    BlockView, Subfield, TagBlock, set_byte, set_byte_hex, subfield,
)
from librarytag.rfid.formats import TagFormat, resolve_format
from librarytag.rfid.hexdump import to_hex

# Bit of the last status byte that marks the item as secured
SECURED_BIT = 0x01


class Tag:
    """An in-memory library tag laid out according to a TagFormat."""

    def __init__(self, fmt: TagFormat, data: Optional[bytes] = None):
        """
        Create a tag with fresh buffers built from the format's templates.

        Args:
            fmt: Tag format.
            data: Optional data block contents; defaults to the format's example data.

        Raises:
            InvalidLength: If data does not match the data block size.
        """
        self.format = fmt
        self.blocks: dict[str, TagBlock] = {spec.name: spec.build() for spec in fmt.blocks}
        if data is not None:
            target = self.data_block
            if len(data) != target.size_bytes:
                raise InvalidLength(
                    f"{fmt.name} data block holds {target.size_bytes} bytes, got {len(data)}"
                )
            subfield(target, 0, target.size_bytes).write(data)
        self.refresh_result()

    @classmethod
    def from_format(cls, fmt: TagFormat, data: Optional[bytes] = None) -> "Tag":
        return cls(fmt, data)

    @property
    def data_block(self) -> TagBlock:
        return self.blocks[self.format.data_block]

    @property
    def result_block(self) -> TagBlock:
        return self.blocks[self.format.result_block]

    @property
    def data(self) -> bytes:
        return self.data_block.value

    def views(self) -> list[BlockView]:
        return resolve_format(self.format)

    # ──────────────────────────────────────────────
    # Data block edits
    # ──────────────────────────────────────────────

    def set_data_byte(self, index: int, value: int) -> None:
        """Write one data byte and recompute RES."""
        set_byte(self.data_block, index, value)
        self.refresh_result()

    def set_data_byte_hex(self, index: int, text: str) -> None:
        """Write one data byte given as hex text and recompute RES."""
        set_byte_hex(self.data_block, index, text)
        self.refresh_result()

    def refresh_result(self) -> None:
        result = compute_result(self.data, self.format.password_bytes)
        subfield(self.result_block, 0, self.result_block.size_bytes).write(result)

    # ──────────────────────────────────────────────
    # Sub-fields
    # ──────────────────────────────────────────────

    def _window(self, byte_range) -> Subfield:
        return subfield(self.data_block, byte_range.start, byte_range.length)

    @property
    def identifier_field(self) -> Subfield:
        return self._window(self.format.subfields.identifier_range)

    @property
    def number_field(self) -> Subfield:
        return self._window(self.format.subfields.number_range)

    @property
    def status_field(self) -> Subfield:
        return self._window(self.format.subfields.status_range)

    @property
    def identifier(self) -> str:
        """Code 40 decoded identifier, or the invalid placeholder."""
        return code40.decode_or_placeholder(self.identifier_field.read())

    def set_identifier(self, text: str) -> None:
        """Encode text into the identifier field (unused capacity zero-filled)."""
        packed = code40.encode_fixed(text, len(self.identifier_field))
        self.identifier_field.write(packed)
        self.refresh_result()

    @property
    def number(self) -> int:
        return int.from_bytes(self.number_field.read(), "big")

    def set_number(self, value: int) -> None:
        field = self.number_field
        try:
            raw = value.to_bytes(len(field), "big")
        except OverflowError:
            raise OutOfRange(f"Number {value} does not fit in {len(field)} bytes") from None
        field.write(raw)
        self.refresh_result()

    @property
    def secured(self) -> bool:
        """Only the least significant bit of the last status byte is meaningful."""
        return bool(self.status_field.read()[-1] & SECURED_BIT)

    def set_secured(self, secured: bool) -> None:
        field = self.status_field
        last = field.read()[-1]
        last = last | SECURED_BIT if secured else last & ~SECURED_BIT & 0xFF
        field.write([last], at=len(field) - 1)
        self.refresh_result()

    # ──────────────────────────────────────────────
    # Credentials
    # ──────────────────────────────────────────────

    def credentials(self, kill_secret: Optional[str] = None, access_secret: Optional[str] = None) -> Credential:
        return derive_passwords(self.data, kill_secret, access_secret, self.format.password_bytes)

    def to_dict(self, placeholder: str = config.INVALID_PLACEHOLDER) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "format": self.format.key,
            "format_name": self.format.name,
            "blocks": [
                {**view.to_dict(), "hex": to_hex(self.blocks[view.name].buffer)}
                for view in self.views()
            ],
            "identifier": code40.decode_or_placeholder(self.identifier_field.read(), placeholder),
            "identifier_hex": to_hex(self.identifier_field.read()),
            "number": self.number,
            "status_hex": to_hex(self.status_field.read()),
            "secured": self.secured,
            "result": to_hex(self.result_block.buffer),
        }
