"""
Hex rendering and parsing for tag bytes.

Supports:
- Compact upper-case hex ("19E9F871")
- Spaced byte hex ("19 E9 F8 71")
- A per-block memory dump of a whole tag
"""

from librarytag.errors import InvalidByteValue


def to_hex(data: bytes) -> str:
    """Render bytes as compact upper-case hex."""
    return bytes(data).hex().upper()


def to_spaced_hex(data: bytes) -> str:
    """Render bytes as space-separated upper-case hex pairs."""
    return " ".join(f"{b:02X}" for b in data)


def parse_hex(hex_string: str) -> bytes:
    """
    Parse a hex string, ignoring whitespace and case.

    Raises:
        InvalidByteValue: If the string is not whole hex bytes.
    """
    clean = "".join(hex_string.split())
    try:
        return bytes.fromhex(clean)
    except ValueError:
        raise InvalidByteValue(f"Not a hex byte string: {hex_string!r}") from None


def build_memory_dump(tag) -> str:
    """
    Build a text dump of a tag, one block per line.

    Output format:
    EPC-CRC  [00-02] fixed     F8 D4
    """
    lines = []
    for view, block in zip(tag.views(), tag.blocks.values()):
        r = view.byte_range
        lines.append(
            f"{view.name:<8} [{r.start:02d}-{r.stop:02d}] {view.mutability.value:<9} "
            f"{to_spaced_hex(block.buffer)}"
        )
    return "\n".join(lines)
