"""
Code 40 compaction — packs short library identifiers into tag memory.

Three alphabet values v1, v2, v3 are packed into one 16-bit big-endian word:

    word = v1 * 1600 + v2 * 40 + v3

so every 3 characters take 2 bytes. A trailing group of 1 or 2 characters is
right-padded with the alphabet's pad value before packing, and decode strips
that padding again.

Example (default alphabet):

    >>> encode("DE-290").hex().upper()
    '19E3CE36'
    >>> decode(bytes.fromhex("19E3CE36"))
    'DE-290'
"""

import logging

from librarytag import config
from librarytag.codec.alphabet import (
    ALPHABET_SIZE, BYTES_PER_GROUP, CHARS_PER_GROUP, LIBRARY_ALPHABET,
    WEIGHT_1, WEIGHT_2, Alphabet,
)
from librarytag.errors import InvalidCharacter, InvalidLength, InvalidWord, OutOfRange, TagError

logger = logging.getLogger(__name__)

# Words are bounded by Alphabet.max_word (63999), not 39999: a 40-symbol
# table packs groups up to 39*1600 + 39*40 + 39.

# At most this many pad values may close a decoded string
MAX_TRAILING_PADS = CHARS_PER_GROUP - 1


def encoded_length(char_count: int) -> int:
    """Return the number of bytes needed to pack char_count characters."""
    groups = -(-char_count // CHARS_PER_GROUP)
    return groups * BYTES_PER_GROUP


def max_chars(byte_count: int) -> int:
    """Return how many characters fit into byte_count bytes."""
    return (byte_count // BYTES_PER_GROUP) * CHARS_PER_GROUP


def pack_group(v1: int, v2: int, v3: int) -> bytes:
    """Pack three alphabet values into a 2-byte big-endian word."""
    word = v1 * WEIGHT_1 + v2 * WEIGHT_2 + v3
    return word.to_bytes(BYTES_PER_GROUP, "big")


def unpack_group(word: int, alphabet: Alphabet = LIBRARY_ALPHABET) -> tuple[int, int, int]:
    """Split a 16-bit word back into its three alphabet values."""
    if not 0 <= word <= alphabet.max_word:
        raise InvalidWord(f"Word {word} exceeds Code 40 maximum {alphabet.max_word}")
    return (
        word // WEIGHT_1,
        (word // WEIGHT_2) % ALPHABET_SIZE,
        word % ALPHABET_SIZE,
    )


def encode(text: str, alphabet: Alphabet = LIBRARY_ALPHABET) -> bytes:
    """
    Encode text into Code 40 packed bytes.

    Args:
        text: Characters from the alphabet (the pad symbol is not allowed).
        alphabet: Code 40 table to use.

    Returns:
        ceil(len(text) / 3) * 2 bytes.

    Raises:
        InvalidCharacter: If any character is outside the alphabet.
    """
    values = [alphabet.value_of(c) for c in text]
    out = bytearray()
    for i in range(0, len(values), CHARS_PER_GROUP):
        group = values[i:i + CHARS_PER_GROUP]
        group += [alphabet.pad_value] * (CHARS_PER_GROUP - len(group))
        out += pack_group(*group)
    return bytes(out)


def decode(data: bytes, alphabet: Alphabet = LIBRARY_ALPHABET) -> str:
    """
    Decode Code 40 packed bytes back into text.

    Trailing pad values from a partial last group (at most 2) are stripped.
    Any other pad value means the data is not canonical Code 40.

    Raises:
        InvalidLength: If data has an odd number of bytes.
        InvalidWord: If a word exceeds the alphabet's maximum.
        InvalidCharacter: If a value has no symbol or a pad is misplaced.
    """
    if len(data) % BYTES_PER_GROUP:
        raise InvalidLength(f"Code 40 data must have an even length, got {len(data)} bytes")

    values: list[int] = []
    for i in range(0, len(data), BYTES_PER_GROUP):
        word = int.from_bytes(data[i:i + BYTES_PER_GROUP], "big")
        values.extend(unpack_group(word, alphabet))

    trailing = 0
    while trailing < len(values) and values[-1 - trailing] == alphabet.pad_value:
        trailing += 1
    if trailing > MAX_TRAILING_PADS:
        raise InvalidCharacter(f"{trailing} trailing pad values, at most {MAX_TRAILING_PADS} allowed")

    body = values[:len(values) - trailing]
    if alphabet.pad_value in body:
        position = body.index(alphabet.pad_value)
        raise InvalidCharacter(f"Pad value at position {position} is not at the end")

    return "".join(alphabet.symbol_of(v) for v in body)


def encode_fixed(text: str, size: int, alphabet: Alphabet = LIBRARY_ALPHABET) -> bytes:
    """
    Encode text into a fixed-size field, filling unused capacity with zero words.

    Raises:
        InvalidLength: If size is odd.
        OutOfRange: If the encoded text does not fit in size bytes.
    """
    if size % BYTES_PER_GROUP:
        raise InvalidLength(f"Code 40 field size must be even, got {size}")
    packed = encode(text, alphabet)
    if len(packed) > size:
        raise OutOfRange(
            f"{len(text)} characters need {len(packed)} bytes, field holds {size}"
        )
    return packed.ljust(size, b"\x00")


def decode_field(data: bytes, alphabet: Alphabet = LIBRARY_ALPHABET) -> str:
    """Decode a fixed-size field, ignoring trailing all-zero words."""
    if len(data) % BYTES_PER_GROUP:
        raise InvalidLength(f"Code 40 data must have an even length, got {len(data)} bytes")
    end = len(data)
    while end >= BYTES_PER_GROUP and not any(data[end - BYTES_PER_GROUP:end]):
        end -= BYTES_PER_GROUP
    return decode(data[:end], alphabet)


def decode_or_placeholder(
    data: bytes,
    placeholder: str = config.INVALID_PLACEHOLDER,
    alphabet: Alphabet = LIBRARY_ALPHABET,
) -> str:
    """Decode a fixed-size field for display, returning placeholder on any codec error."""
    try:
        return decode_field(data, alphabet)
    except TagError as e:
        logger.debug("Code 40 decode of %s failed: %s", data.hex().upper(), e)
        return placeholder
