"""
Code 40 alphabet tables.

A Code 40 alphabet is an ordered table of exactly 40 symbols, each assigned
the value equal to its position (0-39). One value is reserved as the
pad/unlatch marker: it only ever appears in packed data to fill the last
group of a string whose length is not a multiple of 3, and it is never
accepted as input text.

Default library table:

    0       pad
    1-26    A-Z
    27      -
    28      .
    29      :
    30-39   0-9
"""

import string
from dataclasses import dataclass, field

from librarytag.errors import InvalidCharacter

# Alphabet geometry
ALPHABET_SIZE = 40
CHARS_PER_GROUP = 3
BYTES_PER_GROUP = 2

# Group weights: word = v1 * 1600 + v2 * 40 + v3
WEIGHT_1 = ALPHABET_SIZE * ALPHABET_SIZE  # 1600
WEIGHT_2 = ALPHABET_SIZE  # 40

# Pad marker symbol used in the default table
PAD_SYMBOL = "\x00"


@dataclass(frozen=True)
class Alphabet:
    """A validated 40-symbol Code 40 table with one reserved pad value."""

    symbols: str
    pad_value: int = 0
    _values: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.symbols) != ALPHABET_SIZE:
            raise ValueError(
                f"Alphabet must have {ALPHABET_SIZE} symbols, got {len(self.symbols)}"
            )
        if len(set(self.symbols)) != ALPHABET_SIZE:
            raise ValueError("Alphabet symbols must be distinct")
        if not 0 <= self.pad_value < ALPHABET_SIZE:
            raise ValueError(f"Pad value {self.pad_value} outside 0-{ALPHABET_SIZE - 1}")
        object.__setattr__(
            self, "_values", {s: v for v, s in enumerate(self.symbols)}
        )

    @property
    def pad_symbol(self) -> str:
        return self.symbols[self.pad_value]

    @property
    def max_word(self) -> int:
        """Largest word a group of three values can pack to (63999)."""
        top = ALPHABET_SIZE - 1
        return top * WEIGHT_1 + top * WEIGHT_2 + top

    def value_of(self, symbol: str) -> int:
        """Return the value of an input symbol; the pad symbol is not valid input."""
        value = self._values.get(symbol)
        if value is None or value == self.pad_value:
            raise InvalidCharacter(f"Character {symbol!r} is not in the Code 40 alphabet")
        return value

    def symbol_of(self, value: int) -> str:
        if not 0 <= value < ALPHABET_SIZE:
            raise InvalidCharacter(f"Value {value} has no Code 40 symbol")
        return self.symbols[value]

    def accepts(self, text: str) -> bool:
        """Check whether every character of text is valid encoder input."""
        return all(
            c in self._values and self._values[c] != self.pad_value for c in text
        )


LIBRARY_ALPHABET = Alphabet(
    PAD_SYMBOL + string.ascii_uppercase + "-.:" + string.digits
)
