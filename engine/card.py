from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

NUM_PER_SUIT = 13
NUMS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")


class Colour(Enum):
    RED = "red"
    BLACK = "black"


class Suit(Enum):
    # Values double as the foundation slot index.
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    def colour(self) -> Colour:
        if self in (Suit.DIAMONDS, Suit.HEARTS):
            return Colour.RED
        return Colour.BLACK

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]

    @staticmethod
    def from_name(name: str) -> Suit:
        try:
            return Suit[name.upper()]
        except KeyError:
            raise ValueError(f"unknown suit: {name!r}") from None

    def __str__(self):
        return self.name.lower()


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


@dataclass(frozen=True, slots=True)
class Card:
    """A playing card. Rank 0 is only used as the empty-foundation marker."""

    rank: int
    suit: Suit

    def __post_init__(self):
        if not 0 <= self.rank <= NUM_PER_SUIT:
            raise ValueError(f"bad card rank {self.rank}")

    def colour(self) -> Colour:
        return self.suit.colour()

    def stacks_on(self, base: Card) -> bool:
        """Tableau rule: descending rank, alternating colour."""
        return self.colour() != base.colour() and base.rank == self.rank + 1

    def fits_on_foundation(self, base: Card) -> bool:
        """Foundation rule: same suit, exactly one rank above."""
        return self.suit == base.suit and base.rank == self.rank - 1

    def game_str(self) -> str:
        if self.rank == 0:
            return ""
        return NUMS[self.rank - 1] + self.suit.symbol

    def __str__(self):
        return self.game_str()


def foundation_base(suit: Suit) -> Card:
    return Card(0, suit)


class CardAddress:
    """A location on the board: a column, a foundation or a free cell."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Column(CardAddress):
    index: int

    def __str__(self):
        return f"column {self.index}"


@dataclass(frozen=True, slots=True)
class Foundation(CardAddress):
    suit: Suit

    def __str__(self):
        return f"foundation {self.suit}"


@dataclass(frozen=True, slots=True)
class FreeCell(CardAddress):
    index: int

    def __str__(self):
        return f"free cell {self.index}"


_FOUNDATION_CODES = {
    "c": Suit.CLUBS,
    "d": Suit.DIAMONDS,
    "h": Suit.HEARTS,
    "s": Suit.SPADES,
}


def parse_address(code: str) -> CardAddress:
    """
    Parse a short console code into an address.

    c3 -> column 3, x1 -> free cell 1, fh -> hearts foundation.
    """
    code = code.strip().lower()
    if len(code) < 2:
        raise ValueError(f"invalid address: {code!r}")
    kind, rest = code[0], code[1:]
    if kind == "f":
        if rest not in _FOUNDATION_CODES:
            raise ValueError(f"invalid foundation: {code!r}")
        return Foundation(_FOUNDATION_CODES[rest])
    if not rest.isdigit():
        raise ValueError(f"invalid index: {code!r}")
    if kind == "c":
        return Column(int(rest))
    if kind == "x":
        return FreeCell(int(rest))
    raise ValueError(f"invalid address: {code!r}")
