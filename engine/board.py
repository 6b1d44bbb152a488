from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from engine.card import NUM_PER_SUIT, Card, CardAddress, Column, Foundation, FreeCell, Suit, foundation_base
from engine.errors import CannotPickUp, CannotPlace, IllegalAddress, PickUpReason, PlaceReason

Pile = tuple[Card, ...]

FREE_CELL_COUNT = 4
DEAL_SIZES = (7, 7, 7, 7, 6, 6, 6, 6)
DEAL_SUIT_ORDER = (Suit.CLUBS, Suit.DIAMONDS, Suit.SPADES, Suit.HEARTS)
MAX_SEED = 2 ** 64 - 1

EMPTY_FOUNDATIONS: tuple[Card, ...] = tuple(foundation_base(suit) for suit in Suit)
EMPTY_FREE_CELLS: tuple[Optional[Card], ...] = (None,) * FREE_CELL_COUNT


def _cell_str(card: Optional[Card]) -> str:
    if card is None:
        return "   "
    return f"{card.game_str():3}"


def _replace_at(items: tuple, idx: int, value) -> tuple:
    return items[:idx] + (value,) + items[idx + 1:]


@dataclass(frozen=True, slots=True)
class GameView:
    """Read-only snapshot of a board, the only shape handed to front ends."""

    columns: tuple[Pile, ...]
    foundations: tuple[Card, ...]
    free_cells: tuple[Optional[Card], ...]
    floating: Optional[Pile]

    def is_won(self) -> bool:
        return all(card.rank == NUM_PER_SUIT for card in self.foundations)

    def __str__(self):
        lines = ["".join(_cell_str(c) + " " for c in self.free_cells + self.foundations).rstrip(), ""]
        row = 0
        while True:
            has = False
            line = ""
            for column in self.columns:
                if len(column) <= row:
                    line += "    "
                    continue
                has = True
                line += _cell_str(column[row]) + " "
            if not has:
                break
            lines.append(line.rstrip())
            row += 1
        if self.floating:
            lines.append("-> " + ",".join(card.game_str() for card in self.floating))
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class Board:
    """
    The full state of a deal.

    Every operation returns a new Board or raises a MoveError; a Board is never
    modified once built. Foundations hold only their top card, with rank 0
    standing for an empty foundation.
    """

    columns: tuple[Pile, ...] = ()
    foundations: tuple[Card, ...] = EMPTY_FOUNDATIONS
    free_cells: tuple[Optional[Card], ...] = EMPTY_FREE_CELLS
    # At most one of these two is set.
    floating: Optional[Card] = None
    floating_stack: Optional[Pile] = None

    @classmethod
    def new_deal(cls, seed: int) -> Board:
        if isinstance(seed, bool) or not isinstance(seed, int) or not 0 <= seed <= MAX_SEED:
            raise ValueError(f"seed must be an unsigned 64-bit integer, got {seed!r}")
        deck = [Card(rank, suit) for suit in DEAL_SUIT_ORDER for rank in range(1, NUM_PER_SUIT + 1)]
        random.Random(seed).shuffle(deck)
        columns = []
        start = 0
        for size in DEAL_SIZES:
            columns.append(tuple(deck[start:start + size]))
            start += size
        return cls(columns=tuple(columns))

    @classmethod
    def from_columns(cls, columns: Iterable[Iterable[Card]]) -> Board:
        return cls(columns=tuple(tuple(column) for column in columns))

    def has_floating(self) -> bool:
        return self.floating is not None or self.floating_stack is not None

    def view(self) -> GameView:
        if self.floating is not None:
            floating = (self.floating,)
        else:
            floating = self.floating_stack
        return GameView(
            columns=self.columns,
            foundations=self.foundations,
            free_cells=self.free_cells,
            floating=floating,
        )

    def is_won(self) -> bool:
        return self.view().is_won()

    def cards(self) -> list[Card]:
        """Every card of the deal, wherever it currently is."""
        out = [card for column in self.columns for card in column]
        for top in self.foundations:
            out.extend(Card(rank, top.suit) for rank in range(1, top.rank + 1))
        out.extend(card for card in self.free_cells if card is not None)
        if self.floating is not None:
            out.append(self.floating)
        if self.floating_stack is not None:
            out.extend(self.floating_stack)
        return out

    def max_stack_size(self) -> int:
        return 1 + sum(1 for cell in self.free_cells if cell is None)

    def _column_index(self, address: Column) -> int:
        idx = address.index
        if isinstance(idx, bool) or not isinstance(idx, int) or idx < 0 or idx >= len(self.columns):
            raise IllegalAddress(address)
        return idx

    def _free_cell_index(self, address: FreeCell) -> int:
        idx = address.index
        if isinstance(idx, bool) or not isinstance(idx, int) or idx < 0 or idx >= len(self.free_cells):
            raise IllegalAddress(address)
        return idx

    def _foundation_index(self, address: Foundation) -> int:
        if not isinstance(address.suit, Suit) or address.suit.value >= len(self.foundations):
            raise IllegalAddress(address)
        return address.suit.value

    def pick_up_card(self, address: CardAddress) -> Board:
        if self.has_floating():
            raise CannotPickUp(address, PickUpReason.ALREADY_HOLDING)

        if isinstance(address, Column):
            idx = self._column_index(address)
            column = self.columns[idx]
            if not column:
                raise CannotPickUp(address, PickUpReason.EMPTY_ADDRESS)
            return replace(self, columns=_replace_at(self.columns, idx, column[:-1]), floating=column[-1])

        if isinstance(address, Foundation):
            raise CannotPickUp(address, PickUpReason.MOVE_OFF_FOUNDATION)

        if isinstance(address, FreeCell):
            idx = self._free_cell_index(address)
            card = self.free_cells[idx]
            if card is None:
                raise CannotPickUp(address, PickUpReason.EMPTY_ADDRESS)
            return replace(self, free_cells=_replace_at(self.free_cells, idx, None), floating=card)

        raise IllegalAddress(address)

    def pick_up_stack(self, address: CardAddress, count: int) -> Board:
        """
        Pick up the top `count` cards of a column as one run.

        A single card is picked up as a plain floating card. Larger runs must be
        sound and no longer than `max_stack_size()`.
        """
        if not isinstance(address, Column):
            raise CannotPickUp(address, PickUpReason.ONLY_FROM_COLUMN)
        if self.has_floating():
            raise CannotPickUp(address, PickUpReason.ALREADY_HOLDING)
        if count < 1:
            raise CannotPickUp(address, PickUpReason.EMPTY_STACK)
        if count == 1:
            return self.pick_up_card(address)

        idx = self._column_index(address)
        column = self.columns[idx]
        if count > len(column):
            raise CannotPickUp(address, PickUpReason.STACK_LARGER_THAN_COLUMN)
        if count > self.max_stack_size():
            raise CannotPickUp(address, PickUpReason.STACK_TOO_LARGE)
        run = column[len(column) - count:]
        for base, upper in zip(run, run[1:]):
            if not upper.stacks_on(base):
                raise CannotPickUp(address, PickUpReason.UNSOUND_STACK)
        return replace(
            self,
            columns=_replace_at(self.columns, idx, column[:len(column) - count]),
            floating_stack=run,
        )

    def place(self, address: CardAddress) -> Board:
        if isinstance(address, Column):
            idx = self._column_index(address)
            column = self.columns[idx]
            if self.floating is not None:
                if column and not self.floating.stacks_on(column[-1]):
                    raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
                return replace(self, columns=_replace_at(self.columns, idx, column + (self.floating,)), floating=None)
            if self.floating_stack is not None:
                if column and not self.floating_stack[0].stacks_on(column[-1]):
                    raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
                return replace(
                    self,
                    columns=_replace_at(self.columns, idx, column + self.floating_stack),
                    floating_stack=None,
                )
            raise CannotPlace(address, PlaceReason.NO_CARDS_HELD)

        if isinstance(address, Foundation):
            idx = self._foundation_index(address)
            if self.floating is not None:
                if not self.floating.fits_on_foundation(self.foundations[idx]):
                    raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
                return replace(self, foundations=_replace_at(self.foundations, idx, self.floating), floating=None)
            if self.floating_stack is not None:
                raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
            raise CannotPlace(address, PlaceReason.NO_CARDS_HELD)

        if isinstance(address, FreeCell):
            idx = self._free_cell_index(address)
            if self.floating is not None:
                if self.free_cells[idx] is not None:
                    raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
                return replace(self, free_cells=_replace_at(self.free_cells, idx, self.floating), floating=None)
            if self.floating_stack is not None:
                raise CannotPlace(address, PlaceReason.DOES_NOT_FIT)
            raise CannotPlace(address, PlaceReason.NO_CARDS_HELD)

        raise IllegalAddress(address)

    def auto_move_to_foundations(self) -> Optional[Board]:
        """Send the first safe column top to its foundation, or return None."""
        if self.has_floating():
            return None
        for idx, column in enumerate(self.columns):
            if not column:
                continue
            card = column[-1]
            if self.can_auto_move(card):
                return self.pick_up_card(Column(idx)).place(Foundation(card.suit))
        return None

    def can_auto_move(self, card: Card) -> bool:
        """
        True when `card` is next on its foundation and no card of the other colour
        could still need it as a tableau base: each opposite-colour suit has
        reached rank - 1 on its foundation, or its rank - 1 card could itself be
        auto-moved right now.
        """
        if self.foundations[card.suit.value].rank != card.rank - 1:
            return False
        needed = card.rank - 1
        for suit in Suit:
            if suit.colour() == card.colour():
                continue
            if self.foundations[suit.value].rank >= needed:
                continue
            if not self.can_auto_move(Card(needed, suit)):
                return False
        return True

    def __str__(self):
        return str(self.view())
