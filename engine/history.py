from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from engine.board import Board

# How many of the most recent undo entries are checked when collapsing
# a move that returns the board to an earlier state.
COLLAPSE_WINDOW = 2


class EntryKind(Enum):
    MANUAL = "manual"
    # Moves the game made on its own (auto-moves to foundations).
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    kind: EntryKind
    board: Board

    @property
    def is_sneak(self) -> bool:
        return self.kind is EntryKind.SYSTEM


class HistoryRecorder:
    """
    Undo/redo stacks of board snapshots.

    update/sneak_update record transitions, undo/redo move between snapshots.
    None of them raises: with nothing to undo or redo, the given board comes back.
    Boards with floating cards are never stored as undo points, so undo always
    lands on a settled board.
    """

    def __init__(self):
        self.lst: list[HistoryEntry] = []
        self.redo_lst: list[HistoryEntry] = []

    @classmethod
    def from_entries(cls, entries: Iterable[HistoryEntry], redo_entries: Iterable[HistoryEntry] = ()) -> HistoryRecorder:
        recorder = cls()
        recorder.lst = list(entries)
        recorder.redo_lst = list(redo_entries)
        return recorder

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self.lst)

    @property
    def redo_entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self.redo_lst)

    def can_undo(self) -> bool:
        return any(not entry.is_sneak for entry in self.lst)

    def can_redo(self) -> bool:
        return len(self.redo_lst) > 0

    def __collapse_index(self, new: Board):
        # Lowest index among the last few entries whose board equals `new`.
        found = None
        start = max(0, len(self.lst) - COLLAPSE_WINDOW)
        for idx in range(len(self.lst) - 1, start - 1, -1):
            if self.lst[idx].board == new:
                found = idx
        return found

    def __follow_redo(self, new: Board, clear_when_floating: bool):
        if not self.redo_lst:
            return
        if self.redo_lst[-1].board == new:
            # the player repeated an undone move by hand
            self.redo_lst.pop()
        elif clear_when_floating or not new.has_floating():
            self.redo_lst = []

    def update(self, old: Board, new: Board) -> Board:
        """Record a player move from `old` to `new` and return `new`."""
        if old == new:
            return new

        idx = self.__collapse_index(new)
        if idx is not None:
            # Back at a recent state: move what came after it onto the redo
            # stack instead of growing the history.
            truncated = self.lst[idx:]
            self.lst = self.lst[:idx]
            self.redo_lst.extend(reversed(truncated))
            return self.redo_lst.pop().board

        if not old.has_floating():
            self.lst.append(HistoryEntry(EntryKind.MANUAL, old))
        self.__follow_redo(new, clear_when_floating=False)
        return new

    def sneak_update(self, old: Board, new: Board) -> Board:
        """Record a move made by the game itself; undo skips over it."""
        if old == new:
            return new
        if not self.lst or self.lst[-1].board != old:
            self.lst.append(HistoryEntry(EntryKind.SYSTEM, old))
        self.__follow_redo(new, clear_when_floating=True)
        return new

    def undo(self, current: Board) -> Board:
        if not current.has_floating():
            self.redo_lst.append(HistoryEntry(EntryKind.MANUAL, current))
        while self.lst:
            entry = self.lst.pop()
            if not entry.is_sneak:
                return entry.board
            self.redo_lst.append(entry)
        # Nothing manual left to undo: hand back the newest redo point.
        if self.redo_lst:
            return self.redo_lst.pop().board
        return current

    def redo(self, current: Board) -> Board:
        if not self.redo_lst:
            return current
        if not current.has_floating():
            self.lst.append(HistoryEntry(EntryKind.MANUAL, current))
        entry = self.redo_lst.pop()
        # Replay the game's own moves along with the player move they followed.
        while entry.is_sneak and self.redo_lst:
            self.lst.append(entry)
            entry = self.redo_lst.pop()
        return entry.board

    def __eq__(self, other):
        if not isinstance(other, HistoryRecorder):
            return NotImplemented
        return self.lst == other.lst and self.redo_lst == other.redo_lst

    def __str__(self):
        lines = ["UNDO:"]
        for entry in self.lst:
            if entry.is_sneak:
                lines.append("  sneak:")
            lines.append(str(entry.board))
        lines.append("REDO:")
        for entry in self.redo_lst:
            lines.append(str(entry.board))
        return "\n".join(lines)
