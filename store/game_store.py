import json
import logging
from collections import Counter
from itertools import count
from pathlib import Path
from typing import Optional

from engine.board import FREE_CELL_COUNT, MAX_SEED, Board
from engine.card import NUM_PER_SUIT, Card, Suit
from engine.history import EntryKind, HistoryEntry, HistoryRecorder

logger = logging.getLogger(__name__)

SAVE_PREFIX = "freecell_save."
FORMAT_VERSION = 1

SavedGame = tuple[int, Board, HistoryRecorder]


def encode_card(card: Card) -> list:
    return [card.rank, str(card.suit)]


def decode_card(data) -> Card:
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError(f"bad card: {data!r}")
    rank, suit = data
    if isinstance(rank, bool) or not isinstance(rank, int) or not isinstance(suit, str):
        raise ValueError(f"bad card: {data!r}")
    return Card(rank, Suit.from_name(suit))


def _decode_optional(data) -> Optional[Card]:
    return None if data is None else decode_card(data)


def _decode_pile(data) -> tuple[Card, ...]:
    if not isinstance(data, list):
        raise ValueError(f"bad card list: {data!r}")
    return tuple(decode_card(c) for c in data)


def encode_board(board: Board) -> dict:
    return {
        "columns": [[encode_card(c) for c in column] for column in board.columns],
        "foundations": [encode_card(c) for c in board.foundations],
        "free_cells": [None if c is None else encode_card(c) for c in board.free_cells],
        "floating": None if board.floating is None else encode_card(board.floating),
        "floating_stack": None if board.floating_stack is None else [encode_card(c) for c in board.floating_stack],
    }


FULL_DECK = Counter(Card(rank, suit) for suit in Suit for rank in range(1, NUM_PER_SUIT + 1))


def check_board(board: Board):
    """Raise ValueError unless the board holds exactly one full deck."""
    cards = board.cards()
    if any(card.rank == 0 for card in cards):
        raise ValueError("rank 0 is only allowed on a foundation")
    if Counter(cards) != FULL_DECK:
        raise ValueError("board must hold each of the 52 cards exactly once")


def decode_board(data) -> Board:
    if not isinstance(data, dict):
        raise ValueError("board must be an object")
    try:
        columns = data["columns"]
        foundations = tuple(decode_card(c) for c in data["foundations"])
        free_cells = tuple(_decode_optional(c) for c in data["free_cells"])
        floating = _decode_optional(data.get("floating"))
        raw_stack = data.get("floating_stack")
    except (KeyError, TypeError) as e:
        raise ValueError(f"bad board: {e}") from e
    if not isinstance(columns, list):
        raise ValueError("columns must be a list")
    if [c.suit for c in foundations] != list(Suit):
        raise ValueError("foundations must hold one card per suit in suit order")
    if len(free_cells) != FREE_CELL_COUNT:
        raise ValueError(f"expected {FREE_CELL_COUNT} free cells, got {len(free_cells)}")
    floating_stack = None if raw_stack is None else _decode_pile(raw_stack)
    if floating is not None and floating_stack is not None:
        raise ValueError("board cannot hold a floating card and a floating stack")
    board = Board(
        columns=tuple(_decode_pile(column) for column in columns),
        foundations=foundations,
        free_cells=free_cells,
        floating=floating,
        floating_stack=floating_stack,
    )
    check_board(board)
    return board


def _encode_entry(entry: HistoryEntry) -> dict:
    return {"kind": entry.kind.value, "board": encode_board(entry.board)}


def _decode_entry(data) -> HistoryEntry:
    if not isinstance(data, dict) or "kind" not in data or "board" not in data:
        raise ValueError(f"bad history entry: {data!r}")
    return HistoryEntry(EntryKind(data["kind"]), decode_board(data["board"]))


def encode_history(history: HistoryRecorder) -> dict:
    return {
        "undo": [_encode_entry(e) for e in history.entries],
        "redo": [_encode_entry(e) for e in history.redo_entries],
    }


def decode_history(data) -> HistoryRecorder:
    if not isinstance(data, dict):
        raise ValueError("history must be an object")
    undo = data.get("undo", [])
    redo = data.get("redo", [])
    if not isinstance(undo, list) or not isinstance(redo, list):
        raise ValueError("history stacks must be lists")
    return HistoryRecorder.from_entries(
        [_decode_entry(e) for e in undo],
        [_decode_entry(e) for e in redo],
    )


def dumps_game(seed: int, board: Board, history: HistoryRecorder) -> str:
    return json.dumps(
        {
            "version": FORMAT_VERSION,
            "seed": seed,
            "board": encode_board(board),
            "history": encode_history(history),
        },
        ensure_ascii=False,
    )


def loads_game(text: str) -> SavedGame:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"save is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("save must be a JSON object")
    version = data.get("version")
    if version != FORMAT_VERSION or isinstance(version, bool):
        raise ValueError(f"unsupported save version: {version!r}")
    seed = data.get("seed")
    if isinstance(seed, bool) or not isinstance(seed, int) or not 0 <= seed <= MAX_SEED:
        raise ValueError(f"bad seed: {seed!r}")
    return seed, decode_board(data.get("board")), decode_history(data.get("history", {}))


def next_save_path(directory: Path, prefix: str = SAVE_PREFIX) -> Path:
    for n in count():
        path = directory / f"{prefix}{n}"
        if not path.exists():
            return path


def save_game(seed: int, board: Board, history: HistoryRecorder, directory, prefix: str = SAVE_PREFIX) -> Path:
    """Write the game to the first free `<prefix><n>` file in `directory`."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = next_save_path(directory, prefix)
    path.write_text(dumps_game(seed, board, history), encoding="utf-8")
    logger.info("Saved to %s", path)
    return path


def load_game(path) -> SavedGame:
    path = Path(path)
    logger.info("Loading from %s", path)
    return loads_game(path.read_text(encoding="utf-8"))


def try_save_game(seed: int, board: Board, history: HistoryRecorder, directory, prefix: str = SAVE_PREFIX) -> Optional[Path]:
    try:
        return save_game(seed, board, history, directory, prefix)
    except OSError as e:
        logger.warning("Error saving: %s", e)
        return None


def try_load_game(path) -> Optional[SavedGame]:
    try:
        return load_game(path)
    except (OSError, ValueError) as e:
        logger.warning("Error loading %s: %s", path, e)
        return None
