import logging
import random
import time
from typing import Optional

from engine.board import MAX_SEED, Board
from engine.card import CardAddress
from engine.errors import MoveError
from engine.history import HistoryRecorder
from store import game_store
from store.settings_store import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)


def randomSeed() -> int:
    return random.randint(0, MAX_SEED)


class Core:
    """
    One play session: the seed, the current board and its history.

    ask*** : called on behalf of the player, report rejections to the interface.
    tick / drainAutoMoves : moves the game makes on its own.
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS):
        self.settings = settings
        self.interface = None

        self.seed: Optional[int] = None
        self.board: Optional[Board] = None
        self.history: Optional[HistoryRecorder] = None
        self.gameEnded = False
        self.nextAutoMove = 0.0
        self.newGameAt: Optional[float] = None
        self.statusText: Optional[str] = None
        self.statusUntil = 0.0

    def registerInterface(self, interface):
        self.interface = interface
        interface.core = self

    def startGame(self, seed: Optional[int] = None):
        if seed is None:
            seed = randomSeed()
        self.resumeGame(seed, Board.new_deal(seed), HistoryRecorder())
        logger.info("Seed is %d", seed)

    def resumeGame(self, seed: int, board: Board, history: HistoryRecorder):
        if self.interface is None:
            raise RuntimeError("interface is not registered")
        self.seed = seed
        self.board = board
        self.history = history
        self.gameEnded = False
        self.nextAutoMove = time.monotonic() + self.settings.auto_move_secs
        self.newGameAt = None
        self.statusText = None
        self.interface.onStart()
        self.interface.onChange(board.view())

    def view(self):
        return self.board.view()

    def postStatus(self, text: str, now: Optional[float] = None):
        """Show `text` for `status_display_secs`, then fall back to the seed."""
        if now is None:
            now = time.monotonic()
        self.statusText = text
        self.statusUntil = now + self.settings.status_display_secs
        self.interface.onStatus(text)

    def currentStatus(self, now: Optional[float] = None) -> str:
        if now is None:
            now = time.monotonic()
        if self.statusText is not None and now < self.statusUntil:
            return self.statusText
        return f"seed: {self.seed}"

    def __setBoard(self, board: Board):
        changed = board != self.board
        self.board = board
        if changed:
            self.interface.onChange(board.view())
        return changed

    def __reject(self, e: MoveError) -> bool:
        logger.debug("Rejected: %s", e)
        self.postStatus(str(e))
        return False

    def askPickUp(self, address: CardAddress, count: int = 1) -> bool:
        try:
            if count == 1:
                new = self.board.pick_up_card(address)
            else:
                new = self.board.pick_up_stack(address, count)
        except MoveError as e:
            return self.__reject(e)
        self.__setBoard(self.history.update(self.board, new))
        return True

    def askPlace(self, address: CardAddress) -> bool:
        """Place the held cards; on failure they go back where they came from."""
        try:
            new = self.board.place(address)
        except MoveError as e:
            self.askCancel()
            return self.__reject(e)
        self.__setBoard(self.history.update(self.board, new))
        self.checkWin()
        return True

    def askMove(self, src: CardAddress, dest: CardAddress, count: int = 1) -> bool:
        if not self.askPickUp(src, count):
            return False
        return self.askPlace(dest)

    def askCancel(self) -> bool:
        if not self.board.has_floating():
            return False
        self.__setBoard(self.history.undo(self.board))
        return True

    def askUndo(self) -> bool:
        return self.__setBoard(self.history.undo(self.board))

    def askRedo(self) -> bool:
        changed = self.__setBoard(self.history.redo(self.board))
        self.checkWin()
        return changed

    def doAutoMove(self) -> bool:
        new = self.board.auto_move_to_foundations()
        if new is None:
            return False
        self.__setBoard(self.history.sneak_update(self.board, new))
        return True

    def askNewGame(self, now: Optional[float] = None):
        """Deal a fresh game once `new_game_secs` have passed; see `tick`."""
        if now is None:
            now = time.monotonic()
        self.newGameAt = now + self.settings.new_game_secs
        self.postStatus("Shuffling...", now)

    def askCancelNewGame(self) -> bool:
        if self.newGameAt is None:
            return False
        self.newGameAt = None
        return True

    def tick(self, now: Optional[float] = None) -> bool:
        """Start a pending new game when due, else perform at most one auto-move per `auto_move_secs`."""
        if now is None:
            now = time.monotonic()
        if self.newGameAt is not None and now >= self.newGameAt:
            self.startGame()
            return True
        if now < self.nextAutoMove:
            return False
        if not self.doAutoMove():
            return False
        self.nextAutoMove = now + self.settings.auto_move_secs
        self.checkWin()
        return True

    def drainAutoMoves(self) -> int:
        moved = 0
        while self.doAutoMove():
            moved += 1
        if moved:
            self.checkWin()
        return moved

    def checkWin(self) -> bool:
        if not self.board.is_won():
            return False
        if not self.gameEnded:
            self.gameEnded = True
            self.interface.onWin()
        return True

    def askSave(self, directory=None) -> bool:
        if directory is None:
            directory = self.settings.save_dir
        path = game_store.try_save_game(self.seed, self.board, self.history, directory, self.settings.save_prefix)
        if path is None:
            self.postStatus("Save Error")
            return False
        self.postStatus(f"Saved to {path}")
        return True

    def askLoad(self, path) -> bool:
        saved = game_store.try_load_game(path)
        if saved is None:
            self.postStatus("Load Error")
            return False
        self.resumeGame(*saved)
        return True
