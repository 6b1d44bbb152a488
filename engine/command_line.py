import argparse
import logging
import time
from pathlib import Path

from engine.card import parse_address
from engine.core import Core
from engine.interface import Interface
from store.settings_store import load_settings

logger = logging.getLogger(__name__)

HELP = """commands:
  pick <addr> [n]        pick up a card, or n cards from a column
  place <addr>           put the held cards down
  move <from> <to> [n]   pick up and place in one go
  cancel | undo | redo | save | seed | new | quit
addresses: c0-c7 columns, x0-x3 free cells, fc fd fh fs foundations"""


class CommandLineInterface(Interface):

    def printAll(self):
        print(self.core.view())
        print()

    def onStart(self):
        print(f"Game started! Seed: {self.core.seed}")

    def notifyRedraw(self):
        self.printAll()

    def onStatus(self, text: str):
        print(text)

    def onWin(self):
        print("You win!")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Play FreeCell. Sort all the cards onto the foundations by suit in ascending order to win."
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="Seed to generate the deal from.")
    parser.add_argument("-l", "--load", type=str, default="", help="Save file to load.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    parser.add_argument("--config", type=str, default="", help="Settings file (INI).")
    return parser.parse_args(argv)


def _count_arg(parts, idx) -> int:
    if len(parts) <= idx:
        return 1
    return int(parts[idx])


def runCommand(core: Core, line: str) -> bool:
    """Run one console command. Returns False when the player quits."""
    parts = line.split()
    if not parts:
        return True
    command = parts[0]
    try:
        if command == "pick":
            core.askPickUp(parse_address(parts[1]), _count_arg(parts, 2))
        elif command == "place":
            core.askPlace(parse_address(parts[1]))
        elif command == "move":
            core.askMove(parse_address(parts[1]), parse_address(parts[2]), _count_arg(parts, 3))
        elif command == "cancel":
            core.askCancel()
        elif command == "undo":
            if not core.askUndo():
                print("Cannot undo!")
        elif command == "redo":
            if not core.askRedo():
                print("Cannot redo!")
        elif command == "save":
            core.askSave()
        elif command == "seed":
            print(f"seed: {core.seed}")
        elif command == "new":
            core.askNewGame()
            while core.newGameAt is not None:
                time.sleep(core.settings.new_game_secs)
                core.tick()
        elif command in ("quit", "exit"):
            return False
        else:
            print(HELP)
            return True
    except (IndexError, ValueError) as e:
        print(f"Invalid command: {e}")
        return True
    core.drainAutoMoves()
    return True


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.ERROR if args.quiet else logging.INFO, format="%(message)s")

    settings = load_settings(Path(args.config)) if args.config else load_settings()
    core = Core(settings)
    core.registerInterface(CommandLineInterface())
    if args.load:
        if args.seed is not None:
            logger.warning("Ignoring seed in favour of loading from file")
        if not core.askLoad(args.load):
            return 1
    else:
        try:
            core.startGame(args.seed)
        except ValueError as e:
            logger.error("%s", e)
            return 2
    core.drainAutoMoves()

    while True:
        try:
            line = input(f"[{core.currentStatus()}] > ")
        except EOFError:
            break
        if not runCommand(core, line):
            break
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
