from enum import Enum

from engine.card import CardAddress


class PickUpReason(Enum):
    ALREADY_HOLDING = "already holding cards"
    EMPTY_ADDRESS = "empty address"
    MOVE_OFF_FOUNDATION = "cannot move off foundation"
    EMPTY_STACK = "cannot pick up zero-card stack"
    UNSOUND_STACK = "cards in stack don't stack"
    STACK_TOO_LARGE = "cannot pick up that many cards at once"
    STACK_LARGER_THAN_COLUMN = "there are not that many cards in that column"
    ONLY_FROM_COLUMN = "cannot pick up a stack from anywhere except a column"


class PlaceReason(Enum):
    DOES_NOT_FIT = "those cards do not fit there"
    NO_CARDS_HELD = "cannot place cards when not holding cards"


class MoveError(Exception):
    """A rejected move. The board the operation was called on is unchanged."""

    def __init__(self, address: CardAddress, message: str):
        super().__init__(message)
        self.address = address

    def __eq__(self, other):
        return type(self) is type(other) and self.args == other.args and self.address == other.address

    def __hash__(self):
        return hash((type(self), self.args, self.address))


class IllegalAddress(MoveError):
    def __init__(self, address: CardAddress):
        super().__init__(address, f"address {address} does not exist on the board")


class CannotPickUp(MoveError):
    def __init__(self, address: CardAddress, reason: PickUpReason):
        super().__init__(address, f"cannot pick up cards from {address}: {reason.value}")
        self.reason = reason


class CannotPlace(MoveError):
    def __init__(self, address: CardAddress, reason: PlaceReason):
        super().__init__(address, f"cannot move current cards to {address}: {reason.value}")
        self.reason = reason
