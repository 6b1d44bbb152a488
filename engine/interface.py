from engine.board import GameView


class Interface:

    def __init__(self):
        self.core = None

    def onStart(self):
        pass

    def onChange(self, view: GameView):
        """
        Invoked whenever the board shown to the player changes.
        :param view: the new board
        :return:
        """
        self.notifyRedraw()

    def onStatus(self, text: str):
        """
        Invoked with short status text, e.g. why a move was rejected.
        :param text:
        :return:
        """
        pass

    def notifyRedraw(self):
        pass

    def onWin(self):
        pass
