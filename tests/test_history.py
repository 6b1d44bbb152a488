import unittest

from engine.board import Board
from engine.card import Card, Column, Suit
from engine.history import EntryKind, HistoryRecorder

C, D = Suit.CLUBS, Suit.DIAMONDS


def move(history, game, src, dest):
    game = history.update(game, game.pick_up_card(src))
    return history.update(game, game.place(dest))


class HistoryTestCase(unittest.TestCase):
    def test_undo_redo(self):
        game = Board.from_columns([[Card(2, D), Card(1, C)], []])
        history = HistoryRecorder()

        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game_state_2 = game
        game = history.undo(game)
        self.assertEqual(game_state_1, game)

        game = history.redo(game)
        self.assertEqual(game_state_2, game)

    def test_floating_states_are_not_undo_points(self):
        game = Board.from_columns([[Card(2, D), Card(1, C)], []])
        history = HistoryRecorder()
        held = history.update(game, game.pick_up_card(Column(0)))
        self.assertEqual(1, len(history.entries))
        self.assertEqual(game, history.undo(held))
        self.assertFalse(history.can_redo())

    def test_manual_undo(self):
        game = Board.from_columns([[Card(2, C), Card(1, D)], [], []])
        history = HistoryRecorder()

        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game = move(history, game, Column(0), Column(2))
        game_state_2 = game

        # moving a card back by hand must not wipe the redo stack
        game = history.undo(game)
        game = move(history, game, Column(1), Column(0))
        self.assertEqual(game_state_1, game)
        game = history.redo(game)
        self.assertNotEqual(game_state_1, game)
        self.assertNotEqual(game_state_2, game)
        game = history.redo(game)
        self.assertEqual(game_state_2, game)

    def test_manual_redo(self):
        game = Board.from_columns([[Card(1, C), Card(2, D)], []])
        history = HistoryRecorder()

        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game = move(history, game, Column(0), Column(1))
        game_state_2 = game

        game = history.undo(game)
        game = history.undo(game)
        self.assertEqual(game_state_1, game)

        # redoing the first move by hand keeps the second one redoable
        game = move(history, game, Column(0), Column(1))
        game = history.redo(game)
        self.assertEqual(game_state_2, game)

    def test_nop_skipping(self):
        game = Board.from_columns([[Card(1, C), Card(2, D)], []])
        history = HistoryRecorder()

        game = move(history, game, Column(0), Column(1))
        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game_state_2 = game
        game = history.undo(game)

        game = move(history, game, Column(0), Column(0))
        self.assertEqual(game_state_1, game)

        game = history.redo(game)
        self.assertEqual(game_state_2, game)

    def test_sneak_skipping(self):
        game = Board.from_columns([[Card(1, C), Card(2, D)], []])
        history = HistoryRecorder()

        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game_state_2 = game
        game = history.sneak_update(game, game.auto_move_to_foundations())
        game_state_3 = game
        self.assertEqual([EntryKind.MANUAL, EntryKind.SYSTEM], [e.kind for e in history.entries])

        game = history.undo(game)
        self.assertEqual(game_state_1, game)

        # redo brings back the auto-move along with the move it followed
        game = history.redo(game)
        self.assertEqual(game_state_3, game)
        self.assertEqual([game_state_1, game_state_2], [e.board for e in history.entries])
        self.assertTrue(history.entries[1].is_sneak)
        self.assertFalse(history.can_redo())

    def test_sneak_update_ignores_unchanged_board(self):
        game = Board.from_columns([[Card(3, D), Card(2, C)], []])
        history = HistoryRecorder()
        game = move(history, game, Column(0), Column(1))
        entries = history.entries
        self.assertIs(game, history.sneak_update(game, game))
        self.assertEqual(entries, history.entries)

        undone = history.undo(game)
        self.assertTrue(history.can_redo())
        self.assertIs(undone, history.sneak_update(undone, undone))
        self.assertEqual(game, history.redo(undone))

    def test_no_ops(self):
        game = Board.from_columns([[Card(2, C), Card(1, D)], [], [], []])
        history = HistoryRecorder()

        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game = move(history, game, Column(0), Column(2))
        game_state_2 = game

        # no-ops don't destroy the redo stack
        game = history.undo(game)
        game = history.undo(game)
        self.assertEqual(game_state_1, game)
        game = move(history, game, Column(0), Column(0))
        game = history.redo(game)
        game = history.redo(game)
        self.assertEqual(game_state_2, game)

        # real moves do
        game = history.undo(game)
        game = history.undo(game)
        self.assertEqual(game_state_1, game)
        game = move(history, game, Column(0), Column(3))
        self.assertNotEqual(game_state_2, game)
        game_state_3 = game
        game = history.redo(game)
        self.assertEqual(game_state_3, game)

    def test_update_with_same_board_is_ignored(self):
        game = Board.from_columns([[Card(1, C)]])
        history = HistoryRecorder()
        history.update(game, game.pick_up_card(Column(0)))
        before = HistoryRecorder.from_entries(history.entries, history.redo_entries)
        self.assertIs(game, history.update(game, game))
        self.assertEqual(before, history)

    def test_undo_and_redo_with_empty_history(self):
        game = Board.from_columns([[Card(1, C)]])
        history = HistoryRecorder()
        self.assertFalse(history.can_undo())
        self.assertEqual(game, history.undo(game))
        self.assertEqual(game, history.redo(game))
        self.assertEqual((), history.entries)

    def test_undo_past_start_keeps_first_state(self):
        game = Board.from_columns([[Card(2, C), Card(1, D)], []])
        history = HistoryRecorder()
        game_state_1 = game
        game = move(history, game, Column(0), Column(1))
        game = history.undo(game)
        game = history.undo(game)
        self.assertEqual(game_state_1, game)
        self.assertTrue(history.can_redo())


if __name__ == "__main__":
    unittest.main()
