import unittest

from lok_core.history import HistoryEntry, HistoryStack
from lok_core.overlay import BoardCellView, CellOverlay, OverlayStore, view_of
from lok_core.parser import parse


class TestHistoryStack(unittest.TestCase):
    def test_given_empty_stack_when_popped_then_none(self):
        stack = HistoryStack()
        self.assertFalse(stack)
        self.assertIsNone(stack.pop())

    def test_given_pushed_entries_when_popped_then_lifo(self):
        stack = HistoryStack()
        first = HistoryEntry((0, 0), 'blacken', 'L', False, 0)
        second = HistoryEntry((1, 1), 'mark_path', 'O', False, 2)
        stack.push(first)
        stack.push(second)
        self.assertEqual(len(stack), 2)
        self.assertIs(stack.pop(), second)
        self.assertIs(stack.pop(), first)
        self.assertEqual(len(stack), 0)

    def test_given_overlay_when_captured_then_entry_detached_from_later_changes(self):
        overlay = CellOverlay(current_letter='L', blackened=True, path_mark_count=3)
        entry = HistoryEntry.capture((2, 1), 'mark_path', overlay)
        overlay.path_mark_count = 4
        overlay.current_letter = 'Q'
        saved = entry.saved_overlay()
        self.assertEqual(saved, CellOverlay('L', True, 3))
        self.assertEqual(entry.coord, (2, 1))


class TestOverlayStore(unittest.TestCase):
    def test_given_grid_when_store_built_then_keys_are_exactly_letter_coords(self):
        grid = parse("LO_\nL_O")
        store = OverlayStore(grid)
        self.assertEqual(set(store), set(grid.letter_coords()))
        self.assertEqual(len(store), 4)
        self.assertNotIn((0, 2), store)

    def test_given_saved_overlay_when_restored_then_live_fields_replaced(self):
        store = OverlayStore(parse("LO"))
        live = store.get((0, 1))
        live.blackened = True
        live.path_mark_count = 2
        store.restore((0, 1), CellOverlay('O'))
        self.assertIs(store.get((0, 1)), live)
        self.assertEqual(live, CellOverlay('O', False, 0))

    def test_given_copy_when_mutated_then_store_unaffected(self):
        store = OverlayStore(parse("LO"))
        copy = store.copy_of((0, 0))
        copy.blackened = True
        self.assertFalse(store.get((0, 0)).blackened)

    def test_given_cells_when_viewed_then_blocked_and_letter_views_built(self):
        grid = parse("L_")
        store = OverlayStore(grid)
        store.get((0, 0)).path_mark_count = 1
        self.assertEqual(view_of(grid, store, 0, 1), BoardCellView.for_blocked(0, 1))
        letter_view = view_of(grid, store, 0, 0)
        self.assertTrue(letter_view.is_marked_for_path)
        self.assertEqual(letter_view.display_letter, 'L')


if __name__ == '__main__':
    unittest.main()
