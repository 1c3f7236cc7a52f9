import unittest

from puyo_grid import ClearedGroup, Grid
from puyo_piece import Piece


def fill(grid, cells, color):
    for x, y in cells:
        grid.set_cell(x, y, color)


class GridCollisionTests(unittest.TestCase):
    def setUp(self):
        self.grid = Grid(6, 12, dead_cells=[(2, 2)])

    def test_buffer_has_two_hidden_rows(self):
        self.assertEqual(len(self.grid.cells), 14)
        self.assertTrue(all(len(row) == 6 for row in self.grid.cells))

    def test_spawn_position_is_valid(self):
        self.assertTrue(self.grid.is_valid(Piece(2, 1, 1, 2)))

    def test_walls_and_floor(self):
        self.assertFalse(self.grid.is_valid(Piece(-1, 5, 1, 2)))
        self.assertFalse(self.grid.is_valid(Piece(5, 5, 1, 2, orientation=1)))
        self.assertFalse(self.grid.is_valid(Piece(0, 13, 1, 2, orientation=2)))
        self.assertTrue(self.grid.is_valid(Piece(0, 13, 1, 2, orientation=0)))

    def test_rows_above_buffer_are_headroom(self):
        self.assertTrue(self.grid.is_valid(Piece(0, 0, 1, 2, orientation=0)))

    def test_half_rows_round_up(self):
        self.grid.set_cell(0, 13, 3)
        self.assertTrue(self.grid.is_valid(Piece(0, 12, 1, 2)))
        self.assertFalse(self.grid.is_valid(Piece(0, 12.5, 1, 2)))

    def test_ceiling(self):
        self.assertTrue(self.grid.check_ceiling(0, 0))
        self.assertTrue(self.grid.check_ceiling(0, -0.5))
        self.assertFalse(self.grid.check_ceiling(0, 0.5))
        self.assertFalse(self.grid.check_ceiling(0, 1))


class GridMutationTests(unittest.TestCase):
    def setUp(self):
        self.grid = Grid(6, 12, dead_cells=[(2, 2)])

    def test_commit_writes_both_tokens(self):
        self.grid.commit(Piece(3, 13, 1, 2, orientation=1))
        self.assertEqual(self.grid.cell(3, 13), 1)
        self.assertEqual(self.grid.cell(4, 13), 2)

    def test_commit_rounds_half_rows_up(self):
        self.grid.commit(Piece(0, 12.5, 1, 2))
        self.assertEqual(self.grid.cell(0, 13), 1)
        self.assertEqual(self.grid.cell(0, 12), 2)

    def test_commit_skips_top_hidden_row(self):
        self.grid.commit(Piece(0, 1, 1, 2))
        self.assertEqual(self.grid.cell(0, 1), 1)
        self.assertEqual(self.grid.cell(0, 0), 0)

    def test_gravity_compacts_in_order(self):
        self.grid.set_cell(0, 3, 1)
        self.grid.set_cell(0, 7, 2)
        self.grid.set_cell(1, 0, 4)
        self.grid.apply_gravity()
        self.assertEqual(self.grid.cell(0, 12), 1)
        self.assertEqual(self.grid.cell(0, 13), 2)
        self.assertEqual(self.grid.cell(1, 13), 4)
        self.assertEqual(self.grid.occupied_count(), 3)

    def test_gravity_is_idempotent(self):
        pattern = [(0, 2, 1), (0, 9, 2), (2, 5, 3), (2, 6, 3), (2, 11, 1), (5, 0, 4), (5, 13, 2)]
        for x, y, c in pattern:
            self.grid.set_cell(x, y, c)
        self.grid.apply_gravity()
        once = self.grid.rows()
        self.grid.apply_gravity()
        self.assertEqual(self.grid.rows(), once)

    def test_clone_is_independent(self):
        self.grid.set_cell(0, 13, 1)
        copy = self.grid.clone()
        copy.set_cell(1, 13, 2)
        self.grid.set_cell(2, 13, 3)
        self.assertEqual(copy.cell(2, 13), 0)
        self.assertEqual(self.grid.cell(1, 13), 0)
        self.assertEqual(copy.dead_cells, self.grid.dead_cells)

    def test_from_rows(self):
        self.grid.set_cell(4, 10, 2)
        other = Grid.from_rows(self.grid.rows())
        self.assertEqual((other.width, other.height), (6, 12))
        self.assertEqual(other.cell(4, 10), 2)


class GridGroupTests(unittest.TestCase):
    def setUp(self):
        self.grid = Grid(6, 12, dead_cells=[(2, 2)])

    def test_three_is_not_a_group(self):
        fill(self.grid, [(0, 13), (1, 13), (2, 13)], 1)
        self.assertEqual(self.grid.find_clearable_groups(), [])

    def test_l_shape_group(self):
        fill(self.grid, [(0, 11), (0, 12), (0, 13), (1, 13)], 2)
        groups = self.grid.find_clearable_groups()
        self.assertEqual(len(groups), 1)
        self.assertEqual((groups[0].color, groups[0].count), (2, 4))
        self.assertEqual(sorted(groups[0].cells), [(0, 11), (0, 12), (0, 13), (1, 13)])

    def test_groups_reported_in_row_major_order(self):
        fill(self.grid, [(5, 10), (5, 11), (5, 12), (5, 13)], 1)
        fill(self.grid, [(0, 13), (1, 13), (2, 13), (3, 13), (4, 13)], 3)
        groups = self.grid.find_clearable_groups()
        self.assertEqual([(g.color, g.count) for g in groups], [(1, 4), (3, 5)])

    def test_clear_removes_exactly_the_group_cells(self):
        fill(self.grid, [(0, 13), (1, 13), (0, 12), (1, 12)], 1)
        fill(self.grid, [(2, 13), (3, 13), (4, 13)], 2)
        fill(self.grid, [(5, 9), (5, 10), (5, 11), (5, 12), (5, 13)], 3)
        fill(self.grid, [(2, 12), (3, 12)], 4)
        before = self.grid.occupied_count()
        groups = self.grid.find_clearable_groups()
        self.grid.clear(c for g in groups for c in g.cells)
        self.assertEqual(before - self.grid.occupied_count(), sum(g.count for g in groups))
        self.assertEqual(self.grid.find_clearable_groups(), [])
        self.assertEqual(self.grid.occupied_count(), 5)

    def test_connected_from_empty_cell(self):
        self.assertEqual(self.grid.connected(0, 0), [])


class GridStateTests(unittest.TestCase):
    def setUp(self):
        self.grid = Grid(6, 12, dead_cells=[(2, 2)])

    def test_terminal_only_on_dead_cell(self):
        for x in range(6):
            for y in range(3, 14):
                self.grid.set_cell(x, y, 1 + (x + y) % 4)
        self.grid.set_cell(1, 2, 1)
        self.grid.set_cell(3, 2, 2)
        self.assertFalse(self.grid.is_terminal())
        self.grid.set_cell(2, 2, 3)
        self.assertTrue(self.grid.is_terminal())

    def test_all_clear_includes_hidden_rows(self):
        self.assertTrue(self.grid.is_all_clear())
        self.grid.set_cell(4, 0, 1)
        self.assertFalse(self.grid.is_all_clear())

    def test_column_height(self):
        self.grid.set_cell(3, 11, 1)
        self.grid.set_cell(3, 13, 1)
        self.assertEqual(self.grid.column_height(3), 3)
        self.assertEqual(self.grid.column_height(0), 0)


class EndToEndClearTests(unittest.TestCase):
    def test_two_by_two_block_clears_to_empty(self):
        grid = Grid(6, 12, dead_cells=[(2, 2)])
        grid.commit(Piece(0, 13, 1, 1))
        grid.commit(Piece(1, 13, 1, 1))
        grid.apply_gravity()
        groups = grid.find_clearable_groups()
        self.assertEqual(len(groups), 1)
        self.assertIsInstance(groups[0], ClearedGroup)
        self.assertEqual(groups[0].count, 4)
        grid.clear(groups[0].cells)
        grid.apply_gravity()
        self.assertTrue(grid.is_all_clear())


if __name__ == "__main__":
    unittest.main()
