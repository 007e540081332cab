# tests/test_lattice.py
#
# ============================================================
# UNIT TESTS: Lattices
# ============================================================

import sys
import os
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spinham.lattice import (
    NO_NEIGHBOR, OBC, PBC, HexagonalLattice, NeighborTableLattice, SquareLattice,
    make_lattice,
)


class TestSquareLattice(unittest.TestCase):

    def test_chain_pbc(self):
        lat = SquareLattice(4)
        self.assertEqual(lat.get_Ns(), 4)
        self.assertEqual(lat.get_nn_number(0), 2)
        self.assertEqual(lat.neighbors(0), [1, 3])
        self.assertEqual(lat.neighbors(3), [0, 2])

    def test_chain_obc_sentinel(self):
        lat = SquareLattice(4, bc=OBC)
        self.assertEqual(lat.neighbors(0), [1, NO_NEIGHBOR])
        self.assertEqual(lat.neighbors(3), [NO_NEIGHBOR, 2])

    def test_single_site_open_has_no_neighbour(self):
        lat = SquareLattice(1, bc=OBC)
        self.assertEqual(lat.neighbors(0), [NO_NEIGHBOR, NO_NEIGHBOR])

    def test_square_2d(self):
        lat = SquareLattice(3, 3, dim=2, bc=PBC)
        self.assertEqual(lat.get_Ns(), 9)
        # site 4 is the centre (x=1, y=1): [+x, -x, +y, -y]
        self.assertEqual(lat.neighbors(4), [5, 3, 7, 1])
        self.assertEqual(lat.neighbors(0), [1, 2, 3, 6])

    def test_invalid_dim(self):
        with self.assertRaises(ValueError):
            SquareLattice(2, dim=3)


class TestHexagonalLattice(unittest.TestCase):

    def test_kitaev_chain(self):
        lat = HexagonalLattice(4, dim=1, bc=PBC)
        # [z, y, x]: no z-bonds in 1D, x-bonds (0,1),(2,3), y-bonds (1,2),(3,0)
        self.assertEqual(lat.neighbors(0), [NO_NEIGHBOR, 3, 1])
        self.assertEqual(lat.neighbors(1), [NO_NEIGHBOR, 2, 0])

    def test_bonds_are_mutual_per_direction(self):
        """Every bond type pairs sites both ways: nn(nn(i, k), k) == i."""
        lat = HexagonalLattice(4, 2, dim=2, bc=PBC)
        for site in range(lat.get_Ns()):
            for k in range(3):
                nn = lat.get_nn(site, k)
                self.assertGreaterEqual(nn, 0)
                self.assertEqual(lat.get_nn(nn, k), site)

    def test_odd_periodic_rejected(self):
        with self.assertRaises(ValueError):
            HexagonalLattice(3, dim=1, bc=PBC)


class TestNeighborTable(unittest.TestCase):

    def test_table(self):
        lat = NeighborTableLattice([[1, -1], [0]])
        self.assertEqual(lat.get_Ns(), 2)
        self.assertEqual(lat.get_nn_number(0), 2)
        self.assertEqual(lat.get_nn_number(1), 1)
        self.assertEqual(lat.get_nn(0, 1), NO_NEIGHBOR)

    def test_out_of_table_neighbour(self):
        with self.assertRaises(ValueError):
            NeighborTableLattice([[5]])

    def test_make_lattice(self):
        self.assertEqual(make_lattice('square', 4).get_type(), 'square')
        self.assertEqual(make_lattice('hexagonal', 4).get_type(), 'hexagonal')
        with self.assertRaises(ValueError):
            make_lattice('kagome', 3)


if __name__ == '__main__':
    unittest.main(verbosity=2)
