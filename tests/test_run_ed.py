# tests/test_run_ed.py
#
# ============================================================
# UNIT TESTS: ED driver helpers
# ============================================================
#
# WHAT WE'RE TESTING:
#   - check_stencils() compares the two views sparsely, without ever
#     densifying the Hamiltonian
#   - a broken stencil is reported with its deviation
#
# ============================================================

import importlib.util
import sys
import os
import unittest
from unittest import mock

import matplotlib
matplotlib.use('Agg')
import scipy.sparse as sp

ROOT = os.path.join(os.path.dirname(__file__), '..')
sys.path.insert(0, ROOT)

from spinham import HeisenbergModel, IsingModel, SquareLattice

_spec = importlib.util.spec_from_file_location('run_ed', os.path.join(ROOT, 'scripts', 'run_ed.py'))
run_ed = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(run_ed)


class TestCheckStencils(unittest.TestCase):

    def test_consistent_model(self):
        ham = HeisenbergModel(J=1.0, J0=0.3, g=0.2, h=0.1, w=0.4, lattice=SquareLattice(4), rng=1)
        ham.hamiltonian()
        self.assertLess(run_ed.check_stencils(ham), 1e-12)

    def test_stays_sparse(self):
        ham = IsingModel(J=1.0, g=0.5, h=0.2, lattice=SquareLattice(5), rng=0)
        ham.hamiltonian()
        with mock.patch.object(sp.csr_matrix, 'toarray', side_effect=AssertionError("densified")):
            deviation = run_ed.check_stencils(ham)
        self.assertLess(deviation, 1e-12)

    def test_broken_stencil_reported(self):
        ham = IsingModel(J=1.0, g=0.5, h=0.2, lattice=SquareLattice(3), rng=0)
        ham.hamiltonian()
        shifted = ham.get_hamiltonian() + 0.25 * sp.identity(ham.N, format='csr')
        with mock.patch.object(ham, 'matrix_from_stencils', return_value=shifted):
            with self.assertRaises(RuntimeError) as ctx:
                run_ed.check_stencils(ham)
        self.assertIn("2.500e-01", str(ctx.exception))


if __name__ == '__main__':
    unittest.main(verbosity=2)
