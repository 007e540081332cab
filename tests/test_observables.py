# tests/test_observables.py
#
# ============================================================
# UNIT TESTS: Spin observables on exact eigenstates
# ============================================================
#
# WHAT WE'RE TESTING:
#   - <sigma^z> on basis states is +/-1 per site, in the site-0-is-MSB order
#   - <sigma^x> on product states along x, and its sign in a transverse field
#   - correlations against distance on polarized and Neel states
#   - the relative error of an external energy against the ED ground energy
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spinham import HamiltonianNotBuiltError, IsingModel, SquareLattice
from spinham.observables import (
    av_sigma_x, av_sigma_z, compare_ed, compute_ed_observables, sigma_x_correlation,
    sigma_x_per_site, sigma_z_correlation, sigma_z_per_site,
)


def basis_vector(state: int, ns: int) -> np.ndarray:
    psi = np.zeros(2 ** ns)
    psi[state] = 1.0
    return psi


def x_product_state(ns: int, sign: float = 1.0) -> np.ndarray:
    """|+>^ns (sign=+1) or |->^ns (sign=-1) in the z basis."""
    single = np.array([sign, 1.0]) / np.sqrt(2)   # |down> component first
    psi = np.array([1.0])
    for _ in range(ns):
        psi = np.kron(psi, single)
    return psi


# ============================================================
# SECTION: sigma^z
# ============================================================

class TestSigmaZ(unittest.TestCase):

    def test_fully_polarized(self):
        np.testing.assert_allclose(sigma_z_per_site(basis_vector(0b1111, 4), 4), [1, 1, 1, 1])
        np.testing.assert_allclose(sigma_z_per_site(basis_vector(0b0000, 4), 4), [-1, -1, -1, -1])
        self.assertAlmostEqual(av_sigma_z(basis_vector(0b1111, 4), 4), 1.0)
        self.assertAlmostEqual(av_sigma_z(basis_vector(0b0000, 4), 4), -1.0)

    def test_site_order(self):
        """|1000>: only site 0, the most significant bit, points up."""
        np.testing.assert_allclose(sigma_z_per_site(basis_vector(0b1000, 4), 4), [1, -1, -1, -1])
        self.assertAlmostEqual(av_sigma_z(basis_vector(0b1000, 4), 4), -0.5)

    def test_neel_correlations(self):
        """|1010>: C_z(l) = (-1)^l."""
        corr = sigma_z_correlation(basis_vector(0b1010, 4), 4)
        np.testing.assert_allclose(corr, [1.0, -1.0, 1.0, -1.0])

    def test_x_state_has_no_z_magnetization(self):
        psi = x_product_state(3)
        np.testing.assert_allclose(sigma_z_per_site(psi, 3), 0.0, atol=1e-12)

    def test_wrong_length(self):
        with self.assertRaises(ValueError):
            sigma_z_per_site(np.ones(8), 4)


# ============================================================
# SECTION: sigma^x
# ============================================================

class TestSigmaX(unittest.TestCase):

    def test_basis_state_has_no_x_magnetization(self):
        np.testing.assert_allclose(sigma_x_per_site(basis_vector(0b1010, 4), 4), 0.0)

    def test_x_product_states(self):
        self.assertAlmostEqual(av_sigma_x(x_product_state(3, +1.0), 3), 1.0)
        self.assertAlmostEqual(av_sigma_x(x_product_state(3, -1.0), 3), -1.0)
        np.testing.assert_allclose(sigma_x_correlation(x_product_state(3, -1.0), 3), 1.0)

    def test_same_site_correlation_is_one(self):
        psi = np.random.default_rng(0).normal(size=16)
        psi /= np.linalg.norm(psi)
        self.assertAlmostEqual(sigma_x_correlation(psi, 4)[0], 1.0)

    def test_transverse_field_ground_state_sign(self):
        """
        H = g sum_i sigma^x_i: the ground state points against g, so
        <sigma^x> = -sign(g) on every site, whatever sign the solver picks.
        """
        for g, expected in ((-1.0, 1.0), (1.0, -1.0)):
            ham = IsingModel(J=0.0, g=g, h=0.0, lattice=SquareLattice(3), rng=0)
            ham.hamiltonian()
            ham.diag_h()
            np.testing.assert_allclose(
                sigma_x_per_site(ham.get_eigen_state(0), 3), expected, atol=1e-10
            )

    def test_paramagnet_with_coupling(self):
        """Strong negative g with a weak J keeps <sigma^x> close to +1."""
        ham = IsingModel(J=0.1, g=-1.0, h=0.0, lattice=SquareLattice(4), rng=0)
        ham.hamiltonian()
        ham.diag_h()
        sx = av_sigma_x(ham.get_eigen_state(0), 4)
        self.assertGreater(sx, 0.9)
        self.assertLess(sx, 1.0)


# ============================================================
# SECTION: Summary and ED comparison
# ============================================================

class TestSummary(unittest.TestCase):

    def test_compute_ed_observables(self):
        obs = compute_ed_observables(basis_vector(0b1100, 4), 4)
        self.assertEqual(set(obs), {'sz', 'sx', 'sz_site', 'sx_site', 'sz_corr', 'sx_corr'})
        self.assertAlmostEqual(obs['sz'], 0.0)
        self.assertAlmostEqual(obs['sx'], 0.0)
        np.testing.assert_allclose(obs['sz_site'], [1, 1, -1, -1])
        np.testing.assert_allclose(obs['sz_corr'], [1.0, 0.0, -1.0, 0.0])

    def test_compare_ed(self):
        ham = IsingModel(J=1.0, g=0.5, h=0.1, lattice=SquareLattice(4), rng=0)
        ham.hamiltonian()
        ham.diag_h(skip_eigenvectors=True)
        e0 = ham.get_eigen_energy(0)
        self.assertAlmostEqual(compare_ed(ham, e0), 0.0)
        self.assertAlmostEqual(compare_ed(ham, 0.9 * e0), 10.0)

    def test_compare_ed_needs_spectrum(self):
        ham = IsingModel(lattice=SquareLattice(2), rng=0)
        ham.hamiltonian()
        with self.assertRaises(HamiltonianNotBuiltError):
            compare_ed(ham, -1.0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
