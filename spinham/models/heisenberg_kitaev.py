# spinham/models/heisenberg_kitaev.py
#
# Heisenberg-Kitaev model: XXZ exchange plus bond-dependent Kitaev couplings.
#
# On top of HeisenbergModel every directed bond (i, nn(i, k)) picks up a
# Kitaev term chosen by its DIRECTION INDEX k:
#
#   k = 0 : (Kz + dKz_i) sigma_i^z sigma_j^z   diagonal
#   k = 1 : (Ky + dKy_i) sigma_i^y sigma_j^y   flips both spins, amplitude -(Ky + dKy_i) s_i s_j
#   k = 2 : (Kx + dKx_i) sigma_i^x sigma_j^x   flips both spins, amplitude  (Kx + dKx_i)
#   k > 2 : no Kitaev term
#
# The direction <-> axis mapping matches HexagonalLattice (0 = z, 1 = y,
# 2 = x bonds) and must not be reordered. The Kitaev off-diagonal amplitude
# targets the same doubly-flipped state as the XY hopping, so both are summed
# into the bond's single stencil slot.
#
# Disorder: dh, dJ, dg as in HeisenbergModel, then dKx, dKy, dKz ~ U(-K0, K0).

import numpy as np

from ..disorder import create_random_vec
from .heisenberg import HeisenbergModel


class HeisenbergKitaevModel(HeisenbergModel):
    """Disordered Heisenberg-Kitaev model on an arbitrary lattice."""

    model_name = "hei_kitv"

    def __init__(self, J: float = 1.0, J0: float = 0.0, g: float = 0.0, g0: float = 0.0,
                 h: float = 0.0, w: float = 0.0, delta: float = 1.0,
                 K=(1.0, 1.0, 1.0), K0: float = 0.0, lattice=None, rng=None):
        """
        Args:
            J, J0, g, g0, h, w, delta: see HeisenbergModel.
            K:       (Kx, Ky, Kz) Kitaev couplings.
            K0:      Disorder half-width shared by the three Kitaev couplings.
            lattice: Lattice whose direction index encodes the bond type.
            rng:     numpy Generator, int seed or None.
        """
        self.Kx, self.Ky, self.Kz = (float(k) for k in K)
        self.K0 = K0
        super().__init__(J, J0, g, g0, h, w, delta, lattice, rng)

        self.dKx = create_random_vec(self.Ns, self.rng, self.K0)
        self.dKy = create_random_vec(self.Ns, self.rng, self.K0)
        self.dKz = create_random_vec(self.Ns, self.rng, self.K0)

    def _params(self) -> list:
        return super()._params() + [("Kx", self.Kx), ("Ky", self.Ky),
                                    ("Kz", self.Kz), ("K0", self.K0)]

    def _bond_terms(self, i: int, n_num: int, sisj):
        diagonal, flip_val = super()._bond_terms(i, n_num, sisj)

        if n_num == 0:
            diagonal = diagonal + (self.Kz + self.dKz[i]) * sisj
        elif n_num == 1:
            flip_val = flip_val - (self.Ky + self.dKy[i]) * sisj
        elif n_num == 2:
            flip_val = flip_val + (self.Kx + self.dKx[i]) * np.ones_like(sisj)

        return diagonal, flip_val
