# spinham/models/heisenberg.py
#
# Heisenberg XXZ model in transverse and longitudinal fields, with disorder.
#
# H = sum_i (h + dh_i) sigma_i^z + sum_i (g + dg_i) sigma_i^x
#   + sum_i sum_{k in dirs(i)} (J + dJ_i) [ delta sigma_i^z sigma_j^z
#                                          + 1/2 (S_i^+ S_j^- + S_i^- S_j^+) ]
#
# where j = nn(i, k) runs over EVERY neighbour direction the lattice reports.
# The hopping term only acts on anti-aligned pairs (s_i s_j < 0) and sends
# the state to the one with both spins flipped.
#
# Stencil layout (loc_states_num = 1 + Ns * (1 + z), z = max directions):
#   slot i                  : site i flipped, amplitude g + dg_i
#   slot (k + 1) * Ns + i   : sites i and nn(i, k) flipped, bond amplitude
#   slot loc_states_num - 1 : unchanged state, diagonal sum
# Bond slots whose neighbour is missing keep (state, 0.0).

import numpy as np

from ..binary import base_to_int, check_bit_vec, flip, flip_vec, site_bit, spin_array, spin_at, to_bits
from ..disorder import create_random_vec
from ..hamiltonian import SpinHamiltonian, Stencil


class HeisenbergModel(SpinHamiltonian):
    """
    Disordered XXZ model on an arbitrary lattice.

    All bond physics lives in _bond_terms(i, n_num, sisj), which returns the
    (diagonal, off-diagonal) contribution of one directed bond. It is written
    with numpy operations so the matrix build can call it on whole columns of
    states while loc_energy() calls it on scalars.
    """

    model_name = "heisenberg"

    def __init__(self, J: float = 1.0, J0: float = 0.0, g: float = 0.0, g0: float = 0.0,
                 h: float = 0.0, w: float = 0.0, delta: float = 1.0, lattice=None, rng=None):
        if lattice is None:
            raise ValueError(f"{self.__class__.__name__} needs a lattice")
        super().__init__(lattice, rng)

        self.J, self.J0 = J, J0
        self.g, self.g0 = g, g0
        self.h, self.w = h, w
        self.delta = delta

        self.dh = create_random_vec(self.Ns, self.rng, self.w)
        self.dJ = create_random_vec(self.Ns, self.rng, self.J0)
        self.dg = create_random_vec(self.Ns, self.rng, self.g0)

        self.z = max((lattice.get_nn_number(i) for i in range(self.Ns)), default=0)
        self._init_stencil(1 + self.Ns * (1 + self.z))
        self.info = self.inf()

    def _params(self) -> list:
        return [("Ns", self.Ns), ("J", self.J), ("J0", self.J0), ("d", self.delta),
                ("g", self.g), ("g0", self.g0), ("h", self.h), ("w", self.w)]

    # ---------------------------------- TERMS ----------------------------------

    def _bond_slot(self, n_num: int, i: int) -> int:
        return (n_num + 1) * self.Ns + i

    def _bond_terms(self, i: int, n_num: int, sisj):
        """
        Diagonal and off-diagonal amplitude of the bond (i, nn(i, n_num)).

        The off-diagonal part always targets the state with both bond spins
        flipped. Works on scalars and on numpy arrays of s_i * s_j.
        """
        interaction = self.J + self.dJ[i]
        diagonal = interaction * self.delta * sisj
        # S+S- + S-S+ only connects anti-aligned pairs
        hopping = np.where(sisj < 0, 0.5 * interaction, 0.0)
        return diagonal, hopping

    # ---------------------------------- MATRIX ----------------------------------

    def _fill_hamiltonian(self, states: np.ndarray) -> None:
        Ns = self.Ns
        diagonal = np.zeros(len(states))

        for i in range(Ns):
            s_i = spin_array(states, i, Ns)

            diagonal += (self.h + self.dh[i]) * s_i

            new_idx = flip(states, site_bit(i, Ns))
            self.set_hamiltonian_elem(states, self.g + self.dg[i], new_idx)

            for n_num in range(self.lattice.get_nn_number(i)):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                sisj = s_i * spin_array(states, nn, Ns)
                bond_diag, bond_flip = self._bond_terms(i, n_num, sisj)
                diagonal += bond_diag

                flip_idx_nn = flip(new_idx, site_bit(nn, Ns))
                self.set_hamiltonian_elem(states, bond_flip, flip_idx_nn)

        self.set_hamiltonian_elem(states, diagonal, states)

    # ---------------------------------- LOCAL ENERGY ----------------------------------

    def loc_energy(self, state: int, out: Stencil = None) -> Stencil:
        state = self.map(state)
        out = self._stencil(out)
        out.reset(state)
        Ns = self.Ns

        local_val = 0.0
        for i in range(Ns):
            s_i = spin_at(state, i, Ns)
            local_val += (self.h + self.dh[i]) * s_i

            new_idx = flip(state, site_bit(i, Ns))
            out.set(i, new_idx, self.g + self.dg[i])

            for n_num in range(self.lattice.get_nn_number(i)):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                sisj = s_i * spin_at(state, nn, Ns)
                bond_diag, bond_flip = self._bond_terms(i, n_num, sisj)
                local_val += float(bond_diag)

                # hopping and any other bond flip share one slot
                out.set(self._bond_slot(n_num, i), flip(new_idx, site_bit(nn, Ns)), float(bond_flip))

        out.set(self.loc_states_num - 1, state, local_val)
        return out

    def loc_energy_vec(self, vec, out: Stencil = None) -> Stencil:
        self._check_vec(vec)
        bits = to_bits(vec)
        state = base_to_int(bits)
        out = self._stencil(out)
        out.reset(state)

        local_val = 0.0
        for i in range(self.Ns):
            s_i = 1.0 if check_bit_vec(bits, i) else -1.0
            local_val += (self.h + self.dh[i]) * s_i

            flipped = flip_vec(bits, i)
            out.set(i, base_to_int(flipped), self.g + self.dg[i])

            for n_num in range(self.lattice.get_nn_number(i)):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                s_j = 1.0 if check_bit_vec(bits, nn) else -1.0
                bond_diag, bond_flip = self._bond_terms(i, n_num, s_i * s_j)
                local_val += float(bond_diag)

                out.set(self._bond_slot(n_num, i), base_to_int(flip_vec(flipped, nn)), float(bond_flip))

        out.set(self.loc_states_num - 1, state, local_val)
        return out
