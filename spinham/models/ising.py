# spinham/models/ising.py
#
# Ising model in transverse and longitudinal fields, with on-site disorder.
#
# H = sum_i (h + dh_i) sigma_i^z
#   + sum_i (g + dg_i) sigma_i^x
#   + sum_i sum_{k in dirs(i)} (J + dJ_i) sigma_i^z sigma_{nn(i,k)}^z
#
# Two lattice traversals give two DIFFERENT models:
#   neighbors="first": only direction 0 of every site. On a chain with
#                      directions [+x, -x] each bond is counted once.
#   neighbors="all":   every direction the lattice reports. On the same chain
#                      each bond is counted twice, once from each end.
#
# Disorder: dh ~ U(-w, w), dJ ~ U(-J0, J0), dg ~ U(-g0, g0), drawn in that
# order at construction. The plain (clean) model is simply w = J0 = g0 = 0.
#
# Stencil layout (loc_states_num = Ns + 1):
#   slot i  (0 <= i < Ns): site i flipped, amplitude g + dg_i
#   slot Ns:               unchanged state, field + exchange diagonal

import numpy as np

from ..binary import base_to_int, check_bit_vec, flip, flip_vec, site_bit, spin_array, spin_at, to_bits
from ..disorder import create_random_vec
from ..hamiltonian import SpinHamiltonian, Stencil


class IsingModel(SpinHamiltonian):
    """
    Disordered Ising model on an arbitrary lattice.

    Both the matrix build and the stencil read the same three term functions
    (_field, _transverse, _exchange) and the same neighbour traversal
    (_directions), so they cannot disagree.
    """

    def __init__(self, J: float = 1.0, J0: float = 0.0, g: float = 1.0, g0: float = 0.0,
                 h: float = 1.0, w: float = 0.0, lattice=None, rng=None,
                 neighbors: str = "first"):
        """
        Args:
            J, J0:     Ising exchange and its disorder half-width.
            g, g0:     Transverse field and its disorder half-width.
            h, w:      Longitudinal field and its disorder half-width.
            lattice:   Lattice providing get_Ns / get_nn_number / get_nn.
            rng:       numpy Generator, int seed or None.
            neighbors: "first" (nearest neighbour only) or "all".
        """
        if lattice is None:
            raise ValueError("IsingModel needs a lattice")
        if neighbors not in ("first", "all"):
            raise ValueError(f"neighbors must be 'first' or 'all', got '{neighbors}'")
        super().__init__(lattice, rng)

        self.J, self.J0 = J, J0
        self.g, self.g0 = g, g0
        self.h, self.w = h, w
        self.neighbors = neighbors
        self.model_name = "ising" if neighbors == "first" else "ising_all"

        self.dh = create_random_vec(self.Ns, self.rng, self.w)
        self.dJ = create_random_vec(self.Ns, self.rng, self.J0)
        self.dg = create_random_vec(self.Ns, self.rng, self.g0)

        self._init_stencil(self.Ns + 1)
        self.info = self.inf()

    def _params(self) -> list:
        return [("Ns", self.Ns), ("J", self.J), ("J0", self.J0), ("g", self.g),
                ("g0", self.g0), ("h", self.h), ("w", self.w)]

    # ---------------------------------- TERMS ----------------------------------

    def _field(self, i: int) -> float:
        return self.h + self.dh[i]

    def _transverse(self, i: int) -> float:
        return self.g + self.dg[i]

    def _exchange(self, i: int) -> float:
        return self.J + self.dJ[i]

    def _directions(self, i: int) -> range:
        n_dirs = self.lattice.get_nn_number(i)
        if self.neighbors == "first":
            return range(min(1, n_dirs))
        return range(n_dirs)

    # ---------------------------------- MATRIX ----------------------------------

    def _fill_hamiltonian(self, states: np.ndarray) -> None:
        """
        Vectorised over all basis states: for each site the column of spins
        s_i(k) is computed at once, then every term is scattered.
        """
        Ns = self.Ns
        diagonal = np.zeros(len(states))

        for i in range(Ns):
            s_i = spin_array(states, i, Ns)

            # sigma^x_i
            new_idx = flip(states, site_bit(i, Ns))
            self.set_hamiltonian_elem(states, self._transverse(i), new_idx)

            diagonal += self._field(i) * s_i

            for n_num in self._directions(i):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                s_j = spin_array(states, nn, Ns)
                diagonal += self._exchange(i) * s_i * s_j

        self.set_hamiltonian_elem(states, diagonal, states)

    # ---------------------------------- LOCAL ENERGY ----------------------------------

    def loc_energy(self, state: int, out: Stencil = None) -> Stencil:
        state = self.map(state)
        out = self._stencil(out)
        Ns = self.Ns

        local_val = 0.0
        for i in range(Ns):
            s_i = spin_at(state, i, Ns)
            local_val += self._field(i) * s_i

            for n_num in self._directions(i):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                local_val += self._exchange(i) * s_i * spin_at(state, nn, Ns)

            out.set(i, flip(state, site_bit(i, Ns)), self._transverse(i))

        out.set(Ns, state, local_val)
        return out

    def loc_energy_vec(self, vec, out: Stencil = None) -> Stencil:
        self._check_vec(vec)
        bits = to_bits(vec)
        out = self._stencil(out)
        Ns = self.Ns

        local_val = 0.0
        for i in range(Ns):
            s_i = 1.0 if check_bit_vec(bits, i) else -1.0
            local_val += self._field(i) * s_i

            for n_num in self._directions(i):
                nn = self.lattice.get_nn(i, n_num)
                if nn < 0:
                    continue
                s_j = 1.0 if check_bit_vec(bits, nn) else -1.0
                local_val += self._exchange(i) * s_i * s_j

            out.set(i, base_to_int(flip_vec(bits, i)), self._transverse(i))

        out.set(Ns, base_to_int(bits), local_val)
        return out
