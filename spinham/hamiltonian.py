# spinham/hamiltonian.py
#
# Abstract spin Hamiltonian shared by every lattice model.
#
# A model has to answer the same physical question in two different ways:
#
#   1. hamiltonian(): the full 2^Ns x 2^Ns sparse matrix, built column by
#      column ("act with H on basis state k, scatter into every row it
#      reaches"). Feeds exact diagonalization.
#
#   2. loc_energy(state): the local energy STENCIL of one basis state, a
#      fixed-length list of (connected state, amplitude) pairs such that
#          E_loc(s) = sum_slots  amplitude * psi(target) / psi(s)
#      This is what a VMC sampler evaluates on every configuration.
#
# Both views must describe the same operator. Models achieve this by reading
# one set of per-site / per-bond term functions from both paths, and
# matrix_from_stencils() rebuilds the matrix from the stencils so tests can
# check the two views entry by entry.

import threading
import warnings
from abc import ABC, abstractmethod
from contextlib import contextmanager

import numpy as np
import scipy.sparse as sp

from .binary import spins_to_state, state_to_spins
from .diagonalizer import (
    MAX_ED_SITES,
    diagonalize,
    estimate_coo_bytes,
    spectral_mean_index,
)
from .disorder import make_rng
from .errors import AllocationError, HamiltonianNotBuiltError, OutOfRangeError


# ============================================================
# Local Energy Stencil
# ============================================================

class Stencil:
    """
    Fixed-length list of (target state, amplitude) pairs.

    Slot layout is owned by the model; by convention the LAST slot always
    holds the unchanged state with the accumulated diagonal value.
    """

    __slots__ = ("states", "amplitudes")

    def __init__(self, size: int):
        self.states = np.zeros(size, dtype=np.int64)
        self.amplitudes = np.zeros(size, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self):
        return iter(self.as_pairs())

    def reset(self, state: int) -> None:
        """Point every slot at `state` with zero amplitude."""
        self.states[:] = state
        self.amplitudes[:] = 0.0

    def set(self, slot: int, state: int, amplitude: float) -> None:
        self.states[slot] = state
        self.amplitudes[slot] = amplitude

    def copy(self) -> "Stencil":
        other = Stencil(len(self))
        other.states[:] = self.states
        other.amplitudes[:] = self.amplitudes
        return other

    def as_pairs(self) -> list:
        return [(int(s), float(a)) for s, a in zip(self.states, self.amplitudes)]

    def __repr__(self) -> str:
        return f"Stencil({self.as_pairs()})"


class _CooBuilder:
    """Collects scatter-add triplets; duplicates are summed on conversion."""

    def __init__(self, dim: int):
        self.dim = dim
        self.rows, self.cols, self.data = [], [], []

    def add(self, rows, cols, data) -> None:
        cols = np.atleast_1d(np.asarray(cols, dtype=np.int64))
        rows = np.atleast_1d(np.asarray(rows, dtype=np.int64))
        data = np.broadcast_to(np.asarray(data, dtype=np.float64), cols.shape)
        self.rows.append(rows)
        self.cols.append(cols)
        self.data.append(data)

    def to_csr(self) -> sp.csr_matrix:
        if not self.data:
            return sp.csr_matrix((self.dim, self.dim))
        H = sp.coo_matrix(
            (np.concatenate(self.data),
             (np.concatenate(self.rows), np.concatenate(self.cols))),
            shape=(self.dim, self.dim),
        ).tocsr()
        H.sum_duplicates()
        H.eliminate_zeros()
        return H


# ============================================================
# Abstract Hamiltonian
# ============================================================

class SpinHamiltonian(ABC):
    """
    Abstract base class for spin-1/2 lattice Hamiltonians.

    Subclasses implement the physics in three places:
      _fill_hamiltonian(states): scatter every term for all basis states
      loc_energy(state, out):    build the stencil of one integer state
      loc_energy_vec(vec, out):  the same for a bit vector

    Lifecycle: construct (disorder drawn) -> hamiltonian() -> diag_h().
    Rebuilding the matrix clears previous eigen-results; diag_h() always
    works on the current matrix.
    """

    model_name = "spin"

    def __init__(self, lattice, rng=None):
        self.lattice = lattice
        self.rng = make_rng(rng)
        self.Ns = lattice.get_Ns()
        self.N = 2 ** self.Ns
        self.loc_states_num = self.Ns + 1

        self.H = None
        self.eigenvalues = None
        self.eigenvectors = None
        self.E_av = None
        self.E_av_idx = None

        self.info = ""
        self.loc_energies = None
        self._builder = None
        self._lock = threading.Lock()

    def _init_stencil(self, loc_states_num: int) -> None:
        """Fix the stencil length and allocate the shared instance buffer."""
        self.loc_states_num = loc_states_num
        self.loc_energies = Stencil(loc_states_num)

    # ---------------------------------- INFO ----------------------------------

    @abstractmethod
    def _params(self) -> list:
        """Ordered (key, value) pairs describing the parameterization."""

    def inf(self, skip=(), sep: str = "_") -> str:
        """
        Model description used as a cache / log key, e.g.
        '_ising,Ns=4,J=1.00,J0=0.00,g=0.50,g0=0.00,h=0.10,w=0.00'.

        Args:
            skip: parameter keys to leave out.
            sep:  prefix in front of the model name.
        """
        fields = [self.model_name]
        for key, value in self._params():
            if key in skip:
                continue
            if key == "Ns":
                fields.append(f"{key}={int(value)}")
            else:
                fields.append(f"{key}={float(value):.2f}")
        return sep + ",".join(fields)

    def get_info(self, skip=(), sep: str = "_") -> str:
        return self.inf(skip, sep)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.info})"

    # ---------------------------------- GETTERS ----------------------------------

    @property
    def n_spins(self) -> int:
        return self.Ns

    def get_hilbert_size(self) -> int:
        return self.N

    def get_hamiltonian(self) -> sp.csr_matrix:
        return self.H

    def get_eigenvalues(self) -> np.ndarray:
        return self.eigenvalues

    def get_eigenvectors(self) -> np.ndarray:
        return self.eigenvectors

    def get_eigen_energy(self, idx: int) -> float:
        return float(self.eigenvalues[idx])

    def get_eigen_state(self, idx: int) -> np.ndarray:
        return self.eigenvectors[:, idx]

    @contextmanager
    def local_energy_ref(self, state: int):
        """
        Fill the shared instance buffer with the stencil of `state` and hold
        the lock while the caller reads it:

            with ham.local_energy_ref(s) as stencil:
                e_loc = sum(a * ratio(t) for t, a in stencil)

        Threads that want to run in parallel should pass their own Stencil
        to loc_energy() instead.
        """
        with self._lock:
            yield self.loc_energy(state, out=self.loc_energies)

    def get_local_energy_ref(self, state: int) -> Stencil:
        """Stencil of `state` filled in the shared buffer, returned as a copy taken under the lock."""
        with self.local_energy_ref(state) as stencil:
            return stencil.copy()

    # ---------------------------------- MAPPING ----------------------------------

    def map(self, index: int) -> int:
        """
        Basis index -> reduced-space index. Identity without symmetries.

        Raises:
            OutOfRangeError: if index is negative or >= 2^Ns.
        """
        if index < 0 or index >= self.N:
            raise OutOfRangeError(index, self.N)
        return int(index)

    # ---------------------------------- MATRIX BUILD ----------------------------------

    def set_hamiltonian_elem(self, k, value, new_idx) -> None:
        """
        Scatter-add `value` into H[new_idx, k].

        k is the basis state acted upon (column), new_idx the state it is
        sent to (row). Repeated writes to the same entry ADD, since one state
        can be reached through several bonds. Accepts scalars or equal-length
        numpy arrays.
        """
        if self._builder is None:
            raise HamiltonianNotBuiltError(
                "set_hamiltonian_elem() is only valid while hamiltonian() runs"
            )
        self._builder.add(new_idx, k, value)

    @abstractmethod
    def _fill_hamiltonian(self, states: np.ndarray) -> None:
        """Scatter every term for every basis state in `states`."""

    def hamiltonian(self) -> sp.csr_matrix:
        """
        Build the full sparse Hamiltonian over all 2^Ns basis states.

        Memory grows as O(2^Ns * Ns * z); above MAX_ED_SITES a warning is
        issued, and running out of memory raises AllocationError with the
        size of the failed request. On failure the previous matrix is gone
        and H is left as None.
        """
        if self.Ns > MAX_ED_SITES:
            warnings.warn(
                f"Building the Hamiltonian for Ns={self.Ns} sites needs a "
                f"{self.N}x{self.N} matrix. This may exhaust memory.",
                UserWarning, stacklevel=2
            )

        self.H = None
        self.eigenvalues = self.eigenvectors = None
        self.E_av = self.E_av_idx = None

        self._builder = _CooBuilder(self.N)
        try:
            self._fill_hamiltonian(np.arange(self.N, dtype=np.int64))
            self.H = self._builder.to_csr()
        except MemoryError as e:
            raise AllocationError(
                self.N, estimate_coo_bytes(self.N, self.loc_states_num), str(e)
            ) from e
        finally:
            self._builder = None
        return self.H

    # ---------------------------------- LOCAL ENERGY ----------------------------------

    def _stencil(self, out) -> Stencil:
        if out is None:
            return Stencil(self.loc_states_num)
        if len(out) != self.loc_states_num:
            raise ValueError(
                f"Stencil buffer has {len(out)} slots, model needs {self.loc_states_num}"
            )
        return out

    def _check_vec(self, vec) -> None:
        if len(vec) != self.Ns:
            raise ValueError(f"State vector has length {len(vec)}, lattice has {self.Ns} sites")

    @abstractmethod
    def loc_energy(self, state: int, out: Stencil = None) -> Stencil:
        """Stencil of an integer basis state. Writes into `out` if given."""

    @abstractmethod
    def loc_energy_vec(self, vec, out: Stencil = None) -> Stencil:
        """Stencil of a state given as a 0/1 or +/-1 vector (site 0 first)."""

    def local_energy(self, spins, log_psi_func) -> complex:
        """
        E_loc(s) = <s|H|psi> / <s|psi> for a wavefunction given by its log.

        Args:
            spins:        integer basis state or +/-1 array (site 0 first).
            log_psi_func: callable taking a +/-1 array, returning log(psi).

        Returns:
            Local energy as a complex scalar.
        """
        state = int(spins) if np.isscalar(spins) else spins_to_state(spins)
        stencil = self.loc_energy(state)

        log_psi_current = log_psi_func(state_to_spins(state, self.Ns))
        local_e = 0.0 + 0j
        for target, amplitude in zip(stencil.states, stencil.amplitudes):
            if amplitude == 0.0:
                continue
            if target == state:
                local_e += amplitude
                continue
            log_ratio = log_psi_func(state_to_spins(int(target), self.Ns)) - log_psi_current
            local_e += amplitude * np.exp(log_ratio)
        return local_e

    def matrix_from_stencils(self) -> sp.csr_matrix:
        """
        Rebuild H from loc_energy() of every basis state.

        The stencil of s fills column s, each amplitude landing in the row of
        its target state, so the result equals hamiltonian() entry by entry
        whenever the two paths agree, symmetric or not.
        """
        rows, cols, data = [], [], []
        out = Stencil(self.loc_states_num)
        for s in range(self.N):
            self.loc_energy(s, out=out)
            rows.append(out.states.copy())
            cols.append(np.full(len(out), s, dtype=np.int64))
            data.append(out.amplitudes.copy())
        H = sp.coo_matrix(
            (np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
            shape=(self.N, self.N),
        ).tocsr()
        H.sum_duplicates()
        H.eliminate_zeros()
        return H

    # ---------------------------------- DIAGONALIZATION ----------------------------------

    def diag_h(self, skip_eigenvectors: bool = False) -> np.ndarray:
        """
        Full symmetric eigen-decomposition of the current matrix.

        Stores ascending eigenvalues, eigenvectors (unless skipped), the
        spectral mean E_av and E_av_idx, the index of the eigenvalue closest
        to it. Nothing is stored if the decomposition fails.

        Raises:
            HamiltonianNotBuiltError: if hamiltonian() has not been called.
            AllocationError:          if the dense matrix does not fit.
            DecompositionError:       if the eigensolver does not converge.
        """
        if self.H is None:
            raise HamiltonianNotBuiltError("Call hamiltonian() before diag_h()")

        eigenvalues, eigenvectors = diagonalize(self.H, skip_eigenvectors)

        self.eigenvalues = eigenvalues
        self.eigenvectors = eigenvectors
        self.E_av = float(np.mean(eigenvalues))
        self.E_av_idx = spectral_mean_index(eigenvalues)
        return eigenvalues
