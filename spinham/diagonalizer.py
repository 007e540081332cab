# spinham/diagonalizer.py
#
# Exact diagonalization of the materialised Hamiltonian.
#
# diag_h() needs the WHOLE spectrum (to locate the state closest to the
# spectral mean), so the sparse matrix is densified and handed to the
# symmetric LAPACK solver. That costs O(4^Ns) memory and limits full ED to
# roughly 14-16 sites. When only the ground state is needed, ground_state()
# uses Lanczos (scipy eigsh) on the sparse matrix and reaches a few more sites.

import numpy as np
import scipy.linalg as la
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from .errors import AllocationError, DecompositionError, HamiltonianNotBuiltError

# Soft ceiling for full diagonalization. Beyond it hamiltonian() warns and
# check_ed_size() refuses.
MAX_ED_SITES = 16


def estimate_dense_bytes(dim: int, itemsize: int = 8) -> int:
    """Bytes needed to hold a dense dim x dim matrix."""
    return dim * dim * itemsize


def estimate_coo_bytes(dim: int, entries_per_column: int) -> int:
    """
    Bytes of the COO triplets collected while building a sparse matrix:
    one int64 row, one int64 column and one float64 value per entry.
    """
    return dim * entries_per_column * 24


def check_ed_size(ns: int, max_sites: int = MAX_ED_SITES) -> None:
    """
    Gate for callers about to run full ED.

    Raises:
        AllocationError: if ns exceeds max_sites.
    """
    if ns > max_sites:
        dim = 2 ** ns
        raise AllocationError(
            dim, estimate_dense_bytes(dim),
            f"Ns={ns} exceeds the exact diagonalization limit of {max_sites} sites"
        )


def diagonalize(H, skip_eigenvectors: bool = False):
    """
    Dense symmetric eigen-decomposition.

    Args:
        H:                 sparse or dense real-symmetric matrix.
        skip_eigenvectors: only compute eigenvalues (saves one dense matrix).

    Returns:
        eigenvalues:  ascending, shape (dim,).
        eigenvectors: columns matching eigenvalues, or None if skipped.

    Raises:
        AllocationError:    on memory exhaustion.
        DecompositionError: if LAPACK fails to converge.
    """
    dim = H.shape[0]
    try:
        dense = H.toarray() if sp.issparse(H) else np.asarray(H, dtype=np.float64)
        if skip_eigenvectors:
            return la.eigvalsh(dense), None
        eigenvalues, eigenvectors = la.eigh(dense)
        return eigenvalues, eigenvectors
    except MemoryError as e:
        raise AllocationError(dim, estimate_dense_bytes(dim), str(e)) from e
    except la.LinAlgError as e:
        raise DecompositionError(f"Symmetric eigensolver failed for dim={dim}: {e}") from e


def spectral_mean_index(eigenvalues: np.ndarray, tol: float = 1e-10) -> int:
    """
    Index of the eigenvalue closest to the arithmetic mean of the spectrum.

    Distances within `tol` (relative to the spectral width) count as ties,
    and ties go to the first index in ascending order, so degenerate levels
    do not depend on floating-point noise.
    """
    eigenvalues = np.asarray(eigenvalues)
    E_av = np.mean(eigenvalues)
    dist = np.abs(eigenvalues - E_av)
    scale = max(1.0, float(np.ptp(eigenvalues)))
    return int(np.flatnonzero(dist <= dist.min() + tol * scale)[0])


def ground_state(hamiltonian, k: int = 1):
    """
    Lowest k eigenpairs of a built Hamiltonian via Lanczos.

    Falls back to the dense solver when the basis is too small for eigsh
    (which needs k < dim - 1).

    Returns:
        energies: shape (k,), ascending.
        states:   shape (dim, k).
    """
    H = hamiltonian.get_hamiltonian()
    if H is None:
        raise HamiltonianNotBuiltError("Call hamiltonian() before ground_state()")

    dim = H.shape[0]
    if k >= dim - 1:
        eigenvalues, eigenvectors = diagonalize(H)
        return eigenvalues[:k], eigenvectors[:, :k]

    try:
        eigenvalues, eigenvectors = spla.eigsh(H, k=k, which='SA', tol=0)
    except MemoryError as e:
        raise AllocationError(dim, H.data.nbytes, str(e)) from e
    except spla.ArpackNoConvergence as e:
        raise DecompositionError(f"Lanczos did not converge for dim={dim}: {e}") from e

    order = np.argsort(eigenvalues)
    return eigenvalues[order], eigenvectors[:, order]


def ground_state_energy(hamiltonian) -> float:
    """Convenience wrapper: returns only the ground state energy."""
    energies, _ = ground_state(hamiltonian, k=1)
    return float(energies[0])
