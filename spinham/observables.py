# spinham/observables.py
#
# Spin observables evaluated on exact eigenstates.
#
# A state here is a full vector of 2^Ns amplitudes in the basis used by the
# models (site 0 is the most significant bit). sigma^z is diagonal, so its
# averages are weighted sums of |psi_k|^2. sigma^x flips one bit, so its
# averages pair psi_k with psi at the flipped state.
#
# Correlations are taken against distance l on a periodic chain of sites,
#   C(l) = (1/Ns) sum_i <sigma_i sigma_{(i+l) mod Ns}>,
# which is what the ED comparison writes out next to the per-site profile.

import numpy as np

from .binary import flip, site_bit, spin_array
from .errors import HamiltonianNotBuiltError


def _basis(psi, ns: int) -> tuple:
    psi = np.asarray(psi)
    if psi.shape != (2 ** ns,):
        raise ValueError(f"State has shape {psi.shape}, expected ({2 ** ns},) for Ns={ns}")
    return psi, np.arange(2 ** ns, dtype=np.int64)


# ============================================================
# sigma^z
# ============================================================

def sigma_z_per_site(psi: np.ndarray, ns: int) -> np.ndarray:
    """
    <sigma_i^z> for every site i.

    A fully polarized basis state gives +1 (up) or -1 (down) on each site.

    Returns:
        Array of shape (ns,).
    """
    psi, states = _basis(psi, ns)
    prob = np.abs(psi) ** 2
    return np.array([float(np.sum(prob * spin_array(states, i, ns))) for i in range(ns)])


def av_sigma_z(psi: np.ndarray, ns: int) -> float:
    """Mean z-magnetization per site, (1/Ns) sum_i <sigma_i^z>."""
    return float(np.mean(sigma_z_per_site(psi, ns)))


def sigma_z_correlation(psi: np.ndarray, ns: int) -> np.ndarray:
    """C_z(l) = (1/Ns) sum_i <sigma_i^z sigma_{i+l}^z> for l = 0 .. Ns-1."""
    psi, states = _basis(psi, ns)
    prob = np.abs(psi) ** 2
    spins = [spin_array(states, i, ns) for i in range(ns)]
    corr = np.zeros(ns)
    for l in range(ns):
        for i in range(ns):
            corr[l] += np.sum(prob * spins[i] * spins[(i + l) % ns])
    return corr / ns


# ============================================================
# sigma^x
# ============================================================

def sigma_x_per_site(psi: np.ndarray, ns: int) -> np.ndarray:
    """
    <sigma_i^x> for every site i.

    Computed as sum_k conj(psi[flip_i(k)]) psi[k]; for real states this is
    the overlap of psi with its copy flipped on site i.
    """
    psi, states = _basis(psi, ns)
    values = np.empty(ns)
    for i in range(ns):
        flipped = flip(states, site_bit(i, ns))
        values[i] = float(np.real(np.vdot(psi[flipped], psi)))
    return values


def av_sigma_x(psi: np.ndarray, ns: int) -> float:
    """Mean x-magnetization per site, (1/Ns) sum_i <sigma_i^x>."""
    return float(np.mean(sigma_x_per_site(psi, ns)))


def sigma_x_correlation(psi: np.ndarray, ns: int) -> np.ndarray:
    """C_x(l) = (1/Ns) sum_i <sigma_i^x sigma_{i+l}^x>; C_x(0) = 1 for a normalized state."""
    psi, states = _basis(psi, ns)
    corr = np.zeros(ns)
    for l in range(ns):
        for i in range(ns):
            flipped = flip(states, site_bit(i, ns))
            flipped = flip(flipped, site_bit((i + l) % ns, ns))
            corr[l] += float(np.real(np.vdot(psi[flipped], psi)))
    return corr / ns


# ============================================================
# Summary
# ============================================================

def compute_ed_observables(psi: np.ndarray, ns: int) -> dict:
    """
    All spin observables of one eigenstate at once.

    Returns dict with keys: 'sz', 'sx' (per-site means), 'sz_site',
    'sx_site' (site profiles) and 'sz_corr', 'sx_corr' (correlations
    against distance).
    """
    sz_site = sigma_z_per_site(psi, ns)
    sx_site = sigma_x_per_site(psi, ns)
    return {
        'sz':      float(np.mean(sz_site)),
        'sx':      float(np.mean(sx_site)),
        'sz_site': sz_site,
        'sx_site': sx_site,
        'sz_corr': sigma_z_correlation(psi, ns),
        'sx_corr': sigma_x_correlation(psi, ns),
    }


def compare_ed(hamiltonian, energy: float) -> float:
    """
    Relative error, in percent, of an external energy estimate (e.g. from a
    variational run) against the exact ground energy:
        100 * |E_ed - energy| / |E_ed|

    Raises:
        HamiltonianNotBuiltError: if diag_h() has not been run.
        ValueError:               if the exact ground energy is zero.
    """
    if hamiltonian.get_eigenvalues() is None:
        raise HamiltonianNotBuiltError("Call hamiltonian() and diag_h() before compare_ed()")
    ground_ed = hamiltonian.get_eigen_energy(0)
    if ground_ed == 0.0:
        raise ValueError("Relative error is undefined for a zero ground state energy")
    return abs(ground_ed - float(np.real(energy))) / abs(ground_ed) * 100.0
