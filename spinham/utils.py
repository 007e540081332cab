# spinham/utils.py
#
# Infrastructure utilities: state printing, spectrum records, plotting,
# per-run log rows, config loading and progress bars.
#
# Nothing here touches the physics. The ED driver in scripts/ uses these to
# show eigenstates in ket notation, keep a record of every spectrum it
# computes, and plot the spectrum with the mean-energy level marked.

import os

import matplotlib.pyplot as plt
import numpy as np
import yaml
from tqdm import tqdm

from .binary import format_ket


# ============================================================
# State Printing
# ============================================================

def format_base_state(state: int, value: float, ns: int, tol: float = 0.05) -> str:
    """
    One basis component in bra-ket notation, e.g. '+0.707*|0101>'.

    Returns an empty string when |value| is below tol.
    """
    if abs(value) < tol:
        return ""
    return f"{value:+.3f}*|{format_ket(state, ns)}>"


def format_state(vector: np.ndarray, ns: int, tol: float = 0.05) -> str:
    """Whole state vector as a sum of kets, skipping small coefficients."""
    terms = [format_base_state(k, float(np.real(c)), ns, tol) for k, c in enumerate(vector)]
    return " + ".join(t for t in terms if t)


def print_state_pretty(vector: np.ndarray, ns: int, tol: float = 0.05) -> None:
    print(format_state(vector, ns, tol))


# ============================================================
# Spectrum Logger
# ============================================================

class SpectrumLogger:
    """
    Records exact diagonalization results run by run.

    Tracked quantities:
      - infos:        model info string of each run (the cache key)
      - ground:       lowest eigenvalue
      - mean_energy:  arithmetic mean of the spectrum
      - mean_idx:     index of the eigenvalue closest to the mean
      - spectra:      full eigenvalue arrays (ragged across Ns)
    """

    def __init__(self):
        self.infos       = []
        self.ground      = []
        self.mean_energy = []
        self.mean_idx    = []
        self.spectra     = []

    def record(self, hamiltonian) -> None:
        """Record the spectrum of a diagonalized Hamiltonian."""
        eigenvalues = hamiltonian.get_eigenvalues()
        if eigenvalues is None:
            raise ValueError("Hamiltonian has not been diagonalized yet")
        self.infos.append(hamiltonian.get_info())
        self.ground.append(float(eigenvalues[0]))
        self.mean_energy.append(float(hamiltonian.E_av))
        self.mean_idx.append(int(hamiltonian.E_av_idx))
        self.spectra.append(np.asarray(eigenvalues, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.infos)

    @property
    def history(self) -> dict:
        """All scalar records as numpy arrays."""
        return {
            'infos':       np.array(self.infos),
            'ground':      np.array(self.ground),
            'mean_energy': np.array(self.mean_energy),
            'mean_idx':    np.array(self.mean_idx),
        }

    def save(self, path: str) -> None:
        """Save to a .npz archive; spectra are stored as spectrum_0, spectrum_1, ..."""
        spectra = {f'spectrum_{i}': s for i, s in enumerate(self.spectra)}
        np.savez(path, **self.history, **spectra)

    @classmethod
    def load(cls, path: str) -> 'SpectrumLogger':
        logger = cls()
        data = np.load(path)
        logger.infos       = [str(s) for s in data['infos']]
        logger.ground      = list(data['ground'])
        logger.mean_energy = list(data['mean_energy'])
        logger.mean_idx    = [int(i) for i in data['mean_idx']]
        logger.spectra     = [data[f'spectrum_{i}'] for i in range(len(logger.infos))]
        return logger

    def summary(self) -> None:
        """Print one line per recorded run."""
        if not self.infos:
            print("SpectrumLogger: no data recorded yet.")
            return
        for info, e0, e_av, idx in zip(self.infos, self.ground, self.mean_energy, self.mean_idx):
            print(f"  {info} | E0 = {e0:+.6f} | E_av = {e_av:+.6f} (idx {idx})")


# ============================================================
# Plotting
# ============================================================

def plot_spectrum(eigenvalues: np.ndarray,
                  mean_idx: int = None,
                  n_spins: int = None,
                  title: str = None,
                  save_path: str = None) -> None:
    """
    Plot the ordered spectrum, with the level closest to the mean marked.

    Args:
        eigenvalues: Ascending eigenvalues.
        mean_idx:    Index of the mean-energy eigenstate (optional).
        n_spins:     If given, normalizes energies to per-site values.
        title:       Plot title, usually the model info string.
        save_path:   File path to save figure. None = plt.show().
    """
    energies = np.asarray(eigenvalues, dtype=np.float64)
    y_label = "Energy"
    if n_spins is not None:
        energies = energies / n_spins
        y_label = "Energy per site"

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(np.arange(len(energies)), energies, '.', color='royalblue', markersize=3)
    if mean_idx is not None:
        ax.axhline(energies[mean_idx], color='crimson', linestyle='--', linewidth=1.2,
                   label=f'E[{mean_idx}] = {energies[mean_idx]:.4f} (closest to mean)')
        ax.legend()
    ax.set_xlabel('Eigenstate index')
    ax.set_ylabel(y_label)
    ax.set_title(title or 'Exact spectrum')
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved plot: {save_path}")
    else:
        plt.show()

    plt.close(fig)


def plot_site_profile(values: np.ndarray,
                      y_label: str,
                      title: str = None,
                      save_path: str = None) -> None:
    """
    Scatter a per-site quantity (a site profile or a correlation against
    distance) over the lattice index.
    """
    values = np.asarray(values, dtype=np.float64)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(np.arange(len(values)), values, 'o', color='royalblue', markersize=5)
    ax.axhline(0, color='gray', linestyle='-', linewidth=0.6)
    ax.set_xlabel('Lattice site')
    ax.set_ylabel(y_label)
    ax.set_title(title or y_label)
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved plot: {save_path}")
    else:
        plt.show()

    plt.close(fig)


# ============================================================
# Run Log
# ============================================================

RUN_LOG_COLUMNS = ("lattice_type", "Lx", "Ly", "Lz", "En", "dEn", "Sz", "Sx", "time_taken")


def append_run_log(path: str, lattice, energy: float, energy_error: float,
                   sz: float, sx: float, elapsed: float) -> None:
    """
    Append one tab-separated row to a per-model run log, writing the header
    first when the file is new or empty.

    Lattices without an lx / ly extent (explicit neighbour tables) are
    logged as an Ns x 1 x 1 block.
    """
    write_header = not os.path.isfile(path) or os.path.getsize(path) == 0
    lx = getattr(lattice, 'lx', lattice.get_Ns())
    ly = getattr(lattice, 'ly', 1)
    row = (lattice.get_type(), str(lx), str(ly), "1",
           f"{energy:.5f}", f"{energy_error:.5f}", f"{sz:.5f}", f"{sx:.5f}", f"{elapsed:.5f}")
    with open(path, 'a') as f:
        if write_header:
            f.write("\t".join(RUN_LOG_COLUMNS) + "\n")
        f.write("\t".join(row) + "\n")


# ============================================================
# Configuration Loading
# ============================================================

def load_config(path: str) -> dict:
    """Load a YAML experiment config file and return it as a dict."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r') as f:
        config = yaml.safe_load(f)
    return config or {}


# ============================================================
# Progress Bar
# ============================================================

def make_progress_bar(iterable, desc: str = "", total: int = None, **kwargs):
    """Wrap an iterable with a tqdm progress bar."""
    return tqdm(iterable, desc=desc, total=total, **kwargs)
