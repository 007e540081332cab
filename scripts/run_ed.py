#!/usr/bin/env python3
# scripts/run_ed.py
#
# ============================================================
# CLI ENTRY POINT: exact diagonalization of one model from a YAML config
# ============================================================
#
# USAGE:
#   python scripts/run_ed.py configs/ising_chain.yaml
#   python scripts/run_ed.py configs/kitaev_honeycomb.yaml --seed 7
#   python scripts/run_ed.py configs/heisenberg_chain.yaml --no-plot
#
# WHAT THIS SCRIPT DOES:
#   1. Loads the YAML config (lattice, model couplings, run settings)
#   2. Builds the lattice and the model; disorder is drawn here, once
#   3. Builds the sparse Hamiltonian and checks that the local energy
#      stencils of every basis state reproduce it exactly
#   4. Diagonalizes and prints the ground state and the state closest
#      to the spectral mean in ket notation
#   5. Measures sigma^z / sigma^x on the ground state: site profiles and
#      correlations against distance; optionally reports the relative error
#      of an external energy estimate (--energy) against the exact one
#   6. Saves the spectrum record (.npz), the observables (.dat), a per-run
#      log row and the plots
#
# ============================================================

import argparse
import os
import sys
import time

import numpy as np

# Add project root to path so we can import spinham/ regardless of where
# the script is called from
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spinham import build_model, make_lattice
from spinham.diagonalizer import check_ed_size
from spinham.errors import HamiltonianError
from spinham.observables import compare_ed, compute_ed_observables
from spinham.utils import (
    SpectrumLogger, append_run_log, load_config, plot_site_profile, plot_spectrum,
    print_state_pretty,
)


# ============================================================
# SECTION: Object Builders (Config → Python Objects)
# ============================================================

def build_lattice(cfg: dict):
    """Construct the lattice from the 'lattice' section of the config."""
    lat = cfg['lattice']
    return make_lattice(
        lat.get('type', 'square'),
        lx=lat['lx'],
        ly=lat.get('ly', 1),
        dim=lat.get('dim', 1),
        bc=lat.get('bc', 0),
    )


def build_hamiltonian(cfg: dict, lattice, seed=None):
    """Construct the model from the 'model' section of the config."""
    params = dict(cfg['model'])
    kind = params.pop('type')
    return build_model(kind, lattice, rng=seed, **params)


def check_stencils(hamiltonian, atol: float = 1e-10) -> float:
    """
    Compare the matrix built from local energy stencils with the one built
    by hamiltonian(). Returns the largest absolute deviation.
    """
    diff = abs(hamiltonian.get_hamiltonian() - hamiltonian.matrix_from_stencils())
    deviation = float(diff.max()) if diff.nnz else 0.0
    if deviation > atol:
        raise RuntimeError(
            f"Local energy stencils disagree with the Hamiltonian matrix "
            f"(max deviation {deviation:.3e})"
        )
    return deviation


# ============================================================
# SECTION: Main Entry Point
# ============================================================

def main():
    parser = argparse.ArgumentParser(
        description='Exact diagonalization of a spin lattice model from a YAML config.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_ed.py configs/ising_chain.yaml
  python scripts/run_ed.py configs/kitaev_honeycomb.yaml --seed 7
        """
    )
    parser.add_argument('config', help='Path to a YAML config file')
    parser.add_argument('--seed', type=int, default=None,
                        help='Disorder seed (overrides run.seed in the config)')
    parser.add_argument('--no-plot', action='store_true', help='Skip the spectrum and observable plots')
    parser.add_argument('--energy', type=float, default=None,
                        help='External ground energy estimate (e.g. from VMC) to compare with ED')
    args = parser.parse_args()

    # ---- Load config ----------------------------------------------------------
    cfg = load_config(args.config)
    run = cfg.get('run', {})
    seed = args.seed if args.seed is not None else run.get('seed', None)
    save_dir = run.get('save_dir', 'results/ed/')
    tol = run.get('tol', 0.05)

    # ---- Build lattice and model ----------------------------------------------
    lattice = build_lattice(cfg)
    hamiltonian = build_hamiltonian(cfg, lattice, seed)
    Ns = lattice.get_Ns()

    print("=" * 62)
    print("  Exact Diagonalization")
    print("=" * 62)
    print(f"  Lattice:     {lattice}")
    print(f"  Model:       {hamiltonian.get_info()}")
    print(f"  Hilbert:     N = 2^{Ns} = {hamiltonian.get_hilbert_size()}")
    print(f"  Stencil:     {hamiltonian.loc_states_num} slots per state")
    print("=" * 62)
    print()

    try:
        check_ed_size(Ns, run.get('max_ed', 14))
        t_start = time.perf_counter()

        # ---- Matrix and stencil consistency ------------------------------------
        H = hamiltonian.hamiltonian()
        print(f"Built H: {H.nnz} non-zero entries")
        deviation = check_stencils(hamiltonian)
        print(f"  Stencil vs matrix max deviation: {deviation:.2e}")

        # ---- Diagonalize -------------------------------------------------------
        skip_vec = run.get('skip_eigenvectors', False)
        eigenvalues = hamiltonian.diag_h(skip_eigenvectors=skip_vec)
    except HamiltonianError as e:
        print(f"ED failed ({e.kind}): {e}")
        sys.exit(1)

    idx = hamiltonian.E_av_idx
    ground_ed = float(eigenvalues[0])
    print(f"\n  Ground state energy:   {ground_ed:+.6f}")
    print(f"  Energy per site:       {ground_ed / Ns:+.6f}")
    print(f"  Spectral mean:         {hamiltonian.E_av:+.6f}  (closest: E[{idx}] = {eigenvalues[idx]:+.6f})")

    if args.energy is not None:
        relative_error = compare_ed(hamiltonian, args.energy)
        print(f"  External energy:       {args.energy:+.6f}")
        print(f"  Relative error:        {relative_error:.4f}%")

    os.makedirs(save_dir, exist_ok=True)
    info = hamiltonian.get_info()

    if not skip_vec:
        print("-" * 62)
        print("GROUND STATE ED:")
        print_state_pretty(hamiltonian.get_eigen_state(0), Ns, tol)
        print("-" * 62)
        print("MEAN ENERGY STATE ED:")
        print_state_pretty(hamiltonian.get_eigen_state(idx), Ns, tol)
        print("-" * 62)

        # ---- Observables on the ground state ---------------------------------
        obs = compute_ed_observables(hamiltonian.get_eigen_state(0), Ns)
        print(f"  <sigma^z> per site:    {obs['sz']:+.6f}")
        print(f"  <sigma^x> per site:    {obs['sx']:+.6f}")

        profiles = {
            'szSite': (obs['sz_site'], '$S^z_i$'),
            'szCorr': (obs['sz_corr'], '$S^z_iS^z_{i+l}$'),
            'sxSite': (obs['sx_site'], '$S^x_i$'),
            'sxCorr': (obs['sx_corr'], '$S^x_iS^x_{i+l}$'),
        }
        for name, (values, label) in profiles.items():
            base = os.path.join(save_dir, f"exact_{name}{info}")
            np.savetxt(base + ".dat", values)
            if not args.no_plot:
                plot_site_profile(values, label, title=label + info, save_path=base + ".png")

        log_path = os.path.join(save_dir, f"exact{info}.dat")
        append_run_log(log_path, lattice, ground_ed, 0.0, obs['sz'], obs['sx'],
                       time.perf_counter() - t_start)
        print(f"  Run log appended: {log_path}")

    # ---- Save ----------------------------------------------------------------
    logger = SpectrumLogger()
    logger.record(hamiltonian)
    record_path = os.path.join(save_dir, f"spectrum{info}.npz")
    logger.save(record_path)
    print(f"\n  Spectrum saved: {record_path}")

    if not args.no_plot:
        plot_spectrum(
            eigenvalues,
            mean_idx=idx,
            n_spins=Ns,
            title=hamiltonian.get_info(sep=""),
            save_path=os.path.join(save_dir, f"spectrum{info}.png"),
        )

    print("\nDone.")


if __name__ == '__main__':
    main()
