# spinham/disorder.py
#
# Static on-site disorder.
#
# Each disordered coupling (h, J, g, Kx, Ky, Kz) gets one real offset per site,
# drawn uniformly from (-w, w) where w is the disorder HALF-WIDTH, not a
# variance. The vector is drawn once when a model is constructed and then
# read by both the matrix build and the local energy stencil, so one model
# instance is one disorder realization.
#
# The fill order grows from the centre of the chain outwards. Adding sites to
# the lattice then appends new draws at the edges while the central values
# stay put, so realizations for different Ns are nested.

import numpy as np


def make_rng(seed=None) -> np.random.Generator:
    """Accept a Generator, an int seed or None and return a Generator."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def center_out_order(n: int) -> list:
    """
    Site order used by create_random_vec.

    Starts at c = n // 2 and for j = 0, 1, ... visits c + j and then c - j,
    skipping indices outside [0, n) and never visiting a site twice.

    center_out_order(4) -> [2, 3, 1, 0]
    center_out_order(5) -> [2, 3, 1, 4, 0]
    """
    center = n // 2
    order = []
    for j in range(center + 1):
        for idx in (center + j, center - j):
            if 0 <= idx < n and idx not in order:
                order.append(idx)
    return order


def create_random_vec(n: int, rng, w: float = 1.0) -> np.ndarray:
    """
    Draw a length-n disorder vector from U(-w, w), filled centre-outwards.

    Args:
        n:   Number of sites.
        rng: numpy Generator (anything with .uniform(low, high)).
        w:   Disorder half-width. w = 0 still consumes draws, so the random
             stream stays aligned between clean and disordered runs.

    Returns:
        Array of shape (n,).
    """
    random_vec = np.zeros(n)
    for idx in center_out_order(n):
        random_vec[idx] = rng.uniform(-w, w)
    return random_vec


def create_random_vec_std(n: int, rng, w: float = 1.0) -> np.ndarray:
    """Plain left-to-right draw from U(-w, w). Not nested across Ns."""
    return np.array([rng.uniform(-w, w) for _ in range(n)])
