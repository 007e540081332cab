# spinham/binary.py
#
# Basis state encoding for spin-1/2 lattices.
#
# A product state of Ns spins is stored as an integer in [0, 2^Ns). Site i
# lives at bit (Ns - 1 - i), so site 0 is the MOST significant bit and the
# bit string reads left to right in site order: |0101> means site 0 down,
# site 1 up, and so on. A set bit is spin up (+1), a cleared bit spin down (-1).
#
# Every model uses these helpers for both the matrix build and the local
# energy stencil. Mixing bit orders between the two paths silently corrupts
# results, so nothing outside this module should shift bits by hand.

import numpy as np


# ============================================================
# Integer Representation
# ============================================================

def binary_powers(ns: int) -> np.ndarray:
    """Return [2^0, 2^1, ..., 2^(ns-1)] as int64."""
    return np.left_shift(np.int64(1), np.arange(ns, dtype=np.int64))


def site_bit(site: int, ns: int) -> int:
    """Bit position holding the spin at `site`."""
    return ns - 1 - site


def check_bit(state: int, bit: int) -> bool:
    """True if `bit` of `state` is set."""
    return bool((state >> bit) & 1)


def flip(state, bit: int):
    """
    Flip one bit of a state.

    Works on plain ints and on numpy int arrays alike, which lets the
    vectorised matrix builders flip a whole column of basis states at once.
    """
    return state ^ (1 << bit)


def spin_at(state: int, site: int, ns: int) -> float:
    """Spin projection (+1.0 or -1.0) of `site` in the integer `state`."""
    return 1.0 if check_bit(state, site_bit(site, ns)) else -1.0


def spin_array(states: np.ndarray, site: int, ns: int) -> np.ndarray:
    """Vectorised spin_at: +/-1.0 for every state in `states`."""
    bits = (states >> site_bit(site, ns)) & 1
    return 2.0 * bits - 1.0


# ============================================================
# Vector Representation
# ============================================================

def int_to_base(state: int, ns: int) -> np.ndarray:
    """
    Convert an integer state to its bit vector, site 0 first.

    int_to_base(0b0101, 4) -> [0, 1, 0, 1]
    """
    shifts = ns - 1 - np.arange(ns)
    return ((state >> shifts) & 1).astype(np.int64)


def base_to_int(vec) -> int:
    """
    Convert a bit vector (0/1 or -1/+1 entries, site 0 first) to its integer.

    Any positive entry counts as spin up, so the same function accepts raw
    bits and +/-1 spin arrays.
    """
    bits = to_bits(vec)
    ns = len(bits)
    return int(np.dot(bits, binary_powers(ns)[::-1])) if ns else 0


def check_bit_vec(vec, site: int) -> bool:
    """True if `site` is spin up in a 0/1 or +/-1 bit vector."""
    return bool(vec[site] > 0)


def to_bits(vec) -> np.ndarray:
    """Normalise a 0/1 or +/-1 vector to an int64 0/1 bit vector."""
    return (np.asarray(vec) > 0).astype(np.int64)


def flip_vec(bits: np.ndarray, site: int) -> np.ndarray:
    """Return a copy of the 0/1 bit vector `bits` with `site` flipped."""
    out = np.array(bits, copy=True)
    out[site] = 1 - out[site]
    return out


# ============================================================
# Spin (+/-1) Representation
# ============================================================

def state_to_spins(state: int, ns: int) -> np.ndarray:
    """Integer state -> array of +1/-1, site 0 first."""
    return 2 * int_to_base(state, ns) - 1


def spins_to_state(spins) -> int:
    """Array of +1/-1 (site 0 first) -> integer state."""
    return base_to_int(spins)


def format_ket(state: int, ns: int) -> str:
    """Bit string of a state in site order, e.g. '0101'."""
    return "".join(str(b) for b in int_to_base(state, ns))
