# spinham/__init__.py
#
# Spin lattice Hamiltonians for exact diagonalization and variational Monte
# Carlo: the sparse matrix and the per-state local energy stencil, built from
# one term list per model.
#
#   from spinham import SquareLattice, build_model
#   ham = build_model("ising", SquareLattice(8), J=1.0, g=0.5, h=0.0)
#   ham.hamiltonian(); ham.diag_h()
#   stencil = ham.loc_energy(0b10110010)

from .errors import (
    AllocationError,
    DecompositionError,
    HamiltonianError,
    HamiltonianNotBuiltError,
    OutOfRangeError,
)
from .hamiltonian import SpinHamiltonian, Stencil
from .lattice import HexagonalLattice, Lattice, NeighborTableLattice, SquareLattice, make_lattice
from .models import (
    HeisenbergKitaevModel,
    HeisenbergModel,
    IsingModel,
    ModelKind,
    build_model,
)

__version__ = "0.1.0"

__all__ = [
    "SpinHamiltonian", "Stencil",
    "Lattice", "SquareLattice", "HexagonalLattice", "NeighborTableLattice", "make_lattice",
    "IsingModel", "HeisenbergModel", "HeisenbergKitaevModel", "ModelKind", "build_model",
    "HamiltonianError", "OutOfRangeError", "AllocationError", "DecompositionError",
    "HamiltonianNotBuiltError",
]
