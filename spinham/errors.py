# spinham/errors.py
#
# Typed failures raised by the Hamiltonian core.
#
# Nothing in the package retries. Every error propagates to the caller (the
# ED driver or the sampler), which decides whether to abort or to try a
# smaller lattice. Each class carries a `kind` tag so callers that prefer to
# branch on a value rather than on the class hierarchy can do so.


class HamiltonianError(Exception):
    """Base class for every failure raised by spinham."""

    kind = "hamiltonian"


class OutOfRangeError(HamiltonianError, IndexError):
    """A basis index outside [0, N) was requested."""

    kind = "out_of_range"

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(
            f"Element out of range: index {index} is not in the basis of size {size}"
        )


class AllocationError(HamiltonianError, MemoryError):
    """
    The Hamiltonian or the eigensolver could not get the memory it needs.

    Carries the Hilbert space dimension and the byte estimate of the failing
    allocation so the caller can report it or fall back to a smaller Ns.
    """

    kind = "allocation"

    def __init__(self, dim: int, n_bytes: int, reason: str = ""):
        self.dim = dim
        self.n_bytes = n_bytes
        msg = f"Memory exceeded: dim(H) = {dim}x{dim} (~{n_bytes / 1e9:.2f} GB)"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DecompositionError(HamiltonianError, RuntimeError):
    """The symmetric eigensolver failed to converge."""

    kind = "decomposition"


class HamiltonianNotBuiltError(HamiltonianError, RuntimeError):
    """diag_h() was called before hamiltonian() materialised the matrix."""

    kind = "not_built"
