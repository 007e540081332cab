# spinham/lattice.py
#
# Lattices consumed by the spin models.
#
# A model only ever asks three things of its lattice:
#   get_Ns()            -> number of sites
#   get_nn_number(site) -> how many neighbour directions the site has
#   get_nn(site, k)     -> neighbour index in direction k, or -1 if none
#
# Directions are numbered consistently for every site. The Heisenberg-Kitaev
# model reads the direction index as the bond type, so the order of the
# directions is part of the physics, not an implementation detail.

from abc import ABC, abstractmethod

PBC = 0
OBC = 1

NO_NEIGHBOR = -1


class Lattice(ABC):
    """Abstract lattice exposing neighbour tables by direction index."""

    bc: int = PBC

    @abstractmethod
    def get_Ns(self) -> int:
        """Number of lattice sites."""

    @abstractmethod
    def get_nn_number(self, site: int) -> int:
        """Number of neighbour directions of `site`."""

    @abstractmethod
    def get_nn(self, site: int, k: int) -> int:
        """Neighbour of `site` in direction `k`, or NO_NEIGHBOR."""

    @abstractmethod
    def get_type(self) -> str:
        pass

    def neighbors(self, site: int) -> list:
        """All directions of `site` as a list (with NO_NEIGHBOR entries)."""
        return [self.get_nn(site, k) for k in range(self.get_nn_number(site))]

    def __repr__(self) -> str:
        bc = "pbc" if self.bc == PBC else "obc"
        return f"{self.__class__.__name__}(Ns={self.get_Ns()}, {bc})"


# ============================================================
# Square / Hypercubic Lattice
# ============================================================

class SquareLattice(Lattice):
    """
    Square lattice in 1D or 2D.

    Directions: 1D -> [+x, -x], 2D -> [+x, -x, +y, -y].
    Sites are numbered x-fastest: site = y * lx + x.
    """

    def __init__(self, lx: int, ly: int = 1, dim: int = 1, bc: int = PBC):
        if dim not in (1, 2):
            raise ValueError(f"SquareLattice supports dim 1 or 2, got {dim}")
        if bc not in (PBC, OBC):
            raise ValueError(f"Unknown boundary condition {bc}. Use PBC=0 or OBC=1.")
        self.lx = lx
        self.ly = ly if dim == 2 else 1
        self.dim = dim
        self.bc = bc
        self._table = self._build_table()

    def _shift(self, coord: int, step: int, length: int) -> int:
        new = coord + step
        if 0 <= new < length:
            return new
        if self.bc == PBC:
            return new % length
        return NO_NEIGHBOR

    def _build_table(self) -> list:
        steps = [(1, 0), (-1, 0)]
        if self.dim == 2:
            steps += [(0, 1), (0, -1)]
        table = []
        for site in range(self.lx * self.ly):
            x, y = site % self.lx, site // self.lx
            row = []
            for dx, dy in steps:
                nx = self._shift(x, dx, self.lx) if dx else x
                ny = self._shift(y, dy, self.ly) if dy else y
                if nx == NO_NEIGHBOR or ny == NO_NEIGHBOR:
                    row.append(NO_NEIGHBOR)
                else:
                    row.append(ny * self.lx + nx)
            table.append(row)
        return table

    def get_Ns(self) -> int:
        return self.lx * self.ly

    def get_nn_number(self, site: int) -> int:
        return 2 * self.dim

    def get_nn(self, site: int, k: int) -> int:
        return self._table[site][k]

    def get_type(self) -> str:
        return "square"


# ============================================================
# Hexagonal (Honeycomb) Lattice
# ============================================================

class HexagonalLattice(Lattice):
    """
    Honeycomb lattice in its brick-wall form, three bond types per site.

    Sites sit on an lx x ly grid (site = y * lx + x). Each site has one
    horizontal x-bond, one horizontal y-bond and one vertical z-bond:

      direction 0 (z-bond): (x, y+1) if x + y is even, else (x, y-1)
      direction 1 (y-bond): (x+1, y) if x is odd,      else (x-1, y)
      direction 2 (x-bond): (x+1, y) if x is even,     else (x-1, y)

    In 1D (ly = 1) the z-bonds are absent and the lattice is the Kitaev
    chain with alternating x and y bonds. Periodic boundaries need even lx
    (and even ly in 2D) for the bond pattern to close.
    """

    def __init__(self, lx: int, ly: int = 1, dim: int = 1, bc: int = PBC):
        if dim not in (1, 2):
            raise ValueError(f"HexagonalLattice supports dim 1 or 2, got {dim}")
        if bc not in (PBC, OBC):
            raise ValueError(f"Unknown boundary condition {bc}. Use PBC=0 or OBC=1.")
        if bc == PBC and (lx % 2 or (dim == 2 and ly % 2)):
            raise ValueError("Periodic honeycomb needs even lx (and even ly in 2D)")
        self.lx = lx
        self.ly = ly if dim == 2 else 1
        self.dim = dim
        self.bc = bc
        self._table = [
            [self._z_bond(s), self._y_bond(s), self._x_bond(s)]
            for s in range(self.lx * self.ly)
        ]

    def _wrap(self, coord: int, length: int) -> int:
        if 0 <= coord < length:
            return coord
        return coord % length if self.bc == PBC else NO_NEIGHBOR

    def _z_bond(self, site: int) -> int:
        if self.dim == 1:
            return NO_NEIGHBOR
        x, y = site % self.lx, site // self.lx
        ny = self._wrap(y + 1 if (x + y) % 2 == 0 else y - 1, self.ly)
        return NO_NEIGHBOR if ny == NO_NEIGHBOR else ny * self.lx + x

    def _horizontal(self, site: int, step: int) -> int:
        x, y = site % self.lx, site // self.lx
        nx = self._wrap(x + step, self.lx)
        if nx == NO_NEIGHBOR or nx == x:
            return NO_NEIGHBOR
        return y * self.lx + nx

    def _y_bond(self, site: int) -> int:
        x = site % self.lx
        return self._horizontal(site, 1 if x % 2 else -1)

    def _x_bond(self, site: int) -> int:
        x = site % self.lx
        return self._horizontal(site, -1 if x % 2 else 1)

    def get_Ns(self) -> int:
        return self.lx * self.ly

    def get_nn_number(self, site: int) -> int:
        return 3

    def get_nn(self, site: int, k: int) -> int:
        return self._table[site][k]

    def get_type(self) -> str:
        return "hexagonal"


# ============================================================
# Explicit Neighbour Table
# ============================================================

class NeighborTableLattice(Lattice):
    """
    Lattice defined by an explicit table: table[site][k] is the neighbour of
    `site` in direction k (or -1). Rows may have different lengths.
    """

    def __init__(self, table, name: str = "table"):
        self._table = [[int(n) for n in row] for row in table]
        self.name = name
        for site, row in enumerate(self._table):
            for nn in row:
                if nn >= len(self._table):
                    raise ValueError(
                        f"Site {site} lists neighbour {nn}, but the table has "
                        f"only {len(self._table)} sites."
                    )

    def get_Ns(self) -> int:
        return len(self._table)

    def get_nn_number(self, site: int) -> int:
        return len(self._table[site])

    def get_nn(self, site: int, k: int) -> int:
        return self._table[site][k]

    def get_type(self) -> str:
        return self.name


def make_lattice(kind: str, lx: int, ly: int = 1, dim: int = 1, bc: int = PBC) -> Lattice:
    """Build a lattice by name ('square' or 'hexagonal')."""
    if kind == "square":
        return SquareLattice(lx, ly, dim, bc)
    elif kind == "hexagonal":
        return HexagonalLattice(lx, ly, dim, bc)
    raise ValueError(f"Unknown lattice '{kind}'. Choose 'square' or 'hexagonal'.")
