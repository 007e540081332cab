# spinham/models/__init__.py
#
# The closed set of lattice models and a single dispatch table for them.
#
#   from spinham.models import build_model, ModelKind
#   ham = build_model("ising", lattice, J=1.0, g=0.5, h=0.1)
#
# Every model offers the same capabilities (build the matrix, build a local
# energy stencil, describe itself), so callers only ever need build_model().

from enum import Enum

from .heisenberg import HeisenbergModel
from .heisenberg_kitaev import HeisenbergKitaevModel
from .ising import IsingModel


class ModelKind(str, Enum):
    ISING = "ising"
    ISING_ALL = "ising_all"
    HEISENBERG = "heisenberg"
    HEISENBERG_KITAEV = "heisenberg_kitaev"


def _ising(lattice, rng, **params):
    return IsingModel(lattice=lattice, rng=rng, neighbors="first", **params)


def _ising_all(lattice, rng, **params):
    return IsingModel(lattice=lattice, rng=rng, neighbors="all", **params)


def _heisenberg(lattice, rng, **params):
    return HeisenbergModel(lattice=lattice, rng=rng, **params)


def _heisenberg_kitaev(lattice, rng, **params):
    if "K" not in params and {"Kx", "Ky", "Kz"} & params.keys():
        params["K"] = (params.pop("Kx", 1.0), params.pop("Ky", 1.0), params.pop("Kz", 1.0))
    return HeisenbergKitaevModel(lattice=lattice, rng=rng, **params)


MODELS = {
    ModelKind.ISING: _ising,
    ModelKind.ISING_ALL: _ising_all,
    ModelKind.HEISENBERG: _heisenberg,
    ModelKind.HEISENBERG_KITAEV: _heisenberg_kitaev,
}


def build_model(kind, lattice, rng=None, **params):
    """
    Construct a model by name.

    Args:
        kind:    ModelKind or its string value.
        lattice: Lattice instance.
        rng:     numpy Generator, int seed or None (disorder draws).
        params:  Couplings accepted by the model's constructor. For
                 heisenberg_kitaev, Kx / Ky / Kz may be given separately.

    Raises:
        ValueError: if the model name is unknown.
    """
    try:
        kind = ModelKind(kind)
    except ValueError:
        choices = ", ".join(f"'{k.value}'" for k in ModelKind)
        raise ValueError(f"Unknown model '{kind}'. Choose one of {choices}.") from None
    return MODELS[kind](lattice, rng, **params)


__all__ = [
    "IsingModel", "HeisenbergModel", "HeisenbergKitaevModel",
    "ModelKind", "MODELS", "build_model",
]
