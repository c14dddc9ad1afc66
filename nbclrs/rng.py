from __future__ import annotations

import random as rand

import numpy as np

import nbclrs.utils as nbu


@nbu.jtc
def _ss(f) -> None:
    rand.seed(f)
    np.random.seed(f)


def set_seed(seed: int | None) -> None:
    """Set both ``random`` and ``numpy.random`` seeds for both python and jit execution, from a python scope.
     Or just jit execution from a jit scope.

     Numba keeps its own random state, so seeding only python's ``random`` does not make the compiled quicksort
     pivots reproducible."""
    if seed is not None:
        _ss(seed)
        rand.seed(seed)
        np.random.seed(seed)


@nbu.ovs(set_seed)
def impl_set_seed(seed: int | None):
    if seed is nbu._N or isinstance(seed, nbu.types.NoneType): return lambda seed: None
    return _ss


@nbu.rgic
def uniform_index(p: int, r: int) -> int:
    """
    Uniform integer draw over the inclusive range ``[p, r]``.

    :param p: Lowest index.
    :param r: Highest index, included.
    :returns: The drawn index.
    """
    return rand.randint(p, r)
