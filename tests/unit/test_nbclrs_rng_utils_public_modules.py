from __future__ import annotations

import numba as nb
import numba.core.errors as nb_error
import numpy as np
import pytest

import nbclrs
import nbclrs.utils as nbu
from tests.numba_layers import iter_function_layers


@nb.njit
def _sentinel_of(x):
    typ = nbu.type_ref(x)
    return typ(nbu.prim_info(typ, 4))


@nb.njit
def _guarded_size(x):
    nbu.require_array(x)
    return x.shape[0]


def test_public_rng_module_paths() -> None:
    """Seeding and the inclusive index draw used for quicksort pivots."""
    nbclrs.rng.set_seed(12345)
    nbclrs.rng.set_seed(None)

    for _, layer_fn in iter_function_layers(nbclrs.rng.uniform_index):
        seen = {int(layer_fn(3, 5)) for _ in range(200)}
        assert seen == {3, 4, 5}
        assert int(layer_fn(7, 7)) == 7


def test_public_utils_module_helpers() -> None:
    for _, layer_fn in iter_function_layers(nbclrs.utils.swap):
        vals = np.array([1.0, 4.0, -3.0], dtype=np.float64)
        layer_fn(vals, 0, 2)
        np.testing.assert_allclose(vals, np.array([-3.0, 4.0, 1.0]))

    assert nbu.type_ref(np.array([1.0], dtype=np.float32)) is np.float32
    assert nbu.type_ref(7) is int
    assert nbu.prim_info(np.float64, 4) == np.inf
    assert nbu.prim_info(np.int32, 4) == np.iinfo(np.int32).max
    assert nbu.prim_info(np.uint8, 1) == 255
    assert nbu.prim_info(np.int16, 0) == np.iinfo(np.int16).min
    assert nbu.prim_info(np.float64, 2) > 0.0
    assert nbu.prim_info(np.float32, 3) == 4
    assert nbu.prim_info(np.int64, 2) is None


def test_sentinel_query_in_jit_scope() -> None:
    assert _sentinel_of(np.zeros(2, dtype=np.float64)) == np.inf
    assert _sentinel_of(np.zeros(2, dtype=np.float32)) == np.inf
    assert _sentinel_of(np.zeros(2, dtype=np.int32)) == np.iinfo(np.int32).max
    assert _sentinel_of(np.zeros(2, dtype=np.uint8)) == 255


def test_argument_guards_in_both_scopes() -> None:
    nbu.require_array(np.zeros(3))
    nbu.require_int_array(np.zeros(3, dtype=np.uint32))
    with pytest.raises(TypeError):
        nbu.require_array(None)
    with pytest.raises(TypeError):
        nbu.require_array(np.zeros((2, 2)))
    with pytest.raises(TypeError):
        nbu.require_int_array(np.zeros(3))

    assert _guarded_size(np.zeros(4)) == 4
    with pytest.raises(nb_error.TypingError):
        _guarded_size(None)


@nb.njit
def _same_dtype(x, y):
    nbu.require_same_dtype(x, y)
    return x.shape[0] + y.shape[0]


def test_same_dtype_guard_in_both_scopes() -> None:
    nbu.require_same_dtype(np.zeros(2), np.zeros(5))
    with pytest.raises(ValueError):
        nbu.require_same_dtype(np.zeros(2), np.zeros(2, dtype=np.int64))

    assert _same_dtype(np.zeros(2, dtype=np.int32), np.zeros(3, dtype=np.int32)) == 5
    with pytest.raises(ValueError):
        _same_dtype(np.zeros(2, dtype=np.int64), np.zeros(2, dtype=np.uint8))
