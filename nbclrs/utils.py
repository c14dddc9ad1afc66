from __future__ import annotations

import os
from typing import Any, Callable

import numba as nb
import numba.core.errors as nb_error
import numpy as np
from numba import types
from numba.extending import overload, register_jitable
from numba.np.numpy_support import as_dtype

_N = types.none


# This only changes once at import time.
# --- Numba Global Fastmath : off by default. The merge sentinel is +inf for float arrays and fastmath's ninf flag lets
# LLVM assume no value is ever infinite, which breaks the sentinel comparison.
_fm = os.environ.get("NB_GLOB_FM", "false")
_fm = False if not _fm or _fm.lower() in "false" else eval(_fm) if any(i in _fm for i in ("[", "{", "(")) else True
# --- Numba Global Error Model : 'numpy'|'python', 'numpy' skips the python style checks (e.g. division by zero).
_erm = os.environ.get("NB_GLOB_EM", "numpy")


"""
## Configurations
s : Sync, every kernel here is single threaded.
c : Cache the compilation for new signatures.
i : Manual/forced Numba-IR level inline. Used for the tiny comparison and swap helpers so they never become calls.

## Decorators
jt - Numba jit using the base defaults and extension characters seen above.
rg - Register Jittable, compiles into the Numba IR when called from jitted code but runs as python from the
interpreter.
ov - Overload decorators, pair a python function with its nopython implementation.

The recursive sort kernels are plain ``jt``, numba can't inline a function into itself. Only leaf helpers get
``i``/``c``.
"""

_dft = dict(fastmath=_fm, error_model=_erm)  # base python arguments.
jit_s = _dft
jit_sc = jit_s | dict(cache=True)
jit_si = jit_s | dict(inline="always")
jit_sci = jit_si | dict(cache=True)

# --- JIT DECORATORS
jt = nb.njit(**jit_s)  # plain jit
jtc = nb.njit(**jit_sc)  # cache
jti = nb.njit(**jit_si)  # inline

# --- REGISTER JITTABLE DECORATORS
_rg = register_jitable
rgi = _rg(**jit_si)  # Inline
rgic = _rg(**jit_sci)  # inline cache


# --- OVERLOADS DECORATORS
def ovs(impl: Callable[..., Any]) -> Callable[..., Any]: return overload(impl, jit_options=jit_s)


def ovsi(impl: Callable[..., Any]) -> Callable[..., Any]: return overload(impl, jit_options=jit_s, inline="always")


def ovsic(impl: Callable[..., Any]) -> Callable[..., Any]: return overload(impl, jit_options=jit_sc, inline="always")


def type_ref(arg: Any) -> type[Any]:
    """Get the data type of an array, otherwise get the type of a value.

    Works in python and numba blocks.

    Useful for gathering type specific information at signature compile time. E.g. the merge sentinel.

    :param arg: Value or array.
    :returns: A dtype/type reference for ``arg``.
    """
    if isinstance(arg, np.ndarray): return arg.dtype.type
    else: return type(arg)


@ovsic(type_ref)
def _type_ref(arg):  # pragma: no cover
    if isinstance(arg, types.Literal):
        typ = arg._literal_type_cache
        return lambda arg: typ
    elif isinstance(arg, types.Array):
        typ = arg.dtype
        return lambda arg: typ
    else:
        typ = arg  # It's already the correct type. it only sees type in this scope not value
        return lambda arg: typ


def prim_info(dt: Any, field: int) -> Any:
    """
    Return type-specific info for NumPy type ``dt``, given integer field selector.

    (kind, field) match cases:

    - ('i' or 'u', 0): min
    - ('i' or 'u', 1): max
    - ('i' or 'u', 4): max, the largest value usable as an upper sentinel
    - ('f', 0): min
    - ('f', 1): max
    - ('f', 2): eps
    - ('f', 4): +inf
    - (any, 3): itemsize (bytes)
    - others: None

    Anything ``np.dtype`` accepts works, so the result of ``type_ref`` can be passed straight in.

    :param dt: A NumPy dtype (or dtype-like).
    :param field: Field selector (see list above).
    :returns: The requested field value, or ``None``.
    """
    if not isinstance(dt, np.dtype): dt = np.dtype(dt)

    match (dt.kind, field):
        # Integer & unsigned integer
        case ("i" | "u", 0):
            return np.iinfo(dt).min
        case ("i" | "u", 1 | 4):
            return np.iinfo(dt).max
        # Floating point
        case ("f", 0):
            return np.finfo(dt).min
        case ("f", 1):
            return np.finfo(dt).max
        case ("f", 2):
            return np.finfo(dt).eps
        case ("f", 4):
            return dt.type(np.inf)
        # Universal: byte size
        case (_, 3):
            return dt.itemsize
        # Fallback
        case _:
            return None


np_tinfo = prim_info


@ovsic(prim_info)
def _prim_info(typ, res):  # pragma: no cover
    """
    Overloads for primitives info. Implementation for numba mode.

    :param typ: type received from a function like type_ref in a nopython block.
    :param res: field selector, see ``prim_info``.
    :returns: The requested field value.
    """
    if isinstance(res, (nb.types.Literal, int)):
        ref = res if isinstance(res, int) else res.literal_value
        # type_ref hands back the class of the dtype, unwrap it before asking numpy.
        tpref = as_dtype(typ.instance_type if isinstance(typ, types.NumberClass) else typ)
        infoval = np_tinfo(tpref, ref)  # where we query
        return lambda typ, res: infoval
    return lambda typ, res: nb.literally(res)  # literal value request makes this compile time but still cacheable.


@rgi
def swap(x: np.ndarray, i: int, j: int) -> None:
    """Array element swap shorthand.

    :param x: 1D array to perform element swap on.
    :param i: First element index.
    :param j: Second element index.
    :returns: None.
    """
    t = x[i]
    x[i] = x[j]
    x[j] = t


"""
Argument guards. The python definitions run in the ``py_func`` layer, the overloads reject bad argument types while
numba is typing the caller, so a compiled call with e.g. ``None`` never reaches the kernel.
"""


def require_array(x: Any) -> None:
    """
    Fail fast unless ``x`` is a 1-D numpy array.

    :param x: Candidate sequence.
    :raises TypeError: ``x`` is not a 1-D ndarray.
    :returns: None.
    """
    if not isinstance(x, np.ndarray) or x.ndim != 1: raise TypeError("expected a 1-D numpy array")


@ovsi(require_array)
def _require_array(x):  # pragma: no cover
    if not isinstance(x, types.Array) or x.ndim != 1:
        raise nb_error.TypingError("expected a 1-D numpy array")
    return lambda x: None


def require_int_array(x: Any) -> None:
    """
    Fail fast unless ``x`` is a 1-D numpy array with an integer dtype.

    Counting sort indexes its count array with the values, index arrays are indexes by definition.

    :param x: Candidate sequence.
    :raises TypeError: ``x`` is not a 1-D integer ndarray.
    :returns: None.
    """
    if not isinstance(x, np.ndarray) or x.ndim != 1 or x.dtype.kind not in "iu":
        raise TypeError("expected a 1-D numpy array of integers")


@ovsi(require_int_array)
def _require_int_array(x):  # pragma: no cover
    if not isinstance(x, types.Array) or x.ndim != 1 or not isinstance(x.dtype, types.Integer):
        raise nb_error.TypingError("expected a 1-D numpy array of integers")
    return lambda x: None


def require_same_dtype(x: np.ndarray, y: np.ndarray) -> None:
    """
    Fail unless both arrays share a dtype. Compiled code would silently truncate on a narrower buffer.

    :raises ValueError: The dtypes differ.
    :returns: None.
    """
    if x.dtype != y.dtype: raise ValueError("arrays must share the same dtype")


@ovsi(require_same_dtype)
def _require_same_dtype(x, y):  # pragma: no cover
    if x.dtype != y.dtype:
        def impl(x, y):
            raise ValueError("arrays must share the same dtype")
        return impl
    return lambda x, y: None
