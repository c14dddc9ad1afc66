from __future__ import annotations

import importlib
import os
import pkgutil
from collections.abc import Callable, Iterator
from typing import Any

from numba.core.registry import CPUDispatcher

import nbclrs

_LAYER_RAW = (os.getenv("NUMBA_TEST_LAYER") or "all").strip().lower()
if _LAYER_RAW in {"", "all"}:
    NUMBA_TEST_LAYER = "all"
elif _LAYER_RAW in {"python", "py"}:
    NUMBA_TEST_LAYER = "py"
elif _LAYER_RAW in {"jit", "numba"}:
    NUMBA_TEST_LAYER = "jit"
else:
    NUMBA_TEST_LAYER = "all"

_CACHE_RAW = (os.getenv("NUMBA_TEST_CACHE") or "false").strip().lower()
NUMBA_TEST_CACHE = _CACHE_RAW == "true"

RUN_PY = NUMBA_TEST_LAYER in {"all", "py"}
RUN_JIT = NUMBA_TEST_LAYER in {"all", "jit"}


def iter_function_layers(func: Callable[..., Any]) -> Iterator[tuple[str, Callable[..., Any]]]:
    """Yield active callable layers for a function under NUMBA_TEST_LAYER.

    The python layer is the dispatcher's ``py_func``. Errors are not retried on the compiled layer, every sort raises
    the same way in both.
    """
    if hasattr(func, "py_func"):
        if RUN_PY:
            yield "py", func.py_func
        if RUN_JIT:
            yield "jit", func
        return

    # Register-jitable and normal python callables run once.
    if RUN_PY or not RUN_JIT:
        yield "py", func
    elif RUN_JIT:
        yield "jit", func


def _iter_nbclrs_modules() -> Iterator[Any]:
    """Iterate imported nbclrs modules for dispatcher cache operations."""
    yield nbclrs
    for mod_info in pkgutil.walk_packages(nbclrs.__path__, prefix=f"{nbclrs.__name__}."):
        yield importlib.import_module(mod_info.name)


def reset_nbclrs_numba_cache() -> int:
    """Reset numba dispatcher in-memory caches for nbclrs modules."""
    count = 0
    for module in _iter_nbclrs_modules():
        for obj in vars(module).values():
            if isinstance(obj, CPUDispatcher):
                clear = getattr(obj, "_clear", None)
                if callable(clear):
                    clear()
                    count += 1
    return count
