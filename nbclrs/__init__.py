from __future__ import annotations

from . import rng, sort, utils
from .sort import (
    arg_counting_sort,
    arg_heap_sort,
    arg_insert_sort,
    arg_merge_sort,
    arg_quick_sort,
    counting_sort,
    heap_sort,
    insert_sort,
    merge_sort,
    merge_sort_counted,
    quick_sort,
)

__all__ = [
    "rng",
    "sort",
    "utils",
    "arg_counting_sort",
    "arg_heap_sort",
    "arg_insert_sort",
    "arg_merge_sort",
    "arg_quick_sort",
    "counting_sort",
    "heap_sort",
    "insert_sort",
    "merge_sort",
    "merge_sort_counted",
    "quick_sort",
]
