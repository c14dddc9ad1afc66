from __future__ import annotations

import numpy as np

import nbclrs.rng as nbr
import nbclrs.utils as nbu

MArray = np.ndarray | None

"""
Every comparison kernel takes ``(cr, vals, ...)``. ``cr`` is the array being permuted. With ``vals=None`` the values
in ``cr`` are compared directly, with a value array ``cr`` holds indexes and ``vals[idx]`` is compared, ``vals`` is
left alone. Public value sorts pass ``(sr, None)``, argsorts pass ``(idxr, sr)``.
"""


@nbu.jti
def _lessthan(a, b, vals=None):
    return vals[a] < vals[b] if vals is not None else a < b


@nbu.jti
def _greaterthan(a, b, vals=None):
    return vals[a] > vals[b] if vals is not None else a > b


### Insertion sort, CLRS 2.1


@nbu.jt
def impl_insert_sort(cr: np.ndarray, vals: MArray) -> None:
    for j in range(1, cr.shape[0]):
        key = cr[j]
        i = j - 1
        # strict > so equal keys are never shifted past each other
        while i >= 0 and _greaterthan(cr[i], key, vals):
            cr[i + 1] = cr[i]
            i -= 1
        cr[i + 1] = key


@nbu.jt
def insert_sort(sr: np.ndarray) -> None:
    """
    Stable insertion sort, ascending.

    :param sr: Array to sort in-place.
    :returns: None.
    """
    nbu.require_array(sr)
    impl_insert_sort(sr, None)


@nbu.jt
def arg_insert_sort(sr: np.ndarray, idxr: np.ndarray) -> None:
    """
    Insertion based index sort. Ties keep their order in ``idxr``.

    :param sr: Array for sort comparison.
    :param idxr: Array of sr indexes to sort.
    :returns: None.
    """
    nbu.require_array(sr)
    nbu.require_int_array(idxr)
    impl_insert_sort(idxr, sr)


### Merge sort, CLRS 2.3


@nbu.jt
def impl_merge(sr: np.ndarray, ws: np.ndarray, p: int, q: int, r: int, sentinel) -> None:
    n1 = q - p + 1
    n2 = r - q
    # left run in ws[:n1 + 1], right run in ws[n1 + 1:n1 + n2 + 2], each capped by the sentinel
    for i in range(n1): ws[i] = sr[p + i]
    ws[n1] = sentinel
    off = n1 + 1
    for j in range(n2): ws[off + j] = sr[q + 1 + j]
    ws[off + n2] = sentinel

    i = 0
    j = off
    for k in range(p, r + 1):
        if ws[i] <= ws[j]:
            sr[k] = ws[i]
            i += 1
        else:
            sr[k] = ws[j]
            j += 1


@nbu.jt
def impl_merge_kernel(sr: np.ndarray, ws: np.ndarray, p: int, r: int, sentinel) -> None:
    if p < r:
        q = (p + r) // 2
        impl_merge_kernel(sr, ws, p, q, sentinel)
        impl_merge_kernel(sr, ws, q + 1, r, sentinel)
        impl_merge(sr, ws, p, q, r, sentinel)


@nbu.jt
def check_sentinel(sr: np.ndarray, sentinel) -> None:
    for i in range(sr.shape[0]):
        # written as `not <` so NaN is rejected as well
        if not sr[i] < sentinel:
            raise OverflowError("merge_sort sentinel must be greater than every element, use merge_sort_counted")


@nbu.jt
def impl_merge_counted(cr: np.ndarray, vals: MArray, ws: np.ndarray, p: int, q: int, r: int) -> None:
    n1 = q - p + 1
    # Copy left run into workspace so we don't overwrite it
    for i in range(n1): ws[i] = cr[p + i]

    i = 0
    j = q + 1
    k = p
    while i < n1 and j <= r:
        # right only wins when strictly smaller, keeps ties left first
        if _lessthan(cr[j], ws[i], vals):
            cr[k] = cr[j]
            j += 1
        else:
            cr[k] = ws[i]
            i += 1
        k += 1

    # Leftovers, whatever remains of the right run is already in place.
    while i < n1:
        cr[k] = ws[i]
        i += 1
        k += 1


@nbu.jt
def impl_merge_counted_kernel(cr: np.ndarray, vals: MArray, ws: np.ndarray, p: int, r: int) -> None:
    if p < r:
        q = (p + r) // 2
        impl_merge_counted_kernel(cr, vals, ws, p, q)
        impl_merge_counted_kernel(cr, vals, ws, q + 1, r)
        impl_merge_counted(cr, vals, ws, p, q, r)


@nbu.jt
def merge_sort(sr: np.ndarray, sentinel=None, ws: MArray = None) -> None:
    """
    Top-down merge sort with sentinel terminated merges. Stable, ascending.

    The sentinel defaults to ``+inf`` for float arrays and the dtype maximum for integer arrays. Every element has to
    be strictly below it, e.g. an int64 array holding ``np.iinfo(np.int64).max`` has no usable sentinel, sort that with
    ``merge_sort_counted`` instead. NaN is never below a sentinel and is rejected the same way.

    :param sr: Array to sort in-place.
    :param sentinel: Optional upper bound, must fit the dtype of ``sr`` and is cast to it.
    :param ws: Optional workspace, at least ``sr.size + 2`` elements of ``sr``'s dtype.
    :raises OverflowError: The sentinel doesn't fit the dtype, or some element is not below it. ``sr`` is left
        untouched.
    :raises ValueError: The workspace is too small or of another dtype.
    :returns: None.
    """
    nbu.require_array(sr)
    typ = nbu.type_ref(sr)
    if sentinel is None: s = typ(nbu.prim_info(typ, 4))
    else:
        if sentinel > nbu.prim_info(typ, 4) or sentinel < nbu.prim_info(typ, 0):
            raise OverflowError("merge_sort sentinel does not fit the array dtype")
        s = typ(sentinel)
    check_sentinel(sr, s)
    if ws is None: ws = np.empty(sr.size + 2, dtype=sr.dtype)
    nbu.require_same_dtype(sr, ws)
    if ws.shape[0] < sr.shape[0] + 2: raise ValueError("merge_sort workspace needs sr.size + 2 elements")
    impl_merge_kernel(sr, ws, 0, sr.shape[0] - 1, s)


@nbu.jt
def merge_sort_counted(sr: np.ndarray, ws: MArray = None) -> None:
    """
    Top-down merge sort that tracks the remaining left run instead of using sentinels. Stable, ascending.

    Works for any element values, including the dtype maximum and ``+inf``.

    :param sr: Array to sort in-place.
    :param ws: Optional workspace, at least ``(sr.size + 1) // 2`` elements of ``sr``'s dtype.
    :raises ValueError: The workspace is too small or of another dtype.
    :returns: None.
    """
    nbu.require_array(sr)
    if ws is None: ws = np.empty((sr.size + 1) // 2, dtype=sr.dtype)
    nbu.require_same_dtype(sr, ws)
    if ws.shape[0] < (sr.shape[0] + 1) // 2:
        raise ValueError("merge_sort_counted workspace needs (sr.size + 1) // 2 elements")
    impl_merge_counted_kernel(sr, None, ws, 0, sr.shape[0] - 1)


@nbu.jt
def arg_merge_sort(sr: np.ndarray, idxr: np.ndarray, ws: MArray = None) -> None:
    """
    Top-down merge argsort. Stable, ties keep their order in ``idxr``.

    Index buffers have no sentinel index, so this always uses the counted merge.

    :param sr: Array used for sort comparison.
    :param idxr: Index array to sort in-place.
    :param ws: Optional workspace, at least ``(idxr.size + 1) // 2`` elements of ``idxr``'s dtype.
    :raises ValueError: The workspace is too small or of another dtype.
    :returns: None.
    """
    nbu.require_array(sr)
    nbu.require_int_array(idxr)
    if ws is None: ws = np.empty((idxr.size + 1) // 2, dtype=idxr.dtype)
    nbu.require_same_dtype(idxr, ws)
    if ws.shape[0] < (idxr.shape[0] + 1) // 2:
        raise ValueError("arg_merge_sort workspace needs (idxr.size + 1) // 2 elements")
    impl_merge_counted_kernel(idxr, sr, ws, 0, idxr.shape[0] - 1)


### Heap sort, CLRS 6
# 0-based heap: parent (i - 1) // 2, children 2i + 1 and 2i + 2.


@nbu.jt
def max_heapify(cr: np.ndarray, vals: MArray, i: int, size: int) -> None:
    """
    Sift ``i`` down until the max-heap property holds again, both child subtrees must already be max-heaps.

    Only the first ``size`` slots belong to the heap.
    """
    left = 2 * i + 1
    right = left + 1
    largest = i
    if left < size and _greaterthan(cr[left], cr[i], vals): largest = left
    if right < size and _greaterthan(cr[right], cr[largest], vals): largest = right
    if largest != i:
        nbu.swap(cr, i, largest)
        max_heapify(cr, vals, largest, size)


@nbu.jt
def build_max_heap(cr: np.ndarray, vals: MArray) -> int:
    """Heapify every internal node, deepest first. Returns the heap size."""
    size = cr.shape[0]
    for i in range(size // 2 - 1, -1, -1): max_heapify(cr, vals, i, size)
    return size


@nbu.jt
def impl_heap_sort(cr: np.ndarray, vals: MArray) -> None:
    size = build_max_heap(cr, vals)
    # the max moves to the end of the shrinking heap, sorted suffix grows from the right
    for i in range(cr.shape[0] - 1, 0, -1):
        nbu.swap(cr, 0, i)
        size -= 1
        max_heapify(cr, vals, 0, size)


@nbu.jt
def heap_sort(sr: np.ndarray) -> None:
    """
    In-place heap sort, ascending. Not stable.

    :param sr: Array to sort in-place.
    :returns: None.
    """
    nbu.require_array(sr)
    impl_heap_sort(sr, None)


@nbu.jt
def arg_heap_sort(sr: np.ndarray, idxr: np.ndarray) -> None:
    """
    Heap based index sort. Not stable.

    :param sr: Array for sort comparison.
    :param idxr: Array of sr indexes to sort.
    :returns: None.
    """
    nbu.require_array(sr)
    nbu.require_int_array(idxr)
    impl_heap_sort(idxr, sr)


### Quicksort, CLRS 7


@nbu.jt
def partition(cr: np.ndarray, vals: MArray, p: int, r: int) -> int:
    """
    Lomuto partition of ``[p, r]`` around the last element.

    Afterwards everything left of the returned index is <= the pivot and everything right of it is greater.

    :returns: Final index of the pivot.
    """
    x = cr[r]
    i = p - 1
    for j in range(p, r):
        if not _greaterthan(cr[j], x, vals):
            i += 1
            nbu.swap(cr, i, j)
    nbu.swap(cr, i + 1, r)
    return i + 1


@nbu.jt
def randomized_partition(cr: np.ndarray, vals: MArray, p: int, r: int) -> int:
    i = nbr.uniform_index(p, r)
    nbu.swap(cr, r, i)
    return partition(cr, vals, p, r)


@nbu.jt
def impl_quick_kernel(cr: np.ndarray, vals: MArray, p: int, r: int) -> None:
    # recursion depth is O(log n) expected, O(n) if the pivot draws are unlucky.
    if p < r:
        q = randomized_partition(cr, vals, p, r)
        impl_quick_kernel(cr, vals, p, q - 1)
        impl_quick_kernel(cr, vals, q + 1, r)


@nbu.jt
def quick_sort(sr: np.ndarray) -> None:
    """
    Randomized quicksort, ascending. Not stable.

    Pivots come from ``random``, call ``nbclrs.rng.set_seed`` for reproducible runs.

    :param sr: Array to sort in-place.
    :returns: None.
    """
    nbu.require_array(sr)
    impl_quick_kernel(sr, None, 0, sr.shape[0] - 1)


@nbu.jt
def arg_quick_sort(sr: np.ndarray, idxr: np.ndarray) -> None:
    """
    Randomized quicksort of an index array. Not stable.

    :param sr: Array for sort comparison.
    :param idxr: Array of sr indexes to sort.
    :returns: None.
    """
    nbu.require_array(sr)
    nbu.require_int_array(idxr)
    impl_quick_kernel(idxr, sr, 0, idxr.shape[0] - 1)


### Counting sort, CLRS 8.2


@nbu.jt
def check_counting_args(a: np.ndarray, b: np.ndarray, k: int) -> None:
    if k < 0: raise ValueError("counting_sort bound k must be non-negative")
    if b.shape[0] != a.shape[0]: raise ValueError("counting_sort output must have the same length as the input")
    for j in range(a.shape[0]):
        if a[j] < 0 or a[j] > k: raise ValueError("counting_sort input value outside [0, k]")


@nbu.jt
def impl_counting_sort(a: np.ndarray, b: np.ndarray, k: int, argsort: bool) -> None:
    c = np.zeros(k + 1, dtype=np.int64)
    for j in range(a.shape[0]): c[a[j]] += 1
    # c[v] becomes the number of elements <= v
    for i in range(1, k + 1): c[i] += c[i - 1]
    # walking backwards keeps equal values in input order
    for j in range(a.shape[0] - 1, -1, -1):
        v = a[j]
        c[v] -= 1
        if argsort: b[c[v]] = j
        else: b[c[v]] = v


@nbu.jt
def counting_sort(a: np.ndarray, b: np.ndarray, k: int) -> None:
    """
    Stable counting sort of ``a`` into ``b``.

    ``a`` is only read. All arguments are validated before ``b`` is written to.

    :param a: Integer array with every value in ``[0, k]``.
    :param b: Output array, same length and dtype as ``a``.
    :param k: Inclusive upper bound of the values in ``a``.
    :raises ValueError: ``k < 0``, ``b`` has the wrong length or dtype, or a value of ``a`` is outside ``[0, k]``.
    :returns: None.
    """
    nbu.require_int_array(a)
    nbu.require_array(b)
    nbu.require_same_dtype(a, b)
    check_counting_args(a, b, k)
    impl_counting_sort(a, b, k, False)


@nbu.jt
def arg_counting_sort(a: np.ndarray, idxb: np.ndarray, k: int) -> None:
    """
    Stable counting argsort, fills ``idxb`` with the positions of ``a`` in sorted order.

    :param a: Integer array with every value in ``[0, k]``.
    :param idxb: Integer output array, same length as ``a``, its dtype has to hold ``a.size - 1``.
    :param k: Inclusive upper bound of the values in ``a``.
    :raises ValueError: ``k < 0``, ``idxb`` has the wrong length or is too narrow for the positions, or a value of
        ``a`` is outside ``[0, k]``.
    :returns: None.
    """
    nbu.require_int_array(a)
    nbu.require_int_array(idxb)
    if a.shape[0] - 1 > nbu.prim_info(nbu.type_ref(idxb), 1):
        raise ValueError("arg_counting_sort index dtype is too narrow for the input length")
    check_counting_args(a, idxb, k)
    impl_counting_sort(a, idxb, k, True)
