"""Dense and sparse matrix helpers: pruning, compression formats and row ordering.

Matrices are flat row-major sequences of ``rows * cols`` values.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from .utility import GenerationType

__all__ = [
    "generate_pruned_matrix",
    "generate_dense_matrix",
    "bitmap_from_dense",
    "sparse_from_dense_no_bitmap",
    "sparse_from_dense",
    "minor_ids_from_dense",
    "major_pointer_from_dense",
    "format_dense_matrix",
    "format_bitmap",
    "format_sparse_matrix",
    "organize_matrix",
    "organize_matrix_back",
    "calculate_ordering",
]

_MIN_CLUSTER_SIZE = 3


def _check_shape(matrix: Sequence, rows: int, cols: int) -> None:
    if rows < 0 or cols < 0:
        raise ValueError(f"invalid shape {rows}x{cols}")
    if len(matrix) != rows * cols:
        raise ValueError(
            f"matrix holds {len(matrix)} values, expected {rows * cols} for {rows}x{cols}"
        )


def _lines(rows: int, cols: int, gen_type: GenerationType):
    """Yield, per major line, the flat indices of that line in traversal order."""
    if gen_type is GenerationType.GEN_BY_ROWS:
        for i in range(rows):
            yield [i * cols + j for j in range(cols)]
    else:
        for j in range(cols):
            yield [i * cols + j for i in range(rows)]


def _minor_positions(rows: int, cols: int, gen_type: GenerationType):
    """Yield, per major line, (flat index, minor coordinate) pairs."""
    if gen_type is GenerationType.GEN_BY_ROWS:
        for i in range(rows):
            yield [(i * cols + j, j) for j in range(cols)]
    else:
        for j in range(cols):
            yield [(i * cols + j, i) for i in range(rows)]


def _fmt(value) -> str:
    return f"{value:g}"


def generate_pruned_matrix(matrix: Sequence[float], pr_ratio: float) -> list[float]:
    """Zero every value whose magnitude is below the ``pr_ratio`` quantile of magnitudes."""
    size = len(matrix)
    n = int(size * pr_ratio)
    if not 0 <= n < size:
        raise ValueError(f"pruning ratio {pr_ratio} out of range for {size} values")
    pivot = sorted(abs(v) for v in matrix)[n]
    return [0.0 if abs(v) < pivot else v for v in matrix]


def generate_dense_matrix(
    rows: int, cols: int, sparsity: int, rng: random.Random | None = None
) -> list[float]:
    """Generate a random matrix where roughly ``sparsity`` percent of values are zero.

    Non-zero values are integers from 1 to 10 stored as floats.
    """
    if rows < 0 or cols < 0:
        raise ValueError(f"invalid shape {rows}x{cols}")
    rng = rng if rng is not None else random.Random()
    matrix = []
    for _ in range(rows * cols):
        if rng.randrange(100) <= sparsity:
            matrix.append(0.0)
        else:
            matrix.append(float(rng.randrange(10) + 1))
    return matrix


def bitmap_from_dense(
    matrix: Sequence[float], rows: int, cols: int, gen_type: GenerationType
) -> list[int]:
    """Return a 0/1 bitmap of the non-zeros.

    Every major line (row or column, by ``gen_type``) is padded with ones in
    its first positions until it has at least three set bits.
    """
    _check_shape(matrix, rows, cols)
    bitmap = [1 if v != 0.0 else 0 for v in matrix]
    for line in _lines(rows, cols, gen_type):
        non_zeros = sum(bitmap[idx] for idx in line)
        for idx in line[:_MIN_CLUSTER_SIZE]:
            if non_zeros >= _MIN_CLUSTER_SIZE:
                break
            if bitmap[idx] == 0:
                bitmap[idx] = 1
                non_zeros += 1
    return bitmap


def sparse_from_dense_no_bitmap(
    matrix: Sequence[float], rows: int, cols: int, gen_type: GenerationType
) -> list[float]:
    """Return the non-zero values in traversal order; an empty line contributes one 0.0."""
    _check_shape(matrix, rows, cols)
    elements: list[float] = []
    for line in _lines(rows, cols, gen_type):
        values = [matrix[idx] for idx in line if matrix[idx] != 0.0]
        elements.extend(values if values else [0.0])
    return elements


def sparse_from_dense(
    matrix: Sequence[float],
    bitmap: Sequence[int],
    rows: int,
    cols: int,
    gen_type: GenerationType,
) -> list[float]:
    """Return the values whose bitmap bit is set, in traversal order."""
    _check_shape(matrix, rows, cols)
    _check_shape(bitmap, rows, cols)
    return [
        matrix[idx]
        for line in _lines(rows, cols, gen_type)
        for idx in line
        if bitmap[idx]
    ]


def minor_ids_from_dense(
    matrix: Sequence[float], rows: int, cols: int, gen_type: GenerationType
) -> list[int]:
    """Return the minor coordinate of every non-zero (column ids by rows, row ids by columns).

    An empty major line contributes a single id 0, matching
    :func:`sparse_from_dense_no_bitmap`.
    """
    _check_shape(matrix, rows, cols)
    ids: list[int] = []
    for line in _minor_positions(rows, cols, gen_type):
        found = [minor for idx, minor in line if matrix[idx] != 0.0]
        ids.extend(found if found else [0])
    return ids


def major_pointer_from_dense(
    matrix: Sequence[float], rows: int, cols: int, gen_type: GenerationType
) -> list[int]:
    """Return the compressed major pointers; an empty line counts as one stored element."""
    _check_shape(matrix, rows, cols)
    pointers: list[int] = []
    stored = 0
    for line in _lines(rows, cols, gen_type):
        pointers.append(stored)
        non_zeros = sum(1 for idx in line if matrix[idx] != 0.0)
        stored += non_zeros if non_zeros else 1
    pointers.append(stored)
    return pointers


def format_dense_matrix(matrix: Sequence[float], rows: int, cols: int) -> str:
    """Render a matrix one row per line, each value followed by a space, then a blank line."""
    _check_shape(matrix, rows, cols)
    lines = [
        "".join(f"{_fmt(matrix[i * cols + j])} " for j in range(cols)) + "\n"
        for i in range(rows)
    ]
    return "".join(lines) + "\n"


def format_bitmap(bitmap: Sequence[int], rows: int, cols: int) -> str:
    """Render a bitmap one row per line, then a blank line."""
    _check_shape(bitmap, rows, cols)
    lines = [
        "".join(f"{bitmap[i * cols + j]} " for j in range(cols)) + "\n"
        for i in range(rows)
    ]
    return "".join(lines) + "\n"


def format_sparse_matrix(
    sparse: Sequence[float], bitmap: Sequence[int], rows: int, cols: int
) -> str:
    """Render the stored values of a bitmap-compressed matrix on one line."""
    _check_shape(bitmap, rows, cols)
    n_elements = sum(1 for bit in bitmap if bit)
    if len(sparse) < n_elements:
        raise ValueError(
            f"bitmap has {n_elements} set bits but only {len(sparse)} values are given"
        )
    return "".join(f"{_fmt(v)} " for v in sparse[:n_elements]) + "\n"


def _check_table(pointer_table: Sequence[int], size: int) -> None:
    if len(pointer_table) != size:
        raise ValueError(f"pointer table has {len(pointer_table)} entries, expected {size}")
    if any(not 0 <= p < size for p in pointer_table):
        raise ValueError("pointer table entry out of range")


def organize_matrix(
    matrix: Sequence[float],
    rows: int,
    cols: int,
    pointer_table: Sequence[int],
    gen_type: GenerationType,
) -> list[float]:
    """Return the matrix with line ``i`` taken from line ``pointer_table[i]``."""
    _check_shape(matrix, rows, cols)
    result = list(matrix)
    if gen_type is GenerationType.GEN_BY_ROWS:
        _check_table(pointer_table, rows)
        for i, src in enumerate(pointer_table):
            result[i * cols:(i + 1) * cols] = matrix[src * cols:(src + 1) * cols]
    else:
        _check_table(pointer_table, cols)
        for j, src in enumerate(pointer_table):
            for i in range(rows):
                result[i * cols + j] = matrix[i * cols + src]
    return result


def organize_matrix_back(
    matrix: Sequence[float],
    rows: int,
    cols: int,
    pointer_table: Sequence[int],
    gen_type: GenerationType,
) -> list[float]:
    """Undo :func:`organize_matrix`: line ``i`` goes back to line ``pointer_table[i]``."""
    _check_shape(matrix, rows, cols)
    result = list(matrix)
    if gen_type is GenerationType.GEN_BY_ROWS:
        _check_table(pointer_table, rows)
        for i, dst in enumerate(pointer_table):
            result[dst * cols:(dst + 1) * cols] = matrix[i * cols:(i + 1) * cols]
    else:
        _check_table(pointer_table, cols)
        for j, dst in enumerate(pointer_table):
            for i in range(rows):
                result[i * cols + dst] = matrix[i * cols + j]
    return result


def calculate_ordering(
    matrix: Sequence[float],
    rows: int,
    cols: int,
    gen_type: GenerationType,
    num_ms: int,
) -> list[int]:
    """Order the major lines so that they pack greedily into ``num_ms`` multipliers.

    Each line's cluster size is its non-zero count, at least three. Lines
    that do not fit at all come first; the rest are packed by repeatedly
    choosing the largest line that still fits, starting a new batch when
    none does.
    """
    _check_shape(matrix, rows, cols)
    sizes = [
        max(sum(1 for idx in line if matrix[idx] != 0.0), _MIN_CLUSTER_SIZE)
        for line in _lines(rows, cols, gen_type)
    ]
    table = list(range(len(sizes)))
    dim = len(sizes)

    def swap(a: int, b: int) -> None:
        sizes[a], sizes[b] = sizes[b], sizes[a]
        table[a], table[b] = table[b], table[a]

    selected = 0
    for i in range(dim):
        if sizes[i] > num_ms:
            swap(i, selected)
            selected += 1

    used = 0
    while selected < dim:
        fitting = [i for i in range(selected, dim) if sizes[i] + used <= num_ms]
        if fitting:
            greater = fitting[0]
            for i in fitting[1:]:
                if sizes[i] > sizes[greater]:
                    greater = i
            used += sizes[greater]
            swap(greater, selected)
            selected += 1
        else:
            used = 0
    return table