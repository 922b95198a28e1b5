"""Regrouping and comparison of genotype bit matrices.

A bit matrix is indexed first by variant and then by haplotype. Grouping
packs ``word_bits`` consecutive variants of each haplotype into one integer.
"""

from __future__ import annotations

import sys
from typing import Sequence

from xsqz.wah import VALID_WORD_BITS


def matrix_group_as(matrix: Sequence[Sequence[bool]], word_bits: int = 8) -> list[list[int]]:
    """Pack every ``word_bits`` rows of a bit matrix into rows of integers.

    Row ``i`` of the input sets bit ``i % word_bits`` of row
    ``i // word_bits`` of the result, column by column. The last group is
    padded with zero bits when the row count is not a multiple of
    ``word_bits``.
    """
    if word_bits not in VALID_WORD_BITS:
        raise ValueError(f"word_bits must be one of {VALID_WORD_BITS}, got {word_bits}")
    if not matrix:
        return []
    width = len(matrix[0])
    groups = -(-len(matrix) // word_bits)
    result = [[0] * width for _ in range(groups)]
    for row_index, row in enumerate(matrix):
        if len(row) != width:
            raise ValueError(
                f"row {row_index} has {len(row)} columns, expected {width}"
            )
        target = result[row_index // word_bits]
        shift = row_index % word_bits
        for column, bit in enumerate(row):
            if bit:
                target[column] |= 1 << shift
    return result


def matrices_differ(m1: Sequence[Sequence], m2: Sequence[Sequence]) -> bool:
    """Tell whether two matrices differ in shape or in any value.

    The first difference found is reported on standard error.
    """
    if len(m1) != len(m2):
        print("Different outer size", file=sys.stderr)
        return True
    for i, (row1, row2) in enumerate(zip(m1, m2)):
        if len(row1) != len(row2):
            print(f"Different inner size at {i}", file=sys.stderr)
            return True
        for j, (v1, v2) in enumerate(zip(row1, row2)):
            if v1 != v2:
                print(f"Different value at {i}, {j}", file=sys.stderr)
                return True
    return False