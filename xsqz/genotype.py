"""Helpers for the integer genotype encoding used in BCF records.

A genotype value stores ``(allele + 1) << 1`` with the lowest bit set when
the allele is phased with the previous one. The value ``0`` is a missing
allele and decodes to allele ``-1``.
"""

GT_MISSING = 0


def gt_allele(value: int) -> int:
    """Return the allele index held by a genotype value (``-1`` if missing)."""
    return (value >> 1) - 1


def gt_phased(allele: int) -> int:
    """Return the phased genotype value for an allele index."""
    return ((allele + 1) << 1) | 1


def gt_unphased(allele: int) -> int:
    """Return the unphased genotype value for an allele index."""
    return (allele + 1) << 1


def gt_is_phased(value: int) -> bool:
    """Tell whether a genotype value carries the phased flag."""
    return bool(value & 1)